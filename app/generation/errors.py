class QuizGenerationError(Exception):
    code = "E_GENERATION_FAILED"


class UploadValidationError(QuizGenerationError):
    code = "E_INVALID_UPLOAD"


class NoFilesProvidedError(UploadValidationError):
    code = "E_NO_FILES"


class UnsupportedFileTypeError(UploadValidationError):
    code = "E_UNSUPPORTED_FILE_TYPE"


class InvalidFileDataError(UploadValidationError):
    code = "E_INVALID_FILE_DATA"


class FileTooLargeError(UploadValidationError):
    code = "E_FILE_TOO_LARGE"


class ModelNotConfiguredError(QuizGenerationError):
    code = "E_MODEL_NOT_CONFIGURED"


class ModelCallError(QuizGenerationError):
    code = "E_GENERATION_FAILED"


class InvalidModelOutputError(QuizGenerationError):
    code = "E_INVALID_MODEL_OUTPUT"


class IncompleteQuizError(QuizGenerationError):
    code = "E_INCOMPLETE_QUIZ"


class GenerationTransportError(QuizGenerationError):
    code = "E_TRANSPORT"


def _error_classes() -> dict[str, type[QuizGenerationError]]:
    classes: dict[str, type[QuizGenerationError]] = {}
    pending: list[type[QuizGenerationError]] = [QuizGenerationError]
    while pending:
        error_cls = pending.pop()
        classes[error_cls.code] = error_cls
        pending.extend(error_cls.__subclasses__())
    return classes


def error_from_code(code: str | None, message: str) -> QuizGenerationError:
    error_cls = _error_classes().get(code or "", QuizGenerationError)
    return error_cls(message)
