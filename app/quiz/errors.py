class QuizSessionError(Exception):
    pass


class EmptyQuizError(QuizSessionError):
    pass


class InvalidAnswerLabelError(QuizSessionError):
    pass


class QuizNotSubmittedError(QuizSessionError):
    pass


class QuizSessionNotFoundError(QuizSessionError):
    pass
