from __future__ import annotations

import base64
import binascii
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from app.generation.errors import (
    FileTooLargeError,
    InvalidFileDataError,
    NoFilesProvidedError,
    UnsupportedFileTypeError,
)

PDF_MIME_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF-"

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w.+-]+=[\w.+-]+)*;base64,",
    re.IGNORECASE,
)


class FilePayload(Protocol):
    name: str
    mime_type: str | None
    data: str


@dataclass(slots=True, frozen=True)
class PdfUpload:
    name: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def mime_type(self) -> str:
        return PDF_MIME_TYPE


def split_data_url(data: str) -> tuple[str | None, str]:
    match = _DATA_URL_RE.match(data)
    if match is None:
        return None, data
    mime = match.group("mime")
    return (mime.lower() if mime else None), data[match.end() :]


def _estimated_decoded_size(encoded: str) -> int:
    return (len(encoded) * 3) // 4


def _resolve_mime_type(*, declared: str | None, embedded: str | None) -> str | None:
    for candidate in (declared, embedded):
        if candidate and candidate.strip():
            return candidate.strip().lower()
    return None


def decode_pdf_upload(
    *,
    name: str,
    mime_type: str | None,
    data: str,
    max_bytes: int,
) -> PdfUpload:
    embedded_mime, encoded = split_data_url(data.strip())
    resolved_mime = _resolve_mime_type(declared=mime_type, embedded=embedded_mime)
    if resolved_mime is not None and resolved_mime != PDF_MIME_TYPE:
        raise UnsupportedFileTypeError(f"only PDF files are accepted, got {resolved_mime}")

    if _estimated_decoded_size(encoded) > max_bytes + 2:
        raise FileTooLargeError(f"file exceeds the {max_bytes} byte limit")

    try:
        content = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidFileDataError("file data is not valid base64") from exc

    if not content:
        raise InvalidFileDataError("file is empty")
    if len(content) > max_bytes:
        raise FileTooLargeError(f"file exceeds the {max_bytes} byte limit")
    if resolved_mime is None and not content.startswith(PDF_MAGIC):
        raise UnsupportedFileTypeError("only PDF files are accepted")

    return PdfUpload(name=name, content=content)


def select_pdf_upload(files: Sequence[FilePayload] | None, *, max_bytes: int) -> PdfUpload:
    if not files:
        raise NoFilesProvidedError("no files provided")

    first = files[0]
    return decode_pdf_upload(
        name=first.name,
        mime_type=first.mime_type,
        data=first.data,
        max_bytes=max_bytes,
    )
