"""Reading workout-sheet files for extraction."""

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import ValidationFailure
from ..core.importer import validate_upload

# mimetypes does not know .webp on every platform
mimetypes.add_type("image/webp", ".webp")


@dataclass(frozen=True)
class UploadedDocument:
    """A validated document ready to send to the extractor."""

    filename: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def as_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def guess_mime_type(path: str | Path) -> str | None:
    mime, _ = mimetypes.guess_type(str(path))
    return mime


def read_document(path: str | Path) -> UploadedDocument:
    """
    Read and validate a workout sheet.

    The type and size are checked before the file content is read.

    Raises:
        ValidationFailure: If the file is missing, unsupported, empty or
            larger than 20 MB
    """
    path = Path(path)
    if not path.is_file():
        raise ValidationFailure(f"File not found: {path}")

    mime = guess_mime_type(path)
    validate_upload(path.name, path.stat().st_size, mime)
    return UploadedDocument(filename=path.name, mime_type=mime, data=path.read_bytes())  # type: ignore[arg-type]
