from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ValidationErrorType(str, Enum):
    CONNECTION_ERROR = "CONNECTION_ERROR"
    CONTENT_ERROR = "CONTENT_ERROR"
    JSON_SCHEMA_ERROR = "JSON_SCHEMA_ERROR"


class ValidationMessage(BaseModel):
    """A single problem found while validating a Beacon.

    ``location`` is where the problem was found (an endpoint URL, a schema
    location or a pointer into a metadata document) and ``path`` is the
    JSON Pointer of the offending value inside the validated document.
    """

    model_config = ConfigDict(frozen=True)

    type: ValidationErrorType
    code: int | None = None
    location: str | None = None
    path: str | None = None
    message: str

    def relocate(self, location: str) -> ValidationMessage:
        """Return a copy of this message reported at *location*."""
        return self.model_copy(update={"location": location})

    def __str__(self) -> str:
        code = f" ({self.code}) " if self.code is not None else " "
        return f"{self.message}{self.path or ''}{code}{self.location or ''}"
