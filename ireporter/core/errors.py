"""
iReporter - Error Taxonomy

Client-side validation errors are raised inside an operation and converted
to a failed Envelope at the operation boundary; they never reach the
transport. Transport-level failures are never raised: they are reported as
Envelope codes (see ErrorCode).
"""

from enum import Enum
from typing import Optional

from ireporter.core.constants import VALIDATION_MESSAGES


class ErrorCode(str, Enum):
    """Machine-readable failure classes carried on envelopes."""
    # Client-side validation
    EMPTY_IDENTIFIER = "EMPTY_IDENTIFIER"
    CANNOT_EDIT = "CANNOT_EDIT"
    CANNOT_DELETE = "CANNOT_DELETE"
    TOO_MANY_MEDIA_FILES = "TOO_MANY_MEDIA_FILES"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_INPUT = "INVALID_INPUT"
    NOTHING_TO_UPDATE = "NOTHING_TO_UPDATE"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"

    # Transport / server
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    SERVER_ERROR = "SERVER_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


class IReporterError(Exception):
    """Base class for all iReporter client errors."""

    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(IReporterError):
    """Client-side rejection; no network call was attempted."""


class InvalidInput(ValidationError):
    code = ErrorCode.INVALID_INPUT


class EmptyIdentifier(ValidationError):
    code = ErrorCode.EMPTY_IDENTIFIER

    def __init__(self, what: str = "Report ID"):
        super().__init__(VALIDATION_MESSAGES["EMPTY_ID"].format(what=what))


class CannotEdit(ValidationError):
    code = ErrorCode.CANNOT_EDIT

    def __init__(self):
        super().__init__(VALIDATION_MESSAGES["CANNOT_EDIT"])


class CannotDelete(ValidationError):
    code = ErrorCode.CANNOT_DELETE

    def __init__(self):
        super().__init__(VALIDATION_MESSAGES["CANNOT_DELETE"])


class InvalidStatus(ValidationError):
    code = ErrorCode.INVALID_STATUS

    def __init__(self, status: object):
        super().__init__(VALIDATION_MESSAGES["INVALID_STATUS"].format(status=status))


class NothingToUpdate(ValidationError):
    code = ErrorCode.NOTHING_TO_UPDATE

    def __init__(self):
        super().__init__(VALIDATION_MESSAGES["NOTHING_TO_UPDATE"])


class TooManyMediaFiles(ValidationError):
    code = ErrorCode.TOO_MANY_MEDIA_FILES

    def __init__(self, limit: int):
        super().__init__(VALIDATION_MESSAGES["TOO_MANY_MEDIA_FILES"].format(limit=limit))
        self.limit = limit


class MediaValidationError(ValidationError):
    """A single media file was rejected at ingestion."""


class FileTooLarge(MediaValidationError):
    code = ErrorCode.FILE_TOO_LARGE

    def __init__(self, filename: str, size: int, limit: int):
        limit_mb = limit // (1024 * 1024) or 1
        super().__init__(
            f"{filename}: " + VALIDATION_MESSAGES["FILE_TOO_LARGE"].format(limit_mb=limit_mb)
        )
        self.size = size
        self.limit = limit


class UnsupportedType(MediaValidationError):
    code = ErrorCode.UNSUPPORTED_TYPE

    def __init__(self, filename: str, content_type: str):
        super().__init__(
            f"{filename} ({content_type or 'unknown type'}): "
            + VALIDATION_MESSAGES["UNSUPPORTED_TYPE"]
        )
        self.content_type = content_type
