"""
iReporter - Core Utilities
Central configuration, errors, constants and geographic helpers.
"""

from ireporter.core.config import settings, get_settings
from ireporter.core.constants import (
    LOCKED_STATUSES,
    MEDIA_FIELD_NAME,
    STATUS_LABELS,
    VALIDATION_MESSAGES,
)
from ireporter.core.errors import (
    ErrorCode,
    IReporterError,
    ValidationError,
    EmptyIdentifier,
    CannotEdit,
    CannotDelete,
    TooManyMediaFiles,
    FileTooLarge,
    UnsupportedType,
)
from ireporter.core.geo import Location, is_valid_coordinate

__all__ = [
    "settings",
    "get_settings",
    "LOCKED_STATUSES",
    "MEDIA_FIELD_NAME",
    "STATUS_LABELS",
    "VALIDATION_MESSAGES",
    "ErrorCode",
    "IReporterError",
    "ValidationError",
    "EmptyIdentifier",
    "CannotEdit",
    "CannotDelete",
    "TooManyMediaFiles",
    "FileTooLarge",
    "UnsupportedType",
    "Location",
    "is_valid_coordinate",
]
