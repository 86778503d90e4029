"""
iReporter - Constants and Reference Data
Static values used throughout the client core.
"""

from typing import Dict, Tuple

# =============================================================================
# MAP
# =============================================================================

# Map center used when a report has no location yet (lat, lng)
DEFAULT_MAP_CENTER: Tuple[float, float] = (0.3075, 32.5830)

# =============================================================================
# REPORT STATUS
# =============================================================================

STATUS_LABELS: Dict[str, str] = {
    "draft": "Draft",
    "under-investigation": "Under Investigation",
    "rejected": "Rejected",
    "resolved": "Resolved",
}

# Statuses after which a report's content can no longer be changed
LOCKED_STATUSES: Tuple[str, ...] = ("under-investigation", "rejected", "resolved")

# =============================================================================
# REPORT FIELDS
# =============================================================================

TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 200
DESCRIPTION_MIN_LENGTH = 20
DESCRIPTION_MAX_LENGTH = 2000

# Backend multipart field carrying every media attachment, whatever its kind
MEDIA_FIELD_NAME = "images"

# =============================================================================
# MESSAGES
# =============================================================================

VALIDATION_MESSAGES: Dict[str, str] = {
    "TITLE_MIN": f"Title must be at least {TITLE_MIN_LENGTH} characters",
    "TITLE_MAX": f"Title must be less than {TITLE_MAX_LENGTH} characters",
    "DESCRIPTION_MIN": f"Description must be at least {DESCRIPTION_MIN_LENGTH} characters",
    "DESCRIPTION_MAX": f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters",
    "FILE_TOO_LARGE": "Files must be less than {limit_mb}MB",
    "UNSUPPORTED_TYPE": "Only image, video and audio files are supported",
    "TOO_MANY_MEDIA_FILES": "Maximum {limit} media files allowed",
    "CANNOT_EDIT": "Cannot edit reports that are under investigation, rejected, or resolved",
    "CANNOT_DELETE": "Cannot delete reports that are under investigation, rejected, or resolved",
    "EMPTY_ID": "{what} is required",
    "INVALID_STATUS": "Unknown report status: {status}",
    "NOTHING_TO_UPDATE": "No changes to save",
}

TIMEOUT_MESSAGE = "Request timeout - please try again"
