"""
Report data model
Corruption complaints (red flags) and intervention requests as returned by
the iReporter API.
"""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from ireporter.core.constants import LOCKED_STATUSES, STATUS_LABELS
from ireporter.core.errors import InvalidStatus
from ireporter.core.geo import Location


class ReportType(str, Enum):
    """Kind of report."""
    RED_FLAG = "red-flag"
    INTERVENTION = "intervention"


class ReportStatus(str, Enum):
    """Lifecycle status of a report."""
    DRAFT = "draft"
    UNDER_INVESTIGATION = "under-investigation"
    REJECTED = "rejected"
    RESOLVED = "resolved"

    @property
    def is_locked(self) -> bool:
        """Content can no longer be edited or deleted."""
        return self.value in LOCKED_STATUSES

    @property
    def label(self) -> str:
        return STATUS_LABELS[self.value]

    @classmethod
    def parse(cls, value: Any) -> "ReportStatus":
        """
        Parse a status from user input or the API.

        Older backends use "pending" for new reports and underscores instead
        of hyphens; both are accepted.

        Raises:
            InvalidStatus: Unknown status value
        """
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower().replace("_", "-")
        if normalized == "pending":
            return cls.DRAFT
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidStatus(value) from None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an API timestamp into an aware UTC datetime."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip().replace("Z", "+00:00")
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Report:
    """
    A citizen report.

    Once the status leaves draft, only a status change may modify it.
    """
    id: str
    user_id: str
    type: ReportType
    title: str
    description: str
    location: Optional[Location] = None
    status: ReportStatus = ReportStatus.DRAFT
    images: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_editable(self) -> bool:
        return not self.status.is_locked

    @property
    def is_deletable(self) -> bool:
        return not self.status.is_locked

    def touched(self) -> "Report":
        """Copy with updated_at set to now."""
        return replace(self, updated_at=utcnow())

    @classmethod
    def from_api(cls, data: Any) -> "Report":
        """
        Build a Report from an API payload.

        Accepts camelCase and snake_case keys. Location and images may be
        JSON-encoded strings, as stored by the backend.

        Raises:
            TypeError, KeyError, ValueError: Payload is not a usable report
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected report object, got {type(data).__name__}")

        images = data.get("images") or []
        if isinstance(images, str):
            images = json.loads(images) if images.strip() else []

        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", data.get("user_id", ""))),
            type=ReportType(data["type"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            location=Location.from_api(data.get("location")),
            status=ReportStatus.parse(data.get("status", ReportStatus.DRAFT.value)),
            images=[str(i) for i in images],
            created_at=parse_timestamp(data.get("createdAt", data.get("created_at"))),
            updated_at=parse_timestamp(data.get("updatedAt", data.get("updated_at"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "location": self.location.to_dict() if self.location else None,
            "status": self.status.value,
            "images": list(self.images),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
