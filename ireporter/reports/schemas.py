"""
Input schemas for report submission and editing.
"""

from typing import Any, Dict, Mapping, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ireporter.core.constants import (
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    VALIDATION_MESSAGES,
)
from ireporter.core.errors import InvalidInput
from ireporter.core.geo import Location
from ireporter.reports.models import ReportStatus, ReportType

CONTENT_FIELDS = ("title", "description", "type", "location")


def _check_title(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < TITLE_MIN_LENGTH:
        raise ValueError(VALIDATION_MESSAGES["TITLE_MIN"])
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(VALIDATION_MESSAGES["TITLE_MAX"])
    return value


def _check_description(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < DESCRIPTION_MIN_LENGTH:
        raise ValueError(VALIDATION_MESSAGES["DESCRIPTION_MIN"])
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(VALIDATION_MESSAGES["DESCRIPTION_MAX"])
    return value


class ReportInput(BaseModel):
    """Fields for a new report."""

    model_config = ConfigDict(extra="ignore")

    title: str
    description: str
    type: ReportType
    location: Optional[Location] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value):
        return _check_title(value)

    @field_validator("description")
    @classmethod
    def check_description(cls, value):
        return _check_description(value)

    def to_form_fields(self) -> Dict[str, str]:
        """Multipart form fields; location travels as a JSON string."""
        fields = {
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
        }
        if self.location is not None:
            fields["location"] = self.location.to_json()
        return fields


class ReportUpdate(BaseModel):
    """Partial changes to an existing report."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[ReportType] = None
    location: Optional[Location] = None
    status: Optional[ReportStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        return value if value is None else ReportStatus.parse(value)

    @field_validator("title")
    @classmethod
    def check_title(cls, value):
        return _check_title(value)

    @field_validator("description")
    @classmethod
    def check_description(cls, value):
        return _check_description(value)

    def content_fields(self) -> Set[str]:
        """Names of content fields explicitly set on this update."""
        return {name for name in self.model_fields_set if name in CONTENT_FIELDS}

    def to_payload(self) -> Dict[str, Any]:
        """JSON body with only the fields that were set."""
        return self.model_dump(mode="json", exclude_unset=True)

    def to_form_fields(self) -> Dict[str, str]:
        fields: Dict[str, str] = {}
        for name, value in self.to_payload().items():
            if name == "location":
                fields[name] = self.location.to_json() if self.location else "null"
            else:
                fields[name] = str(value)
        return fields


def _first_message(error: ValidationError) -> str:
    first = error.errors()[0]
    cause = (first.get("ctx") or {}).get("error")
    if isinstance(cause, ValueError):
        return str(cause)
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


def validate_report_input(data: Union[ReportInput, Mapping[str, Any]]) -> ReportInput:
    """
    Default validator for new reports.

    Raises:
        InvalidInput: With the first human-readable validation message
    """
    if isinstance(data, ReportInput):
        return data
    try:
        return ReportInput.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidInput(_first_message(e)) from None


def validate_report_update(data: Union[ReportUpdate, Mapping[str, Any]]) -> ReportUpdate:
    """
    Default validator for report edits.

    Raises:
        InvalidInput: With the first human-readable validation message
    """
    if isinstance(data, ReportUpdate):
        return data
    try:
        return ReportUpdate.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidInput(_first_message(e)) from None
