"""
Report lifecycle controller
Owns the local report collection and enforces which mutations are legal
for a report's status.
"""

import logging
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple, Union

from ireporter.core.errors import (
    CannotDelete,
    CannotEdit,
    EmptyIdentifier,
    NothingToUpdate,
    ValidationError,
)
from ireporter.media.pipeline import MediaPipeline
from ireporter.notifications.channel import LoggingNotificationChannel, NotificationChannel
from ireporter.reports.models import Report, ReportStatus
from ireporter.reports.schemas import (
    CONTENT_FIELDS,
    ReportInput,
    ReportUpdate,
    validate_report_input,
    validate_report_update,
)
from ireporter.reports.service import ReportService
from ireporter.transport.envelope import Envelope

logger = logging.getLogger(__name__)

ReportData = Union[ReportInput, Mapping[str, Any]]
UpdateData = Union[ReportUpdate, Mapping[str, Any]]


def _require_id(value: Optional[str], what: str = "Report ID") -> str:
    if value is None or not str(value).strip():
        raise EmptyIdentifier(what)
    return str(value).strip()


class ReportController:
    """
    Single writer of the in-memory report collection.

    The collection changes only after the server confirms a mutation:
    create prepends, update and status changes replace in place, delete
    removes. Failed calls leave it untouched.

    Reports that are under investigation, rejected or resolved can only
    change status; content edits and deletion are refused before any
    request is sent.

    Mutations push a notification on success and failure. Reads (list,
    list_for_user, get) only set ``error``.
    """

    def __init__(
        self,
        service: ReportService,
        notifier: Optional[NotificationChannel] = None,
        validator: Callable[[ReportData], ReportInput] = validate_report_input,
        update_validator: Callable[[UpdateData], ReportUpdate] = validate_report_update,
    ):
        """
        Initialize the controller.

        Args:
            service: Report API service
            notifier: Sink for user-visible notifications
            validator: Field validation for new reports
            update_validator: Field validation for edits
        """
        self.service = service
        self.notifier = notifier or LoggingNotificationChannel()
        self.validator = validator
        self.update_validator = update_validator

        self._reports: List[Report] = []
        self._in_flight = 0
        self.error: Optional[str] = None

    @property
    def reports(self) -> Tuple[Report, ...]:
        """Read-only snapshot of the collection, most recent first."""
        return tuple(self._reports)

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def find(self, report_id: str) -> Optional[Report]:
        for report in self._reports:
            if report.id == report_id:
                return report
        return None

    def _replace(self, report: Report) -> None:
        for i, existing in enumerate(self._reports):
            if existing.id == report.id:
                self._reports[i] = report
                return

    async def _perform(
        self,
        action: Callable[[], Awaitable[Envelope]],
        failure_title: Optional[str] = None
    ) -> Envelope:
        """
        Run one operation, tracking loading/error and converting client-side
        validation errors into a failed envelope.
        """
        self._in_flight += 1
        self.error = None
        try:
            envelope = await action()
        except ValidationError as e:
            logger.info(f"Rejected before sending: {e.message}")
            envelope = Envelope.from_error(e)
        finally:
            self._in_flight -= 1

        if not envelope.success:
            self.error = envelope.error
            if failure_title:
                self.notifier.error(failure_title, envelope.error or "")
        return envelope

    async def _current(self, report_id: str) -> Envelope:
        """The report as last confirmed by the server, fetching it if not held locally."""
        report = self.find(report_id)
        if report is not None:
            return Envelope.ok(report)
        return await self.service.get(report_id)

    @staticmethod
    def _refresh_timestamp(updated: Report, previous: Optional[Report]) -> Report:
        if updated.updated_at is None:
            return updated.touched()
        if previous is not None and previous.updated_at is not None:
            if updated.updated_at <= previous.updated_at:
                return updated.touched()
        return updated

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list(self) -> Envelope:
        """Fetch all reports and replace the collection."""
        async def action() -> Envelope:
            envelope = await self.service.list_all()
            if envelope.success:
                self._reports = list(envelope.data)
                logger.debug(f"Loaded {len(self._reports)} reports")
            return envelope

        return await self._perform(action)

    async def list_for_user(self, user_id: str) -> Envelope:
        """Fetch one user's reports and replace the collection."""
        async def action() -> Envelope:
            uid = _require_id(user_id, "User ID")
            envelope = await self.service.list_for_user(uid)
            if envelope.success:
                self._reports = list(envelope.data)
                logger.debug(f"Loaded {len(self._reports)} reports for user {uid}")
            return envelope

        return await self._perform(action)

    async def get(self, report_id: str) -> Envelope:
        """Fetch one report, refreshing the local copy if one is held."""
        async def action() -> Envelope:
            rid = _require_id(report_id)
            envelope = await self.service.get(rid)
            if envelope.success:
                self._replace(envelope.data)
            return envelope

        return await self._perform(action)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create(self, data: ReportData, media: Optional[MediaPipeline] = None) -> Envelope:
        """
        Submit a new report.

        Args:
            data: Report fields (mapping or ReportInput)
            media: Pipeline holding attachments; cleared once the request is sent

        Returns:
            Envelope with the created Report
        """
        async def action() -> Envelope:
            report_input = self.validator(data)
            files = media.to_payload_fragments() if media is not None else []

            try:
                envelope = await self.service.create(report_input, files)
            finally:
                if media is not None:
                    media.clear()

            if envelope.success:
                report = self._refresh_timestamp(envelope.data, None)
                self._reports.insert(0, report)
                logger.info(f"Report created: {report.id} ({report.type.value})")
                self.notifier.info("Report created!", "Your report has been submitted successfully.")
                envelope = Envelope.ok(report, envelope.status_code)
            return envelope

        return await self._perform(action, failure_title="Error")

    async def update(
        self,
        report_id: str,
        data: UpdateData,
        media: Optional[MediaPipeline] = None
    ) -> Envelope:
        """
        Edit a report's content.

        An update carrying only a status is handled as a status change.
        Content edits (including new media) on a locked report fail with
        CannotEdit without contacting the server.

        Returns:
            Envelope with the updated Report
        """
        async def action() -> Envelope:
            rid = _require_id(report_id)

            if isinstance(data, ReportUpdate):
                requested = data.content_fields()
                status_requested = "status" in data.model_fields_set
            else:
                requested = {key for key in data if key in CONTENT_FIELDS}
                status_requested = "status" in data
            has_media = media is not None and len(media) > 0

            if not requested and not has_media:
                if status_requested:
                    changes = self.update_validator(data)
                    if changes.status is not None:
                        return await self._change_status(rid, changes.status)
                raise NothingToUpdate()

            current = await self._current(rid)
            if not current.success:
                return current
            if current.data.status.is_locked:
                raise CannotEdit()

            changes = self.update_validator(data)
            files = media.to_payload_fragments() if has_media else None

            try:
                envelope = await self.service.update(rid, changes, files)
            finally:
                if has_media:
                    media.clear()

            if envelope.success:
                report = self._refresh_timestamp(envelope.data, current.data)
                self._replace(report)
                logger.info(f"Report updated: {rid} ({', '.join(sorted(requested)) or 'media'})")
                self.notifier.info("Report updated!", "Your changes have been saved.")
                envelope = Envelope.ok(report, envelope.status_code)
            return envelope

        return await self._perform(action, failure_title="Error")

    async def remove(self, report_id: str) -> Envelope:
        """
        Delete a draft report.

        Returns:
            Envelope with the removed Report
        """
        async def action() -> Envelope:
            rid = _require_id(report_id)

            current = await self._current(rid)
            if not current.success:
                return current
            if current.data.status.is_locked:
                raise CannotDelete()

            envelope = await self.service.delete(rid)
            if not envelope.success:
                return envelope

            self._reports = [r for r in self._reports if r.id != rid]
            logger.info(f"Report deleted: {rid}")
            self.notifier.info("Report deleted", "Your report has been removed")
            return Envelope.ok(current.data, envelope.status_code)

        return await self._perform(action, failure_title="Cannot delete")

    async def set_status(self, report_id: str, status: Union[ReportStatus, str]) -> Envelope:
        """
        Change a report's status. Allowed whatever the current status.

        Returns:
            Envelope with the updated Report
        """
        async def action() -> Envelope:
            rid = _require_id(report_id)
            return await self._change_status(rid, ReportStatus.parse(status))

        return await self._perform(action, failure_title="Error")

    async def _change_status(self, report_id: str, status: ReportStatus) -> Envelope:
        previous = self.find(report_id)
        envelope = await self.service.update_status(report_id, status)
        if not envelope.success:
            return envelope

        report = self._refresh_timestamp(envelope.data, previous)
        self._replace(report)
        old = previous.status.value if previous else "?"
        logger.info(f"Report {report_id} status: {old} -> {report.status.value}")
        self.notifier.info("Status updated", f"Report status changed to {report.status.label}")
        return Envelope.ok(report, envelope.status_code)
