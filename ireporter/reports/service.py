"""
Report API service
Maps report operations onto the iReporter REST endpoints.
"""

import logging
from typing import Any, List, Optional, Sequence

from ireporter.core.errors import ErrorCode, InvalidStatus
from ireporter.reports.models import Report, ReportStatus
from ireporter.reports.schemas import ReportInput, ReportUpdate
from ireporter.transport.client import ApiClient, FilePart
from ireporter.transport.envelope import Envelope

logger = logging.getLogger(__name__)

MALFORMED_MESSAGE = "Unexpected response from server"


def _unwrap(payload: Any, key: str) -> Any:
    """Pull the entity out of a {report} / {reports} envelope, if wrapped."""
    if isinstance(payload, dict) and key in payload:
        return payload[key]
    return payload


class ReportService:
    """
    Stateless access to the /reports endpoints.

    Every method returns an Envelope; payloads are converted to Report
    objects, and a payload that cannot be converted becomes a failed
    envelope with MALFORMED_RESPONSE.
    """

    def __init__(self, client: ApiClient):
        self.client = client

    def _to_report(self, envelope: Envelope) -> Envelope:
        if not envelope.success:
            return envelope
        try:
            report = Report.from_api(_unwrap(envelope.data, "report"))
        except (KeyError, TypeError, ValueError, InvalidStatus) as e:
            logger.warning(f"Could not parse report payload: {e}")
            return Envelope.fail(MALFORMED_MESSAGE, ErrorCode.MALFORMED_RESPONSE, envelope.status_code)
        return Envelope.ok(report, envelope.status_code)

    def _to_reports(self, envelope: Envelope) -> Envelope:
        if not envelope.success:
            return envelope
        items = _unwrap(envelope.data, "reports")
        if not isinstance(items, list):
            logger.warning(f"Expected a list of reports, got {type(items).__name__}")
            return Envelope.fail(MALFORMED_MESSAGE, ErrorCode.MALFORMED_RESPONSE, envelope.status_code)

        reports: List[Report] = []
        for item in items:
            try:
                reports.append(Report.from_api(item))
            except (KeyError, TypeError, ValueError, InvalidStatus) as e:
                logger.warning(f"Skipping unparseable report: {e}")
                continue
        return Envelope.ok(reports, envelope.status_code)

    async def list_all(self) -> Envelope:
        """Get all reports visible to the current user (admins see every report)."""
        return self._to_reports(await self.client.get("/reports"))

    async def list_for_user(self, user_id: str) -> Envelope:
        """Get reports filed by one user."""
        return self._to_reports(await self.client.get("/reports", params={"userId": user_id}))

    async def get(self, report_id: str) -> Envelope:
        return self._to_report(await self.client.get(f"/reports/{report_id}"))

    async def create(self, data: ReportInput, files: Sequence[FilePart] = ()) -> Envelope:
        """
        Submit a new report as multipart/form-data.

        Args:
            data: Validated report fields
            files: Media parts, all under the backend's media field

        Returns:
            Envelope with the created Report
        """
        envelope = await self.client.upload(
            "/reports",
            fields=data.to_form_fields(),
            files=files,
        )
        return self._to_report(envelope)

    async def update(
        self,
        report_id: str,
        changes: ReportUpdate,
        files: Optional[Sequence[FilePart]] = None
    ) -> Envelope:
        """
        Update a report. Sent as JSON, or as multipart when new media is attached.

        Returns:
            Envelope with the updated Report
        """
        if files:
            envelope = await self.client.upload(
                f"/reports/{report_id}",
                fields=changes.to_form_fields(),
                files=files,
                method="PUT",
            )
        else:
            envelope = await self.client.put(f"/reports/{report_id}", changes.to_payload())
        return self._to_report(envelope)

    async def delete(self, report_id: str) -> Envelope:
        return await self.client.delete(f"/reports/{report_id}")

    async def update_status(self, report_id: str, status: ReportStatus) -> Envelope:
        """Change a report's status (admin)."""
        envelope = await self.client.post(
            f"/reports/{report_id}/status",
            {"status": status.value},
        )
        return self._to_report(envelope)
