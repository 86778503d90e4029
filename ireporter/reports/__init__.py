"""
iReporter - Reports Module
Report model, API service and lifecycle controller.
"""

from ireporter.reports.models import (
    Report,
    ReportStatus,
    ReportType,
)
from ireporter.reports.schemas import (
    ReportInput,
    ReportUpdate,
    validate_report_input,
    validate_report_update,
)
from ireporter.reports.service import ReportService
from ireporter.reports.controller import ReportController

__all__ = [
    # Model
    "Report",
    "ReportStatus",
    "ReportType",
    # Input
    "ReportInput",
    "ReportUpdate",
    "validate_report_input",
    "validate_report_update",
    # Service / controller
    "ReportService",
    "ReportController",
]
