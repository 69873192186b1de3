"""
Service layer exports.
"""

from a11y_audit.services.collector_service import ScanResultCollector
from a11y_audit.services.dedup_service import DeduplicationService
from a11y_audit.services.merger_service import CrossRunMerger
from a11y_audit.services.report_service import (
    ReportGenerationResult,
    ReportService,
    RendererSpec,
    default_renderers,
    report_filename,
)
from a11y_audit.services.run_summary_service import RunSummaryService, format_run_summary
from a11y_audit.services.summary_service import SummaryService, browser_violation_totals

__all__ = [
    "CrossRunMerger",
    "DeduplicationService",
    "RendererSpec",
    "ReportGenerationResult",
    "ReportService",
    "RunSummaryService",
    "ScanResultCollector",
    "SummaryService",
    "browser_violation_totals",
    "default_renderers",
    "format_run_summary",
    "report_filename",
]
