"""
a11y_audit/domain package marker.
"""

from a11y_audit.domain.run_summary import AuditRunResult, BrowserRunStats, RunSummary, SiteAuditError
from a11y_audit.domain.scan_result import (
    AffectedNode,
    EnhancedViolation,
    ImpactLevel,
    ScanResult,
    ViolationItem,
    dedup_key,
)
from a11y_audit.domain.summary import GlobalSummary, ReportDataset, SiteSummary

__all__ = [
    "AffectedNode",
    "AuditRunResult",
    "BrowserRunStats",
    "EnhancedViolation",
    "GlobalSummary",
    "ImpactLevel",
    "ReportDataset",
    "RunSummary",
    "ScanResult",
    "SiteAuditError",
    "SiteSummary",
    "ViolationItem",
    "dedup_key",
]
