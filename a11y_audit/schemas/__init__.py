"""
a11y_audit/schemas package marker.
"""

from a11y_audit.schemas.axe_results import RawNode, RawRuleResult, RawScanPayload
from a11y_audit.schemas.report_snapshot import (
    NodeSnapshot,
    ReportSnapshot,
    SummarySnapshot,
    ViolationSnapshot,
)

__all__ = [
    "NodeSnapshot",
    "RawNode",
    "RawRuleResult",
    "RawScanPayload",
    "ReportSnapshot",
    "SummarySnapshot",
    "ViolationSnapshot",
]
