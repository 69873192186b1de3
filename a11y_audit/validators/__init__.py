"""
a11y_audit/validators package marker.
"""

from a11y_audit.validators.scan_result_validator import (
    ScanResultIssue,
    ScanResultValidationError,
    ScanResultValidator,
)

__all__ = [
    "ScanResultIssue",
    "ScanResultValidationError",
    "ScanResultValidator",
]
