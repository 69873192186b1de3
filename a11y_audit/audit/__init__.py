"""
Audit run exports.
"""

from a11y_audit.audit.pages import PageInfo, PageListError, read_pages_from_csv
from a11y_audit.audit.protocols import PageAuditor, SiteAuthenticator
from a11y_audit.audit.runner import AccessibilityAuditRunner, SiteAuditErrors

__all__ = [
    "AccessibilityAuditRunner",
    "PageAuditor",
    "PageInfo",
    "PageListError",
    "SiteAuditErrors",
    "SiteAuthenticator",
    "read_pages_from_csv",
]
