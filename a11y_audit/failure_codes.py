"""Shared failure code constants for audit and report error handling."""

PAGE_AUDIT_FAILED = "page_audit_failed"
SITE_AUTHENTICATION_FAILED = "site_authentication_failed"
PAGE_LIST_UNREADABLE = "page_list_unreadable"
RESULT_FILE_CORRUPT = "result_file_corrupt"
MALFORMED_SCAN_RESULT = "malformed_scan_result"
MALFORMED_VIOLATION = "malformed_violation"
RENDERER_FAILED = "renderer_failed"

# Recovered locally; the run continues.
RECOVERABLE_FAILURES = [
    PAGE_AUDIT_FAILED,
    RESULT_FILE_CORRUPT,
    MALFORMED_SCAN_RESULT,
    MALFORMED_VIOLATION,
    RENDERER_FAILED,
]

# Collected per site and surfaced together once every site was attempted.
SITE_FAILURES = [
    SITE_AUTHENTICATION_FAILED,
    PAGE_LIST_UNREADABLE,
]
