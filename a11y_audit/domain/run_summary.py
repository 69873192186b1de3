"""
a11y_audit/domain/run_summary.py

Domain models for audit runs and the end-of-session operational summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from a11y_audit.domain.scan_result import ScanResult


@dataclass(frozen=True)
class SiteAuditError:
    """
    One failure that stopped a site (or part of it) from being audited.
    """

    site_name: str
    code: str
    message: str


@dataclass(frozen=True)
class AuditRunResult:
    """
    Outcome of auditing every configured site in one browser.
    """

    browser: str
    results: list[ScanResult]
    total_violations: int
    duration_seconds: float
    failed_pages: int = 0
    errors: list[SiteAuditError] = field(default_factory=list)


@dataclass(frozen=True)
class BrowserRunStats:
    """
    Violations surfaced by one browser and how long its run took.
    """

    browser: str
    violations: int
    duration_seconds: float


@dataclass(frozen=True)
class RunSummary:
    """
    Operational summary across all browser runs of one session.

    ``unique_violations`` is the post-deduplication total and is the
    authoritative figure. ``legacy_unique_violations`` is the largest
    single-browser count, kept for comparison with older reports.
    """

    browsers: list[BrowserRunStats]
    total_violations: int
    unique_violations: int
    legacy_unique_violations: int
    elapsed_seconds: float | None
    report_path: str | None = None
