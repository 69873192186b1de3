"""
a11y_audit/domain/summary.py

Aggregated views over deduplicated violations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from a11y_audit.domain.scan_result import EnhancedViolation


@dataclass(frozen=True)
class SiteSummary:
    """
    Per-site aggregate of deduplicated violations.

    ``total_violations`` always equals ``len(violations)``; impact buckets
    only count the four recognised levels.
    """

    site_name: str
    violations: tuple[EnhancedViolation, ...]
    total_violations: int
    critical_violations: int
    serious_violations: int
    moderate_violations: int
    minor_violations: int
    unique_rules: frozenset[str]
    unique_pages: frozenset[str]
    wcag_breakdown: dict[str, int]
    browsers: tuple[str, ...]
    scanned_pages: frozenset[str] = frozenset()

    @property
    def page_count(self) -> int:
        return len(self.scanned_pages | self.unique_pages)


@dataclass(frozen=True)
class GlobalSummary:
    """
    Aggregate over every site, plus raw per-browser totals.

    ``wcag_breakdown`` is ordered by descending count, ties by tag.
    ``browser_totals`` counts violations per browser before deduplication.
    """

    total_violations: int
    critical_violations: int
    serious_violations: int
    moderate_violations: int
    minor_violations: int
    unique_rules: frozenset[str]
    unique_pages: frozenset[str]
    wcag_breakdown: dict[str, int]
    browsers: tuple[str, ...]
    browser_totals: dict[str, int] = field(default_factory=dict)
    scanned_pages: frozenset[str] = frozenset()
    site_count: int = 0

    @property
    def page_count(self) -> int:
        return len(self.scanned_pages | self.unique_pages)

    @property
    def wcag_breakdown_items(self) -> list[tuple[str, int]]:
        return list(self.wcag_breakdown.items())


@dataclass(frozen=True)
class ReportDataset:
    """
    Immutable input shared by every report renderer.
    """

    results: dict[str, tuple[EnhancedViolation, ...]]
    site_summaries: dict[str, SiteSummary]
    summary: GlobalSummary
    generated_at: datetime

    @property
    def browsers(self) -> tuple[str, ...]:
        return self.summary.browsers
