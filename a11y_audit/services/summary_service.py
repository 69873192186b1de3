"""
a11y_audit/services/summary_service.py

Deterministic aggregation of deduplicated violations.

All aggregation happens here, once per report generation; renderers only
read the resulting summaries.

Counting rules
--------------
total_violations   = number of deduplicated violations
<impact>_violations = violations whose impact is that level; any other
                      impact counts toward the total only
unique_rules       = distinct rule ids
unique_pages       = distinct page URLs with at least one violation
wcag_breakdown     = per guideline tag (``wcag*`` / ``best-practice*``),
                     number of violations carrying it

Per-browser totals are computed from the raw results, before
deduplication: they answer "how many violations did this browser surface on
its own", so a violation seen by two browsers counts once for each.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

from a11y_audit.domain.scan_result import (
    UNKNOWN_BROWSER,
    EnhancedViolation,
    ImpactLevel,
    ScanResult,
    is_guideline_tag,
)
from a11y_audit.domain.summary import GlobalSummary, SiteSummary

logger = logging.getLogger(__name__)


def sort_breakdown(counts: Mapping[str, int]) -> dict[str, int]:
    """
    Order a tag breakdown by descending count, ties by tag name.
    """

    return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))


def browser_violation_totals(results: Iterable[ScanResult]) -> dict[str, int]:
    """
    Count violations per browser without deduplication.
    """

    totals: Counter[str] = Counter()
    for result in results:
        totals[result.browser or UNKNOWN_BROWSER] += len(result.violations)
    return dict(sorted(totals.items()))


class SummaryService:
    """
    Builds per-site and global summaries.
    """

    def summarize(
        self,
        per_site: Mapping[str, Sequence[EnhancedViolation]],
        raw_results: Sequence[ScanResult] = (),
    ) -> tuple[dict[str, SiteSummary], GlobalSummary]:
        """
        Summarise *per_site* violations.

        *raw_results* is optional; when given it contributes scanned pages,
        browsers without violations, and the raw per-browser totals.
        """

        scanned_by_site: dict[str, set[str]] = {}
        browsers_by_site: dict[str, set[str]] = {}
        for result in raw_results:
            scanned_by_site.setdefault(result.site_name, set()).add(result.page_url)
            if result.browser:
                browsers_by_site.setdefault(result.site_name, set()).add(result.browser)

        site_summaries = {
            site_name: self.summarize_site(
                site_name,
                violations,
                scanned_pages=scanned_by_site.get(site_name, ()),
                extra_browsers=browsers_by_site.get(site_name, ()),
            )
            for site_name, violations in per_site.items()
        }
        global_summary = self.combine(
            site_summaries.values(),
            browser_totals=browser_violation_totals(raw_results),
        )

        logger.debug(
            "summarize sites=%d total=%d rules=%d pages=%d",
            len(site_summaries),
            global_summary.total_violations,
            len(global_summary.unique_rules),
            len(global_summary.unique_pages),
        )
        return site_summaries, global_summary

    def summarize_site(
        self,
        site_name: str,
        violations: Sequence[EnhancedViolation],
        *,
        scanned_pages: Iterable[str] = (),
        extra_browsers: Iterable[str] = (),
    ) -> SiteSummary:
        impacts: Counter[str] = Counter()
        unique_rules: set[str] = set()
        unique_pages: set[str] = set()
        breakdown: Counter[str] = Counter()
        browsers: set[str] = set(extra_browsers)

        for violation in violations:
            impacts[violation.impact] += 1
            unique_rules.add(violation.rule_id)
            unique_pages.add(violation.page_url)
            browsers.update(violation.browsers)
            for tag in violation.tags:
                if is_guideline_tag(tag):
                    breakdown[tag] += 1

        return SiteSummary(
            site_name=site_name,
            violations=tuple(violations),
            total_violations=len(violations),
            critical_violations=impacts[ImpactLevel.CRITICAL],
            serious_violations=impacts[ImpactLevel.SERIOUS],
            moderate_violations=impacts[ImpactLevel.MODERATE],
            minor_violations=impacts[ImpactLevel.MINOR],
            unique_rules=frozenset(unique_rules),
            unique_pages=frozenset(unique_pages),
            wcag_breakdown=sort_breakdown(breakdown),
            browsers=tuple(sorted(browsers)),
            scanned_pages=frozenset(scanned_pages),
        )

    def combine(
        self,
        site_summaries: Iterable[SiteSummary],
        *,
        browser_totals: Mapping[str, int] | None = None,
    ) -> GlobalSummary:
        """
        Sum counters and union sets across *site_summaries*.
        """

        totals: Counter[str] = Counter()
        breakdown: Counter[str] = Counter()
        unique_rules: set[str] = set()
        unique_pages: set[str] = set()
        scanned_pages: set[str] = set()
        browsers: set[str] = set()
        site_count = 0

        for site in site_summaries:
            site_count += 1
            totals["total"] += site.total_violations
            totals[ImpactLevel.CRITICAL] += site.critical_violations
            totals[ImpactLevel.SERIOUS] += site.serious_violations
            totals[ImpactLevel.MODERATE] += site.moderate_violations
            totals[ImpactLevel.MINOR] += site.minor_violations
            breakdown.update(site.wcag_breakdown)
            unique_rules.update(site.unique_rules)
            unique_pages.update(site.unique_pages)
            scanned_pages.update(site.scanned_pages)
            browsers.update(site.browsers)

        browser_totals = dict(browser_totals or {})
        browsers.update(name for name in browser_totals if name != UNKNOWN_BROWSER)

        return GlobalSummary(
            total_violations=totals["total"],
            critical_violations=totals[ImpactLevel.CRITICAL],
            serious_violations=totals[ImpactLevel.SERIOUS],
            moderate_violations=totals[ImpactLevel.MODERATE],
            minor_violations=totals[ImpactLevel.MINOR],
            unique_rules=frozenset(unique_rules),
            unique_pages=frozenset(unique_pages),
            wcag_breakdown=sort_breakdown(breakdown),
            browsers=tuple(sorted(browsers)),
            browser_totals=browser_totals,
            scanned_pages=frozenset(scanned_pages),
            site_count=site_count,
        )
