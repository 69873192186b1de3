"""
a11y_audit/services/dedup_service.py

Collapses violations seen by several browsers into one record per
(site, rule, page, affected elements), annotated with every browser that
surfaced it.

Ordering
--------
Sites appear in the order they are first seen in the input; within a site,
violations keep the order of their first occurrence. Given the same input
order the output is identical on every run.

Browser tags
------------
A result without a browser still takes part in key matching but adds
nothing to ``browsers``. Violations without affected nodes cannot be keyed
and are skipped with a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from a11y_audit import failure_codes
from a11y_audit.domain.scan_result import (
    DedupKey,
    EnhancedViolation,
    ScanResult,
    ViolationItem,
    dedup_key,
)
from a11y_audit.logging_utils import log_event

logger = logging.getLogger(__name__)


@dataclass
class _ViolationAccumulator:
    """
    Mutable per-key state while one dedup pass runs.
    """

    item: ViolationItem
    site_name: str
    page_name: str
    page_url: str
    browsers: set[str] = field(default_factory=set)

    def build(self) -> EnhancedViolation:
        return EnhancedViolation(
            site_name=self.site_name,
            page_name=self.page_name,
            page_url=self.page_url,
            rule_id=self.item.rule_id,
            impact=self.item.impact,
            tags=self.item.tags,
            description=self.item.description,
            nodes=self.item.nodes,
            browsers=tuple(sorted(self.browsers)),
            help=self.item.help,
            help_url=self.item.help_url,
        )


class DeduplicationService:
    """
    Stateless deduplication of merged scan results.
    """

    def dedupe(self, results: Iterable[ScanResult]) -> dict[str, list[EnhancedViolation]]:
        """
        Group *results* by site and merge identical violations across browsers.

        Returns
        -------
        dict[str, list[EnhancedViolation]]
            Site name to deduplicated violations. Every site that produced at
            least one result is present, possibly with an empty list.
        """

        per_site: dict[str, dict[DedupKey, _ViolationAccumulator]] = {}
        seen = 0
        skipped = 0

        for result in results:
            site_entries = per_site.setdefault(result.site_name, {})
            for violation in result.violations:
                if not violation.nodes:
                    skipped += 1
                    log_event(
                        logger,
                        logging.WARNING,
                        "violation_skipped",
                        code=failure_codes.MALFORMED_VIOLATION,
                        site=result.site_name,
                        page=result.page_name,
                        rule_id=violation.rule_id,
                        browser=result.browser,
                        reason="no affected nodes",
                    )
                    continue

                seen += 1
                key = dedup_key(result.site_name, violation.rule_id, result.page_url, violation.nodes)
                entry = site_entries.get(key)
                if entry is None:
                    entry = _ViolationAccumulator(
                        item=violation,
                        site_name=result.site_name,
                        page_name=result.page_name,
                        page_url=result.page_url,
                    )
                    site_entries[key] = entry
                if result.browser:
                    entry.browsers.add(result.browser)

        deduped = {
            site_name: [entry.build() for entry in entries.values()]
            for site_name, entries in per_site.items()
        }

        log_event(
            logger,
            logging.DEBUG,
            "violations_deduplicated",
            sites=len(deduped),
            violations_seen=seen,
            violations_unique=sum(len(items) for items in deduped.values()),
            violations_skipped=skipped,
        )
        return deduped
