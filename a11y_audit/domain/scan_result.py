"""
a11y_audit/domain/scan_result.py

Domain models for raw per-page scan results and deduplicated violations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class ImpactLevel:
    """
    Severity levels reported by the audit engine.
    """

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"
    NONE = "none"


RECOGNIZED_IMPACTS: tuple[str, ...] = (
    ImpactLevel.CRITICAL,
    ImpactLevel.SERIOUS,
    ImpactLevel.MODERATE,
    ImpactLevel.MINOR,
)

UNKNOWN_BROWSER = "unknown"

GUIDELINE_TAG_PREFIXES: tuple[str, ...] = ("wcag", "best-practice")


def is_guideline_tag(tag: str) -> bool:
    """
    True for WCAG conformance and best-practice tags.
    """

    return tag.startswith(GUIDELINE_TAG_PREFIXES)


@dataclass(frozen=True)
class AffectedNode:
    """
    One DOM element a rule result applies to.
    """

    target: str
    failure_summary: str | None = None
    html: str | None = None


@dataclass(frozen=True)
class ViolationItem:
    """
    One rule outcome on one page.

    The same shape is used for passes, incomplete and inapplicable entries;
    only violations are guaranteed to carry at least one affected node.
    """

    rule_id: str
    impact: str
    tags: tuple[str, ...]
    description: str
    nodes: tuple[AffectedNode, ...]
    help: str | None = None
    help_url: str | None = None

    @property
    def targets(self) -> list[str]:
        return [node.target for node in self.nodes]


@dataclass(frozen=True)
class ScanResult:
    """
    Audit outcome for one (browser, site, page) combination.
    """

    site_name: str
    page_name: str
    page_url: str
    browser: str | None
    violations: tuple[ViolationItem, ...] = ()
    passes: tuple[ViolationItem, ...] = ()
    incomplete: tuple[ViolationItem, ...] = ()
    inapplicable: tuple[ViolationItem, ...] = ()
    timestamp: str | None = None
    test_engine: dict[str, Any] | None = field(default=None, compare=False)

    def to_payload(self) -> dict[str, Any]:
        """
        Serialise to the camelCase payload shape accepted by the validator.
        """

        return {
            "siteName": self.site_name,
            "pageName": self.page_name,
            "url": self.page_url,
            "browser": self.browser,
            "timestamp": self.timestamp,
            "testEngine": self.test_engine,
            "violations": [_item_payload(item) for item in self.violations],
            "passes": [_item_payload(item) for item in self.passes],
            "incomplete": [_item_payload(item) for item in self.incomplete],
            "inapplicable": [_item_payload(item) for item in self.inapplicable],
        }


def _item_payload(item: ViolationItem) -> dict[str, Any]:
    return {
        "id": item.rule_id,
        "impact": item.impact,
        "tags": list(item.tags),
        "description": item.description,
        "help": item.help,
        "helpUrl": item.help_url,
        "nodes": [
            {
                "target": [node.target],
                "failureSummary": node.failure_summary,
                "html": node.html,
            }
            for node in item.nodes
        ],
    }


DedupKey = tuple[str, str, str, tuple[str, ...]]


@dataclass(frozen=True)
class EnhancedViolation:
    """
    A violation deduplicated across browsers.

    ``browsers`` is sorted alphabetically. It is empty only when every
    contributing result lacked a browser tag; renderers show that as
    ``unknown``.
    """

    site_name: str
    page_name: str
    page_url: str
    rule_id: str
    impact: str
    tags: tuple[str, ...]
    description: str
    nodes: tuple[AffectedNode, ...]
    browsers: tuple[str, ...]
    help: str | None = None
    help_url: str | None = None

    @property
    def key(self) -> DedupKey:
        return dedup_key(self.site_name, self.rule_id, self.page_url, self.nodes)

    @property
    def targets(self) -> list[str]:
        return [node.target for node in self.nodes]

    @property
    def occurrences(self) -> int:
        return len(self.nodes)

    @property
    def display_browsers(self) -> tuple[str, ...]:
        return self.browsers or (UNKNOWN_BROWSER,)


def dedup_key(
    site_name: str,
    rule_id: str,
    page_url: str,
    nodes: tuple[AffectedNode, ...] | list[AffectedNode],
) -> DedupKey:
    """
    Identity of a violation across browsers: site, rule, page and the ordered
    affected-element selectors.
    """

    return (site_name, rule_id, page_url, tuple(node.target for node in nodes))
