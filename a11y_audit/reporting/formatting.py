"""
Display helpers shared by the report renderers.

Pure functions only: no I/O, no aggregation.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import urlsplit

from a11y_audit.domain.scan_result import EnhancedViolation

ELEMENT_SEPARATOR = "; "
BROWSER_SEPARATOR = ", "
TAG_SEPARATOR = ", "

FIX_LEAD_INS: tuple[str, ...] = (
    "Fix any of the following:",
    "Fix all of the following:",
)

# Explanations the engine appends to most image/label failures; they never
# describe the actual fix.
NOISY_EXPLANATIONS: frozenset[str] = frozenset(
    {
        "Element has no title attribute",
        'Element\'s default semantics were not overridden with role="none" or role="presentation"',
    }
)


def fix_suggestion_lines(violation: EnhancedViolation) -> list[str]:
    """
    Cleaned failure explanation of the first affected node, one line per hint.
    """

    if not violation.nodes:
        return []
    summary = violation.nodes[0].failure_summary or ""

    lines: list[str] = []
    for raw_line in summary.splitlines():
        line = raw_line.strip()
        for lead_in in FIX_LEAD_INS:
            if line.startswith(lead_in):
                line = line[len(lead_in):].strip()
        if not line or line in NOISY_EXPLANATIONS:
            continue
        lines.append(line)
    return lines


def fix_suggestion(violation: EnhancedViolation) -> str:
    return " ".join(fix_suggestion_lines(violation))


def format_element_list(targets: Sequence[str], limit: int) -> str:
    """
    Join at most *limit* selectors, noting how many were left out.
    """

    shown = ELEMENT_SEPARATOR.join(targets[:limit])
    hidden = len(targets) - limit
    if hidden > 0:
        return f"{shown} ... ({hidden} more)"
    return shown


def page_path(url: str) -> str:
    parts = urlsplit(url)
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return path


def rule_docs_url(violation: EnhancedViolation, docs_base_url: str) -> str:
    if violation.help_url:
        return violation.help_url
    return f"{docs_base_url.rstrip('/')}/{violation.rule_id}"


def browsers_label(violation: EnhancedViolation) -> str:
    return BROWSER_SEPARATOR.join(violation.display_browsers)


def tags_label(violation: EnhancedViolation) -> str:
    return TAG_SEPARATOR.join(violation.tags)
