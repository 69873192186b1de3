"""
a11y_audit/validators/scan_result_validator.py

Boundary validation turning raw audit payloads into :class:`ScanResult`.

Whole-payload problems (missing site/page/url, non-list rule sections)
reject the record. A single violation entry that is malformed or has no
affected nodes is quarantined: dropped from the result and reported as an
issue, so one bad entry never discards the rest of the page.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Sequence

from pydantic import ValidationError

from a11y_audit import failure_codes
from a11y_audit.domain.scan_result import AffectedNode, ImpactLevel, ScanResult, ViolationItem
from a11y_audit.logging_utils import log_event
from a11y_audit.schemas.axe_results import RawNode, RawRuleResult, RawScanPayload

logger = logging.getLogger(__name__)

TARGET_SEPARATOR = ", "
FRAME_SEPARATOR = " > "


@dataclass(frozen=True)
class ScanResultIssue:
    """
    Structured validation issue for one payload or one rule entry.
    """

    code: str
    message: str
    section: str | None = None
    index: int | None = None
    rule_id: str | None = None


class ScanResultValidationError(ValueError):
    """
    Raised when a raw payload violates the scan result contract.
    """

    def __init__(self, *, message: str, errors: Sequence[ScanResultIssue]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "section": error.section,
                    "index": error.index,
                    "rule_id": error.rule_id,
                }
                for error in self.errors
            ],
        }


class ScanResultValidator:
    """
    Validates and normalises raw scan payloads.
    """

    def validate_payload(
        self,
        payload: Any,
        *,
        source: str | None = None,
    ) -> tuple[ScanResult | None, list[ScanResultIssue]]:
        """
        Validate one raw payload.

        Returns ``(None, issues)`` when the payload itself is unusable, or
        ``(result, issues)`` where *issues* lists quarantined entries.
        """

        if not isinstance(payload, Mapping):
            return None, [
                ScanResultIssue(
                    code=failure_codes.MALFORMED_SCAN_RESULT,
                    message=f"Expected an object, got {type(payload).__name__}.",
                )
            ]

        try:
            raw = RawScanPayload.model_validate(payload)
        except ValidationError as exc:
            return None, [
                ScanResultIssue(
                    code=failure_codes.MALFORMED_SCAN_RESULT,
                    message=f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}",
                )
                for error in exc.errors()
            ]

        issues: list[ScanResultIssue] = []
        violations = self._parse_section(
            raw.violations, section="violations", require_nodes=True, issues=issues
        )
        passes = self._parse_section(raw.passes, section="passes", require_nodes=False, issues=issues)
        incomplete = self._parse_section(
            raw.incomplete, section="incomplete", require_nodes=False, issues=issues
        )
        inapplicable = self._parse_section(
            raw.inapplicable, section="inapplicable", require_nodes=False, issues=issues
        )

        for issue in issues:
            log_event(
                logger,
                logging.WARNING,
                "rule_entry_quarantined",
                code=issue.code,
                section=issue.section,
                index=issue.index,
                rule_id=issue.rule_id,
                site=raw.site_name,
                page=raw.page_name,
                source=source,
                reason=issue.message,
            )

        result = ScanResult(
            site_name=raw.site_name,
            page_name=raw.page_name,
            page_url=raw.url,
            browser=raw.browser,
            violations=tuple(violations),
            passes=tuple(passes),
            incomplete=tuple(incomplete),
            inapplicable=tuple(inapplicable),
            timestamp=raw.timestamp,
            test_engine=raw.test_engine,
        )
        return result, issues

    def parse(self, payload: Any, *, source: str | None = None) -> ScanResult:
        """
        Validate *payload* and return the result, raising on rejection.
        """

        result, issues = self.validate_payload(payload, source=source)
        if result is None:
            raise ScanResultValidationError(
                message="Scan payload does not match the scan result contract.",
                errors=issues,
            )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _parse_section(
        self,
        entries: list[Any],
        *,
        section: str,
        require_nodes: bool,
        issues: list[ScanResultIssue],
    ) -> list[ViolationItem]:
        parsed: list[ViolationItem] = []
        for index, entry in enumerate(entries):
            rule_id = entry.get("id") if isinstance(entry, Mapping) else None
            try:
                rule = RawRuleResult.model_validate(entry)
            except ValidationError as exc:
                issues.append(
                    ScanResultIssue(
                        code=failure_codes.MALFORMED_VIOLATION,
                        message=f"Invalid rule entry: {exc.error_count()} error(s).",
                        section=section,
                        index=index,
                        rule_id=rule_id if isinstance(rule_id, str) else None,
                    )
                )
                continue

            if require_nodes and not rule.nodes:
                issues.append(
                    ScanResultIssue(
                        code=failure_codes.MALFORMED_VIOLATION,
                        message="Violation has no affected nodes.",
                        section=section,
                        index=index,
                        rule_id=rule.id,
                    )
                )
                continue

            parsed.append(self._to_item(rule))
        return parsed

    @staticmethod
    def _to_item(rule: RawRuleResult) -> ViolationItem:
        impact = (rule.impact or ImpactLevel.NONE).strip().lower() or ImpactLevel.NONE
        return ViolationItem(
            rule_id=rule.id,
            impact=impact,
            tags=tuple(dict.fromkeys(tag.strip() for tag in rule.tags if tag.strip())),
            description=rule.description,
            nodes=tuple(_to_node(node) for node in rule.nodes),
            help=rule.help,
            help_url=rule.help_url,
        )


def _to_node(node: RawNode) -> AffectedNode:
    return AffectedNode(
        target=format_target(node.target),
        failure_summary=node.failure_summary,
        html=node.html,
    )


def format_target(target: Sequence[str | Sequence[str]]) -> str:
    """
    Flatten an engine selector path into one display string.

    Nested lists (frame or shadow-root chains) are joined with ``" > "``;
    sibling selectors with ``", "``.
    """

    parts: list[str] = []
    for selector in target:
        if isinstance(selector, str):
            parts.append(selector)
        else:
            parts.append(FRAME_SEPARATOR.join(selector))
    return TARGET_SEPARATOR.join(parts)
