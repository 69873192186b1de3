"""
tests/test_dedup_service.py

Pytest unit tests for DeduplicationService.

Coverage
--------
- Identical violations from two browsers collapse into one record
- Different element lists stay separate, even when selectors contain "|"
- Browser union is sorted and results without a browser add nothing
- Violations without nodes are skipped with a warning
- Re-running over the output's own inputs is stable (idempotence)
- Site and first-occurrence ordering
"""

from __future__ import annotations

import logging

import pytest

from a11y_audit.services.dedup_service import DeduplicationService


@pytest.fixture()
def svc() -> DeduplicationService:
    return DeduplicationService()


class TestCollapsing:
    def test_same_violation_in_two_browsers_collapses(self, svc, make_result, make_violation) -> None:
        image_alt = make_violation("image-alt", "img.hero", impact="critical")
        results = [
            make_result("Main", "https://example.test/", image_alt, browser="firefox"),
            make_result("Main", "https://example.test/", image_alt, browser="chromium"),
        ]

        per_site = svc.dedupe(results)

        assert list(per_site) == ["Main"]
        assert len(per_site["Main"]) == 1
        violation = per_site["Main"][0]
        assert violation.rule_id == "image-alt"
        assert violation.browsers == ("chromium", "firefox")
        assert violation.occurrences == 1

    def test_different_targets_are_distinct(self, svc, make_result, make_violation) -> None:
        results = [
            make_result(
                "Main",
                "https://example.test/",
                make_violation("image-alt", "img.hero"),
                make_violation("image-alt", "img.logo"),
            ),
        ]

        per_site = svc.dedupe(results)

        assert [v.targets for v in per_site["Main"]] == [["img.hero"], ["img.logo"]]

    def test_target_order_is_part_of_identity(self, svc, make_result, make_violation) -> None:
        results = [
            make_result("Main", "https://example.test/", make_violation("label", "#a", "#b")),
            make_result("Main", "https://example.test/", make_violation("label", "#b", "#a"), browser="webkit"),
        ]

        assert len(svc.dedupe(results)["Main"]) == 2

    def test_selector_containing_pipe_does_not_merge_with_split_selectors(
        self, svc, make_result, make_violation
    ) -> None:
        results = [
            make_result("Main", "https://example.test/", make_violation("link-name", 'a[href="x|y"]')),
            make_result(
                "Main",
                "https://example.test/",
                make_violation("link-name", 'a[href="x', 'y"]'),
                browser="firefox",
            ),
        ]

        rows = svc.dedupe(results)["Main"]

        assert [row.targets for row in rows] == [['a[href="x|y"]'], ['a[href="x', 'y"]']]
        assert [row.browsers for row in rows] == [("chromium",), ("firefox",)]

    def test_same_rule_on_different_pages_is_distinct(self, svc, make_result, make_violation) -> None:
        violation = make_violation("color-contrast", "p.note")
        results = [
            make_result("Main", "https://example.test/", violation),
            make_result("Main", "https://example.test/about", violation),
        ]

        assert len(svc.dedupe(results)["Main"]) == 2

    def test_first_occurrence_keeps_its_fields(self, svc, make_result, make_violation) -> None:
        results = [
            make_result("Main", "https://example.test/", make_violation("list", "ul", impact="serious")),
            make_result("Main", "https://example.test/", make_violation("list", "ul", impact="minor"), browser="webkit"),
        ]

        violation = svc.dedupe(results)["Main"][0]

        assert violation.impact == "serious"
        assert violation.browsers == ("chromium", "webkit")


class TestBrowserTags:
    def test_result_without_browser_adds_nothing(self, svc, make_result, make_violation) -> None:
        violation = make_violation("image-alt", "img.hero")
        results = [
            make_result("Main", "https://example.test/", violation, browser=None),
            make_result("Main", "https://example.test/", violation, browser="firefox"),
        ]

        assert svc.dedupe(results)["Main"][0].browsers == ("firefox",)

    def test_only_untagged_results_display_unknown(self, svc, make_result, make_violation) -> None:
        results = [make_result("Main", "https://example.test/", make_violation("region", "body"), browser=None)]

        violation = svc.dedupe(results)["Main"][0]

        assert violation.browsers == ()
        assert violation.display_browsers == ("unknown",)


class TestEdgeCases:
    def test_empty_input(self, svc) -> None:
        assert svc.dedupe([]) == {}

    def test_site_without_violations_is_present(self, svc, make_result) -> None:
        assert svc.dedupe([make_result("Quiet", "https://quiet.test/")]) == {"Quiet": []}

    def test_violation_without_nodes_is_skipped(self, svc, make_result, make_violation, caplog) -> None:
        results = [
            make_result(
                "Main",
                "https://example.test/",
                make_violation("ghost"),
                make_violation("image-alt", "img.hero"),
            )
        ]

        with caplog.at_level(logging.WARNING, logger="a11y_audit.services.dedup_service"):
            per_site = svc.dedupe(results)

        assert [v.rule_id for v in per_site["Main"]] == ["image-alt"]
        assert sum("violation_skipped" in record.getMessage() for record in caplog.records) == 1

    def test_sites_keep_first_seen_order(self, svc, make_result, make_violation) -> None:
        results = [
            make_result("Zeta", "https://zeta.test/", make_violation("region", "body")),
            make_result("Alpha", "https://alpha.test/", make_violation("region", "body")),
        ]

        assert list(svc.dedupe(results)) == ["Zeta", "Alpha"]

    def test_is_deterministic_and_idempotent(self, svc, make_result, make_violation) -> None:
        violation = make_violation("image-alt", "img.hero")
        results = [
            make_result("Main", "https://example.test/", violation, browser="firefox"),
            make_result("Main", "https://example.test/", violation, browser="chromium"),
        ]

        first = svc.dedupe(results)
        second = svc.dedupe(results + results)

        assert first == second
