"""
tests/test_html_report.py

Parses the rendered HTML report with BeautifulSoup and checks structure,
counts and escaping. Filtering itself runs client-side and is not exercised.
"""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup
from jinja2 import TemplateNotFound

from a11y_audit.reporting.html_renderer import HTMLReportRenderer, render_html, report_title


@pytest.fixture()
def dataset(build_dataset, make_result, make_violation):
    return build_dataset(
        [
            make_result(
                "Main",
                "https://main.test/",
                make_violation(
                    "image-alt",
                    *[f"img.thumb-{i}" for i in range(5)],
                    impact="critical",
                    tags=("wcag2a", "wcag111", "cat.text-alternatives"),
                    failure_summary="Fix any of the following:\n  Element does not have an alt attribute\n  Element has no title attribute",
                ),
                make_violation(
                    "label",
                    "input#q",
                    description="<script>alert('x')</script>",
                    tags=("wcag2a", "wcag412"),
                ),
                browser="firefox",
            ),
            make_result(
                "Main",
                "https://main.test/",
                make_violation(
                    "image-alt",
                    *[f"img.thumb-{i}" for i in range(5)],
                    impact="critical",
                    tags=("wcag2a", "wcag111", "cat.text-alternatives"),
                ),
                browser="chromium",
            ),
            make_result("Docs", "https://docs.test/", browser="chromium"),
        ]
    )


@pytest.fixture()
def soup(dataset) -> BeautifulSoup:
    return BeautifulSoup(render_html(dataset), "html.parser")


def test_title_reflects_multiple_browsers(soup) -> None:
    assert soup.title.string == "Multi-Browser Accessibility Audit Report"


def test_summary_cards(soup) -> None:
    values = [card.select_one(".value").get_text(strip=True) for card in soup.select(".cards .card")]

    assert values[:2] == ["2", "1"]


def test_one_section_per_site(soup) -> None:
    sections = soup.select(".site-section")

    assert [section["data-site"] for section in sections] == ["Main", "Docs"]
    assert "Pages Scanned: 1" in sections[0].select_one(".site-banner").get_text()
    assert sections[0].select_one(".violations-count").get_text(strip=True) == "Filtered Violations: 2"


def test_site_without_violations_shows_message(soup) -> None:
    docs = soup.select_one('.site-section[data-site="Docs"]')

    assert docs.select_one("table.violations") is None
    assert docs.select_one(".no-violations").get_text(strip=True) == "No violations found."


def test_violation_row_attributes_and_cells(soup) -> None:
    row = soup.select_one('.site-section[data-site="Main"] tbody tr')
    cells = row.find_all("td", recursive=False)

    assert row["data-browsers"] == "chromium|firefox"
    assert row["data-impact"] == "critical"
    assert row["data-tags"] == "wcag2a|wcag111"
    assert len(cells) == 10
    assert cells[0].get_text(strip=True) == "chromium, firefox"
    assert cells[3].a["href"] == "https://dequeuniversity.com/rules/axe/4.10/image-alt"
    assert cells[9].get_text(strip=True) == "5"


def test_long_element_lists_are_collapsed(soup) -> None:
    row = soup.select_one('.site-section[data-site="Main"] tbody tr')

    assert len(row.select("ul.elements:not(.hidden-elements) li")) == 3
    assert len(row.select("ul.hidden-elements li")) == 2
    assert row.select_one("button.toggle-elements").get_text(strip=True) == "Show 2 more"


def test_fix_suggestion_is_cleaned(soup) -> None:
    row = soup.select_one('.site-section[data-site="Main"] tbody tr')
    lines = [p.get_text(strip=True) for p in row.select("td.fix p")]

    assert lines == ["Element does not have an alt attribute"]


def test_description_is_escaped(dataset) -> None:
    html = render_html(dataset)

    assert "<script>alert('x')</script>" not in html
    assert "&lt;script&gt;" in html


def test_filter_options(soup) -> None:
    browsers = [option["value"] for option in soup.select("#browserFilter option")]
    tags = [option["value"] for option in soup.select("#wcagFilter option")]

    assert browsers == ["all", "chromium", "firefox"]
    assert "cat.text-alternatives" not in tags
    assert tags == ["all", "wcag111", "wcag2a", "wcag412"]


def test_breakdown_table(soup) -> None:
    rows = soup.select("table.wcag-breakdown tbody tr")

    assert rows[0].find("td").get_text(strip=True) == "wcag2a"


def test_export_links(soup) -> None:
    assert soup.select_one("#exportSummaryCSV")["href"] == "accessibility-summary.csv"
    assert soup.select_one("#exportViolationsCSV")["href"] == "accessibility-violations.csv"


def test_missing_template_raises(dataset, tmp_path) -> None:
    renderer = HTMLReportRenderer(template_path=tmp_path)

    with pytest.raises(TemplateNotFound):
        renderer.render(dataset)


def test_single_site_single_browser_title(build_dataset, make_result) -> None:
    dataset = build_dataset([make_result("Main", "https://main.test/", browser="firefox")])

    assert report_title(dataset.summary) == "Accessibility Audit Report"
