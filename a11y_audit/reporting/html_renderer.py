"""
Interactive HTML report.

The page carries every deduplicated violation; filtering by site, browser,
page, impact and guideline tag happens in the browser with no server round
trip. The view model below is built once from the dataset and handed to the
Jinja2 template, which contains no aggregation logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from a11y_audit.domain.scan_result import RECOGNIZED_IMPACTS, EnhancedViolation, is_guideline_tag
from a11y_audit.domain.summary import GlobalSummary, ReportDataset, SiteSummary
from a11y_audit.reporting.formatting import (
    browsers_label,
    fix_suggestion_lines,
    page_path,
    rule_docs_url,
    tags_label,
)

TEMPLATE_PATH = Path(__file__).parent / "templates"
REPORT_TEMPLATE = "report.html.j2"
FILTER_VALUE_SEPARATOR = "|"
TOP_BREAKDOWN_ROWS = 10


@dataclass(frozen=True)
class ViolationRow:
    row_id: str
    browsers: tuple[str, ...]
    browsers_label: str
    page_name: str
    path: str
    page_url: str
    rule_id: str
    docs_url: str
    tags: tuple[str, ...]
    tags_label: str
    guideline_tags: tuple[str, ...]
    impact: str
    description: str
    preview_elements: tuple[str, ...]
    hidden_elements: tuple[str, ...]
    fix_lines: tuple[str, ...]
    occurrences: int

    @property
    def filter_browsers(self) -> str:
        return FILTER_VALUE_SEPARATOR.join(self.browsers)

    @property
    def filter_tags(self) -> str:
        return FILTER_VALUE_SEPARATOR.join(self.guideline_tags)


@dataclass(frozen=True)
class SiteSection:
    site_id: str
    name: str
    summary: SiteSummary
    rows: tuple[ViolationRow, ...]


@dataclass(frozen=True)
class FilterOptions:
    sites: tuple[str, ...]
    browsers: tuple[str, ...]
    pages: tuple[str, ...]
    impacts: tuple[str, ...]
    tags: tuple[str, ...]


def _impact_sort_key(impact: str) -> tuple[int, str]:
    if impact in RECOGNIZED_IMPACTS:
        return RECOGNIZED_IMPACTS.index(impact), impact
    return len(RECOGNIZED_IMPACTS), impact


class HTMLReportRenderer:
    """
    Renders a :class:`ReportDataset` into one self-contained HTML document.
    """

    def __init__(
        self,
        *,
        template_path: str | Path = TEMPLATE_PATH,
        template_name: str = REPORT_TEMPLATE,
        docs_base_url: str = "https://dequeuniversity.com/rules/axe/4.10/",
        preview_elements: int = 3,
        title: str | None = None,
    ) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(template_path)),
            autoescape=select_autoescape(["html", "xml", "html.j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._template_name = template_name
        self._docs_base_url = docs_base_url
        self._preview_elements = max(1, preview_elements)
        self._title = title

    def render(self, dataset: ReportDataset) -> str:
        template = self._env.get_template(self._template_name)
        sections = self._build_sections(dataset)
        return template.render(
            title=self._title or report_title(dataset.summary),
            generated_at=dataset.generated_at,
            summary=dataset.summary,
            breakdown=list(dataset.summary.wcag_breakdown.items())[:TOP_BREAKDOWN_ROWS],
            breakdown_max=max(dataset.summary.wcag_breakdown.values(), default=0),
            sections=sections,
            filters=self._build_filters(dataset, sections),
        )

    # ------------------------------------------------------------------
    # View model
    # ------------------------------------------------------------------

    def _build_sections(self, dataset: ReportDataset) -> list[SiteSection]:
        sections: list[SiteSection] = []
        for index, (site_name, site) in enumerate(dataset.site_summaries.items(), start=1):
            violations = dataset.results.get(site_name, site.violations)
            rows = tuple(
                self._build_row(violation, row_id=f"site{index}-v{position}")
                for position, violation in enumerate(violations, start=1)
            )
            sections.append(SiteSection(site_id=f"site{index}", name=site_name, summary=site, rows=rows))
        return sections

    def _build_row(self, violation: EnhancedViolation, *, row_id: str) -> ViolationRow:
        targets = violation.targets
        return ViolationRow(
            row_id=row_id,
            browsers=violation.display_browsers,
            browsers_label=browsers_label(violation),
            page_name=violation.page_name,
            path=page_path(violation.page_url),
            page_url=violation.page_url,
            rule_id=violation.rule_id,
            docs_url=rule_docs_url(violation, self._docs_base_url),
            tags=violation.tags,
            tags_label=tags_label(violation),
            guideline_tags=tuple(tag for tag in violation.tags if is_guideline_tag(tag)),
            impact=violation.impact,
            description=violation.description,
            preview_elements=tuple(targets[: self._preview_elements]),
            hidden_elements=tuple(targets[self._preview_elements :]),
            fix_lines=tuple(fix_suggestion_lines(violation)),
            occurrences=violation.occurrences,
        )

    @staticmethod
    def _build_filters(dataset: ReportDataset, sections: list[SiteSection]) -> FilterOptions:
        browsers: set[str] = set()
        pages: set[str] = set()
        impacts: set[str] = set()
        tags: set[str] = set()
        for section in sections:
            for row in section.rows:
                browsers.update(row.browsers)
                pages.add(row.page_name)
                impacts.add(row.impact)
                tags.update(row.guideline_tags)
        return FilterOptions(
            sites=tuple(sorted(dataset.site_summaries)),
            browsers=tuple(sorted(browsers)),
            pages=tuple(sorted(pages)),
            impacts=tuple(sorted(impacts, key=_impact_sort_key)),
            tags=tuple(sorted(tags)),
        )


def render_html(dataset: ReportDataset, *, renderer: HTMLReportRenderer | None = None) -> str:
    return (renderer or HTMLReportRenderer()).render(dataset)


def report_title(summary: GlobalSummary) -> str:
    if len(summary.browsers) > 1:
        return "Multi-Browser Accessibility Audit Report"
    if summary.site_count > 1:
        return "Multi-Site Accessibility Audit Report"
    return "Accessibility Audit Report"
