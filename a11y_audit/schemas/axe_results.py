"""
a11y_audit/schemas/axe_results.py

Structural contract for raw scan payloads produced by the audit engine.

Rule-result lists are kept as untyped entries at the payload level so the
validator can quarantine one malformed entry without rejecting the page.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawNode(BaseModel):
    """
    One affected element as reported by the audit engine.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    target: list[str | list[str]] = Field(min_length=1)
    failure_summary: str | None = Field(default=None, alias="failureSummary")
    html: str | None = None

    @field_validator("target", mode="before")
    @classmethod
    def _wrap_single_selector(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class RawRuleResult(BaseModel):
    """
    One rule outcome (violation, pass, incomplete or inapplicable).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1)
    impact: str | None = None
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    help: str | None = None
    help_url: str | None = Field(default=None, alias="helpUrl")
    nodes: list[RawNode] = Field(default_factory=list)


class RawScanPayload(BaseModel):
    """
    Audit engine output for one page, with injected page/site/browser fields.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    site_name: str = Field(min_length=1, alias="siteName")
    page_name: str = Field(min_length=1, alias="pageName")
    url: str = Field(min_length=1)
    browser: str | None = None
    timestamp: str | None = None
    test_engine: dict[str, Any] | None = Field(default=None, alias="testEngine")
    test_runner: dict[str, Any] | None = Field(default=None, alias="testRunner")
    test_environment: dict[str, Any] | None = Field(default=None, alias="testEnvironment")
    violations: list[Any] = Field(default_factory=list)
    passes: list[Any] = Field(default_factory=list)
    incomplete: list[Any] = Field(default_factory=list)
    inapplicable: list[Any] = Field(default_factory=list)

    @field_validator("browser", mode="before")
    @classmethod
    def _blank_browser_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
