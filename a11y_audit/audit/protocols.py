"""
a11y_audit/audit/protocols.py

Seams to the browser automation layer.

The runner never drives a browser itself; a test harness supplies these.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from a11y_audit.config import LoginSelectors, Site


class PageAuditor(Protocol):
    def audit(self, url: str, *, tags: Sequence[str]) -> Mapping[str, Any]:
        """
        Navigate to *url*, run the audit engine restricted to *tags* and
        return its raw result payload.
        """


class SiteAuthenticator(Protocol):
    def authenticate(self, site: Site, selectors: LoginSelectors) -> None:
        """
        Log into *site*; raise on failure.
        """
