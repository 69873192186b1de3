"""
a11y_audit/config.py

Configuration helpers for audit runs and report generation.

Site settings are read from environment variables, optionally seeded from an
environment-specific file ``env/.env.<environment>``. Variables already set in
the process environment always win over file values.

Per-site variables (``NAME`` is the upper-cased site name)::

    SITE_NAMES                 comma-separated list of configured sites
    NAME_BASE_URL              required
    NAME_PATHS_CSV_FILE        required, relative to A11Y_PAGE_LIST_DIR
    NAME_LOGIN_URL             optional; presence means the site needs a login
    NAME_USERNAME              required when the site needs a login
    NAME_PASSWORD              required when the site needs a login
    NAME_USERNAME_SELECTOR     default "#username"
    NAME_PASSWORD_SELECTOR     default "#password"
    NAME_LOGIN_BUTTON_SELECTOR default "#login-button"
"""

from __future__ import annotations

import argparse
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

DEFAULT_RULESETS: tuple[str, ...] = ("wcag21a", "wcag21aa", "best-practice")
DEFAULT_ENVIRONMENT = "qa"

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigurationError(ValueError):
    """
    Raised when audit configuration is missing or inconsistent.

    Always fatal: it is raised before any page is audited.
    """


# ---------------------------------------------------------------------------
# Environment file loading
# ---------------------------------------------------------------------------


def load_env_file(env_path: Path) -> int:
    """
    Load simple KEY=VALUE pairs from *env_path* into ``os.environ``.

    Existing process environment variables are not overwritten. Returns the
    number of variables that were set.
    """

    loaded = 0
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value
            loaded += 1
    return loaded


def load_environment_config(environment: str, *, env_dir: str | Path = "env") -> Path:
    """
    Load ``<env_dir>/.env.<environment>`` and return the resolved file path.
    """

    env_path = Path(env_dir) / f".env.{environment.strip().lower()}"
    if not env_path.is_absolute():
        env_path = (Path.cwd() / env_path).resolve()
    if not env_path.exists():
        raise ConfigurationError(f"Environment file {env_path} not found")
    load_env_file(env_path)
    return env_path


def _get_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_bool_env(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in _TRUTHY


def _get_int_env(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _split_csv(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


# ---------------------------------------------------------------------------
# Site configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Site:
    """
    One audited application with its page list and optional login.
    """

    name: str
    base_url: str
    paths_csv_file: str
    requires_login: bool
    login_url: str | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class LoginSelectors:
    """
    CSS selectors used to fill and submit a site's login form.
    """

    username_input: str
    password_input: str
    login_button: str


def get_login_selectors(site_name: str) -> LoginSelectors:
    """
    Return login form selectors for *site_name*, falling back to defaults.
    """

    prefix = site_name.upper()
    return LoginSelectors(
        username_input=_get_str_env(f"{prefix}_USERNAME_SELECTOR", "#username"),
        password_input=_get_str_env(f"{prefix}_PASSWORD_SELECTOR", "#password"),
        login_button=_get_str_env(f"{prefix}_LOGIN_BUTTON_SELECTOR", "#login-button"),
    )


def get_sites_configuration(
    target_site: str | None = None,
    *,
    bypass_login_all: bool = False,
    bypass_login_sites: Sequence[str] = (),
) -> list[Site]:
    """
    Resolve the sites to audit from environment variables.

    When *target_site* is given only that site is resolved; otherwise every
    name listed in ``SITE_NAMES``.

    Raises
    ------
    ConfigurationError
        A site lacks its base URL or page list, a site needing a login lacks
        credentials, or no site could be resolved at all.
    """

    site_names = [target_site] if target_site else _split_csv(os.getenv("SITE_NAMES"))
    page_list_dir = Path(_get_str_env("A11Y_PAGE_LIST_DIR", str(Path("tests") / "data")))

    sites: list[Site] = []
    for name in site_names:
        prefix = name.upper()
        base_url = _get_optional_str_env(f"{prefix}_BASE_URL")
        paths_csv_file = _get_optional_str_env(f"{prefix}_PATHS_CSV_FILE")
        if not base_url or not paths_csv_file:
            raise ConfigurationError(f"Missing configuration for site {name}")

        full_paths_csv_file = page_list_dir / paths_csv_file
        if not full_paths_csv_file.is_absolute():
            full_paths_csv_file = Path.cwd() / full_paths_csv_file

        bypass_login = bypass_login_all or name in bypass_login_sites
        login_url = _get_optional_str_env(f"{prefix}_LOGIN_URL")
        requires_login = not bypass_login and login_url is not None

        if not requires_login:
            sites.append(
                Site(
                    name=name,
                    base_url=base_url,
                    paths_csv_file=str(full_paths_csv_file),
                    requires_login=False,
                )
            )
            continue

        username = _get_optional_str_env(f"{prefix}_USERNAME")
        password = _get_optional_str_env(f"{prefix}_PASSWORD")
        if not username or not password:
            raise ConfigurationError(f"Missing login configuration for site {name}")

        sites.append(
            Site(
                name=name,
                base_url=base_url,
                paths_csv_file=str(full_paths_csv_file),
                requires_login=True,
                login_url=login_url,
                username=username,
                password=password,
            )
        )

    if not sites:
        raise ConfigurationError("No sites configured or target site not found")
    return sites


# ---------------------------------------------------------------------------
# Audit options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AuditOptions:
    """
    Options recognised for one audit invocation.
    """

    site: str | None = None
    path: str | None = None
    rulesets: tuple[str, ...] = DEFAULT_RULESETS
    bypass_login_all: bool = False
    bypass_login_sites: tuple[str, ...] = ()
    environment: str = DEFAULT_ENVIRONMENT

    def bypasses_login(self, site_name: str) -> bool:
        return self.bypass_login_all or site_name in self.bypass_login_sites


def build_audit_option_parser(
    parser: argparse.ArgumentParser | None = None,
) -> argparse.ArgumentParser:
    """
    Register audit options on *parser*; defaults come from the environment.
    """

    parser = parser or argparse.ArgumentParser(description="Accessibility audit options.")
    parser.add_argument(
        "--site",
        default=_get_optional_str_env("SITE"),
        help="Audit only this site.",
    )
    parser.add_argument(
        "--path",
        default=_get_optional_str_env("SINGLE_PAGE_PATH"),
        help="Audit a single page path; requires --site.",
    )
    parser.add_argument(
        "--rulesets",
        default=_get_optional_str_env("RULESETS"),
        help="Comma-separated guideline tags (default: %s)." % ",".join(DEFAULT_RULESETS),
    )
    parser.add_argument(
        "--bypass-login",
        dest="bypass_login",
        action="append",
        nargs="?",
        const="true",
        default=None,
        help="Skip login for all sites, or for the named site (repeatable).",
    )
    parser.add_argument(
        "--env",
        dest="environment",
        default=_get_str_env("ENV", DEFAULT_ENVIRONMENT),
        help="Environment name selecting env/.env.<name>.",
    )
    return parser


def audit_options_from_namespace(args: argparse.Namespace) -> AuditOptions:
    """
    Validate parsed arguments and build :class:`AuditOptions`.
    """

    site = args.site or None
    path = args.path or None
    if path and not site:
        raise ConfigurationError(
            "To test a single page, you must specify a site using --site=SiteName"
        )

    bypass_values = list(args.bypass_login or [])
    bypass_login_all = _get_bool_env("BYPASS_LOGIN_ALL", False)
    bypass_login_sites = _split_csv(os.getenv("BYPASS_LOGIN_SITES"))
    for value in bypass_values:
        if value.strip().lower() == "true":
            bypass_login_all = True
        elif value.strip():
            bypass_login_sites.append(value.strip())

    rulesets = tuple(_split_csv(args.rulesets)) or DEFAULT_RULESETS

    return AuditOptions(
        site=site,
        path=path,
        rulesets=rulesets,
        bypass_login_all=bypass_login_all,
        bypass_login_sites=tuple(dict.fromkeys(bypass_login_sites)),
        environment=(args.environment or DEFAULT_ENVIRONMENT).strip().lower(),
    )


def parse_audit_options(argv: Sequence[str] | None = None) -> AuditOptions:
    """
    Parse audit options from *argv* (``sys.argv[1:]`` when omitted).
    """

    args = build_audit_option_parser().parse_args(argv)
    return audit_options_from_namespace(args)


# ---------------------------------------------------------------------------
# Report settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReportSettings:
    """
    Output locations and rendering limits for report generation.
    """

    reports_dir: str = "accessibility-reports"
    browser_results_subdir: str = "browser-results"
    data_subdir: str = "data"
    run_summary_dir: str = "test-results"
    docs_base_url: str = "https://dequeuniversity.com/rules/axe/4.10/"
    max_listed_elements: int = 10
    html_preview_elements: int = 3

    @property
    def browser_results_dir(self) -> Path:
        return Path(self.reports_dir) / self.browser_results_subdir

    @property
    def data_dir(self) -> Path:
        return Path(self.reports_dir) / self.data_subdir


@lru_cache(maxsize=1)
def get_report_settings() -> ReportSettings:
    """
    Return cached report settings from environment variables.
    """

    return ReportSettings(
        reports_dir=_get_str_env("A11Y_REPORTS_DIR", "accessibility-reports"),
        run_summary_dir=_get_str_env("A11Y_RUN_SUMMARY_DIR", "test-results"),
        docs_base_url=_get_str_env(
            "A11Y_RULE_DOCS_BASE_URL",
            "https://dequeuniversity.com/rules/axe/4.10/",
        ),
        max_listed_elements=max(1, _get_int_env("A11Y_MAX_LISTED_ELEMENTS", 10)),
        html_preview_elements=max(1, _get_int_env("A11Y_HTML_PREVIEW_ELEMENTS", 3)),
    )
