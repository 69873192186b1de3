"""
Generate accessibility reports and run summaries from CLI.
"""

from __future__ import annotations

from a11y_audit.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
