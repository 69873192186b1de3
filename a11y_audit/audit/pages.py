"""
a11y_audit/audit/pages.py

Page lists: one CSV per site with ``name`` and ``path`` columns.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path

REQUIRED_COLUMNS = ("name", "path")


class PageListError(ValueError):
    """
    Raised when a site's page list cannot be read.
    """

    def __init__(self, path: str | Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = str(path)
        self.message = message


@dataclass(frozen=True)
class PageInfo:
    name: str
    path: str


def read_pages_from_csv(csv_path: str | Path) -> list[PageInfo]:
    """
    Read ``name,path`` rows from *csv_path*.

    A leading byte-order mark is tolerated; rows where both columns are blank
    are skipped. A row with only one of the two columns is rejected.
    """

    path = Path(csv_path)
    try:
        with path.open("r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            columns = [column.strip().lower() for column in reader.fieldnames or []]
            missing = [column for column in REQUIRED_COLUMNS if column not in columns]
            if missing:
                raise PageListError(path, f"missing column(s): {', '.join(missing)}")
            reader.fieldnames = columns

            pages: list[PageInfo] = []
            for line_number, row in enumerate(reader, start=2):
                name = (row.get("name") or "").strip()
                page_path = (row.get("path") or "").strip()
                if not name and not page_path:
                    continue
                if not name or not page_path:
                    raise PageListError(path, f"line {line_number} needs both name and path")
                pages.append(PageInfo(name=name, path=page_path))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise PageListError(path, str(exc)) from exc
    return pages
