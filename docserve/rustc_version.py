"""Parsing of rustc version strings and selection of the matching stylesheet."""

from __future__ import annotations

import re
from datetime import date

_VERSION_RE = re.compile(r" ([\w.-]+) \((\w+) (\d+)-(\d+)-(\d+)\)")
_DATE_RE = re.compile(r" (\d+)-(\d+)-(\d+)\)\Z")

# Date on which rustdoc switched to its new page layout.
_NEW_LAYOUT_DATE = date(2021, 12, 5)

NEW_STYLE_FILE = "rustdoc-2021-12-05.css"
OLD_STYLE_FILE = "rustdoc.css"


def parse_rustc_version(version: str) -> str:
    """Turn a rustc version string into ``YYYYMMDD-<version>-<hash>``."""
    match = _VERSION_RE.search(version)
    if match is None:
        raise ValueError("Failed to parse rustc version")
    number, commit, year, month, day = match.groups()
    return f"{year}{month}{day}-{number}-{commit}"


def parse_rustc_date(version: str) -> date:
    """Return the build date found at the end of a rustc version string."""
    match = _DATE_RE.search(version)
    if match is None:
        raise ValueError("Failed to parse rustc date")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def get_correct_docsrs_style_file(version: str) -> str:
    """Pick the stylesheet that suits the rustdoc that produced a release."""
    if _NEW_LAYOUT_DATE < parse_rustc_date(version):
        return NEW_STYLE_FILE
    return OLD_STYLE_FILE