"""Releases of a crate, ordered by semantic version."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from docserve.versionreq import Version

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Release:
    """One stored release of a crate."""

    id: int
    version: Version
    build_status: bool
    yanked: bool
    is_library: bool
    rustdoc_status: bool


def sort_releases(releases: Iterable[Release]) -> list[Release]:
    """Return the releases newest version first."""
    return sorted(releases, key=lambda release: release.version, reverse=True)


def releases_from_rows(crate_id: int, rows: Iterable[Mapping[str, Any]]) -> list[Release]:
    """Build releases from database rows, newest version first.

    Rows whose version is not valid semver are reported and skipped.
    """
    releases = []
    for row in rows:
        text = row["version"]
        try:
            version = Version.parse(text)
        except ValueError as exc:
            log.error(
                "invalid semver in database for crate %s: %s: %s", crate_id, text, exc
            )
            continue
        releases.append(
            Release(
                id=row["id"],
                version=version,
                build_status=bool(row["build_status"]),
                yanked=bool(row["yanked"]),
                is_library=bool(row["is_library"]),
                rustdoc_status=bool(row["rustdoc_status"]),
            )
        )
    return sort_releases(releases)


def latest_release(releases: list[Release]) -> Release:
    """Newest non-yanked, non-prerelease release, or the newest release if there is none.

    ``releases`` must be sorted newest first.
    """
    if not releases:
        raise ValueError("a crate without releases has no latest release")
    return next(
        (r for r in releases if not r.version.pre and not r.yanked),
        releases[0],
    )


def last_successful_build(releases: Iterable[Release], build_status: bool) -> str | None:
    """For a failed build, the newest non-yanked release that built; else None."""
    if build_status:
        return None
    return next(
        (str(r.version) for r in releases if r.build_status and not r.yanked),
        None,
    )