"""Compare the crates and releases known to the database with those in the registry index."""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterable, Iterator, Mapping
from contextlib import closing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO

log = logging.getLogger(__name__)


class DiffKind(Enum):
    """Where a key was found when two maps were compared."""

    BOTH = "both"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Diff:
    """One key of a map comparison.

    For ``BOTH`` the value is the diff of the two values (``None`` when the
    values cannot be compared further); otherwise it is the value on the side
    the key was found.
    """

    kind: DiffKind
    key: str
    value: Any = None


def _diff_values(left: Any, right: Any) -> Any:
    differ = getattr(left, "diff", None)
    return differ(right) if callable(differ) else None


def diff_maps(left: Mapping[str, Any], right: Mapping[str, Any]) -> Iterator[Diff]:
    """Walk two maps in key order, reporting keys found on one or both sides."""
    for key in sorted(left.keys() | right.keys()):
        if key in left and key in right:
            yield Diff(DiffKind.BOTH, key, _diff_values(left[key], right[key]))
        elif key in left:
            yield Diff(DiffKind.LEFT, key, left[key])
        else:
            yield Diff(DiffKind.RIGHT, key, right[key])


@dataclass
class Crate:
    """A crate and the set of its release versions."""

    releases: set[str] = field(default_factory=set)

    def diff(self, other: Crate) -> list[Diff]:
        """Compare the releases of two crates."""
        return list(
            diff_maps(dict.fromkeys(self.releases), dict.fromkeys(other.releases))
        )


@dataclass
class Data:
    """All crates known to one source, keyed by name."""

    crates: dict[str, Crate] = field(default_factory=dict)

    def diff(self, other: Data) -> Iterator[Diff]:
        """Compare the crates of two sources; shared crates carry a release diff."""
        return diff_maps(self.crates, other.crates)


def load_from_db(conn) -> Data:
    """Load every crate and release from a DB-API connection."""
    with closing(conn.cursor()) as cursor:
        cursor.execute(
            """
            SELECT crates.name, releases.version
            FROM crates
            INNER JOIN releases ON releases.crate_id = crates.id
            ORDER BY crates.id, releases.id
            """
        )
        rows = cursor.fetchall()

    data = Data()
    for name, version in rows:
        data.crates.setdefault(name, Crate()).releases.add(version)
    return data


def load_from_index(crates: Iterable[tuple[str, Iterable[str]]]) -> Data:
    """Build data from ``(name, versions)`` pairs read out of the registry index."""
    return Data(
        crates={name: Crate(releases=set(versions)) for name, versions in crates}
    )


def find_inconsistencies(db_data: Data, index_data: Data) -> Iterator[str]:
    """Yield one message for every crate or release present on only one side."""
    for crate in db_data.diff(index_data):
        name = crate.key
        if crate.kind is DiffKind.LEFT:
            yield f"Crate in db not in index: {name}"
        elif crate.kind is DiffKind.RIGHT:
            yield f"Crate in index not in db: {name}"
        else:
            for release in crate.value:
                if release.kind is DiffKind.LEFT:
                    yield f"Release in db not in index: {name} {release.key}"
                elif release.kind is DiffKind.RIGHT:
                    yield f"Release in index not in db: {name} {release.key}"


def run_check(
    conn,
    index_crates: Iterable[tuple[str, Iterable[str]]],
    dry_run: bool = True,
    out: TextIO | None = None,
) -> None:
    """Report differences between the database and the index.

    Only a dry run is supported: differences are written to ``out`` and
    nothing is changed.
    """
    if not dry_run:
        raise ValueError("only a --dry-run synchronization is supported currently")
    out = out if out is not None else sys.stdout

    log.info("Loading data from database...")
    start = time.monotonic()
    db_data = load_from_db(conn)
    log.info("...loaded in %.3fs", time.monotonic() - start)

    log.info("Loading data from index...")
    start = time.monotonic()
    index_data = load_from_index(index_crates)
    log.info("...loaded in %.3fs", time.monotonic() - start)

    for message in find_inconsistencies(db_data, index_data):
        print(message, file=out)