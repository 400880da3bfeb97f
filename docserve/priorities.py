"""Build-queue priorities stored as LIKE patterns in the ``crate_priorities`` table.

Functions take a DB-API connection that uses the ``qmark`` parameter style.
Pattern matching follows SQL ``LIKE`` rules: ``%`` matches any run of
characters, ``_`` one character, and a backslash escapes the next character.
Matching is case-sensitive.
"""

from __future__ import annotations

import re
from contextlib import closing

DEFAULT_PRIORITY = 0


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    escaped = False
    for char in pattern:
        if escaped:
            parts.append(re.escape(char))
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    if escaped:
        raise ValueError("LIKE pattern must not end with escape character")
    return re.compile("".join(parts), re.DOTALL)


def get_crate_priority(conn, name: str) -> int:
    """Return the priority of the first pattern matching ``name``, or the default."""
    with closing(conn.cursor()) as cursor:
        cursor.execute("SELECT pattern, priority FROM crate_priorities")
        rows = cursor.fetchall()
    for pattern, priority in rows:
        if _like_to_regex(pattern).fullmatch(name):
            return priority
    return DEFAULT_PRIORITY


def set_crate_priority(conn, pattern: str, priority: int) -> None:
    """Give every crate matching ``pattern`` the given priority."""
    _like_to_regex(pattern)
    with closing(conn.cursor()) as cursor:
        cursor.execute(
            "INSERT INTO crate_priorities (pattern, priority) VALUES (?, ?)",
            (pattern, priority),
        )


def remove_crate_priority(conn, pattern: str) -> int | None:
    """Remove ``pattern``; return the priority it had, or None if it was absent."""
    with closing(conn.cursor()) as cursor:
        cursor.execute(
            "SELECT priority FROM crate_priorities WHERE pattern = ?", (pattern,)
        )
        rows = cursor.fetchall()
        cursor.execute("DELETE FROM crate_priorities WHERE pattern = ?", (pattern,))
    return rows[0][0] if rows else None