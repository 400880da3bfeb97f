"""Release metadata shown in the page header, and relative time formatting."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass
class MetaData:
    """Header information for one release of a crate.

    ``version_or_latest`` is ``"latest"`` on pages whose URL says so and the
    exact version otherwise; ``version`` is always the exact version.
    """

    name: str
    version: str
    version_or_latest: str
    description: str | None = None
    target_name: str | None = None
    rustdoc_status: bool = False
    default_target: str = ""
    doc_targets: list[str] = field(default_factory=list)
    yanked: bool = False
    rustdoc_css_file: str = "rustdoc.css"

    @staticmethod
    def parse_doc_targets(targets: Any) -> list[str]:
        """Keep the string items of a JSON array; anything else gives no targets."""
        if not isinstance(targets, list):
            return []
        return [item for item in targets if isinstance(item, str)]

    def to_dict(self) -> dict[str, Any]:
        """Return the metadata as a JSON-ready dictionary."""
        return asdict(self)


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def duration_to_str(init: datetime, now: datetime | None = None) -> str:
    """Describe how long ago ``init`` was, relative to ``now`` (default: current UTC time)."""
    if now is None:
        now = datetime.now(timezone.utc)
    micros = (now - init) // timedelta(microseconds=1)
    seconds = _trunc_div(micros, 1_000_000)
    minutes = _trunc_div(seconds, 60)
    hours = _trunc_div(seconds, 3600)
    days = _trunc_div(seconds, 86400)

    if days > 5:
        return init.strftime("%b %d, %Y")
    if 2 <= days <= 5:
        return f"{days} days ago"
    if days == 1:
        return "one day ago"
    if hours > 1:
        return f"{hours} hours ago"
    if hours == 1:
        return "an hour ago"
    if minutes > 1:
        return f"{minutes} minutes ago"
    if minutes == 1:
        return "one minute ago"
    if seconds > 0:
        return f"{seconds} seconds ago"
    return "just now"