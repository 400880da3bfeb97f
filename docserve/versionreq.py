"""Semantic versions and Cargo-style version requirements."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

_IDENT = r"[0-9A-Za-z-]+"
_IDENTS = rf"{_IDENT}(?:\.{_IDENT})*"
_VERSION_RE = re.compile(
    r"(?P<major>[0-9]+)\.(?P<minor>[0-9]+)\.(?P<patch>[0-9]+)"
    rf"(?:-(?P<pre>{_IDENTS}))?"
    rf"(?:\+(?P<build>{_IDENTS}))?"
)
_PART = r"[0-9]+|[*xX]"
_COMPARATOR_RE = re.compile(
    r"(?P<op>>=|<=|>|<|=|~|\^)?\s*"
    rf"(?P<major>{_PART})"
    rf"(?:\.(?P<minor>{_PART}))?"
    rf"(?:\.(?P<patch>{_PART}))?"
    rf"(?:-(?P<pre>{_IDENTS}))?"
    rf"(?:\+(?P<build>{_IDENTS}))?"
)
_WILDCARDS = {"*", "x", "X"}


def _number(text: str) -> int:
    if len(text) > 1 and text.startswith("0"):
        raise ValueError(f"invalid leading zero in {text!r}")
    return int(text)


def _identifiers(text: str | None) -> tuple[str, ...]:
    return tuple(text.split(".")) if text else ()


def _check_prerelease(pre: tuple[str, ...]) -> None:
    for ident in pre:
        if ident.isdigit() and len(ident) > 1 and ident.startswith("0"):
            raise ValueError(f"invalid leading zero in pre-release identifier {ident!r}")


def _pre_key(pre: tuple[str, ...]) -> tuple:
    # A version without a pre-release sorts after every pre-release of it.
    if not pre:
        return (1, ())
    return (0, tuple((0, int(p)) if p.isdigit() else (1, p) for p in pre))


def _build_key(build: tuple[str, ...]) -> tuple:
    if not build:
        return (0, ())
    return (
        1,
        tuple((0, int(b), len(b)) if b.isdigit() else (1, b) for b in build),
    )


@total_ordering
@dataclass(frozen=True)
class Version:
    """A semantic version: ``MAJOR.MINOR.PATCH[-PRE][+BUILD]``."""

    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a strict semantic version; raise ValueError if it is not one."""
        match = _VERSION_RE.fullmatch(text)
        if match is None:
            raise ValueError(f"invalid semver version: {text!r}")
        pre = _identifiers(match["pre"])
        _check_prerelease(pre)
        return cls(
            major=_number(match["major"]),
            minor=_number(match["minor"]),
            patch=_number(match["patch"]),
            pre=pre,
            build=_identifiers(match["build"]),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.pre)

    def _key(self) -> tuple:
        return (
            self.major,
            self.minor,
            self.patch,
            _pre_key(self.pre),
            _build_key(self.build),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


class _Op(Enum):
    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"


@dataclass(frozen=True)
class _Comparator:
    op: _Op
    major: int
    minor: int | None = None
    patch: int | None = None
    pre: tuple[str, ...] = ()

    def matches(self, ver: Version) -> bool:
        op = self.op
        if op is _Op.EXACT:
            return self._exact(ver)
        if op is _Op.GREATER:
            return self._greater(ver)
        if op is _Op.GREATER_EQ:
            return self._exact(ver) or self._greater(ver)
        if op is _Op.LESS:
            return self._less(ver)
        if op is _Op.LESS_EQ:
            return self._exact(ver) or self._less(ver)
        if op is _Op.TILDE:
            return self._tilde(ver)
        if op is _Op.CARET:
            return self._caret(ver)
        return self._wildcard(ver)

    def allows_prerelease_of(self, ver: Version) -> bool:
        return (
            self.major == ver.major
            and self.minor == ver.minor
            and self.patch == ver.patch
            and bool(self.pre)
        )

    def _exact(self, ver: Version) -> bool:
        if ver.major != self.major:
            return False
        if self.minor is not None and ver.minor != self.minor:
            return False
        if self.patch is not None and ver.patch != self.patch:
            return False
        return ver.pre == self.pre

    def _greater(self, ver: Version) -> bool:
        if ver.major != self.major:
            return ver.major > self.major
        if self.minor is None:
            return False
        if ver.minor != self.minor:
            return ver.minor > self.minor
        if self.patch is None:
            return False
        if ver.patch != self.patch:
            return ver.patch > self.patch
        return _pre_key(ver.pre) > _pre_key(self.pre)

    def _less(self, ver: Version) -> bool:
        if ver.major != self.major:
            return ver.major < self.major
        if self.minor is None:
            return False
        if ver.minor != self.minor:
            return ver.minor < self.minor
        if self.patch is None:
            return False
        if ver.patch != self.patch:
            return ver.patch < self.patch
        return _pre_key(ver.pre) < _pre_key(self.pre)

    def _tilde(self, ver: Version) -> bool:
        if ver.major != self.major:
            return False
        if self.minor is not None and ver.minor != self.minor:
            return False
        if self.patch is not None and ver.patch != self.patch:
            return ver.patch > self.patch
        return _pre_key(ver.pre) >= _pre_key(self.pre)

    def _caret(self, ver: Version) -> bool:
        if ver.major != self.major:
            return False
        minor = self.minor
        if minor is None:
            return True
        patch = self.patch
        if patch is None:
            return ver.minor >= minor if self.major > 0 else ver.minor == minor
        if self.major > 0:
            if ver.minor != minor:
                return ver.minor > minor
            if ver.patch != patch:
                return ver.patch > patch
        elif minor > 0:
            if ver.minor != minor:
                return False
            if ver.patch != patch:
                return ver.patch > patch
        elif ver.minor != minor or ver.patch != patch:
            return False
        return _pre_key(ver.pre) >= _pre_key(self.pre)

    def _wildcard(self, ver: Version) -> bool:
        if ver.major != self.major:
            return False
        return self.minor is None or ver.minor == self.minor


_OPS = {op.value: op for op in _Op if op is not _Op.WILDCARD}


def _parse_comparator(text: str) -> _Comparator | None:
    """Parse one comparator; None stands for a bare ``*`` that matches anything."""
    match = _COMPARATOR_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid version requirement: {text!r}")
    op_text = match["op"]
    values: list[int | None] = []
    wildcard = False
    for part in (match["major"], match["minor"], match["patch"]):
        if part is None:
            values.append(None)
        elif part in _WILDCARDS:
            wildcard = True
            values.append(None)
        elif wildcard:
            raise ValueError(f"unexpected number after wildcard in {text!r}")
        else:
            values.append(_number(part))
    major, minor, patch = values
    pre = _identifiers(match["pre"])
    _check_prerelease(pre)
    if pre and patch is None:
        raise ValueError(f"pre-release requires a full version in {text!r}")

    if major is None:
        if op_text not in (None, "="):
            raise ValueError(f"unexpected wildcard after operator in {text!r}")
        return None
    if wildcard and op_text in (None, "=", "^", "~"):
        op = _Op.WILDCARD
    else:
        op = _OPS.get(op_text, _Op.CARET) if op_text else _Op.CARET
    return _Comparator(op=op, major=major, minor=minor, patch=patch, pre=pre)


@dataclass(frozen=True)
class VersionReq:
    """A comma-separated list of comparators, all of which must match.

    With no comparators the requirement is ``*``: it matches every version
    that is not a pre-release.
    """

    comparators: tuple[_Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> VersionReq:
        """Parse a requirement such as ``^1.2``, ``>=1.0, <2`` or ``*``."""
        text = text.strip()
        if not text:
            raise ValueError("empty version requirement")
        comparators = []
        for part in text.split(","):
            part = part.strip()
            if not part:
                raise ValueError(f"empty comparator in {text!r}")
            comparator = _parse_comparator(part)
            if comparator is not None:
                comparators.append(comparator)
        return cls(tuple(comparators))

    def matches(self, version: Version) -> bool:
        """Whether ``version`` satisfies every comparator.

        A pre-release only matches if some comparator names a pre-release of
        the same major, minor and patch.
        """
        if not all(cmp.matches(version) for cmp in self.comparators):
            return False
        if not version.pre:
            return True
        return any(cmp.allows_prerelease_of(version) for cmp in self.comparators)

    def is_star(self) -> bool:
        return not self.comparators