"""Minimal semver range handling built atop packaging.version.

Supported expressions:
- exact versions (e.g., "1.2.3" or "=1.2.3")
- caret ranges ^x.y.z → >=x.y.z,<x+1.0.0
- tilde ranges ~x.y.z → >=x.y.z,<x.y+1.0
- comparator sets split by spaces, e.g., ">=1.0.0 <2.0.0"
- alternatives joined by "||"
"""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version

STRICT_SEMVER = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")

_OPERATOR_GAP = re.compile(r"([<>=]+)\s+")


def _parse_version(v: str) -> Version:
    return Version(v)


def _next_major(v: Version) -> Version:
    return Version(f"{v.major + 1}.0.0")


def _next_minor(v: Version) -> Version:
    return Version(f"{v.major}.{v.minor + 1}.0")


def _matches_comparator(v: Version, token: str) -> bool:
    if token in {"*", "x", "X"}:
        return True
    if token.startswith("^"):
        base = _parse_version(token[1:])
        return base <= v < _next_major(base)
    if token.startswith("~"):
        base = _parse_version(token[1:])
        return base <= v < _next_minor(base)
    if token.startswith(">="):
        return v >= _parse_version(token[2:])
    if token.startswith(">"):
        return v > _parse_version(token[1:])
    if token.startswith("<="):
        return v <= _parse_version(token[2:])
    if token.startswith("<"):
        return v < _parse_version(token[1:])
    if token.startswith("=="):
        return v == _parse_version(token[2:])
    if token.startswith("="):
        return v == _parse_version(token[1:])
    return v == _parse_version(token)


def satisfies(installed: str, expr: str) -> bool:
    """Return True if ``installed`` falls inside the range ``expr``.

    Unparseable versions or ranges never match.
    """
    try:
        v = _parse_version(installed)
    except InvalidVersion:
        return False

    for alternative in expr.split("||"):
        tokens = _OPERATOR_GAP.sub(r"\1", alternative.strip()).split()
        if not tokens:
            continue
        try:
            if all(_matches_comparator(v, token) for token in tokens):
                return True
        except InvalidVersion:
            continue
    return False


def is_strict_semver(value: object) -> bool:
    """True for plain ``MAJOR.MINOR.PATCH`` strings without leading zeros."""
    return isinstance(value, str) and STRICT_SEMVER.match(value) is not None
