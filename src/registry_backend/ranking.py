"""String similarity scoring used to rank packages against a search query.

Every scorer takes two strings and returns a similarity in ``[0, 1]`` where
``1.0`` means identical. Scorers are pure; the registry at the bottom maps the
configured algorithm names onto them.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Sequence
from typing import TypeAlias

from .errors import ConfigError

Scorer: TypeAlias = Callable[[str, str], float]

_WORD_SEPARATORS = re.compile(r"[ _]")


def edit_distance(s1: str, s2: str, *, ignore_case: bool = True) -> int:
    """Levenshtein distance (unit costs) computed over a single DP row."""
    if ignore_case:
        s1 = s1.lower()
        s2 = s2.lower()

    row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        diagonal = row[0]
        row[0] = i
        for j, c2 in enumerate(s2, start=1):
            above = row[j]
            if c1 == c2:
                row[j] = diagonal
            else:
                row[j] = min(diagonal, above, row[j - 1]) + 1
            diagonal = above
    return row[len(s2)]


def _similarity(s1: str, s2: str, *, ignore_case: bool) -> float:
    longer, shorter = (s1, s2) if len(s1) >= len(s2) else (s2, s1)
    if not longer:
        return 1.0
    distance = edit_distance(longer, shorter, ignore_case=ignore_case)
    return (len(longer) - distance) / float(len(longer))


def levenshtein(s1: str, s2: str) -> float:
    """Case-insensitive edit-distance similarity, normalised by the longer input."""
    return _similarity(s1, s2, ignore_case=True)


def _mean(values: Sequence[float]) -> float:
    # No values means no defined mean; NaN is returned rather than a made-up score.
    if not values:
        return math.nan
    return sum(values) / len(values)


def _tokens(value: str) -> list[str]:
    return [token for token in _WORD_SEPARATORS.sub("-", value).split("-") if token]


def levenshtein_wsdm(s1: str, s2: str) -> float:
    """Word-separator double mean of Levenshtein similarities.

    Both inputs are split on ``-``, ``_`` and spaces. Every left token is scored
    against every right token and the row means are averaged. Tokens are
    compared case-sensitively and are not realigned, so token order matters.
    An input with no tokens yields ``NaN``.
    """
    left = _tokens(s1)
    right = _tokens(s2)

    means = [_mean([_similarity(a, b, ignore_case=False) for b in right]) for a in left]
    return _mean(means)


def longest_common_subsequence(s1: str, s2: str) -> str:
    """Return one longest common subsequence of ``s1`` and ``s2``."""
    rows, cols = len(s1), len(s2)
    table = [[0] * (cols + 1) for _ in range(rows + 1)]

    for i in range(1, rows + 1):
        for j in range(1, cols + 1):
            if s1[i - 1] == s2[j - 1]:
                table[i][j] = table[i - 1][j - 1] + 1
            else:
                table[i][j] = max(table[i - 1][j], table[i][j - 1])

    chars: list[str] = []
    i, j = rows, cols
    while i > 0 and j > 0:
        if s1[i - 1] == s2[j - 1]:
            chars.append(s1[i - 1])
            i -= 1
            j -= 1
        elif table[i - 1][j] >= table[i][j - 1]:
            i -= 1
        else:
            j -= 1

    return "".join(reversed(chars))


def lcs(s1: str, s2: str) -> float:
    """LCS length relative to the first input. Not symmetric."""
    if not s1:
        return 1.0 if not s2 else 0.0
    return len(longest_common_subsequence(s1, s2)) / len(s1)


DEFAULT_ALGORITHM = "levenshtein_distance"

ALGORITHMS: dict[str, Scorer] = {
    "levenshtein_distance": levenshtein,
    "levenshtein_distance_wsdm": levenshtein_wsdm,
    "lcs": lcs,
}


def get_algorithm(name: str) -> Scorer:
    """Return the scorer registered as ``name`` or raise ConfigError."""
    scorer = ALGORITHMS.get(name)
    if scorer is None:
        known = ", ".join(get_known_algorithms())
        raise ConfigError(f"Unrecognized search algorithm '{name}'. Known algorithms: {known}")
    return scorer


def get_known_algorithms() -> list[str]:
    """Return a sorted list of all registered algorithm names."""
    return sorted(ALGORITHMS.keys())
