from __future__ import annotations

import pytest

from registry_backend.semver import is_strict_semver, satisfies


@pytest.mark.parametrize(
    "installed, expr",
    [
        ("1.2.3", "1.2.3"),
        ("1.2.3", "=1.2.3"),
        ("1.2.3", "*"),
        ("1.9.0", "^1.2.3"),
        ("1.2.9", "~1.2.3"),
        ("1.5.0", ">=1.0.0 <2.0.0"),
        ("1.5.0", ">= 1.0.0 < 2.0.0"),
        ("3.0.0", "^1.0.0 || ^3.0.0"),
    ],
)
def test_satisfied(installed, expr):
    assert satisfies(installed, expr)


@pytest.mark.parametrize(
    "installed, expr",
    [
        ("2.0.0", "^1.2.3"),
        ("1.3.0", "~1.2.3"),
        ("2.0.0", ">=1.0.0 <2.0.0"),
        ("0.9.0", ">1.0.0"),
        ("2.0.0", "^1.0.0 || ^3.0.0"),
        ("not-a-version", "*"),
        ("1.0.0", "^garbage"),
        ("1.0.0", ""),
    ],
)
def test_not_satisfied(installed, expr):
    assert not satisfies(installed, expr)


def test_invalid_alternative_does_not_hide_valid_one():
    assert satisfies("1.0.0", "^garbage || 1.0.0")


@pytest.mark.parametrize("value", ["0.0.0", "1.2.3", "10.20.30"])
def test_strict_semver(value):
    assert is_strict_semver(value)


@pytest.mark.parametrize("value", ["1.2", "01.2.3", "v1.2.3", "1.2.3-beta", None, 123])
def test_not_strict_semver(value):
    assert not is_strict_semver(value)
