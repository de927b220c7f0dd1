"""Package manifest validation, usable as a library and as a CLI."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

_SCHEMA_PATH = Path(__file__).resolve().parents[1] / "schemas" / "manifest.schema.json"
_DEFAULT_INPUT = Path("package.json")


class ManifestError(ValueError):
    """Raised when a manifest cannot be decoded or fails schema validation."""


def _load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


@lru_cache(maxsize=None)
def _validator(schema_path: Path = _SCHEMA_PATH) -> Draft202012Validator:
    return Draft202012Validator(_load_json(schema_path))


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_manifest(document: Any, schema_path: Path = _SCHEMA_PATH) -> dict[str, Any]:
    """Return ``document`` unchanged if it is a valid manifest.

    Raises:
        ManifestError: With one line per schema violation.
    """
    errors = sorted(_validator(schema_path).iter_errors(document), key=lambda e: list(e.path))
    if errors:
        raise ManifestError("\n" + _format_errors(errors))
    return document


def parse_manifest(text: str) -> dict[str, Any]:
    """Decode manifest JSON text and validate it."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Manifest is not valid JSON: {exc}") from exc
    return validate_manifest(document)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--input",
        type=Path,
        default=_DEFAULT_INPUT,
        help="Path to the package.json to validate",
    )
    parser.add_argument(
        "--schema",
        type=Path,
        default=_SCHEMA_PATH,
        help="Path to the JSON schema used for validation",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        validate_manifest(_load_json(args.input), args.schema)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"ERROR: Failed to read JSON: {exc}", file=sys.stderr)
        return 1
    except ManifestError as exc:
        print(f"ERROR: Manifest failed validation:{exc}", file=sys.stderr)
        return 1

    print(f"Manifest {args.input} is valid against {args.schema}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
