#!/usr/bin/env python3
"""Assemble the canonical package record for one repository.

Usage:
  python scripts/mirror.py --repo owner/repo [--config app.yaml]

Prints the record as JSON. Exit codes: 0 success, 1 configuration error,
2 assembly failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from registry_backend.assembler import PackageAssembler
from registry_backend.config import load_settings
from registry_backend.errors import ConfigError
from registry_backend.host import HostClient
from registry_backend.models import RepoReference


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--repo", required=True, help="Repository as owner/repo")
    parser.add_argument("--config", type=Path, default=None)
    args = parser.parse_args()

    try:
        settings = load_settings(args.config)
        repo = RepoReference.parse(args.repo)
    except (ConfigError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)

    result = PackageAssembler(HostClient(settings)).create_package(repo)
    if not result.ok:
        print(f"ERROR: {result.short.value}: {result.content}", file=sys.stderr)
        return 2

    print(json.dumps(result.content.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
