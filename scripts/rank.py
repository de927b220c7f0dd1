#!/usr/bin/env python3
"""Rank or list a local JSON array of package records.

Usage:
  python scripts/rank.py --input packages.json [--query q] [--sort stars]
      [--direction asc] [--algorithm lcs] [--engine 1.60.0] [--page 2]
      [--per-page 10] [--config app.yaml]

Without --query the records are listed (default sort: downloads); with it they
are ranked against the query (default sort: relevance). --algorithm and
--per-page default to SEARCHALGORITHM and PAGINATE from the configuration.
Exit codes: 0 success, 1 configuration error, 2 listing failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from registry_backend.collection import list_packages, search_packages
from registry_backend.config import load_settings
from registry_backend.errors import ConfigError


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--input", type=Path, required=True)
    parser.add_argument("--query", default=None)
    parser.add_argument("--sort", default=None)
    parser.add_argument("--direction", default="desc")
    parser.add_argument("--algorithm", default=None)
    parser.add_argument("--engine", default=None)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--per-page", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None)
    args = parser.parse_args()

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)

    packages = json.loads(args.input.read_text(encoding="utf-8"))

    if args.query is None:
        result = list_packages(
            packages,
            sort=args.sort or "downloads",
            direction=args.direction,
            engine=args.engine,
            page=args.page,
            per_page=args.per_page,
            settings=settings,
        )
    else:
        result = search_packages(
            args.query,
            packages,
            algorithm=args.algorithm,
            sort=args.sort or "relevance",
            direction=args.direction,
            engine=args.engine,
            page=args.page,
            per_page=args.per_page,
            settings=settings,
        )

    if not result.ok:
        print(f"ERROR: {result.short.value}: {result.content}", file=sys.stderr)
        return 2

    print(json.dumps(result.content.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
