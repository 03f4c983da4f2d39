#!/usr/bin/env python3
"""Apply the WMTS tile locator to JSON-lines records.

Each input line is one JSON object whose WMTS fields were already extracted
upstream (e.g. {"wmts": {"zoomlevel": "23", "col": "561", ...}}). Each output
line is the same object annotated under the configured target group.
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from collections import Counter
from contextlib import ExitStack
from typing import IO, Dict, Iterable

# Make the repository root importable when run from a checkout
THIS_DIR = os.path.dirname(__file__)
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from app.logging_setup import configure_logging  # type: ignore
from app.settings import LocatorSettings, build_settings_from_env, load_config_file  # type: ignore
from app.wmts.fields import get_field, group_ref  # type: ignore
from app.wmts.locator import TileLocator  # type: ignore


def enrich_lines(lines: Iterable[str], out: IO[str], locator: TileLocator) -> Dict[str, int]:
    """Filter every non-blank line into `out`; returns aggregate counters.

    Raises ValueError on a line that is not a JSON object.
    """
    agg: Counter = Counter()
    errmsg_ref = group_ref(locator.settings.target, "errmsg")
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"line {lineno}: invalid JSON: {e}") from e
        if not isinstance(record, dict):
            raise ValueError(f"line {lineno}: expected a JSON object")
        locator.filter(record)
        agg["records"] += 1
        err = get_field(record, errmsg_ref)
        if err:
            agg[f"failed: {err}"] += 1
        else:
            agg["located"] += 1
        out.write(json.dumps(record, ensure_ascii=False) + "\n")
    return dict(agg)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Enrich WMTS request records with tile coordinates.")
    ap.add_argument("--input", help="JSON-lines input (default: stdin)")
    ap.add_argument("--output", help="JSON-lines output (default: stdout)")
    ap.add_argument("--config", help="JSON settings file (default: WMTS_* environment)")
    args = ap.parse_args(argv)

    # stdout may carry the records, logs go to stderr
    configure_logging(stream=sys.stderr)
    settings = LocatorSettings(**load_config_file(args.config)) if args.config else build_settings_from_env()
    locator = TileLocator(settings)

    with ExitStack() as stack:
        src = stack.enter_context(open(args.input, "r", encoding="utf-8")) if args.input else sys.stdin
        dst = stack.enter_context(open(args.output, "w", encoding="utf-8")) if args.output else sys.stdout
        try:
            agg = enrich_lines(src, dst, locator)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            sys.exit(2)

    print(json.dumps(agg, indent=2), file=sys.stderr)


if __name__ == "__main__":
    main()
