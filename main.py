"""Command line interface for normalising DupSnap duplicate candidate lists."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from app.report import write_csv
from core.candidate_list import (
    dedupe_candidates,
    filter_by_distance,
    load_candidates,
    revalidate,
    save_candidates,
    sort_by_distance,
)
from core.errors import InvalidRecord, SchemaVersionMismatch
from core.schema import pack_document
from core.settings import Settings


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate, upgrade and rank duplicate candidate lists"
    )
    parser.add_argument("--input", required=True, help="Candidate JSON document (schema version 1 or 2)")
    parser.add_argument("--output", help="Where to write the normalised document; stdout when omitted")
    parser.add_argument("--csv", help="Optional CSV file listing the kept candidates")
    parser.add_argument(
        "--max-distance",
        type=float,
        default=None,
        help="Drop candidates whose distance is above this value",
    )
    parser.add_argument(
        "--no-dedupe",
        action="store_true",
        help="Keep every record even when two describe the same pair of files",
    )
    parser.add_argument(
        "--check-files",
        action="store_true",
        help="Drop candidates whose files no longer exist",
    )
    parser.add_argument("--settings", help="Settings JSON file with defaults for the options above")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    settings = Settings(args.settings)
    max_distance = args.max_distance if args.max_distance is not None else settings.get("max_distance")
    if max_distance is not None and max_distance < 0:
        raise SystemExit("--max-distance must be >= 0")
    dedupe = bool(settings.get("dedupe", True)) and not args.no_dedupe
    check_files = args.check_files or bool(settings.get("check_files", False))
    indent = settings.get("indent", 2)

    input_path = Path(args.input).expanduser()
    if not input_path.is_file():
        raise SystemExit(f"Input file does not exist: {input_path}")

    try:
        records, dropped = load_candidates(input_path)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Input is not valid JSON: {exc}")
    except UnicodeDecodeError as exc:
        raise SystemExit(f"Input is not UTF-8 encoded: {exc}")
    except OSError as exc:
        raise SystemExit(f"Cannot read input file {input_path}: {exc}")
    except (InvalidRecord, SchemaVersionMismatch) as exc:
        raise SystemExit(f"Cannot read candidate document {input_path}: {exc}")

    loaded = len(records)
    logging.info("Loaded %d candidates (%d invalid dropped)", loaded, dropped)

    if check_files:
        records = revalidate(records)
    stale = loaded - len(records)
    before_dedupe = len(records)
    if dedupe:
        records = dedupe_candidates(records)
    merged = before_dedupe - len(records)
    records = sort_by_distance(records)
    before_filter = len(records)
    records = filter_by_distance(records, max_distance)
    filtered = before_filter - len(records)

    if args.output:
        save_candidates(args.output, records, indent=indent)
        logging.info("Wrote %d candidates to %s", len(records), args.output)
    else:
        json.dump(pack_document(records), sys.stdout, indent=indent, ensure_ascii=False)
        sys.stdout.write("\n")

    if args.csv:
        rows = write_csv(records, args.csv)
        logging.info("Wrote %d CSV rows to %s", rows, args.csv)

    logging.info(
        "Candidates: kept=%d, invalid=%d, stale=%d, duplicate_pairs=%d, above_distance=%d",
        len(records),
        dropped,
        stale,
        merged,
        filtered,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
