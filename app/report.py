"""CSV export of duplicate candidate lists."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from core.candidate import DuplicateCandidate

from .image_utils import format_bytes

CSV_HEADER = [
    "distance",
    "filename1",
    "filename2",
    "file_path1",
    "file_path2",
    "size1",
    "size2",
    "size1_human",
    "size2_human",
    "resolution1",
    "resolution2",
    "format1",
    "format2",
]


def format_resolution(resolution) -> str:
    width, height = resolution
    return f"{width}x{height}"


def write_csv(records: Iterable[DuplicateCandidate], path) -> int:
    """Write one row per candidate and return the number of rows."""
    csv_path = Path(path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    rows = 0
    with csv_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(CSV_HEADER)
        for record in records:
            writer.writerow([
                f"{record.distance:g}",
                record.filename1,
                record.filename2,
                record.file_path1,
                record.file_path2,
                record.size1,
                record.size2,
                format_bytes(record.size1),
                format_bytes(record.size2),
                format_resolution(record.resolution1),
                format_resolution(record.resolution2),
                record.format1,
                record.format2,
            ])
            rows += 1
    return rows
