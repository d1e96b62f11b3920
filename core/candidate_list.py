"""Operations on ordered lists of duplicate candidates.

A candidate list is a snapshot of one comparison run. Files can move or
disappear after it was produced, so callers that act on files should run
``revalidate`` first.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .candidate import DuplicateCandidate
from .errors import InvalidRecord
from .schema import load_candidate, pack_document, unpack_document

logger = logging.getLogger(__name__)


def accept_candidates(
    raw_records: Iterable[Any], declared_version: Optional[int] = None
) -> Tuple[List[DuplicateCandidate], int]:
    """Decode producer output, dropping records that break the contract.

    Records that do not match ``declared_version`` count as invalid.
    Returns the valid records in input order and the number dropped.
    """
    accepted: List[DuplicateCandidate] = []
    dropped = 0
    for index, raw in enumerate(raw_records):
        try:
            accepted.append(load_candidate(raw, declared_version))
        except InvalidRecord as exc:
            dropped += 1
            logger.warning("Dropping candidate #%d: %s", index, exc)
    return accepted, dropped


def dedupe_candidates(records: Iterable[DuplicateCandidate]) -> List[DuplicateCandidate]:
    """Keep one record per unordered pair, preferring the lowest distance."""
    best: Dict[Tuple[str, str], DuplicateCandidate] = {}
    for record in records:
        key = record.pair_key
        current = best.get(key)
        if current is None or record.distance < current.distance:
            best[key] = record
    return list(best.values())


def sort_by_distance(records: Iterable[DuplicateCandidate]) -> List[DuplicateCandidate]:
    return sorted(records, key=DuplicateCandidate.sort_key)


def filter_by_distance(
    records: Iterable[DuplicateCandidate], max_distance: Optional[float] = None
) -> List[DuplicateCandidate]:
    if max_distance is None:
        return list(records)
    return [record for record in records if record.distance <= max_distance]


def revalidate(
    records: Iterable[DuplicateCandidate],
    exists: Callable[[str], bool] = os.path.exists,
) -> List[DuplicateCandidate]:
    """Drop records whose files are no longer present."""
    alive: List[DuplicateCandidate] = []
    for record in records:
        gone = [path for path in (record.file_path1, record.file_path2) if not exists(path)]
        if gone:
            logger.info("Skipping stale candidate, missing: %s", ", ".join(gone))
            continue
        alive.append(record)
    return alive


def load_candidates(path) -> Tuple[List[DuplicateCandidate], int]:
    """Read a candidate document from ``path``.

    Returns the accepted records and the number of invalid records dropped.
    """
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)
    version, raw_records = unpack_document(document)
    logger.debug("Read %d raw candidates (schema %s) from %s", len(raw_records), version or "undeclared", path)
    return accept_candidates(raw_records, version)


def save_candidates(path, records: Iterable[DuplicateCandidate], indent: Optional[int] = 2) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(pack_document(list(records)), f, indent=indent, ensure_ascii=False)
        f.write("\n")
