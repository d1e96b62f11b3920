"""Duplicate candidate records and candidate list handling."""
from .errors import InvalidRecord, SchemaVersionMismatch
from .candidate import DuplicateCandidate, normalize_pair
from .schema import CURRENT_SCHEMA_VERSION, load_candidate, upgrade_v1
from .candidate_list import (
    accept_candidates,
    dedupe_candidates,
    filter_by_distance,
    load_candidates,
    revalidate,
    save_candidates,
    sort_by_distance,
)
__all__ = [
    "InvalidRecord",
    "SchemaVersionMismatch",
    "DuplicateCandidate",
    "normalize_pair",
    "CURRENT_SCHEMA_VERSION",
    "load_candidate",
    "upgrade_v1",
    "accept_candidates",
    "dedupe_candidates",
    "filter_by_distance",
    "load_candidates",
    "revalidate",
    "save_candidates",
    "sort_by_distance",
]
