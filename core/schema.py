"""Schema versions of serialized duplicate candidates.

Version 1 records carry paths, distance, sizes, resolutions and formats.
Version 2 adds ``filename1``/``filename2``. Version 1 input is upgraded by
taking the base name of each path.
"""

from __future__ import annotations

import logging
from pathlib import PureWindowsPath
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .candidate import CORE_FIELDS, FILENAME_FIELDS, DuplicateCandidate
from .errors import InvalidRecord, SchemaVersionMismatch

logger = logging.getLogger(__name__)

LEGACY_SCHEMA_VERSION = 1
CURRENT_SCHEMA_VERSION = 2
SUPPORTED_VERSIONS = (LEGACY_SCHEMA_VERSION, CURRENT_SCHEMA_VERSION)


def base_name(path: str) -> str:
    # PureWindowsPath splits on both "/" and "\"
    return PureWindowsPath(path).name


def detect_version(data: Mapping[str, Any]) -> int:
    if not isinstance(data, Mapping):
        raise InvalidRecord(f"candidate must be a JSON object, got {type(data).__name__}")
    missing = [name for name in CORE_FIELDS if name not in data]
    if missing:
        raise InvalidRecord("candidate is missing " + ", ".join(missing))
    present = [name for name in FILENAME_FIELDS if name in data]
    if len(present) == len(FILENAME_FIELDS):
        return CURRENT_SCHEMA_VERSION
    if not present:
        return LEGACY_SCHEMA_VERSION
    raise InvalidRecord(f"candidate has {present[0]} but not its counterpart")


def upgrade_v1(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a version 2 mapping built from a version 1 record."""
    upgraded = dict(data)
    for index in (1, 2):
        path = data.get(f"file_path{index}")
        if not isinstance(path, str) or not path:
            raise InvalidRecord(f"file_path{index} must be a non-empty string, got {path!r}")
        name = base_name(path)
        if not name:
            raise InvalidRecord(f"cannot derive filename{index} from file_path{index} {path!r}")
        upgraded[f"filename{index}"] = name
    return upgraded


def load_candidate(data: Mapping[str, Any], declared_version: Optional[int] = None) -> DuplicateCandidate:
    """Decode a record of any supported schema version.

    ``declared_version`` is the version a document claims for its records.
    When given, records must match it; legacy records are only upgraded
    under a declared version 1 or when nothing was declared.
    """
    if declared_version == LEGACY_SCHEMA_VERSION:
        if detect_version(data) != LEGACY_SCHEMA_VERSION:
            raise InvalidRecord("document declares schema version 1 but record has filename fields")
        return DuplicateCandidate.from_dict(upgrade_v1(data))
    try:
        return DuplicateCandidate.from_dict(data)
    except SchemaVersionMismatch as exc:
        if declared_version == CURRENT_SCHEMA_VERSION:
            raise InvalidRecord(f"document declares schema version 2 but {exc}") from exc
        if detect_version(data) != LEGACY_SCHEMA_VERSION:
            raise
    logger.debug("Upgrading legacy candidate %s <-> %s", data.get("file_path1"), data.get("file_path2"))
    return DuplicateCandidate.from_dict(upgrade_v1(data))


def unpack_document(document: Any) -> Tuple[Optional[int], List[Any]]:
    """Split a candidate document into (declared version, raw records).

    Bare lists and objects without ``schema_version`` declare no version
    (``None``); each of their records is detected individually.
    """
    if isinstance(document, list):
        return None, document
    if not isinstance(document, Mapping):
        raise InvalidRecord(f"candidate document must be a list or object, got {type(document).__name__}")
    version = document.get("schema_version")
    if version is not None:
        if isinstance(version, bool) or not isinstance(version, int) or version not in SUPPORTED_VERSIONS:
            raise SchemaVersionMismatch(f"unsupported schema_version {version!r}", version=version)
    records = document.get("candidates")
    if not isinstance(records, list):
        raise InvalidRecord("candidate document has no 'candidates' list")
    return version, records


def pack_document(records: List[DuplicateCandidate]) -> Dict[str, Any]:
    return {
        "schema_version": CURRENT_SCHEMA_VERSION,
        "candidates": [record.to_dict() for record in records],
    }
