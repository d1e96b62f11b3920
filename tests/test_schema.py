from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from core.errors import InvalidRecord, SchemaVersionMismatch
from core.schema import (
    CURRENT_SCHEMA_VERSION,
    base_name,
    detect_version,
    load_candidate,
    pack_document,
    unpack_document,
    upgrade_v1,
)


def legacy_record(**overrides) -> dict:
    record = {
        "file_path1": "/photos/2023/img001.jpg",
        "file_path2": "/photos/backup/img001_copy.jpg",
        "distance": 2.5,
        "size1": 204800,
        "size2": 204800,
        "resolution1": [1920, 1080],
        "resolution2": [1920, 1080],
        "format1": "jpg",
        "format2": "jpg",
    }
    record.update(overrides)
    return record


def test_detect_version():
    legacy = legacy_record()
    current = dict(legacy, filename1="img001.jpg", filename2="img001_copy.jpg")
    assert detect_version(legacy) == 1
    assert detect_version(current) == CURRENT_SCHEMA_VERSION


def test_half_upgraded_record_is_invalid():
    with pytest.raises(InvalidRecord):
        detect_version(legacy_record(filename1="img001.jpg"))


def test_legacy_record_loads_with_derived_filenames():
    record = load_candidate(legacy_record())
    assert record.filename1 == "img001.jpg"
    assert record.filename2 == "img001_copy.jpg"
    assert record.file_path1 == "/photos/2023/img001.jpg"
    assert record.distance == 2.5


def test_upgrade_does_not_touch_input():
    legacy = legacy_record()
    upgraded = upgrade_v1(legacy)
    assert "filename1" not in legacy
    assert upgraded["filename2"] == "img001_copy.jpg"


def test_windows_paths_upgrade_to_base_names():
    record = load_candidate(
        legacy_record(file_path1="C:\\Users\\me\\Pictures\\a.png", file_path2="D:/backup/b.png")
    )
    assert record.filename1 == "a.png"
    assert record.filename2 == "b.png"
    assert base_name("relative/dir/c.webp") == "c.webp"


def test_legacy_self_match_still_rejected():
    with pytest.raises(InvalidRecord):
        load_candidate(legacy_record(file_path2="/photos/2023/img001.jpg"))


def test_current_record_loads_unchanged():
    data = legacy_record(filename1="first.jpg", filename2="second.jpg")
    record = load_candidate(data)
    assert record.filename1 == "first.jpg"
    assert record.to_dict() == data


def test_unpack_bare_list_and_versioned_document():
    records = [legacy_record()]
    assert unpack_document(records) == (None, records)
    assert unpack_document({"candidates": records}) == (None, records)
    assert unpack_document({"schema_version": 1, "candidates": records}) == (1, records)


def test_unpack_rejects_unknown_version():
    with pytest.raises(SchemaVersionMismatch) as excinfo:
        unpack_document({"schema_version": 3, "candidates": []})
    assert excinfo.value.version == 3


@pytest.mark.parametrize("version", [True, 1.0, "2", [2]])
def test_unpack_rejects_non_integer_version(version):
    with pytest.raises(SchemaVersionMismatch):
        unpack_document({"schema_version": version, "candidates": []})


def test_unpack_rejects_document_without_candidates():
    with pytest.raises(InvalidRecord):
        unpack_document({"schema_version": 2})
    with pytest.raises(InvalidRecord):
        unpack_document("candidates")


def test_pack_document_writes_current_version():
    record = load_candidate(legacy_record())
    document = pack_document([record])
    assert document["schema_version"] == CURRENT_SCHEMA_VERSION
    assert document["candidates"][0]["filename1"] == "img001.jpg"


def test_declared_current_version_rejects_legacy_record():
    with pytest.raises(InvalidRecord, match="schema version 2"):
        load_candidate(legacy_record(), declared_version=2)


def test_declared_legacy_version_rejects_current_record():
    current = legacy_record(filename1="img001.jpg", filename2="img001_copy.jpg")
    with pytest.raises(InvalidRecord, match="schema version 1"):
        load_candidate(current, declared_version=1)


def test_declared_legacy_version_upgrades():
    record = load_candidate(legacy_record(), declared_version=1)
    assert record.filename1 == "img001.jpg"


@pytest.mark.parametrize("root", ["/", "C:\\"])
def test_upgrade_names_underivable_filename(root):
    with pytest.raises(InvalidRecord, match="cannot derive filename1"):
        upgrade_v1(legacy_record(file_path1=root))
