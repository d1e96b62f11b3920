"""Duplicate candidate record exchanged between scanners and viewers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from .errors import InvalidRecord, SchemaVersionMismatch

Resolution = Tuple[int, int]

FILENAME_FIELDS = ("filename1", "filename2")
CORE_FIELDS = (
    "file_path1",
    "file_path2",
    "distance",
    "size1",
    "size2",
    "resolution1",
    "resolution2",
    "format1",
    "format2",
)
ALL_FIELDS = FILENAME_FIELDS + CORE_FIELDS


def normalize_pair(path_a: str, path_b: str) -> Tuple[str, str]:
    """Order-independent key for a pair of paths."""
    return (path_a, path_b) if path_a <= path_b else (path_b, path_a)


def _check_text(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidRecord(f"{name} must be a non-empty string, got {value!r}")


def _check_size(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRecord(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidRecord(f"{name} must be >= 0, got {value}")


def _to_resolution(name: str, value: Any) -> Resolution:
    try:
        width, height = value
    except (TypeError, ValueError):
        raise InvalidRecord(f"{name} must be a (width, height) pair, got {value!r}") from None
    for part in (width, height):
        if isinstance(part, bool) or not isinstance(part, int):
            raise InvalidRecord(f"{name} components must be integers, got {value!r}")
        if part < 0:
            raise InvalidRecord(f"{name} components must be >= 0, got {value!r}")
    return (width, height)


@dataclass(frozen=True)
class DuplicateCandidate:
    """One pairwise comparison between two image files.

    ``distance`` is the only ranking key: lower means more similar. The other
    fields describe the two files for display and keep/delete decisions.
    A resolution of ``(0, 0)`` means the dimensions are unknown.
    """

    filename1: str
    filename2: str
    file_path1: str
    file_path2: str
    distance: float
    size1: int
    size2: int
    resolution1: Resolution
    resolution2: Resolution
    format1: str
    format2: str

    def __post_init__(self):
        for name in ("filename1", "filename2", "file_path1", "file_path2", "format1", "format2"):
            _check_text(name, getattr(self, name))
        if self.file_path1 == self.file_path2:
            raise InvalidRecord(f"candidate compares {self.file_path1!r} with itself")

        distance = self.distance
        if isinstance(distance, bool) or not isinstance(distance, (int, float)):
            raise InvalidRecord(f"distance must be a number, got {distance!r}")
        try:
            distance = float(distance)
        except OverflowError:
            raise InvalidRecord(f"distance {self.distance!r} is too large for a float") from None
        if not math.isfinite(distance) or distance < 0:
            raise InvalidRecord(f"distance must be finite and >= 0, got {distance!r}")

        _check_size("size1", self.size1)
        _check_size("size2", self.size2)

        # frozen: normalised values go through object.__setattr__
        object.__setattr__(self, "distance", distance)
        object.__setattr__(self, "resolution1", _to_resolution("resolution1", self.resolution1))
        object.__setattr__(self, "resolution2", _to_resolution("resolution2", self.resolution2))

    @property
    def pair_key(self) -> Tuple[str, str]:
        return normalize_pair(self.file_path1, self.file_path2)

    def same_pair(self, other: "DuplicateCandidate") -> bool:
        """True when both records compare the same two files, in either order."""
        return self.pair_key == other.pair_key

    def swapped(self) -> "DuplicateCandidate":
        return DuplicateCandidate(
            filename1=self.filename2,
            filename2=self.filename1,
            file_path1=self.file_path2,
            file_path2=self.file_path1,
            distance=self.distance,
            size1=self.size2,
            size2=self.size1,
            resolution1=self.resolution2,
            resolution2=self.resolution1,
            format1=self.format2,
            format2=self.format1,
        )

    def sort_key(self) -> Tuple[float, Tuple[str, str]]:
        return (self.distance, self.pair_key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename1": self.filename1,
            "filename2": self.filename2,
            "file_path1": self.file_path1,
            "file_path2": self.file_path2,
            "distance": self.distance,
            "size1": self.size1,
            "size2": self.size2,
            "resolution1": list(self.resolution1),
            "resolution2": list(self.resolution2),
            "format1": self.format1,
            "format2": self.format2,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DuplicateCandidate":
        """Decode a current-schema record.

        Raises SchemaVersionMismatch when the filename fields are absent (a
        legacy record, see ``core.schema.load_candidate``) and InvalidRecord
        for anything else that is missing or malformed.
        """
        if not isinstance(data, Mapping):
            raise InvalidRecord(f"candidate must be a JSON object, got {type(data).__name__}")
        missing_names = [name for name in FILENAME_FIELDS if name not in data]
        if missing_names:
            raise SchemaVersionMismatch(
                "candidate is missing " + ", ".join(missing_names),
                version=1,
                missing=missing_names,
            )
        missing = [name for name in CORE_FIELDS if name not in data]
        if missing:
            raise InvalidRecord("candidate is missing " + ", ".join(missing))
        return cls(**{name: data[name] for name in ALL_FIELDS})
