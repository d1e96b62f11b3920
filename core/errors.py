from typing import Iterable, Optional


class InvalidRecord(ValueError):
    """A duplicate candidate violates the record contract."""


class SchemaVersionMismatch(ValueError):
    """Input was written for a schema version other than the current one.

    Raised for legacy (version 1) records that lack the filename fields, and
    for documents declaring a version this package cannot read.
    """

    def __init__(self, message: str, version: Optional[int] = None, missing: Iterable[str] = ()):
        super().__init__(message)
        self.version = version
        self.missing = tuple(missing)
