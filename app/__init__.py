"""Image metadata probing and reports for duplicate candidates."""
from .image_utils import candidate_from_files, format_bytes, get_image_meta, is_image_path
from .report import write_csv
__all__ = [
    "candidate_from_files",
    "format_bytes",
    "get_image_meta",
    "is_image_path",
    "write_csv",
]
