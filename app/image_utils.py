from PIL import Image
import os
from typing import Optional

from core.candidate import DuplicateCandidate
from core.schema import base_name

IMG_EXTS = {'.jpg', '.jpeg', '.png', '.webp', '.bmp', '.tiff'}
UNKNOWN_FORMAT = 'unknown'

def is_image_path(path: str) -> bool:
    ext = os.path.splitext(path)[1].lower()
    return ext in IMG_EXTS

def _pillow_probe(path: str):
    """(width, height, format) as Pillow sees them; (0, 0, None) if undecodable."""
    try:
        with Image.open(path) as im:
            w, h = im.size
            fmt = im.format
        return w, h, fmt
    except (OSError, Image.DecompressionBombError):
        return 0, 0, None

def image_format(path: str, detected: Optional[str] = None) -> str:
    ext = os.path.splitext(path)[1].lower().lstrip('.')
    if ext:
        return ext
    if detected is None:
        detected = _pillow_probe(path)[2]
    return detected.lower() if detected else UNKNOWN_FORMAT

def get_image_meta(path: str):
    try:
        st = os.stat(path)
    except OSError:
        return None
    w, h, detected = _pillow_probe(path)
    return {"size": st.st_size, "w": w, "h": h, "format": image_format(path, detected)}

def candidate_from_files(path1: str, path2: str, distance: float) -> DuplicateCandidate:
    """Describe two existing files as a duplicate candidate.

    The distance comes from whatever compared the files; only the metadata is
    read here. Files Pillow cannot decode get the (0, 0) resolution.
    """
    metas = []
    for path in (path1, path2):
        meta = get_image_meta(path)
        if meta is None:
            raise FileNotFoundError(path)
        metas.append(meta)
    m1, m2 = metas
    return DuplicateCandidate(
        filename1=base_name(path1),
        filename2=base_name(path2),
        file_path1=path1,
        file_path2=path2,
        distance=distance,
        size1=m1["size"],
        size2=m2["size"],
        resolution1=(m1["w"], m1["h"]),
        resolution2=(m2["w"], m2["h"]),
        format1=m1["format"],
        format2=m2["format"],
    )

def format_bytes(n: int) -> str:
    for unit in ['B','KB','MB','GB','TB']:
        if n < 1024:
            return f"{n:.1f}{unit}" if unit != 'B' else f"{n}{unit}"
        n /= 1024
    return f"{n:.1f}PB"
