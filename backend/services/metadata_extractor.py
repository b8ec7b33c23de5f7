"""
EXIF metadata extraction service.

Extracts the layout-relevant metadata from images: pixel dimensions,
EXIF orientation, capture time and image description.
"""
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional

from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import TAGS

from domain.models import Asset, AssetMetadata, AssetType

EXIF_IFD_POINTER = 0x8769
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".tif", ".tiff", ".webp")
VIDEO_EXTENSIONS = (".mp4", ".mov", ".m4v")


def extract_exif_metadata(file_bytes: bytes, file_name: Optional[str] = None) -> AssetMetadata:
    """
    Extract metadata from image bytes.

    Args:
        file_bytes: Raw image file bytes (JPEG, PNG, ...)
        file_name: Original file name, stored as-is

    Returns:
        AssetMetadata with populated fields. Missing/unparseable fields are None.
        Never raises - returns partial metadata on errors.
    """
    try:
        with Image.open(BytesIO(file_bytes)) as img:
            width, height = img.width, img.height
            exif_data = _get_exif_dict(img)
    except (UnidentifiedImageError, OSError, ValueError):
        return AssetMetadata(original_file_name=file_name)

    orientation = exif_data.get("Orientation")
    description = exif_data.get("ImageDescription")
    if isinstance(description, str):
        description = description.strip() or None
    else:
        description = None
    return AssetMetadata(
        width=width,
        height=height,
        exif_orientation=orientation if isinstance(orientation, int) else None,
        taken_at=_parse_datetime(exif_data),
        description=description,
        original_file_name=file_name,
    )


def _get_exif_dict(img) -> Dict[str, Any]:
    """
    Extract EXIF data as a dictionary keyed by tag name.

    Merges the base IFD with the Exif sub-IFD, where DateTimeOriginal lives.
    """
    try:
        exif = img.getexif()
    except (AttributeError, OSError, ValueError):
        return {}
    if not exif:
        return {}

    exif_dict: Dict[str, Any] = {}
    tags = dict(exif.items())
    try:
        tags.update(exif.get_ifd(EXIF_IFD_POINTER))
    except (KeyError, OSError, ValueError):
        pass
    for tag_id, value in tags.items():
        tag_name = TAGS.get(tag_id, str(tag_id))
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace").rstrip("\x00")
        exif_dict[tag_name] = value
    return exif_dict


def _parse_datetime(exif_data: Dict[str, Any]) -> Optional[datetime]:
    """Parse capture datetime from EXIF data."""
    # Try various datetime tags in order of preference
    for tag in ("DateTimeOriginal", "DateTimeDigitized", "DateTime"):
        value = exif_data.get(tag)
        if value:
            parsed = _parse_exif_datetime(value)
            if parsed:
                return parsed
    return None


def _parse_exif_datetime(value: Any) -> Optional[datetime]:
    """Parse an EXIF datetime string."""
    if not isinstance(value, str):
        return None

    formats = [
        "%Y:%m:%d %H:%M:%S",  # Standard EXIF format
        "%Y-%m-%d %H:%M:%S",
        "%Y/%m/%d %H:%M:%S",
    ]
    for fmt in formats:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


def asset_from_file(path: Path, media_root: Path) -> Asset:
    """Build an Asset for an image (or video) file below media_root."""
    path = Path(path)
    is_video = path.suffix.lower() in VIDEO_EXTENSIONS
    if is_video:
        metadata = AssetMetadata(original_file_name=path.name)
    else:
        metadata = extract_exif_metadata(path.read_bytes(), file_name=path.name)
    return Asset(
        id=path.stem,
        type=AssetType.VIDEO if is_video else AssetType.IMAGE,
        metadata=metadata,
        file_path=path.resolve().relative_to(Path(media_root).resolve()).as_posix(),
    )


def scan_media_dir(media_root: Path) -> List[Asset]:
    """Build assets for every supported file directly inside media_root."""
    media_root = Path(media_root)
    return [
        asset_from_file(p, media_root)
        for p in sorted(media_root.iterdir())
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS + VIDEO_EXTENSIONS
    ]
