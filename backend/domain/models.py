"""
Core domain models for the photo book layout engine.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class AssetType(str, Enum):
    """Media kind of an asset."""
    IMAGE = "image"
    VIDEO = "video"


class PageSizeName(str, Enum):
    """Named physical page sizes."""
    A4 = "A4"
    LETTER = "LETTER"
    A3 = "A3"
    CUSTOM = "CUSTOM"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class Alignment(str, Enum):
    """Horizontal alignment of a page's photo group within the content area."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class CaptionPosition(str, Enum):
    """
    Where a caption is drawn relative to its photo.

    - BOTTOM / TOP: overlaid on the image
    - LEFT / RIGHT: beside the image, taking half of the box width
    - HIDDEN: not drawn
    """
    BOTTOM = "bottom"
    TOP = "top"
    LEFT = "left"
    RIGHT = "right"
    HIDDEN = "hidden"


# EXIF orientation values that carry a 90 degree rotation
ROTATED_EXIF_ORIENTATIONS = (5, 6, 7, 8)


@dataclass(frozen=True)
class AssetMetadata:
    """Metadata of a photographic item as supplied by the asset source."""
    width: Optional[int] = None
    height: Optional[int] = None
    exif_orientation: Optional[int] = None
    taken_at: Optional[datetime] = None
    description: Optional[str] = None
    original_file_name: Optional[str] = None

    @property
    def is_rotated(self) -> bool:
        return self.exif_orientation in ROTATED_EXIF_ORIENTATIONS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetMetadata":
        taken_at = data.get("taken_at")
        if isinstance(taken_at, str):
            taken_at = datetime.fromisoformat(taken_at)
        orientation = data.get("exif_orientation")
        try:
            orientation = int(orientation) if orientation is not None else None
        except (TypeError, ValueError):
            orientation = None
        return cls(
            width=data.get("width"),
            height=data.get("height"),
            exif_orientation=orientation,
            taken_at=taken_at,
            description=data.get("description"),
            original_file_name=data.get("original_file_name"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "exif_orientation": self.exif_orientation,
            "taken_at": self.taken_at.isoformat() if self.taken_at else None,
            "description": self.description,
            "original_file_name": self.original_file_name,
        }


@dataclass(frozen=True)
class Asset:
    """
    An opaque reference to a photographic item.

    Owned by the external asset source; the layout engine never mutates it.
    """
    id: str
    type: AssetType = AssetType.IMAGE
    metadata: AssetMetadata = field(default_factory=AssetMetadata)
    file_path: Optional[str] = None  # Relative to media root, used by renderers

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Asset":
        raw_type = data.get("type") or AssetType.IMAGE.value
        try:
            asset_type = AssetType(raw_type)
        except ValueError:
            asset_type = AssetType.IMAGE
        return cls(
            id=str(data["id"]),
            type=asset_type,
            metadata=AssetMetadata.from_dict(data.get("metadata") or {}),
            file_path=data.get("file_path"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "metadata": self.metadata.to_dict(),
            "file_path": self.file_path,
        }


# Layout configuration

@dataclass(frozen=True)
class LayoutConfig:
    """
    Layout configuration supplied by the user.

    All lengths are pixels at the 300 DPI working resolution. Override maps
    are keyed by asset id (or page number for alignments) so that
    customizations survive any recomputation of the derived geometry.
    """
    page_size: PageSizeName = PageSizeName.CUSTOM
    orientation: Orientation = Orientation.PORTRAIT
    custom_width: Optional[int] = None
    custom_height: Optional[int] = None
    margin: float = 50
    row_height: float = 250
    spacing: float = 4
    height_tolerance: float = 0.1
    combine_pages: bool = False
    default_alignment: Alignment = Alignment.LEFT
    show_dates: bool = True
    show_captions: bool = True
    caption_position: CaptionPosition = CaptionPosition.BOTTOM

    # Per-album override maps
    aspect_ratios: Dict[str, float] = field(default_factory=dict)
    caption_positions: Dict[str, CaptionPosition] = field(default_factory=dict)
    row_heights: Dict[str, float] = field(default_factory=dict)  # keyed by first asset of the row
    manual_order: Dict[str, int] = field(default_factory=dict)
    page_alignments: Dict[int, Alignment] = field(default_factory=dict)


# Layout output models

@dataclass(frozen=True)
class PackedBox:
    """A box in the row packer's continuous, unpaginated strip."""
    top: float
    left: float
    width: float
    height: float


@dataclass(frozen=True)
class PhotoBox:
    """The positioned placement of one asset on a page."""
    asset: Asset
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asset_id": self.asset.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class Row:
    """
    A horizontal band of photos sharing the same top edge.

    Rows are a derived view used for row-height editing; photo positions
    are authoritative.
    """
    y: float
    height: float
    photos: List[PhotoBox] = field(default_factory=list)
    custom_height: Optional[float] = None

    @property
    def key(self) -> Optional[str]:
        """Id of the first asset in the row, used to key row-height overrides."""
        return self.photos[0].asset.id if self.photos else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "y": self.y,
            "height": self.height,
            "custom_height": self.custom_height,
            "asset_ids": [p.asset.id for p in self.photos],
        }


@dataclass
class Page:
    """
    A page (or a spread of two pages) of the computed layout.
    """
    page_number: int
    width: int
    height: int
    photos: List[PhotoBox] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    is_spread: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_number": self.page_number,
            "width": self.width,
            "height": self.height,
            "is_spread": self.is_spread,
            "photos": [p.to_dict() for p in self.photos],
            "rows": [r.to_dict() for r in self.rows],
        }
