"""
File storage abstraction.

Resolves where album media is read from and where exports are written.
Currently uses the local filesystem.
"""
from pathlib import Path


class FileStorage:
    """
    Local file storage implementation.

    Files are organized as:
    - {media_root}/...                          - Asset files (asset.file_path is relative to media_root)
    - {media_root}/albums/{album_id}/exports/   - Generated PDFs
    """

    def __init__(self, media_root: str = "media"):
        self.media_root = Path(media_root)
        self.media_root.mkdir(parents=True, exist_ok=True)

    def _inside_media_root(self, relative_path: Path, base: str = "") -> Path:
        """
        Resolve a path below the media root (or below `base` inside it).

        Raises:
            ValueError: If the path escapes that directory
        """
        root = (self.media_root / base).resolve()
        path = (self.media_root.resolve() / relative_path).resolve()
        if path != root and root not in path.parents:
            raise ValueError(f"Path escapes media root: {relative_path}")
        return path

    def get_album_exports_dir(self, album_id: str) -> Path:
        """
        Get (and create) the exports directory for an album.

        Raises:
            ValueError: If the album id would place exports outside the media root
        """
        path = self._inside_media_root(Path("albums") / album_id / "exports", base="albums")
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_pdf_path(self, album_id: str) -> str:
        """
        Get the path for an album's PDF export.

        Returns:
            Relative path where PDF should be saved
        """
        exports_dir = self.get_album_exports_dir(album_id)
        return (exports_dir / "album.pdf").relative_to(self.media_root.resolve()).as_posix()

    def get_absolute_path(self, relative_path: str) -> Path:
        """Convert a relative path to absolute, refusing paths outside the media root."""
        return self._inside_media_root(Path(relative_path))
