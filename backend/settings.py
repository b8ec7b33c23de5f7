import os
from pathlib import Path

# Basic settings helper to read environment configuration.

BACKEND_ROOT = Path(__file__).resolve().parent


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{BACKEND_ROOT / 'app.db'}")
        self.MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "media")
        self.MEDIA_BASE_URL: str = os.getenv("MEDIA_BASE_URL", "/media")
        self.LAYOUT_DEBUG: bool = _as_bool(os.getenv("LAYOUT_DEBUG"), False)


settings = Settings()
