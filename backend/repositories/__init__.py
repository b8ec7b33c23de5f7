from .layout_settings import LayoutSettingsRepository
from . import models

__all__ = ["LayoutSettingsRepository", "models"]
