from .catalog import CatalogUseCase
from .theme import ThemeService
from .watch import WatchUseCase

__all__ = ["CatalogUseCase", "ThemeService", "WatchUseCase"]
