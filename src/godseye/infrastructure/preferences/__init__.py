from .theme_store import DiskcacheThemeStore

__all__ = ["DiskcacheThemeStore"]
