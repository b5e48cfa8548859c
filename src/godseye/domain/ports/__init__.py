from .assets import AssetUrlPort
from .metadata import MetadataProviderPort, TrendingWindow
from .preferences import ThemeStorePort

__all__ = [
    "AssetUrlPort",
    "MetadataProviderPort",
    "ThemeStorePort",
    "TrendingWindow",
]
