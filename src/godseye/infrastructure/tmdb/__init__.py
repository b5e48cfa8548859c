from .assets import AssetUrls
from .client import HttpxTmdbClient

__all__ = ["AssetUrls", "HttpxTmdbClient"]
