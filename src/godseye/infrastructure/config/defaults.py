"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "godseye",
    "environment": "dev",
    "tmdb": {
        "api_key": None,
        "base_url": "https://api.themoviedb.org/3",
        "image_base_url": "https://image.tmdb.org/t/p",
        "embed_base_url": "https://vidsrc.to/embed",
        "language": "en-US",
    },
    "http": {
        "timeout_seconds": 15.0,
        "user_agent": "godseye/0.1.0",
        "max_retries": 3,
    },
    "search": {
        "debounce_ms": 300,
        "suggestion_limit": 8,
        "suggestion_min_length": 2,
        "page_ceiling": 500,
        "default_catalog": "all",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "preferences": {
        "dir": "./.godseye",
    },
}
