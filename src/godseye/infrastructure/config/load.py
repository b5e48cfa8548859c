"""Layered configuration loading: defaults < YAML < env (incl. .env) < CLI."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

# Section -> keys that may also arrive flat as "<section>_<key>".
_SECTIONS: dict[str, tuple[str, ...]] = {
    "tmdb": ("api_key", "base_url", "image_base_url", "embed_base_url", "language"),
    "http": ("timeout_seconds", "user_agent", "max_retries"),
    "search": (
        "debounce_ms",
        "suggestion_limit",
        "suggestion_min_length",
        "page_ceiling",
        "default_catalog",
    ),
    "logging": ("level", "format"),
    "preferences": ("dir",),
}

# Flat names that do not follow the "<section>_<key>" pattern.
_FLAT_ALIASES: dict[str, tuple[str, str]] = {
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
}

_TOP_LEVEL = ("app_name", "environment")


def _flat_keys() -> dict[str, tuple[str, str]]:
    keys = {
        f"{section}_{key}": (section, key)
        for section, names in _SECTIONS.items()
        for key in names
        if section != "logging"
    }
    keys.update(_FLAT_ALIASES)
    return keys


_FLAT_KEYS = _flat_keys()


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    """Deep-merge *layer* into *target*; nested mappings merge, anything else wins."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            target[key] = value


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape AppConfig validates.

    Layers may mix YAML-style sections (``{"tmdb": {"api_key": ...}}``) with
    flat names as produced by env vars and CLI flags (``tmdb_api_key``).
    """
    out: dict[str, Any] = {k: layer[k] for k in _TOP_LEVEL if k in layer}

    for section in _SECTIONS:
        block = layer.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)

    for flat, (section, key) in _FLAT_KEYS.items():
        if flat in layer:
            out.setdefault(section, {})[key] = layer[flat]
    return out


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Build the validated AppConfig from all layers.

    A ``.env`` file only fills variables the process environment does not
    already set. Nothing is written to disk.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = [deepcopy(DEFAULT_CONFIG)]
    if config_path is not None:
        layers.append(_read_yaml(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _merge_into(merged, _sectioned(layer))

    return AppConfig.model_validate(merged)
