"""Domain entities for user preferences."""

from __future__ import annotations

from enum import Enum


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    @property
    def toggled(self) -> Theme:
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT


DEFAULT_THEME = Theme.LIGHT
