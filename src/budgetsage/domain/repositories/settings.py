"""Preferences repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.preferences import Preferences


class SettingsRepository(Protocol):
    def get_preferences(self, *, profile_id: str) -> Preferences:
        ...

    def save_preferences(self, preferences: Preferences, *, profile_id: str) -> None:
        ...
