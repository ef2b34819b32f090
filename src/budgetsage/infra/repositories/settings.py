"""Settings repository for profile-scoped key/value pairs."""

from __future__ import annotations

import json
import logging
from typing import Optional

from sqlmodel import select

from ...models.preferences import Preferences
from ...models.settings import AppSetting
from ..database import SessionFactory

logger = logging.getLogger(__name__)

PREFERENCES_KEY = "preferences"


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, key: str, *, profile_id: str) -> Optional[AppSetting]:
        with self.session_factory() as session:
            setting = session.exec(
                select(AppSetting).where(
                    AppSetting.key == key, AppSetting.profile_id == profile_id
                )
            ).first()
            if setting:
                session.expunge(setting)
            return setting

    def set(
        self, key: str, value: str, *, profile_id: str, description: str | None = None
    ) -> AppSetting:
        with self.session_factory() as session:
            setting = session.exec(
                select(AppSetting).where(
                    AppSetting.key == key, AppSetting.profile_id == profile_id
                )
            ).first()
            if setting:
                setting.value = value
                setting.description = description
            else:
                setting = AppSetting(
                    profile_id=profile_id, key=key, value=value, description=description
                )
            session.add(setting)
            session.commit()
            session.refresh(setting)
            session.expunge(setting)
            return setting

    def get_preferences(self, *, profile_id: str) -> Preferences:
        """Load preferences, falling back to defaults for missing or corrupt data."""
        setting = self.get(PREFERENCES_KEY, profile_id=profile_id)
        if setting is None:
            return Preferences()
        try:
            raw = json.loads(setting.value)
        except json.JSONDecodeError:
            logger.warning("Stored preferences for %s are not valid JSON; using defaults", profile_id)
            return Preferences()
        return Preferences.from_mapping(raw)

    def save_preferences(self, preferences: Preferences, *, profile_id: str) -> None:
        self.set(
            PREFERENCES_KEY,
            json.dumps(preferences.to_mapping()),
            profile_id=profile_id,
            description="User preferences",
        )
