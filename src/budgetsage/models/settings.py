"""Profile-scoped key/value settings stored in the database."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class AppSetting(SQLModel, table=True):
    """Key-value storage for runtime configurable options."""

    __tablename__: ClassVar[str] = "app_setting"

    profile_id: str = Field(primary_key=True, max_length=64)
    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(nullable=False)
    description: Optional[str] = Field(default=None, max_length=255)
