"""Notification log entries."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from .enums import NotificationType
from .identifiers import new_id


class Notification(SQLModel, table=True):
    """One entry of a profile's bounded, newest-first notification log.

    ``timestamp`` is naive local time; same-day dedup compares calendar dates.
    """

    __tablename__: ClassVar[str] = "notification"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    profile_id: str = Field(default="", index=True, max_length=64)
    notification_type: NotificationType = Field(default=NotificationType.INFO, nullable=False)
    title: str = Field(nullable=False, max_length=128)
    message: str = Field(default="", max_length=512)
    timestamp: datetime = Field(
        default_factory=datetime.now,
        sa_column=Column(DateTime(timezone=False), nullable=False),
    )
    is_read: bool = Field(default=False, nullable=False)
    # 0 is the newest entry
    position: int = Field(default=0, nullable=False)
