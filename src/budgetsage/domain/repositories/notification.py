"""Notification log repository protocol."""

from __future__ import annotations

from typing import Protocol, Sequence

from ...models.notification import Notification


class NotificationRepository(Protocol):
    """Stores a profile's newest-first notification log."""

    def list_log(self, *, profile_id: str) -> list[Notification]:
        ...

    def replace_log(
        self, entries: Sequence[Notification], *, profile_id: str
    ) -> list[Notification]:
        """Persist ``entries`` as the complete log, preserving order."""
        ...
