"""SQLModel storage for the bounded notification log."""

from __future__ import annotations

from typing import Sequence

from sqlmodel import select

from ...models.notification import Notification
from ..database import SessionFactory


class SQLModelNotificationRepository:
    """Stores each profile's log as an ordered list of rows (position 0 = newest)."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_log(self, *, profile_id: str) -> list[Notification]:
        with self.session_factory() as session:
            statement = (
                select(Notification)
                .where(Notification.profile_id == profile_id)
                .order_by(Notification.position)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def replace_log(
        self, entries: Sequence[Notification], *, profile_id: str
    ) -> list[Notification]:
        """Make the stored log equal to ``entries``, in order.

        The incoming instances are not modified. Rows whose id is absent from
        ``entries`` are deleted.
        """
        with self.session_factory() as session:
            stored = {
                row.id: row
                for row in session.exec(
                    select(Notification).where(Notification.profile_id == profile_id)
                ).all()
            }
            rows: list[Notification] = []
            for position, entry in enumerate(entries):
                row = stored.pop(entry.id, None) or Notification(id=entry.id, profile_id=profile_id)
                row.notification_type = entry.notification_type
                row.title = entry.title
                row.message = entry.message
                row.timestamp = entry.timestamp
                row.is_read = entry.is_read
                row.position = position
                session.add(row)
                rows.append(row)
            for leftover in stored.values():
                session.delete(leftover)
            session.commit()
            for row in rows:
                session.refresh(row)
            session.expunge_all()
        return rows
