"""SQLModel implementation of the category repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from ...models.category import Category
from ...models.enums import CategoryType
from ..database import SessionFactory


def _sync_debt_budget(category: Category) -> None:
    # initial_balance is authoritative for debts; budget mirrors it
    if category.category_type == CategoryType.DEBT and category.initial_balance is not None:
        category.budget = category.initial_balance


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, category_id: str, *, profile_id: str) -> Optional[Category]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Category).where(
                    Category.id == category_id, Category.profile_id == profile_id
                )
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, profile_id: str) -> list[Category]:
        """List categories in creation order; the first is the import fallback."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.profile_id == profile_id)
                .order_by(Category.sort_order)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category, *, profile_id: str) -> Category:
        with self.session_factory() as session:
            category.profile_id = profile_id
            _sync_debt_budget(category)
            last = session.exec(
                select(func.max(Category.sort_order)).where(Category.profile_id == profile_id)
            ).one()
            category.sort_order = (last if last is not None else -1) + 1
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def update(self, category: Category, *, profile_id: str) -> Category:
        """Persist changes; DEBT categories keep ``budget`` in step with ``initial_balance``."""
        with self.session_factory() as session:
            category.profile_id = profile_id
            _sync_debt_budget(category)
            merged = session.merge(category)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, category_id: str, *, profile_id: str) -> None:
        with self.session_factory() as session:
            category = session.exec(
                select(Category).where(
                    Category.id == category_id, Category.profile_id == profile_id
                )
            ).first()
            if category:
                session.delete(category)
                session.commit()
