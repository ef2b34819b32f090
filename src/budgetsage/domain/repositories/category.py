"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing a profile's categories."""

    def get_by_id(self, category_id: str, *, profile_id: str) -> Optional[Category]:
        ...

    def list_all(self, *, profile_id: str) -> list[Category]:
        """List categories in creation order."""
        ...

    def create(self, category: Category, *, profile_id: str) -> Category:
        ...

    def update(self, category: Category, *, profile_id: str) -> Category:
        ...

    def delete(self, category_id: str, *, profile_id: str) -> None:
        ...
