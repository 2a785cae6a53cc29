from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from shared.models.category import Category
from shared.models.constants import DEFAULT_CATEGORIES, DEFAULT_CATEGORY_OWNER, FALLBACK_CATEGORY_NAME


class CategoryRegistry:
    """
    Fixed list of expense categories.

    Categories are not user managed yet, so the registry only exposes
    lookups over the built-in seed list.
    """

    def __init__(self, categories: Optional[list[Category]] = None):
        if categories is None:
            seeded_at = datetime.now(timezone.utc)
            categories = [
                Category(
                    id=category_id,
                    user_id=DEFAULT_CATEGORY_OWNER,
                    name=name,
                    description=description,
                    color=color,
                    created_at=seeded_at,
                    updated_at=seeded_at,
                )
                for category_id, name, description, color in DEFAULT_CATEGORIES
            ]
        self._categories = list(categories)
        self._by_name = {category.name: category for category in self._categories}

    def list(self) -> list[Category]:
        return list(self._categories)

    def names(self) -> list[str]:
        return [category.name for category in self._categories]

    def get_by_name(self, name: str) -> Optional[Category]:
        return self._by_name.get(name)

    def is_known(self, name: str) -> bool:
        return name in self._by_name

    def color_for(self, name: str) -> str:
        category = self._by_name.get(name) or self._by_name.get(FALLBACK_CATEGORY_NAME)
        return category.color if category else "#6B7280"
