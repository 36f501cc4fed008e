"""
Category repository interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from crudhub.domain.models.category import Category


class CategoryRepository(ABC):
    """
    Repository interface for the category tree.
    """

    @abstractmethod
    async def add(self, category: Category) -> Category:
        """
        Persist a new category.
        Raises DuplicateEntityError if a sibling already uses the name.
        """
        pass

    @abstractmethod
    async def update(self, category: Category) -> Category:
        """
        Persist changes to an existing category.
        """
        pass

    @abstractmethod
    async def find_by_id(self, category_id: int, include_deleted: bool = False) -> Optional[Category]:
        """
        Find a category by its ID.
        """
        pass

    @abstractmethod
    async def find_by_name(self, name: str, parent_id: Optional[int]) -> Optional[Category]:
        """
        Find a live category by name among the children of parent_id.
        """
        pass

    @abstractmethod
    async def list(
        self,
        offset: int = 0,
        limit: int = 10,
        parent_id: Optional[int] = None,
        roots_only: bool = False,
        is_active: Optional[bool] = None
    ) -> List[Category]:
        """
        List live categories ordered by sort order then name.
        """
        pass

    @abstractmethod
    async def count(
        self,
        parent_id: Optional[int] = None,
        roots_only: bool = False,
        is_active: Optional[bool] = None
    ) -> int:
        """
        Count categories matching the same filters as list().
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Category]:
        """
        Get every live category, for building tree paths.
        """
        pass

    @abstractmethod
    async def parent_map(self) -> Dict[int, Optional[int]]:
        """
        Map every live category id to its parent id.
        """
        pass

    @abstractmethod
    async def count_live_children(self, category_id: int) -> int:
        """
        Count live categories whose parent is category_id.
        """
        pass

    @abstractmethod
    async def soft_delete(self, category: Category) -> None:
        """
        Mark a category as deleted.
        """
        pass
