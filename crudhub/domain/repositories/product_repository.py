"""
Product repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from crudhub.domain.models.product import Product


class ProductRepository(ABC):
    """
    Repository interface for catalog products.
    """

    @abstractmethod
    async def add(self, product: Product) -> Product:
        """
        Persist a new product.
        Raises DuplicateEntityError if the SKU is already taken.
        """
        pass

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """
        Persist changes to an existing product.
        """
        pass

    @abstractmethod
    async def find_by_id(self, product_id: int, include_deleted: bool = False) -> Optional[Product]:
        """
        Find a product by its ID.
        """
        pass

    @abstractmethod
    async def find_by_sku(self, sku: str) -> Optional[Product]:
        """
        Find a live product by SKU.
        """
        pass

    @abstractmethod
    async def list(
        self,
        offset: int = 0,
        limit: int = 10,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> List[Product]:
        """
        List live products ordered by id.
        """
        pass

    @abstractmethod
    async def count(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> int:
        """
        Count products matching the same filters as list().
        """
        pass

    @abstractmethod
    async def count_live_for_category(self, category_id: int) -> int:
        """
        Count live products in a category.
        """
        pass

    @abstractmethod
    async def soft_delete(self, product: Product) -> None:
        """
        Mark a product as deleted.
        """
        pass
