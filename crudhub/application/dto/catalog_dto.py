"""
Catalog DTOs for the application layer.
Categories and products.
"""

from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from pydantic import Field

from crudhub.domain.models.category import Category, CategoryPatch
from crudhub.domain.models.product import Product, ProductPatch, DEFAULT_CURRENCY
from .base_dto import (
    ResponseDTO, RequestDTO, CreateRequestDTO, UpdateRequestDTO, ListRequestDTO, PaginationDTO, BaseDTO
)


# Categories

class CreateCategoryRequestDTO(CreateRequestDTO):
    """DTO for creating a category."""

    name: str = Field(description="Category name, unique among its siblings")
    description: Optional[str] = Field(default=None, description="Category description")
    parent_id: Optional[int] = Field(default=None, description="Parent category ID")
    is_active: bool = Field(default=True)
    sort_order: int = Field(default=0)


class UpdateCategoryRequestDTO(UpdateRequestDTO):
    """DTO for updating a category. Omitted or empty fields keep their value."""

    id: Optional[int] = Field(default=None, description="Category ID, taken from the path")
    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

    def to_patch(self) -> CategoryPatch:
        return CategoryPatch(
            name=self.name,
            description=self.description,
            parent_id=self.parent_id,
            is_active=self.is_active,
            sort_order=self.sort_order
        )


class MoveCategoryRequestDTO(RequestDTO):
    """DTO for moving a category. A null parent makes it a root category."""

    id: Optional[int] = Field(default=None, description="Category ID, taken from the path")
    parent_id: Optional[int] = Field(default=None, description="New parent category ID")


class ListCategoriesRequestDTO(ListRequestDTO):
    """DTO for listing categories."""

    parent_id: Optional[int] = Field(default=None, description="Only children of this category")
    roots_only: bool = Field(default=False, description="Only root categories")
    is_active: Optional[bool] = Field(default=None)


class CategoryResponseDTO(ResponseDTO):
    """DTO for category responses."""

    name: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    is_active: bool = True
    sort_order: int = 0
    depth: int = 0
    path: Optional[str] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, category: Category, depth: int = 0, path: Optional[str] = None) -> "CategoryResponseDTO":
        return cls(
            id=category.id,
            name=category.name,
            description=category.description,
            parent_id=category.parent_id,
            is_active=category.is_active,
            sort_order=category.sort_order,
            depth=depth,
            path=path or category.name,
            created_at=category.created_at,
            updated_at=category.updated_at,
            deleted_at=category.deleted_at
        )


class CategoryListResponseDTO(BaseDTO):
    """Paginated category list."""

    categories: List[CategoryResponseDTO]
    pagination: PaginationDTO


# Products

class CreateProductRequestDTO(CreateRequestDTO):
    """DTO for creating a product."""

    sku: str = Field(description="Stock keeping unit, unique")
    name: str = Field(description="Product name")
    description: Optional[str] = Field(default=None)
    price: Decimal = Field(max_digits=10, decimal_places=2, description="Unit price")
    currency: str = Field(default=DEFAULT_CURRENCY, description="ISO 4217 currency code")
    category_id: Optional[int] = Field(default=None, description="Category ID")
    is_active: bool = Field(default=True)


class UpdateProductRequestDTO(UpdateRequestDTO):
    """DTO for updating a product. Omitted or empty fields keep their value."""

    id: Optional[int] = Field(default=None, description="Product ID, taken from the path")
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    currency: Optional[str] = None
    category_id: Optional[int] = None
    is_active: Optional[bool] = None

    def to_patch(self) -> ProductPatch:
        return ProductPatch(
            name=self.name,
            description=self.description,
            price=self.price,
            currency=self.currency,
            category_id=self.category_id,
            is_active=self.is_active
        )


class ListProductsRequestDTO(ListRequestDTO):
    """DTO for listing products."""

    category_id: Optional[int] = Field(default=None)
    search: Optional[str] = Field(default=None, max_length=255, description="Search by name or SKU")
    is_active: Optional[bool] = Field(default=None)


class ProductResponseDTO(ResponseDTO):
    """DTO for product responses."""

    sku: str
    name: str
    description: Optional[str] = None
    price: Decimal
    currency: str
    formatted_price: str
    category_id: Optional[int] = None
    is_active: bool = True
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, product: Product) -> "ProductResponseDTO":
        return cls(
            id=product.id,
            sku=product.sku,
            name=product.name,
            description=product.description,
            price=product.price,
            currency=product.currency,
            formatted_price=product.format_price(),
            category_id=product.category_id,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
            deleted_at=product.deleted_at
        )


class ProductListResponseDTO(BaseDTO):
    """Paginated product list."""

    products: List[ProductResponseDTO]
    pagination: PaginationDTO
