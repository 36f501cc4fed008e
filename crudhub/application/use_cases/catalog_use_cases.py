"""
Catalog use cases for the application layer.
Category tree and product management.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from crudhub.application.use_cases.base_use_case import (
    CreateUseCase, UpdateUseCase, DeleteUseCase, GetByIdUseCase, ListUseCase
)
from crudhub.application.dto.base_dto import PaginationDTO
from crudhub.application.dto.catalog_dto import (
    CreateCategoryRequestDTO,
    UpdateCategoryRequestDTO,
    MoveCategoryRequestDTO,
    ListCategoriesRequestDTO,
    CategoryResponseDTO,
    CategoryListResponseDTO,
    CreateProductRequestDTO,
    UpdateProductRequestDTO,
    ListProductsRequestDTO,
    ProductResponseDTO,
    ProductListResponseDTO
)
from crudhub.domain.models.base import (
    EntityNotFoundError,
    DuplicateEntityError,
    ReferentialGuardError
)
from crudhub.domain.models.category import (
    Category,
    ensure_valid_parent,
    depth_of,
    full_path
)
from crudhub.domain.models.product import Product
from crudhub.domain.repositories.category_repository import CategoryRepository
from crudhub.domain.repositories.product_repository import ProductRepository


logger = logging.getLogger(__name__)


class _CategoryTreeMixin:
    """Shared lookups over the category tree."""

    category_repository: CategoryRepository

    async def _require_category(self, category_id: int) -> Category:
        category = await self.category_repository.find_by_id(category_id)
        if not category:
            raise EntityNotFoundError("Category", category_id)
        return category

    async def _ensure_unique_name(self, category: Category) -> None:
        existing = await self.category_repository.find_by_name(category.name, category.parent_id)
        if existing and existing.id != category.id:
            raise DuplicateEntityError("Category", "name", category.name)

    async def _to_responses(self, categories: List[Category]) -> List[CategoryResponseDTO]:
        tree = await self.category_repository.list_all()
        parents: Dict[int, Optional[int]] = {node.id: node.parent_id for node in tree}
        names: Dict[int, str] = {node.id: node.name for node in tree}
        return [
            CategoryResponseDTO.from_domain(
                category,
                depth=depth_of(category.id, parents),
                path=full_path(category, names, parents)
            )
            for category in categories
        ]

    async def _to_response(self, category: Category) -> CategoryResponseDTO:
        return (await self._to_responses([category]))[0]


class CreateCategoryUseCase(_CategoryTreeMixin, CreateUseCase[CreateCategoryRequestDTO, CategoryResponseDTO]):
    """Use case for creating a category."""

    def __init__(self, category_repository: CategoryRepository):
        super().__init__()
        self.category_repository = category_repository

    async def _execute_command_logic(self, request: CreateCategoryRequestDTO) -> CategoryResponseDTO:
        category = Category(
            name=request.name.strip() if request.name else request.name,
            description=request.description,
            parent_id=request.parent_id,
            is_active=request.is_active,
            sort_order=request.sort_order
        )
        category.validate()

        if category.parent_id is not None:
            await self._require_category(category.parent_id)
        await self._ensure_unique_name(category)

        saved = await self.category_repository.add(category)
        logger.info("Category created", extra={"category_id": saved.id})
        return await self._to_response(saved)


class UpdateCategoryUseCase(_CategoryTreeMixin, UpdateUseCase[UpdateCategoryRequestDTO, CategoryResponseDTO]):
    """Use case for updating a category."""

    def __init__(self, category_repository: CategoryRepository):
        super().__init__()
        self.category_repository = category_repository

    async def _execute_command_logic(self, request: UpdateCategoryRequestDTO) -> CategoryResponseDTO:
        category = await self._require_category(request.id)

        updated = category.with_patch(request.to_patch())
        updated.validate()

        if updated.parent_id != category.parent_id:
            await self._require_category(updated.parent_id)
            ensure_valid_parent(updated.id, updated.parent_id, await self.category_repository.parent_map())
        if updated.name != category.name or updated.parent_id != category.parent_id:
            await self._ensure_unique_name(updated)

        saved = await self.category_repository.update(updated)
        return await self._to_response(saved)


class MoveCategoryUseCase(_CategoryTreeMixin, UpdateUseCase[MoveCategoryRequestDTO, CategoryResponseDTO]):
    """
    Use case for moving a category to a new parent, or to the root.
    A category cannot move under itself or one of its descendants.
    """

    def __init__(self, category_repository: CategoryRepository):
        super().__init__()
        self.category_repository = category_repository

    async def _execute_command_logic(self, request: MoveCategoryRequestDTO) -> CategoryResponseDTO:
        category = await self._require_category(request.id)

        if request.parent_id is not None:
            await self._require_category(request.parent_id)
            ensure_valid_parent(category.id, request.parent_id, await self.category_repository.parent_map())

        moved = replace(category, parent_id=request.parent_id)
        await self._ensure_unique_name(moved)

        saved = await self.category_repository.update(moved)
        logger.info(
            "Category moved",
            extra={"category_id": saved.id, "from_parent_id": category.parent_id, "to_parent_id": saved.parent_id}
        )
        return await self._to_response(saved)


class GetCategoryUseCase(_CategoryTreeMixin, GetByIdUseCase[int, CategoryResponseDTO]):
    """Use case for getting a category with its depth and path."""

    def __init__(self, category_repository: CategoryRepository):
        super().__init__()
        self.category_repository = category_repository

    async def _execute_business_logic(self, category_id: int) -> CategoryResponseDTO:
        return await self._to_response(await self._require_category(category_id))


class ListCategoriesUseCase(_CategoryTreeMixin, ListUseCase[ListCategoriesRequestDTO, CategoryListResponseDTO]):
    """Use case for listing categories."""

    def __init__(self, category_repository: CategoryRepository, default_page_size: int = 10, max_page_size: int = 100):
        super().__init__(default_page_size, max_page_size)
        self.category_repository = category_repository

    async def _execute_business_logic(self, request: ListCategoriesRequestDTO) -> CategoryListResponseDTO:
        page, limit, offset = self._page_window(request)
        filters = {
            "parent_id": request.parent_id,
            "roots_only": request.roots_only,
            "is_active": request.is_active,
        }

        categories = await self.category_repository.list(offset=offset, limit=limit, **filters)
        total = await self.category_repository.count(**filters)

        return CategoryListResponseDTO(
            categories=await self._to_responses(categories),
            pagination=PaginationDTO(page=page, limit=limit, total=total)
        )


class DeleteCategoryUseCase(_CategoryTreeMixin, DeleteUseCase[int, None]):
    """
    Use case for soft-deleting a category.
    Blocked while it has live subcategories or live products.
    """

    def __init__(self, category_repository: CategoryRepository, product_repository: ProductRepository):
        super().__init__()
        self.category_repository = category_repository
        self.product_repository = product_repository

    async def _execute_command_logic(self, category_id: int) -> None:
        category = await self._require_category(category_id)

        children = await self.category_repository.count_live_children(category_id)
        if children:
            raise ReferentialGuardError(
                "Cannot delete category with subcategories",
                entity_type="Category",
                entity_id=category_id,
                blocking_count=children,
                count_label="children_count"
            )

        products = await self.product_repository.count_live_for_category(category_id)
        if products:
            raise ReferentialGuardError(
                "Cannot delete category with products",
                entity_type="Category",
                entity_id=category_id,
                blocking_count=products,
                count_label="product_count"
            )

        await self.category_repository.soft_delete(category)
        logger.info("Category deleted", extra={"category_id": category_id})


class ListCategoryProductsUseCase(_CategoryTreeMixin, ListUseCase[ListProductsRequestDTO, ProductListResponseDTO]):
    """Use case for listing the live products of a live category."""

    def __init__(
        self,
        category_repository: CategoryRepository,
        product_repository: ProductRepository,
        default_page_size: int = 10,
        max_page_size: int = 100
    ):
        super().__init__(default_page_size, max_page_size)
        self.category_repository = category_repository
        self.product_repository = product_repository

    async def _execute_business_logic(self, request: ListProductsRequestDTO) -> ProductListResponseDTO:
        await self._require_category(request.category_id)
        return await _list_products(self, request)


# Products

class _ProductMixin:
    """Shared product lookups."""

    product_repository: ProductRepository
    category_repository: CategoryRepository

    async def _require_product(self, product_id: int) -> Product:
        product = await self.product_repository.find_by_id(product_id)
        if not product:
            raise EntityNotFoundError("Product", product_id)
        return product

    async def _require_category_reference(self, category_id: Optional[int]) -> None:
        if category_id is not None and not await self.category_repository.find_by_id(category_id):
            raise EntityNotFoundError("Category", category_id)


class CreateProductUseCase(_ProductMixin, CreateUseCase[CreateProductRequestDTO, ProductResponseDTO]):
    """Use case for creating a product."""

    def __init__(self, product_repository: ProductRepository, category_repository: CategoryRepository):
        super().__init__()
        self.product_repository = product_repository
        self.category_repository = category_repository

    async def _execute_command_logic(self, request: CreateProductRequestDTO) -> ProductResponseDTO:
        product = Product(
            sku=request.sku.strip() if request.sku else request.sku,
            name=request.name,
            description=request.description,
            price=request.price,
            currency=request.currency.upper() if request.currency else request.currency,
            category_id=request.category_id,
            is_active=request.is_active
        )
        product.validate()

        await self._require_category_reference(product.category_id)
        if await self.product_repository.find_by_sku(product.sku):
            raise DuplicateEntityError("Product", "sku", product.sku)

        saved = await self.product_repository.add(product)
        logger.info("Product created", extra={"product_id": saved.id, "sku": saved.sku})
        return ProductResponseDTO.from_domain(saved)


class UpdateProductUseCase(_ProductMixin, UpdateUseCase[UpdateProductRequestDTO, ProductResponseDTO]):
    """Use case for updating a product. The SKU never changes."""

    def __init__(self, product_repository: ProductRepository, category_repository: CategoryRepository):
        super().__init__()
        self.product_repository = product_repository
        self.category_repository = category_repository

    async def _execute_command_logic(self, request: UpdateProductRequestDTO) -> ProductResponseDTO:
        product = await self._require_product(request.id)

        updated = product.with_patch(request.to_patch())
        updated.validate()
        if updated.category_id != product.category_id:
            await self._require_category_reference(updated.category_id)

        saved = await self.product_repository.update(updated)
        return ProductResponseDTO.from_domain(saved)


class GetProductUseCase(_ProductMixin, GetByIdUseCase[int, ProductResponseDTO]):
    """Use case for getting a product by ID."""

    def __init__(self, product_repository: ProductRepository):
        super().__init__()
        self.product_repository = product_repository

    async def _execute_business_logic(self, product_id: int) -> ProductResponseDTO:
        return ProductResponseDTO.from_domain(await self._require_product(product_id))


class ListProductsUseCase(ListUseCase[ListProductsRequestDTO, ProductListResponseDTO]):
    """Use case for listing products with filters and pagination."""

    def __init__(self, product_repository: ProductRepository, default_page_size: int = 10, max_page_size: int = 100):
        super().__init__(default_page_size, max_page_size)
        self.product_repository = product_repository

    async def _execute_business_logic(self, request: ListProductsRequestDTO) -> ProductListResponseDTO:
        return await _list_products(self, request)


class DeleteProductUseCase(_ProductMixin, DeleteUseCase[int, None]):
    """Use case for soft-deleting a product."""

    def __init__(self, product_repository: ProductRepository):
        super().__init__()
        self.product_repository = product_repository

    async def _execute_command_logic(self, product_id: int) -> None:
        product = await self._require_product(product_id)
        await self.product_repository.soft_delete(product)
        logger.info("Product deleted", extra={"product_id": product_id, "sku": product.sku})


async def _list_products(use_case, request: ListProductsRequestDTO) -> ProductListResponseDTO:
    page, limit, offset = use_case._page_window(request)
    filters = {
        "category_id": request.category_id,
        "search": request.search,
        "is_active": request.is_active,
    }

    products = await use_case.product_repository.list(offset=offset, limit=limit, **filters)
    total = await use_case.product_repository.count(**filters)

    return ProductListResponseDTO(
        products=[ProductResponseDTO.from_domain(product) for product in products],
        pagination=PaginationDTO(page=page, limit=limit, total=total)
    )
