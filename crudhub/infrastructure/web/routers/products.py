"""
Product management router.
Handles CRUD operations for catalog products.
"""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, status, Query

from crudhub.config import Settings
from crudhub.application.use_cases.catalog_use_cases import (
    CreateProductUseCase,
    UpdateProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    DeleteProductUseCase
)
from crudhub.application.dto.base_dto import MessageResponseDTO
from crudhub.application.dto.catalog_dto import (
    CreateProductRequestDTO,
    UpdateProductRequestDTO,
    ListProductsRequestDTO,
    ProductResponseDTO,
    ProductListResponseDTO
)
from crudhub.infrastructure.repositories.category_repository import SQLAlchemyCategoryRepository
from crudhub.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from crudhub.infrastructure.web.dependencies import (
    get_app_settings,
    get_category_repository,
    get_product_repository
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProductResponseDTO)
async def create_product(
    request: CreateProductRequestDTO,
    repository: Annotated[SQLAlchemyProductRepository, Depends(get_product_repository)],
    category_repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)]
):
    """
    Create a new product.

    - **sku**: Stock keeping unit, unique (required)
    - **name**: Product name (required)
    - **description**: Up to 1000 characters
    - **price**: Unit price, 0 or more (required)
    - **currency**: Three-letter currency code, USD by default
    - **category_id**: Live category the product belongs to
    - **is_active**: Active flag, true by default
    """
    use_case = CreateProductUseCase(repository, category_repository)
    return await use_case.execute(request)


@router.get("", response_model=ProductListResponseDTO)
async def list_products(
    repository: Annotated[SQLAlchemyProductRepository, Depends(get_product_repository)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    category_id: Optional[int] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Search by name or SKU"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag")
):
    """
    List live products with pagination and filters.
    """
    use_case = ListProductsUseCase(repository, settings.default_page_size, settings.max_page_size)
    return await use_case.execute(ListProductsRequestDTO(
        page=page,
        limit=limit or settings.default_page_size,
        category_id=category_id,
        search=search,
        is_active=is_active
    ))


@router.get("/{product_id}", response_model=ProductResponseDTO)
async def get_product(
    product_id: int,
    repository: Annotated[SQLAlchemyProductRepository, Depends(get_product_repository)]
):
    """Get a live product by ID."""
    use_case = GetProductUseCase(repository)
    return await use_case.execute(product_id)


@router.put("/{product_id}", response_model=ProductResponseDTO)
async def update_product(
    product_id: int,
    request: UpdateProductRequestDTO,
    repository: Annotated[SQLAlchemyProductRepository, Depends(get_product_repository)],
    category_repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)]
):
    """
    Update a product. The SKU never changes; empty fields keep their value.
    """
    request.id = product_id
    use_case = UpdateProductUseCase(repository, category_repository)
    return await use_case.execute(request)


@router.delete("/{product_id}", response_model=MessageResponseDTO)
async def delete_product(
    product_id: int,
    repository: Annotated[SQLAlchemyProductRepository, Depends(get_product_repository)]
):
    """Soft-delete a product."""
    use_case = DeleteProductUseCase(repository)
    await use_case.execute(product_id)
    return MessageResponseDTO(message="Product deleted successfully")
