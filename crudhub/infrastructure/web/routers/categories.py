"""
Category management router.
Handles the category tree: CRUD, moves and the products of a category.
"""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, status, Query

from crudhub.config import Settings
from crudhub.application.use_cases.catalog_use_cases import (
    CreateCategoryUseCase,
    UpdateCategoryUseCase,
    MoveCategoryUseCase,
    GetCategoryUseCase,
    ListCategoriesUseCase,
    DeleteCategoryUseCase,
    ListCategoryProductsUseCase
)
from crudhub.application.dto.base_dto import MessageResponseDTO
from crudhub.application.dto.catalog_dto import (
    CreateCategoryRequestDTO,
    UpdateCategoryRequestDTO,
    MoveCategoryRequestDTO,
    ListCategoriesRequestDTO,
    CategoryResponseDTO,
    CategoryListResponseDTO,
    ListProductsRequestDTO,
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


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CategoryResponseDTO)
async def create_category(
    request: CreateCategoryRequestDTO,
    repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)]
):
    """
    Create a new category.

    - **name**: Name, unique among its siblings (required)
    - **description**: Up to 500 characters
    - **parent_id**: Parent category; root when missing
    - **is_active**: Active flag, true by default
    - **sort_order**: Display order among siblings
    """
    use_case = CreateCategoryUseCase(repository)
    return await use_case.execute(request)


@router.get("", response_model=CategoryListResponseDTO)
async def list_categories(
    repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    parent_id: Optional[int] = Query(None, description="Only children of this category"),
    roots_only: bool = Query(False, description="Only root categories"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag")
):
    """
    List live categories with their depth and full path.
    """
    use_case = ListCategoriesUseCase(repository, settings.default_page_size, settings.max_page_size)
    return await use_case.execute(ListCategoriesRequestDTO(
        page=page,
        limit=limit or settings.default_page_size,
        parent_id=parent_id,
        roots_only=roots_only,
        is_active=is_active
    ))


@router.get("/{category_id}", response_model=CategoryResponseDTO)
async def get_category(
    category_id: int,
    repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)]
):
    """Get a live category by ID."""
    use_case = GetCategoryUseCase(repository)
    return await use_case.execute(category_id)


@router.put("/{category_id}", response_model=CategoryResponseDTO)
async def update_category(
    category_id: int,
    request: UpdateCategoryRequestDTO,
    repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)]
):
    """
    Update a category. Empty or missing fields keep their current value.
    """
    request.id = category_id
    use_case = UpdateCategoryUseCase(repository)
    return await use_case.execute(request)


@router.post("/{category_id}/move", response_model=CategoryResponseDTO)
async def move_category(
    category_id: int,
    request: MoveCategoryRequestDTO,
    repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)]
):
    """
    Move a category under a new parent.

    - **parent_id**: New parent; null moves the category to the root
    """
    request.id = category_id
    use_case = MoveCategoryUseCase(repository)
    return await use_case.execute(request)


@router.delete("/{category_id}", response_model=MessageResponseDTO)
async def delete_category(
    category_id: int,
    repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)],
    product_repository: Annotated[SQLAlchemyProductRepository, Depends(get_product_repository)]
):
    """
    Soft-delete a category.
    Rejected with 409 while it has live subcategories or products.
    """
    use_case = DeleteCategoryUseCase(repository, product_repository)
    await use_case.execute(category_id)
    return MessageResponseDTO(message="Category deleted successfully")


@router.get("/{category_id}/products", response_model=ProductListResponseDTO)
async def list_category_products(
    category_id: int,
    repository: Annotated[SQLAlchemyCategoryRepository, Depends(get_category_repository)],
    product_repository: Annotated[SQLAlchemyProductRepository, Depends(get_product_repository)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag")
):
    """List the live products of a live category."""
    use_case = ListCategoryProductsUseCase(
        repository,
        product_repository,
        settings.default_page_size,
        settings.max_page_size
    )
    return await use_case.execute(ListProductsRequestDTO(
        page=page,
        limit=limit or settings.default_page_size,
        category_id=category_id,
        is_active=is_active
    ))
