"""
Category repository implementation using SQLAlchemy.
"""

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crudhub.domain.models.category import Category
from crudhub.domain.repositories.category_repository import CategoryRepository as CategoryRepositoryInterface
from crudhub.domain.models.base import EntityNotFoundError, DuplicateEntityError
from crudhub.infrastructure.db.models import CategoryModel
from crudhub.infrastructure.mappers.category_mapper import CategoryMapper
from crudhub.infrastructure.repositories.base import SQLAlchemyRepository


class SQLAlchemyCategoryRepository(SQLAlchemyRepository, CategoryRepositoryInterface):
    """SQLAlchemy implementation of category repository."""

    model = CategoryModel

    def __init__(self, session: Session):
        super().__init__(session)
        self.mapper = CategoryMapper()

    async def add(self, category: Category) -> Category:
        model = self.mapper.domain_to_model(category)
        self._write(category, model)

        category.id = model.id
        return category

    async def update(self, category: Category) -> Category:
        model = self._get_model(category.id, include_deleted=True)
        if not model:
            raise EntityNotFoundError("Category", category.id)

        category.updated_at = self._now()
        self.mapper.update_model(model, category)
        self._write(category)
        return category

    async def find_by_id(self, category_id: int, include_deleted: bool = False) -> Optional[Category]:
        model = self._get_model(category_id, include_deleted)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def find_by_name(self, name: str, parent_id: Optional[int]) -> Optional[Category]:
        query = self._query().filter(CategoryModel.name == name)
        if parent_id is None:
            query = query.filter(CategoryModel.parent_id.is_(None))
        else:
            query = query.filter(CategoryModel.parent_id == parent_id)
        model = query.first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def list(
        self,
        offset: int = 0,
        limit: int = 10,
        parent_id: Optional[int] = None,
        roots_only: bool = False,
        is_active: Optional[bool] = None
    ) -> List[Category]:
        query = self._filtered(parent_id, roots_only, is_active).order_by(
            CategoryModel.sort_order, CategoryModel.name, CategoryModel.id
        )
        models = query.offset(offset).limit(limit).all()
        return [self.mapper.model_to_domain(model) for model in models]

    async def count(
        self,
        parent_id: Optional[int] = None,
        roots_only: bool = False,
        is_active: Optional[bool] = None
    ) -> int:
        query = self._filtered(parent_id, roots_only, is_active)
        return query.with_entities(func.count(CategoryModel.id)).scalar() or 0

    async def list_all(self) -> List[Category]:
        models = self._query().order_by(CategoryModel.id).all()
        return [self.mapper.model_to_domain(model) for model in models]

    async def parent_map(self) -> Dict[int, Optional[int]]:
        rows = self._query().with_entities(CategoryModel.id, CategoryModel.parent_id).all()
        return {row.id: row.parent_id for row in rows}

    async def count_live_children(self, category_id: int) -> int:
        return self._query().with_entities(func.count(CategoryModel.id)).filter(
            CategoryModel.parent_id == category_id
        ).scalar() or 0

    async def soft_delete(self, category: Category) -> None:
        model = self._get_model(category.id)
        if not model:
            raise EntityNotFoundError("Category", category.id)

        if category.deleted_at is None:
            category.mark_deleted(self._now())
        category.updated_at = category.deleted_at
        self.mapper.update_model(model, category)
        self._write(category)

    def _filtered(self, parent_id: Optional[int], roots_only: bool, is_active: Optional[bool]):
        query = self._query()
        if roots_only:
            query = query.filter(CategoryModel.parent_id.is_(None))
        elif parent_id is not None:
            query = query.filter(CategoryModel.parent_id == parent_id)
        if is_active is not None:
            query = query.filter(CategoryModel.is_active == is_active)
        return query

    def _translate_integrity_error(self, exc: IntegrityError, category: Category) -> Optional[Exception]:
        if self._violates(exc, "uq_categories_name_parent", "categories.name"):
            return DuplicateEntityError("Category", "name", category.name)
        return None
