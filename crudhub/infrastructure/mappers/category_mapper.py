"""
Category mapper for converting between domain entities and database models.
"""

from crudhub.domain.models.category import Category
from crudhub.infrastructure.db.models import CategoryModel


class CategoryMapper:
    """Maps between Category domain entity and CategoryModel database model."""

    def domain_to_model(self, category: Category) -> CategoryModel:
        return CategoryModel(
            id=category.id,
            name=category.name,
            description=category.description,
            parent_id=category.parent_id,
            is_active=category.is_active,
            sort_order=category.sort_order,
            created_at=category.created_at,
            updated_at=category.updated_at,
            deleted_at=category.deleted_at
        )

    def model_to_domain(self, model: CategoryModel) -> Category:
        return Category(
            id=model.id,
            name=model.name,
            description=model.description,
            parent_id=model.parent_id,
            is_active=model.is_active,
            sort_order=model.sort_order or 0,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at
        )

    def update_model(self, model: CategoryModel, category: Category) -> None:
        model.name = category.name
        model.description = category.description
        model.parent_id = category.parent_id
        model.is_active = category.is_active
        model.sort_order = category.sort_order
        model.updated_at = category.updated_at
        model.deleted_at = category.deleted_at
