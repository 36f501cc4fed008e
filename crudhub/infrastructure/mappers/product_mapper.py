"""
Product mapper for converting between domain entities and database models.
"""

from crudhub.domain.models.product import Product, DEFAULT_CURRENCY
from crudhub.infrastructure.db.models import ProductModel


class ProductMapper:
    """Maps between Product domain entity and ProductModel database model."""

    def domain_to_model(self, product: Product) -> ProductModel:
        return ProductModel(
            id=product.id,
            sku=product.sku,
            name=product.name,
            description=product.description,
            price=product.price,
            currency=product.currency,
            category_id=product.category_id,
            is_active=product.is_active,
            created_at=product.created_at,
            updated_at=product.updated_at,
            deleted_at=product.deleted_at
        )

    def model_to_domain(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            sku=model.sku,
            name=model.name,
            description=model.description,
            price=model.price,
            currency=model.currency or DEFAULT_CURRENCY,
            category_id=model.category_id,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at
        )

    def update_model(self, model: ProductModel, product: Product) -> None:
        model.name = product.name
        model.description = product.description
        model.price = product.price
        model.currency = product.currency
        model.category_id = product.category_id
        model.is_active = product.is_active
        model.updated_at = product.updated_at
        model.deleted_at = product.deleted_at
