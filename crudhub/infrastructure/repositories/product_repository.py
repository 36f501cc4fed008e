"""
Product repository implementation using SQLAlchemy.
"""

from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crudhub.domain.models.product import Product
from crudhub.domain.repositories.product_repository import ProductRepository as ProductRepositoryInterface
from crudhub.domain.models.base import EntityNotFoundError, DuplicateEntityError
from crudhub.infrastructure.db.models import ProductModel
from crudhub.infrastructure.mappers.product_mapper import ProductMapper
from crudhub.infrastructure.repositories.base import SQLAlchemyRepository


class SQLAlchemyProductRepository(SQLAlchemyRepository, ProductRepositoryInterface):
    """SQLAlchemy implementation of product repository."""

    model = ProductModel

    def __init__(self, session: Session):
        super().__init__(session)
        self.mapper = ProductMapper()

    async def add(self, product: Product) -> Product:
        model = self.mapper.domain_to_model(product)
        self._write(product, model)

        product.id = model.id
        return product

    async def update(self, product: Product) -> Product:
        model = self._get_model(product.id, include_deleted=True)
        if not model:
            raise EntityNotFoundError("Product", product.id)

        product.updated_at = self._now()
        self.mapper.update_model(model, product)
        self._write(product)
        return product

    async def find_by_id(self, product_id: int, include_deleted: bool = False) -> Optional[Product]:
        model = self._get_model(product_id, include_deleted)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def find_by_sku(self, sku: str) -> Optional[Product]:
        model = self._query().filter(ProductModel.sku == sku).first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def list(
        self,
        offset: int = 0,
        limit: int = 10,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> List[Product]:
        query = self._filtered(category_id, search, is_active).order_by(ProductModel.id)
        models = query.offset(offset).limit(limit).all()
        return [self.mapper.model_to_domain(model) for model in models]

    async def count(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> int:
        query = self._filtered(category_id, search, is_active)
        return query.with_entities(func.count(ProductModel.id)).scalar() or 0

    async def count_live_for_category(self, category_id: int) -> int:
        return self._query().with_entities(func.count(ProductModel.id)).filter(
            ProductModel.category_id == category_id
        ).scalar() or 0

    async def soft_delete(self, product: Product) -> None:
        model = self._get_model(product.id)
        if not model:
            raise EntityNotFoundError("Product", product.id)

        if product.deleted_at is None:
            product.mark_deleted(self._now())
        product.updated_at = product.deleted_at
        self.mapper.update_model(model, product)
        self._write(product)

    def _filtered(self, category_id: Optional[int], search: Optional[str], is_active: Optional[bool]):
        query = self._query()
        if category_id is not None:
            query = query.filter(ProductModel.category_id == category_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                ProductModel.name.ilike(pattern),
                ProductModel.sku.ilike(pattern)
            ))
        if is_active is not None:
            query = query.filter(ProductModel.is_active == is_active)
        return query

    def _translate_integrity_error(self, exc: IntegrityError, product: Product) -> Optional[Exception]:
        if self._violates(exc, "uq_products_sku", "products.sku"):
            return DuplicateEntityError("Product", "sku", product.sku)
        return None
