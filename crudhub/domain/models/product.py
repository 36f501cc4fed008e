"""
Product domain model.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from crudhub.domain.models.base import BaseEntity, ValidationError


SKU_MAX_LENGTH = 50
PRODUCT_NAME_MAX_LENGTH = 200
PRODUCT_DESCRIPTION_MAX_LENGTH = 1000
DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True)
class ProductPatch:
    """Partial update for a product. None or empty means "no change"."""

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    currency: Optional[str] = None
    category_id: Optional[int] = None
    is_active: Optional[bool] = None


@dataclass
class Product(BaseEntity):
    """Catalog product, unique by SKU."""

    sku: str = ""
    name: str = ""
    description: Optional[str] = None
    price: Decimal = Decimal("0")
    currency: str = DEFAULT_CURRENCY
    category_id: Optional[int] = None
    is_active: bool = True

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.price, Decimal):
            self.price = Decimal(str(self.price))
        if not self.currency:
            self.currency = DEFAULT_CURRENCY

    def validate(self) -> None:
        """Validate product state."""
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required", "name")

        if len(self.name) > PRODUCT_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Product name cannot exceed {PRODUCT_NAME_MAX_LENGTH} characters", "name"
            )

        if not self.sku or not self.sku.strip():
            raise ValidationError("Product SKU is required", "sku")

        if len(self.sku) > SKU_MAX_LENGTH:
            raise ValidationError(f"Product SKU cannot exceed {SKU_MAX_LENGTH} characters", "sku")

        if self.price < 0:
            raise ValidationError("Product price cannot be negative", "price")

        if self.description and len(self.description) > PRODUCT_DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Product description cannot exceed {PRODUCT_DESCRIPTION_MAX_LENGTH} characters",
                "description"
            )

        if len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError("Currency must be a 3-letter code", "currency")

    def format_price(self) -> str:
        """Format the price with its currency."""
        return f"{self.price:.2f} {self.currency}"

    def with_patch(self, patch: ProductPatch) -> "Product":
        """Return a copy with the supplied patch fields applied."""
        changes = {}
        if patch.name:
            changes["name"] = patch.name
        if patch.description:
            changes["description"] = patch.description
        if patch.price is not None:
            changes["price"] = patch.price
        if patch.currency:
            changes["currency"] = patch.currency.upper()
        if patch.category_id is not None:
            changes["category_id"] = patch.category_id
        if patch.is_active is not None:
            changes["is_active"] = patch.is_active
        return replace(self, **changes)

    def mark_deleted(self, at: Optional[datetime] = None) -> None:
        """Soft-delete the product."""
        self.deleted_at = at or datetime.utcnow()
