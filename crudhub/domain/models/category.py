"""
Category domain model.
Categories form a tree through parent_id; a category can never be its own
ancestor.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Dict, List

from crudhub.domain.models.base import BaseEntity, ValidationError


CATEGORY_NAME_MAX_LENGTH = 100
CATEGORY_DESCRIPTION_MAX_LENGTH = 500
PATH_SEPARATOR = " > "


@dataclass(frozen=True)
class CategoryPatch:
    """Partial update for a category. None or empty means "no change"."""

    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


@dataclass
class Category(BaseEntity):
    """Product category node."""

    name: str = ""
    description: Optional[str] = None
    parent_id: Optional[int] = None
    is_active: bool = True
    sort_order: int = 0

    def validate(self) -> None:
        """Validate category state."""
        if not self.name or not self.name.strip():
            raise ValidationError("Category name is required", "name")

        if len(self.name) > CATEGORY_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Category name cannot exceed {CATEGORY_NAME_MAX_LENGTH} characters", "name"
            )

        if self.description and len(self.description) > CATEGORY_DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Category description cannot exceed {CATEGORY_DESCRIPTION_MAX_LENGTH} characters",
                "description"
            )

        if self.parent_id is not None and self.id is not None and self.parent_id == self.id:
            raise ValidationError("Category cannot be its own parent", "parent_id")

    @property
    def is_root(self) -> bool:
        """Check if the category has no parent."""
        return self.parent_id is None

    def with_patch(self, patch: CategoryPatch) -> "Category":
        """Return a copy with the supplied patch fields applied."""
        changes = {}
        if patch.name:
            changes["name"] = patch.name
        if patch.description:
            changes["description"] = patch.description
        if patch.parent_id is not None:
            changes["parent_id"] = patch.parent_id
        if patch.is_active is not None:
            changes["is_active"] = patch.is_active
        if patch.sort_order is not None:
            changes["sort_order"] = patch.sort_order
        return replace(self, **changes)

    def mark_deleted(self, at: Optional[datetime] = None) -> None:
        """Soft-delete the category."""
        self.deleted_at = at or datetime.utcnow()


def ancestor_ids(category_id: Optional[int], parents: Dict[int, Optional[int]]) -> List[int]:
    """
    Walk up the tree from category_id using a {id: parent_id} map.
    Returns the ids from the nearest parent to the root. Stops on a cycle.
    """
    ancestors: List[int] = []
    seen = set()
    current = parents.get(category_id) if category_id is not None else None
    while current is not None and current not in seen:
        ancestors.append(current)
        seen.add(current)
        current = parents.get(current)
    return ancestors


def ensure_valid_parent(
    category_id: Optional[int],
    new_parent_id: Optional[int],
    parents: Dict[int, Optional[int]]
) -> None:
    """
    Reject moving a category under itself or one of its descendants.
    parents maps every live category id to its parent id.
    """
    if new_parent_id is None or category_id is None:
        return

    if new_parent_id == category_id:
        raise ValidationError("Category cannot be moved to itself", "parent_id")

    if category_id in ancestor_ids(new_parent_id, parents):
        raise ValidationError(
            "Category cannot be moved under one of its own descendants", "parent_id"
        )


def depth_of(category_id: int, parents: Dict[int, Optional[int]]) -> int:
    """Depth of a category in the tree, root categories being 0."""
    return len(ancestor_ids(category_id, parents))


def full_path(category: Category, names: Dict[int, str], parents: Dict[int, Optional[int]]) -> str:
    """Full path of a category, e.g. "Electronics > Computers > Laptops"."""
    chain = [names.get(ancestor, "?") for ancestor in reversed(ancestor_ids(category.id, parents))]
    chain.append(category.name)
    return PATH_SEPARATOR.join(chain)
