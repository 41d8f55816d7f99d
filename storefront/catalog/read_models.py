"""Read models produced by the listing engine.

These are denormalized, read-optimized projections of catalog rows.
They are never persisted.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def _money(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


@dataclass(frozen=True)
class InventoryLevel:
    """Inventory counters of one variant."""

    sku: str
    quantity: int
    reserved: int

    def to_dict(self) -> dict[str, Any]:
        return {"sku": self.sku, "quantity": self.quantity, "reserved": self.reserved}


@dataclass(frozen=True)
class ListItemVariant:
    """Per-variant breakdown inside a list item."""

    id: str
    sku_prefix: str | None
    price: Decimal
    inventory: list[InventoryLevel] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sku_prefix": self.sku_prefix,
            "price": float(self.price),
            "inventory": [i.to_dict() for i in self.inventory],
        }


@dataclass(frozen=True)
class PrimaryImage:
    url: str
    alt: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "alt": self.alt}


@dataclass(frozen=True)
class CategorySummary:
    name: str
    slug: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "slug": self.slug}


@dataclass(frozen=True)
class ProductListItem:
    """Product projection used by every listing view.

    Attributes:
        id: Product ID.
        title: Product title.
        slug: Product slug.
        short_description: Teaser text.
        price_min: Lowest variant price, None without variants.
        price_max: Highest variant price, None without variants.
        primary_image: Image flagged primary, None if no image is flagged.
        variants_count: Number of variants.
        category: Category name and slug, None if uncategorized.
        variants: Per-variant price and inventory breakdown.
    """

    id: str
    title: str
    slug: str
    short_description: str | None
    price_min: Decimal | None
    price_max: Decimal | None
    primary_image: PrimaryImage | None
    variants_count: int
    category: CategorySummary | None
    variants: list[ListItemVariant] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "short_description": self.short_description,
            "price_min": _money(self.price_min),
            "price_max": _money(self.price_max),
            "primary_image": self.primary_image.to_dict() if self.primary_image else None,
            "variants_count": self.variants_count,
            "category": self.category.to_dict() if self.category else None,
            "variants": [v.to_dict() for v in self.variants],
        }


@dataclass(frozen=True)
class ListingPage(Generic[T]):
    """Paginated result container.

    Attributes:
        items: Items on this page.
        total: Total count of matching items.
        page: Current page (1-indexed).
        per_page: Items per page.
    """

    items: list[T]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1


@dataclass(frozen=True)
class FilterFacets:
    """Filter values available across published products."""

    materials: list[str]
    colors: list[str]
    price_min: Decimal
    price_max: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "materials": list(self.materials),
            "colors": list(self.colors),
            "price_min": float(self.price_min),
            "price_max": float(self.price_max),
        }
