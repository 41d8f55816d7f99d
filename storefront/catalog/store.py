"""Read-only catalog queries backing the listing engine.

``CatalogStore`` describes the queries the listing engine needs;
``SqlCatalogStore`` implements them with SQLAlchemy. Every call opens
its own short-lived session, so independent calls may be awaited
concurrently.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol

from sqlalchemy import Select, distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.catalog.models import (
    Category,
    Inventory,
    Order,
    OrderItem,
    Product,
    ProductImage,
    ProductVariant,
    Review,
)
from storefront.domain.value_objects import COMPLETED_ORDER_STATUSES, PUBLISHED


# ============================================================================
# Query Parameters
# ============================================================================


class SortMode(str, Enum):
    """Ordering of search results."""

    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"


@dataclass(frozen=True)
class VariantPredicates:
    """Predicates a single variant must satisfy together."""

    min_price: Decimal | None = None
    max_price: Decimal | None = None
    color: str | None = None
    material: str | None = None


@dataclass(frozen=True)
class ProductFilter:
    """Product-level predicates of a search.

    Attributes:
        status: Required product status.
        category_slug: Relational category slug.
        q: Case-insensitive substring of title, short description or slug.
        variants: Keep only products having a variant matching these.
    """

    status: str = PUBLISHED.value
    category_slug: str | None = None
    q: str | None = None
    variants: VariantPredicates | None = None


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so a term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ============================================================================
# Rows
# ============================================================================


@dataclass(frozen=True)
class ProductRow:
    id: str
    title: str
    slug: str
    short_description: str | None
    category_name: str | None
    category_slug: str | None
    created_at: datetime


@dataclass(frozen=True)
class VariantRow:
    id: str
    product_id: str
    sku_prefix: str | None
    price: Decimal


@dataclass(frozen=True)
class InventoryRow:
    variant_id: str
    sku: str
    quantity: int
    reserved: int


@dataclass(frozen=True)
class ImageRow:
    product_id: str
    url: str
    alt: str | None


@dataclass(frozen=True)
class SalesRow:
    product_id: str
    units_sold: int


@dataclass(frozen=True)
class ReviewAggregateRow:
    product_id: str
    avg_rating: float
    review_count: int


@dataclass(frozen=True)
class FacetRow:
    material: str | None
    color_name: str | None
    price: Decimal | None


# ============================================================================
# Store Interface
# ============================================================================


class CatalogStore(Protocol):
    """Read-only queries consumed by the listing engine."""

    async def find_product_ids_by_variant_predicates(
        self,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        color: str | None = None,
        material: str | None = None,
    ) -> set[str]: ...

    async def count_distinct_products(self, filters: ProductFilter) -> int: ...

    async def query_products_page(
        self,
        filters: ProductFilter,
        sort: SortMode,
        limit: int,
        offset: int,
    ) -> list[ProductRow]: ...

    async def fetch_products_by_ids(self, ids: Sequence[str]) -> list[ProductRow]: ...

    async def fetch_recent_published_products(
        self,
        limit: int,
        exclude_ids: Iterable[str] = (),
    ) -> list[ProductRow]: ...

    async def fetch_published_products(self) -> list[ProductRow]: ...

    async def fetch_related_products(
        self,
        slug: str,
        category_tag: str | None,
        limit: int,
    ) -> list[ProductRow]: ...

    async def fetch_variants_for_products(self, ids: Sequence[str]) -> list[VariantRow]: ...

    async def fetch_inventory_for_variants(self, ids: Sequence[str]) -> list[InventoryRow]: ...

    async def fetch_primary_images_for_products(self, ids: Sequence[str]) -> list[ImageRow]: ...

    async def sum_completed_order_quantities_by_product(
        self,
        limit: int | None = None,
    ) -> list[SalesRow]: ...

    async def aggregate_approved_reviews_by_product(self) -> list[ReviewAggregateRow]: ...

    async def fetch_product_metadata(self, slug: str) -> dict[str, Any] | None: ...

    async def fetch_variant_facets(self) -> list[FacetRow]: ...


# ============================================================================
# SQLAlchemy Implementation
# ============================================================================


class SqlCatalogStore:
    """CatalogStore backed by SQLAlchemy.

    Example usage:
        store = SqlCatalogStore(async_session_factory)
        ids = await store.find_product_ids_by_variant_predicates(color="Navy")
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize store with a session factory.

        Args:
            session_factory: Factory producing async sessions.
        """
        self._session_factory = session_factory

    async def _all(self, query: Select) -> Sequence[Any]:
        async with self._session_factory() as session:
            result = await session.execute(query)
            return result.all()

    # ------------------------------------------------------------------
    # Product queries
    # ------------------------------------------------------------------

    @staticmethod
    def _product_select() -> Select:
        return select(
            Product.id,
            Product.title,
            Product.slug,
            Product.short_description,
            Category.name.label("category_name"),
            Category.slug.label("category_slug"),
            Product.created_at,
        ).outerjoin(Category, Category.id == Product.category_id)

    @staticmethod
    def _to_product_rows(rows: Iterable[Any]) -> list[ProductRow]:
        return [
            ProductRow(
                id=row.id,
                title=row.title,
                slug=row.slug,
                short_description=row.short_description,
                category_name=row.category_name,
                category_slug=row.category_slug,
                created_at=row.created_at,
            )
            for row in rows
        ]

    @staticmethod
    def _filter_conditions(filters: ProductFilter) -> list[Any]:
        conditions: list[Any] = [Product.status == filters.status]

        if filters.category_slug:
            conditions.append(Category.slug == filters.category_slug)

        if filters.q:
            pattern = f"%{escape_like(filters.q)}%"
            conditions.append(
                or_(
                    Product.title.ilike(pattern, escape="\\"),
                    Product.short_description.ilike(pattern, escape="\\"),
                    Product.slug.ilike(pattern, escape="\\"),
                )
            )

        if filters.variants is not None:
            variant_products = SqlCatalogStore._variant_product_ids(filters.variants)
            conditions.append(Product.id.in_(variant_products))

        return conditions

    @staticmethod
    def _variant_product_ids(predicates: VariantPredicates) -> Select:
        query = select(ProductVariant.product_id).distinct()

        if predicates.min_price is not None:
            query = query.where(ProductVariant.price >= predicates.min_price)
        if predicates.max_price is not None:
            query = query.where(ProductVariant.price <= predicates.max_price)
        if predicates.color is not None:
            query = query.where(ProductVariant.color_name == predicates.color)
        if predicates.material is not None:
            query = query.where(ProductVariant.material == predicates.material)

        return query

    async def find_product_ids_by_variant_predicates(
        self,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        color: str | None = None,
        material: str | None = None,
    ) -> set[str]:
        """Find products having a variant that matches every given predicate.

        Args:
            min_price: Minimum variant price (inclusive).
            max_price: Maximum variant price (inclusive).
            color: Exact variant color name.
            material: Exact variant material.

        Returns:
            Set of matching product IDs.
        """
        predicates = VariantPredicates(
            min_price=min_price,
            max_price=max_price,
            color=color,
            material=material,
        )
        return {row[0] for row in await self._all(self._variant_product_ids(predicates))}

    async def count_distinct_products(self, filters: ProductFilter) -> int:
        """Count distinct products matching product-level filters."""
        query = (
            select(func.count(distinct(Product.id)))
            .select_from(Product)
            .outerjoin(Category, Category.id == Product.category_id)
            .where(*self._filter_conditions(filters))
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar_one() or 0)

    async def query_products_page(
        self,
        filters: ProductFilter,
        sort: SortMode,
        limit: int,
        offset: int,
    ) -> list[ProductRow]:
        """Fetch one page of products.

        Price ordering uses each product's lowest (ascending) or highest
        (descending) variant price; products without variants go last.
        Product ID breaks ties so pages are stable.

        Args:
            filters: Product-level filters.
            sort: Sort mode.
            limit: Page size.
            offset: Rows to skip.

        Returns:
            Product rows of the page.
        """
        query = self._product_select().where(*self._filter_conditions(filters))

        if sort in (SortMode.PRICE_ASC, SortMode.PRICE_DESC):
            prices = (
                select(
                    ProductVariant.product_id.label("product_id"),
                    func.min(ProductVariant.price).label("min_price"),
                    func.max(ProductVariant.price).label("max_price"),
                )
                .group_by(ProductVariant.product_id)
                .subquery()
            )
            query = query.outerjoin(prices, prices.c.product_id == Product.id)
            if sort == SortMode.PRICE_ASC:
                query = query.order_by(prices.c.min_price.asc().nulls_last(), Product.id)
            else:
                query = query.order_by(prices.c.max_price.desc().nulls_last(), Product.id)
        else:
            query = query.order_by(Product.created_at.desc(), Product.id)

        query = query.limit(limit).offset(offset)
        return self._to_product_rows(await self._all(query))

    async def fetch_products_by_ids(self, ids: Sequence[str]) -> list[ProductRow]:
        """Fetch products by ID, in no particular order."""
        if not ids:
            return []
        query = self._product_select().where(Product.id.in_(list(ids)))
        return self._to_product_rows(await self._all(query))

    async def fetch_recent_published_products(
        self,
        limit: int,
        exclude_ids: Iterable[str] = (),
    ) -> list[ProductRow]:
        """Fetch the newest published products, skipping some IDs."""
        if limit <= 0:
            return []
        query = self._product_select().where(Product.status == PUBLISHED.value)
        excluded = list(exclude_ids)
        if excluded:
            query = query.where(Product.id.not_in(excluded))
        query = query.order_by(Product.created_at.desc(), Product.id).limit(limit)
        return self._to_product_rows(await self._all(query))

    async def fetch_published_products(self) -> list[ProductRow]:
        """Fetch every published product, newest first."""
        query = (
            self._product_select()
            .where(Product.status == PUBLISHED.value)
            .order_by(Product.created_at.desc(), Product.id)
        )
        return self._to_product_rows(await self._all(query))

    async def fetch_related_products(
        self,
        slug: str,
        category_tag: str | None,
        limit: int,
    ) -> list[ProductRow]:
        """Fetch published products sharing a metadata category tag.

        Args:
            slug: Slug of the source product, which is always excluded.
            category_tag: Tag to match in ``metadata.category``; no tag
                filtering when None.
            limit: Maximum rows.

        Returns:
            Product rows, newest first.
        """
        query = self._product_select().where(
            Product.status == PUBLISHED.value,
            Product.slug != slug,
        )
        if category_tag:
            query = query.where(Product.metadata_["category"].as_string() == category_tag)
        query = query.order_by(Product.created_at.desc(), Product.id).limit(limit)
        return self._to_product_rows(await self._all(query))

    async def fetch_product_metadata(self, slug: str) -> dict[str, Any] | None:
        """Get a product's metadata.

        Returns:
            Metadata mapping ({} when unset), or None if no product has
            this slug.
        """
        query = select(Product.metadata_).where(Product.slug == slug).limit(1)
        rows = await self._all(query)
        if not rows:
            return None
        metadata = rows[0][0]
        return metadata if isinstance(metadata, dict) else {}

    # ------------------------------------------------------------------
    # Detail batches
    # ------------------------------------------------------------------

    async def fetch_variants_for_products(self, ids: Sequence[str]) -> list[VariantRow]:
        if not ids:
            return []
        query = (
            select(
                ProductVariant.id,
                ProductVariant.product_id,
                ProductVariant.sku_prefix,
                ProductVariant.price,
            )
            .where(ProductVariant.product_id.in_(list(ids)))
            .order_by(ProductVariant.created_at, ProductVariant.id)
        )
        return [
            VariantRow(
                id=row.id,
                product_id=row.product_id,
                sku_prefix=row.sku_prefix,
                price=Decimal(row.price),
            )
            for row in await self._all(query)
        ]

    async def fetch_inventory_for_variants(self, ids: Sequence[str]) -> list[InventoryRow]:
        if not ids:
            return []
        query = (
            select(
                Inventory.variant_id,
                Inventory.sku,
                Inventory.quantity,
                Inventory.reserved,
            )
            .where(Inventory.variant_id.in_(list(ids)))
            .order_by(Inventory.sku)
        )
        return [
            InventoryRow(
                variant_id=row.variant_id,
                sku=row.sku,
                quantity=row.quantity,
                reserved=row.reserved,
            )
            for row in await self._all(query)
        ]

    async def fetch_primary_images_for_products(self, ids: Sequence[str]) -> list[ImageRow]:
        if not ids:
            return []
        query = (
            select(ProductImage.product_id, ProductImage.url, ProductImage.alt)
            .where(
                ProductImage.is_primary.is_(True),
                ProductImage.product_id.in_(list(ids)),
            )
            .order_by(ProductImage.created_at, ProductImage.id)
        )
        return [
            ImageRow(product_id=row.product_id, url=row.url, alt=row.alt)
            for row in await self._all(query)
        ]

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    async def sum_completed_order_quantities_by_product(
        self,
        limit: int | None = None,
    ) -> list[SalesRow]:
        """Sum units sold per product over completed orders.

        Args:
            limit: Keep only the top N products.

        Returns:
            Rows ordered by units sold descending, then product ID.
        """
        units_sold = func.sum(OrderItem.quantity)
        query = (
            select(OrderItem.product_id, units_sold.label("units_sold"))
            .join(Order, Order.id == OrderItem.order_id)
            .where(
                Order.status.in_(COMPLETED_ORDER_STATUSES),
                OrderItem.product_id.is_not(None),
            )
            .group_by(OrderItem.product_id)
            .order_by(units_sold.desc(), OrderItem.product_id)
        )
        if limit is not None:
            query = query.limit(limit)

        return [
            SalesRow(product_id=row.product_id, units_sold=int(row.units_sold or 0))
            for row in await self._all(query)
        ]

    async def aggregate_approved_reviews_by_product(self) -> list[ReviewAggregateRow]:
        """Average rating and review count per product, approved reviews only."""
        query = (
            select(
                Review.product_id,
                func.avg(Review.rating).label("avg_rating"),
                func.count(Review.rating).label("review_count"),
            )
            .where(Review.approved.is_(True))
            .group_by(Review.product_id)
        )
        return [
            ReviewAggregateRow(
                product_id=row.product_id,
                avg_rating=float(row.avg_rating or 0),
                review_count=int(row.review_count or 0),
            )
            for row in await self._all(query)
        ]

    async def fetch_variant_facets(self) -> list[FacetRow]:
        """Material, color and price of every variant of a published product."""
        query = (
            select(ProductVariant.material, ProductVariant.color_name, ProductVariant.price)
            .join(Product, Product.id == ProductVariant.product_id)
            .where(Product.status == PUBLISHED.value)
        )
        return [
            FacetRow(
                material=row.material,
                color_name=row.color_name,
                price=Decimal(row.price) if row.price is not None else None,
            )
            for row in await self._all(query)
        ]
