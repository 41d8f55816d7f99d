"""Product listing engine.

Executes search, filtering, sorting and pagination over the catalog
and builds the derived views: best-selling, featured, related products
and filter facets. The engine is read-only and stateless; it issues
independent store queries concurrently and lets any store error
propagate unchanged.
"""

import asyncio
import math
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

import structlog

from storefront.catalog.read_models import (
    CategorySummary,
    FilterFacets,
    InventoryLevel,
    ListingPage,
    ListItemVariant,
    PrimaryImage,
    ProductListItem,
)
from storefront.catalog.store import (
    CatalogStore,
    InventoryRow,
    ProductFilter,
    ProductRow,
    SortMode,
    VariantPredicates,
    VariantRow,
)
from storefront.domain.value_objects import PUBLISHED

logger = structlog.get_logger()

MAX_PAGE_SIZE = 100
MAX_PAGE = 1_000_000
DEFAULT_PAGE_SIZE = 20
DEFAULT_SHOWCASE_LIMIT = 8
RELATED_PRODUCTS_LIMIT = 4


def featured_score(avg_rating: float, review_count: int, units_sold: int) -> float:
    """Score used to rank featured products.

    ``2 * avg_rating + ln(review_count + 1) + ln(units_sold + 1)``,
    over approved reviews and completed-order sales.
    """
    return 2 * avg_rating + math.log1p(review_count) + math.log1p(units_sold)


@dataclass(frozen=True)
class ProductSearchQuery:
    """Search, filter and pagination parameters.

    Attributes:
        q: Free-text term matched against title, short description, slug.
        category_slug: Category slug.
        min_price: Minimum variant price.
        max_price: Maximum variant price.
        color: Variant color name.
        material: Variant material.
        sort: Sort mode.
        page: Page number (1-indexed, clamped to >= 1). Pages past
            ``MAX_PAGE`` are always empty.
        limit: Page size (clamped to 1..100).
    """

    q: str | None = None
    category_slug: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    color: str | None = None
    material: str | None = None
    sort: SortMode = SortMode.NEWEST
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", max(self.page, 1))
        object.__setattr__(self, "limit", min(max(self.limit, 1), MAX_PAGE_SIZE))
        if self.q is not None and not self.q.strip():
            object.__setattr__(self, "q", None)

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.limit

    @property
    def has_variant_filters(self) -> bool:
        """Whether any filter applies to variants rather than products."""
        return any(
            value is not None
            for value in (self.min_price, self.max_price, self.color, self.material)
        )


class ListingEngine:
    """Read-side engine for product listings.

    Example usage:
        engine = ListingEngine(SqlCatalogStore(async_session_factory))
        page = await engine.search_products(
            ProductSearchQuery(color="Navy", sort=SortMode.PRICE_ASC),
        )
    """

    def __init__(self, store: CatalogStore) -> None:
        """Initialize engine.

        Args:
            store: Catalog store to query.
        """
        self.store = store

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_products(self, query: ProductSearchQuery) -> ListingPage[ProductListItem]:
        """Search published products.

        Variant-level predicates (price range, color, material) are
        checked first; when no variant matches, the result is an empty
        page. Otherwise they restrict products inside the count and
        page queries.

        Args:
            query: Search parameters.

        Returns:
            Page of list items with the total match count.
        """
        variants: VariantPredicates | None = None
        if query.has_variant_filters:
            variants = VariantPredicates(
                min_price=query.min_price,
                max_price=query.max_price,
                color=query.color,
                material=query.material,
            )
            matched = await self.store.find_product_ids_by_variant_predicates(
                min_price=variants.min_price,
                max_price=variants.max_price,
                color=variants.color,
                material=variants.material,
            )
            if not matched:
                logger.debug("No variants match search filters", page=query.page)
                return ListingPage(items=[], total=0, page=query.page, per_page=query.limit)

        filters = ProductFilter(
            status=PUBLISHED.value,
            category_slug=query.category_slug,
            q=query.q.strip() if query.q else None,
            variants=variants,
        )

        if query.page > MAX_PAGE:
            # Offset would overflow the database integer range
            total = await self.store.count_distinct_products(filters)
            return ListingPage(items=[], total=total, page=query.page, per_page=query.limit)

        total, rows = await asyncio.gather(
            self.store.count_distinct_products(filters),
            self.store.query_products_page(filters, query.sort, query.limit, query.offset),
        )
        items = await self.assemble_list_items(rows)

        logger.debug(
            "Product search executed",
            q=query.q,
            category=query.category_slug,
            sort=query.sort.value,
            page=query.page,
            total=total,
            returned=len(items),
        )
        return ListingPage(items=items, total=total, page=query.page, per_page=query.limit)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    async def get_best_selling_products(
        self,
        limit: int = DEFAULT_SHOWCASE_LIMIT,
    ) -> list[ProductListItem]:
        """Products ranked by units sold in completed orders.

        When fewer than ``limit`` products have sales, the newest
        published products fill the remaining slots.

        Args:
            limit: Maximum number of products.

        Returns:
            List items in rank order.
        """
        limit = _clamp(limit)
        sales = await self.store.sum_completed_order_quantities_by_product(limit=limit)
        ranked_ids = [row.product_id for row in sales]

        rows: list[ProductRow] = []
        if ranked_ids:
            found = {row.id: row for row in await self.store.fetch_products_by_ids(ranked_ids)}
            rows = [found[product_id] for product_id in ranked_ids if product_id in found]

        if len(rows) < limit:
            rows += await self.store.fetch_recent_published_products(
                limit - len(rows),
                exclude_ids=ranked_ids,
            )

        logger.debug("Best-selling products computed", ranked=len(ranked_ids), returned=len(rows))
        return await self.assemble_list_items(rows)

    async def get_featured_products(
        self,
        limit: int = DEFAULT_SHOWCASE_LIMIT,
    ) -> list[ProductListItem]:
        """Published products ranked by ``featured_score``.

        Equal scores are ordered by product ID.

        Args:
            limit: Maximum number of products.

        Returns:
            List items, highest score first.
        """
        limit = _clamp(limit)
        reviews, sales, rows = await asyncio.gather(
            self.store.aggregate_approved_reviews_by_product(),
            self.store.sum_completed_order_quantities_by_product(),
            self.store.fetch_published_products(),
        )
        ratings = {row.product_id: row for row in reviews}
        units_sold = {row.product_id: row.units_sold for row in sales}

        def score(row: ProductRow) -> float:
            rating = ratings.get(row.id)
            return featured_score(
                rating.avg_rating if rating else 0.0,
                rating.review_count if rating else 0,
                units_sold.get(row.id, 0),
            )

        ranked = sorted(rows, key=lambda row: (-score(row), row.id))[:limit]
        logger.debug("Featured products computed", candidates=len(rows), returned=len(ranked))
        return await self.assemble_list_items(ranked)

    async def get_related_products(
        self,
        slug: str,
        limit: int = RELATED_PRODUCTS_LIMIT,
    ) -> list[ProductListItem]:
        """Other published products sharing the source's category tag.

        The tag is read from ``metadata.category`` of the source product,
        not from its category relation. Without a tag any other published
        product qualifies. Unknown slugs yield an empty list.

        Args:
            slug: Source product slug.
            limit: Maximum number of products.

        Returns:
            List items, newest first.
        """
        metadata = await self.store.fetch_product_metadata(slug)
        if metadata is None:
            return []

        tag = metadata.get("category")
        category_tag = tag if isinstance(tag, str) and tag else None

        rows = await self.store.fetch_related_products(slug, category_tag, _clamp(limit))
        logger.debug("Related products computed", slug=slug, tag=category_tag, returned=len(rows))
        return await self.assemble_list_items(rows)

    async def get_filters(self) -> FilterFacets:
        """Facet values and price bounds across published products.

        Blank materials and colors are skipped; values are trimmed but
        not case-folded.

        Returns:
            Sorted materials and colors, min and max variant price
            (both 0 when there are no variants).
        """
        rows = await self.store.fetch_variant_facets()
        if not rows:
            return FilterFacets(materials=[], colors=[], price_min=Decimal(0), price_max=Decimal(0))

        materials = {row.material.strip() for row in rows if row.material and row.material.strip()}
        colors = {
            row.color_name.strip() for row in rows if row.color_name and row.color_name.strip()
        }
        prices = [row.price for row in rows if row.price is not None]

        return FilterFacets(
            materials=sorted(materials),
            colors=sorted(colors),
            price_min=min(prices) if prices else Decimal(0),
            price_max=max(prices) if prices else Decimal(0),
        )

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    async def assemble_list_items(self, rows: Sequence[ProductRow]) -> list[ProductListItem]:
        """Build list items for product rows, preserving their order.

        Variants (with inventory) and primary images are fetched in
        batches, concurrently.

        Args:
            rows: Product rows.

        Returns:
            One list item per row.
        """
        if not rows:
            return []

        ids = [row.id for row in rows]
        (variants, inventory), images = await asyncio.gather(
            self._fetch_variants_with_inventory(ids),
            self.store.fetch_primary_images_for_products(ids),
        )

        inventory_by_variant: dict[str, list[InventoryLevel]] = defaultdict(list)
        for inv in inventory:
            inventory_by_variant[inv.variant_id].append(
                InventoryLevel(sku=inv.sku, quantity=inv.quantity, reserved=inv.reserved)
            )

        variants_by_product: dict[str, list[ListItemVariant]] = defaultdict(list)
        for variant in variants:
            variants_by_product[variant.product_id].append(
                ListItemVariant(
                    id=variant.id,
                    sku_prefix=variant.sku_prefix,
                    price=variant.price,
                    inventory=inventory_by_variant.get(variant.id, []),
                )
            )

        image_by_product: dict[str, PrimaryImage] = {}
        for image in images:
            image_by_product.setdefault(image.product_id, PrimaryImage(url=image.url, alt=image.alt))

        return [
            self._build_item(row, variants_by_product.get(row.id, []), image_by_product.get(row.id))
            for row in rows
        ]

    async def _fetch_variants_with_inventory(
        self,
        product_ids: Sequence[str],
    ) -> tuple[list[VariantRow], list[InventoryRow]]:
        variants = await self.store.fetch_variants_for_products(product_ids)
        inventory = await self.store.fetch_inventory_for_variants([v.id for v in variants])
        return variants, inventory

    @staticmethod
    def _build_item(
        row: ProductRow,
        variants: list[ListItemVariant],
        image: PrimaryImage | None,
    ) -> ProductListItem:
        prices = [v.price for v in variants]
        return ProductListItem(
            id=row.id,
            title=row.title,
            slug=row.slug,
            short_description=row.short_description,
            price_min=min(prices) if prices else None,
            price_max=max(prices) if prices else None,
            primary_image=image,
            variants_count=len(variants),
            category=(
                CategorySummary(name=row.category_name, slug=row.category_slug or "")
                if row.category_name
                else None
            ),
            variants=variants,
        )


def _clamp(limit: int) -> int:
    return min(max(limit, 1), MAX_PAGE_SIZE)
