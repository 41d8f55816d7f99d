"""Catalog service for admin operations.

High-level use cases that combine repository operations with the
catalog's validation rules: slug format and uniqueness, minimum name
length, status lookup maintenance and the single-primary-image rule.
"""

from decimal import Decimal
from typing import Any
from uuid import uuid4

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.generator import GeneratorConfig, ProductGenerator
from storefront.catalog.models import (
    Category,
    Inventory,
    Product,
    ProductImage,
    ProductStatus,
    ProductVariant,
)
from storefront.catalog.repository import CatalogRepository
from storefront.domain.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    ImageNotFoundError,
    NameTooShortError,
    ProductAlreadyExistsError,
    ProductNotFoundError,
    SkuAlreadyExistsError,
    ValidationError,
    VariantNotFoundError,
)
from storefront.domain.value_objects import PUBLISHED, ProductStatusName, Slug

logger = structlog.get_logger()

MIN_NAME_LENGTH = 2

PRODUCT_FIELDS = {
    "title",
    "slug",
    "short_description",
    "description",
    "category_id",
    "status",
    "metadata",
}
VARIANT_FIELDS = {
    "name",
    "sku_prefix",
    "color_code",
    "color_name",
    "material",
    "price",
    "compare_at_price",
    "image",
}


def _require_name(value: str, field: str) -> str:
    trimmed = value.strip()
    if len(trimmed) < MIN_NAME_LENGTH:
        raise NameTooShortError(field, MIN_NAME_LENGTH)
    return trimmed


def _require_price(value: Decimal | None, field: str) -> None:
    if value is not None and value < 0:
        raise ValidationError(
            f"{field} must not be negative",
            details={"field": field, "value": str(value)},
        )


class CatalogService:
    """Service for catalog administration.

    Every mutating method commits the session on success.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session)
            category = await service.create_category("Desks")
            product = await service.create_product(
                title="Oak Desk",
                category_id=category.id,
                metadata={"category": "desks"},
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = CatalogRepository(session)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(
        self,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Category], int]:
        """List categories by name.

        Returns:
            Tuple of (categories, total_count).
        """
        categories = await self.repository.list_categories(limit, offset)
        total = await self.repository.count_categories()
        return list(categories), total

    async def get_category(self, category_id: str) -> Category:
        category = await self.repository.get_category(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    async def get_category_by_slug(self, slug: str) -> Category:
        category = await self.repository.get_category_by_slug(slug)
        if category is None:
            raise CategoryNotFoundError(slug)
        return category

    async def create_category(self, name: str, image: str | None = None) -> Category:
        """Create a category; its slug is derived from the name.

        Raises:
            NameTooShortError: If the name is shorter than 2 characters.
            InvalidSlugError: If no slug can be derived from the name.
            CategoryAlreadyExistsError: If name or slug is taken.
        """
        name = _require_name(name, "name")
        slug = Slug.from_text(name)

        if await self.repository.get_category_by_name(name):
            raise CategoryAlreadyExistsError("name", name)
        if await self.repository.get_category_by_slug(slug.value):
            raise CategoryAlreadyExistsError("slug", slug.value)

        category = await self.repository.save(
            Category(id=str(uuid4()), name=name, slug=slug.value, image=image or None)
        )
        await self.session.commit()

        logger.info("Category created", category_id=category.id, slug=category.slug)
        return category

    async def update_category(self, category_id: str, changes: dict[str, Any]) -> Category:
        """Update a category.

        Renaming regenerates the slug.

        Args:
            category_id: Category ID.
            changes: Subset of ``name`` and ``image``.

        Returns:
            Updated category.
        """
        category = await self.get_category(category_id)

        if changes.get("name") is not None:
            name = _require_name(changes["name"], "name")
            slug = Slug.from_text(name)

            if name != category.name:
                existing = await self.repository.get_category_by_name(name)
                if existing and existing.id != category.id:
                    raise CategoryAlreadyExistsError("name", name)
            if slug.value != category.slug:
                existing = await self.repository.get_category_by_slug(slug.value)
                if existing and existing.id != category.id:
                    raise CategoryAlreadyExistsError("slug", slug.value)

            category.name = name
            category.slug = slug.value

        if "image" in changes:
            category.image = changes["image"] or None

        await self.session.flush()
        await self.session.commit()

        logger.info("Category updated", category_id=category.id)
        return category

    async def delete_category(self, category_id: str) -> None:
        """Delete a category, leaving its products uncategorized."""
        category = await self.get_category(category_id)

        await self.session.execute(
            update(Product)
            .where(Product.category_id == category.id)
            .values(category_id=None)
            .execution_options(synchronize_session="fetch")
        )
        await self.repository.delete(category)
        await self.session.commit()

        logger.info("Category deleted", category_id=category_id)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def get_product_by_id(self, product_id: str) -> Product:
        product = await self.repository.get_product(product_id, include_details=True)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def get_product_by_slug(self, slug: str) -> Product:
        product = await self.repository.get_product_by_slug(slug, include_details=True)
        if product is None:
            raise ProductNotFoundError(slug)
        return product

    async def create_product(
        self,
        title: str,
        slug: str | None = None,
        short_description: str | None = None,
        description: str | None = None,
        category_id: str | None = None,
        status: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Product:
        """Create a product.

        Args:
            title: Title, at least 2 characters after trimming.
            slug: Explicit slug; derived from the title when omitted.
            short_description: Teaser text.
            description: Full description.
            category_id: Existing category ID.
            status: Status name, PUBLISHED by default. Unknown statuses
                are added to the lookup table.
            metadata: Free-form metadata.

        Returns:
            The created product.
        """
        title = _require_name(title, "title")
        product_slug = Slug.parse(slug) if slug else Slug.from_text(title)

        if await self.repository.get_product_by_slug(product_slug.value):
            raise ProductAlreadyExistsError("slug", product_slug.value)

        if category_id is not None:
            await self.get_category(category_id)

        status_name = ProductStatusName.parse(status) if status else PUBLISHED
        await self.repository.ensure_status(status_name.value)

        product = await self.repository.save(
            Product(
                id=str(uuid4()),
                title=title,
                slug=product_slug.value,
                short_description=short_description,
                description=description,
                category_id=category_id,
                status=status_name.value,
                metadata_=metadata,
            )
        )
        await self.session.commit()

        logger.info("Product created", product_id=product.id, slug=product.slug)
        return product

    async def update_product(self, product_id: str, changes: dict[str, Any]) -> Product:
        """Update a product.

        A new title without an explicit slug re-derives the slug.

        Args:
            product_id: Product ID.
            changes: Subset of product fields to change.

        Returns:
            Updated product.
        """
        product = await self.repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        unknown = set(changes) - PRODUCT_FIELDS
        if unknown:
            raise ValidationError(
                "Unknown product fields",
                details={"fields": sorted(unknown)},
            )

        if changes.get("title") is not None:
            product.title = _require_name(changes["title"], "title")

        new_slug: Slug | None = None
        if changes.get("slug"):
            new_slug = Slug.parse(changes["slug"])
        elif changes.get("title") is not None:
            new_slug = Slug.from_text(changes["title"])

        if new_slug is not None and new_slug.value != product.slug:
            existing = await self.repository.get_product_by_slug(new_slug.value)
            if existing and existing.id != product.id:
                raise ProductAlreadyExistsError("slug", new_slug.value)
            product.slug = new_slug.value

        if "category_id" in changes:
            if changes["category_id"] is not None:
                await self.get_category(changes["category_id"])
            product.category_id = changes["category_id"]

        if changes.get("status") is not None:
            status_name = ProductStatusName.parse(changes["status"])
            await self.repository.ensure_status(status_name.value)
            product.status = status_name.value

        for field in ("short_description", "description"):
            if field in changes:
                setattr(product, field, changes[field])

        if "metadata" in changes:
            product.metadata_ = changes["metadata"]

        await self.session.flush()
        await self.session.commit()

        logger.info("Product updated", product_id=product.id, fields=sorted(changes))
        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete a product with its variants, inventory and images."""
        product = await self.repository.get_product(product_id, include_details=True)
        if product is None:
            raise ProductNotFoundError(product_id)

        await self.repository.delete(product)
        await self.session.commit()

        logger.info("Product deleted", product_id=product_id)

    # ------------------------------------------------------------------
    # Statuses
    # ------------------------------------------------------------------

    async def list_statuses(self) -> list[ProductStatus]:
        return list(await self.repository.list_statuses())

    async def create_status(self, name: str, description: str | None = None) -> ProductStatus:
        """Add a status to the lookup table. Existing names are kept as is."""
        status_name = ProductStatusName.parse(name)
        status = await self.repository.ensure_status(status_name.value, description)
        await self.session.commit()

        logger.info("Product status ensured", status=status.name)
        return status

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def add_product_image(
        self,
        product_id: str,
        url: str,
        alt: str | None = None,
        is_primary: bool = False,
    ) -> ProductImage:
        """Attach an image to a product.

        Adding a primary image unflags the previous primary first.
        """
        product = await self.repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        if is_primary:
            await self.repository.clear_primary_images(product_id)

        image = await self.repository.save(
            ProductImage(
                id=str(uuid4()),
                product_id=product_id,
                url=url,
                alt=alt,
                is_primary=is_primary,
            )
        )
        await self.session.commit()

        logger.info("Product image added", product_id=product_id, image_id=image.id)
        return image

    async def remove_product_image(self, product_id: str, image_id: str) -> None:
        image = await self._get_product_image(product_id, image_id)
        await self.repository.delete(image)
        await self.session.commit()

        logger.info("Product image removed", product_id=product_id, image_id=image_id)

    async def set_primary_image(self, product_id: str, image_id: str) -> ProductImage:
        """Make an image the product's only primary image.

        Clears every primary flag of the product, then sets the new one,
        within a single transaction. Assumes no concurrent primary-image
        update for the same product.
        """
        image = await self._get_product_image(product_id, image_id)

        await self.repository.clear_primary_images(product_id)
        await self.repository.mark_primary_image(image_id)
        await self.session.commit()
        await self.session.refresh(image)

        logger.info("Primary image set", product_id=product_id, image_id=image_id)
        return image

    async def _get_product_image(self, product_id: str, image_id: str) -> ProductImage:
        if await self.repository.get_product(product_id) is None:
            raise ProductNotFoundError(product_id)
        image = await self.repository.get_image(image_id)
        if image is None or image.product_id != product_id:
            raise ImageNotFoundError(image_id)
        return image

    # ------------------------------------------------------------------
    # Variants & inventory
    # ------------------------------------------------------------------

    async def add_variant(
        self,
        product_id: str,
        name: str,
        price: Decimal,
        sku_prefix: str | None = None,
        color_code: str | None = None,
        color_name: str | None = None,
        material: str | None = None,
        compare_at_price: Decimal | None = None,
        image: str | None = None,
        initial_quantity: int = 0,
    ) -> ProductVariant:
        """Add a variant and its inventory row to a product.

        The inventory SKU is the variant's SKU prefix, or one generated
        from the product slug when no prefix is given.

        Returns:
            The created variant with inventory loaded.
        """
        product = await self.repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        _require_price(price, "price")
        _require_price(compare_at_price, "compare_at_price")
        if initial_quantity < 0:
            raise ValidationError(
                "initial_quantity must not be negative",
                details={"field": "initial_quantity", "value": initial_quantity},
            )

        variant_id = str(uuid4())
        sku = sku_prefix or f"{product.slug}-{variant_id[:8]}"
        if await self.repository.get_inventory_by_sku(sku):
            raise SkuAlreadyExistsError("sku", sku)

        variant = ProductVariant(
            id=variant_id,
            product_id=product_id,
            name=name,
            sku_prefix=sku_prefix,
            color_code=color_code,
            color_name=color_name,
            material=material,
            price=price,
            compare_at_price=compare_at_price,
            image=image,
        )
        variant.inventory = [
            Inventory(id=str(uuid4()), sku=sku, quantity=initial_quantity, reserved=0)
        ]
        await self.repository.save(variant)
        await self.session.commit()

        logger.info("Variant added", product_id=product_id, variant_id=variant_id, sku=sku)
        return variant

    async def update_variant(self, variant_id: str, changes: dict[str, Any]) -> ProductVariant:
        """Update variant fields.

        Args:
            variant_id: Variant ID.
            changes: Subset of variant fields to change.

        Returns:
            Updated variant.
        """
        variant = await self.repository.get_variant(variant_id)
        if variant is None:
            raise VariantNotFoundError(variant_id)

        unknown = set(changes) - VARIANT_FIELDS
        if unknown:
            raise ValidationError(
                "Unknown variant fields",
                details={"fields": sorted(unknown)},
            )

        if "price" in changes:
            if changes["price"] is None:
                raise ValidationError("price is required", details={"field": "price"})
            _require_price(changes["price"], "price")
        if "compare_at_price" in changes:
            _require_price(changes["compare_at_price"], "compare_at_price")
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("name is required", details={"field": "name"})

        for field, value in changes.items():
            setattr(variant, field, value)

        await self.session.flush()
        await self.session.commit()

        logger.info("Variant updated", variant_id=variant_id, fields=sorted(changes))
        return variant

    async def delete_variant(self, variant_id: str) -> None:
        variant = await self.repository.get_variant(variant_id)
        if variant is None:
            raise VariantNotFoundError(variant_id)

        await self.repository.delete(variant)
        await self.session.commit()

        logger.info("Variant deleted", variant_id=variant_id)

    async def update_inventory(
        self,
        variant_id: str,
        quantity: int,
        reserved: int | None = None,
    ) -> Inventory:
        """Set inventory counters of a variant.

        Creates the inventory row if the variant has none.

        Args:
            variant_id: Variant ID.
            quantity: New on-hand quantity (>= 0).
            reserved: New reserved quantity (>= 0); unchanged when None.

        Returns:
            Updated inventory row.
        """
        if quantity < 0 or (reserved is not None and reserved < 0):
            raise ValidationError(
                "Inventory counters must not be negative",
                details={"quantity": quantity, "reserved": reserved},
            )

        variant = await self.repository.get_variant(variant_id)
        if variant is None:
            raise VariantNotFoundError(variant_id)

        inventory = await self.repository.get_inventory_for_variant(variant_id)
        if inventory is None:
            sku = variant.sku_prefix or f"{variant_id[:8]}-{uuid4().hex[:6]}"
            if await self.repository.get_inventory_by_sku(sku):
                raise SkuAlreadyExistsError("sku", sku)
            inventory = await self.repository.save(
                Inventory(id=str(uuid4()), sku=sku, variant_id=variant_id, quantity=0, reserved=0)
            )

        inventory.quantity = quantity
        if reserved is not None:
            inventory.reserved = reserved

        await self.session.flush()
        await self.session.commit()

        logger.info(
            "Inventory updated",
            variant_id=variant_id,
            quantity=inventory.quantity,
            reserved=inventory.reserved,
        )
        return inventory

    # ------------------------------------------------------------------
    # Demo data
    # ------------------------------------------------------------------

    async def seed_catalog(
        self,
        config: GeneratorConfig,
        include_orders: bool = False,
        include_reviews: bool = False,
        clear_existing: bool = True,
    ) -> dict[str, Any]:
        """Seed a deterministic demo catalog.

        Args:
            config: Generator configuration.
            include_orders: Whether to generate completed orders.
            include_reviews: Whether to generate reviews.
            clear_existing: Whether to delete existing catalog rows first.

        Returns:
            Seeding result with counts.
        """
        deleted = 0
        if clear_existing:
            deleted = await self.repository.clear_catalog()

        await self.repository.ensure_status(PUBLISHED.value, "Visible in the storefront")
        await self.repository.ensure_status("DRAFT", "Hidden until published")

        catalog = ProductGenerator(config).generate_catalog(
            include_orders=include_orders,
            include_reviews=include_reviews,
        )

        await self.repository.save_all(catalog.categories)
        await self.repository.save_all(catalog.products)
        await self.repository.save_all(catalog.orders)
        await self.repository.save_all(catalog.reviews)
        await self.session.commit()

        result = {
            "seed": config.seed,
            "deleted": deleted,
            "categories_created": len(catalog.categories),
            "products_created": len(catalog.products),
            "variants_created": sum(len(p.variants) for p in catalog.products),
            "orders_created": len(catalog.orders),
            "reviews_created": len(catalog.reviews),
        }
        logger.info("Demo catalog seeded", **result)
        return result
