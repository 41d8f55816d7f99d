"""Catalog repository for admin database operations.

Provides CRUD primitives for categories, products, statuses, images,
variants and inventory. Reads for public listings live in
``storefront.catalog.store``.
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.catalog.models import (
    Category,
    Inventory,
    Order,
    OrderItem,
    Product,
    ProductImage,
    ProductStatus,
    ProductVariant,
    Review,
)


def is_valid_id(value: str) -> bool:
    """Whether a string is a UUID; other IDs can never match a row."""
    try:
        UUID(value)
    except (TypeError, ValueError):
        return False
    return True


class CatalogRepository:
    """Repository for catalog write-side operations.

    Handles all database interactions used by admin use cases. The
    caller owns the transaction; methods only flush.

    Example usage:
        async with async_session_factory() as session:
            repo = CatalogRepository(session)
            product = await repo.get_product_by_slug("oak-desk")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, entity: Any) -> Any:
        """Add an entity and flush it.

        Args:
            entity: ORM instance to save.

        Returns:
            Saved entity.
        """
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def delete(self, entity: Any) -> None:
        """Delete an entity and flush."""
        await self.session.delete(entity)
        await self.session.flush()

    async def save_all(self, entities: Sequence[Any]) -> None:
        """Add many entities and flush once."""
        self.session.add_all(entities)
        await self.session.flush()

    async def clear_catalog(self) -> int:
        """Delete every catalog, order and review row.

        Returns:
            Number of deleted products.
        """
        deleted = await self.session.execute(select(func.count(Product.id)))
        count = deleted.scalar_one()

        # Children first; bulk deletes skip ORM cascades
        for model in (
            OrderItem,
            Order,
            Review,
            ProductImage,
            Inventory,
            ProductVariant,
            Product,
            Category,
        ):
            await self.session.execute(delete(model))
        await self.session.flush()
        # Reseeding reuses primary keys of the deleted rows
        self.session.expunge_all()
        return count

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self, limit: int = 20, offset: int = 0) -> Sequence[Category]:
        query = select(Category).order_by(Category.name).limit(limit).offset(offset)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_categories(self) -> int:
        result = await self.session.execute(select(func.count(Category.id)))
        return result.scalar_one()

    async def get_category(self, category_id: str) -> Category | None:
        if not is_valid_id(category_id):
            return None
        return await self.session.get(Category, category_id)

    async def get_category_by_slug(self, slug: str) -> Category | None:
        result = await self.session.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    async def get_category_by_name(self, name: str) -> Category | None:
        result = await self.session.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def get_product(
        self,
        product_id: str,
        include_details: bool = False,
    ) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.
            include_details: Whether to eagerly load category, images,
                and variants with inventory.

        Returns:
            Product if found, None otherwise.
        """
        if not is_valid_id(product_id):
            return None
        query = select(Product).where(Product.id == product_id)
        if include_details:
            query = query.options(*self._detail_options())

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_product_by_slug(
        self,
        slug: str,
        include_details: bool = False,
    ) -> Product | None:
        """Get product by slug.

        Args:
            slug: Product slug.
            include_details: Whether to eagerly load related rows.

        Returns:
            Product if found, None otherwise.
        """
        query = select(Product).where(Product.slug == slug)
        if include_details:
            query = query.options(*self._detail_options())

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    def _detail_options() -> list[Any]:
        return [
            selectinload(Product.category),
            selectinload(Product.images),
            selectinload(Product.variants).selectinload(ProductVariant.inventory),
        ]

    # ------------------------------------------------------------------
    # Statuses
    # ------------------------------------------------------------------

    async def list_statuses(self) -> Sequence[ProductStatus]:
        result = await self.session.execute(select(ProductStatus).order_by(ProductStatus.name))
        return result.scalars().all()

    async def ensure_status(self, name: str, description: str | None = None) -> ProductStatus:
        """Insert a status if it is missing.

        Args:
            name: Status name.
            description: Description used only when inserting.

        Returns:
            Existing or newly inserted status row.
        """
        status = await self.session.get(ProductStatus, name)
        if status is None:
            status = await self.save(ProductStatus(name=name, description=description))
        return status

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def get_image(self, image_id: str) -> ProductImage | None:
        if not is_valid_id(image_id):
            return None
        return await self.session.get(ProductImage, image_id)

    async def clear_primary_images(self, product_id: str) -> None:
        """Unflag every primary image of a product."""
        await self.session.execute(
            update(ProductImage)
            .where(ProductImage.product_id == product_id)
            .values(is_primary=False)
            .execution_options(synchronize_session="fetch")
        )

    async def mark_primary_image(self, image_id: str) -> None:
        await self.session.execute(
            update(ProductImage)
            .where(ProductImage.id == image_id)
            .values(is_primary=True)
            .execution_options(synchronize_session="fetch")
        )

    # ------------------------------------------------------------------
    # Variants & inventory
    # ------------------------------------------------------------------

    async def get_variant(self, variant_id: str) -> ProductVariant | None:
        if not is_valid_id(variant_id):
            return None
        query = (
            select(ProductVariant)
            .where(ProductVariant.id == variant_id)
            .options(selectinload(ProductVariant.inventory))
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_inventory_for_variant(self, variant_id: str) -> Inventory | None:
        query = (
            select(Inventory)
            .where(Inventory.variant_id == variant_id)
            .order_by(Inventory.sku)
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_inventory_by_sku(self, sku: str) -> Inventory | None:
        result = await self.session.execute(select(Inventory).where(Inventory.sku == sku))
        return result.scalar_one_or_none()
