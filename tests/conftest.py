"""Shared fixtures: a fresh SQLite catalog database per test.

Each test gets its own database file so that concurrent store queries,
which open separate connections, all see the same data.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

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
from storefront.domain.value_objects import Slug
from storefront.infrastructure import database

T = TypeVar("T")

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path / 'catalog.db'}"


class CatalogFactory:
    """Inserts catalog rows for tests.

    Products are created one hour apart in creation order, so the
    latest created product is the newest.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self._clock = 0

    async def _add(self, *entities: Any) -> None:
        async with self.session_factory() as session:
            session.add_all(entities)
            await session.commit()

    async def status(self, name: str, description: str | None = None) -> ProductStatus:
        status = ProductStatus(name=name, description=description)
        await self._add(status)
        return status

    async def category(self, name: str) -> Category:
        category = Category(id=str(uuid4()), name=name, slug=Slug.from_text(name).value)
        await self._add(category)
        return category

    async def product(
        self,
        title: str,
        *,
        category: Category | None = None,
        status: str = "PUBLISHED",
        metadata: dict[str, Any] | None = None,
        short_description: str | None = None,
        variants: list[dict[str, Any]] | None = None,
        images: list[dict[str, Any]] | None = None,
        created_at: datetime | None = None,
    ) -> Product:
        """Insert a product with optional variants and images.

        Each variant dict holds ProductVariant fields plus optional
        ``quantity``/``reserved`` for a single inventory row.
        """
        self._clock += 1
        if created_at is None:
            created_at = BASE_TIME + timedelta(hours=self._clock)
        product = Product(
            id=str(uuid4()),
            title=title,
            slug=Slug.from_text(title).value,
            short_description=short_description,
            status=status,
            metadata_=metadata,
            category_id=category.id if category else None,
            created_at=created_at,
            updated_at=created_at,
        )

        for n, spec in enumerate(variants or []):
            spec = dict(spec)
            quantity = spec.pop("quantity", 10)
            reserved = spec.pop("reserved", 0)
            sku = spec.pop("sku", f"{product.slug}-{n + 1}")
            spec.setdefault("name", f"Variant {n + 1}")
            spec["price"] = Decimal(str(spec["price"]))
            variant = ProductVariant(
                id=str(uuid4()),
                created_at=created_at + timedelta(seconds=n),
                **spec,
            )
            variant.inventory = [
                Inventory(id=str(uuid4()), sku=sku, quantity=quantity, reserved=reserved)
            ]
            product.variants.append(variant)

        for n, spec in enumerate(images or []):
            product.images.append(
                ProductImage(
                    id=str(uuid4()),
                    created_at=created_at + timedelta(seconds=n),
                    **spec,
                )
            )

        await self._add(product)
        return product

    async def order(
        self,
        status: str,
        lines: list[tuple[Product, int]],
    ) -> Order:
        order = Order(
            id=str(uuid4()),
            order_number=f"T-{uuid4().hex[:10]}",
            status=status,
            total=Decimal("0"),
            items=[
                OrderItem(
                    id=str(uuid4()),
                    product_id=product.id,
                    name=product.title,
                    price=Decimal("1.00"),
                    quantity=quantity,
                )
                for product, quantity in lines
            ],
        )
        await self._add(order)
        return order

    async def review(self, product: Product, rating: int, approved: bool = True) -> Review:
        review = Review(id=str(uuid4()), product_id=product.id, rating=rating, approved=approved)
        await self._add(review)
        return review


# ============================================================================
# Async Fixtures (engine, store and service tests)
# ============================================================================


@pytest.fixture
async def session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Point the application at a fresh SQLite database."""
    database.configure_database(sqlite_url(tmp_path))
    await database.create_all()

    yield database.get_session_factory()

    await database.engine.dispose()


@pytest.fixture
async def factory(session_factory: async_sessionmaker[AsyncSession]) -> CatalogFactory:
    """Catalog row factory with the PUBLISHED and DRAFT statuses present."""
    catalog = CatalogFactory(session_factory)
    await catalog.status("PUBLISHED")
    await catalog.status("DRAFT")
    return catalog


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ============================================================================
# Sync Fixtures (API tests)
# ============================================================================


def run_in_database(fn: Callable[[], Awaitable[T]]) -> T:
    """Run a coroutine on a private loop and release its connections.

    API tests drive the app through ``TestClient``, which runs its own
    event loop; pooled connections must not outlive the loop that
    opened them.
    """

    async def runner() -> T:
        try:
            return await fn()
        finally:
            await database.engine.dispose()

    return asyncio.run(runner())


@pytest.fixture
def sync_factory(tmp_path: Path) -> CatalogFactory:
    """Fresh database for API tests; use with ``run_in_database``."""
    database.configure_database(sqlite_url(tmp_path))

    async def setup() -> CatalogFactory:
        await database.create_all()
        catalog = CatalogFactory(database.get_session_factory())
        await catalog.status("PUBLISHED")
        await catalog.status("DRAFT")
        return catalog

    return run_in_database(setup)


@pytest.fixture
def run_db() -> Callable[[Callable[[], Awaitable[Any]]], Any]:
    """``run_in_database`` for tests that seed rows around API calls."""
    return run_in_database
