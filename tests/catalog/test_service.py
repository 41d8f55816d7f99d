"""Tests for catalog administration."""

from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from storefront.catalog.generator import GeneratorConfig
from storefront.catalog.models import (
    Inventory,
    Order,
    Product,
    ProductImage,
    ProductVariant,
    Review,
)
from storefront.catalog.service import CatalogService
from storefront.domain.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    ImageNotFoundError,
    InvalidSlugError,
    InvalidStatusError,
    NameTooShortError,
    ProductAlreadyExistsError,
    ProductNotFoundError,
    SkuAlreadyExistsError,
    ValidationError,
    VariantNotFoundError,
)


@pytest.fixture
def service(session, factory) -> CatalogService:
    """Create catalog service on a database with base statuses."""
    return CatalogService(session)


class TestCategories:
    """Tests for category administration."""

    async def test_create_derives_slug(self, service: CatalogService) -> None:
        category = await service.create_category("Home Office")
        assert category.slug == "home-office"
        assert category.image is None

    async def test_name_trimmed(self, service: CatalogService) -> None:
        category = await service.create_category("  Lamps  ")
        assert category.name == "Lamps"

    async def test_short_name_rejected(self, service: CatalogService) -> None:
        with pytest.raises(NameTooShortError) as exc_info:
            await service.create_category(" a ")
        assert exc_info.value.details == {"field": "name", "min_length": 2}

    async def test_duplicate_name_rejected(self, service: CatalogService) -> None:
        await service.create_category("Desks")
        with pytest.raises(CategoryAlreadyExistsError):
            await service.create_category("Desks")

    async def test_duplicate_slug_rejected(self, service: CatalogService) -> None:
        """Different names normalizing to one slug conflict."""
        await service.create_category("Home Office")
        with pytest.raises(CategoryAlreadyExistsError) as exc_info:
            await service.create_category("Home-Office")
        assert exc_info.value.details["field"] == "slug"

    async def test_list_by_name(self, service: CatalogService) -> None:
        for name in ("Sofas", "Chairs", "Desks"):
            await service.create_category(name)

        categories, total = await service.list_categories(limit=2)

        assert total == 3
        assert [c.name for c in categories] == ["Chairs", "Desks"]

    async def test_rename_regenerates_slug(self, service: CatalogService) -> None:
        category = await service.create_category("Desks")

        updated = await service.update_category(category.id, {"name": "Work Desks"})

        assert updated.slug == "work-desks"
        assert (await service.get_category_by_slug("work-desks")).id == category.id

    async def test_rename_to_own_name_allowed(self, service: CatalogService) -> None:
        category = await service.create_category("Desks")
        updated = await service.update_category(category.id, {"name": "Desks", "image": "x.jpg"})
        assert updated.image == "x.jpg"

    async def test_delete_uncategorizes_products(
        self, service: CatalogService, factory, session
    ) -> None:
        category = await service.create_category("Desks")
        product = await service.create_product("Oak Desk", category_id=category.id)

        await service.delete_category(category.id)

        with pytest.raises(CategoryNotFoundError):
            await service.get_category(category.id)
        reloaded = await session.get(Product, product.id)
        assert reloaded is not None
        assert reloaded.category_id is None

    async def test_malformed_id_not_found(self, service: CatalogService) -> None:
        with pytest.raises(CategoryNotFoundError):
            await service.get_category("not-a-uuid")


class TestProducts:
    """Tests for product administration."""

    async def test_create_defaults(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        assert product.slug == "oak-desk"
        assert product.status == "PUBLISHED"

    async def test_explicit_slug_normalized(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk", slug="Oak Desk XL")
        assert product.slug == "oak-desk-xl"

    async def test_duplicate_slug_rejected(self, service: CatalogService) -> None:
        await service.create_product("Oak Desk")
        with pytest.raises(ProductAlreadyExistsError):
            await service.create_product("Oak  Desk")

    async def test_short_title_rejected(self, service: CatalogService) -> None:
        with pytest.raises(NameTooShortError):
            await service.create_product("X")

    async def test_unsluggable_title_rejected(self, service: CatalogService) -> None:
        with pytest.raises(InvalidSlugError):
            await service.create_product("!!!")

    async def test_unknown_category_rejected(self, service: CatalogService) -> None:
        with pytest.raises(CategoryNotFoundError):
            await service.create_product(
                "Oak Desk", category_id="00000000-0000-0000-0000-000000000000"
            )

    async def test_new_status_added_to_lookup(self, service: CatalogService) -> None:
        """Statuses are an open set; unseen names are registered."""
        product = await service.create_product("Oak Desk", status="archived")

        assert product.status == "ARCHIVED"
        assert "ARCHIVED" in [s.name for s in await service.list_statuses()]

    async def test_invalid_status_rejected(self, service: CatalogService) -> None:
        with pytest.raises(InvalidStatusError):
            await service.create_product("Oak Desk", status="on hold")

    async def test_get_with_details(self, service: CatalogService, factory) -> None:
        await factory.product(
            "Oak Desk",
            variants=[{"price": 100, "sku": "OAK-1"}],
            images=[{"url": "https://img/1.jpg", "is_primary": True}],
        )

        product = await service.get_product_by_slug("oak-desk")

        assert len(product.variants) == 1
        assert product.variants[0].inventory[0].sku == "OAK-1"
        assert len(product.images) == 1

    async def test_missing_product(self, service: CatalogService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.get_product_by_slug("nope")
        with pytest.raises(ProductNotFoundError):
            await service.get_product_by_id("nope")

    async def test_title_change_reslugs(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")

        updated = await service.update_product(product.id, {"title": "Walnut Desk"})

        assert updated.title == "Walnut Desk"
        assert updated.slug == "walnut-desk"

    async def test_explicit_slug_wins_over_title(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")

        updated = await service.update_product(
            product.id, {"title": "Walnut Desk", "slug": "desk-walnut"}
        )

        assert updated.slug == "desk-walnut"

    async def test_update_slug_conflict(self, service: CatalogService) -> None:
        await service.create_product("Oak Desk")
        other = await service.create_product("Pine Desk")

        with pytest.raises(ProductAlreadyExistsError):
            await service.update_product(other.id, {"slug": "oak-desk"})

    async def test_update_status_and_metadata(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")

        updated = await service.update_product(
            product.id, {"status": "draft", "metadata": {"category": "desks"}}
        )

        assert updated.status == "DRAFT"
        assert updated.metadata_ == {"category": "desks"}

    async def test_unknown_field_rejected(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        with pytest.raises(ValidationError):
            await service.update_product(product.id, {"price": 10})

    async def test_delete_cascades(self, service: CatalogService, factory, session) -> None:
        product = await factory.product(
            "Oak Desk",
            variants=[{"price": 100}],
            images=[{"url": "https://img/1.jpg", "is_primary": True}],
        )

        await service.delete_product(product.id)

        with pytest.raises(ProductNotFoundError):
            await service.get_product_by_id(product.id)
        inventory = await session.execute(select(func.count(Inventory.id)))
        images = await session.execute(select(func.count(ProductImage.id)))
        assert inventory.scalar_one() == 0
        assert images.scalar_one() == 0


class TestStatuses:
    """Tests for the status lookup."""

    async def test_create_status(self, service: CatalogService) -> None:
        status = await service.create_status("discontinued", "No longer sold")
        assert status.name == "DISCONTINUED"
        assert status.description == "No longer sold"

    async def test_existing_status_kept(self, service: CatalogService) -> None:
        status = await service.create_status("PUBLISHED", "ignored")
        assert status.name == "PUBLISHED"
        assert status.description is None

    async def test_list_sorted(self, service: CatalogService) -> None:
        names = [s.name for s in await service.list_statuses()]
        assert names == ["DRAFT", "PUBLISHED"]


class TestImages:
    """Tests for product images."""

    async def test_only_one_primary(self, service: CatalogService, session) -> None:
        """Adding a primary image unflags the previous one."""
        product = await service.create_product("Oak Desk")
        first = await service.add_product_image(product.id, "https://img/1.jpg", is_primary=True)
        second = await service.add_product_image(product.id, "https://img/2.jpg", is_primary=True)

        await session.refresh(first)
        assert not first.is_primary
        assert second.is_primary

    async def test_set_primary(self, service: CatalogService, session) -> None:
        product = await service.create_product("Oak Desk")
        first = await service.add_product_image(product.id, "https://img/1.jpg", is_primary=True)
        second = await service.add_product_image(product.id, "https://img/2.jpg", alt="back")

        image = await service.set_primary_image(product.id, second.id)

        await session.refresh(first)
        assert image.is_primary
        assert not first.is_primary

    async def test_image_of_other_product(self, service: CatalogService) -> None:
        desk = await service.create_product("Oak Desk")
        chair = await service.create_product("Oak Chair")
        image = await service.add_product_image(desk.id, "https://img/1.jpg")

        with pytest.raises(ImageNotFoundError):
            await service.set_primary_image(chair.id, image.id)

    async def test_remove_image(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        image = await service.add_product_image(product.id, "https://img/1.jpg")

        await service.remove_product_image(product.id, image.id)

        with pytest.raises(ImageNotFoundError):
            await service.remove_product_image(product.id, image.id)

    async def test_image_for_missing_product(self, service: CatalogService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.add_product_image(
                "00000000-0000-0000-0000-000000000000", "https://img/1.jpg"
            )


class TestVariants:
    """Tests for variants and inventory."""

    async def test_add_variant_with_prefix(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")

        variant = await service.add_variant(
            product.id,
            name="Large",
            price=Decimal("249.00"),
            sku_prefix="DESK-L",
            color_name="Natural",
            initial_quantity=5,
        )

        assert variant.inventory[0].sku == "DESK-L"
        assert variant.inventory[0].quantity == 5

    async def test_generated_sku(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")

        variant = await service.add_variant(product.id, name="Small", price=Decimal("99"))

        assert variant.inventory[0].sku.startswith("oak-desk-")

    async def test_duplicate_sku_rejected(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        await service.add_variant(product.id, name="A", price=Decimal("1"), sku_prefix="SKU-1")

        with pytest.raises(SkuAlreadyExistsError):
            await service.add_variant(product.id, name="B", price=Decimal("1"), sku_prefix="SKU-1")

    async def test_negative_price_rejected(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        with pytest.raises(ValidationError):
            await service.add_variant(product.id, name="A", price=Decimal("-1"))

    async def test_update_variant(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        variant = await service.add_variant(product.id, name="A", price=Decimal("10"))

        updated = await service.update_variant(
            variant.id, {"price": Decimal("12.50"), "material": "Oak"}
        )

        assert updated.price == Decimal("12.50")
        assert updated.material == "Oak"

    async def test_update_variant_requires_price(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        variant = await service.add_variant(product.id, name="A", price=Decimal("10"))

        with pytest.raises(ValidationError):
            await service.update_variant(variant.id, {"price": None})
        with pytest.raises(ValidationError):
            await service.update_variant(variant.id, {"name": "  "})

    async def test_delete_variant(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        variant = await service.add_variant(product.id, name="A", price=Decimal("10"))

        await service.delete_variant(variant.id)

        with pytest.raises(VariantNotFoundError):
            await service.delete_variant(variant.id)

    async def test_update_inventory(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        variant = await service.add_variant(product.id, name="A", price=Decimal("10"))

        inventory = await service.update_inventory(variant.id, quantity=7, reserved=2)

        assert inventory.quantity == 7
        assert inventory.reserved == 2

    async def test_update_inventory_keeps_reserved(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        variant = await service.add_variant(product.id, name="A", price=Decimal("10"))
        await service.update_inventory(variant.id, quantity=7, reserved=2)

        inventory = await service.update_inventory(variant.id, quantity=3)

        assert inventory.quantity == 3
        assert inventory.reserved == 2

    async def test_negative_inventory_rejected(self, service: CatalogService) -> None:
        product = await service.create_product("Oak Desk")
        variant = await service.add_variant(product.id, name="A", price=Decimal("10"))

        with pytest.raises(ValidationError):
            await service.update_inventory(variant.id, quantity=-1)

    async def test_created_inventory_sku_must_be_unique(
        self, service: CatalogService, session
    ) -> None:
        """A variant without stock reuses its prefix as SKU only when free."""
        product = await service.create_product("Oak Desk")
        await service.add_variant(product.id, name="A", price=Decimal("1"), sku_prefix="SKU-1")
        bare = ProductVariant(
            id=str(uuid4()),
            product_id=product.id,
            name="B",
            price=Decimal("1"),
            sku_prefix="SKU-1",
        )
        session.add(bare)
        await session.flush()

        with pytest.raises(SkuAlreadyExistsError):
            await service.update_inventory(bare.id, quantity=3)


class TestSeedCatalog:
    """Tests for demo catalog seeding."""

    async def test_seed_counts(self, service: CatalogService, session) -> None:
        config = GeneratorConfig(products_per_category=2, variants_per_product=2, orders=5)

        result = await service.seed_catalog(config, include_orders=True, include_reviews=True)

        assert result["products_created"] == 10
        assert result["categories_created"] == 5
        assert result["orders_created"] == 5
        products = await session.execute(select(func.count(Product.id)))
        orders = await session.execute(select(func.count(Order.id)))
        reviews = await session.execute(select(func.count(Review.id)))
        assert products.scalar_one() == 10
        assert orders.scalar_one() == 5
        assert reviews.scalar_one() == result["reviews_created"]

    async def test_reseed_replaces_catalog(self, service: CatalogService, session) -> None:
        config = GeneratorConfig(products_per_category=2, orders=3)
        await service.seed_catalog(config, include_orders=True)

        result = await service.seed_catalog(config, include_orders=True)

        assert result["deleted"] == 10
        products = await session.execute(select(func.count(Product.id)))
        assert products.scalar_one() == 10
