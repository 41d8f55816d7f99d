"""Tests for the demo catalog generator."""

import pytest

from storefront.catalog.generator import (
    BRANDS,
    CATEGORIES,
    GeneratorConfig,
    ProductGenerator,
)
from storefront.domain.value_objects import COMPLETED_ORDER_STATUSES, PUBLISHED, Slug


class TestGeneratorConfig:
    """Tests for GeneratorConfig."""

    def test_small_config(self) -> None:
        config = GeneratorConfig.small()
        assert config.products_per_category == 5
        assert config.variants_per_product == 2

    def test_full_config(self) -> None:
        """Full config creates a larger catalog."""
        config = GeneratorConfig.full()
        assert config.products_per_category > GeneratorConfig.small().products_per_category
        assert config.orders > GeneratorConfig.small().orders


class TestProductGenerator:
    """Tests for ProductGenerator."""

    @pytest.fixture
    def generator(self) -> ProductGenerator:
        """Create generator with small config."""
        return ProductGenerator(GeneratorConfig.small())

    def test_generate_categories(self, generator: ProductGenerator) -> None:
        categories = generator.generate_categories()
        assert [c.name for c in categories] == [b.name for b in CATEGORIES]
        assert all(c.slug == Slug.from_text(c.name).value for c in categories)

    def test_expected_count(self, generator: ProductGenerator) -> None:
        catalog = generator.generate_catalog()
        assert len(catalog.products) == generator.expected_count
        assert catalog.orders == []
        assert catalog.reviews == []

    def test_products_are_published_and_tagged(self, generator: ProductGenerator) -> None:
        """Every product carries the metadata tag of its category."""
        catalog = generator.generate_catalog()
        slugs_by_id = {c.id: c.slug for c in catalog.categories}

        for product in catalog.products:
            assert product.status == PUBLISHED.value
            assert product.metadata_["category"] == slugs_by_id[product.category_id]
            assert product.metadata_["brand"] in BRANDS

    def test_slugs_and_skus_unique(self, generator: ProductGenerator) -> None:
        catalog = generator.generate_catalog()
        slugs = [p.slug for p in catalog.products]
        skus = [inv.sku for p in catalog.products for v in p.variants for inv in v.inventory]

        assert len(set(slugs)) == len(slugs)
        assert len(set(skus)) == len(skus)
        assert all(Slug(s) for s in slugs)

    def test_variants_within_config(self, generator: ProductGenerator) -> None:
        catalog = generator.generate_catalog()
        for product in catalog.products:
            assert 1 <= len(product.variants) <= generator.config.variants_per_product
            for variant in product.variants:
                assert variant.price > 0
                assert variant.compare_at_price is None or variant.compare_at_price > variant.price
                assert len(variant.inventory) == 1

    def test_one_primary_image_per_product(self, generator: ProductGenerator) -> None:
        catalog = generator.generate_catalog()
        for product in catalog.products:
            assert sum(1 for image in product.images if image.is_primary) == 1

    def test_orders_are_completed(self, generator: ProductGenerator) -> None:
        catalog = generator.generate_catalog(include_orders=True)
        product_ids = {p.id for p in catalog.products}

        assert len(catalog.orders) == generator.config.orders
        for order in catalog.orders:
            assert order.status in COMPLETED_ORDER_STATUSES
            assert all(item.product_id in product_ids for item in order.items)

    def test_reviews_rate_existing_products(self, generator: ProductGenerator) -> None:
        catalog = generator.generate_catalog(include_reviews=True)
        product_ids = {p.id for p in catalog.products}

        for review in catalog.reviews:
            assert review.product_id in product_ids
            assert 1 <= review.rating <= 5


class TestDeterminism:
    """The same seed yields the same catalog."""

    def test_same_seed_same_catalog(self) -> None:
        first = ProductGenerator(GeneratorConfig.small()).generate_catalog(
            include_orders=True, include_reviews=True
        )
        second = ProductGenerator(GeneratorConfig.small()).generate_catalog(
            include_orders=True, include_reviews=True
        )

        assert [p.id for p in first.products] == [p.id for p in second.products]
        assert [p.slug for p in first.products] == [p.slug for p in second.products]
        assert [
            v.price for p in first.products for v in p.variants
        ] == [v.price for p in second.products for v in p.variants]
        assert [o.id for o in first.orders] == [o.id for o in second.orders]
        assert [r.rating for r in first.reviews] == [r.rating for r in second.reviews]

    def test_different_seed_different_ids(self) -> None:
        first = ProductGenerator(GeneratorConfig(seed=1)).generate_catalog()
        second = ProductGenerator(GeneratorConfig(seed=2)).generate_catalog()

        assert {p.id for p in first.products}.isdisjoint({p.id for p in second.products})
