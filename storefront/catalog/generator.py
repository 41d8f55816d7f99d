"""Demo catalog generator with deterministic seeding.

Generates categories, products, variants, inventory, images and,
optionally, completed orders and approved reviews so that every
listing view has data. Uses seeded random for reproducibility.
"""

import hashlib
import random
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterator

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
from storefront.domain.value_objects import COMPLETED_ORDER_STATUSES, PUBLISHED, Slug


# ============================================================================
# Constants
# ============================================================================

# Synthetic brand names (fictional companies)
BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
]

ADJECTIVES = [
    "Classic", "Modern", "Nordic", "Compact", "Studio",
    "Heritage", "Urban", "Essential", "Loft", "Coastal",
]

COLORS = [
    ("Black", "#111111"),
    ("White", "#F5F5F5"),
    ("Navy", "#1F2A44"),
    ("Sage", "#9CAF88"),
    ("Walnut", "#5C4033"),
    ("Sand", "#C2B280"),
]


@dataclass(frozen=True)
class CategoryBlueprint:
    """How products of one demo category are generated."""

    name: str
    nouns: tuple[str, ...]
    materials: tuple[str, ...]
    price_range: tuple[int, int]


CATEGORIES: tuple[CategoryBlueprint, ...] = (
    CategoryBlueprint(
        "Desks",
        nouns=("Desk", "Standing Desk", "Writing Desk"),
        materials=("Oak", "Walnut", "Steel"),
        price_range=(149, 899),
    ),
    CategoryBlueprint(
        "Chairs",
        nouns=("Chair", "Office Chair", "Lounge Chair"),
        materials=("Fabric", "Leather", "Mesh"),
        price_range=(79, 649),
    ),
    CategoryBlueprint(
        "Sofas",
        nouns=("Sofa", "Sectional", "Loveseat"),
        materials=("Linen", "Velvet", "Leather"),
        price_range=(499, 2499),
    ),
    CategoryBlueprint(
        "Lighting",
        nouns=("Floor Lamp", "Table Lamp", "Pendant"),
        materials=("Brass", "Glass", "Ceramic"),
        price_range=(29, 349),
    ),
    CategoryBlueprint(
        "Storage",
        nouns=("Bookcase", "Sideboard", "Shelf"),
        materials=("Oak", "Pine", "Steel"),
        price_range=(89, 999),
    ),
)

# Fixed origin for generated timestamps
EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for demo catalog generation.

    Attributes:
        seed: Random seed for reproducibility.
        products_per_category: Number of products per category.
        variants_per_product: Max variants per product.
        orders: Number of completed orders to generate.
        reviews_per_product: Max approved reviews per product.
    """

    seed: int = 42
    products_per_category: int = 10
    variants_per_product: int = 3
    orders: int = 40
    reviews_per_product: int = 4

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Create config for a small catalog (~25 products)."""
        return cls(products_per_category=5, variants_per_product=2, orders=15)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Create config for a larger catalog (~100 products)."""
        return cls(products_per_category=20, variants_per_product=4, orders=150)


@dataclass
class DemoCatalog:
    """Everything one generator run produces."""

    categories: list[Category]
    products: list[Product]
    orders: list[Order]
    reviews: list[Review]


# ============================================================================
# Product Generator
# ============================================================================


class ProductGenerator:
    """Generates a demo catalog with deterministic seeding.

    IDs, slugs, prices and timestamps depend only on the config, so two
    runs with the same seed produce identical catalogs.

    Example usage:
        generator = ProductGenerator(GeneratorConfig.small())
        catalog = generator.generate_catalog(include_orders=True)
    """

    def __init__(self, config: GeneratorConfig) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
        """
        self.config = config
        self.rng = random.Random(config.seed)
        self._namespace = uuid.uuid5(uuid.NAMESPACE_URL, f"storefront-demo:{config.seed}")

    def _id(self, *parts: str | int) -> str:
        """Deterministic UUID for the given key parts."""
        return str(uuid.uuid5(self._namespace, "|".join(str(p) for p in parts)))

    def _image_url(self, key: str) -> str:
        seed = int.from_bytes(hashlib.md5(key.encode()).digest()[:4], "big")
        return f"https://picsum.photos/seed/{seed}/800/800"

    def generate_categories(self) -> list[Category]:
        return [
            Category(
                id=self._id("category", blueprint.name),
                name=blueprint.name,
                slug=Slug.from_text(blueprint.name).value,
                image=self._image_url(f"category:{blueprint.name}"),
                created_at=EPOCH,
                updated_at=EPOCH,
            )
            for blueprint in CATEGORIES
        ]

    def _generate_product(
        self,
        blueprint: CategoryBlueprint,
        category: Category,
        category_index: int,
        index: int,
    ) -> Product:
        """Generate a single product with variants, inventory and images."""
        rng = random.Random(f"{self.config.seed}:{blueprint.name}:{index}")

        brand = rng.choice(BRANDS)
        adj = rng.choice(ADJECTIVES)
        noun = rng.choice(blueprint.nouns)
        title = f"{brand} {adj} {noun}"
        product_id = self._id("product", blueprint.name, index)
        slug = f"{Slug.from_text(title).value}-{category_index + 1}{index + 1:03d}"

        # Spread creation times so "newest" ordering is stable
        created_at = EPOCH + timedelta(hours=category_index * 1000 + index * 7)

        product = Product(
            id=product_id,
            title=title,
            slug=slug,
            short_description=f"{adj} {noun.lower()} by {brand}.",
            description=(
                f"A {adj.lower()} {noun.lower()} from {brand}, part of our "
                f"{blueprint.name.lower()} collection."
            ),
            status=PUBLISHED.value,
            metadata_={"category": category.slug, "brand": brand},
            category_id=category.id,
            created_at=created_at,
            updated_at=created_at,
        )

        low, high = blueprint.price_range
        base_price = rng.randint(low, high)
        count = rng.randint(1, self.config.variants_per_product)
        colors = rng.sample(COLORS, min(count, len(COLORS)))

        for v, (color_name, color_code) in enumerate(colors):
            material = rng.choice(blueprint.materials)
            # Round to .99
            price = Decimal(base_price + v * rng.randint(0, 40)) + Decimal("0.99")
            variant_id = self._id("variant", product_id, v)
            code = f"{category_index + 1}{index + 1:03d}"
            sku = f"{blueprint.name[:3].upper()}-{code}-{color_name[:3].upper()}"
            markup = rng.choice([0, 0, 50, 100])
            variant = ProductVariant(
                id=variant_id,
                name=f"{material}, {color_name}",
                sku_prefix=sku,
                color_code=color_code,
                color_name=color_name,
                material=material,
                price=price,
                compare_at_price=price + markup if markup else None,
                created_at=created_at,
                updated_at=created_at,
            )
            variant.inventory = [
                Inventory(
                    id=self._id("inventory", variant_id),
                    sku=sku,
                    quantity=rng.randint(0, 120),
                    reserved=rng.randint(0, 5),
                )
            ]
            product.variants.append(variant)

        product.images = [
            ProductImage(
                id=self._id("image", product_id, n),
                url=self._image_url(f"{product_id}:{n}"),
                alt=f"{title} view {n + 1}",
                is_primary=n == 0,
                created_at=created_at,
            )
            for n in range(2)
        ]
        return product

    def generate(self, categories: list[Category]) -> Iterator[Product]:
        """Generate products for the given categories.

        Args:
            categories: Categories from ``generate_categories``.

        Yields:
            Generated Product instances with children attached.
        """
        for c, (blueprint, category) in enumerate(zip(CATEGORIES, categories)):
            for i in range(self.config.products_per_category):
                yield self._generate_product(blueprint, category, c, i)

    def generate_orders(self, products: list[Product]) -> list[Order]:
        """Generate completed orders over a skewed subset of products."""
        if not products:
            return []

        # A few popular products receive most sales
        popular = self.rng.sample(products, min(len(products), 6))
        orders = []
        for n in range(self.config.orders):
            order_id = self._id("order", n)
            lines = []
            for line_no in range(self.rng.randint(1, 3)):
                product = self.rng.choice(popular if self.rng.random() < 0.7 else products)
                if not product.variants:
                    continue
                variant = self.rng.choice(product.variants)
                lines.append(
                    OrderItem(
                        id=self._id("order-item", n, line_no),
                        product_id=product.id,
                        variant_id=variant.id,
                        sku=variant.sku_prefix,
                        name=f"{product.title} ({variant.name})",
                        price=variant.price,
                        quantity=self.rng.randint(1, 4),
                    )
                )
            orders.append(
                Order(
                    id=order_id,
                    order_number=f"SO-{self.config.seed}-{n + 1:05d}",
                    status=self.rng.choice(COMPLETED_ORDER_STATUSES),
                    total=sum((i.price * i.quantity for i in lines), Decimal("0")),
                    created_at=EPOCH + timedelta(days=30, hours=n),
                    items=lines,
                )
            )
        return orders

    def generate_reviews(self, products: list[Product]) -> list[Review]:
        """Generate reviews; most are approved, some wait for moderation."""
        reviews = []
        for product in products:
            for n in range(self.rng.randint(0, self.config.reviews_per_product)):
                rating = self.rng.randint(2, 5)
                reviews.append(
                    Review(
                        id=self._id("review", product.id, n),
                        product_id=product.id,
                        rating=rating,
                        title=f"{rating} stars",
                        body=f"Review {n + 1} of {product.title}.",
                        approved=self.rng.random() < 0.8,
                        created_at=EPOCH + timedelta(days=60, hours=n),
                    )
                )
        return reviews

    def generate_catalog(
        self,
        include_orders: bool = False,
        include_reviews: bool = False,
    ) -> DemoCatalog:
        """Generate a complete demo catalog.

        Args:
            include_orders: Whether to generate completed orders.
            include_reviews: Whether to generate reviews.

        Returns:
            Generated catalog, not yet persisted.
        """
        categories = self.generate_categories()
        products = list(self.generate(categories))
        return DemoCatalog(
            categories=categories,
            products=products,
            orders=self.generate_orders(products) if include_orders else [],
            reviews=self.generate_reviews(products) if include_reviews else [],
        )

    @property
    def expected_count(self) -> int:
        """Get expected number of products."""
        return len(CATEGORIES) * self.config.products_per_category
