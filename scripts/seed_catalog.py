#!/usr/bin/env python3
"""Seed demo catalog script.

Generates a deterministic demo catalog (categories, products, variants,
inventory, images) and optionally completed orders and approved reviews
so the best-selling and featured listings have data.

Usage:
    python scripts/seed_catalog.py --create-tables
    python scripts/seed_catalog.py --products 20 --seed 7 --orders --reviews
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.catalog.generator import GeneratorConfig
from storefront.catalog.service import CatalogService
from storefront.infrastructure import database
from storefront.infrastructure.config import settings
from storefront.infrastructure.logging_setup import configure_logging


async def seed(args: argparse.Namespace) -> dict:
    """Seed the catalog with the given options.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Seeding result.
    """
    if args.database_url:
        database.configure_database(args.database_url)

    if args.create_tables:
        print("Creating database tables...")
        await database.create_all()
        print("Tables ready.")
        print()

    config = GeneratorConfig(seed=args.seed, products_per_category=args.products)

    async with database.get_session_factory()() as session:
        service = CatalogService(session)
        result = await service.seed_catalog(
            config,
            include_orders=args.orders,
            include_reviews=args.reviews,
            clear_existing=not args.no_clear,
        )

    await database.engine.dispose()
    return result


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the demo product catalog")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create database tables before seeding",
    )
    parser.add_argument(
        "--products",
        type=int,
        default=10,
        help="Products per category (default: 10)",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--orders", action="store_true", help="Generate completed orders")
    parser.add_argument("--reviews", action="store_true", help="Generate reviews")
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't clear existing catalog rows before seeding",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override DATABASE_URL",
    )

    args = parser.parse_args()
    configure_logging(settings.log_level, json_logs=False)

    print("=" * 60)
    print("Storefront Catalog Seeder")
    print("=" * 60)
    print(f"Seed: {args.seed}")
    print(f"Products per category: {args.products}")
    print(f"Clear existing: {not args.no_clear}")
    print()

    result = asyncio.run(seed(args))

    print(f"  ✓ Deleted: {result['deleted']} existing products")
    print(f"  ✓ Categories: {result['categories_created']}")
    print(f"  ✓ Products: {result['products_created']}")
    print(f"  ✓ Variants: {result['variants_created']}")
    print(f"  ✓ Orders: {result['orders_created']}")
    print(f"  ✓ Reviews: {result['reviews_created']}")
    print()
    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
