"""Product catalog.

Persistence models, the read-only listing engine with its store, and
the admin use cases.
"""

from storefront.catalog.generator import GeneratorConfig, ProductGenerator
from storefront.catalog.listing import ListingEngine, ProductSearchQuery, featured_score
from storefront.catalog.read_models import FilterFacets, ListingPage, ProductListItem
from storefront.catalog.repository import CatalogRepository
from storefront.catalog.service import CatalogService
from storefront.catalog.store import (
    CatalogStore,
    ProductFilter,
    SortMode,
    SqlCatalogStore,
    VariantPredicates,
)

__all__ = [
    # Listing
    "ListingEngine",
    "ProductSearchQuery",
    "featured_score",
    "FilterFacets",
    "ListingPage",
    "ProductListItem",
    # Store
    "CatalogStore",
    "ProductFilter",
    "SortMode",
    "SqlCatalogStore",
    "VariantPredicates",
    # Admin
    "CatalogRepository",
    "CatalogService",
    # Generator
    "GeneratorConfig",
    "ProductGenerator",
]
