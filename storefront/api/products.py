"""Product API endpoints.

Public listing views (search, best-selling, featured, related, filter
facets, detail by slug) and admin product management.
"""

from decimal import Decimal

from fastapi import APIRouter, Query, status

from storefront.api.dependencies import CatalogServiceDep, ListingEngineDep
from storefront.api.schemas import (
    ApiResponse,
    DeletedSchema,
    ErrorResponse,
    FilterFacetsSchema,
    ProductCreateRequest,
    ProductDetailSchema,
    ProductListItemSchema,
    ProductListPageSchema,
    ProductRefSchema,
    ProductUpdateRequest,
)
from storefront.catalog.listing import MAX_PAGE, ProductSearchQuery
from storefront.catalog.models import Product
from storefront.catalog.read_models import ProductListItem
from storefront.catalog.store import SortMode
from storefront.infrastructure.config import settings

router = APIRouter(prefix="/api/products", tags=["Products"])


# ============================================================================
# Converters
# ============================================================================


def items_to_response(items: list[ProductListItem]) -> list[ProductListItemSchema]:
    return [ProductListItemSchema.from_item(item) for item in items]


def product_to_ref(product: Product) -> ProductRefSchema:
    return ProductRefSchema(
        id=product.id,
        title=product.title,
        slug=product.slug,
        status=product.status,
    )


def product_to_detail(product: Product) -> ProductDetailSchema:
    """Convert a product with loaded relations to its detail schema."""
    return ProductDetailSchema.model_validate(product.to_dict())


def _showcase_limit(limit: int | None) -> int:
    return settings.default_showcase_limit if limit is None else limit


# ============================================================================
# Public Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ApiResponse[ProductListPageSchema],
    responses={400: {"model": ErrorResponse}},
    summary="Search products",
    description="Search, filter, sort and paginate published products.",
)
async def list_products(
    engine: ListingEngineDep,
    page: int = Query(default=1, le=MAX_PAGE, description="Page number (1-based)"),
    per_page: int | None = Query(default=None, alias="perPage", description="Items per page"),
    category: str | None = Query(default=None, description="Category slug"),
    q: str | None = Query(default=None, description="Search term"),
    price_min: Decimal | None = Query(default=None, alias="priceMin", ge=0),
    price_max: Decimal | None = Query(default=None, alias="priceMax", ge=0),
    color: str | None = Query(default=None, description="Variant color name"),
    material: str | None = Query(default=None, description="Variant material"),
    sort: SortMode = Query(default=SortMode.NEWEST, description="Sort mode"),
) -> ApiResponse[ProductListPageSchema]:
    """Search published products.

    ``page`` below 1 is treated as 1 and ``perPage`` is capped at the
    configured maximum page size.
    """
    limit = settings.default_page_size if per_page is None else per_page
    query = ProductSearchQuery(
        q=q,
        category_slug=category or None,
        min_price=price_min,
        max_price=price_max,
        color=color or None,
        material=material or None,
        sort=sort,
        page=page,
        limit=min(limit, settings.max_page_size),
    )
    result = await engine.search_products(query)
    return ApiResponse(data=ProductListPageSchema.from_page(result))


# Same handler under the /search path
router.add_api_route(
    "/search",
    list_products,
    methods=["GET"],
    response_model=ApiResponse[ProductListPageSchema],
    responses={400: {"model": ErrorResponse}},
    summary="Search products",
)


@router.get(
    "/best-selling",
    response_model=ApiResponse[list[ProductListItemSchema]],
    summary="Best-selling products",
)
async def best_selling_products(
    engine: ListingEngineDep,
    limit: int | None = Query(default=None, description="Maximum number of products"),
) -> ApiResponse[list[ProductListItemSchema]]:
    """Products ranked by units sold, padded with the newest products."""
    items = await engine.get_best_selling_products(_showcase_limit(limit))
    return ApiResponse(data=items_to_response(items))


@router.get(
    "/featured",
    response_model=ApiResponse[list[ProductListItemSchema]],
    summary="Featured products",
)
async def featured_products(
    engine: ListingEngineDep,
    limit: int | None = Query(default=None, description="Maximum number of products"),
) -> ApiResponse[list[ProductListItemSchema]]:
    """Products ranked by rating, review count and sales."""
    items = await engine.get_featured_products(_showcase_limit(limit))
    return ApiResponse(data=items_to_response(items))


@router.get(
    "/filters",
    response_model=ApiResponse[FilterFacetsSchema],
    summary="Filter facets",
)
async def product_filters(engine: ListingEngineDep) -> ApiResponse[FilterFacetsSchema]:
    facets = await engine.get_filters()
    return ApiResponse(data=FilterFacetsSchema.model_validate(facets.to_dict()))


@router.get(
    "/related/{slug}",
    response_model=ApiResponse[list[ProductListItemSchema]],
    summary="Related products",
)
async def related_products(
    slug: str,
    engine: ListingEngineDep,
) -> ApiResponse[list[ProductListItemSchema]]:
    """Published products sharing the category tag of the given product."""
    items = await engine.get_related_products(slug, settings.related_products_limit)
    return ApiResponse(data=items_to_response(items))


@router.get(
    "/by-slug/{slug}",
    response_model=ApiResponse[ProductDetailSchema],
    responses={404: {"model": ErrorResponse}},
    summary="Get product by slug",
)
async def get_product_by_slug(
    slug: str,
    service: CatalogServiceDep,
) -> ApiResponse[ProductDetailSchema]:
    product = await service.get_product_by_slug(slug)
    return ApiResponse(data=product_to_detail(product))


# ============================================================================
# Admin Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ApiResponse[ProductRefSchema],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Create product",
)
async def create_product(
    request: ProductCreateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[ProductRefSchema]:
    """Create a product.

    The slug is derived from the title unless given explicitly.
    """
    product = await service.create_product(
        title=request.title,
        slug=request.slug,
        short_description=request.short_description,
        description=request.description,
        category_id=request.category_id,
        status=request.status,
        metadata=request.metadata,
    )
    return ApiResponse(data=product_to_ref(product))


@router.get(
    "/{product_id}",
    response_model=ApiResponse[ProductDetailSchema],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(
    product_id: str,
    service: CatalogServiceDep,
) -> ApiResponse[ProductDetailSchema]:
    product = await service.get_product_by_id(product_id)
    return ApiResponse(data=product_to_detail(product))


@router.patch(
    "/{product_id}",
    response_model=ApiResponse[ProductRefSchema],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update product",
)
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[ProductRefSchema]:
    """Update the fields present in the request body."""
    product = await service.update_product(product_id, request.model_dump(exclude_unset=True))
    return ApiResponse(data=product_to_ref(product))


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[DeletedSchema],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(
    product_id: str,
    service: CatalogServiceDep,
) -> ApiResponse[DeletedSchema]:
    """Delete a product with its variants, inventory and images."""
    await service.delete_product(product_id)
    return ApiResponse(data=DeletedSchema(id=product_id))
