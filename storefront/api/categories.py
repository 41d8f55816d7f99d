"""Category API endpoints."""

from fastapi import APIRouter, Query, status

from storefront.api.dependencies import CatalogServiceDep
from storefront.api.schemas import (
    ApiResponse,
    CategoryCreateRequest,
    CategoryListSchema,
    CategorySchema,
    CategoryUpdateRequest,
    DeletedSchema,
    ErrorResponse,
    PaginationSchema,
)
from storefront.catalog.models import Category
from storefront.catalog.read_models import ListingPage
from storefront.infrastructure.config import settings

router = APIRouter(prefix="/api/categories", tags=["Categories"])


def category_to_response(category: Category) -> CategorySchema:
    return CategorySchema(
        id=category.id,
        name=category.name,
        slug=category.slug,
        image=category.image,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


@router.get(
    "",
    response_model=ApiResponse[CategoryListSchema],
    summary="List categories",
)
async def list_categories(
    service: CatalogServiceDep,
    page: int = Query(default=1, description="Page number (1-based)"),
    per_page: int | None = Query(default=None, alias="perPage", description="Items per page"),
) -> ApiResponse[CategoryListSchema]:
    """List categories ordered by name."""
    page = max(page, 1)
    limit = settings.default_page_size if per_page is None else per_page
    limit = min(max(limit, 1), settings.max_page_size)

    categories, total = await service.list_categories(limit=limit, offset=(page - 1) * limit)
    result = ListingPage(items=categories, total=total, page=page, per_page=limit)

    return ApiResponse(
        data=CategoryListSchema(
            items=[category_to_response(c) for c in categories],
            pagination=PaginationSchema.from_page(result),
        )
    )


@router.get(
    "/by-slug/{slug}",
    response_model=ApiResponse[CategorySchema],
    responses={404: {"model": ErrorResponse}},
    summary="Get category by slug",
)
async def get_category_by_slug(
    slug: str,
    service: CatalogServiceDep,
) -> ApiResponse[CategorySchema]:
    category = await service.get_category_by_slug(slug)
    return ApiResponse(data=category_to_response(category))


@router.get(
    "/{category_id}",
    response_model=ApiResponse[CategorySchema],
    responses={404: {"model": ErrorResponse}},
    summary="Get category",
)
async def get_category(
    category_id: str,
    service: CatalogServiceDep,
) -> ApiResponse[CategorySchema]:
    category = await service.get_category(category_id)
    return ApiResponse(data=category_to_response(category))


@router.post(
    "",
    response_model=ApiResponse[CategorySchema],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Create category",
)
async def create_category(
    request: CategoryCreateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[CategorySchema]:
    """Create a category. The slug is derived from the name."""
    category = await service.create_category(request.name, request.image)
    return ApiResponse(data=category_to_response(category))


@router.patch(
    "/{category_id}",
    response_model=ApiResponse[CategorySchema],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update category",
)
async def update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[CategorySchema]:
    category = await service.update_category(category_id, request.model_dump(exclude_unset=True))
    return ApiResponse(data=category_to_response(category))


@router.delete(
    "/{category_id}",
    response_model=ApiResponse[DeletedSchema],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete category",
)
async def delete_category(
    category_id: str,
    service: CatalogServiceDep,
) -> ApiResponse[DeletedSchema]:
    """Delete a category; its products become uncategorized."""
    await service.delete_category(category_id)
    return ApiResponse(data=DeletedSchema(id=category_id))
