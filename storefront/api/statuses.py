"""Product status lookup endpoints (admin)."""

from fastapi import APIRouter, status

from storefront.api.dependencies import CatalogServiceDep
from storefront.api.schemas import (
    ApiResponse,
    ErrorResponse,
    ProductStatusCreateRequest,
    ProductStatusSchema,
)

router = APIRouter(prefix="/api/product-statuses", tags=["Product Statuses"])


@router.get(
    "",
    response_model=ApiResponse[list[ProductStatusSchema]],
    responses={401: {"model": ErrorResponse}},
    summary="List product statuses",
)
async def list_statuses(service: CatalogServiceDep) -> ApiResponse[list[ProductStatusSchema]]:
    statuses = await service.list_statuses()
    return ApiResponse(
        data=[ProductStatusSchema(name=s.name, description=s.description) for s in statuses]
    )


@router.post(
    "",
    response_model=ApiResponse[ProductStatusSchema],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Add product status",
)
async def create_status(
    request: ProductStatusCreateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[ProductStatusSchema]:
    """Add a status to the lookup table.

    The name is trimmed and upper-cased. Adding an existing name
    returns the stored row unchanged.
    """
    product_status = await service.create_status(request.name, request.description)
    return ApiResponse(
        data=ProductStatusSchema(
            name=product_status.name,
            description=product_status.description,
        )
    )
