"""Product image endpoints (admin)."""

from fastapi import APIRouter, status

from storefront.api.dependencies import CatalogServiceDep
from storefront.api.schemas import (
    ApiResponse,
    DeletedSchema,
    ErrorResponse,
    ImageCreateRequest,
    ProductImageSchema,
)
from storefront.catalog.models import ProductImage

router = APIRouter(prefix="/api/products/{product_id}/images", tags=["Product Images"])


def image_to_response(image: ProductImage) -> ProductImageSchema:
    return ProductImageSchema(
        id=image.id,
        url=image.url,
        alt=image.alt,
        is_primary=image.is_primary,
    )


@router.post(
    "",
    response_model=ApiResponse[ProductImageSchema],
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Add product image",
)
async def add_image(
    product_id: str,
    request: ImageCreateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[ProductImageSchema]:
    """Attach an image; a primary image replaces the previous primary."""
    image = await service.add_product_image(
        product_id,
        url=request.url,
        alt=request.alt,
        is_primary=request.is_primary,
    )
    return ApiResponse(data=image_to_response(image))


@router.delete(
    "/{image_id}",
    response_model=ApiResponse[DeletedSchema],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Remove product image",
)
async def remove_image(
    product_id: str,
    image_id: str,
    service: CatalogServiceDep,
) -> ApiResponse[DeletedSchema]:
    await service.remove_product_image(product_id, image_id)
    return ApiResponse(data=DeletedSchema(id=image_id))


@router.post(
    "/{image_id}/primary",
    response_model=ApiResponse[ProductImageSchema],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Set primary image",
)
async def set_primary_image(
    product_id: str,
    image_id: str,
    service: CatalogServiceDep,
) -> ApiResponse[ProductImageSchema]:
    """Make the image the only primary image of the product."""
    image = await service.set_primary_image(product_id, image_id)
    return ApiResponse(data=image_to_response(image))
