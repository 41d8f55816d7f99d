"""Variant and inventory endpoints (admin)."""

from fastapi import APIRouter, status

from storefront.api.dependencies import CatalogServiceDep
from storefront.api.schemas import (
    ApiResponse,
    DeletedSchema,
    ErrorResponse,
    InventorySchema,
    InventoryUpdateRequest,
    VariantCreateRequest,
    VariantSchema,
    VariantUpdateRequest,
)
from storefront.catalog.models import Inventory, ProductVariant

router = APIRouter(tags=["Variants"])


def variant_to_response(variant: ProductVariant) -> VariantSchema:
    """Convert a variant with loaded inventory to its schema."""
    return VariantSchema.model_validate(variant.to_dict())


def inventory_to_response(inventory: Inventory) -> InventorySchema:
    return InventorySchema(
        sku=inventory.sku,
        quantity=inventory.quantity,
        reserved=inventory.reserved,
        location=inventory.location,
    )


@router.post(
    "/api/products/{product_id}/variants",
    response_model=ApiResponse[VariantSchema],
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Add variant",
)
async def add_variant(
    product_id: str,
    request: VariantCreateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[VariantSchema]:
    """Add a variant and its inventory row to a product."""
    variant = await service.add_variant(product_id, **request.model_dump())
    return ApiResponse(data=variant_to_response(variant))


@router.patch(
    "/api/variants/{variant_id}",
    response_model=ApiResponse[VariantSchema],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update variant",
)
async def update_variant(
    variant_id: str,
    request: VariantUpdateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[VariantSchema]:
    variant = await service.update_variant(variant_id, request.model_dump(exclude_unset=True))
    return ApiResponse(data=variant_to_response(variant))


@router.delete(
    "/api/variants/{variant_id}",
    response_model=ApiResponse[DeletedSchema],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete variant",
)
async def delete_variant(
    variant_id: str,
    service: CatalogServiceDep,
) -> ApiResponse[DeletedSchema]:
    await service.delete_variant(variant_id)
    return ApiResponse(data=DeletedSchema(id=variant_id))


@router.put(
    "/api/variants/{variant_id}/inventory",
    response_model=ApiResponse[InventorySchema],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Set inventory counters",
)
async def update_inventory(
    variant_id: str,
    request: InventoryUpdateRequest,
    service: CatalogServiceDep,
) -> ApiResponse[InventorySchema]:
    inventory = await service.update_inventory(
        variant_id,
        quantity=request.quantity,
        reserved=request.reserved,
    )
    return ApiResponse(data=inventory_to_response(inventory))
