"""API schemas for the storefront catalog API.

Pydantic models for request/response validation and serialization.
Every response is wrapped in a ``{success, data}`` or
``{success: false, error}`` envelope.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from storefront.catalog.read_models import ListingPage, ProductListItem

T = TypeVar("T")


# ============================================================================
# Envelopes
# ============================================================================


class ApiResponse(BaseModel, Generic[T]):
    """Successful response envelope."""

    success: bool = Field(default=True, description="Always true on success")
    data: T


class ErrorBody(BaseModel):
    """Error payload."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Any = Field(default=None, description="Additional error context")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    success: bool = Field(default=False, description="Always false on error")
    error: ErrorBody


def error_content(code: str, message: str, details: Any = None) -> dict[str, Any]:
    """Build a JSON-ready error envelope."""
    return ErrorResponse(error=ErrorBody(code=code, message=message, details=details)).model_dump(
        mode="json"
    )


class PaginationSchema(BaseModel):
    """Pagination metadata."""

    page: int = Field(..., description="Current page number (1-based)")
    per_page: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total number of items")
    total_pages: int = Field(..., description="Total number of pages")
    has_next: bool = Field(..., description="Whether there is a next page")
    has_prev: bool = Field(..., description="Whether there is a previous page")

    @classmethod
    def from_page(cls, page: ListingPage[Any]) -> "PaginationSchema":
        return cls(
            page=page.page,
            per_page=page.per_page,
            total=page.total,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_prev=page.has_prev,
        )


# ============================================================================
# Listing Schemas
# ============================================================================


class InventoryLevelSchema(BaseModel):
    sku: str
    quantity: int
    reserved: int


class ListItemVariantSchema(BaseModel):
    id: str
    sku_prefix: str | None = None
    price: float
    inventory: list[InventoryLevelSchema] = Field(default_factory=list)


class PrimaryImageSchema(BaseModel):
    url: str
    alt: str | None = None


class CategorySummarySchema(BaseModel):
    name: str
    slug: str


class ProductListItemSchema(BaseModel):
    """Product as shown in listings."""

    id: str
    title: str
    slug: str
    short_description: str | None = None
    price_min: float | None = Field(default=None, description="Lowest variant price")
    price_max: float | None = Field(default=None, description="Highest variant price")
    primary_image: PrimaryImageSchema | None = None
    variants_count: int
    category: CategorySummarySchema | None = None
    variants: list[ListItemVariantSchema] = Field(default_factory=list)

    @classmethod
    def from_item(cls, item: ProductListItem) -> "ProductListItemSchema":
        return cls.model_validate(item.to_dict())


class ProductListPageSchema(BaseModel):
    """Page of product list items."""

    items: list[ProductListItemSchema]
    pagination: PaginationSchema

    @classmethod
    def from_page(cls, page: ListingPage[ProductListItem]) -> "ProductListPageSchema":
        return cls(
            items=[ProductListItemSchema.from_item(item) for item in page.items],
            pagination=PaginationSchema.from_page(page),
        )


class FilterFacetsSchema(BaseModel):
    """Available filter values across published products."""

    materials: list[str]
    colors: list[str]
    price_min: float
    price_max: float


# ============================================================================
# Category Schemas
# ============================================================================


class CategorySchema(BaseModel):
    """Category details."""

    id: str
    name: str
    slug: str
    image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryListSchema(BaseModel):
    items: list[CategorySchema]
    pagination: PaginationSchema


class CategoryCreateRequest(BaseModel):
    """Request to create a category."""

    name: str = Field(..., min_length=1, max_length=200, description="Category name")
    image: str | None = Field(default=None, max_length=1000, description="Image URL")


class CategoryUpdateRequest(BaseModel):
    """Request to update a category. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    image: str | None = Field(default=None, max_length=1000)


# ============================================================================
# Product Schemas
# ============================================================================


class ProductStatusSchema(BaseModel):
    name: str
    description: str | None = None


class ProductStatusCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, description="Status name")
    description: str | None = None


class ProductImageSchema(BaseModel):
    id: str
    url: str
    alt: str | None = None
    is_primary: bool


class InventorySchema(BaseModel):
    sku: str
    quantity: int
    reserved: int
    location: str | None = None


class VariantSchema(BaseModel):
    """Variant details with inventory."""

    id: str
    name: str
    sku_prefix: str | None = None
    color_code: str | None = None
    color_name: str | None = None
    material: str | None = None
    price: float
    compare_at_price: float | None = None
    image: str | None = None
    inventory: list[InventorySchema] = Field(default_factory=list)


class CategoryRefSchema(BaseModel):
    id: str
    name: str
    slug: str


class ProductDetailSchema(BaseModel):
    """Product detail view."""

    id: str
    title: str
    slug: str
    short_description: str | None = None
    description: str | None = None
    status: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    category: CategoryRefSchema | None = None
    images: list[ProductImageSchema] = Field(default_factory=list)
    variants: list[VariantSchema] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductRefSchema(BaseModel):
    """Identifiers of a created or updated product."""

    id: str
    title: str
    slug: str
    status: str


class ProductCreateRequest(BaseModel):
    """Request to create a product."""

    title: str = Field(..., min_length=1, max_length=500, description="Product title")
    slug: str | None = Field(default=None, max_length=500, description="Explicit slug")
    short_description: str | None = None
    description: str | None = None
    category_id: str | None = None
    status: str | None = Field(default=None, max_length=50)
    metadata: dict[str, Any] | None = None


class ProductUpdateRequest(BaseModel):
    """Request to update a product. Omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    slug: str | None = Field(default=None, max_length=500)
    short_description: str | None = None
    description: str | None = None
    category_id: str | None = None
    status: str | None = Field(default=None, max_length=50)
    metadata: dict[str, Any] | None = None


class ImageCreateRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=1000)
    alt: str | None = Field(default=None, max_length=500)
    is_primary: bool = False


class VariantCreateRequest(BaseModel):
    """Request to add a variant to a product."""

    name: str = Field(..., min_length=1, max_length=200)
    sku_prefix: str | None = Field(default=None, max_length=100)
    color_code: str | None = Field(default=None, max_length=50)
    color_name: str | None = Field(default=None, max_length=100)
    material: str | None = Field(default=None, max_length=100)
    price: Decimal = Field(..., ge=0, description="Unit price")
    compare_at_price: Decimal | None = Field(default=None, ge=0)
    image: str | None = Field(default=None, max_length=1000)
    initial_quantity: int = Field(default=0, ge=0)


class VariantUpdateRequest(BaseModel):
    """Request to update a variant. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    sku_prefix: str | None = Field(default=None, max_length=100)
    color_code: str | None = Field(default=None, max_length=50)
    color_name: str | None = Field(default=None, max_length=100)
    material: str | None = Field(default=None, max_length=100)
    price: Decimal | None = Field(default=None, ge=0)
    compare_at_price: Decimal | None = Field(default=None, ge=0)
    image: str | None = Field(default=None, max_length=1000)


class InventoryUpdateRequest(BaseModel):
    quantity: int = Field(..., ge=0)
    reserved: int | None = Field(default=None, ge=0)


class DeletedSchema(BaseModel):
    id: str
    deleted: bool = True
