"""Domain layer - value objects and domain errors.

- **Value Objects**: Slug, ProductStatusName
- **Exceptions**: Domain-specific errors mapped to HTTP responses

Example usage:
    from storefront.domain import Slug, ProductStatusName

    slug = Slug.from_text("Linen Shirt, Blue")  # linen-shirt-blue
    status = ProductStatusName.parse("draft")    # DRAFT
"""

from storefront.domain.base import ValueObject
from storefront.domain.exceptions import (
    CategoryAlreadyExistsError,
    CategoryNotFoundError,
    ConflictError,
    DomainError,
    ImageNotFoundError,
    InvalidSlugError,
    InvalidStatusError,
    NameTooShortError,
    NotFoundError,
    ProductAlreadyExistsError,
    ProductNotFoundError,
    SkuAlreadyExistsError,
    ValidationError,
    VariantNotFoundError,
)
from storefront.domain.value_objects import (
    COMPLETED_ORDER_STATUSES,
    PUBLISHED,
    ProductStatusName,
    Slug,
)

__all__ = [
    # Base classes
    "ValueObject",
    # Value Objects
    "COMPLETED_ORDER_STATUSES",
    "PUBLISHED",
    "ProductStatusName",
    "Slug",
    # Exceptions
    "DomainError",
    "ValidationError",
    "InvalidSlugError",
    "InvalidStatusError",
    "NameTooShortError",
    "NotFoundError",
    "ProductNotFoundError",
    "CategoryNotFoundError",
    "VariantNotFoundError",
    "ImageNotFoundError",
    "ConflictError",
    "ProductAlreadyExistsError",
    "CategoryAlreadyExistsError",
    "SkuAlreadyExistsError",
]
