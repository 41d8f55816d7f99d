"""Domain exceptions.

All domain-level errors that represent business rule violations.
Each error carries a machine-readable code and the HTTP status the
API layer maps it to.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    code: str = "DOMAIN_ERROR"
    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(DomainError):
    """Raised when input fails a business validation rule."""

    code = "VALIDATION_ERROR"


class InvalidSlugError(ValidationError):
    """Raised when a slug cannot be normalized into a valid slug."""

    code = "INVALID_SLUG"

    def __init__(self, value: str) -> None:
        """Initialize invalid slug error.

        Args:
            value: The rejected raw value.
        """
        super().__init__(
            f"Slug derived from '{value}' is invalid",
            details={"value": value},
        )


class InvalidStatusError(ValidationError):
    """Raised when a product status name is malformed."""

    code = "INVALID_STATUS"

    def __init__(self, value: str) -> None:
        """Initialize invalid status error.

        Args:
            value: The rejected raw value.
        """
        super().__init__(
            f"Status name '{value}' is invalid",
            details={"value": value},
        )


class NameTooShortError(ValidationError):
    """Raised when a title or name is shorter than allowed."""

    code = "NAME_TOO_SHORT"

    def __init__(self, field: str, min_length: int = 2) -> None:
        """Initialize name too short error.

        Args:
            field: Name of the offending field.
            min_length: Minimum accepted length.
        """
        super().__init__(
            f"{field.capitalize()} must be at least {min_length} characters",
            details={"field": field, "min_length": min_length},
        )


# ============================================================================
# Not Found Errors
# ============================================================================


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    code = "NOT_FOUND"
    status_code = 404
    resource = "Resource"

    def __init__(self, identifier: str | None = None) -> None:
        """Initialize not found error.

        Args:
            identifier: ID or slug that was looked up.
        """
        message = f"{self.resource} not found"
        if identifier:
            message = f"{message}: {identifier}"
        super().__init__(message, details={"id": identifier} if identifier else None)


class ProductNotFoundError(NotFoundError):
    resource = "Product"


class CategoryNotFoundError(NotFoundError):
    resource = "Category"


class VariantNotFoundError(NotFoundError):
    resource = "Variant"


class ImageNotFoundError(NotFoundError):
    resource = "Image"


# ============================================================================
# Conflict Errors
# ============================================================================


class ConflictError(DomainError):
    """Raised when a write would violate a uniqueness rule."""

    code = "CONFLICT"
    status_code = 409
    resource = "Resource"

    def __init__(self, field: str, value: str) -> None:
        """Initialize conflict error.

        Args:
            field: Field that must be unique.
            value: Conflicting value.
        """
        super().__init__(
            f'{self.resource} with {field} "{value}" already exists',
            details={"field": field, "value": value},
        )


class ProductAlreadyExistsError(ConflictError):
    resource = "Product"


class CategoryAlreadyExistsError(ConflictError):
    resource = "Category"


class SkuAlreadyExistsError(ConflictError):
    resource = "Inventory"
