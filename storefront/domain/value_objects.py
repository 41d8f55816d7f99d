"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Self

from storefront.domain.base import ValueObject
from storefront.domain.exceptions import InvalidSlugError, InvalidStatusError

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
STATUS_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*$")
STATUS_MAX_LENGTH = 50

# Order statuses that count as a completed sale
COMPLETED_ORDER_STATUSES: tuple[str, ...] = ("PAID", "FULFILLED", "COD_COMPLETED")


# ============================================================================
# Slug
# ============================================================================


@dataclass(frozen=True)
class Slug(ValueObject):
    """URL-safe identifier for products and categories.

    Always lowercase ASCII alphanumerics separated by single dashes.
    """

    value: str

    def __post_init__(self) -> None:
        if not SLUG_PATTERN.match(self.value):
            raise InvalidSlugError(self.value)

    @staticmethod
    def normalize(raw: str) -> str:
        """Normalize free text into slug form.

        Lowercases, strips diacritics, and collapses every run of
        non-alphanumeric characters into a single dash.

        Args:
            raw: Arbitrary text.

        Returns:
            Normalized (possibly empty) string.
        """
        text = unicodedata.normalize("NFD", raw.strip().lower())
        text = "".join(ch for ch in text if not unicodedata.combining(ch))
        text = re.sub(r"[^a-z0-9]+", "-", text)
        return text.strip("-")

    @classmethod
    def parse(cls, raw: str) -> Self:
        """Create a slug from a user-supplied slug value.

        Args:
            raw: Raw slug, normalized before validation.

        Returns:
            Slug instance.

        Raises:
            InvalidSlugError: If nothing valid remains after normalizing.
        """
        normalized = cls.normalize(raw)
        if not normalized:
            raise InvalidSlugError(raw)
        return cls(value=normalized)

    @classmethod
    def from_text(cls, text: str) -> Self:
        """Derive a slug from a title or name."""
        return cls.parse(text)

    def __str__(self) -> str:
        return self.value


# ============================================================================
# Product Status
# ============================================================================


@dataclass(frozen=True)
class ProductStatusName(ValueObject):
    """Name of a product status.

    Statuses form an open set backed by the ``product_statuses`` lookup
    table, so new ones can be added at runtime without code changes.
    This type only guarantees the name is well formed.
    """

    value: str

    def __post_init__(self) -> None:
        if len(self.value) > STATUS_MAX_LENGTH or not STATUS_PATTERN.match(self.value):
            raise InvalidStatusError(self.value)

    @classmethod
    def parse(cls, raw: str) -> Self:
        """Create a status name from user input.

        Args:
            raw: Raw status, trimmed and upper-cased before validation.

        Returns:
            ProductStatusName instance.

        Raises:
            InvalidStatusError: If the name is empty or malformed.
        """
        return cls(value=raw.strip().upper())

    @property
    def is_published(self) -> bool:
        """Whether products with this status are publicly listed."""
        return self.value == PUBLISHED.value

    def __str__(self) -> str:
        return self.value


PUBLISHED = ProductStatusName("PUBLISHED")
