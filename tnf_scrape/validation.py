"""Product identifier validation and sanitization.

The identifier is interpolated into API URLs and into the output file name,
so anything beyond a plain token is rejected before a request is made.
"""

import re

__all__ = [
    "ProductIdValidationError",
    "sanitize_product_id",
    "validate_product_id",
    "is_valid_product_id",
]


class ProductIdValidationError(Exception):
    """Raised when a product identifier cannot be used."""
    pass


# Storefront ids look like NF0A3C8D or NF0A5GLL_JK3
PRODUCT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def sanitize_product_id(product_id: str) -> str:
    """Strip whitespace and control characters from a raw identifier.

    Args:
        product_id: Raw identifier (CLI argument or prompt input)

    Returns:
        Sanitized identifier, possibly empty
    """
    if not product_id:
        return ""

    product_id = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", product_id)
    return product_id.strip()


def validate_product_id(product_id: str) -> str:
    """Validate a product identifier.

    Args:
        product_id: Identifier to validate

    Returns:
        Sanitized identifier

    Raises:
        ProductIdValidationError: If the identifier is empty or contains
            characters that are unsafe in a URL path or file name
    """
    product_id = sanitize_product_id(product_id)
    if not product_id:
        raise ProductIdValidationError("Product id is empty")

    if not PRODUCT_ID_PATTERN.match(product_id):
        raise ProductIdValidationError(
            f"Invalid product id: {product_id!r}\n"
            f"Expected letters, digits, '_' or '-' only (e.g. NF0A3C8D)"
        )

    return product_id


def is_valid_product_id(product_id: str) -> bool:
    """Check a product identifier without raising."""
    try:
        validate_product_id(product_id)
        return True
    except ProductIdValidationError:
        return False
