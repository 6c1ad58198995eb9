"""Data models for mapped products."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, MutableMapping

__all__ = ["StarRating", "ProductMapped"]


@dataclass
class StarRating:
    """Count and share of reviews for a single star bucket."""

    number: int = 0
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"Number": self.number, "Percentage": self.percentage}


@dataclass
class ProductMapped:
    """One flattened catalog record for a purchasable variant.

    Products without variants are represented by a single record whose sku is
    the bare product id. Global fields (name, price, ratings, category...) are
    identical across all records of one product; only sku, mpn, availability
    and variant_attributes differ.
    """

    sku: str = ""
    root_domain: str = ""
    name: str = ""
    brand: str = ""
    currency: str = ""
    price: float = 0.0
    image_urls: List[str] = field(default_factory=list)
    star_rating_distribution: Dict[str, StarRating] = field(default_factory=dict)

    # Category path, e.g. "Home>Men>Jackets" plus its first four levels
    category: str = ""
    category_lvl1: str = ""
    category_lvl2: str = ""
    category_lvl3: str = ""
    category_lvl4: str = ""

    date: str = ""
    time: str = ""
    url: str = ""
    mpn: str = ""
    availability: str = ""
    average_customer_review: float = 0.0
    number_of_customer_reviews: int = 0

    # Attribute label -> comma-joined option labels, plus "badge"
    attributes: Dict[str, str] = field(default_factory=dict)
    description: str = ""
    # JSON-encoded list of feature strings
    features: str = ""

    # Sibling SKUs and their display attributes (same for every record).
    # Display maps are case-insensitive (requests CaseInsensitiveDict).
    variants: List[str] = field(default_factory=list)
    variant_attributes: MutableMapping[str, str] = field(default_factory=dict)
    variants_attributes: List[Dict[str, MutableMapping[str, str]]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-ready output shape (PascalCase keys)."""
        return {
            "Sku": self.sku,
            "RootDomain": self.root_domain,
            "Name": self.name,
            "Brand": self.brand,
            "Currency": self.currency,
            "Price": self.price,
            "ImageUrls": list(self.image_urls),
            "StarRatingDistribution": {
                key: rating.to_dict() for key, rating in self.star_rating_distribution.items()
            },
            "Category": self.category,
            "CategoryLvl1": self.category_lvl1,
            "CategoryLvl2": self.category_lvl2,
            "CategoryLvl3": self.category_lvl3,
            "CategoryLvl4": self.category_lvl4,
            "Date": self.date,
            "Time": self.time,
            "Url": self.url,
            "Mpn": self.mpn,
            "Availability": self.availability,
            "AverageCustomerReview": self.average_customer_review,
            "NumberOfCustomerReviews": self.number_of_customer_reviews,
            "Attributes": dict(self.attributes),
            "Description": self.description,
            "Features": self.features,
            "Variants": list(self.variants),
            "VariantAttributes": dict(self.variant_attributes),
            "VariantsAttributes": [
                {sku: dict(display) for sku, display in entry.items()}
                for entry in self.variants_attributes
            ],
        }
