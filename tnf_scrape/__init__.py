"""The North Face product scraper and catalog mapper."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from tnf_scrape.config import BASE_URL, OUTPUT_DIR, ROOT_DOMAIN
from tnf_scrape.mapper import ParseError, map_all, map_single
from tnf_scrape.models import ProductMapped, StarRating
from tnf_scrape.output import save_products_to_json, serialize_products
from tnf_scrape.scraper import FetchError, create_session, scrape_product
from tnf_scrape.validation import ProductIdValidationError, validate_product_id

__all__ = [
    # Version
    "__version__",
    # Config
    "BASE_URL",
    "OUTPUT_DIR",
    "ROOT_DOMAIN",
    # Models
    "ProductMapped",
    "StarRating",
    # Mapping
    "map_all",
    "map_single",
    "ParseError",
    # Fetch
    "create_session",
    "scrape_product",
    "FetchError",
    "ProductIdValidationError",
    "validate_product_id",
    # Output
    "serialize_products",
    "save_products_to_json",
]
