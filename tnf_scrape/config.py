"""Configuration and constants for the scraper."""

import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

__all__ = [
    "BASE_URL",
    "ROOT_DOMAIN",
    "PRODUCT_DETAILS_URL_TEMPLATE",
    "PRODUCT_REVIEWS_URL_TEMPLATE",
    "PRODUCT_PAGE_URL_TEMPLATE",
    "HEADERS",
    "REQUEST_TIMEOUT",
    "OUTPUT_DIR",
]

# Project root holds the optional .env file
_PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

BASE_URL = "https://www.thenorthface.com"
ROOT_DOMAIN = "thenorthface.com"

# Storefront API endpoints (locale is fixed to en-us)
PRODUCT_DETAILS_URL_TEMPLATE = BASE_URL + "/api/products/v2/products/{product_id}/details?locale=en-us"
PRODUCT_REVIEWS_URL_TEMPLATE = (
    BASE_URL
    + "/api/products/v1/products/{product_id}/reviews"
    + "?paging.from=0&paging.size=6&sort=Newest&getAll=false&locale=en-us&filters=rating%3A5"
)
PRODUCT_PAGE_URL_TEMPLATE = BASE_URL + "/en-us/p/-{product_id}"

# Headers the storefront API expects on every request
HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8,application/json",
    "Accept-Language": "en-US,en;q=0.5",
    "Brand": "TNF",
    "Channel": "ECOMM",
    "Locale": "en_US",
    "Region": "NORA",
    "Siteid": "TNF-US",
    "Source": "ECOM15",
    "User-Agent": os.getenv(
        "TNF_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:141.0) Gecko/20100101 Firefox/141.0",
    ),
}

# Request timeout (seconds)
REQUEST_TIMEOUT = float(os.getenv("TNF_REQUEST_TIMEOUT", "15"))

# Mapped products are written here as {product_id}.json
OUTPUT_DIR = os.getenv("TNF_OUTPUT_DIR", "outputs")
