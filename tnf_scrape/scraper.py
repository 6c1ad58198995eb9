"""Fetching of product and rating payloads from the storefront API."""

import uuid
from typing import List, Optional, Tuple

import requests  # type: ignore[import-untyped]

__all__ = [
    "FetchError",
    "create_session",
    "fetch_json",
    "fetch_product_payloads",
    "scrape_product",
]

from tnf_scrape.config import (
    HEADERS,
    PRODUCT_DETAILS_URL_TEMPLATE,
    PRODUCT_PAGE_URL_TEMPLATE,
    PRODUCT_REVIEWS_URL_TEMPLATE,
    REQUEST_TIMEOUT,
)
from tnf_scrape.logging_config import get_logger, log_scrape_event
from tnf_scrape.mapper import map_all
from tnf_scrape.models import ProductMapped
from tnf_scrape.shutdown import get_shutdown_handler
from tnf_scrape.validation import validate_product_id

logger = get_logger("scraper")


class FetchError(Exception):
    """Raised when a request fails below the HTTP level (DNS, connection, timeout)."""
    pass


def create_session() -> requests.Session:
    """Create a requests Session with the storefront headers.

    The session keeps cookies between the details, page and reviews requests
    and carries fresh correlation ids for this run.
    """
    session = requests.Session()
    session.headers.update(HEADERS)
    session.headers.setdefault("Accept-Encoding", "gzip, deflate")
    session.headers["x-correlation-id"] = str(uuid.uuid4())
    session.headers["x-transaction-id"] = str(uuid.uuid4())
    return session


def _get(session: requests.Session, url: str) -> requests.Response:
    get_shutdown_handler().check_shutdown()
    try:
        return session.get(url, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error fetching {url}: {e}")
        raise FetchError(f"Failed to fetch {url}: {e}") from e


def _log_error(stage: str, resp: requests.Response) -> None:
    logger.error(f"Error ({stage}): {resp.status_code}")
    logger.error(resp.text)
    log_scrape_event("fetch_error", {
        "stage": stage,
        "status_code": resp.status_code,
        "url": resp.url,
        "body": resp.text,
    })


def fetch_json(session: requests.Session, url: str, stage: str) -> Optional[str]:
    """GET a URL and return the body text, or None on a non-success status.

    Args:
        session: Session to issue the request on
        url: URL to fetch
        stage: Label used when logging a failure ('product', 'rating')

    Raises:
        FetchError: If the request could not be completed at all
        KeyboardInterrupt: If a graceful shutdown was requested
    """
    resp = _get(session, url)
    if not resp.ok:
        _log_error(stage, resp)
        return None
    return resp.text


def fetch_product_payloads(
    product_id: str,
    session: Optional[requests.Session] = None,
) -> Optional[Tuple[str, str]]:
    """Fetch the raw details and reviews JSON for a product.

    The product page is requested in between so the reviews call carries it
    as Referer along with any cookies it set.

    Returns:
        (product_json, rating_json) or None if either API call failed
    """
    product_id = validate_product_id(product_id)
    sess = session or create_session()

    product_url = PRODUCT_DETAILS_URL_TEMPLATE.format(product_id=product_id)
    product_page_url = PRODUCT_PAGE_URL_TEMPLATE.format(product_id=product_id)
    rating_url = PRODUCT_REVIEWS_URL_TEMPLATE.format(product_id=product_id)

    logger.info(f"Fetching product details: {product_url}")
    raw_product = fetch_json(sess, product_url, "product")
    if raw_product is None:
        return None

    logger.debug(f"Fetching product page for referer: {product_page_url}")
    _get(sess, product_page_url)
    sess.headers["Referer"] = product_page_url

    logger.info(f"Fetching product reviews: {rating_url}")
    raw_rating = fetch_json(sess, rating_url, "rating")
    if raw_rating is None:
        return None

    return raw_product, raw_rating


def scrape_product(
    product_id: str,
    session: Optional[requests.Session] = None,
) -> Optional[List[ProductMapped]]:
    """Fetch a product and map it into one record per variant.

    Args:
        product_id: Storefront product id (e.g. 'NF0A3C8D')
        session: Optional requests.Session for connection reuse

    Returns:
        Mapped records, or None if either API call returned an error status

    Raises:
        ProductIdValidationError: If the product id is unusable
        FetchError: If a request failed below the HTTP level
        ParseError: If a payload is not valid JSON
    """
    log_scrape_event("product_fetch", {"product_id": product_id})

    payloads = fetch_product_payloads(product_id, session=session)
    if payloads is None:
        logger.warning(f"No output for product {product_id}: fetch failed")
        return None

    raw_product, raw_rating = payloads
    records = map_all(raw_product, raw_rating)

    logger.info(f"Mapped {product_id} into {len(records)} record(s)")
    log_scrape_event("product_mapped", {
        "product_id": product_id,
        "records": len(records),
        "skus": [record.sku for record in records],
    })
    return records
