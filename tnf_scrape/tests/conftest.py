"""Shared fixtures for the tnf_scrape test suite."""

import json
import logging

import pytest

from tnf_scrape.logging_config import ROOT_LOGGER_NAME
from tnf_scrape.shutdown import get_shutdown_handler


RATING_FULL = json.dumps({
    "results": [
        {"rollup": {"averageRating": 4.5, "reviewCount": 12, "ratingHistogram": [1, 2, 3, 4, 2]}}
    ]
})

RATING_NO_HISTOGRAM = json.dumps({
    "results": [{"rollup": {"averageRating": 3.0, "reviewCount": 5}}]
})

RATING_EMPTY = "{}"

PRODUCT_FULL = json.dumps({
    "id": "id123",
    "name": "Jacket X",
    "offers": {"seller": {"name": "The North Face"}, "price": 199.99},
    "currency": "USD",
    "gallery": [
        {"src": "https://example.com/img/1.jpg"},
        {"src": "https://example.com/img/2.jpg"},
    ],
    "url": "/en-us/p/id123.html",
    "productJsonLd": {"mpn": "MPN-123"},
    "attributes": [
        {
            "label": "Color",
            "options": [{"label": "Red", "value": "RED"}, {"label": "Blue", "value": "BLU"}],
        },
        {
            "label": "Size",
            "options": [{"label": "Small", "value": "S"}, {"label": "Large", "value": "L"}],
        },
    ],
    "variants": [
        {"productInventoryState": "InStock", "attributes": {"Color": "RED", "Size": "S"}},
        {"productInventoryState": "OutOfStock", "attributes": {"Color": "BLU", "Size": "L"}},
    ],
    "breadcrumbs": [{"label": "Men"}, {"label": "Jackets"}, {"label": "Insulated"}],
    "details": [
        {"id": "productFeatures", "data": [{"label": "Waterproof"}, {"label": "Breathable"}]},
        {"label": "Description", "data": [{"text": "Line 1"}, {"text": "Line 2"}]},
    ],
    "badge": {"label": "New"},
})

PRODUCT_NO_VARIANTS_NOTIFY_FALSE = json.dumps({
    "id": "solo1",
    "name": "Beanie",
    "offers": {"seller": {"name": "The North Face"}, "price": 29.50},
    "currency": "USD",
    "url": "/p/solo1",
    "productJsonLd": {"mpn": "MPN-BEANIE"},
    "notifyMe": False,
})

PRODUCT_NO_VARIANTS_NOTIFY_TRUE = json.dumps({
    "id": "solo2",
    "name": "Gloves",
    "offers": {"seller": {"name": "The North Face"}, "price": 49.0},
    "currency": "USD",
    "url": "/p/solo2",
    "productJsonLd": {"mpn": "MPN-GLOVES"},
    "notifyMe": True,
})

PRODUCT_MINIMAL = json.dumps({
    "id": "basic1",
    "offers": {"seller": {"name": "The North Face"}},
    "productJsonLd": {"mpn": ""},
})


@pytest.fixture
def product_full():
    return PRODUCT_FULL


@pytest.fixture
def product_doc():
    """Decoded copy of the full product, safe to modify per test."""
    return json.loads(PRODUCT_FULL)


@pytest.fixture
def rating_full():
    return RATING_FULL


@pytest.fixture(autouse=True)
def reset_package_state():
    """Drop handlers added by setup_logging and clear the shutdown flag."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handler = get_shutdown_handler()
    handler.uninstall()
    handler.reset()
