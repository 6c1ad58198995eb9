"""Mapping of raw product/rating JSON into flattened catalog records.

The storefront returns two loosely structured documents: the product details
payload and the reviews payload. Every field is optional, so each extraction
below checks the shape it expects and falls back to an empty value instead of
raising. Only syntactically invalid JSON is an error.
"""

import json
import math
from datetime import datetime
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

from requests.structures import CaseInsensitiveDict

from tnf_scrape.config import PRODUCT_PAGE_URL_TEMPLATE, ROOT_DOMAIN
from tnf_scrape.logging_config import get_logger
from tnf_scrape.models import ProductMapped, StarRating

__all__ = [
    "ParseError",
    "map_single",
    "map_all",
    "build_star_rating_distribution",
    "build_categories",
    "build_global_attributes",
    "build_attribute_value_map",
    "build_variant_sku",
    "build_variant_mpn",
    "extract_features",
    "extract_description",
    "extract_image_urls",
    "determine_availability",
]

logger = get_logger("mapper")

Document = Union[str, bytes, bytearray, Dict[str, Any], List[Any], None]

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
TIME_FORMAT = "%H:%M:%S.%f"

IN_STOCK = "InStock"
OUT_OF_STOCK = "OutOfStock"

# Well-known variant attribute codes and the keys they are exposed under
VARIANT_KEY_NAMES = {
    "color": "Color",
    "size": "Size",
    "fitType": "FitType",
}


class ParseError(ValueError):
    """Raised when a product or rating payload is not valid JSON."""
    pass


class VariantEntry(NamedTuple):
    sku: str
    raw: CaseInsensitiveDict
    display: CaseInsensitiveDict
    inventory_state: str


# =============================================================================
# Tolerant accessors
# =============================================================================

def _load_document(raw: Document, label: str) -> Any:
    """Parse JSON text; already decoded documents pass through unchanged."""
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            return json.loads(raw)
        except ValueError as e:
            raise ParseError(f"Invalid {label} JSON: {e}") from e
    return raw


def _get_str(element: Any, key: str) -> str:
    if isinstance(element, dict):
        value = element.get(key)
        if isinstance(value, str):
            return value
    return ""


def _get_obj(element: Any, key: str) -> Optional[Dict[str, Any]]:
    if isinstance(element, dict):
        value = element.get(key)
        if isinstance(value, dict):
            return value
    return None


def _get_list(element: Any, key: str) -> Optional[List[Any]]:
    if isinstance(element, dict):
        value = element.get(key)
        if isinstance(value, list):
            return value
    return None


def _is_number(value: Any) -> bool:
    # json.loads turns 1e400 into inf and accepts NaN
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_blank(value: str) -> bool:
    return not value or not value.strip()


def _equals_ignore_case(left: str, right: str) -> bool:
    return left.casefold() == right.casefold()


# =============================================================================
# Scalar fields
# =============================================================================

def _get_price(root: Any) -> float:
    price = (_get_obj(root, "offers") or {}).get("price")
    return float(price) if _is_number(price) else 0.0


def _get_brand(root: Any) -> str:
    seller = _get_obj(_get_obj(root, "offers"), "seller")
    return _get_str(seller, "name")


def _get_mpn(root: Any) -> str:
    return _get_str(_get_obj(root, "productJsonLd"), "mpn")


def _get_canonical_url(root: Any) -> str:
    return PRODUCT_PAGE_URL_TEMPLATE.format(product_id=_get_str(root, "id"))


def _get_rollup(rating_root: Any) -> Optional[Dict[str, Any]]:
    results = _get_list(rating_root, "results")
    if not results:
        return None
    return _get_obj(results[0], "rollup")


def _get_average_rating(rating_root: Any) -> float:
    value = (_get_rollup(rating_root) or {}).get("averageRating")
    return float(value) if _is_number(value) else 0.0


def _get_review_count(rating_root: Any) -> int:
    value = (_get_rollup(rating_root) or {}).get("reviewCount")
    return int(value) if _is_number(value) else 0


def extract_image_urls(root: Any) -> List[str]:
    """Gallery image sources in order, blank entries skipped."""
    urls: List[str] = []
    for image in _get_list(root, "gallery") or []:
        src = _get_str(image, "src")
        if not _is_blank(src):
            urls.append(src)
    return urls


# =============================================================================
# Ratings
# =============================================================================

def build_star_rating_distribution(rating_root: Any) -> Dict[str, StarRating]:
    """Build the "N Star" -> StarRating map from the rollup histogram.

    Position i of ``ratingHistogram`` holds the count of (i+1)-star reviews.
    Percentages are rounded to one decimal and are 0 when there are no reviews.
    """
    histogram = _get_list(_get_rollup(rating_root), "ratingHistogram")
    if histogram is None:
        return {}

    numbers = [int(n) if _is_number(n) else 0 for n in histogram]
    total = sum(numbers)

    distribution: Dict[str, StarRating] = {}
    for i, number in enumerate(numbers):
        percentage = round(number / total * 100, 1) if total > 0 else 0.0
        distribution[f"{i + 1} Star"] = StarRating(number=number, percentage=percentage)
    return distribution


def _clone_star_rating(distribution: Dict[str, StarRating]) -> Dict[str, StarRating]:
    return {
        key: StarRating(number=rating.number, percentage=rating.percentage)
        for key, rating in distribution.items()
    }


# =============================================================================
# Attributes, categories and detail sections
# =============================================================================

def build_global_attributes(root: Any) -> Dict[str, str]:
    """Summarize every attribute definition as 'label -> "Opt1, Opt2"'.

    The badge label is written last under the literal key "badge", so it
    replaces a real attribute of that name.
    """
    attributes: Dict[str, str] = {}
    for attr in _get_list(root, "attributes") or []:
        key = _get_str(attr, "label")
        if _is_blank(key):
            continue
        options = _get_list(attr, "options")
        if options is None:
            continue
        values = [
            _get_str(option, "label").strip()
            for option in options
            if not _is_blank(_get_str(option, "label"))
        ]
        if values:
            attributes[key.strip()] = ", ".join(values)

    badge = _get_str(_get_obj(root, "badge"), "label")
    if not _is_blank(badge):
        attributes["badge"] = badge

    return attributes


def build_attribute_value_map(root: Any) -> CaseInsensitiveDict:
    """Map attribute label -> {option value code -> option display label}."""
    result = CaseInsensitiveDict()
    for attr in _get_list(root, "attributes") or []:
        attr_name = _get_str(attr, "label")
        if _is_blank(attr_name):
            continue

        value_map = CaseInsensitiveDict()
        for option in _get_list(attr, "options") or []:
            label = _get_str(option, "label")
            value = _get_str(option, "value")
            if not _is_blank(label) and not _is_blank(value):
                value_map[value.strip()] = label.strip()

        if value_map:
            result[attr_name.strip()] = value_map
    return result


def build_categories(root: Any) -> Tuple[str, str, str, str, str]:
    """Return (category path, level 1, level 2, level 3, level 4).

    The path always starts with "Home"; an existing leading "home" crumb is
    normalized rather than duplicated.
    """
    crumbs: List[str] = []
    for crumb in _get_list(root, "breadcrumbs") or []:
        label = _get_str(crumb, "label")
        if not _is_blank(label):
            crumbs.append(label.strip())

    if not crumbs:
        crumbs.append("Home")
    elif _equals_ignore_case(crumbs[0], "Home"):
        crumbs[0] = "Home"
    else:
        crumbs.insert(0, "Home")

    levels = (crumbs + ["", "", ""])[:4]
    return (">".join(crumbs), levels[0], levels[1], levels[2], levels[3])


def extract_features(root: Any) -> List[str]:
    """Labels of the first 'productFeatures' detail section."""
    features: List[str] = []
    for section in _get_list(root, "details") or []:
        if not _equals_ignore_case(_get_str(section, "id"), "productFeatures"):
            continue
        data = _get_list(section, "data")
        if data is None:
            continue
        for item in data:
            label = _get_str(item, "label")
            if not _is_blank(label):
                features.append(label.strip())
        break
    return features


def extract_description(root: Any) -> str:
    """Newline-joined text of the first detail section labelled 'Description'."""
    for section in _get_list(root, "details") or []:
        if not _equals_ignore_case(_get_str(section, "label"), "Description"):
            continue
        data = _get_list(section, "data")
        if data is None:
            continue
        lines = [_get_str(item, "text").strip() for item in data]
        return "\n".join(line for line in lines if line)
    return ""


# =============================================================================
# Variants
# =============================================================================

def build_variant_sku(base_id: str, raw_attributes: CaseInsensitiveDict) -> str:
    """Synthesize 'id$color=RED&size=S' from the variant's raw codes.

    Parts follow the order the attributes were declared in the payload;
    empty values are left out.
    """
    if not base_id:
        return ""
    parts = [f"{key.lower()}={value}" for key, value in raw_attributes.items() if value]
    if not parts:
        return base_id
    return f"{base_id}${'&'.join(parts)}"


def build_variant_mpn(base_mpn: str, raw_attributes: CaseInsensitiveDict) -> str:
    """Append the variant colour code to the mpn unless it already ends with it."""
    if not base_mpn:
        return base_mpn
    color = raw_attributes.get("Color")
    if color:
        if base_mpn.casefold().endswith(color.casefold()):
            return base_mpn
        return base_mpn + color
    return base_mpn


def _expand_variants(
    root: Any, base_id: str, value_map: CaseInsensitiveDict
) -> List[VariantEntry]:
    entries: List[VariantEntry] = []
    for index, variant in enumerate(_get_list(root, "variants") or []):
        attrs = _get_obj(variant, "attributes")
        if attrs is None:
            logger.debug(f"Skipping variant {index}: no attribute map")
            continue

        raw = CaseInsensitiveDict()
        display = CaseInsensitiveDict()
        for code, value in attrs.items():
            raw_value = value.strip() if isinstance(value, str) else ""
            display_value = (value_map.get(code) or {}).get(raw_value, raw_value)

            key_name = VARIANT_KEY_NAMES.get(code, code)
            raw[key_name] = raw_value
            display[key_name] = display_value

        if not base_id:
            continue

        entries.append(
            VariantEntry(
                sku=build_variant_sku(base_id, raw),
                raw=raw,
                display=display,
                inventory_state=_get_str(variant, "productInventoryState"),
            )
        )
    return entries


def determine_availability(root: Any) -> str:
    """Availability of a product that produced no variant records.

    A variants array decides on its own (any InStock entry wins). Without
    one, the product is only in stock when ``notifyMe`` is literally false.
    """
    variants = _get_list(root, "variants")
    if variants is not None:
        for variant in variants:
            if _equals_ignore_case(_get_str(variant, "productInventoryState"), IN_STOCK):
                return IN_STOCK
        return OUT_OF_STOCK

    if isinstance(root, dict) and root.get("notifyMe") is False:
        return IN_STOCK
    return OUT_OF_STOCK


# =============================================================================
# Entry points
# =============================================================================

def map_single(raw_product: Document, raw_rating: Document) -> ProductMapped:
    """Map a product to its first record (a default record if there is none)."""
    mapped = map_all(raw_product, raw_rating)
    return mapped[0] if mapped else ProductMapped()


def map_all(raw_product: Document, raw_rating: Document) -> List[ProductMapped]:
    """Map a product and its ratings into one record per variant.

    Args:
        raw_product: Product details payload (JSON text or decoded document)
        raw_rating: Reviews payload (JSON text or decoded document)

    Returns:
        One ProductMapped per variant, or a single fallback record when the
        product has no usable variants

    Raises:
        ParseError: If either payload is not valid JSON
    """
    root = _load_document(raw_product, "product")
    rating_root = _load_document(raw_rating, "rating")

    base_id = _get_str(root, "id")
    base_mpn = _get_mpn(root)
    rating_dist = build_star_rating_distribution(rating_root)
    avg_rating = _get_average_rating(rating_root)
    review_count = _get_review_count(rating_root)
    image_urls = extract_image_urls(root)
    now = datetime.now()

    shared = dict(
        root_domain=ROOT_DOMAIN,
        name=_get_str(root, "name"),
        brand=_get_brand(root),
        currency=_get_str(root, "currency"),
        price=_get_price(root),
        date=now.strftime(DATE_FORMAT),
        time=now.strftime(TIME_FORMAT),
        url=_get_canonical_url(root),
        average_customer_review=avg_rating,
        number_of_customer_reviews=review_count,
        description=extract_description(root),
        features=json.dumps(extract_features(root), ensure_ascii=False, separators=(",", ":")),
    )
    category, lvl1, lvl2, lvl3, lvl4 = build_categories(root)
    shared.update(
        category=category,
        category_lvl1=lvl1,
        category_lvl2=lvl2,
        category_lvl3=lvl3,
        category_lvl4=lvl4,
    )
    global_attributes = build_global_attributes(root)

    entries = _expand_variants(root, base_id, build_attribute_value_map(root))
    all_skus = [entry.sku for entry in entries]

    records: List[ProductMapped] = []
    for entry in entries:
        records.append(
            ProductMapped(
                sku=entry.sku,
                image_urls=list(image_urls),
                star_rating_distribution=_clone_star_rating(rating_dist),
                mpn=build_variant_mpn(base_mpn, entry.raw),
                availability=IN_STOCK if _equals_ignore_case(entry.inventory_state, IN_STOCK) else OUT_OF_STOCK,
                attributes=dict(global_attributes),
                variants=list(all_skus),
                variant_attributes=entry.display.copy(),
                variants_attributes=[{e.sku: e.display.copy()} for e in entries],
                **shared,
            )
        )

    if not records:
        logger.debug(f"No variants for product {base_id!r}, using fallback record")
        records.append(
            ProductMapped(
                sku=base_id,
                image_urls=image_urls,
                star_rating_distribution=rating_dist,
                mpn=base_mpn,
                availability=determine_availability(root),
                attributes=global_attributes,
                **shared,
            )
        )

    logger.debug(f"Mapped product {base_id!r} into {len(records)} record(s)")
    return records
