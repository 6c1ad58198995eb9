"""JSON export of mapped products."""

import json
from pathlib import Path
from typing import Iterable, Union

from tnf_scrape.config import OUTPUT_DIR
from tnf_scrape.logging_config import log_scrape_event
from tnf_scrape.models import ProductMapped

__all__ = [
    "serialize_products",
    "output_path_for",
    "save_products_to_json",
]


def serialize_products(products: Iterable[ProductMapped]) -> str:
    """Serialize records to an indented JSON array.

    Non-ASCII characters and '/' are written as-is rather than escaped.
    """
    return json.dumps([p.to_dict() for p in products], indent=2, ensure_ascii=False)


def output_path_for(product_id: str, output_dir: Union[str, Path] = OUTPUT_DIR) -> Path:
    """Path of the JSON file for a product inside the output directory."""
    return Path(output_dir) / f"{product_id}.json"


def save_products_to_json(
    products: Iterable[ProductMapped],
    product_id: str,
    output_dir: Union[str, Path] = OUTPUT_DIR,
) -> Path:
    """Write records to {output_dir}/{product_id}.json, creating the directory.

    Returns:
        Path of the written file
    """
    path = output_path_for(product_id, output_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    products = list(products)
    path.write_text(serialize_products(products), encoding="utf-8")

    log_scrape_event("output_saved", {
        "product_id": product_id,
        "path": str(path),
        "records": len(products),
    })
    return path
