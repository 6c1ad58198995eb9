"""Command-line interface for the product scraper."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path to allow imports when run as script
sys.path.insert(0, str(Path(__file__).parent.parent))

__all__ = ["main", "parse_args", "get_product_id"]

from tnf_scrape.config import OUTPUT_DIR
from tnf_scrape.logging_config import get_logger, setup_logging
from tnf_scrape.output import save_products_to_json
from tnf_scrape.scraper import FetchError, scrape_product
from tnf_scrape.shutdown import get_shutdown_handler
from tnf_scrape.validation import ProductIdValidationError, sanitize_product_id

logger = get_logger("cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch a The North Face product and write its mapped variants as JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch one product into outputs/NF0A3C8D.json
  python -m tnf_scrape.cli NF0A3C8D

  # Prompt for the product id interactively
  python -m tnf_scrape.cli

  # Write somewhere else, with debug logging on the console
  python -m tnf_scrape.cli NF0A3C8D --output-dir data/products --verbose
        """,
    )

    parser.add_argument(
        "product_id",
        nargs="?",
        help="Storefront product id (prompted for when omitted)",
    )
    parser.add_argument(
        "--output-dir",
        default=OUTPUT_DIR,
        help=f"Directory for {{productId}}.json files (default: {OUTPUT_DIR})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging on the console",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Don't write JSONL logs to logs/",
    )

    return parser.parse_args(argv)


def get_product_id(arg: Optional[str]) -> Optional[str]:
    """Return the product id from the argument, or prompt for it.

    Returns None when nothing usable was entered.
    """
    if arg and arg.strip():
        # An argument of control characters only sanitizes to ""
        return sanitize_product_id(arg) or None

    print("Usage: python -m tnf_scrape.cli <productId>")
    try:
        entered = input("Enter productId now (press Enter to abort): ")
    except EOFError:
        entered = ""

    product_id = sanitize_product_id(entered)
    if not product_id:
        print("No productId provided. Exiting.")
        return None
    return product_id


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI. Returns the process exit code."""
    args = parse_args(argv)

    product_id = get_product_id(args.product_id)
    if product_id is None:
        return 0

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=not args.no_log_file,
    )

    try:
        with get_shutdown_handler().installed():
            products = scrape_product(product_id)
    except ProductIdValidationError as e:
        logger.error(str(e))
        return 1
    except FetchError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, no output written")
        return 130

    if products is None:
        return 0

    path = save_products_to_json(products, product_id, args.output_dir)
    print(f"Output saved to file: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
