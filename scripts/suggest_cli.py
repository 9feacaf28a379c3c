"""CLI script for getting product suggestions for a cart.

Useful for testing and evaluation. Reads the catalog and purchase history
CSV files, scores the given cart and prints the suggestions to the console.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cartrec.config import load_settings
from cartrec.recommender.engine import suggest_products
from cartrec.recommender.ranking import Suggestion
from cartrec.recommender.sources import CsvCatalogReader, CsvOrderHistoryReader
from cartrec.recommender.vectors import CartLine

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def parse_cart_line(value: str) -> CartLine:
    """Parse a PRODUCT_ID:QUANTITY argument.

    The quantity defaults to 1 when omitted.
    """
    product_id, _, quantity = value.rpartition(":")
    if not product_id:
        product_id, quantity = value, "1"
    try:
        parsed_quantity = int(quantity)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid quantity in {value!r}")
    if parsed_quantity < 0:
        raise argparse.ArgumentTypeError(f"Quantity must not be negative in {value!r}")
    return CartLine(product_id=product_id, quantity=parsed_quantity)


def get_suggestions(
    region_code: str,
    cart_lines: List[CartLine],
    catalog_path: str,
    purchases_path: str,
    top_k: int,
    limit: int,
    region_weight: float,
    history_row_limit: int,
) -> List[Suggestion]:
    """Get suggestions for a cart from the CSV snapshot.

    Args:
        region_code: Shipping region code
        cart_lines: Lines in the cart
        catalog_path: Catalog CSV file
        purchases_path: Purchase history CSV file
        top_k: Number of neighbors to draw from
        limit: Maximum number of suggestions
        region_weight: Share of similarity given to the region
        history_row_limit: Maximum number of history rows to read

    Returns:
        Suggestions, best first
    """
    try:
        product_ids = CsvCatalogReader(catalog_path).list_active_product_ids()
    except (OSError, ValueError) as e:
        print(f"Error: could not read catalog from {catalog_path}", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        sys.exit(1)

    try:
        rows = CsvOrderHistoryReader(
            purchases_path, row_limit=history_row_limit
        ).list_customer_purchase_rows()
    except (OSError, ValueError) as e:
        logger.warning(f"Purchase history unavailable ({e}), continuing without it")
        rows = []

    return suggest_products(
        product_ids,
        rows,
        region_code,
        cart_lines,
        region_weight=region_weight,
        top_k=top_k,
        result_limit=limit,
    )


def main() -> None:
    """Main CLI function."""
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Get product suggestions for a cart",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/suggest_cli.py JP-13 P1:2
  python scripts/suggest_cli.py JP-13 P1:2 P7 --limit 3
  python scripts/suggest_cli.py JP-01 P4:1 --catalog data/catalog.csv --purchases data/purchases.csv
        """
    )

    parser.add_argument(
        "region_code",
        type=str,
        help="Shipping region code, e.g. JP-13"
    )

    parser.add_argument(
        "cart_lines",
        type=parse_cart_line,
        nargs="*",
        metavar="PRODUCT_ID[:QTY]",
        help="Cart lines (quantity defaults to 1)"
    )

    parser.add_argument(
        "--catalog",
        type=str,
        default=settings.catalog_path,
        help=f"Catalog CSV file (default: {settings.catalog_path})"
    )

    parser.add_argument(
        "--purchases",
        type=str,
        default=settings.purchases_path,
        help=f"Purchase history CSV file (default: {settings.purchases_path})"
    )

    parser.add_argument(
        "--top-k",
        type=int,
        default=settings.top_neighbors,
        help=f"Number of similar customers to draw from (default: {settings.top_neighbors})"
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=settings.result_limit,
        help=f"Number of suggestions to return (default: {settings.result_limit})"
    )

    parser.add_argument(
        "--region-weight",
        type=float,
        default=settings.region_weight,
        help=f"Weight of region similarity in [0, 1] (default: {settings.region_weight})"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    suggestions = get_suggestions(
        region_code=args.region_code,
        cart_lines=args.cart_lines,
        catalog_path=args.catalog,
        purchases_path=args.purchases,
        top_k=args.top_k,
        limit=args.limit,
        region_weight=args.region_weight,
        history_row_limit=settings.history_row_limit,
    )

    # Print results
    cart = ", ".join(f"{line.product_id}x{line.quantity}" for line in args.cart_lines) or "(empty)"
    print(f"\nSuggestions for cart [{cart}] in {args.region_code}:")
    if not suggestions:
        print("  No suggestions")
    for rank, suggestion in enumerate(suggestions, start=1):
        print(f"  {rank}. {suggestion.product_id}  score={suggestion.score:.4f}")

    print()


if __name__ == "__main__":
    main()
