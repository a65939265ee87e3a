"""
Marketplace Dataset Generator

Writes a synthetic seller dataset as Parquet files, one per table.

Usage:
    python scripts/generate_dataset.py --sellers 20 --days 90 --output data/generated
"""

import argparse
from pathlib import Path

from seller_dashboard.config.logging import configure_logging
from seller_dashboard.data.generators import DataGenerator

DEFAULT_OUTPUT = Path(__file__).parent.parent / "data" / "generated"


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a synthetic marketplace dataset")
    parser.add_argument("--sellers", type=int, default=20)
    parser.add_argument("--listings-per-seller", type=int, default=25)
    parser.add_argument("--buyers", type=int, default=500)
    parser.add_argument("--orders", type=int, default=2000)
    parser.add_argument("--days", type=int, default=90)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT)
    args = parser.parse_args()

    configure_logging(log_format="text")
    data = DataGenerator(seed=args.seed).generate_all(
        n_sellers=args.sellers,
        listings_per_seller=args.listings_per_seller,
        n_buyers=args.buyers,
        n_orders=args.orders,
        days=args.days,
    )
    DataGenerator.save(data, str(args.output))


if __name__ == "__main__":
    main()
