"""
Unit Tests - Synthetic Data
"""
from datetime import date
import uuid

import numpy as np
import polars as pl
import pytest

from seller_dashboard.data.generators import DataGenerator, DailyMetricsGenerator
from seller_dashboard.database.models import Listing, SellerDailyMetric
from seller_dashboard.ingestion.seed_db import TABLES, to_records


@pytest.fixture(scope="module")
def dataset():
    return DataGenerator(seed=7).generate_all(
        n_sellers=3, listings_per_seller=6, n_buyers=10, n_orders=40, days=14,
    )


class TestDataGenerator:
    """Tests for the synthetic marketplace dataset"""

    def test_all_tables_present(self, dataset):
        assert set(dataset) == set(TABLES)

    def test_one_metric_row_per_seller_day(self, dataset):
        metrics = dataset["seller_daily_metrics"]

        assert metrics.height == 3 * 14
        assert metrics.select(["seller_id", "date"]).is_duplicated().sum() == 0

    def test_counters_non_negative(self, dataset):
        metrics = dataset["seller_daily_metrics"]

        for column in ("views", "inquiries", "orders", "revenue", "new_listings", "unique_customers"):
            assert metrics[column].min() >= 0

    def test_order_totals(self, dataset):
        orders = dataset["orders"]

        assert (orders["subtotal"] + orders["tax_amount"] + orders["shipping_amount"] == orders["total"]).all()
        assert orders["total"].dtype == pl.Int64

    def test_items_reference_published_listings(self, dataset):
        published = set(
            dataset["listings"].filter(pl.col("status") == "PUBLISHED")["id"].to_list()
        )

        assert set(dataset["order_items"]["listing_id"].to_list()) <= published

    def test_reproducible(self, dataset):
        again = DataGenerator(seed=7).generate_all(
            n_sellers=3, listings_per_seller=6, n_buyers=10, n_orders=40, days=14,
        )

        assert again["seller_daily_metrics"]["views"].to_list() == dataset["seller_daily_metrics"]["views"].to_list()


class TestDailyMetricsGenerator:
    """Tests for the weekly pattern"""

    def test_window_ends_today(self):
        sellers = pl.DataFrame({"id": [str(uuid.uuid4())]})
        metrics = DailyMetricsGenerator(np.random.default_rng(1)).generate(
            sellers, days=7, today=date(2024, 12, 16)
        )

        assert metrics["date"].to_list() == [date(2024, 12, d) for d in range(10, 17)]


class TestSeedRecords:
    """Tests for DataFrame to insert-parameter conversion"""

    def test_uuid_columns_parsed(self, dataset):
        records = to_records(Listing, dataset["listings"])

        assert isinstance(records[0]["id"], uuid.UUID)
        assert isinstance(records[0]["seller_id"], uuid.UUID)
        assert isinstance(records[0]["title_ar"], str)

    def test_dates_kept(self, dataset):
        records = to_records(SellerDailyMetric, dataset["seller_daily_metrics"])

        assert isinstance(records[0]["date"], date)
