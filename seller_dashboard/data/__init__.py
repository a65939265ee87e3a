"""
Data Generation Module
"""
from .generators import (
    DailyMetricsGenerator,
    DataGenerator,
    ListingGenerator,
    OrderGenerator,
    SellerGenerator,
)

__all__ = [
    "DailyMetricsGenerator",
    "DataGenerator",
    "ListingGenerator",
    "OrderGenerator",
    "SellerGenerator",
]
