"""
Seller Dashboard

Seller analytics and reporting service for the auto-parts marketplace.
"""

__version__ = "1.0.0"
