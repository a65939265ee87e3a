"""
Seller Dashboard Service
Configuration Module
"""
from .settings import Settings, ReportingSettings, get_settings

__all__ = ["Settings", "ReportingSettings", "get_settings"]
