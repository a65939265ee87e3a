"""
API Routes Module
"""
from .health import router as health_router
from .sellers import router as sellers_router

__all__ = [
    "health_router",
    "sellers_router",
]
