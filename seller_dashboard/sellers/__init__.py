"""
Seller Profile Module
"""
from .profile import PROFILE_FIELDS, profile_completion, trust_score

__all__ = [
    "PROFILE_FIELDS",
    "profile_completion",
    "trust_score",
]
