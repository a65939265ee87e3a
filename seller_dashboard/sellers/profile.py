"""
Seller Profile Scores

Presence ratios shown on the seller dashboard header: how complete the
seller's storefront profile is, and how many trust signals it carries.
Both are integer percentages in 0-100.
"""

from typing import Any, Tuple

# Storefront fields counted towards profile completion
PROFILE_FIELDS: Tuple[str, ...] = (
    "business_name",
    "business_name_en",
    "description",
    "description_en",
    "logo_url",
    "city",
    "district",
    "address",
    "phone",
    "whatsapp",
    "commercial_license",
    "tax_number",
)


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _percentage(present: int, total: int) -> int:
    if total == 0:
        return 0
    return round(present * 100 / total)


def profile_completion(seller: Any) -> int:
    """Percentage of storefront profile fields that are filled in."""
    filled = sum(1 for field in PROFILE_FIELDS if _is_filled(getattr(seller, field, None)))
    return _percentage(filled, len(PROFILE_FIELDS))


def trust_score(seller: Any) -> int:
    """
    Percentage of trust signals present:
    verified account, commercial license, tax number, contact phone and at
    least one review.
    """
    signals = (
        bool(getattr(seller, "verified", False)),
        _is_filled(getattr(seller, "commercial_license", None)),
        _is_filled(getattr(seller, "tax_number", None)),
        _is_filled(getattr(seller, "phone", None)),
        (getattr(seller, "review_count", 0) or 0) > 0,
    )
    return _percentage(sum(signals), len(signals))
