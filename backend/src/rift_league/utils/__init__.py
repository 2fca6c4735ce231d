"""Utility modules for rift_league."""

from rift_league.utils.role_normalizer import (
    CANONICAL_ROLES,
    ROLE_ALIASES,
    ROLE_ORDER,
    normalize_role,
    is_valid_role,
    sort_by_role,
)
from rift_league.utils.region_normalizer import (
    DEFAULT_REGIONS,
    REGION_ALIASES,
    normalize_region,
    region_variants,
    player_in_region,
    player_in_any_region,
)

__all__ = [
    "CANONICAL_ROLES",
    "ROLE_ALIASES",
    "ROLE_ORDER",
    "normalize_role",
    "is_valid_role",
    "sort_by_role",
    "DEFAULT_REGIONS",
    "REGION_ALIASES",
    "normalize_region",
    "region_variants",
    "player_in_region",
    "player_in_any_region",
]
