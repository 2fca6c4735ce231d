"""Region alias table and player-to-region matching.

A league is configured with region groups (AMERICAS, EMEA, CHINA, KOREA)
while player records carry either a group name, a legacy league code
(LCS, LEC, ...) or a historical split name (NORTH, SOUTH). This module
holds the single alias table used for both league player pools and the
region player listing.
"""

from typing import Iterable, Optional

_AMERICAS = frozenset({"AMERICAS", "LCS", "LLA", "CBLOL", "NA", "NORTH", "NORTH_AMERICA"})
_EMEA = frozenset({"EMEA", "LEC", "LFL", "LVP", "EU", "EUROPE", "SOUTH"})
_CHINA = frozenset({"CHINA", "LPL"})
_KOREA = frozenset({"KOREA", "LCK"})

# Region groups and legacy codes both resolve to the full group
REGION_ALIASES: dict[str, frozenset[str]] = {
    "AMERICAS": _AMERICAS,
    "EMEA": _EMEA,
    "CHINA": _CHINA,
    "KOREA": _KOREA,
    # Legacy league codes
    "LCS": _AMERICAS,
    "LEC": _EMEA,
    "LPL": _CHINA,
    "LCK": _KOREA,
    # Legacy LTA split names
    "NORTH": _AMERICAS,
    "SOUTH": _EMEA,
}

DEFAULT_REGIONS = ["AMERICAS", "EMEA"]


def normalize_region(region: Optional[str]) -> str:
    """Upper-case and strip a region string; None becomes an empty string."""
    if not region:
        return ""
    return region.strip().upper()


def region_variants(region: str) -> frozenset[str]:
    """All region codes equivalent to ``region`` (including itself)."""
    normalized = normalize_region(region)
    if not normalized:
        return frozenset()
    return REGION_ALIASES.get(normalized, frozenset()) | {normalized}


def player_in_region(player_region: Optional[str], home_league: Optional[str], region: str) -> bool:
    """Whether a player's region or home league matches ``region`` or any alias."""
    variants = region_variants(region)
    return (
        normalize_region(player_region) in variants
        or normalize_region(home_league) in variants
    )


def player_in_any_region(
    player_region: Optional[str], home_league: Optional[str], regions: Iterable[str]
) -> bool:
    """Whether a player belongs to at least one of ``regions``."""
    return any(player_in_region(player_region, home_league, r) for r in regions)
