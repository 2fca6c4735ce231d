"""Centralized role normalization utility.

Player data arrives from several sources (CSV imports, the stats provider,
request bodies) that spell roles differently. Everything is normalized to
the uppercase position names used for roster slots: TOP, JUNGLE, MID, ADC,
SUPPORT.
"""

from typing import Optional

# Canonical positions - these double as the required roster slot names
CANONICAL_ROLES = frozenset({"TOP", "JUNGLE", "MID", "ADC", "SUPPORT"})

# Mapping from any known role spelling (lowercased) to the canonical position
ROLE_ALIASES: dict[str, str] = {
    # Top lane variations
    "top": "TOP",
    "top laner": "TOP",
    "toplane": "TOP",

    # Jungle variations
    "jungle": "JUNGLE",
    "jungler": "JUNGLE",
    "jng": "JUNGLE",
    "jg": "JUNGLE",

    # Mid lane variations
    "mid": "MID",
    "middle": "MID",
    "mid laner": "MID",
    "midlane": "MID",

    # Bot lane variations - all normalize to "ADC"
    "adc": "ADC",
    "bot": "ADC",
    "bottom": "ADC",
    "bot laner": "ADC",
    "ad carry": "ADC",
    "marksman": "ADC",

    # Support variations
    "support": "SUPPORT",
    "sup": "SUPPORT",
    "supp": "SUPPORT",
}


def normalize_role(role: Optional[str]) -> Optional[str]:
    """Normalize a role string to its canonical position.

    Args:
        role: Role string in any known format (e.g., "jng", "Bot", "SUPPORT")

    Returns:
        Canonical position (TOP/JUNGLE/MID/ADC/SUPPORT) or None if unknown

    Examples:
        >>> normalize_role("jng")
        'JUNGLE'
        >>> normalize_role("bot")
        'ADC'
        >>> normalize_role(None)
        None
    """
    if role is None:
        return None

    cleaned = role.strip()
    if cleaned.upper() in CANONICAL_ROLES:
        return cleaned.upper()

    return ROLE_ALIASES.get(cleaned.lower())


def is_valid_role(role: Optional[str]) -> bool:
    """Check if a role string can be normalized to a canonical position."""
    return normalize_role(role) is not None


# Role ordering for consistent display/sorting
ROLE_ORDER = ["TOP", "JUNGLE", "MID", "ADC", "SUPPORT"]


def sort_by_role(players: list[dict], role_key: str = "role") -> list[dict]:
    """Sort a list of player dicts by role in standard order.

    Args:
        players: List of player dicts with role field
        role_key: Key name for the role field (default: "role")

    Returns:
        Sorted list of players (TOP, JUNGLE, MID, ADC, SUPPORT, then unknown)
    """
    def role_sort_key(player: dict) -> int:
        role = normalize_role(player.get(role_key))
        return ROLE_ORDER.index(role) if role else 99

    return sorted(players, key=role_sort_key)
