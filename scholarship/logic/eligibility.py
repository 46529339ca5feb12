"""
Eligibility Resolver

Derives, from the user's selections, whether a campus is required and which
campus key and tier apply. Every function here is total: a missing tier is
reported as None and the caller decides whether that is an error.
"""

from typing import Optional

from .contracts import ReferenceData
from .constants import Level, Modality, Tier, CAMPUS_REQUIRED_LEVELS, ONLINE_CAMPUS_KEY


def resolve_campus_requirement(
    level: Optional[Level],
    modality: Optional[Modality]
) -> bool:
    """
    A campus is required for campus-bound levels unless studied online.
    """
    if not level or not modality:
        return False
    return level in CAMPUS_REQUIRED_LEVELS and modality != Modality.ONLINE


def resolve_effective_campus(
    level: Optional[Level],
    modality: Optional[Modality],
    selected_campus: Optional[str]
) -> str:
    """
    Resolve the campus key used for metadata lookups.

    Returns:
        "ONLINE" for online modality, the selected campus when one is
        required, otherwise an empty string.
    """
    if not level or not modality:
        return ""
    if modality == Modality.ONLINE:
        return ONLINE_CAMPUS_KEY
    if resolve_campus_requirement(level, modality):
        return selected_campus or ""
    return ""


def resolve_tier(reference: ReferenceData, campus_key: str) -> Optional[Tier]:
    """Tier of the campus, or None when the campus or its tier is unknown."""
    if not campus_key:
        return None
    campus = reference.campuses.get(campus_key)
    if campus is None:
        return None
    return campus.tier
