"""
Catalog

Lists the options the calculator form can offer at each step, derived from
the Reference Data and the partial Selection.
"""

from typing import Dict, List, Optional

from .contracts import ReferenceData, ChargeItem
from .constants import Level, Modality, MODALITY_ORDER, EXCLUDED_MODALITIES, CAMPUS_LISTING_KEYS
from .eligibility import resolve_campus_requirement


def available_levels(reference: ReferenceData) -> List[Level]:
    levels = {rule.level for rule in reference.rules}
    return sorted(levels, key=lambda level: level.value)


def available_modalities(reference: ReferenceData, level: Optional[Level]) -> List[Modality]:
    """
    Modalities with at least one rule for the level, in display order.
    """
    if not level:
        return []
    found = {rule.modality for rule in reference.rules if rule.level == level}
    excluded = EXCLUDED_MODALITIES.get(level, ())
    return [m for m in MODALITY_ORDER if m in found and m not in excluded]


def available_plans(
    reference: ReferenceData,
    level: Optional[Level],
    modality: Optional[Modality]
) -> List[int]:
    if not level or not modality:
        return []
    plans = {
        rule.plan
        for rule in reference.rules
        if rule.level == level and rule.modality == modality
    }
    return sorted(plans)


def available_campuses(
    reference: ReferenceData,
    level: Optional[Level],
    modality: Optional[Modality]
) -> List[str]:
    """
    Campuses offering the level in person; empty when no campus is needed.
    """
    if not resolve_campus_requirement(level, modality):
        return []
    listing_key = CAMPUS_LISTING_KEYS.get(level)
    campuses = reference.campus_listings.get(listing_key, []) if listing_key else []
    return sorted(campuses, key=lambda name: name.casefold())


def available_extras(
    reference: ReferenceData,
    campus_key: str
) -> Optional[Dict[str, List[ChargeItem]]]:
    """Charge catalog of the campus, or None when it offers none."""
    if not campus_key:
        return None
    campus = reference.campuses.get(campus_key)
    if campus is None or not campus.extra_charges:
        return None
    return campus.extra_charges
