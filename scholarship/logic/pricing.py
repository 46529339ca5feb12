"""
Price Derivation

Computes the undiscounted list price and the discounted final price.

The list price comes from the campus offering when the metadata carries an
authoritative net price. Otherwise it is back-derived from a cost rule:
net_amount / (1 - discount_percent / 100).
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .contracts import ReferenceData, CostRule
from .constants import Level, Modality, Tier
from .matcher import find_reference_rule

logger = logging.getLogger(__name__)


def _round_half_up(value: float, places: str) -> float:
    return float(Decimal(repr(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    """Round a monetary amount to cents, halves away from zero."""
    return _round_half_up(value, "0.01")


def round1(value: float) -> float:
    return _round_half_up(value, "0.1")


def authoritative_net_price(
    reference: ReferenceData,
    campus_key: str,
    level: Level,
    plan: int
) -> Optional[float]:
    """Net price from the campus offering for (level, plan), if any."""
    if not campus_key:
        return None
    campus = reference.campuses.get(campus_key)
    if campus is None:
        return None
    offering = campus.offerings.get(level, {}).get(str(plan))
    if offering is None:
        return None
    return offering.net_price


def back_derive_list_price(rule: CostRule) -> Optional[float]:
    """
    Undo the rule's discount to recover the list price.
    Undefined when the rule discounts 100% or more.
    """
    if rule.discount_percent >= 100:
        return None
    return rule.net_amount / (1 - rule.discount_percent / 100)


def derive_list_price(
    reference: ReferenceData,
    level: Level,
    modality: Modality,
    plan: int,
    campus_key: str,
    tier: Optional[Tier] = None,
    rule: Optional[CostRule] = None
) -> Optional[float]:
    """
    Resolve the list price, rounded to cents.

    Args:
        reference: Pricing tables
        level, modality, plan: Selection values
        campus_key: Effective campus ("ONLINE" for online modality)
        tier: Restricts the fallback rule search when given
        rule: Rule to back-derive from instead of searching for one

    Returns:
        List price, or None when neither path can produce one
    """
    net_price = authoritative_net_price(reference, campus_key, level, plan)
    if net_price is not None:
        return max(0.0, round2(net_price))

    if rule is None:
        rule = find_reference_rule(reference.rules, level, modality, plan, tier)
    if rule is None:
        logger.debug("No reference rule for %s/%s/%s", level, modality, plan)
        return None

    base = back_derive_list_price(rule)
    if base is None:
        return None
    return max(0.0, round2(base))


def derive_final_price(
    list_price: float,
    discount_percent: float,
    extras_total: float = 0.0
) -> float:
    """
    Apply the discount to list price plus extras.
    The base is rounded to cents before discounting, as it is displayed.
    """
    base_with_extras = round2(list_price + extras_total)
    return round2(base_with_extras * (1 - discount_percent / 100))
