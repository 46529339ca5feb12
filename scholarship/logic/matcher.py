"""
Rule Matcher

Filters the cost rules progressively (program type, level, modality, plan,
tier) and then picks the first rule whose average range contains the
student's average. Rule order is preserved at every stage: the first match
in supply order wins.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel

from .contracts import CostRule
from .constants import Level, Modality, ProgramType, Tier, AVERAGE_EPSILON

logger = logging.getLogger(__name__)


class MatchCriteria(BaseModel):
    """What a rule has to agree with to be a candidate."""
    program_type: ProgramType
    level: Level
    modality: Modality
    plan: int
    tier: Optional[Tier] = None  # None disables the tier stage
    average: float


def filter_by_program_type(rules: Sequence[CostRule], program_type: ProgramType) -> List[CostRule]:
    return [r for r in rules if r.program_type == program_type]


def filter_by_level(rules: Sequence[CostRule], level: Level) -> List[CostRule]:
    return [r for r in rules if r.level == level]


def filter_by_modality(rules: Sequence[CostRule], modality: Modality) -> List[CostRule]:
    return [r for r in rules if r.modality == modality]


def filter_by_plan(rules: Sequence[CostRule], plan: int) -> List[CostRule]:
    return [r for r in rules if r.plan == plan]


def filter_by_tier(rules: Sequence[CostRule], tier: Optional[Tier]) -> List[CostRule]:
    """
    Keep rules for the given tier. Without a tier nothing is filtered, so
    tier-independent rules stay candidates.
    """
    if tier is None:
        return list(rules)
    return [r for r in rules if r.tier == tier]


def average_in_range(rule: CostRule, average: float) -> bool:
    """Inclusive on both bounds, with a small tolerance for float rounding."""
    low = rule.average_range.min - AVERAGE_EPSILON
    high = rule.average_range.max + AVERAGE_EPSILON
    return low <= average <= high


def filter_candidates(rules: Sequence[CostRule], criteria: MatchCriteria) -> List[CostRule]:
    """
    Apply every filtering stage in order.

    Stops early once a stage leaves nothing, logging which stage it was.
    """
    stages = [
        ("program_type", lambda rs: filter_by_program_type(rs, criteria.program_type)),
        ("level", lambda rs: filter_by_level(rs, criteria.level)),
        ("modality", lambda rs: filter_by_modality(rs, criteria.modality)),
        ("plan", lambda rs: filter_by_plan(rs, criteria.plan)),
        ("tier", lambda rs: filter_by_tier(rs, criteria.tier)),
    ]

    candidates = list(rules)
    for name, stage in stages:
        candidates = stage(candidates)
        if not candidates:
            logger.debug("No cost rule left after %s stage", name)
            break
    return candidates


def match_rule(rules: Sequence[CostRule], criteria: MatchCriteria) -> Optional[CostRule]:
    """
    Find the rule that applies to the student.

    Args:
        rules: Cost rules in supply order
        criteria: Selection values plus the rounded average

    Returns:
        The first candidate whose range contains the average, or None
    """
    for rule in filter_candidates(rules, criteria):
        if average_in_range(rule, criteria.average):
            return rule
    return None


def find_reference_rule(
    rules: Sequence[CostRule],
    level: Level,
    modality: Modality,
    plan: int,
    tier: Optional[Tier] = None
) -> Optional[CostRule]:
    """
    First rule for a level/modality/plan (and tier, when given), ignoring
    program type and average. Used to back-derive a list price.
    """
    for rule in rules:
        if rule.level != level or rule.modality != modality or rule.plan != plan:
            continue
        if tier is not None and rule.tier != tier:
            continue
        return rule
    return None
