"""
Scholarship Engine

Main orchestrator that sequences eligibility, rule matching, pricing and
extras into a single calculation. This is the primary entry point for the
calculator.
"""

import logging
import math
from functools import lru_cache
from typing import Optional, Tuple, Union

from .contracts import (
    ReferenceData,
    Selection,
    CostRule,
    ScholarshipResult,
    CalculationFailure,
    CalculationOutcome,
)
from .constants import (
    Level,
    Modality,
    ProgramType,
    Tier,
    FailureReason,
    CalculationState,
    FAILURE_MESSAGES,
    MIN_AVERAGE,
    MAX_AVERAGE,
    RETURNING_DISCOUNT_CAP,
    LIST_PRICE_CACHE_SIZE,
)
from .eligibility import resolve_campus_requirement, resolve_effective_campus, resolve_tier
from .matcher import MatchCriteria, match_rule
from .pricing import derive_list_price, derive_final_price, round1
from .extras import compute_extras

logger = logging.getLogger(__name__)


class CalculationError(Exception):
    """Raised by a pipeline stage; never escapes ScholarshipEngine.calculate."""

    def __init__(self, reason: FailureReason, message: Optional[str] = None):
        self.reason = reason
        self.message = message or FAILURE_MESSAGES[reason]
        super().__init__(self.message)


def parse_average(raw: Optional[Union[str, float]]) -> float:
    """
    Parse the average as typed by the user.

    Accepts a comma as decimal separator. The value must be in (0, 10] and is
    rounded to one decimal place.

    Raises:
        CalculationError: AVERAGE_REQUIRED or INVALID_AVERAGE
    """
    # Whitespace-only text was typed, so it is invalid rather than missing
    if raw is None or raw == "":
        raise CalculationError(FailureReason.AVERAGE_REQUIRED)
    if isinstance(raw, bool):
        raise CalculationError(FailureReason.INVALID_AVERAGE)

    try:
        value = float(str(raw).strip().replace(",", "."))
    except ValueError:
        raise CalculationError(FailureReason.INVALID_AVERAGE)

    if not math.isfinite(value) or value <= MIN_AVERAGE or value > MAX_AVERAGE:
        raise CalculationError(FailureReason.INVALID_AVERAGE)
    return round1(value)


def applied_discount(rule: CostRule, program_type: ProgramType) -> float:
    """Discount of the matched rule, capped for returning students."""
    if program_type == ProgramType.RETURNING:
        return min(rule.discount_percent, RETURNING_DISCOUNT_CAP)
    return rule.discount_percent


class ScholarshipEngine:
    """
    Calculator over a fixed set of Reference Data.

    Pipeline flow:
    1. Validating - Selection completeness, campus, average, tier
    2. Resolving  - Match the cost rule for the student
    3. Matched    - Derive list price (offering or back-derived)
    4. Priced     - Add extras and apply the (capped) discount
    5. Done       - Return ScholarshipResult

    Any failure ends in the Failed state with a typed reason.
    """

    def __init__(self, reference: ReferenceData):
        """
        Args:
            reference: Immutable pricing tables shared by every calculation
        """
        self.reference = reference
        self.version = "1.0.0"

        # Previews only depend on the input tuple and the immutable tables
        self._cached_list_price = lru_cache(maxsize=LIST_PRICE_CACHE_SIZE)(self._derive_list_price)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def list_price(
        self,
        level: Optional[Level],
        modality: Optional[Modality],
        plan: Optional[int],
        campus: Optional[str] = ""
    ) -> Optional[float]:
        """
        List price shown while the user fills the form.

        Returns None until level, modality, plan (and campus when required)
        are selected, or when no price can be derived.
        """
        if not level or not modality or not plan:
            return None
        campus_required = resolve_campus_requirement(level, modality)
        if campus_required and not campus:
            return None

        campus_key = resolve_effective_campus(level, modality, campus)
        return self._cached_list_price(level, modality, plan, campus_key)

    def _derive_list_price(self, level: Level, modality: Modality, plan: int, campus_key: str) -> Optional[float]:
        tier = None
        if resolve_campus_requirement(level, modality):
            tier = resolve_tier(self.reference, campus_key)
        return derive_list_price(self.reference, level, modality, plan, campus_key, tier=tier)

    def extras_total(self, selection: Selection) -> float:
        campus_key = resolve_effective_campus(selection.level, selection.modality, selection.campus)
        return compute_extras(
            self.reference,
            campus_key,
            selection.selected_extras,
            selection.extras_enabled,
            selection.program_type,
        )

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def calculate(self, selection: Selection) -> CalculationOutcome:
        """
        Run the full calculation for a Selection.

        Args:
            selection: Current user choices

        Returns:
            CalculationOutcome in state DONE with a result, or FAILED with
            the first failing reason
        """
        state = CalculationState.IDLE
        try:
            state = CalculationState.VALIDATING
            campus_key, tier, average = self._validate(selection)

            state = CalculationState.RESOLVING
            rule = self._resolve(selection, tier, average)

            state = CalculationState.MATCHED
            result = self._price(selection, campus_key, rule)

            state = CalculationState.PRICED
        except CalculationError as e:
            logger.info("Scholarship calculation failed while %s: %s", state.value, e.reason.value)
            return CalculationOutcome(
                state=CalculationState.FAILED,
                failure=CalculationFailure(reason=e.reason, message=e.message),
            )

        logger.debug(
            "Scholarship calculated: %s%% -> %.2f",
            result.discount_percent_applied,
            result.final_monthly_amount,
        )
        return CalculationOutcome(state=CalculationState.DONE, result=result)

    def calculate_from_dict(self, selection_data: dict) -> CalculationOutcome:
        """
        Convenience method for API integration.
        """
        return self.calculate(Selection(**selection_data))

    def _validate(self, selection: Selection) -> Tuple[str, Optional[Tier], float]:
        """
        Checks run in a fixed order; the first failure wins.

        Returns:
            (effective campus key, tier or None, rounded average)
        """
        if not selection.level or not selection.modality or not selection.plan:
            raise CalculationError(FailureReason.INCOMPLETE_SELECTION)

        campus_required = resolve_campus_requirement(selection.level, selection.modality)
        if campus_required and not selection.campus:
            raise CalculationError(FailureReason.CAMPUS_REQUIRED)

        average = parse_average(selection.average)

        campus_key = resolve_effective_campus(selection.level, selection.modality, selection.campus)
        tier = None
        if campus_required:
            tier = resolve_tier(self.reference, campus_key)
            if tier is None:
                raise CalculationError(FailureReason.TIER_NOT_FOUND)

        return campus_key, tier, average

    def _resolve(self, selection: Selection, tier: Optional[Tier], average: float) -> CostRule:
        criteria = MatchCriteria(
            program_type=selection.program_type,
            level=selection.level,
            modality=selection.modality,
            plan=selection.plan,
            tier=tier,
            average=average,
        )
        rule = match_rule(self.reference.rules, criteria)
        if rule is None:
            raise CalculationError(FailureReason.NO_RULE_FOUND)
        return rule

    def _price(self, selection: Selection, campus_key: str, rule: CostRule) -> ScholarshipResult:
        # Back-derivation uses the rule that produced the discount
        list_price = derive_list_price(
            self.reference,
            selection.level,
            selection.modality,
            selection.plan,
            campus_key,
            rule=rule,
        )
        if list_price is None:
            raise CalculationError(FailureReason.LIST_PRICE_UNAVAILABLE)

        extras_total = compute_extras(
            self.reference,
            campus_key,
            selection.selected_extras,
            selection.extras_enabled,
            selection.program_type,
        )
        discount = applied_discount(rule, selection.program_type)

        return ScholarshipResult(
            discount_percent_applied=discount,
            final_monthly_amount=derive_final_price(list_price, discount, extras_total),
            list_price=list_price,
            extras_total=extras_total,
        )


# Convenience function for simple usage
def calculate_scholarship(
    selection: Selection,
    reference: Optional[ReferenceData] = None
) -> CalculationOutcome:
    """
    Convenience function to run one calculation.

    Args:
        selection: User choices
        reference: Pricing tables; the process-wide tables when omitted

    Returns:
        CalculationOutcome
    """
    if reference is None:
        from .adapter import get_reference_data
        reference = get_reference_data()
    return ScholarshipEngine(reference).calculate(selection)
