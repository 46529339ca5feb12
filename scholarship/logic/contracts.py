"""
Data Contracts for the Scholarship Calculator

Defines Pydantic models for the Reference Data (input tables), the Selection
(one per calculation) and the CalculationOutcome (output).
These contracts are the API boundary for the pricing core.
"""

from typing import List, Optional, Dict, Union
from pydantic import BaseModel, Field, field_validator

from .constants import (
    Level,
    Modality,
    ProgramType,
    Tier,
    FailureReason,
    CalculationState,
)


# =============================================================================
# REFERENCE DATA
# =============================================================================

class AverageRange(BaseModel):
    """Inclusive bounds on the qualifying academic average."""
    min: float
    max: float

    class Config:
        frozen = True


class CostRule(BaseModel):
    """
    A single pricing line.

    Rules are not unique: several may share everything except the average
    range, so they must be evaluated in the order they were supplied.
    """
    level: Level
    modality: Modality
    plan: int
    tier: Optional[Tier] = None  # None when the rule is tier-independent
    average_range: AverageRange
    discount_percent: float
    net_amount: float
    program_type: ProgramType
    origin: Optional[str] = None  # provenance tag, informational only

    class Config:
        frozen = True


class ChargeItem(BaseModel):
    """Optional charge a returning student may add to the base price."""
    code: str
    description: str = ""
    amount: float

    class Config:
        frozen = True


class CampusOffering(BaseModel):
    """Authoritative list price for a level/plan at a campus."""
    net_price: float
    available_discounts: Dict[str, float] = Field(default_factory=dict)

    class Config:
        frozen = True


class CampusMeta(BaseModel):
    tier: Optional[Tier] = None
    # level -> plan (as string) -> offering
    offerings: Dict[Level, Dict[str, CampusOffering]] = Field(default_factory=dict)
    # category -> ordered charge items
    extra_charges: Dict[str, List[ChargeItem]] = Field(default_factory=dict)

    class Config:
        frozen = True


class ReferenceData(BaseModel):
    """
    Immutable pricing tables, loaded once and shared by every calculation.
    """
    rules: List[CostRule] = Field(default_factory=list)
    campuses: Dict[str, CampusMeta] = Field(default_factory=dict)
    # listing key (e.g. "salud_presencial") -> campus names
    campus_listings: Dict[str, List[str]] = Field(default_factory=dict)
    version: Optional[str] = None

    class Config:
        frozen = True


# =============================================================================
# INPUT CONTRACT
# =============================================================================

class Selection(BaseModel):
    """
    The user's current choices. Rebuilt on every interaction.

    Changing an upstream field resets the fields that depend on it, so the
    ``with_*`` helpers should be preferred over building copies by hand.
    """
    program_type: ProgramType = ProgramType.NEW_ENTRY
    level: Optional[Level] = None
    modality: Optional[Modality] = None
    plan: Optional[int] = None
    campus: Optional[str] = ""  # null is read as no campus
    average: Optional[Union[str, float]] = None  # raw text as typed, or a number
    selected_extras: List[str] = Field(default_factory=list)
    extras_enabled: bool = False

    class Config:
        frozen = True

    def with_program_type(self, program_type: ProgramType) -> "Selection":
        return self.model_copy(update={
            "program_type": program_type,
            "extras_enabled": False,
            "selected_extras": [],
        })

    def with_level(self, level: Optional[Level]) -> "Selection":
        return self.model_copy(update={
            "level": level,
            "modality": None,
            "plan": None,
            "campus": "",
        })

    def with_modality(self, modality: Optional[Modality]) -> "Selection":
        return self.model_copy(update={
            "modality": modality,
            "plan": None,
            "campus": "",
        })

    def with_plan(self, plan: Optional[int]) -> "Selection":
        return self.model_copy(update={"plan": plan})

    @field_validator("campus", mode="before")
    @classmethod
    def _campus_none_as_empty(cls, value):
        return value or ""

    def with_campus(self, campus: str) -> "Selection":
        return self.model_copy(update={"campus": campus or ""})

    def with_average(self, average: Optional[Union[str, float]]) -> "Selection":
        return self.model_copy(update={"average": average})

    def with_extras_enabled(self, enabled: bool) -> "Selection":
        update = {"extras_enabled": enabled}
        if not enabled:
            update["selected_extras"] = []
        return self.model_copy(update=update)

    def toggle_extra(self, code: str) -> "Selection":
        if code in self.selected_extras:
            codes = [c for c in self.selected_extras if c != code]
        else:
            codes = [*self.selected_extras, code]
        return self.model_copy(update={"selected_extras": codes})

    def cleared(self) -> "Selection":
        return Selection()


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class ScholarshipResult(BaseModel):
    """Successful calculation, recomputed from scratch on every call."""
    discount_percent_applied: float
    final_monthly_amount: float
    list_price: float
    extras_total: float = 0.0


class CalculationFailure(BaseModel):
    reason: FailureReason
    message: str


class CalculationOutcome(BaseModel):
    """
    Either a result or a typed failure, never both.
    """
    state: CalculationState
    result: Optional[ScholarshipResult] = None
    failure: Optional[CalculationFailure] = None

    @property
    def ok(self) -> bool:
        return self.state == CalculationState.DONE and self.result is not None
