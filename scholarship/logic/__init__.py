"""
Scholarship Logic Module

Provides the deterministic pricing core of the scholarship calculator.
"""

from .contracts import (
    AverageRange,
    CostRule,
    ChargeItem,
    CampusOffering,
    CampusMeta,
    ReferenceData,
    Selection,
    ScholarshipResult,
    CalculationFailure,
    CalculationOutcome,
)
from .engine import ScholarshipEngine, CalculationError, calculate_scholarship
from .adapter import ReferenceDataError, get_reference_data
from .constants import Level, Modality, ProgramType, Tier, FailureReason, CalculationState

__all__ = [
    # Main engine
    "ScholarshipEngine",
    "CalculationError",
    "calculate_scholarship",

    # Reference data
    "ReferenceDataError",
    "get_reference_data",

    # Contracts
    "AverageRange",
    "CostRule",
    "ChargeItem",
    "CampusOffering",
    "CampusMeta",
    "ReferenceData",
    "Selection",
    "ScholarshipResult",
    "CalculationFailure",
    "CalculationOutcome",

    # Enums
    "Level",
    "Modality",
    "ProgramType",
    "Tier",
    "FailureReason",
    "CalculationState",
]
