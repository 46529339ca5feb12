"""
Scholarship Calculator Constants

Defines the enums, tolerances, caps and lookup tables used by the pricing core.
All values are deterministic and shared read-only across calculations.
"""

from enum import Enum
from typing import Dict, List, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class Level(str, Enum):
    """Business line the student enrolls in."""
    UNDERGRADUATE = "undergraduate"
    HEALTH_SCIENCES = "health_sciences"
    GRADUATE = "graduate"
    HIGH_SCHOOL = "high_school"


class Modality(str, Enum):
    IN_PERSON = "in_person"
    HYBRID = "hybrid"
    ONLINE = "online"


class ProgramType(str, Enum):
    NEW_ENTRY = "new_entry"
    RETURNING = "returning"


class Tier(str, Enum):
    """Campus classification bucket."""
    T1 = "T1"
    T2 = "T2"
    T3 = "T3"


class FailureReason(str, Enum):
    """Typed, user-facing reasons a calculation can stop."""
    INCOMPLETE_SELECTION = "incomplete_selection"
    CAMPUS_REQUIRED = "campus_required"
    AVERAGE_REQUIRED = "average_required"
    INVALID_AVERAGE = "invalid_average"
    TIER_NOT_FOUND = "tier_not_found"
    NO_RULE_FOUND = "no_rule_found"
    LIST_PRICE_UNAVAILABLE = "list_price_unavailable"


class CalculationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    MATCHED = "matched"
    PRICED = "priced"
    DONE = "done"
    FAILED = "failed"


# =============================================================================
# RULES OF THE CALCULATOR
# =============================================================================

# Campus key used for modality-based (online) metadata
ONLINE_CAMPUS_KEY = "ONLINE"

# Levels that need a physical campus unless studied online
CAMPUS_REQUIRED_LEVELS = frozenset({
    Level.UNDERGRADUATE,
    Level.HEALTH_SCIENCES,
    Level.HIGH_SCHOOL,
})

# Tolerance applied to both bounds of an average range
AVERAGE_EPSILON = 1e-6

# Valid academic averages are in (MIN_AVERAGE, MAX_AVERAGE]
MIN_AVERAGE = 0.0
MAX_AVERAGE = 10.0

# Returning students never get more than this percentage
RETURNING_DISCOUNT_CAP = 25.0

# Distinct (level, modality, plan, campus) previews kept per engine
LIST_PRICE_CACHE_SIZE = 1024

# =============================================================================
# CATALOG ORDERING
# =============================================================================

MODALITY_ORDER: List[Modality] = [Modality.IN_PERSON, Modality.HYBRID, Modality.ONLINE]

# Modalities never offered for a level, even if rules exist
EXCLUDED_MODALITIES: Dict[Level, Tuple[Modality, ...]] = {
    Level.HEALTH_SCIENCES: (Modality.HYBRID,),
}

# Level -> key of the campus listing in campus metadata
CAMPUS_LISTING_KEYS: Dict[Level, str] = {
    Level.UNDERGRADUATE: "licenciatura_presencial_mixta",
    Level.HEALTH_SCIENCES: "salud_presencial",
    Level.HIGH_SCHOOL: "preparatoria_presencial_mixta",
}

# =============================================================================
# SOURCE EXPORT VOCABULARY
# =============================================================================

# The pricing export is produced in the campus network's own vocabulary
SOURCE_LEVEL_MAP: Dict[str, Level] = {
    "licenciatura": Level.UNDERGRADUATE,
    "salud": Level.HEALTH_SCIENCES,
    "maestria": Level.GRADUATE,
    "preparatoria": Level.HIGH_SCHOOL,
}

SOURCE_MODALITY_MAP: Dict[str, Modality] = {
    "presencial": Modality.IN_PERSON,
    "mixta": Modality.HYBRID,
    "online": Modality.ONLINE,
}

SOURCE_PROGRAM_TYPE_MAP: Dict[str, ProgramType] = {
    "nuevo_ingreso": ProgramType.NEW_ENTRY,
    "reingreso": ProgramType.RETURNING,
}

# =============================================================================
# MESSAGES
# =============================================================================

FAILURE_MESSAGES: Dict[FailureReason, str] = {
    FailureReason.INCOMPLETE_SELECTION: "Complete the level, modality and study plan.",
    FailureReason.CAMPUS_REQUIRED: "Select a campus for this business line.",
    FailureReason.AVERAGE_REQUIRED: "Enter the student's average.",
    FailureReason.INVALID_AVERAGE: "Enter a valid average between 0 and 10.",
    FailureReason.TIER_NOT_FOUND: "No tier was found for the selected campus.",
    FailureReason.NO_RULE_FOUND: "No cost was found for that combination of data, program and average.",
    FailureReason.LIST_PRICE_UNAVAILABLE: "The list price could not be calculated for this combination.",
}
