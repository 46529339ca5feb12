"""
Scholarship API Routes

Exposes the scholarship calculator via REST API.
The UI collaborator uses /options and /list-price while the form is being
filled, and /calculate when the user asks for the result.
"""

from typing import Optional, Dict, Any
from fastapi import APIRouter, Depends, HTTPException, Body, Query, Path
from pydantic import ValidationError

from utils.session_auth import calculator_gate
from .logic.contracts import Selection, ScholarshipResult
from .logic.constants import Level, Modality
from .logic.engine import ScholarshipEngine
from .logic.adapter import get_reference_data
from .logic.eligibility import resolve_campus_requirement
from .logic.catalog import (
    available_levels,
    available_modalities,
    available_plans,
    available_campuses,
    available_extras,
)


router = APIRouter(prefix="/scholarships", tags=["scholarships"], dependencies=[Depends(calculator_gate)])

_engine: Optional[ScholarshipEngine] = None


def get_engine() -> ScholarshipEngine:
    """Process-wide engine over the process-wide Reference Data."""
    global _engine
    if _engine is None:
        _engine = ScholarshipEngine(get_reference_data())
    return _engine


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/options", summary="Options available for the current selection")
def get_options(
    level: Optional[Level] = Query(default=None),
    modality: Optional[Modality] = Query(default=None),
    engine: ScholarshipEngine = Depends(get_engine),
):
    """
    Options for each form step given what has been chosen so far.

    Modalities need a level, plans need level and modality; campuses are
    listed only when the combination requires one.
    """
    reference = engine.reference
    return {
        "levels": available_levels(reference),
        "modalities": available_modalities(reference, level),
        "plans": available_plans(reference, level, modality),
        "campuses": available_campuses(reference, level, modality),
        "campus_required": resolve_campus_requirement(level, modality),
    }


@router.get("/list-price", summary="Undiscounted monthly tuition")
def get_list_price(
    level: Optional[Level] = Query(default=None),
    modality: Optional[Modality] = Query(default=None),
    plan: Optional[int] = Query(default=None),
    campus: str = Query(default=""),
    engine: ScholarshipEngine = Depends(get_engine),
):
    return {"list_price": engine.list_price(level, modality, plan, campus)}


@router.get("/campuses/{campus}/extras", summary="Optional charges of a campus")
def get_campus_extras(
    campus: str = Path(...),
    engine: ScholarshipEngine = Depends(get_engine),
):
    extras = available_extras(engine.reference, campus)
    if not extras:
        raise HTTPException(status_code=404, detail=f"No optional charges for campus '{campus}'")
    return {
        "campus": campus,
        "categories": [
            {
                "category": category,
                "items": [_serialize_charge(item) for item in items],
            }
            for category, items in extras.items()
        ],
    }


@router.post("/calculate", response_model=ScholarshipResult, summary="Calculate the scholarship")
def calculate(
    payload: Dict[str, Any] = Body(...),
    engine: ScholarshipEngine = Depends(get_engine),
):
    """
    Run the calculator for a full Selection.

    **Response:**
    - `discount_percent_applied`, `final_monthly_amount`, `list_price`,
      `extras_total` on success
    - 422 with `{reason, message}` when the selection cannot be priced
    """
    try:
        selection = Selection(**payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid selection: {str(e)}")

    outcome = engine.calculate(selection)
    if not outcome.ok:
        raise HTTPException(
            status_code=422,
            detail={"reason": outcome.failure.reason.value, "message": outcome.failure.message},
        )
    return outcome.result


def _serialize_charge(item) -> Dict[str, Any]:
    """Convert ChargeItem to JSON-serializable dict."""
    return {
        "code": item.code,
        "description": item.description,
        "amount": item.amount,
    }


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Scholarship calculator health check")
def health_check(engine: ScholarshipEngine = Depends(get_engine)):
    """Check if the calculator has its reference data loaded."""
    return {
        "status": "ok",
        "engine": "scholarship",
        "version": engine.version,
        "data_version": engine.reference.version,
        "rules": len(engine.reference.rules),
    }
