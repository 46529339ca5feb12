"""
Reference Data Adapter

Loads the pricing tables from the JSON export files or from the database and
normalizes them into ReferenceData.

The export uses the campus network's own vocabulary (nivel, modalidad,
porcentaje, monto, planteles...). Records already in the internal
vocabulary pass through unchanged, so the same normalizers serve both
sources.

This is a pure adapter layer - NO pricing, NO matching.
"""

import os
import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from .contracts import ReferenceData, CostRule, CampusMeta, CampusOffering, ChargeItem, AverageRange
from .constants import SOURCE_LEVEL_MAP, SOURCE_MODALITY_MAP, SOURCE_PROGRAM_TYPE_MAP

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")
RULES_FILENAME = "costos_2026_flat_rules.json"
META_FILENAME = "costos_2026_meta.json"


class ReferenceDataError(ValueError):
    """The pricing export does not follow the expected schema."""


def _pick(raw: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First key present in the record, internal name first."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _translate(value: Any, mapping: Dict[str, Any]) -> Any:
    if isinstance(value, str):
        key = value.strip().lower()
        return mapping.get(key, key)
    return value


def _clean_tier(value: Any) -> Optional[str]:
    if value is None:
        return None
    tier = str(value).strip().upper()
    return tier or None


# =============================================================================
# NORMALIZERS
# =============================================================================

def normalize_rule(raw: Dict[str, Any]) -> CostRule:
    """
    Build a CostRule from an export or database record.

    Raises:
        ReferenceDataError: When a required field is missing or invalid
    """
    average_range = _pick(raw, "average_range", "rango")
    if average_range is None and "average_min" in raw:
        average_range = {"min": raw["average_min"], "max": raw["average_max"]}

    try:
        return CostRule(
            level=_translate(_pick(raw, "level", "nivel"), SOURCE_LEVEL_MAP),
            modality=_translate(_pick(raw, "modality", "modalidad"), SOURCE_MODALITY_MAP),
            plan=_pick(raw, "plan"),
            tier=_clean_tier(_pick(raw, "tier")),
            average_range=AverageRange(**average_range) if average_range else None,
            discount_percent=_pick(raw, "discount_percent", "porcentaje"),
            net_amount=_pick(raw, "net_amount", "monto"),
            program_type=_translate(_pick(raw, "program_type", "programa"), SOURCE_PROGRAM_TYPE_MAP),
            origin=_pick(raw, "origin", "origen"),
        )
    except (ValidationError, TypeError) as e:
        raise ReferenceDataError(f"Invalid cost rule {raw!r}: {e}") from e


def _normalize_offerings(raw: Dict[str, Any]) -> Dict[str, Dict[str, CampusOffering]]:
    offerings: Dict[str, Dict[str, CampusOffering]] = {}
    for level, plans in (raw or {}).items():
        by_plan: Dict[str, CampusOffering] = {}
        for plan, offer in (plans or {}).items():
            net_price = _pick(offer or {}, "net_price", "neto")
            # Only numeric net prices are authoritative
            if isinstance(net_price, bool) or not isinstance(net_price, (int, float)):
                continue
            by_plan[str(plan)] = CampusOffering(
                net_price=net_price,
                available_discounts=_pick(offer, "available_discounts", "becas", default={}),
            )
        offerings[_translate(level, SOURCE_LEVEL_MAP)] = by_plan
    return offerings


def _normalize_charges(raw: Dict[str, Any]) -> Dict[str, List[ChargeItem]]:
    return {
        category: [
            ChargeItem(
                code=str(_pick(item, "code", "codigo")),
                description=_pick(item, "description", "concepto", default=""),
                amount=_pick(item, "amount", "costo"),
            )
            for item in (items or [])
        ]
        for category, items in (raw or {}).items()
    }


def normalize_campus(raw: Dict[str, Any]) -> CampusMeta:
    """
    Build CampusMeta from an export or database record.

    Raises:
        ReferenceDataError: When offerings or charges are malformed
    """
    try:
        return CampusMeta(
            tier=_clean_tier(_pick(raw, "tier")),
            offerings=_normalize_offerings(_pick(raw, "offerings", "oferta", default={})),
            extra_charges=_normalize_charges(_pick(raw, "extra_charges", "cargos", default={})),
        )
    except (ValidationError, TypeError, AttributeError) as e:
        raise ReferenceDataError(f"Invalid campus metadata: {e}") from e


def build_reference_data(
    raw_rules: List[Dict[str, Any]],
    raw_meta: Dict[str, Any]
) -> ReferenceData:
    """
    Normalize both tables. Rule order is kept as supplied.
    """
    rules = [normalize_rule(r) for r in raw_rules]
    campuses = {
        key: normalize_campus(value)
        for key, value in (_pick(raw_meta, "campuses", "planteles", default={})).items()
    }
    listings = _pick(raw_meta, "campus_listings", "planteles_por_nivel_y_modalidad", default={})

    return ReferenceData(
        rules=rules,
        campuses=campuses,
        campus_listings={k: list(v) for k, v in listings.items()},
        version=_pick(raw_meta, "version"),
    )


# =============================================================================
# SOURCES
# =============================================================================

def load_reference_data_from_files(
    rules_path: Optional[str] = None,
    meta_path: Optional[str] = None
) -> ReferenceData:
    """
    Load the JSON export (flat rules list + campus metadata map).

    Args:
        rules_path: Flat rules file; bundled export when omitted
        meta_path: Campus metadata file; bundled export when omitted
    """
    data_dir = os.getenv("SCHOLARSHIP_DATA_DIR", DEFAULT_DATA_DIR)
    rules_path = rules_path or os.path.join(data_dir, RULES_FILENAME)
    meta_path = meta_path or os.path.join(data_dir, META_FILENAME)

    with open(rules_path, "r", encoding="utf-8") as f:
        raw_rules = json.load(f)
    with open(meta_path, "r", encoding="utf-8") as f:
        raw_meta = json.load(f)

    if not isinstance(raw_rules, list) or not isinstance(raw_meta, dict):
        logger.error("Unexpected export layout in %s / %s", rules_path, meta_path)
        raise ReferenceDataError("Rules must be a list and metadata an object")

    reference = build_reference_data(raw_rules, raw_meta)
    logger.info(
        "Loaded %d cost rules and %d campuses from %s (version %s)",
        len(reference.rules), len(reference.campuses), data_dir, reference.version,
    )
    return reference


def load_reference_data_from_db(db: Session) -> ReferenceData:
    """
    Load the tables written by scholarship_upload.py.
    """
    from ..models import SchCostRule, SchCampus

    rule_rows = db.query(SchCostRule).order_by(SchCostRule.id).all()
    campus_rows = db.query(SchCampus).order_by(SchCampus.campus_key).all()

    raw_rules = [
        {
            "level": row.level,
            "modality": row.modality,
            "plan": row.plan,
            "tier": row.tier,
            "average_min": row.average_min,
            "average_max": row.average_max,
            "discount_percent": row.discount_percent,
            "net_amount": row.net_amount,
            "program_type": row.program_type,
            "origin": row.origin,
        }
        for row in rule_rows
    ]

    campuses: Dict[str, Any] = {}
    listings: Dict[str, List[str]] = {}
    version = None
    for row in campus_rows:
        campuses[row.campus_key] = {
            "tier": row.tier,
            "offerings": row.offerings or {},
            "extra_charges": row.extra_charges or {},
        }
        for listing_key in row.listing_keys or []:
            listings.setdefault(listing_key, []).append(row.campus_key)
        version = version or row.data_version

    reference = build_reference_data(
        raw_rules,
        {"campuses": campuses, "campus_listings": listings, "version": version},
    )
    logger.info("Loaded %d cost rules and %d campuses from database", len(reference.rules), len(reference.campuses))
    return reference


# =============================================================================
# PROCESS-WIDE TABLES
# =============================================================================

_reference_data: Optional[ReferenceData] = None


def get_reference_data() -> ReferenceData:
    """
    Reference Data for this process, loaded on first use and never mutated.

    Source is chosen by SCHOLARSHIP_DATA_SOURCE: "files" (default) or "db".
    """
    global _reference_data
    if _reference_data is None:
        source = os.getenv("SCHOLARSHIP_DATA_SOURCE", "files").lower()
        if source == "db":
            from db import get_db
            with get_db() as db:
                _reference_data = load_reference_data_from_db(db)
        else:
            _reference_data = load_reference_data_from_files()
    return _reference_data


def reset_reference_data() -> None:
    """Forget the loaded tables (next call reloads them)."""
    global _reference_data
    _reference_data = None
