"""
Load a pricing export (flat rules + campus metadata) into the database tables
read by SCHOLARSHIP_DATA_SOURCE=db.

Usage:
    python scholarship_upload.py [rules.json] [meta.json]
"""

import sys
import logging
from dotenv import load_dotenv

from db import Base, engine, get_db
from scholarship.models import SchCostRule, SchCampus
from scholarship.logic.adapter import load_reference_data_from_files
from scholarship.logic.contracts import ReferenceData

load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("scholarship_upload")


def ensure_tables():
    if engine is None:
        raise RuntimeError("DATABASE_URL is not set. Please check your environment variables.")
    Base.metadata.create_all(bind=engine, tables=[SchCostRule.__table__, SchCampus.__table__])


def write_reference_data(db, reference: ReferenceData) -> None:
    """
    Replace the stored tables with the given Reference Data.
    Rules are inserted in supply order, which is their matching order.
    """
    db.query(SchCostRule).delete()
    db.query(SchCampus).delete()

    for rule in reference.rules:
        db.add(SchCostRule(
            level=rule.level.value,
            modality=rule.modality.value,
            plan=rule.plan,
            tier=rule.tier.value if rule.tier else None,
            program_type=rule.program_type.value,
            average_min=rule.average_range.min,
            average_max=rule.average_range.max,
            discount_percent=rule.discount_percent,
            net_amount=rule.net_amount,
            origin=rule.origin,
        ))
        # keep ids in supply order
        db.flush()

    for key, campus in reference.campuses.items():
        dumped = campus.model_dump(mode="json")
        db.add(SchCampus(
            campus_key=key,
            tier=dumped["tier"],
            offerings=dumped["offerings"],
            extra_charges=dumped["extra_charges"],
            listing_keys=[k for k, names in reference.campus_listings.items() if key in names],
            data_version=reference.version,
        ))


def import_data(rules_path=None, meta_path=None):
    reference = load_reference_data_from_files(rules_path, meta_path)
    ensure_tables()
    with get_db() as db:
        write_reference_data(db, reference)
    logger.info(f"Imported {len(reference.rules)} rules and {len(reference.campuses)} campuses")


if __name__ == "__main__":
    import_data(*sys.argv[1:3])
