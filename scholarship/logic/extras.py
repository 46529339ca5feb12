"""
Extras Aggregator

Sums the optional charges a returning student selected for their campus.
"""

from typing import Iterable, Optional

from .contracts import ReferenceData
from .constants import ProgramType
from .pricing import round2


def compute_extras(
    reference: ReferenceData,
    campus_key: str,
    selected_codes: Optional[Iterable[str]],
    enabled: bool,
    program_type: ProgramType
) -> float:
    """
    Total of the selected charge items across every category of the campus.

    Only returning students with extras enabled get a non-zero total. Codes
    that no longer exist at the campus (e.g. after switching campus) are
    ignored.
    """
    if program_type != ProgramType.RETURNING or not enabled:
        return 0.0

    campus = reference.campuses.get(campus_key) if campus_key else None
    if campus is None or not campus.extra_charges:
        return 0.0

    selected = set(selected_codes or [])
    total = 0.0
    for items in campus.extra_charges.values():
        for item in items:
            if item.code in selected:
                total += item.amount
    return round2(total)
