"""
Shared fixtures: a small, hand-checked set of pricing tables.
"""

import pytest

from scholarship.logic.contracts import (
    ReferenceData,
    CostRule,
    AverageRange,
    CampusMeta,
    CampusOffering,
    ChargeItem,
    Selection,
)
from scholarship.logic.constants import Level, Modality, ProgramType, Tier
from scholarship.logic.engine import ScholarshipEngine


def make_rule(
    level=Level.UNDERGRADUATE,
    modality=Modality.IN_PERSON,
    plan=12,
    tier=Tier.T2,
    average=(8.0, 8.9),
    discount=20.0,
    net=4000.0,
    program_type=ProgramType.NEW_ENTRY,
):
    return CostRule(
        level=level,
        modality=modality,
        plan=plan,
        tier=tier,
        average_range=AverageRange(min=average[0], max=average[1]),
        discount_percent=discount,
        net_amount=net,
        program_type=program_type,
        origin="test",
    )


@pytest.fixture
def rules():
    return [
        # Culiacán (T2), plan 12: list price 5000
        make_rule(average=(7.0, 7.9), discount=10, net=4500),
        make_rule(average=(8.0, 8.9), discount=20, net=4000),
        make_rule(average=(8.0, 8.9), discount=20, net=4000, program_type=ProgramType.RETURNING),
        make_rule(average=(9.0, 10.0), discount=40, net=3000, program_type=ProgramType.RETURNING),
        # Hermosillo (T1): back-derives 5500, but the campus offering says 4500
        make_rule(tier=Tier.T1, discount=20, net=4400),
        # Plan 9 on T2 is a full scholarship: no list price can be derived
        make_rule(plan=9, average=(8.0, 10.0), discount=100, net=0),
        make_rule(modality=Modality.ONLINE, plan=9, tier=None, average=(7.0, 10.0), discount=10, net=3150),
        make_rule(level=Level.GRADUATE, modality=Modality.ONLINE, plan=6, tier=None,
                  average=(8.0, 10.0), discount=15, net=4250),
        make_rule(level=Level.HEALTH_SCIENCES, plan=9, tier=Tier.T1, average=(8.0, 10.0), discount=10, net=5400),
        make_rule(level=Level.HEALTH_SCIENCES, modality=Modality.HYBRID, plan=9, tier=Tier.T1,
                  average=(8.0, 10.0), discount=10, net=5400),
    ]


@pytest.fixture
def campuses():
    return {
        "Culiacán": CampusMeta(
            tier=Tier.T2,
            extra_charges={
                "Inscripción": [ChargeItem(code="INS-01", description="Reinscripción", amount=250.0)],
                "Servicios": [
                    ChargeItem(code="SRV-01", description="Seguro escolar", amount=50.0),
                    ChargeItem(code="SRV-02", description="Credencial", amount=20.0),
                ],
            },
        ),
        "Hermosillo": CampusMeta(
            tier=Tier.T1,
            offerings={Level.UNDERGRADUATE: {"12": CampusOffering(net_price=4500.0)}},
        ),
        "Navojoa": CampusMeta(tier=None),
        "ONLINE": CampusMeta(
            tier=None,
            extra_charges={"Plataforma": [ChargeItem(code="ONL-01", description="Licencia", amount=350.0)]},
        ),
    }


@pytest.fixture
def reference(rules, campuses):
    return ReferenceData(
        rules=rules,
        campuses=campuses,
        campus_listings={
            "licenciatura_presencial_mixta": ["Tijuana", "Culiacán", "hermosillo"],
            "salud_presencial": ["Hermosillo"],
        },
        version="test",
    )


@pytest.fixture
def engine(reference):
    return ScholarshipEngine(reference)


@pytest.fixture
def scenario_a():
    """Undergraduate, in person, plan 12 at a T2 campus, average 8.5."""
    return Selection(
        program_type=ProgramType.NEW_ENTRY,
        level=Level.UNDERGRADUATE,
        modality=Modality.IN_PERSON,
        plan=12,
        campus="Culiacán",
        average="8.5",
    )
