"""
Tests for the HTTP surface: calculator endpoints and calculator sessions.
"""

import pytest
from datetime import timedelta
from fastapi.testclient import TestClient

from main import app
from scholarship.routes import get_engine
from utils.auth_utils import (
    get_email_domain,
    is_allowed_domain,
    create_session_token,
    decode_session_token,
    UNIVERSITY_DOMAINS,
)


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


SCENARIO_A = {
    "program_type": "new_entry",
    "level": "undergraduate",
    "modality": "in_person",
    "plan": 12,
    "campus": "Culiacán",
    "average": "8.5",
}


# =============================================================================
# CALCULATOR
# =============================================================================

def test_calculate(client):
    resp = client.post("/scholarships/calculate", json=SCENARIO_A)

    assert resp.status_code == 200
    assert resp.json() == {
        "discount_percent_applied": 20.0,
        "final_monthly_amount": 4000.0,
        "list_price": 5000.0,
        "extras_total": 0.0,
    }


def test_calculate_returning_with_extras(client):
    payload = {
        **SCENARIO_A,
        "program_type": "returning",
        "extras_enabled": True,
        "selected_extras": ["INS-01", "SRV-01"],
    }

    resp = client.post("/scholarships/calculate", json=payload)

    assert resp.status_code == 200
    assert resp.json()["final_monthly_amount"] == 4240.0


def test_calculate_failure_reason(client):
    resp = client.post("/scholarships/calculate", json={**SCENARIO_A, "campus": ""})

    assert resp.status_code == 422
    assert resp.json()["detail"]["reason"] == "campus_required"
    assert resp.json()["detail"]["message"]


def test_calculate_null_campus(client):
    resp = client.post("/scholarships/calculate", json={**SCENARIO_A, "campus": None})

    assert resp.status_code == 422
    assert resp.json()["detail"]["reason"] == "campus_required"


def test_calculate_invalid_payload(client):
    resp = client.post("/scholarships/calculate", json={**SCENARIO_A, "level": "doctorate"})

    assert resp.status_code == 400


def test_options(client):
    resp = client.get("/scholarships/options", params={"level": "undergraduate", "modality": "in_person"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["levels"] == ["graduate", "health_sciences", "undergraduate"]
    assert body["modalities"] == ["in_person", "online"]
    assert body["plans"] == [9, 12]
    assert body["campuses"] == ["Culiacán", "hermosillo", "Tijuana"]
    assert body["campus_required"] is True


def test_options_empty_selection(client):
    body = client.get("/scholarships/options").json()

    assert body["modalities"] == []
    assert body["plans"] == []
    assert body["campuses"] == []
    assert body["campus_required"] is False


def test_list_price(client):
    params = {"level": "undergraduate", "modality": "in_person", "plan": 12, "campus": "Hermosillo"}

    assert client.get("/scholarships/list-price", params=params).json() == {"list_price": 4500.0}
    assert client.get("/scholarships/list-price", params={**params, "campus": ""}).json() == {"list_price": None}


def test_campus_extras(client):
    resp = client.get("/scholarships/campuses/Culiacán/extras")

    assert resp.status_code == 200
    categories = resp.json()["categories"]
    assert [c["category"] for c in categories] == ["Inscripción", "Servicios"]
    assert categories[0]["items"] == [{"code": "INS-01", "description": "Reinscripción", "amount": 250.0}]

    assert client.get("/scholarships/campuses/Navojoa/extras").status_code == 404


def test_health(client):
    body = client.get("/scholarships/health").json()

    assert body["status"] == "ok"
    assert body["data_version"] == "test"


# =============================================================================
# SESSIONS
# =============================================================================

def test_login_and_session(client):
    resp = client.post("/auth/login", json={"email": "Ana.Lopez@UNIDEP.mx", "slug": "unidep"})

    assert resp.status_code == 200
    token = resp.json()["access_token"]
    assert resp.json()["session"] == {"email": "ana.lopez@unidep.mx", "slug": "unidep"}

    resp = client.get("/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json() == {"email": "ana.lopez@unidep.mx", "slug": "unidep"}


def test_login_subdomain(client):
    resp = client.post("/auth/login", json={"email": "docente@campus.unidep.edu.mx", "slug": "unidep"})

    assert resp.status_code == 200


@pytest.mark.parametrize("payload, status", [
    ({"email": "ana@gmail.com", "slug": "unidep"}, 403),
    ({"email": "ana@unidep.mx", "slug": "utc"}, 403),
    ({"email": "ana@unidep.mx", "slug": "nowhere"}, 404),
])
def test_login_rejected(client, payload, status):
    assert client.post("/auth/login", json=payload).status_code == status


def test_session_requires_token(client):
    assert client.get("/auth/session").status_code == 401
    assert client.get("/auth/session", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_expired_session(client):
    token = create_session_token("ana@unidep.mx", "unidep", expires_delta=timedelta(seconds=-1))

    assert client.get("/auth/session", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_calculator_gate(client, monkeypatch):
    monkeypatch.setenv("SCHOLARSHIP_REQUIRE_AUTH", "1")

    assert client.get("/scholarships/options").status_code == 401

    token = create_session_token("ana@unidep.mx", "unidep")
    resp = client.get("/scholarships/options", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


# =============================================================================
# DOMAIN ALLOWLIST
# =============================================================================

def test_get_email_domain():
    assert get_email_domain(" Ana@UNIDEP.mx ") == "unidep.mx"
    assert get_email_domain("no-at-sign") == ""
    assert get_email_domain("a@b@c.mx") == ""


@pytest.mark.parametrize("domain, allowed", [
    ("unidep.mx", True),
    (" UNIDEP.MX ", True),
    ("unidep.edu.mx", True),
    ("campus.unidep.edu.mx", True),
    ("a.b.unidep.edu.mx", True),
    ("evilunidep.edu.mx", False),
    ("sub.unidep.mx", False),
    ("", False),
])
def test_is_allowed_domain(domain, allowed):
    assert is_allowed_domain(domain, UNIVERSITY_DOMAINS["unidep"]) is allowed


def test_wildcard_does_not_match_bare_base():
    assert is_allowed_domain("unidep.edu.mx", ["*.unidep.edu.mx"]) is False
    assert is_allowed_domain("x.unidep.edu.mx", ["*.unidep.edu.mx"]) is True


def test_session_token_round_trip():
    data = decode_session_token(create_session_token("Ana@unidep.mx", "unidep"))

    assert data["sub"] == "ana@unidep.mx"
    assert data["slug"] == "unidep"
