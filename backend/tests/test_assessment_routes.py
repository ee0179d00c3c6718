"""Assessment API tests — wizard session flow, validation errors, submission fallback, quick intake."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.database import Base, get_db
from app.main import app
from app.services.submission_service import SubmissionOutcome
from app.services.wizard import STEP_FIELDS
from app.services.wizard_store import WizardStore

# ---------------------------------------------------------------------------
# Test database setup (file-based SQLite for compatibility)
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite:///./test_assessment_routes.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

WEBHOOK_URL = "https://hooks.example.test/assessment"

STEP_ANSWERS = {
    1: "technology",
    2: "A marketplace that matches first-time founders with vetted fractional CTOs.",
    3: "mvp_development",
    4: "validated",
    5: "different_problem",
    6: ["business_plan", "pitch_deck", "ui_ux"],
    7: "recurring",
    8: "5k-25k",
    9: "cofounder",
    10: ["fundraising", "marketing"],
    11: "20k-40k",
}

CONTACT = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "phone": "(616) 555-0134",
    "consent": True,
}


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


client = TestClient(app)


@pytest.fixture(autouse=True)
def setup_db(monkeypatch):
    """Create tables before each test, drop after.  No integration is configured."""
    for key in (
        "SUBMIT_LEAD_URL",
        "SUBMIT_ASSESSMENT_URL",
        "ASSESSMENT_WEBHOOK_URL",
        "CONVERSION_TRACKING_URL",
        "THANK_YOU_URL",
    ):
        monkeypatch.delenv(key, raising=False)
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.pop(get_db, None)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _start(session_id="route-1", **tracking):
    res = client.post("/assessment/sessions", json={"session_id": session_id, **tracking})
    assert res.status_code == 201
    return res.json()


def _answer(session_id, field, value, **extra):
    return client.patch(
        f"/assessment/sessions/{session_id}/answers",
        json={"field": field, "value": value, **extra},
    )


def _advance(session_id):
    return client.post(f"/assessment/sessions/{session_id}/advance")


def _walk_to(session_id, step):
    """Answer and advance every step before *step* through the API."""
    for current in range(1, step):
        assert _answer(session_id, STEP_FIELDS[current], STEP_ANSWERS[current]).status_code == 200
        res = _advance(session_id)
        assert res.status_code == 200
        if res.json()["stage"] == "score_reveal":
            res = _advance(session_id)
            assert res.status_code == 200
    return res.json()


# ===================================================================== #
#  Catalogs                                                               #
# ===================================================================== #

class TestCatalogs:
    def test_catalogs_for_type(self):
        res = client.get("/assessment/catalogs/service")
        assert res.status_code == 200
        data = res.json()
        assert data["startup_type"] == "service"
        stages = {o["id"]: o["name"] for o in data["catalogs"]["project_stage"]}
        assert stages["already_live"] == "Already serving clients"
        assert len(data["catalogs"]["existing_materials"]) == 9
        assert all(level["note"] for level in data["catalogs"]["investment_readiness"])

    def test_unknown_type(self):
        assert client.get("/assessment/catalogs/spaceship").status_code == 404


# ===================================================================== #
#  Wizard session flow                                                    #
# ===================================================================== #

class TestSessionFlow:
    def test_start_session(self):
        data = _start(utm_source="google")
        assert data["session_id"] == "route-1"
        assert data["current_step"] == 1
        assert data["total_steps"] == 12
        assert data["stage"] == "question"
        assert data["step_field"] == "startup_type"
        assert len(data["options"]) == 4
        assert data["score"] is None

    def test_start_generates_session_id(self):
        res = client.post("/assessment/sessions", json={})
        assert res.status_code == 201
        assert res.json()["session_id"]

    def test_start_resumes_existing(self):
        _start()
        _walk_to("route-1", 4)
        data = _start()
        assert data["current_step"] == 4
        assert data["answers"]["project_stage"] == "mvp_development"

    def test_get_unknown_session(self):
        assert client.get("/assessment/sessions/missing").status_code == 404

    def test_advance_requires_valid_step(self):
        _start()
        res = _advance("route-1")
        assert res.status_code == 422
        detail = res.json()["detail"]
        assert detail["step"] == 1
        assert "startup_type" in detail["errors"]

    def test_inactive_field_conflict(self):
        _start()
        res = _answer("route-1", "investment_readiness", "100k+")
        assert res.status_code == 409

    def test_invalid_option(self):
        _start()
        res = _answer("route-1", "startup_type", "spaceship")
        assert res.status_code == 422

    def test_auto_advance(self):
        _start()
        res = _answer("route-1", "startup_type", "physical", auto_advance=True)
        assert res.status_code == 200
        data = res.json()
        assert data["current_step"] == 2
        assert data["step_field"] == "app_idea"

    def test_toggle(self):
        _start()
        _walk_to("route-1", 6)
        res = client.post(
            "/assessment/sessions/route-1/toggle",
            json={"field": "existing_materials", "option_id": "legal"},
        )
        assert res.status_code == 200
        assert res.json()["answers"]["existing_materials"] == ["legal"]

    def test_previous(self):
        _start()
        _walk_to("route-1", 3)
        res = client.post("/assessment/sessions/route-1/previous")
        assert res.status_code == 200
        assert res.json()["current_step"] == 2
        assert res.json()["answers"]["app_idea"] == STEP_ANSWERS[2]

    def test_score_hidden_before_reveal(self):
        _start()
        assert client.get("/assessment/sessions/route-1/score").status_code == 409

    def test_score_reveal(self):
        _start()
        _walk_to("route-1", 11)
        _answer("route-1", "investment_readiness", STEP_ANSWERS[11])
        res = _advance("route-1")
        data = res.json()
        assert data["stage"] == "score_reveal"
        assert data["current_step"] == 11
        assert data["score"]["score"] == 73
        assert data["score"]["segment"] == "DesignTech"

        res = client.get("/assessment/sessions/route-1/score")
        assert res.status_code == 200
        assert res.json()["score"] == 73
        assert res.json()["breakdown"]["investment_readiness"] == 11.0

    def test_resume_mid_wizard(self):
        _start()
        _walk_to("route-1", 6)
        res = client.get("/assessment/sessions/route-1")
        assert res.status_code == 200
        data = res.json()
        assert data["current_step"] == 6
        assert data["answers"]["differentiation"] == "different_problem"

    def test_step_one_records_lead_id(self):
        _start()
        with patch("app.routes.assessment.capture_lead_best_effort", AsyncMock(return_value="lead-9")) as capture:
            res = _answer("route-1", "startup_type", "technology", auto_advance=True)
        assert res.status_code == 200
        assert capture.await_args.args[0]["step"] == 1

        db = TestingSessionLocal()
        try:
            assert WizardStore(db).lead_id("route-1") == "lead-9"
        finally:
            db.close()


# ===================================================================== #
#  Submission                                                             #
# ===================================================================== #

class TestSubmit:
    def _ready(self):
        _start(gclid="g-77")
        data = _walk_to("route-1", 12)
        assert data["current_step"] == 12
        assert data["score"]["score"] == 73
        res = _answer("route-1", "contact", CONTACT)
        assert res.status_code == 200
        assert res.json()["answers"]["contact"]["phone"] == "+1 (616) 555-0134"

    def test_submit_success(self):
        self._ready()
        deliver = AsyncMock(return_value=SubmissionOutcome(delivered=True, path="primary"))
        with (
            patch("app.routes.assessment.submit_assessment", deliver),
            patch("app.routes.assessment.track_conversion", AsyncMock(return_value=True)),
        ):
            res = client.post("/assessment/sessions/route-1/submit")

        assert res.status_code == 200
        data = res.json()
        assert data["success"] is True
        assert data["score"] == 73
        assert data["segment"] == "DesignTech"
        assert data["delivery_path"] == "primary"
        assert data["conversion_tracked"] is True
        assert data["redirect_url"] == "/thank-you"

        payload = deliver.await_args.args[0]
        assert payload["phone"] == "+16165550134"
        assert payload["gclid"] == "g-77"
        assert payload["score"] == 73

        state = client.get("/assessment/sessions/route-1").json()
        assert state["stage"] == "submitted"
        assert _answer("route-1", "contact", {"first_name": "Grace"}).status_code == 409

    def test_submit_through_webhook_fallback(self, monkeypatch):
        self._ready()
        monkeypatch.setenv("ASSESSMENT_WEBHOOK_URL", WEBHOOK_URL)
        post = AsyncMock()
        with patch("app.services.submission_service.post_json", post):
            res = client.post("/assessment/sessions/route-1/submit")

        assert res.status_code == 200
        assert res.json()["delivery_path"] == "fallback"
        assert res.json()["conversion_tracked"] is False
        url, body = post.await_args.args[:2]
        assert url == WEBHOOK_URL
        assert body["fallback"] is True

    def test_submit_failure_keeps_answers(self):
        self._ready()
        res = client.post("/assessment/sessions/route-1/submit")
        assert res.status_code == 502

        state = client.get("/assessment/sessions/route-1").json()
        assert state["stage"] == "question"
        assert state["current_step"] == 12
        assert state["answers"]["contact"]["email"] == "ada@example.com"

    def test_consent_string_rejected(self):
        self._ready()
        res = _answer("route-1", "contact", {**CONTACT, "consent": "yes"})
        assert res.status_code == 422
        assert res.json()["detail"]["step"] == 12
        assert "consent" in res.json()["detail"]["errors"]

    def test_submit_invalid_contact(self):
        self._ready()
        _answer("route-1", "contact", {"email": "not-an-email"})
        res = client.post("/assessment/sessions/route-1/submit")
        assert res.status_code == 422
        assert res.json()["detail"]["step"] == 12
        assert "email" in res.json()["detail"]["errors"]

    def test_submit_before_final_step(self):
        _start()
        _walk_to("route-1", 4)
        assert client.post("/assessment/sessions/route-1/submit").status_code == 409

    def test_custom_thank_you_url(self, monkeypatch):
        self._ready()
        monkeypatch.setenv("THANK_YOU_URL", "https://example.test/thanks")
        with patch(
            "app.routes.assessment.submit_assessment",
            AsyncMock(return_value=SubmissionOutcome(delivered=True, path="fallback")),
        ):
            res = client.post("/assessment/sessions/route-1/submit")
        assert res.json()["redirect_url"] == "https://example.test/thanks"


# ===================================================================== #
#  Quick intake                                                           #
# ===================================================================== #

QUICK_INTAKE = {
    "full_name": "Ada Lovelace",
    "email": "ada@example.com",
    "phone": "6165550134",
    "consent": True,
    "project_type": "saas",
    "budget_range": "25k-50k",
    "project_description": "A scheduling tool for independent physical therapists.",
    "nda_agreement": True,
}


class TestQuickIntake:
    def test_valid_intake(self):
        res = client.post("/leads/quick-intake", json=QUICK_INTAKE)
        assert res.status_code == 201
        data = res.json()
        assert data["success"] is True
        assert data["session_id"]
        assert data["lead_id"] is None

    def test_lead_forwarded(self, monkeypatch):
        monkeypatch.setenv("SUBMIT_LEAD_URL", "https://functions.example.test/submit-lead")
        with patch("app.routes.leads.capture_lead_best_effort", AsyncMock(return_value="lead-3")) as capture:
            res = client.post("/leads/quick-intake", json={**QUICK_INTAKE, "session_id": "qi-1"})

        assert res.json()["lead_id"] == "lead-3"
        payload = capture.await_args.args[0]
        assert payload["session_id"] == "qi-1"
        assert payload["phone"] == "+1 (616) 555-0134"
        assert payload["step"] == 3

    @pytest.mark.parametrize(
        "override",
        [
            {"consent": False},
            {"consent": "yes"},
            {"consent": 1},
            {"nda_agreement": False},
            {"nda_agreement": "true"},
            {"email": "ada"},
            {"email": "a..b@example.com"},
            {"phone": "555-0134"},
            {"project_type": "spaceship"},
            {"budget_range": "priceless"},
            {"project_description": "too short"},
        ],
    )
    def test_invalid_intake(self, override):
        res = client.post("/leads/quick-intake", json={**QUICK_INTAKE, **override})
        assert res.status_code == 422
