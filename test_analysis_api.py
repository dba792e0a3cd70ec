#!/usr/bin/env python3
"""
HTTP API 테스트 (FastAPI TestClient)
"""

import os
import sys

import pytest
from fastapi.testclient import TestClient

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.config.scoring_config import Concerns, SkinTraits
from app.main import app
from app.services.catalog_service import JsonCatalogStore
from app.services.personalization_engine import (
    PersonalizationService, InMemoryAnalysisHistoryLog
)
from app.services.profile_repository import InMemoryProfileRepository
from app.services.questionnaire_wizard import WizardSessionManager
from app.utils.time_tracker import TimeTracker

FALLBACK_FILE = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "app", "data", "products_fallback.json"
)

OILY_PAYLOAD = {
    "scale_answers": {
        "oiliness": 8, "dryness": 2, "sensitivity": 3, "breakouts": 7,
        "aging_signs": 1, "pore_size": 7, "pigmentation": 2
    },
    "selected_concerns": [Concerns.ACNE, Concerns.LARGE_PORES],
    "profile_key": "user-42"
}

@pytest.fixture
def client():
    with TestClient(app) as test_client:
        # DB 없이 JSON 카탈로그 + 메모리 저장소 사용
        catalog = JsonCatalogStore(FALLBACK_FILE)
        app.state.catalog_store = catalog
        app.state.personalization_service = PersonalizationService(
            catalog_store=catalog,
            profile_repository=InMemoryProfileRepository(),
            history_log=InMemoryAnalysisHistoryLog()
        )
        app.state.wizard_sessions = WizardSessionManager()
        yield test_client

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

def test_analysis_returns_profile_and_caches_it(client):
    response = client.post("/api/v1/analysis", json=OILY_PAYLOAD)

    assert response.status_code == 200
    body = response.json()
    assert body["skin_type"]["type"] == "oily"
    names = [rec["name"] for rec in body["ingredient_recommendations"]]
    assert "Salicylic Acid" in names and "Niacinamide" in names
    assert "BHA treatment" in [step["step_name"] for step in body["routine"]["evening"]]
    assert body["products_enriched"] is True
    assert body["product_matches"][0]["name"] == "Exfoliating Toner"

    cached = client.get("/api/v1/analysis/profiles/user-42")
    assert cached.status_code == 200
    assert cached.json() == body

def test_analysis_with_empty_body_uses_defaults(client):
    response = client.post("/api/v1/analysis", json={})

    assert response.status_code == 200
    assert response.json()["skin_type"]["type"] == "normal"

def test_analysis_rejects_out_of_range_scale(client):
    response = client.post("/api/v1/analysis", json={"scale_answers": {"oiliness": 12}})

    assert response.status_code == 422

def test_analysis_rejects_duplicate_concerns(client):
    response = client.post(
        "/api/v1/analysis", json={"selected_concerns": [Concerns.ACNE, Concerns.ACNE]}
    )

    assert response.status_code == 422

def test_unknown_profile_is_404(client):
    response = client.get("/api/v1/analysis/profiles/nobody")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "HTTP_404"

def test_wizard_flow(client):
    started = client.post("/api/v1/analysis/sessions")
    assert started.status_code == 201
    session_id = started.json()["session_id"]
    assert started.json()["current_step"]["kind"] == "scale"

    answers = [
        {trait: 6 for trait in SkinTraits.ALL},
        [Concerns.FINE_LINES],
        ["Dry climate"],
        "40-49",
        ["Minimal routine"],
        ["Prevent aging"],
        ["No preference"],
    ]
    for value in answers:
        answered = client.post(f"/api/v1/analysis/sessions/{session_id}/answers", json={"value": value})
        assert answered.status_code == 200
        assert answered.json()["can_proceed"] is True
        advanced = client.post(f"/api/v1/analysis/sessions/{session_id}/next")
        assert advanced.status_code == 200

    final = advanced.json()
    assert final["state"] == "complete"
    assert final["profile"]["concern_priority"]["ranked"][0]["label"] == Concerns.FINE_LINES

    state = client.get(f"/api/v1/analysis/sessions/{session_id}").json()
    assert state["state"] == "complete"
    cached = client.get(f"/api/v1/analysis/profiles/{session_id}")
    assert cached.status_code == 200

def test_wizard_next_without_answer_is_409(client):
    session_id = client.post("/api/v1/analysis/sessions").json()["session_id"]
    response = client.post(f"/api/v1/analysis/sessions/{session_id}/next")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "WIZARD_TRANSITION_INVALID"

def test_wizard_invalid_answer_is_422(client):
    session_id = client.post("/api/v1/analysis/sessions").json()["session_id"]
    response = client.post(
        f"/api/v1/analysis/sessions/{session_id}/answers", json={"value": ["Acne"]}
    )

    assert response.status_code == 422

def test_wizard_previous_and_unknown_session(client):
    session_id = client.post("/api/v1/analysis/sessions").json()["session_id"]
    response = client.post(f"/api/v1/analysis/sessions/{session_id}/previous")

    assert response.status_code == 200
    assert response.json()["step_index"] == 0
    assert client.get("/api/v1/analysis/sessions/missing").status_code == 404

def test_products_filtering(client):
    response = client.get(
        "/api/v1/products",
        params={"skin_type": "Oily", "sort_by": "price-low", "price_range": ["0-2500"]}
    )

    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body["products"]] == ["6", "3"]
    assert body["total"] == 2

def test_products_invalid_sort_is_422(client):
    assert client.get("/api/v1/products", params={"sort_by": "newest"}).status_code == 422
    assert client.get("/api/v1/products", params={"price_range": "cheap"}).status_code == 422

def test_wizard_duplicate_selection_is_422(client):
    session_id = client.post("/api/v1/analysis/sessions").json()["session_id"]
    client.post(
        f"/api/v1/analysis/sessions/{session_id}/answers",
        json={"value": {trait: 5 for trait in SkinTraits.ALL}}
    )
    client.post(f"/api/v1/analysis/sessions/{session_id}/next")
    response = client.post(
        f"/api/v1/analysis/sessions/{session_id}/answers",
        json={"value": [Concerns.ACNE, Concerns.ACNE]}
    )

    assert response.status_code == 422

def test_time_tracker_metrics_dict():
    tracker = TimeTracker("unit").start()
    tracker.step("analysis")
    metrics = tracker.finish().to_dict()

    assert set(metrics) == {"total_ms", "analysis_ms"}
    assert metrics["total_ms"] >= metrics["analysis_ms"] >= 0
