"""HTTP adapter tests: engine errors map to status codes, happy paths round-trip JSON."""

import pytest
from fastapi.testclient import TestClient

from civic_triage.main import app
from civic_triage.services.engine import get_triage_engine

from conftest import make_department, make_draft


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_triage_engine] = lambda: engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def problem_id(client):
    response = client.post("/problems", json=make_draft())
    assert response.status_code == 201
    return response.json()["id"]


class TestHealth:

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_db_health_reports_backend(self, client):
        body = client.get("/health/db").json()
        assert body["connected"] is True
        assert body["backend"] == "InMemoryProblemStore"


class TestProblems:

    def test_create(self, client):
        response = client.post("/problems", json=make_draft(municipality="  butwal "))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["location"]["municipality"] == "Butwal"
        assert body["upvote_count"] == 0

    def test_missing_field_is_400(self, client):
        draft = make_draft()
        del draft["title"]

        response = client.post("/problems", json=draft)

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"
        assert response.json()["field"] == "title"

    def test_unknown_category_is_400(self, client):
        response = client.post("/problems", json=make_draft(category="potholes"))
        assert response.status_code == 400
        assert response.json()["field"] == "category"

    def test_get_and_list(self, client, problem_id):
        assert client.get(f"/problems/{problem_id}").json()["id"] == problem_id
        assert [p["id"] for p in client.get("/problems", params={"status": "pending"}).json()] == [problem_id]
        assert client.get("/problems", params={"category": "water"}).json() == []

    def test_unknown_problem_is_404(self, client):
        response = client.get("/problems/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"

    def test_upvote_toggles(self, client, problem_id):
        headers = {"X-User-ID": "citizen-9"}

        first = client.post(f"/problems/{problem_id}/upvote", headers=headers).json()
        second = client.post(f"/problems/{problem_id}/upvote", headers=headers).json()

        assert first == {"upvoted": True, "count": 1}
        assert second == {"upvoted": False, "count": 0}

    def test_upvote_requires_user_header(self, client, problem_id):
        assert client.post(f"/problems/{problem_id}/upvote").status_code == 422

    def test_comment(self, client, problem_id):
        response = client.post(
            f"/problems/{problem_id}/comments",
            json={"text": "Same on my street"},
            headers={"X-User-ID": "citizen-2"},
        )

        assert response.status_code == 201
        assert response.json()["author_id"] == "citizen-2"
        assert len(client.get(f"/problems/{problem_id}").json()["comments"]) == 1


class TestAdmin:

    def test_resolve_then_resolve_again_is_409(self, client, engine, problem_id):
        payload = {"status": "resolved", "actor_id": "admin-1", "resolution": {"description": "Bins emptied"}}

        first = client.patch(f"/admin/problems/{problem_id}/status", json=payload)
        second = client.patch(f"/admin/problems/{problem_id}/status", json=payload)

        assert first.status_code == 200
        assert first.json()["status"] == "resolved"
        assert second.status_code == 409
        assert second.json()["error"] == "InvalidTransitionError"
        assert engine.directory.get_points("reporter-1") == 10

    def test_status_change_out_of_terminal_state_is_409_without_payload(self, client, problem_id):
        client.patch(f"/admin/problems/{problem_id}/status", json={"status": "rejected", "actor_id": "admin-1"})

        response = client.patch(
            f"/admin/problems/{problem_id}/status",
            json={"status": "resolved", "actor_id": "admin-1"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "InvalidTransitionError"

    def test_resolve_without_details_is_400(self, client, problem_id):
        response = client.patch(
            f"/admin/problems/{problem_id}/status",
            json={"status": "resolved", "actor_id": "admin-1"},
        )
        assert response.status_code == 400
        assert response.json()["field"] == "resolution"

    def test_assign_unknown_department_is_404(self, client, problem_id):
        response = client.patch(f"/admin/problems/{problem_id}/assign", json={"department_id": "nope"})
        assert response.status_code == 404

    def test_assign_and_priority(self, client, directory, problem_id):
        directory.upsert_department(make_department("dept-a"))

        assigned = client.patch(f"/admin/problems/{problem_id}/assign", json={"department_id": "dept-a"})
        prioritized = client.patch(f"/admin/problems/{problem_id}/priority", json={"priority": "high"})

        assert assigned.json()["assigned_to"] == "dept-a"
        assert assigned.json()["status"] == "pending"
        assert prioritized.json()["priority"] == "high"

    def test_stats(self, client, problem_id):
        body = client.get("/admin/stats").json()
        assert body["overview"]["total"] == 1
        assert body["by_category"]["waste"]["count"] == 1


class TestTriage:

    def test_prioritize(self, client, problem_id):
        body = client.get("/ai/prioritize", params={"limit": 5}).json()
        assert body["total_count"] == 1
        assert body["prioritized_problems"][0]["problem"]["id"] == problem_id
        assert body["prioritized_problems"][0]["priority_score"] == 6

    def test_check_duplicates(self, client, problem_id):
        body = client.post("/ai/check-duplicates", json=make_draft()).json()
        assert body["is_duplicate"] is True
        assert body["matches"][0]["problem_id"] == problem_id

    def test_predict_resolution(self, client):
        body = client.post(
            "/ai/predict-resolution",
            json={"category": "waste", "municipality": "Butwal", "priority": "critical"},
        ).json()
        assert body["predicted_days"] == 4

    def test_suggest_department_without_candidates_is_404(self, client, problem_id):
        response = client.get(f"/ai/problems/{problem_id}/suggest-department")
        assert response.status_code == 404
        assert response.json()["error"] == "NoCandidateError"

    def test_suggest_department(self, client, directory, problem_id):
        directory.upsert_department(make_department("dept-a", active_cases=3))
        directory.upsert_department(make_department("dept-b"))

        body = client.get(f"/ai/problems/{problem_id}/suggest-department").json()

        assert body["selected"]["department"]["id"] == "dept-b"
        assert [alt["department"]["id"] for alt in body["alternatives"]] == ["dept-a"]

    def test_sentiment(self, client):
        body = client.post("/ai/sentiment", json={"text": "great, thanks"}).json()
        assert body["sentiment"] == "positive"

    def test_progress_update(self, client, problem_id):
        body = client.get(f"/ai/problems/{problem_id}/progress-update").json()
        assert body["estimated_timeline"] == "Timeline being assessed"
