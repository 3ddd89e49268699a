"""
Integration tests for the HTTP API.

Most tests inject in-memory services. Word deletion runs against a
SQLite file so the cascade to progress and history is real.
"""

import pytest
from fastapi.testclient import TestClient

from wordwise.api import create_app
from wordwise.bootstrap import Services, build_services
from wordwise.config import Settings
from wordwise.core.errors import StorageError
from wordwise.repository import InMemoryProgressRepository
from wordwise.service import ProgressService
from wordwise.stats import StatsAggregator

ALICE = {"X-User-Id": "alice"}


def _services(catalog, repository, clock) -> Services:
    return Services(
        catalog=catalog,
        repository=repository,
        progress=ProgressService(repository, clock=clock),
        stats=StatsAggregator(repository, catalog),
    )


@pytest.fixture
def client(catalog, memory_repo, clock):
    app = create_app(_services(catalog, memory_repo, clock))
    with TestClient(app) as test_client:
        yield test_client


def _attempt(client, item_id=1, headers=ALICE, **overrides):
    body = {"item_id": item_id, "question_type": "mcq", "is_correct": True, "confidence": 5}
    body.update(overrides)
    return client.post("/api/student/attempts", json=body, headers=headers)


class TestHealth:
    def test_health_without_database(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestWords:
    def test_list_words(self, client):
        response = client.get("/api/words")
        assert response.status_code == 200
        assert [w["term"] for w in response.json()][:2] == ["Diligent", "Ephemeral"]

    def test_get_word(self, client):
        assert client.get("/api/words/3").json()["term"] == "Benevolent"
        assert client.get("/api/words/999").status_code == 404

    def test_create_word(self, client):
        response = client.post(
            "/api/words", json={"term": "Laconic", "definition": "Using very few words."}
        )
        assert response.status_code == 201
        assert response.json()["id"] == 7
        assert response.json()["status"] == "Active"

    def test_update_word_partial(self, client):
        response = client.put("/api/words/2", json={"definition": "Short-lived.", "status": "Retired"})

        assert response.status_code == 200
        body = response.json()
        assert body["term"] == "Ephemeral"
        assert body["definition"] == "Short-lived."
        assert body["status"] == "Retired"
        assert client.get("/api/words/2").json()["definition"] == "Short-lived."

    def test_retired_word_leaves_queue(self, client):
        client.put("/api/words/1", json={"status": "Retired"})

        queue = client.get("/api/student/queue", headers=ALICE).json()
        assert [e["word"]["id"] for e in queue] == [2, 3, 4, 5]

    def test_update_missing_word(self, client):
        response = client.put("/api/words/999", json={"term": "Ghost"})
        assert response.status_code == 404

    def test_update_rejects_empty_term(self, client):
        response = client.put("/api/words/2", json={"term": ""})
        assert response.status_code == 400
        assert response.json()["field"] == "term"

    def test_delete_word(self, client):
        assert client.delete("/api/words/4").status_code == 204
        assert client.get("/api/words/4").status_code == 404
        assert client.delete("/api/words/4").status_code == 204

    def test_word_id_beyond_storage_range(self, client):
        assert client.get(f"/api/words/{2**63}").status_code == 400


class TestStudent:
    def test_queue_requires_user(self, client):
        assert client.get("/api/student/queue").status_code == 401

    def test_queue_then_attempt(self, client):
        queue = client.get("/api/student/queue", headers=ALICE).json()
        assert [e["word"]["id"] for e in queue] == [1, 2, 3, 4, 5]
        assert all(e["progress"] is None for e in queue)

        response = _attempt(client, item_id=1)
        assert response.status_code == 200
        progress = response.json()
        assert progress["user_id"] == "alice"
        assert progress["level"] == 1
        assert progress["consecutive_correct"] == 1

        queue = client.get("/api/student/queue", headers=ALICE).json()
        assert 1 not in [e["word"]["id"] for e in queue]

    def test_attempt_out_of_range_confidence(self, client, memory_repo):
        response = _attempt(client, confidence=7)

        assert response.status_code == 400
        assert response.json()["field"] == "confidence"
        assert memory_repo.list_all() == []

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"is_correct": "yes"}, "is_correct"),
            ({"confidence": "5"}, "confidence"),
            ({"item_id": "1"}, "item_id"),
            ({"confidence": 4.0}, "confidence"),
        ],
    )
    def test_attempt_wrong_json_types(self, client, memory_repo, overrides, field):
        response = _attempt(client, **overrides)

        assert response.status_code == 400
        assert response.json()["field"] == field
        assert memory_repo.list_all() == []

    def test_attempt_item_id_beyond_storage_range(self, client):
        response = _attempt(client, item_id=2**63)

        assert response.status_code == 400
        assert response.json()["field"] == "item_id"

    def test_attempt_missing_field(self, client):
        response = client.post(
            "/api/student/attempts",
            json={"question_type": "mcq", "is_correct": True, "confidence": 3},
            headers=ALICE,
        )
        assert response.status_code == 400
        assert response.json()["field"] == "item_id"

    def test_attempt_unknown_word(self, client):
        response = _attempt(client, item_id=404)
        assert response.status_code == 404

    def test_attempt_requires_user(self, client):
        assert _attempt(client, headers={}).status_code == 401

    def test_progress_and_history(self, client, clock):
        _attempt(client, item_id=2, confidence=4)
        clock.advance(minutes=1)
        _attempt(client, item_id=2, is_correct=False, confidence=1, response_time_sec=9)

        progress = client.get("/api/student/progress", headers=ALICE).json()
        assert len(progress) == 1
        assert progress[0]["word"]["term"] == "Ephemeral"
        assert progress[0]["progress"]["total_attempts"] == 2
        assert progress[0]["progress"]["total_correct"] == 1

        history = client.get("/api/student/history", headers=ALICE).json()
        assert [h["is_correct"] for h in history] == [False, True]
        assert history[0]["response_time_sec"] == 9

        limited = client.get("/api/student/history?limit=1&item_id=2", headers=ALICE).json()
        assert len(limited) == 1

    @pytest.mark.parametrize("limit", ["0", "-1", "501"])
    def test_history_limit_out_of_range(self, client, limit):
        for confidence in (3, 4, 5):
            _attempt(client, confidence=confidence)

        response = client.get(f"/api/student/history?limit={limit}", headers=ALICE)

        assert response.status_code == 400
        assert response.json()["field"] == "limit"


class TestTeacher:
    def test_dashboard_and_students(self, client):
        _attempt(client, item_id=1)
        _attempt(client, item_id=2, headers={"X-User-Id": "bob"}, is_correct=False, confidence=0)

        dashboard = client.get("/api/teacher/dashboard").json()["system_stats"]
        assert dashboard["total_words"] == 6
        assert dashboard["total_attempts"] == 2
        assert dashboard["level_counts"]["1"] == 2

        students = client.get("/api/teacher/students").json()
        assert [s["user_id"] for s in students] == ["alice", "bob"]
        assert students[0]["accuracy"] == 100.0
        assert students[1]["accuracy"] == 0.0


@pytest.fixture
def sql_client(tmp_path, clock):
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'api.db'}", _env_file=None)
    services = build_services(settings, clock=clock)
    services.catalog.seed_defaults()
    with TestClient(create_app(services)) as test_client:
        yield test_client
    services.close()


class TestWordDeletionOnDatabase:
    def test_delete_removes_progress_and_history(self, sql_client):
        assert _attempt(sql_client, item_id=3).status_code == 200
        assert _attempt(sql_client, item_id=5).status_code == 200

        assert sql_client.delete("/api/words/3").status_code == 204

        progress = sql_client.get("/api/student/progress", headers=ALICE).json()
        assert [p["word"]["id"] for p in progress] == [5]
        history = sql_client.get("/api/student/history", headers=ALICE).json()
        assert [h["item_id"] for h in history] == [5]
        assert sql_client.get("/api/teacher/dashboard").json()["system_stats"]["total_attempts"] == 1


class BrokenRepository(InMemoryProgressRepository):
    def _commit(self, record, logs):
        raise StorageError("database is locked")


class TestStorageFailure:
    def test_storage_error_maps_to_503(self, catalog, clock):
        repository = BrokenRepository(catalog)
        with TestClient(create_app(_services(catalog, repository, clock))) as client:
            response = _attempt(client)

        assert response.status_code == 503
        assert "nothing was saved" in response.json()["message"]
        assert repository.list_all() == []
