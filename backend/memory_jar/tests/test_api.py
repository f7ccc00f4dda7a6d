"""HTTP tests for /memories."""

import json

import pytest

import memory_jar.routes.memories as memories_routes
from memory_jar.errors import TransientStoreError


def save(client, headers, **body):
    return client.post("/memories", json=body, headers=headers)


class TestList:
    def test_unauthenticated(self, client):
        r = client.get("/memories")
        assert r.status_code == 401
        assert r.json() == {"error": "Unauthorized"}

    def test_bad_token(self, client):
        r = client.get("/memories", headers={"Authorization": "Bearer nope.nope"})
        assert r.status_code == 401

    def test_lists_own_records_newest_first(self, client, alice_headers, bob_headers):
        save(client, alice_headers, date="2024-01-01", mood="happy", note="one")
        save(client, alice_headers, date="2024-01-03", mood="calm", note="three")
        save(client, bob_headers, date="2024-01-02", mood="sad", note="bob")

        r = client.get("/memories", headers=alice_headers)
        assert r.status_code == 200
        memories = r.json()["memories"]
        assert [m["note"] for m in memories] == ["three", "one"]
        assert set(memories[0]) == {"id", "ownerId", "date", "note", "mood", "imageUrl", "createdAt", "updatedAt"}

    def test_lookup_by_date(self, client, alice_headers, bob_headers):
        save(client, alice_headers, date="2024-01-01", mood="happy", note="one")
        save(client, alice_headers, date="2024-01-03", mood="calm", note="three")
        save(client, bob_headers, date="2024-01-02", mood="sad", note="bob")

        r = client.get("/memories", params={"date": "2024-01-03"}, headers=alice_headers)
        assert r.status_code == 200
        assert [m["note"] for m in r.json()["memories"]] == ["three"]

        r = client.get("/memories", params={"date": "2024-01-02"}, headers=alice_headers)
        assert r.json()["memories"] == []

    def test_lookup_by_bad_date(self, client, alice_headers):
        r = client.get("/memories", params={"date": "tomorrow"}, headers=alice_headers)
        assert r.status_code == 400

    def test_public_root(self, client):
        assert client.get("/").status_code == 200
        assert client.get("/health").json() == {"status": "ok"}


class TestSave:
    def test_create_then_update(self, client, alice, alice_headers):
        r1 = save(client, alice_headers, date="2024-01-05", mood="happy", note="first")
        assert r1.status_code == 200
        m1 = r1.json()["memory"]
        assert m1["ownerId"] == alice.id
        assert m1["date"] == "2024-01-05"
        assert m1["imageUrl"] is None

        r2 = save(client, alice_headers, date="2024-01-05", mood="excited", note="second", imageUrl="data:image/png;base64,AAA")
        m2 = r2.json()["memory"]
        assert m2["id"] == m1["id"]
        assert m2["note"] == "second"
        assert m2["mood"] == "excited"
        assert m2["imageUrl"] == "data:image/png;base64,AAA"
        assert m2["createdAt"] == m1["createdAt"]

        assert len(client.get("/memories", headers=alice_headers).json()["memories"]) == 1

    def test_note_optional(self, client, alice_headers):
        r = save(client, alice_headers, date="2024-01-05", mood="neutral")
        assert r.status_code == 200
        assert r.json()["memory"]["note"] == ""

    def test_owner_in_body_is_ignored(self, client, alice, bob, alice_headers):
        r = save(client, alice_headers, date="2024-01-05", mood="happy", ownerId=bob.id, userId=bob.id)
        assert r.json()["memory"]["ownerId"] == alice.id

    @pytest.mark.parametrize(
        "body, message",
        [
            ({"date": "2024-01-05"}, "Date and mood are required"),
            ({"mood": "happy"}, "Date and mood are required"),
            ({"date": "2024-01-05", "mood": "grumpy"}, "Invalid mood"),
            ({"date": "05/01/2024", "mood": "happy"}, "Invalid date"),
        ],
    )
    def test_validation(self, client, alice_headers, body, message):
        r = client.post("/memories", json=body, headers=alice_headers)
        assert r.status_code == 400
        assert message in r.json()["error"]
        assert client.get("/memories", headers=alice_headers).json()["memories"] == []

    def test_unauthenticated(self, client):
        r = client.post("/memories", json={"date": "2024-01-05", "mood": "happy"})
        assert r.status_code == 401

    def test_unreadable_body_is_413(self, client, alice_headers):
        r = client.post(
            "/memories",
            content=b"{not json",
            headers={**alice_headers, "Content-Type": "application/json"},
        )
        assert r.status_code == 413

    def test_oversized_body_is_413(self, client, alice_headers, monkeypatch):
        monkeypatch.setattr(memories_routes, "MAX_BODY_BYTES", 1024)
        body = {"date": "2024-01-05", "mood": "happy", "imageUrl": "data:image/jpeg;base64," + "A" * 4096}
        r = client.post("/memories", content=json.dumps(body), headers={**alice_headers, "Content-Type": "application/json"})
        assert r.status_code == 413
        assert "smaller" in r.json()["error"]

    def test_chunked_body_over_limit_is_413(self, client, alice_headers, monkeypatch):
        monkeypatch.setattr(memories_routes, "MAX_BODY_BYTES", 1024)

        def chunks():
            yield b'{"date": "2024-01-05", "mood": "happy", "imageUrl": "'
            for _ in range(4):
                yield b"A" * 512
            yield b'"}'

        r = client.post("/memories", content=chunks(), headers={**alice_headers, "Content-Type": "application/json"})
        assert r.status_code == 413
        assert client.get("/memories", headers=alice_headers).json()["memories"] == []

    def test_chunked_body_under_limit_is_saved(self, client, alice_headers):
        def chunks():
            yield b'{"date": "2024-01-05", '
            yield b'"mood": "happy", "note": "streamed"}'

        r = client.post("/memories", content=chunks(), headers={**alice_headers, "Content-Type": "application/json"})
        assert r.status_code == 200
        assert r.json()["memory"]["note"] == "streamed"

    def test_store_failure_is_500_with_message(self, client, alice_headers, monkeypatch):
        def broken(*args, **kwargs):
            raise TransientStoreError()

        monkeypatch.setattr(memories_routes, "upsert_memory", broken)
        r = save(client, alice_headers, date="2024-01-05", mood="happy")
        assert r.status_code == 500
        assert "try again" in r.json()["error"]


class TestDelete:
    def test_delete(self, client, alice_headers):
        mid = save(client, alice_headers, date="2024-01-05", mood="happy").json()["memory"]["id"]
        r = client.delete("/memories", params={"id": mid}, headers=alice_headers)
        assert r.status_code == 200
        assert r.json() == {"success": True}
        assert client.get("/memories", headers=alice_headers).json()["memories"] == []

    def test_missing_id(self, client, alice_headers):
        r = client.delete("/memories", headers=alice_headers)
        assert r.status_code == 400
        assert r.json()["error"] == "Memory ID is required"

    def test_not_found(self, client, alice_headers):
        r = client.delete("/memories", params={"id": "nope"}, headers=alice_headers)
        assert r.status_code == 404

    def test_cannot_delete_others(self, client, alice_headers, bob_headers):
        mid = save(client, alice_headers, date="2024-01-05", mood="happy").json()["memory"]["id"]
        r = client.delete("/memories", params={"id": mid}, headers=bob_headers)
        assert r.status_code == 404
        assert len(client.get("/memories", headers=alice_headers).json()["memories"]) == 1

    def test_unauthenticated(self, client):
        assert client.delete("/memories", params={"id": "x"}).status_code == 401


class TestHighlightsAndInsights:
    def test_highlights(self, client, alice_headers):
        for d in ["2024-02-15", "2024-03-13", "2024-03-14", "2024-03-15"]:
            save(client, alice_headers, date=d, mood="happy", note=d)

        r = client.get("/memories/highlights", params={"today": "2024-03-15"}, headers=alice_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["streak"] == 3
        assert data["flashback"]["date"] == "2024-02-15"
        assert data["prompt"]

    def test_highlights_without_flashback(self, client, alice_headers):
        r = client.get("/memories/highlights", params={"today": "2024-03-15"}, headers=alice_headers)
        assert r.json()["flashback"] is None
        assert r.json()["streak"] == 0

    def test_insights(self, client, alice_headers):
        save(client, alice_headers, date="2024-02-01", mood="calm", note="quiet sunday morning")
        save(client, alice_headers, date="2024-02-02", mood="calm", note="tea")
        save(client, alice_headers, date="2024-03-01", mood="sad", note="other month")

        r = client.get("/memories/insights", params={"month": 2, "year": 2024}, headers=alice_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["entries"] == 2
        assert data["words"] == 4
        assert data["moods"]["calm"] == 2
        assert data["moods"]["sad"] == 0

    def test_insights_bad_month(self, client, alice_headers):
        r = client.get("/memories/insights", params={"month": 13, "year": 2024}, headers=alice_headers)
        assert r.status_code == 400

    def test_requires_auth(self, client):
        assert client.get("/memories/highlights").status_code == 401
        assert client.get("/memories/insights").status_code == 401
