from __future__ import annotations


def test_preserves_incoming_request_id_header(client):
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client):
    resp = client.get("/api/hubeau", params={"action": "ping"})

    assert resp.status_code == 200
    generated = resp.headers.get("X-Request-ID")
    assert generated
    assert len(generated) > 0

    duration = resp.headers.get("X-Request-Duration-ms")
    assert duration is not None


def test_error_responses_carry_request_id(client):
    resp = client.get("/api/hubeau", params={"action": "communes"}, headers={"X-Request-ID": "req-400"})

    assert resp.status_code == 400
    assert resp.headers.get("X-Request-ID") == "req-400"


def test_health_reports_cache_counters(client, fake_upstream):
    fake_upstream.respond_json([{"nom": "Paris"}])
    client.get("/api/hubeau", params={"action": "communes", "postal": "75001"})
    client.get("/api/hubeau", params={"action": "communes", "postal": "75001"})

    resp = client.get("/health")

    assert resp.json()["status"] == "ok"
    assert resp.json()["cache"]["entries"] == 1
    assert resp.json()["cache"]["hits"] == 1
