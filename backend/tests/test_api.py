import json

import telemetry
from languages import Lang, closing_line, fallback_text
from simhash import fingerprint
from similarity_store import ReadingEntry


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert "version" in client.get("/").json()


def test_generate_end_to_end(client, store):
    r = client.post("/v1/readings/generate", json={"user_id": "u1", "symbols": ["cup"], "lang": "en"})

    assert r.status_code == 200
    assert "charset=utf-8" in r.headers["content-type"]
    text = r.json()["text"]
    lines = text.split("\n")
    assert lines[0] == "Fincandan görülenler"
    assert len(lines) == 3 and lines[1].startswith("• Cup:")
    assert lines[2] == closing_line(Lang.EN)

    [entry] = store.recent_entries("u1")
    assert entry.symbol_perm == "cup"
    assert entry.text_hash == fingerprint(text)


def test_defaults_to_turkish(client):
    r = client.post("/v1/readings/generate", json={"user_id": "u1", "symbols": ["moon"]})
    assert r.json()["text"].endswith(closing_line(Lang.TR))


def test_repeat_request_gets_fallback(client):
    body = {"user_id": "u1", "symbols": ["cup"], "lang": "id"}
    client.post("/v1/readings/generate", json=body)
    r = client.post("/v1/readings/generate", json=body)
    assert r.status_code == 200
    assert r.json() == {"text": fallback_text(Lang.ID)}


def test_empty_symbols_is_client_error(client, store):
    r = client.post("/v1/readings/generate", json={"user_id": "u1", "symbols": []})
    assert r.status_code == 400
    assert r.json() == {"detail": "missing user_id or symbols"}
    assert store.recent_entries("u1") == []


def test_missing_user_is_client_error(client):
    r = client.post("/v1/readings/generate", json={"symbols": ["cup"]})
    assert r.status_code == 400


def test_malformed_body_is_client_error(client):
    r = client.post("/v1/readings/generate", json={"user_id": "u1", "symbols": "cup"})
    assert r.status_code == 400
    assert r.json() == {"detail": "invalid request body"}

    r = client.post(
        "/v1/readings/generate", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert r.status_code == 400


def test_internal_fault_is_generic_500(client, generator, store, monkeypatch):
    def boom(*args, **kwargs):
        raise KeyError("secret internal detail")

    monkeypatch.setattr(generator.catalog, "lookup", boom)
    r = client.post("/v1/readings/generate", json={"user_id": "u1", "symbols": ["cup"]})

    assert r.status_code == 500
    assert r.json() == {"detail": "internal_error"}
    assert "secret" not in r.text
    assert store.recent_entries("u1") == []

    monkeypatch.undo()
    r = client.post("/v1/readings/generate", json={"user_id": "u1", "symbols": ["cup"]})
    assert r.status_code == 200


def test_history_endpoint(client):
    client.post("/v1/readings/generate", json={"user_id": "u1", "symbols": ["moon", "cup"]})
    data = client.get("/v1/readings/history/u1").json()

    assert data["count"] == 1
    [item] = data["entries"]
    assert item["symbol_perm"] == "cup>moon"
    assert len(item["text_hash"]) == 16

    assert client.get("/v1/readings/history/nobody").json()["entries"] == []


def test_telemetry_summary_endpoint(client):
    data = client.get("/v1/readings/telemetry/summary").json()
    assert data["status"] == "ok"
    assert data["telemetry_enabled"] is False


def test_history_limit_defaults_to_max_recent(client, store, generator):
    for i in range(20):
        store.record_reading("u9", ReadingEntry(i, i, "cup"))

    data = client.get("/v1/readings/history/u9").json()
    assert data["count"] == generator.config.max_recent
    assert data["entries"][-1]["created_at"] == 19

    assert client.get("/v1/readings/history/u9?limit=3").json()["count"] == 3


def test_generate_writes_hashed_user_to_telemetry(client, tmp_path, monkeypatch):
    log = tmp_path / "readings.log"
    monkeypatch.setattr(telemetry, "READING_TELEMETRY_PATH", log)
    monkeypatch.setenv("READING_TELEMETRY_ENABLED", "1")

    client.post("/v1/readings/generate", json={"user_id": "alice@example.com", "symbols": ["cup"]})

    raw = log.read_text(encoding="utf-8")
    assert "alice@example.com" not in raw
    line = json.loads(raw.splitlines()[0])
    assert line["event"] == "reading_accepted"
    assert line["user_hash"] == telemetry.user_hash("alice@example.com")
