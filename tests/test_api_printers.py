from typing import List

import pytest

from print_dispatch import create_app
from print_dispatch.printing.probe import LIST_PROBE_TIMEOUT


@pytest.fixture
def client(write_printers):
    write_printers(
        [
            {"id": "P1", "name": "Counter", "enabled": True, "connection": {"ip": "10.0.0.5", "port": 9100}},
            {"id": "P2", "enabled": False, "connection": {"ip": "10.0.0.6", "port": 9101}, "location": "Back"},
        ]
    )
    app = create_app({"SERVER_ID": "srv-test"})
    app.config.update(TESTING=True)
    return app.test_client()


def test_list_printers_with_online_flags(client, monkeypatch):
    calls: List[tuple] = []

    def _probe_many(printers, timeout):
        calls.append(([p.id for p in printers], timeout))
        return [True, False]

    import print_dispatch.web.printers as printers_mod

    monkeypatch.setattr(printers_mod, "probe_many", _probe_many)

    r = client.get("/api/printers")
    assert r.status_code == 200
    body = r.get_json()
    assert calls == [(["P1", "P2"], LIST_PROBE_TIMEOUT)]
    assert [(p["id"], p["online"]) for p in body["printers"]] == [("P1", True), ("P2", False)]
    assert body["printers"][0]["connection"] == {"ip": "10.0.0.5", "port": 9100}
    assert body["printers"][1]["enabled"] is False
    assert body["printers"][1]["location"] == "Back"


def test_list_printers_empty(config_dir):
    app = create_app({"SERVER_ID": "srv-test"})
    r = app.test_client().get("/api/printers")
    assert r.status_code == 200
    assert r.get_json() == {"printers": []}


def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    body = r.get_json()
    assert body["status"] == "ok"
    assert body["server_id"] == "srv-test"
    assert body["auth_enabled"] is False
    assert body["printers_configured"] == 2
    assert body["printers_enabled"] == 1


def test_healthz_degraded_without_printers(config_dir):
    app = create_app()
    body = app.test_client().get("/healthz").get_json()
    assert body["status"] == "degraded"
    assert body["reason"] == "no_printers"
    assert body["server_id"] == (config_dir / "server.id").read_text(encoding="utf-8")


def test_cors_headers_present(client, monkeypatch):
    import print_dispatch.web.printers as printers_mod

    monkeypatch.setattr(printers_mod, "probe_many", lambda printers, timeout: [False] * len(printers))
    r = client.get("/api/printers", headers={"Origin": "http://pos.local"})
    assert r.headers.get("Access-Control-Allow-Origin") in ("*", "http://pos.local")


def test_list_printers_echoes_entries_as_stored(write_printers, monkeypatch):
    stored = {"id": "P3", "enabled": True, "connection": {"ip": "10.0.0.7"}}
    write_printers([stored])
    import print_dispatch.web.printers as printers_mod

    monkeypatch.setattr(printers_mod, "probe_many", lambda printers, timeout: [True] * len(printers))
    app = create_app({"SERVER_ID": "srv-test"})
    body = app.test_client().get("/api/printers").get_json()
    assert body["printers"] == [{**stored, "online": True}]
