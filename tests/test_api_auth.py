import json
from typing import Any, Dict, List

import pytest

from print_dispatch import create_app


@pytest.fixture
def submitted(monkeypatch):
    jobs: List[Dict[str, Any]] = []
    import print_dispatch.web.dispatch as dispatch

    monkeypatch.setattr(dispatch, "submit_job", lambda printer, body, job_id=None: jobs.append(body))
    return jobs


@pytest.fixture
def setup_files(write_printers, write_clients):
    write_printers([{"id": "P1", "enabled": True, "connection": {"ip": "10.0.0.5", "port": 9100}}])
    write_clients(
        {
            "clients": [
                {"id": "pos1", "pin": "1234", "enabled": True},
                {"id": "pos2", "pin": "5678", "enabled": False},
            ]
        }
    )


def _client(enable_auth: bool):
    app = create_app({"SERVER_ID": "srv-test", "ENABLE_AUTH": enable_auth})
    app.config.update(TESTING=True)
    return app.test_client()


def _post(client, headers):
    h = {"Content-Type": "application/json", "X-Printer-Id": "P1"}
    h.update(headers)
    return client.post("/print", data=json.dumps({"text": "Hello"}), headers=h)


def test_auth_disabled_passes_through(setup_files, submitted):
    r = _post(_client(False), {})
    assert r.status_code == 200
    assert len(submitted) == 1


def test_missing_credentials_401(setup_files, submitted):
    client = _client(True)
    r = _post(client, {})
    assert r.status_code == 401
    assert r.get_json() == {"error": "Client auth required"}
    r = _post(client, {"X-Client-Id": "pos1"})
    assert r.status_code == 401
    assert submitted == []


@pytest.mark.parametrize(
    "headers",
    [
        {"X-Client-Id": "pos1", "X-Print-Key": "0000"},
        {"X-Client-Id": "pos2", "X-Print-Key": "5678"},
        {"X-Client-Id": "ghost", "X-Print-Key": "1234"},
    ],
)
def test_invalid_or_disabled_client_403(setup_files, submitted, headers):
    r = _post(_client(True), headers)
    assert r.status_code == 403
    assert r.get_json() == {"error": "Invalid client"}
    assert submitted == []


def test_valid_client_accepted(setup_files, submitted):
    r = _post(_client(True), {"X-Client-Id": "pos1", "X-Print-Key": "1234"})
    assert r.status_code == 200
    assert r.get_json()["printer"] == "P1"


def test_auth_runs_before_printer_lookup(setup_files, submitted):
    client = _client(True)
    r = client.post("/print", data=json.dumps({"text": "x"}), headers={"Content-Type": "application/json"})
    assert r.status_code == 401


def test_auth_flag_from_environment(setup_files, submitted, monkeypatch):
    monkeypatch.setenv("PRINTDISPATCH_ENABLE_AUTH", "true")
    app = create_app({"SERVER_ID": "srv-test"})
    r = _post(app.test_client(), {})
    assert r.status_code == 401


def test_plain_enable_auth_env_turns_gate_on(setup_files, submitted, monkeypatch):
    monkeypatch.setenv("ENABLE_AUTH", "true")
    app = create_app({"SERVER_ID": "srv-test"})
    r = _post(app.test_client(), {})
    assert r.status_code == 401
    assert submitted == []
