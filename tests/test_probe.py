import socket
import time

import pytest

from print_dispatch.core.config import PrinterConfig
from print_dispatch.printing.probe import is_online, probe_many


@pytest.fixture
def listening_port():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(8)
    try:
        yield srv.getsockname()[1]
    finally:
        srv.close()


@pytest.fixture
def closed_port():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


def _printer(pid: str, port: int) -> PrinterConfig:
    return PrinterConfig.model_validate({"id": pid, "enabled": True, "connection": {"ip": "127.0.0.1", "port": port}})


def test_online_when_port_accepts(listening_port):
    assert is_online("127.0.0.1", listening_port, timeout=1.0) is True


def test_offline_when_connection_refused(closed_port):
    assert is_online("127.0.0.1", closed_port, timeout=1.0) is False


@pytest.mark.parametrize("ip,port", [("not a host name", 9100), ("127.0.0.1", "abc"), ("127.0.0.1", 70000)])
def test_offline_for_bad_addresses(ip, port):
    assert is_online(ip, port, timeout=0.5) is False


def test_unanswered_connect_resolves_within_timeout(monkeypatch):
    def _hang(address, timeout=None):
        time.sleep(timeout)
        raise socket.timeout("timed out")

    monkeypatch.setattr(socket, "create_connection", _hang)
    started = time.monotonic()
    assert is_online("10.255.255.1", 9100, timeout=0.2) is False
    assert time.monotonic() - started < 1.0


def test_probe_many_keeps_input_order(listening_port, closed_port):
    printers = [_printer("a", closed_port), _printer("b", listening_port), _printer("c", closed_port)]
    assert probe_many(printers, timeout=1.0) == [False, True, False]


def test_probe_many_empty():
    assert probe_many([]) == []
