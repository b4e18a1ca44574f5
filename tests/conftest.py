# Ensure the repository root is on sys.path so `print_dispatch` can be imported in tests.

import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest


def _ensure_repo_root_on_syspath() -> None:
    # This file lives at: <repo_root>/tests/conftest.py
    here = Path(__file__).resolve()
    repo_str = str(here.parent.parent)
    if repo_str not in sys.path:
        sys.path.insert(0, repo_str)


_ensure_repo_root_on_syspath()


class RecordingSink:
    """PrinterSink fake that records every primitive as a tuple."""

    def __init__(self, fail_on: str | None = None):
        self.calls: List[tuple] = []
        self.fail_on = fail_on

    def _rec(self, *call):
        self.calls.append(call)
        if self.fail_on == call[0]:
            raise RuntimeError(f"{call[0]} failed")

    def align_left(self):
        self._rec("align_left")

    def align_center(self):
        self._rec("align_center")

    def align_right(self):
        self._rec("align_right")

    def bold(self, on=True):
        self._rec("bold", on)

    def println(self, text=""):
        self._rec("println", text)

    def new_line(self):
        self._rec("new_line")

    def draw_line(self, char="-"):
        self._rec("draw_line", char)

    def table_row(self, cells):
        self._rec("table_row", tuple(cells))

    def left_right(self, left, right):
        self._rec("left_right", left, right)

    def print_image(self, path):
        self._rec("print_image", path)

    def print_qr(self, data, size=6, correction="M"):
        self._rec("print_qr", data, size, correction)

    def cut(self):
        self._rec("cut")

    def beep(self):
        self._rec("beep")

    def execute(self):
        self._rec("execute")

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def sink_class():
    return RecordingSink


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Empty config directory wired in through PRINTDISPATCH_CONFIG_DIR."""
    monkeypatch.setenv("PRINTDISPATCH_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("PRINTDISPATCH_ENABLE_AUTH", raising=False)
    monkeypatch.delenv("ENABLE_AUTH", raising=False)
    return tmp_path


@pytest.fixture
def write_printers(config_dir):
    def _write(printers: List[Dict[str, Any]]) -> Path:
        path = config_dir / "printer.json"
        path.write_text(json.dumps({"printers": printers}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_clients(config_dir):
    def _write(clients: Any) -> Path:
        path = config_dir / "clients.json"
        path.write_text(json.dumps(clients), encoding="utf-8")
        return path

    return _write
