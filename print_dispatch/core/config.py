"""
Config utilities for Print Dispatch.

Responsibilities:
- Resolve the config directory with environment and XDG support
- Load the printer and client registries (read fresh on every call, never cached)
- Match a printer by id or alias
- Persist the server identity string
- Expose env-driven runtime settings
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

PRINTERS_FILE = "printer.json"
CLIENTS_FILE = "clients.json"
SERVER_ID_FILE = "server.id"

DEFAULT_PORT = 3000


class Connection(BaseModel):
    model_config = ConfigDict(extra="allow")

    ip: str
    port: int = 9100


class PrinterConfig(BaseModel):
    """One configured network printer. Unknown keys are kept for the listing API."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None
    enabled: bool = False
    connection: Connection

    def matches(self, ident: str) -> bool:
        key = ident.lower()
        if self.id.lower() == key:
            return True
        return self.name is not None and self.name.lower() == key


class ClientConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    pin: str = Field(default="")
    enabled: bool = False


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes")


def default_config_dir() -> str:
    """
    Resolve the default config directory using:
    1) $XDG_CONFIG_HOME/printdispatch
    2) ~/.config/printdispatch
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return str(Path(xdg) / "printdispatch")
    return str(Path.home() / ".config" / "printdispatch")


def get_config_dir() -> str:
    """
    Return the config directory honoring PRINTDISPATCH_CONFIG_DIR override.
    Resolved on every call so tests and operators can repoint it at runtime.
    """
    return os.environ.get("PRINTDISPATCH_CONFIG_DIR", default_config_dir())


def auth_enabled() -> bool:
    """PRINTDISPATCH_ENABLE_AUTH, falling back to a plain ENABLE_AUTH from an existing .env."""
    if "PRINTDISPATCH_ENABLE_AUTH" in os.environ:
        return _env_flag("PRINTDISPATCH_ENABLE_AUTH")
    return _env_flag("ENABLE_AUTH")


def get_port() -> int:
    raw = os.environ.get("PRINTDISPATCH_PORT") or os.environ.get("PORT")
    try:
        return int(raw) if raw else DEFAULT_PORT
    except ValueError:
        logger.warning("Invalid port %r; using %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT


def get_host() -> str:
    return os.environ.get("PRINTDISPATCH_HOST", "0.0.0.0")


def _read_json(path: Path, fallback: Any) -> Any:
    """
    Read a JSON file, returning fallback when it is missing, empty or invalid.
    """
    try:
        if not path.exists():
            return fallback
        raw = path.read_text(encoding="utf-8").strip()
        if not raw:
            return fallback
        return json.loads(raw)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to read %s: %s", path, e)
        return fallback


def load_printers(config_dir: Optional[str] = None) -> List[PrinterConfig]:
    """
    Load the printer registry from printer.json ({"printers": [...]}).
    Entries that fail validation are skipped with a warning.
    """
    path = Path(config_dir or get_config_dir()) / PRINTERS_FILE
    data = _read_json(path, {"printers": []})
    entries = data.get("printers") if isinstance(data, dict) else None
    printers: List[PrinterConfig] = []
    for entry in entries or []:
        try:
            printers.append(PrinterConfig.model_validate(entry))
        except ValidationError as e:
            logger.warning("Skipping invalid printer entry %r: %s", entry, e.errors()[0].get("msg"))
    return printers


def find_printer(printer_id: str, printers: Optional[List[PrinterConfig]] = None) -> Optional[PrinterConfig]:
    """
    Return the first enabled printer whose id or name matches printer_id
    case-insensitively, or None.
    """
    if printers is None:
        printers = load_printers()
    for p in printers:
        if p.enabled and p.matches(printer_id):
            return p
    return None


def load_clients(config_dir: Optional[str] = None) -> List[ClientConfig]:
    """
    Load the client registry. clients.json may hold a bare array or {"clients": [...]}.
    """
    path = Path(config_dir or get_config_dir()) / CLIENTS_FILE
    data = _read_json(path, [])
    if isinstance(data, dict):
        data = data.get("clients")
    if not isinstance(data, list):
        return []
    clients: List[ClientConfig] = []
    for entry in data:
        try:
            clients.append(ClientConfig.model_validate(entry))
        except ValidationError:
            logger.warning("Skipping invalid client entry")
    return clients


def _write_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)


def get_server_id(config_dir: Optional[str] = None) -> str:
    """
    Return the persisted server identity, generating and saving it on first use.
    """
    path = Path(config_dir or get_config_dir()) / SERVER_ID_FILE
    if path.exists():
        existing = path.read_text(encoding="utf-8").strip()
        if existing:
            return existing
    server_id = "srv-" + uuid.uuid4().hex[:11]
    _write_atomic(path, server_id)
    logger.info("Generated new server id %s", server_id)
    return server_id


__all__ = [
    "CLIENTS_FILE",
    "ClientConfig",
    "Connection",
    "DEFAULT_PORT",
    "PRINTERS_FILE",
    "PrinterConfig",
    "SERVER_ID_FILE",
    "auth_enabled",
    "default_config_dir",
    "find_printer",
    "get_config_dir",
    "get_host",
    "get_port",
    "get_server_id",
    "load_clients",
    "load_printers",
]
