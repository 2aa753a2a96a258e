"""Serial port discovery for flash and monitor."""

from __future__ import annotations

import os
from dataclasses import dataclass

from serial.tools.list_ports import comports


@dataclass
class PortInfo:
    device: str
    description: str
    hwid: str


def list_serial_ports() -> list[PortInfo]:
    """List available serial ports."""
    ports = []
    for p in comports():
        ports.append(PortInfo(
            device=p.device,
            description=p.description,
            hwid=p.hwid,
        ))
    return ports


def detect_default_port() -> str | None:
    """Return the first USB serial port, or None."""
    for p in list_serial_ports():
        if "USB" in (p.hwid or ""):
            return p.device
    return None


def resolve_port(cli_port: str | None) -> str | None:
    """Resolve the serial port to talk to.

    Resolution order: CLI flag / idfcli.toml > ESPPORT > first USB port.
    None lets the external tool pick its own default.
    """
    if cli_port:
        return cli_port
    env_port = os.environ.get("ESPPORT")
    if env_port:
        return env_port
    return detect_default_port()
