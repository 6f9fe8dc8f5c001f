"""Shared test fixtures."""

from __future__ import annotations

import socket
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from tinystatus.config import Settings
from tinystatus.probes.base import Probe
from tinystatus.probes.registry import ProbeRegistry
from tinystatus.status.check import Check, ScanError


class FakeProbe(Probe):
    """Probe without network I/O: targets starting with ``down`` fail."""

    def __init__(self) -> None:
        self.scanned: list[Check] = []

    def sanitize(self, check: Check) -> Check:
        return check

    def scan(self, check: Check, timeout: float) -> None:
        self.scanned.append(check)
        if check.target.startswith("down"):
            raise ScanError(f"{check.target} is down")


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def fake_registry(fake_probe: FakeProbe) -> ProbeRegistry:
    return ProbeRegistry({"fake": fake_probe})


@pytest.fixture
def make_check() -> Callable[..., Check]:
    def _make(
        name: str = "svc",
        target: str = "up",
        kind: str = "fake",
        expectation: str = "0",
        category: str = "",
    ) -> Check:
        return Check(kind=kind, target=target, expectation=expectation, name=name, category=category)

    return _make


@pytest.fixture
def open_port() -> Generator[int, None, None]:
    """A loopback port with a listening socket (connects complete via the backlog)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as srv:
        srv.bind(("127.0.0.1", 0))
        srv.listen(16)
        yield srv.getsockname()[1]


@pytest.fixture
def closed_port() -> int:
    """A loopback port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def page_settings(tmp_path: Path) -> Settings:
    checks = tmp_path / "checks.csv"
    checks.write_text(
        "# kind, expectation, name, target, category\n"
        "fake, 0, API, up-api, Backend\n"
        "fake, 0, Database, down-db, Backend\n"
        "fake, 0, <Website>, up-www, Frontend\n",
        encoding="utf-8",
    )
    (tmp_path / "incidents.txt").write_text("2025-01-01: planned maintenance\n", encoding="utf-8")
    return Settings(
        checks_path=str(checks),
        incidents_path=str(tmp_path / "incidents.txt"),
        page_title="Test status",
        probe_timeout=1.0,
    )
