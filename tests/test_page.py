"""Tests for the check file sources, HTML rendering and the StatusPage."""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from tinystatus.config import Settings
from tinystatus.page.render import render_html
from tinystatus.page.source import CheckSource, IncidentSource
from tinystatus.page.status_page import StatusPage
from tinystatus.probes.registry import ProbeRegistry
from tinystatus.status.check import Check, ScanError
from tinystatus.status.result import Result, StatusList

LAST_CHECK = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _bump_mtime(path: Path, seconds: int = 10) -> None:
    st = path.stat()
    os.utime(path, (st.st_atime, st.st_mtime + seconds))


# ── CheckSource ──────────────────────────────────────────────────────────────


@pytest.fixture
def checks_file(tmp_path: Path) -> Path:
    path = tmp_path / "checks.csv"
    path.write_text(
        "# comment\n"
        "\n"
        "http, 200, Website, example.com, Public\n"
        "tcp, 0, SSH, 10.0.0.1 22\n"
        "dns, 0, Resolver, example.com\n"
        "http, OK, Broken, example.com\n"
        "too, few\n",
        encoding="utf-8",
    )
    return path


class TestCheckSource:
    def test_load_skips_invalid_lines(self, checks_file: Path) -> None:
        checks = CheckSource(checks_file, ProbeRegistry.default()).load()
        assert [c.name for c in checks] == ["Website", "SSH"]
        assert checks[0].target == "http://example.com"
        assert checks[1].target == "10.0.0.1:22"

    def test_cached_until_modified(self, checks_file: Path) -> None:
        source = CheckSource(checks_file, ProbeRegistry.default())
        assert len(source.load()) == 2
        loaded_at = checks_file.stat().st_mtime

        checks_file.write_text("tcp, 0, SSH, 10.0.0.1 22\n", encoding="utf-8")
        os.utime(checks_file, (loaded_at, loaded_at - 100))
        assert len(source.load()) == 2  # mtime did not move forward

        os.utime(checks_file, (loaded_at, loaded_at + 10))
        assert [c.name for c in source.load()] == ["SSH"]

    def test_missing_file_on_first_load(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            CheckSource(tmp_path / "nope.csv", ProbeRegistry.default()).load()

    def test_missing_file_keeps_previous_checks(self, checks_file: Path) -> None:
        source = CheckSource(checks_file, ProbeRegistry.default())
        source.load()
        checks_file.unlink()
        assert [c.name for c in source.load()] == ["Website", "SSH"]


class TestIncidentSource:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert IncidentSource(tmp_path / "incidents.txt").load() == []

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "incidents.txt"
        path.write_text("  outage on db  \n\nall good now\n", encoding="utf-8")
        source = IncidentSource(path)
        assert source.load() == ["outage on db", "all good now"]

        path.write_text("new incident\n", encoding="utf-8")
        _bump_mtime(path)
        assert source.load() == ["new incident"]

    def test_read_error_keeps_previous_incidents(self, tmp_path: Path) -> None:
        path = tmp_path / "incidents.txt"
        path.write_text("outage on db\n", encoding="utf-8")
        source = IncidentSource(path)
        assert source.load() == ["outage on db"]

        _bump_mtime(path)
        with patch.object(Path, "read_text", side_effect=PermissionError(13, "Permission denied")):
            assert source.load() == ["outage on db"]


# ── render_html ──────────────────────────────────────────────────────────────


class TestRenderHTML:
    def test_all_operational(self, make_check: Callable[..., Check]) -> None:
        statuses = StatusList([Result(make_check(name="API"))])
        html = render_html(statuses, [], title="My page", last_check=LAST_CHECK, elapsed=0.5)
        assert "<title>My page</title>" in html
        assert "All Systems Operational" in html
        assert "<h1>Services</h1>" in html
        assert "Last check: 2025-01-01T12:00:00+0000 (in 0.500s)" in html
        assert "Incidents" not in html

    def test_outages_listed_first(self, make_check: Callable[..., Check]) -> None:
        statuses = StatusList([
            Result(make_check(name="Alpha")),
            Result(make_check(name="Zeta"), ScanError("unexpected status code: 503")),
        ])
        html = render_html(statuses, [], title="t", last_check=LAST_CHECK, elapsed=0)
        assert "1 Outage(s)" in html
        assert html.index("Zeta") < html.index("Alpha")
        assert "(unexpected status code: 503)</span><span class='status failed'>Disrupted" in html

    def test_http_targets_linked(self) -> None:
        check = Check(kind="http6", target="http://example.com", expectation="200", name="Web")
        html = render_html(StatusList([Result(check)]), [], title="t", last_check=LAST_CHECK, elapsed=0)
        assert '<a href="http://example.com">Web</a>' in html

    def test_escaping_and_incidents(self, make_check: Callable[..., Check]) -> None:
        statuses = StatusList([Result(make_check(name="<b>x</b>", category="A&B"))])
        html = render_html(statuses, ["db <down>"], title="t", last_check=LAST_CHECK, elapsed=0)
        assert "&lt;b&gt;x&lt;/b&gt;" in html
        assert "<h1>A&amp;B</h1>" in html
        assert "<h1>Incidents</h1>" in html
        assert "<p>db &lt;down&gt;</p>" in html


# ── StatusPage ───────────────────────────────────────────────────────────────


class TestStatusPage:
    def test_render(self, page_settings: Settings, fake_registry: ProbeRegistry) -> None:
        page = StatusPage(page_settings, registry=fake_registry)
        html = page.render()

        assert "<title>Test status</title>" in html
        assert "1 Outage(s)" in html
        assert "(down-db is down)" in html
        assert "&lt;Website&gt;" in html
        assert "planned maintenance" in html
        assert html.index("<h1>Backend</h1>") < html.index("<h1>Frontend</h1>")

        statuses, snapshot_html = page.snapshot()
        assert snapshot_html == html
        assert len(statuses) == 3

    def test_snapshot_before_render(self, page_settings: Settings, fake_registry: ProbeRegistry) -> None:
        statuses, html = StatusPage(page_settings, registry=fake_registry).snapshot()
        assert len(statuses) == 0
        assert html == ""

    def test_runner_uses_settings(self, page_settings: Settings) -> None:
        settings = page_settings.model_copy(update={"concurrency_limit": 4, "probe_timeout": 2.5})
        page = StatusPage(settings)
        assert page.runner.concurrency_limit == 4
        assert page.runner.timeout == 2.5
        assert "tcp" in page.registry
