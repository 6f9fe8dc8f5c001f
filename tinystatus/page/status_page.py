"""Status page — ties the check file, the runner and the renderer together."""

from __future__ import annotations

import logging
import threading
import time
from datetime import datetime
from pathlib import Path

from ..config import Settings
from ..probes.registry import ProbeRegistry
from ..status.result import StatusList
from ..status.runner import BoundedRunner
from .render import render_html
from .source import CheckSource, IncidentSource

logger = logging.getLogger(__name__)


class StatusPage:
    """Runs every configured check and renders the result as HTML.

    The last rendered page is kept so a server can keep serving it while
    the next one is being built.
    """

    def __init__(self, settings: Settings, registry: ProbeRegistry | None = None) -> None:
        self.title = settings.page_title
        self.registry = registry or ProbeRegistry.default(settings)
        self.checks = CheckSource(Path(settings.checks_path), self.registry)
        self.incidents = IncidentSource(Path(settings.incidents_path))
        self.runner = BoundedRunner(
            self.registry,
            concurrency_limit=settings.concurrency_limit,
            timeout=settings.probe_timeout,
        )
        self._lock = threading.Lock()
        self._statuses = StatusList()
        self._html = ""

    def render(self) -> str:
        """Run the whole batch and return the freshly rendered page."""
        last_check = datetime.now().astimezone()
        t0 = time.perf_counter()

        statuses = self.runner.run(self.checks.load())
        incidents = self.incidents.load()
        html = render_html(
            statuses,
            incidents,
            title=self.title,
            last_check=last_check,
            elapsed=time.perf_counter() - t0,
        )

        with self._lock:
            self._statuses, self._html = statuses, html
        return html

    def snapshot(self) -> tuple[StatusList, str]:
        """Last rendered result set and page."""
        with self._lock:
            return self._statuses, self._html
