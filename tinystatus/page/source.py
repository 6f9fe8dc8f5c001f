"""File-backed inputs: the CSV check list and the incidents file.

Both are cached and only re-read when the file modification time moves
forward, so a refresh loop can call them on every cycle.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..probes.registry import ProbeRegistry
from ..status.check import Check, ValidationError, parse_check_line

logger = logging.getLogger(__name__)


class CheckSource:
    """Loads and caches the checks listed in a CSV file."""

    def __init__(self, path: Path, registry: ProbeRegistry) -> None:
        self._path = Path(path)
        self._registry = registry
        self._checks: list[Check] = []
        self._mtime: float | None = None

    def load(self) -> list[Check]:
        """Return the current check list, re-parsing the file if it changed.

        Raises OSError if the file cannot be read and nothing was loaded
        before; afterwards the cached list is kept and the error logged.
        """
        try:
            mtime = self._path.stat().st_mtime
            if self._mtime is not None and mtime <= self._mtime:
                logger.debug("'%s' not modified since last check", self._path)
                return list(self._checks)
            text = self._path.read_text(encoding="utf-8")
        except OSError:
            if self._mtime is None:
                raise
            logger.exception("Failed to read %s, keeping previous checks", self._path)
            return list(self._checks)

        checks: list[Check] = []
        for nline, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            try:
                checks.append(parse_check_line(line, self._registry))
            except ValidationError as e:
                logger.error("Skipping %s line %d: %s", self._path, nline, e)

        self._checks = checks
        self._mtime = mtime
        logger.info("Loaded %d checks from %s", len(checks), self._path)
        return list(checks)


class IncidentSource:
    """Loads the free-text incidents file; a missing file means no incident."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._incidents: list[str] = []
        self._mtime: float | None = None

    def load(self) -> list[str]:
        try:
            mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            self._incidents, self._mtime = [], None
            return []

        if self._mtime is not None and mtime <= self._mtime:
            return list(self._incidents)

        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError:
            logger.exception("Failed to read %s, keeping previous incidents", self._path)
            return list(self._incidents)

        self._incidents = [line.strip() for line in lines if line.strip()]
        self._mtime = mtime
        return list(self._incidents)
