"""Bounded runner — scans a batch of checks with limited concurrency.

Every check gets exactly one scan on a worker thread; at most
``concurrency_limit`` scans are in flight at once. The call returns only
when the whole batch is done.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from ..probes.base import Probe, describe_error
from ..probes.registry import ProbeRegistry
from .check import Check, ScanError
from .result import Result, StatusList

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY_LIMIT = 32
DEFAULT_TIMEOUT = 10.0


class BoundedRunner:
    """Runs checks through their probes, ``concurrency_limit`` at a time."""

    def __init__(
        self,
        registry: ProbeRegistry,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be >= 1")
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self.registry = registry
        self.concurrency_limit = concurrency_limit
        self.timeout = timeout

    def run(self, checks: Iterable[Check]) -> StatusList:
        """Scan every check once and return the frozen result set.

        Raises UnknownProbeError before any scan starts if a check kind has
        no registered probe.
        """
        jobs = [(check, self.registry.resolve(check.kind)) for check in checks]
        if not jobs:
            return StatusList()

        t0 = time.perf_counter()
        results: list[Result] = []
        lock = threading.Lock()

        def _scan(check: Check, probe: Probe) -> None:
            result = self.scan_one(check, probe)
            with lock:
                results.append(result)

        workers = min(self.concurrency_limit, len(jobs))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe") as pool:
            futures = [pool.submit(_scan, check, probe) for check, probe in jobs]
            for future in futures:
                future.result()

        statuses = StatusList(results)
        logger.info(
            "Ran %d checks in %.0fms: %d outage(s)",
            len(statuses),
            (time.perf_counter() - t0) * 1000,
            statuses.number_outages(),
        )
        return statuses

    def scan_one(self, check: Check, probe: Probe) -> Result:
        try:
            probe.scan(check, self.timeout)
        except ScanError as e:
            return Result(check=check, error=e)
        except Exception as e:
            logger.exception("Probe %r crashed on %s/%s", probe, check.kind, check.name)
            return Result(check=check, error=ScanError(describe_error(e)))
        return Result(check=check)


def run_checks(
    checks: Iterable[Check],
    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    timeout: float = DEFAULT_TIMEOUT,
    registry: ProbeRegistry | None = None,
) -> StatusList:
    """One-shot helper around :class:`BoundedRunner`."""
    runner = BoundedRunner(
        registry or ProbeRegistry.default(),
        concurrency_limit=concurrency_limit,
        timeout=timeout,
    )
    return runner.run(checks)
