"""Probe contract shared by every protocol."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..status.check import Check, ScanError, ValidationError

logger = logging.getLogger(__name__)


class Probe(ABC):
    """Validates checks of one protocol family and runs them.

    Implementations hold no mutable state: a single instance is shared by
    every worker thread of a run.
    """

    @abstractmethod
    def sanitize(self, check: Check) -> Check:
        """Return a normalized copy of ``check`` or raise ValidationError.

        Never does any network I/O.
        """

    @abstractmethod
    def scan(self, check: Check, timeout: float) -> None:
        """Make exactly one attempt; raise ScanError on failure."""

    def fail(self, check: Check, message: str) -> ScanError:
        """Log a scan failure and build the matching ScanError."""
        logger.warning("probe=%s target=%s: %s", check.kind, check.target, message)
        return ScanError(message)


def expected_int(check: Check, what: str) -> int:
    """Parse ``check.expectation`` as an integer."""
    try:
        return int(check.expectation)
    except ValueError:
        raise ValidationError(
            f"invalid expected {what} '{check.expectation}': should be a number"
        ) from None


def unwrap_error(exc: BaseException) -> BaseException:
    """Return the deepest exception in the ``__cause__``/``__context__`` chain."""
    seen = {id(exc)}
    while True:
        nxt = exc.__cause__
        if nxt is None and not exc.__suppress_context__:
            nxt = exc.__context__
        if nxt is None or id(nxt) in seen:
            return exc
        seen.add(id(nxt))
        exc = nxt


def describe_error(exc: BaseException) -> str:
    """Human-readable message of the root cause of ``exc``."""
    root = unwrap_error(exc)
    return str(root) or str(exc) or type(root).__name__
