"""Probe registry — maps a check kind to the probe that runs it.

Built once per process and read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ..config import Settings
from .base import Probe
from .http import HTTPProbe
from .ping import PingProbe
from .tcp import TCPProbe


class UnknownProbeError(LookupError):
    """No probe is registered for a check kind."""


class ProbeRegistry(Mapping[str, Probe]):
    """Immutable ``kind -> Probe`` mapping keyed by lower-case kind."""

    def __init__(self, probes: Mapping[str, Probe]) -> None:
        self._probes = MappingProxyType({k.lower(): v for k, v in probes.items()})

    def __getitem__(self, kind: str) -> Probe:
        return self._probes[kind]

    def __iter__(self) -> Iterator[str]:
        return iter(self._probes)

    def __len__(self) -> int:
        return len(self._probes)

    def __repr__(self) -> str:
        return f"ProbeRegistry({sorted(self._probes)})"

    def resolve(self, kind: str) -> Probe:
        try:
            return self._probes[kind]
        except KeyError:
            raise UnknownProbeError(f"probe '{kind}' not supported") from None

    @classmethod
    def default(cls, settings: Settings | None = None) -> ProbeRegistry:
        """All built-in probes; ``port*`` are tinystatus aliases of ``tcp*``."""
        settings = settings or Settings()

        http4 = HTTPProbe()
        ping = PingProbe(executable=settings.ping_executable)
        tcp = TCPProbe()

        return cls({
            "http": http4,
            "http4": http4,
            "http6": HTTPProbe(ipv6=True),
            "ping": ping,
            "ping4": ping,
            "tcp": tcp,
            "tcp4": tcp,
            "tcp6": tcp,
            "port": tcp,
            "port4": tcp,
            "port6": tcp,
        })
