"""HTTP(S) probe — one GET, compared against an expected status code.

Certificates are never verified: a status page only cares whether the
service answers.
"""

from __future__ import annotations

import dataclasses
import logging
import re

import httpx

from ..status.check import Check, ValidationError
from .base import Probe, describe_error, expected_int

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")

IPV4_ANY = "0.0.0.0"
IPV6_ANY = "::"


class HTTPProbe(Probe):
    """GET ``check.target`` over IPv4 (default) or IPv6."""

    def __init__(
        self,
        ipv6: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.ipv6 = ipv6
        self._transport = transport  # injected in tests

    def __repr__(self) -> str:
        return f"HTTPProbe(ipv6={self.ipv6})"

    def sanitize(self, check: Check) -> Check:
        target = check.target
        if not _SCHEME.match(target):
            target = "http://" + target

        try:
            url = httpx.URL(target)
        except httpx.InvalidURL as e:
            raise ValidationError(f"invalid target '{check.target}': {e}") from None
        if url.scheme not in ("http", "https") or not url.host:
            raise ValidationError(f"invalid target '{check.target}': not an http(s) URL")

        expected_int(check, "status code")
        return dataclasses.replace(check, target=target)

    def _make_transport(self) -> httpx.BaseTransport:
        if self._transport is not None:
            return self._transport
        return httpx.HTTPTransport(
            verify=False,
            local_address=IPV6_ANY if self.ipv6 else IPV4_ANY,
        )

    def scan(self, check: Check, timeout: float) -> None:
        expected_code = int(check.expectation)
        logger.debug("probe=%s target=%s: request sent", check.kind, check.target)
        try:
            with httpx.Client(
                transport=self._make_transport(),
                timeout=timeout,
                follow_redirects=True,
            ) as client:
                resp = client.get(check.target)
        except httpx.TimeoutException:
            raise self.fail(check, f"request timed out after {timeout:g}s") from None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise self.fail(check, describe_error(e)) from None

        if resp.status_code != expected_code:
            raise self.fail(check, f"unexpected status code: {resp.status_code}")
