"""TCP probe — a single connect to ``<host> <port>``.

Expectation ``0`` means the port must accept connections; anything else
means it must not. Only a connect that times out counts as closed: it
satisfies a "closed" expectation but fails an "open" one. Any other
connect error, a refusal included, is a failure.
"""

from __future__ import annotations

import dataclasses
import logging
import re
import socket
import time

from ..status.check import Check, ValidationError
from .base import Probe, describe_error, expected_int

logger = logging.getLogger(__name__)

_TARGET = re.compile(r"^(?P<host>\S+)\s+(?P<port>\d+)$")

FAMILIES = {
    "tcp": socket.AF_INET,
    "tcp4": socket.AF_INET,
    "tcp6": socket.AF_INET6,
}


class TCPProbe(Probe):
    def __repr__(self) -> str:
        return "TCPProbe()"

    def sanitize(self, check: Check) -> Check:
        expected_int(check, "return code")

        match = _TARGET.match(check.target.strip())
        if not match:
            raise ValidationError(
                f"invalid target '{check.target}': should be formatted like '<host> <port>'"
            )
        host, port = match.group("host"), int(match.group("port"))
        if port > 65535:
            raise ValidationError(f"invalid target '{check.target}': port out of range")

        return dataclasses.replace(check, target=join_address(host, port))

    def scan(self, check: Check, timeout: float) -> None:
        should_be_open = int(check.expectation) == 0
        host, port = split_address(check.target)
        network = check.kind.replace("port", "tcp")

        logger.debug("probe=%s target=%s: port scan sent", check.kind, check.target)
        try:
            conn = dial(host, port, FAMILIES.get(network, socket.AF_INET), timeout)
        except (socket.timeout, TimeoutError):
            if should_be_open:
                raise self.fail(
                    check, f"connect to {host} port {port} ({network}) timed out after {timeout:g}s",
                ) from None
            return
        except ConnectionRefusedError as e:
            if should_be_open:
                raise self.fail(
                    check, f"connect to {host} port {port} ({network}) failed: Connection refused",
                ) from None
            raise self.fail(check, describe_error(e)) from None
        except OSError as e:
            raise self.fail(check, describe_error(e)) from None

        conn.close()
        if not should_be_open:
            raise self.fail(check, f"connect to {host} port {port} ({network}) succeeded")


def join_address(host: str, port: int) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def split_address(addr: str) -> tuple[str, int]:
    host, _, port = addr.rpartition(":")
    return host.strip("[]"), int(port)


def dial(host: str, port: int, family: int, timeout: float) -> socket.socket:
    """Connect to the first reachable address of ``host`` within ``timeout``."""
    deadline = time.monotonic() + timeout
    last_error: OSError | None = None

    for af, socktype, proto, _, sockaddr in socket.getaddrinfo(
        host, port, family, socket.SOCK_STREAM,
    ):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise socket.timeout("timed out")

        sock = socket.socket(af, socktype, proto)
        try:
            sock.settimeout(remaining)
            sock.connect(sockaddr)
        except OSError as e:
            sock.close()
            last_error = e
            continue
        return sock

    if last_error is None:
        raise OSError(f"no address found for {host}")
    raise last_error
