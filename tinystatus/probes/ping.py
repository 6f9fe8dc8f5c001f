"""ICMP probe — a single echo request sent through the system ``ping``.

Expectation ``0`` means the target must answer; anything else means it
must stay silent. Only IPv4 is supported.
"""

from __future__ import annotations

import logging
import math
import re
import subprocess

from ..status.check import Check
from .base import Probe, describe_error, expected_int

logger = logging.getLogger(__name__)

# "1 packets transmitted, 1 received" (iputils) / "1 packets received" (BSD, busybox)
_RECEIVED = re.compile(r"(\d+)\s+(?:packets\s+)?received")


class PingProbe(Probe):
    def __init__(self, executable: str = "ping") -> None:
        self.executable = executable

    def __repr__(self) -> str:
        return f"PingProbe(executable={self.executable!r})"

    def sanitize(self, check: Check) -> Check:
        expected_int(check, "return code")
        return check

    def command(self, target: str, timeout: float) -> list[str]:
        wait = str(max(1, math.ceil(timeout)))
        return [self.executable, "-4", "-c", "1", "-W", wait, target]

    def scan(self, check: Check, timeout: float) -> None:
        if check.kind == "ping6":
            raise self.fail(check, "`ping6` is not supported")

        should_be_pingable = int(check.expectation) == 0

        logger.debug("probe=%s target=%s: ping sent", check.kind, check.target)
        try:
            proc = subprocess.run(
                self.command(check.target, timeout),
                capture_output=True,
                text=True,
                timeout=timeout + 1,
                check=False,
            )
        except subprocess.TimeoutExpired:
            if should_be_pingable:
                raise self.fail(check, f"no reply within {timeout:g}s") from None
            return
        except OSError as e:
            raise self.fail(check, describe_error(e)) from None

        # 0: reply received, 1: no reply, anything else: ping could not run
        # (unknown host, bad arguments, ...)
        if proc.returncode not in (0, 1):
            detail = (proc.stderr or proc.stdout).strip().splitlines()
            raise self.fail(
                check, detail[-1] if detail else f"ping exited with status {proc.returncode}",
            )

        received = _packets_received(proc.stdout, proc.returncode)
        if should_be_pingable and received == 0:
            raise self.fail(check, "no packet received")
        if not should_be_pingable and received > 0:
            raise self.fail(check, f"`{check.kind}` should have failed but succeeded")


def _packets_received(output: str, returncode: int) -> int:
    match = _RECEIVED.search(output)
    if match:
        return int(match.group(1))
    return 1 if returncode == 0 else 0
