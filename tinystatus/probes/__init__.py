"""Protocol probes — validation and one-shot network scans."""

from .base import Probe, describe_error, unwrap_error
from .http import HTTPProbe
from .ping import PingProbe
from .registry import ProbeRegistry, UnknownProbeError
from .tcp import TCPProbe
