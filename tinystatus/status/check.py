"""Check records and the line format they are read from.

A check line looks like::

    <kind>, <expectation>, <name>, <target>[, <category>]

e.g. ``http, 200, Website, example.com, Public`` or
``tcp, 0, SSH, 10.0.0.1 22``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..probes.registry import ProbeRegistry

DEFAULT_CATEGORY = "Uncategorized"


class ValidationError(ValueError):
    """A check is malformed for its protocol."""


class ScanError(Exception):
    """A probe scan did not observe the expected outcome."""


@dataclass(frozen=True)
class Check:
    """A single thing to test: protocol, target, expected outcome."""

    kind: str
    target: str
    expectation: str
    name: str
    category: str = DEFAULT_CATEGORY

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", self.kind.strip().lower())
        if not self.category.strip():
            object.__setattr__(self, "category", DEFAULT_CATEGORY)


def parse_check_line(line: str, registry: ProbeRegistry) -> Check:
    """Decode one check line and run it through its probe's sanitize step."""
    fields = [f.strip() for f in line.split(",")]
    if len(fields) < 4:
        raise ValidationError("wrong number of fields")

    kind = fields[0].lower()
    probe = registry.get(kind)
    if probe is None:
        raise ValidationError(f"probe '{kind}' not supported")

    check = Check(
        kind=kind,
        expectation=fields[1],
        name=fields[2],
        target=fields[3],
        category=fields[4] if len(fields) >= 5 else DEFAULT_CATEGORY,
    )
    return probe.sanitize(check)
