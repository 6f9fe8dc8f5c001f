"""Scan results and the read-only views derived from a whole run."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, overload

from .check import DEFAULT_CATEGORY, Check, ScanError

# Single-category pages keep the historical tinystatus heading.
SINGLE_CATEGORY_NAME = "Services"


@dataclass(frozen=True)
class Result:
    """Outcome of one probe scan on one check."""

    check: Check
    error: ScanError | None = None

    @property
    def succeed(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return "" if self.error is None else str(self.error)

    @property
    def name(self) -> str:
        return self.check.name

    @property
    def category(self) -> str:
        return self.check.category


class StatusList(Sequence[Result]):
    """Frozen set of results produced by one run.

    Concurrent completion order is kept as-is; use :meth:`sorted` or
    :meth:`categories` for a stable display order.
    """

    def __init__(self, results: Iterable[Result] = ()) -> None:
        self._results: tuple[Result, ...] = tuple(results)

    @overload
    def __getitem__(self, index: int) -> Result: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Result]: ...

    def __getitem__(self, index: int | slice) -> Result | Sequence[Result]:
        return self._results[index]

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[Result]:
        return iter(self._results)

    def __repr__(self) -> str:
        return f"StatusList({len(self)} results, {self.number_outages()} outages)"

    def sorted(self) -> list[Result]:
        """Results ordered by category, then name."""
        return sorted(self._results, key=lambda r: (r.category, r.name))

    def categories(self) -> dict[str, list[Result]]:
        """Sorted results grouped by category, in category order."""
        groups: dict[str, list[Result]] = {}
        for result in self.sorted():
            groups.setdefault(result.category, []).append(result)

        if len(groups) == 1 and DEFAULT_CATEGORY in groups:
            return {SINGLE_CATEGORY_NAME: groups[DEFAULT_CATEGORY]}
        return groups

    def outages(self) -> list[Result]:
        return [r for r in self.sorted() if not r.succeed]

    def number_outages(self) -> int:
        return sum(1 for r in self._results if not r.succeed)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly summary used by the status API."""
        return {
            "total": len(self),
            "outages": self.number_outages(),
            "categories": {
                category: [
                    {
                        "name": r.name,
                        "kind": r.check.kind,
                        "target": r.check.target,
                        "succeed": r.succeed,
                        "message": r.message,
                    }
                    for r in results
                ]
                for category, results in self.categories().items()
            },
        }
