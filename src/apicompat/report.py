"""Compare every named type of an old graph against a new graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from .compat import IgnoreFunc, Violation, collect_violations
from .typegraph import Info, TypeName

logger = logging.getLogger(__name__)


@dataclass
class GraphReport:
    # Old type names with no definition in the new graph.
    removed: list[TypeName] = field(default_factory=list)
    # Old type name -> violations, only for incompatible types.
    incompatible: dict[TypeName, list[Violation]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.removed and not self.incompatible

    def lines(self) -> Iterator[str]:
        for name in self.removed:
            yield f"type {name} has gone away"
        for name, violations in self.incompatible.items():
            for v in violations:
                yield f"{name} incompatible: {v}"


def compare_graphs(info0: Info, info1: Info, *, ignore: IgnoreFunc | None = None) -> GraphReport:
    """Check each type defined in `info0` against its namesake in `info1`.

    Types are visited in name order so reports are stable.
    """
    report = GraphReport()
    for name in sorted(info0.types):
        t0 = info0.types[name]
        t1 = info1.lookup(name)
        if t1 is None:
            report.removed.append(name)
            continue
        violations = collect_violations(info0, info1, t0, t1, ignore)
        if violations:
            report.incompatible[name] = violations
    logger.debug(
        "compared %d type(s): %d removed, %d incompatible",
        len(info0.types),
        len(report.removed),
        len(report.incompatible),
    )
    return report
