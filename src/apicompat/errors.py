"""Domain-specific errors for apicompat."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .compat import Violation


class ApiCompatError(Exception):
    """Base error for apicompat."""


class CheckError(ApiCompatError):
    """Raised when a new type is not backward compatible with the old one.

    Holds every violation found by a single check, in discovery order.
    """

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        super().__init__(self._summary())

    def _summary(self) -> str:
        if not self.violations:
            return "error with no errors?!"
        if len(self.violations) == 1:
            return str(self.violations[0])
        return f"{self.violations[0]} (and {len(self.violations) - 1} more)"

    def __len__(self) -> int:
        return len(self.violations)


class GraphError(ApiCompatError):
    """Raised when a type graph is malformed (not an API change)."""


class UnresolvedTypeError(GraphError):
    """Raised when a stub type has no definition in its own graph."""


class InvalidGraphError(GraphError):
    """Raised when a type graph violates the per-kind or naming invariants."""


class GraphLoadError(GraphError):
    """Raised when a persisted graph cannot be read or decoded."""
