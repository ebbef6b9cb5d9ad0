"""Predicates for scoping a compatibility check.

The engine hardcodes no policy; callers pass these (or their own) to
`prune_methods` and `check`.
"""

from __future__ import annotations

from typing import Iterable

from .compat import IgnoreFunc, KeepMethodFunc, never_ignore
from .typegraph import Info, Method, Type

# Methods through which a type takes over its own wire encoding.
MARSHAL_METHOD_NAMES: tuple[str, ...] = (
    "MarshalJSON",
    "UnmarshalJSON",
    "MarshalText",
    "UnmarshalText",
)


def keep_methods(names: Iterable[str]) -> KeepMethodFunc:
    """Return a `prune_methods` predicate keeping only the named methods."""
    wanted = frozenset(names)

    def keep(t: Type, m: Method) -> bool:
        return m.name in wanted

    return keep


def has_any_method(names: Iterable[str]) -> IgnoreFunc:
    """Return an ignore predicate matching types that declare any of `names`.

    With MARSHAL_METHOD_NAMES this skips types with custom marshalers, whose
    encoding is not determined by their structure.
    """
    wanted = tuple(names)

    def ignore(info: Info, t: Type) -> bool:
        # TODO: require the standard marshaler signatures, not just the names.
        return any(name in t.methods for name in wanted)

    return ignore


__all__ = [
    "MARSHAL_METHOD_NAMES",
    "has_any_method",
    "keep_methods",
    "never_ignore",
]
