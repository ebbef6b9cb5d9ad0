"""apicompat: backward-compatibility checks for Go API type graphs."""

from __future__ import annotations

from . import codec, errors
from .compat import Violation, check, collect_violations, prune_methods
from .report import GraphReport, compare_graphs
from .typegraph import Field, Info, Kind, Method, Type, TypeName, deref, field_by_name

__all__ = [
    "Field",
    "GraphReport",
    "Info",
    "Kind",
    "Method",
    "Type",
    "TypeName",
    "Violation",
    "check",
    "codec",
    "collect_violations",
    "compare_graphs",
    "deref",
    "errors",
    "field_by_name",
    "prune_methods",
]
