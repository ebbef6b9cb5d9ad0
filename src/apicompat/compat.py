"""Backward-compatibility checking between two type graphs.

`check(info0, info1, t0, t1)` walks the old type `t0` (from `info0`) and the
new type `t1` (from `info1`) side by side and reports every change that could
break an existing user of `t0`:

- a struct field, or a method, that has disappeared;
- a kind change (further comparison below that point is skipped);
- a function whose parameter or result count changed, or whose
  variadic status changed;
- a method moved from the value to the pointer receiver's method set;
- a struct tag key whose value changed.

Additions (new fields, methods, tag keys) are always compatible. Each
violation carries a path locating it inside the checked type, e.g.
`.Items[].Owner` or `.Close(param 0)`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from .errors import CheckError
from .tags import parse_tags, quote
from .typegraph import Info, Kind, Method, Type

logger = logging.getLogger(__name__)

IgnoreFunc = Callable[[Info, Type], bool]
KeepMethodFunc = Callable[[Type, Method], bool]


@dataclass(frozen=True)
class Violation:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def _label(t: Type | None) -> str:
    if t is None:
        return "<nil>"
    return t.name or t.kind.value


@dataclass
class _Checker:
    info0: Info
    info1: Info
    ignore: IgnoreFunc
    # Every node handed to `check` so far. Types hash by identity.
    checked: set[Type] = field(default_factory=set)
    violations: list[Violation] = field(default_factory=list)

    def errorf(self, path: str, message: str) -> None:
        self.violations.append(Violation(path=path, message=message))

    def seen(self, t0: Type | None, t1: Type | None) -> bool:
        if t0 in self.checked and t1 in self.checked:
            return True
        self.checked.update(t for t in (t0, t1) if t is not None)
        return False

    def check(self, t0: Type | None, t1: Type | None, path: str) -> None:
        if self.seen(t0, t1):
            return

        r0 = self.info0.deref(t0)
        r1 = self.info1.deref(t1)
        # A stub leads back to a definition pair that may already be under
        # comparison further up the stack.
        if (r0 is not t0 or r1 is not t1) and self.seen(r0, r1):
            return
        t0, t1 = r0, r1
        if (t0 is not None and self.ignore(self.info0, t0)) or (
            t1 is not None and self.ignore(self.info1, t1)
        ):
            return
        if t0 is None or t1 is None:
            self.errorf(path, "nil type found")
            return
        if t0.kind is not t1.kind:
            self.errorf(path, f"incompatible kinds {t0.kind.value} vs {t1.kind.value}")
            return

        k = t0.kind
        if k in (Kind.ARRAY, Kind.SLICE):
            self.check(t0.elem, t1.elem, path + "[]")
        elif k is Kind.CHAN:
            self.check(t0.elem, t1.elem, f"(<-{path})")
        elif k is Kind.PTR:
            self.check(t0.elem, t1.elem, f"(*{path})")
        elif k is Kind.MAP:
            self.check(t0.key, t1.key, path + "[key]")
            self.check(t0.elem, t1.elem, path + "[]")
        elif k is Kind.FUNC:
            self.check_func(t0, t1, path)
        elif k is Kind.STRUCT:
            self.check_struct(t0, t1, path)

        # Methods can be declared on a named type of any kind.
        for name, m0 in t0.methods.items():
            m1 = t1.methods.get(name)
            if m1 is None:
                self.errorf(path, f"method {name} is missing")
                continue
            if not m0.ptr_receiver and m1.ptr_receiver:
                self.errorf(path, f"method {name} has changed from value to pointer receiver")
            self.check(m0.type, m1.type, f"{path}.{name}")

    def check_func(self, t0: Type, t1: Type, path: str) -> None:
        if len(t0.params) != len(t1.params):
            self.errorf(path, f"differing parameter count {len(t0.params)} vs {len(t1.params)}")
        else:
            for i, (p0, p1) in enumerate(zip(t0.params, t1.params)):
                self.check(p0, p1, f"{path}(param {i})")
            if t0.variadic != t1.variadic:
                self.errorf(path, "variadic status changed")
        if len(t0.results) != len(t1.results):
            self.errorf(
                path, f"differing out parameter count {len(t0.results)} vs {len(t1.results)}"
            )
        else:
            for i, (r0, r1) in enumerate(zip(t0.results, t1.results)):
                self.check(r0, r1, f"{path}(result {i})")

    def check_struct(self, t0: Type, t1: Type, path: str) -> None:
        for f0 in t0.fields:
            fpath = f"{path}.{f0.name}"
            f1 = t1.field_by_name(f0.name)
            if f1 is None:
                self.errorf(fpath, "field is missing")
                continue
            self.check(f0.type, f1.type, fpath)
            self.check_tags(f0.tag, f1.tag, fpath)

    def check_tags(self, tag0: str, tag1: str, path: str) -> None:
        tags1 = parse_tags(tag1)
        for key, val0 in parse_tags(tag0).items():
            val1 = tags1.get(key, "")
            if val1 != val0:
                self.errorf(path, f"incompatible tag {key}:{quote(val0)} vs {key}:{quote(val1)}")


def never_ignore(info: Info, t: Type) -> bool:
    return False


def collect_violations(
    info0: Info,
    info1: Info,
    t0: Type | None,
    t1: Type | None,
    ignore: IgnoreFunc | None = None,
) -> list[Violation]:
    """Return every way in which `t1` (from `info1`) breaks users of `t0` (from `info0`).

    Types for which `ignore(info, t)` is true, in either graph, are treated
    as compatible without looking inside them. Raises UnresolvedTypeError
    when a stub cannot be resolved in its own graph.
    """
    ctxt = _Checker(info0=info0, info1=info1, ignore=ignore or never_ignore)
    ctxt.check(t0, t1, "")
    logger.debug(
        "checked %s vs %s: %d node(s), %d violation(s)",
        _label(t0),
        _label(t1),
        len(ctxt.checked),
        len(ctxt.violations),
    )
    return ctxt.violations


def check(
    info0: Info,
    info1: Info,
    t0: Type | None,
    t1: Type | None,
    ignore: IgnoreFunc | None = None,
) -> None:
    """Check that `t1` is backward compatible with `t0`.

    Raises CheckError holding every violation found.
    """
    violations = collect_violations(info0, info1, t0, t1, ignore)
    if violations:
        raise CheckError(violations)


def prune_methods(info: Info, keep: KeepMethodFunc) -> int:
    """Delete every method for which `keep(t, m)` is false.

    Applies to every type defined in `info`; returns the number removed.
    """
    removed = 0
    for t in info.types.values():
        for name, m in list(t.methods.items()):
            if not keep(t, m):
                del t.methods[name]
                removed += 1
    logger.debug("pruned %d method(s) from %d type(s)", removed, len(info.types))
    return removed
