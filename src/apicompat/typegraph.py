"""Type graph model: structural descriptions of a Go API surface."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from .errors import InvalidGraphError, UnresolvedTypeError

# Not legal in a Go import path or identifier.
NAME_SEPARATOR = "#"


class Kind(str, Enum):
    UNKNOWN = "unknown"
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINTPTR = "uintptr"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    ARRAY = "array"
    CHAN = "chan"
    FUNC = "func"
    INTERFACE = "interface"
    MAP = "map"
    PTR = "ptr"
    SLICE = "slice"
    STRING = "string"
    STRUCT = "struct"
    UNSAFE_POINTER = "unsafepointer"

    def __str__(self) -> str:
        return self.value


ELEM_KINDS = frozenset({Kind.ARRAY, Kind.CHAN, Kind.MAP, Kind.PTR, Kind.SLICE})


class TypeName(str):
    """Qualified name of a named type: `<pkg path>#<name>`.

    The empty string denotes an unnamed (structural) type.
    """

    __slots__ = ()

    @classmethod
    def make(cls, pkg_path: str, name: str) -> "TypeName":
        if not pkg_path:
            return cls(name)
        return cls(f"{pkg_path}{NAME_SEPARATOR}{name}")

    def _split(self) -> tuple[str, str]:
        pkg, sep, name = self.rpartition(NAME_SEPARATOR)
        if not sep:
            return "", str(self)
        return pkg, name

    @property
    def pkg_path(self) -> str:
        return self._split()[0]

    @property
    def name(self) -> str:
        return self._split()[1]


@dataclass(eq=False)
class Method:
    name: str
    # Function type of the method with the receiver argument stripped.
    type: "Type"
    # True when the method is only in the pointer receiver's method set.
    ptr_receiver: bool = False


@dataclass(eq=False)
class Field:
    name: str
    type: "Type"
    anonymous: bool = False
    tag: str = ""


@dataclass(eq=False)
class Type:
    """A node in a type graph.

    Nodes compare and hash by identity. A named type appears either as its
    full definition or as a stub (name only, kind unknown) that must be
    resolved against the graph with `Info.deref`.
    """

    name: TypeName = TypeName("")
    kind: Kind = Kind.UNKNOWN
    # Methods indexed by method name.
    methods: dict[str, Method] = field(default_factory=dict)
    # Struct fields in declaration order; struct only.
    fields: list[Field] = field(default_factory=list)
    # Element type; array, chan, map, ptr and slice only.
    elem: "Type | None" = None
    # Key type; map only.
    key: "Type | None" = None
    # Parameter and result types; func only.
    params: list["Type"] = field(default_factory=list)
    results: list["Type"] = field(default_factory=list)
    variadic: bool = False

    def __post_init__(self) -> None:
        self.name = TypeName(self.name)
        self.kind = Kind(self.kind)

    @property
    def is_stub(self) -> bool:
        return bool(self.name) and self.kind is Kind.UNKNOWN and not self._has_payload()

    def _has_payload(self) -> bool:
        return bool(
            self.methods
            or self.fields
            or self.elem is not None
            or self.key is not None
            or self.params
            or self.results
            or self.variadic
        )

    def ref(self) -> "Type":
        """Return a stub referring to this named type."""
        if not self.name:
            raise InvalidGraphError("cannot reference an unnamed type")
        return Type(name=self.name)

    def field_by_name(self, name: str) -> Field | None:
        """Return the field with the given name, or None.

        Embedded (anonymous) fields are not descended into.
        """
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def children(self) -> Iterator["Type"]:
        """Yield every type directly referenced by this node."""
        if self.elem is not None:
            yield self.elem
        if self.key is not None:
            yield self.key
        yield from self.params
        yield from self.results
        for f in self.fields:
            yield f.type
        for m in self.methods.values():
            yield m.type

    def validate(self) -> None:
        """Check that only the payload meaningful for `kind` is populated."""
        where = self.name or f"<{self.kind.value}>"
        if self.kind is Kind.UNKNOWN:
            if not self.name:
                raise InvalidGraphError("unnamed type with unknown kind")
            if self._has_payload():
                raise InvalidGraphError(f"{where}: stub type carries a payload")
            return
        if self.elem is not None and self.kind not in ELEM_KINDS:
            raise InvalidGraphError(f"{where}: element type set on {self.kind.value}")
        if self.elem is None and self.kind in ELEM_KINDS:
            raise InvalidGraphError(f"{where}: {self.kind.value} without element type")
        if self.key is not None and self.kind is not Kind.MAP:
            raise InvalidGraphError(f"{where}: key type set on {self.kind.value}")
        if self.key is None and self.kind is Kind.MAP:
            raise InvalidGraphError(f"{where}: map without key type")
        if self.kind is not Kind.FUNC and (self.params or self.results or self.variadic):
            raise InvalidGraphError(f"{where}: parameters set on {self.kind.value}")
        if self.kind is Kind.FUNC and self.variadic and not self.params:
            raise InvalidGraphError(f"{where}: variadic func without parameters")
        if self.fields and self.kind is not Kind.STRUCT:
            raise InvalidGraphError(f"{where}: fields set on {self.kind.value}")
        for name, m in self.methods.items():
            if m.name != name:
                raise InvalidGraphError(f"{where}: method {m.name} indexed as {name}")


@dataclass(eq=False)
class Info:
    """A type graph: full definitions of named types, keyed by name."""

    types: dict[TypeName, Type] = field(default_factory=dict)

    def lookup(self, name: str) -> Type | None:
        if not name:
            return None
        return self.types.get(TypeName(name))

    def add(self, t: Type) -> Type:
        """Register the full definition of a named type.

        Re-adding the same node is a no-op; a different node under an
        existing name is rejected.
        """
        if not t.name:
            raise InvalidGraphError("cannot register an unnamed type")
        if t.is_stub:
            raise InvalidGraphError(f"cannot register stub {t.name} as a definition")
        existing = self.types.get(t.name)
        if existing is not None and existing is not t:
            raise InvalidGraphError(f"duplicate type name {t.name!r}")
        self.types[t.name] = t
        return t

    def deref(self, t: Type | None) -> Type | None:
        return deref(self, t)

    def validate(self) -> None:
        validate(self)


def deref(info: Info, t: Type | None) -> Type | None:
    """Resolve a stub to its full definition in `info`.

    Full unnamed types are returned unchanged. A stub with no definition in
    the graph raises UnresolvedTypeError.
    """
    if t is None:
        return None
    dt = info.lookup(t.name)
    if dt is not None:
        return dt
    if t.kind is Kind.UNKNOWN:
        raise UnresolvedTypeError(f"deref type with unknown name {t.name!r}")
    return t


def field_by_name(t: Type, name: str) -> Field | None:
    return t.field_by_name(name)


def validate(info: Info) -> None:
    """Validate every node reachable from the graph's definitions."""
    for name, t in info.types.items():
        if t.name != name:
            raise InvalidGraphError(f"type {t.name!r} registered as {name!r}")
        if t.kind is Kind.UNKNOWN:
            raise InvalidGraphError(f"type {name!r} has no definition")

    seen: set[int] = set()
    stack = list(info.types.values())
    while stack:
        t = stack.pop()
        if id(t) in seen:
            continue
        seen.add(id(t))
        t.validate()
        if t.kind is Kind.UNKNOWN and info.lookup(t.name) is None:
            raise InvalidGraphError(f"reference to undefined type {t.name!r}")
        stack.extend(t.children())
