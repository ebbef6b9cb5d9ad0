"""Persisted representation of type graphs (JSON text, MessagePack binary).

Wire objects use the Go field names (`Types`, `Name`, `Kind`, `Elem`, ...)
and omit empty values, so a stub is exactly `{"Name": ...}`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import msgpack

from .errors import GraphError, GraphLoadError, InvalidGraphError
from .typegraph import Field, Info, Kind, Method, Type, TypeName

logger = logging.getLogger(__name__)

JSON_SUFFIXES = frozenset({".json"})
MSGPACK_SUFFIXES = frozenset({".msgpack", ".mpk"})


def _type_to_obj(t: Type) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    if t.name:
        obj["Name"] = str(t.name)
    if t.kind is not Kind.UNKNOWN:
        obj["Kind"] = t.kind.value
    if t.methods:
        obj["Methods"] = {
            name: {
                "PtrReceiver": m.ptr_receiver,
                "Name": m.name,
                "Type": _type_to_obj(m.type),
            }
            for name, m in t.methods.items()
        }
    if t.fields:
        fields: list[dict[str, Any]] = []
        for f in t.fields:
            fo: dict[str, Any] = {"Name": f.name, "Type": _type_to_obj(f.type)}
            if f.anonymous:
                fo["Anonymous"] = True
            if f.tag:
                fo["Tag"] = f.tag
            fields.append(fo)
        obj["Fields"] = fields
    if t.elem is not None:
        obj["Elem"] = _type_to_obj(t.elem)
    if t.key is not None:
        obj["Key"] = _type_to_obj(t.key)
    if t.params:
        obj["In"] = [_type_to_obj(p) for p in t.params]
    if t.results:
        obj["Out"] = [_type_to_obj(r) for r in t.results]
    if t.variadic:
        obj["Variadic"] = True
    return obj


def info_to_obj(info: Info) -> dict[str, Any]:
    return {"Types": {str(name): _type_to_obj(t) for name, t in info.types.items()}}


def _expect(v: Any, ty: type, where: str, what: str) -> Any:
    if not isinstance(v, ty) or (ty is not bool and isinstance(v, bool)):
        raise InvalidGraphError(f"{where}: expected {what}")
    return v


def _opt_type(obj: dict[str, Any], key: str, where: str) -> Type | None:
    v = obj.get(key)
    if v is None:
        return None
    return _type_from_obj(v, f"{where}.{key}")


def _type_list(obj: dict[str, Any], key: str, where: str) -> list[Type]:
    raw = _expect(obj.get(key) or [], list, f"{where}.{key}", "list")
    return [_type_from_obj(v, f"{where}.{key}[{i}]") for i, v in enumerate(raw)]


def _type_from_obj(obj: Any, where: str) -> Type:
    obj = _expect(obj, dict, where, "object")
    name = _expect(obj.get("Name") or "", str, f"{where}.Name", "string")
    kind_raw = _expect(obj.get("Kind") or Kind.UNKNOWN.value, str, f"{where}.Kind", "string")
    try:
        kind = Kind(kind_raw)
    except ValueError:
        raise InvalidGraphError(f"{where}: unknown kind {kind_raw!r}") from None

    methods: dict[str, Method] = {}
    raw_methods = _expect(obj.get("Methods") or {}, dict, f"{where}.Methods", "object")
    for mname, mo in raw_methods.items():
        mwhere = f"{where}.Methods.{mname}"
        mo = _expect(mo, dict, mwhere, "object")
        if "Type" not in mo:
            raise InvalidGraphError(f"{mwhere}: method without type")
        methods[mname] = Method(
            name=_expect(mo.get("Name", mname), str, f"{mwhere}.Name", "string"),
            type=_type_from_obj(mo["Type"], f"{mwhere}.Type"),
            ptr_receiver=_expect(mo.get("PtrReceiver", False), bool, f"{mwhere}.PtrReceiver", "bool"),
        )

    fields: list[Field] = []
    raw_fields = _expect(obj.get("Fields") or [], list, f"{where}.Fields", "list")
    for i, fo in enumerate(raw_fields):
        fwhere = f"{where}.Fields[{i}]"
        fo = _expect(fo, dict, fwhere, "object")
        if "Type" not in fo:
            raise InvalidGraphError(f"{fwhere}: field without type")
        fields.append(
            Field(
                name=_expect(fo.get("Name", ""), str, f"{fwhere}.Name", "string"),
                type=_type_from_obj(fo["Type"], f"{fwhere}.Type"),
                anonymous=_expect(fo.get("Anonymous", False), bool, f"{fwhere}.Anonymous", "bool"),
                tag=_expect(fo.get("Tag", ""), str, f"{fwhere}.Tag", "string"),
            )
        )

    return Type(
        name=TypeName(name),
        kind=kind,
        methods=methods,
        fields=fields,
        elem=_opt_type(obj, "Elem", where),
        key=_opt_type(obj, "Key", where),
        params=_type_list(obj, "In", where),
        results=_type_list(obj, "Out", where),
        variadic=_expect(obj.get("Variadic", False), bool, f"{where}.Variadic", "bool"),
    )


def info_from_obj(obj: Any) -> Info:
    """Build and validate a graph from its decoded wire object."""
    obj = _expect(obj, dict, "info", "object")
    raw_types = _expect(obj.get("Types") or {}, dict, "info.Types", "object")
    info = Info()
    for name, to in raw_types.items():
        if not isinstance(name, str):
            raise InvalidGraphError("info.Types: expected string keys")
        t = _type_from_obj(to, name)
        # Definitions may leave Name implied by their key.
        if not t.name:
            t.name = TypeName(name)
        info.types[TypeName(name)] = t
    info.validate()
    return info


def dumps_json(info: Info, *, indent: int | None = None) -> str:
    return json.dumps(info_to_obj(info), indent=indent, sort_keys=True)


def loads_json(data: str | bytes) -> Info:
    try:
        obj = json.loads(data)
    except ValueError as e:
        raise GraphLoadError(f"invalid JSON graph: {e}") from e
    return info_from_obj(obj)


def packb(info: Info) -> bytes:
    return msgpack.packb(info_to_obj(info), use_bin_type=True)


def unpackb(data: bytes) -> Info:
    try:
        obj = msgpack.unpackb(data, raw=False)
    except Exception as e:  # noqa: BLE001 - boundary decoding error
        raise GraphLoadError(f"invalid MessagePack graph: {e}") from e
    return info_from_obj(obj)


def _is_msgpack(path: Path) -> bool:
    suffix = path.suffix.lower()
    if suffix in MSGPACK_SUFFIXES:
        return True
    if suffix in JSON_SUFFIXES:
        return False
    raise GraphLoadError(f"unsupported graph file extension: {path}")


def read_info(path: str | Path) -> Info:
    """Load a graph from a `.json` or `.msgpack`/`.mpk` file."""
    path = Path(path)
    if not path.exists():
        raise GraphLoadError(f"graph file not found: {path}")
    binary = _is_msgpack(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise GraphLoadError(f"failed to read {path}: {e}") from e

    try:
        info = unpackb(data) if binary else loads_json(data)
    except GraphLoadError as e:
        raise GraphLoadError(f"{path}: {e}") from e
    except GraphError as e:
        raise type(e)(f"{path}: {e}") from e
    logger.debug("loaded %d type(s) from %s", len(info.types), path)
    return info


def write_info(info: Info, path: str | Path) -> None:
    path = Path(path)
    binary = _is_msgpack(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if binary:
        path.write_bytes(packb(info))
    else:
        path.write_text(dumps_json(info, indent=2) + "\n", encoding="utf-8")
    logger.debug("wrote %d type(s) to %s", len(info.types), path)
