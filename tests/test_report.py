from __future__ import annotations

from apicompat.compat import Violation
from apicompat.policy import has_any_method
from apicompat.report import compare_graphs
from apicompat.typegraph import Field, Info, Kind, Method, Type, TypeName


def _graph(*types: Type) -> Info:
    info = Info()
    for t in types:
        info.add(t)
    return info


def test_compare_graphs_reports_removed_and_incompatible_types():
    old = _graph(
        Type(name=TypeName("p#B"), kind=Kind.STRUCT, fields=[Field(name="X", type=Type(kind=Kind.INT))]),
        Type(name=TypeName("p#A"), kind=Kind.STRING),
        Type(name=TypeName("p#Gone"), kind=Kind.INT),
    )
    new = _graph(
        Type(name=TypeName("p#B"), kind=Kind.STRUCT),
        Type(name=TypeName("p#A"), kind=Kind.STRING),
        Type(name=TypeName("p#New"), kind=Kind.INT),
    )

    report = compare_graphs(old, new)

    assert not report.ok
    assert report.removed == ["p#Gone"]
    assert report.incompatible == {"p#B": [Violation(path=".X", message="field is missing")]}
    assert list(report.lines()) == [
        "type p#Gone has gone away",
        "p#B incompatible: .X: field is missing",
    ]


def test_compare_graphs_passes_ignore_through():
    marshal = Method(name="MarshalJSON", type=Type(kind=Kind.FUNC))
    old = _graph(Type(name=TypeName("p#T"), kind=Kind.STRUCT, fields=[Field(name="X", type=Type(kind=Kind.INT))], methods={"MarshalJSON": marshal}))
    new = _graph(Type(name=TypeName("p#T"), kind=Kind.STRUCT, methods={"MarshalJSON": marshal}))

    assert not compare_graphs(old, new).ok
    assert compare_graphs(old, new, ignore=has_any_method(["MarshalJSON"])).ok


def test_identical_graphs_are_ok():
    node = Type(name=TypeName("p#Node"), kind=Kind.STRUCT)
    node.fields = [Field(name="Next", type=Type(kind=Kind.PTR, elem=node.ref()))]
    info = _graph(node)

    report = compare_graphs(info, info)
    assert report.ok
    assert list(report.lines()) == []
