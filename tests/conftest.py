from __future__ import annotations

import pytest

from apicompat.typegraph import Field, Info, Kind, Method, Type, TypeName

PKG = "example.com/api"


def _linked_list_graph() -> Info:
    # type Node struct { Value int; Next *Node }
    # func (n Node) String() string
    info = Info()
    node = Type(name=TypeName.make(PKG, "Node"), kind=Kind.STRUCT)
    node.fields = [
        Field(name="Value", type=Type(kind=Kind.INT), tag='json:"value"'),
        Field(name="Next", type=Type(kind=Kind.PTR, elem=node.ref()), tag='json:"next,omitempty"'),
    ]
    node.methods = {
        "String": Method(name="String", type=Type(kind=Kind.FUNC, results=[Type(kind=Kind.STRING)])),
    }
    info.add(node)
    return info


@pytest.fixture
def linked_list_graph():
    """Return a factory building independent copies of a self-referential graph."""
    return _linked_list_graph
