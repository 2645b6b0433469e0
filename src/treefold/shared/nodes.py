"""
Kind-tagged tree nodes

A Node is a grammar production tag plus a read-only mapping of fields.
Field values are scalars carried through unchanged, a single child Node,
or an ordered sequence of child Nodes. Which fields hold children is not
known here: the handler table declares it per kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from .source_location import SourceLocation


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


def _structurally_equal(left: "Node", right: "Node") -> bool:
    """Compare two trees pair by pair from an explicit worklist"""
    pending = [(left, right)]
    while pending:
        a, b = pending.pop()
        if a is b:
            continue
        if isinstance(a, Node) or isinstance(b, Node):
            if not (isinstance(a, Node) and isinstance(b, Node)):
                return False
            if a.kind != b.kind or a.fields.keys() != b.fields.keys():
                return False
            pending.extend((value, b.fields[name]) for name, value in a.fields.items())
        elif isinstance(a, tuple) and isinstance(b, tuple):
            if len(a) != len(b):
                return False
            pending.extend(zip(a, b))
        elif a != b:
            return False
    return True


@dataclass(frozen=True, eq=False)
class Node:
    """
    Immutable tree element.

    Equality is structural over kind and fields and runs without recursion,
    so trees of any depth can be compared. `location` is informational and
    does not take part, so a rebuilt tree compares equal to its source
    regardless of where it came from.
    """
    kind: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    location: Optional[SourceLocation] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, str) or not self.kind:
            raise TypeError(f"Node kind must be a non-empty string, got {self.kind!r}")
        frozen = {name: _freeze(value) for name, value in dict(self.fields).items()}
        object.__setattr__(self, "fields", MappingProxyType(frozen))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return _structurally_equal(self, other)

    # Nodes compare by value but are never used as keys; deep chains would
    # make a structural hash recurse.
    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def replace(self, **changes: Any) -> "Node":
        """Return a copy with some fields replaced"""
        merged = dict(self.fields)
        merged.update(changes)
        return Node(self.kind, merged, self.location)

    def __repr__(self) -> str:
        # Children are summarised so a deep tree never recurses through repr.
        parts = []
        for name, value in self.fields.items():
            if isinstance(value, Node):
                parts.append(f"{name}=<{value.kind}>")
            elif isinstance(value, tuple) and any(isinstance(v, Node) for v in value):
                parts.append(f"{name}=[{len(value)} nodes]")
            else:
                parts.append(f"{name}={value!r}")
        return f"Node({self.kind}, {', '.join(parts)})"


def node(kind: str, location: Optional[SourceLocation] = None, **fields: Any) -> Node:
    """Build a node from keyword fields: node("Literal", value=1, raw="1")"""
    return Node(kind, fields, location)

