"""
Handler tables

A handler table maps a node kind to the fields that hold its children and
the function that combines the folded children into the node's value. The
table is the only extension point of the engine: counting, measuring,
reshaping and translating trees are all just different tables.
"""

from dataclasses import dataclass
from typing import (
    Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union,
)
from typing_extensions import TypeAlias

from ..shared.nodes import Node

Combine: TypeAlias = Callable[[Node, List[Any]], Any]
SelectorSpec: TypeAlias = Union[str, "ChildSelector"]
Schema: TypeAlias = Mapping[str, Sequence[SelectorSpec]]

SEQUENCE_SUFFIX = "*"
OPTIONAL_SUFFIX = "?"


@dataclass(frozen=True)
class ChildSelector:
    """
    Declares one child-bearing field.

    A sequence selector folds every element in order and contributes a list.
    An optional selector tolerates a missing field or None and contributes None.
    """
    field: str
    sequence: bool = False
    optional: bool = False

    @classmethod
    def parse(cls, spec: SelectorSpec) -> "ChildSelector":
        """Accept "left", "body*" (sequence) or "init?" (optional single child)"""
        if isinstance(spec, ChildSelector):
            return spec
        if not isinstance(spec, str) or not spec:
            raise ValueError(f"Invalid child selector: {spec!r}")
        name, sequence, optional = spec, False, False
        if spec.endswith(SEQUENCE_SUFFIX):
            name, sequence = spec[:-1], True
        elif spec.endswith(OPTIONAL_SUFFIX):
            name, optional = spec[:-1], True
        if not name or SEQUENCE_SUFFIX in name or OPTIONAL_SUFFIX in name:
            raise ValueError(f"Invalid child selector: {spec!r}")
        return cls(name, sequence=sequence, optional=optional)

    def __str__(self) -> str:
        if self.sequence:
            return self.field + SEQUENCE_SUFFIX
        if self.optional:
            return self.field + OPTIONAL_SUFFIX
        return self.field


@dataclass(frozen=True)
class HandlerEntry:
    selectors: Tuple[ChildSelector, ...]
    combine: Combine


def _parse_selectors(children: Iterable[SelectorSpec]) -> Tuple[ChildSelector, ...]:
    if isinstance(children, str):
        children = (children,)
    selectors = tuple(ChildSelector.parse(spec) for spec in children)
    seen = set()
    for selector in selectors:
        if selector.field in seen:
            raise ValueError(f"Child field '{selector.field}' declared twice")
        seen.add(selector.field)
    return selectors


class HandlerTable(Mapping[str, HandlerEntry]):
    """
    Mapping from node kind to HandlerEntry.

    Usage:
        table = HandlerTable("count")

        @table.register("BinaryExpression", ["left", "right"])
        def _binary(node, children):
            return 1 + sum(children)
    """

    def __init__(self, name: str = "anonymous",
                 entries: Optional[Mapping[str, HandlerEntry]] = None) -> None:
        self.name = name
        self._entries: Dict[str, HandlerEntry] = dict(entries or {})

    # Mapping protocol ----------------------------------------------------

    def __getitem__(self, kind: str) -> HandlerEntry:
        return self._entries[kind]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HandlerTable({self.name!r}, kinds={sorted(self._entries)})"

    # Registration --------------------------------------------------------

    def register(self, kind: str, children: Iterable[SelectorSpec] = (),
                 combine: Optional[Combine] = None, replace: bool = False):
        """
        Register `combine` for `kind`. Without `combine`, returns a decorator.

        Registering a kind twice is an error unless `replace` is set.
        """
        selectors = _parse_selectors(children)

        def decorator(func: Combine) -> Combine:
            if not callable(func):
                raise TypeError(f"combine for '{kind}' must be callable")
            if kind in self._entries and not replace:
                raise ValueError(f"Handler for kind '{kind}' already registered in table '{self.name}'")
            self._entries[kind] = HandlerEntry(selectors, func)
            return func

        if combine is None:
            return decorator
        decorator(combine)
        return combine

    def extend(self, other: Mapping[str, HandlerEntry], name: Optional[str] = None) -> "HandlerTable":
        """New table with `other`'s entries layered over this one"""
        merged = dict(self._entries)
        merged.update(other)
        return HandlerTable(name or self.name, merged)

    @classmethod
    def uniform(cls, schema: Schema, combine: Combine, name: str = "uniform") -> "HandlerTable":
        """Table applying one combine function to every kind in `schema`"""
        table = cls(name)
        for kind, children in schema.items():
            table.register(kind, children, combine)
        return table


def iter_results(folded: Iterable[Any]) -> Iterator[Any]:
    """
    Flatten folded children: sequence results are expanded in order and
    absent optional children (None) are skipped.
    """
    for value in folded:
        if isinstance(value, list):
            yield from value
        elif value is not None:
            yield value
