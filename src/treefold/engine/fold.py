"""
Catamorphism dispatcher

Folds a kind-tagged tree bottom-up with one handler per kind. Every step of
the traversal is a Thunk handed back to the Driver, and "what happens after
this subtree" is carried by an explicit continuation, so folding a tree of
any depth runs in constant host stack.

Per node:
1. look up the handler for node.kind (UnknownKindError if missing)
2. validate the declared child fields (MalformedNodeError)
3. fold the children one at a time, in declaration and sequence order
4. call combine(node, folded_children)
5. pass the value to the continuation
"""

import logging
from typing import Any, Callable, List, Optional, Tuple

from .handlers import HandlerEntry, HandlerTable
from .trampoline import Driver, Thunk
from ..shared.errors import MalformedNodeError, UnknownKindError
from ..shared.nodes import Node
from ..utils.config import DEFAULT_MAX_STEPS, TRAIL_KIND_SEPARATOR

logger = logging.getLogger("treefold.engine.fold")

Continuation = Callable[[Any], Any]

# Layout tags for reassembling flat child results into selector order
_SINGLE = 0
_SEQUENCE = 1
_ABSENT = 2


def _identity(value: Any) -> Any:
    return value


class _Final:
    """Boxes a fold result so the driver returns it even when it is a Thunk"""

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value


class _Trail:
    """
    Parent-linked ancestor chain. Extending it is O(1); the readable path is
    only built when an error needs it.
    """

    __slots__ = ("parent", "label", "kind")

    def __init__(self, parent: Optional["_Trail"], label: Optional[str], kind: str) -> None:
        self.parent = parent
        self.label = label
        self.kind = kind

    def path(self) -> Tuple[str, ...]:
        segments = []
        trail: Optional[_Trail] = self
        while trail is not None:
            if trail.label is None:
                segments.append(trail.kind)
            else:
                segments.append(f"{trail.label}{TRAIL_KIND_SEPARATOR}{trail.kind}")
            trail = trail.parent
        segments.reverse()
        return tuple(segments)


def _describe(value: Any) -> str:
    if isinstance(value, Node):
        return f"node '{value.kind}'"
    if value is None:
        return "None"
    return type(value).__name__


class Catamorphism:
    """
    Fold engine bound to one handler table.

    The table is only read, so one Catamorphism can serve any number of folds,
    including concurrent ones.
    """

    def __init__(self, table: HandlerTable, max_steps: Optional[int] = DEFAULT_MAX_STEPS) -> None:
        self.table = table
        self.max_steps = max_steps

    # Public API ----------------------------------------------------------

    def step(self, node: Node, continuation: Continuation = _identity) -> Thunk:
        """
        Unresolved driver step folding `node` and handing the value to
        `continuation`. The continuation's return value is itself a step: a
        Thunk keeps the driver going, anything else ends the run.
        """
        return Thunk(self._enter, node, continuation, None, None)

    def run(self, node: Node, continuation: Optional[Continuation] = None) -> Any:
        """
        Fold `node` to completion and return the final value.

        Without a continuation the root value is returned as is, whatever its
        type. A caller continuation returns a step like any other, so a Thunk
        from it keeps the driver going.
        """
        table_name = getattr(self.table, "name", type(self.table).__name__)
        logger.debug(f"Folding {_describe(node)} with table '{table_name}'")
        driver = Driver(self.max_steps)
        if continuation is None:
            result = driver.run(self.step(node, _Final)).value
        else:
            result = driver.run(self.step(node, continuation))
        logger.debug(f"Fold with table '{table_name}' finished after {driver.steps} steps")
        return result

    # Traversal -----------------------------------------------------------

    def _enter(self, node: Any, k: Continuation, parent: Optional[_Trail], label: Optional[str]) -> Any:
        if not isinstance(node, Node):
            where = parent.path() if parent is not None else ()
            owner = parent.kind if parent is not None else "<root>"
            raise MalformedNodeError(owner, label, "a node", _describe(node), where)

        trail = _Trail(parent, label, node.kind)
        entry = self.table.get(node.kind)
        if entry is None:
            raise UnknownKindError(node.kind, trail.path(), node.location,
                                   getattr(self.table, "name", None))

        pending, layout = self._collect(node, entry, trail)
        if not pending:
            return Thunk(self._combine, node, entry, layout, [], k)
        return self._fold_children(node, entry, pending, layout, [], 0, trail, k)

    def _collect(self, node: Node, entry: HandlerEntry,
                 trail: _Trail) -> Tuple[List[Tuple[Node, str]], List[Tuple[int, int, int]]]:
        """Validate declared children and list them in fold order"""
        pending: List[Tuple[Node, str]] = []
        layout: List[Tuple[int, int, int]] = []
        for selector in entry.selectors:
            name = selector.field
            if name not in node.fields:
                if selector.optional:
                    layout.append((_ABSENT, 0, 0))
                    continue
                raise MalformedNodeError(node.kind, name, "a declared child field", "no such field",
                                         trail.path(), node.location)
            value = node.fields[name]

            if selector.sequence:
                if not isinstance(value, (tuple, list)):
                    raise MalformedNodeError(node.kind, name, "a sequence of nodes", _describe(value),
                                             trail.path(), node.location)
                layout.append((_SEQUENCE, len(pending), len(value)))
                for index, child in enumerate(value):
                    if not isinstance(child, Node):
                        raise MalformedNodeError(node.kind, f"{name}[{index}]", "a node", _describe(child),
                                                 trail.path(), node.location)
                    pending.append((child, f"{name}[{index}]"))
            elif value is None and selector.optional:
                layout.append((_ABSENT, 0, 0))
            elif isinstance(value, Node):
                layout.append((_SINGLE, len(pending), 1))
                pending.append((value, name))
            else:
                raise MalformedNodeError(node.kind, name, "a node", _describe(value),
                                         trail.path(), node.location)
        return pending, layout

    def _fold_children(self, node: Node, entry: HandlerEntry, pending: List[Tuple[Node, str]],
                       layout: List[Tuple[int, int, int]], results: List[Any], index: int,
                       trail: _Trail, k: Continuation) -> Thunk:
        child, label = pending[index]

        def resume(value: Any) -> Thunk:
            results.append(value)
            if index + 1 == len(pending):
                return Thunk(self._combine, node, entry, layout, results, k)
            return Thunk(self._fold_children, node, entry, pending, layout, results, index + 1, trail, k)

        return Thunk(self._enter, child, resume, trail, label)

    def _combine(self, node: Node, entry: HandlerEntry, layout: List[Tuple[int, int, int]],
                 results: List[Any], k: Continuation) -> Thunk:
        folded: List[Any] = []
        for tag, start, count in layout:
            if tag == _SINGLE:
                folded.append(results[start])
            elif tag == _SEQUENCE:
                folded.append(results[start:start + count])
            else:
                folded.append(None)
        return Thunk(k, entry.combine(node, folded))


def fold_step(node: Node, table: HandlerTable, continuation: Continuation = _identity) -> Thunk:
    """CPS fold: a driver step that folds `node` and passes the value on"""
    return Catamorphism(table).step(node, continuation)


def fold(node: Node, table: HandlerTable, continuation: Optional[Continuation] = None,
         max_steps: Optional[int] = DEFAULT_MAX_STEPS) -> Any:
    """Fold `node` with `table` and return the result (or the continuation's result)"""
    return Catamorphism(table, max_steps).run(node, continuation)
