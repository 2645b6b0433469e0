"""
Trampoline driver

A logically recursive computation is expressed as a chain of steps. A step
is either a Thunk (a deferred call that produces the next step) or any other
value, which is final. The driver resolves thunks by loop iteration, so the
host call stack never grows with the length of the chain.
"""

from typing import Any, Callable, Optional

from ..shared.errors import StepBudgetExceeded


class Thunk:
    """Deferred call: `func(*args)` returning the next step."""

    __slots__ = ("func", "args")

    def __init__(self, func: Callable[..., Any], *args: Any) -> None:
        self.func = func
        self.args = args

    def __call__(self) -> Any:
        return self.func(*self.args)

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"Thunk({name}, {len(self.args)} args)"


def bounce(func: Callable[..., Any], *args: Any) -> Thunk:
    return Thunk(func, *args)


def trampoline(step: Any) -> Any:
    """Resolve `step` until a non-thunk value appears and return it."""
    while isinstance(step, Thunk):
        step = step.func(*step.args)
    return step


class Driver:
    """
    Trampoline that counts its iterations.

    With `max_steps` set, a chain longer than the budget raises
    StepBudgetExceeded. Thunks that loop forever are otherwise the caller's
    problem; there is no cycle detection. Exceptions raised by a thunk
    propagate unchanged.
    """

    def __init__(self, max_steps: Optional[int] = None) -> None:
        if max_steps is not None and max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {max_steps}")
        self.max_steps = max_steps
        self.steps = 0

    def run(self, step: Any) -> Any:
        limit = self.max_steps
        steps = self.steps
        try:
            while isinstance(step, Thunk):
                if limit is not None and steps >= limit:
                    raise StepBudgetExceeded(limit)
                step = step.func(*step.args)
                steps += 1
        finally:
            self.steps = steps
        return step
