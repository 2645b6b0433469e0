"""
treefold: stack-safe catamorphisms over kind-tagged syntax trees.
"""

from .shared import (
    Node, node, SourceLocation,
    FoldError, UnknownKindError, MalformedNodeError, CombineError, StepBudgetExceeded,
    ErrorReporter,
)
from .engine import (
    Thunk, Driver, bounce, trampoline,
    ChildSelector, HandlerEntry, HandlerTable, iter_results,
    Catamorphism, fold, fold_step,
)

__version__ = "0.1.0"
