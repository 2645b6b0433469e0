"""
Fold engine: trampoline driver, handler tables and the catamorphism dispatcher.
"""

from .trampoline import Thunk, Driver, bounce, trampoline
from .handlers import ChildSelector, HandlerEntry, HandlerTable, iter_results
from .fold import Catamorphism, fold, fold_step

__all__ = [
    "Thunk", "Driver", "bounce", "trampoline",
    "ChildSelector", "HandlerEntry", "HandlerTable", "iter_results",
    "Catamorphism", "fold", "fold_step",
]
