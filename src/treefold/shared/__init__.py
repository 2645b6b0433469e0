"""
Shared components: node model, source locations, errors.
"""

from .source_location import SourceLocation
from .nodes import Node, node
from .errors import (
    Diagnostic, ErrorReporter, FoldError, UnknownKindError, MalformedNodeError,
    CombineError, StepBudgetExceeded, format_path,
)
