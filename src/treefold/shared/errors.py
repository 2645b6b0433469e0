"""
Error Reporting

Fold failures carry the offending kind, the ancestor trail leading to the
node, and its source location when the tree came from the frontend.
ErrorReporter renders them compiler-style with a source snippet.
"""

import os
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .source_location import SourceLocation
from ..utils.config import COLOR_ENV, ERROR_POINTER_CHAR, NO_COLOR_ENV, TRAIL_SEPARATOR


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get(NO_COLOR_ENV):
        return False
    explicit = os.environ.get(COLOR_ENV, "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Diagnostic dataclass
# ---------------------------------------------------------------------------

@dataclass
class Diagnostic:
    """A rendered-on-demand error record"""
    message: str
    location: Optional[SourceLocation] = None
    code: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


def format_path(path: Sequence[str]) -> str:
    return TRAIL_SEPARATOR.join(path)


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(
    diagnostic: Diagnostic,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic.

    Example output (plain, no color)::

        error[F0001]: no handler registered for node kind 'Mystery'
         --> main.js:1:9
          |
        1 | let x = mystery;
          |         ^^^^^^^ unknown kind
          |
          = note: while folding Program > body[0]:VariableDeclaration > ...
    """
    out: List[str] = []

    code_str = f"[{diagnostic.code}]" if diagnostic.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {diagnostic.message}", _BOLD, color=color)
    )

    loc = diagnostic.location
    if loc is None:
        _append_note(out, diagnostic, 1, color)
        return "\n".join(out)

    source = source_files.get(loc.file)
    src_lines = source.split("\n") if source is not None else []
    gw = max(len(str(loc.line)), 1)

    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))
    if not 0 < loc.line <= len(src_lines):
        _append_note(out, diagnostic, gw, color)
        return "\n".join(out)

    code_line = src_lines[loc.line - 1]
    col_start = max(loc.column, 1) - 1
    if loc.end_line == loc.line and loc.end_column > loc.column:
        span_len = loc.end_column - loc.column
    else:
        span_len = _guess_span(code_line, col_start)
    carets = " " * col_start + ERROR_POINTER_CHAR * max(1, span_len)
    label_suffix = f" {diagnostic.label}" if diagnostic.label else ""

    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets + label_suffix, _BOLD, _RED, color=color)
    )
    _append_note(out, diagnostic, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length when end_column is unavailable."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", ";", ",", ")", "]", "}"):
            break
        length += 1
    return max(1, length)


def _append_note(out: List[str], diagnostic: Diagnostic, gw: int, color: bool) -> None:
    if not diagnostic.note:
        return
    pad = " " * (gw + 1)
    out.append(_style(pad + "|", _BOLD, _BLUE, color=color))
    out.append(
        _style(f"{pad}= ", _BOLD, _CYAN, color=color)
        + _style("note: ", _BOLD, color=color)
        + diagnostic.note
    )


# ============================================================================
# Exception Classes
# ============================================================================

class FoldError(Exception):
    """Base exception for every failure the fold engine detects"""
    code = "F0000"
    label: Optional[str] = None

    def __init__(self,
                 message: str,
                 path: Sequence[str] = (),
                 location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.path: Tuple[str, ...] = tuple(path)
        self.location = location

    def to_diagnostic(self) -> Diagnostic:
        note = f"while folding {format_path(self.path)}" if self.path else None
        return Diagnostic(
            message=self.message,
            location=self.location,
            code=self.code,
            note=note,
            label=self.label,
        )

    def __str__(self) -> str:
        return _format_diagnostic(self.to_diagnostic(), {}, color=False)


class UnknownKindError(FoldError):
    """A node's kind has no entry in the handler table"""
    code = "F0001"
    label = "unknown kind"

    def __init__(self, kind: str, path: Sequence[str] = (),
                 location: Optional[SourceLocation] = None,
                 table_name: Optional[str] = None):
        where = f" in table '{table_name}'" if table_name else ""
        super().__init__(f"no handler registered for node kind '{kind}'{where}", path, location)
        self.kind = kind
        self.table_name = table_name


class MalformedNodeError(FoldError):
    """A declared child field is missing or has the wrong shape"""
    code = "F0002"

    def __init__(self, kind: str, field: Optional[str], expected: str, found: str,
                 path: Sequence[str] = (),
                 location: Optional[SourceLocation] = None):
        subject = f"field '{field}' of '{kind}'" if field else f"'{kind}'"
        super().__init__(f"malformed node: {subject} expected {expected}, found {found}", path, location)
        self.kind = kind
        self.field = field
        self.expected = expected
        self.found = found
        self.label = f"expected {expected}"


class CombineError(FoldError):
    """
    Raised by handler tables for failures inside their own combine logic.

    The engine itself never raises or wraps this: any exception a combine
    function raises reaches the caller untouched.
    """
    code = "F0003"

    def __init__(self, message: str, kind: Optional[str] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(message, (), location)
        self.kind = kind


class StepBudgetExceeded(FoldError):
    """The driver ran more steps than the caller allowed"""
    code = "F0004"

    def __init__(self, max_steps: int):
        super().__init__(f"fold exceeded its budget of {max_steps} steps")
        self.max_steps = max_steps


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """Collects fold and parse errors and renders them against their sources."""

    def __init__(self, source_files: Optional[Dict[str, str]] = None):
        self.source_files: Dict[str, str] = dict(source_files or {})
        self.errors: List[Diagnostic] = []

    def add_source(self, name: str, text: str) -> None:
        self.source_files[name] = text

    def report(self, error: FoldError) -> None:
        self.errors.append(error.to_diagnostic())

    def report_error(self,
                     message: str,
                     location: Optional[SourceLocation] = None,
                     code: Optional[str] = None,
                     note: Optional[str] = None,
                     label: Optional[str] = None) -> None:
        self.errors.append(Diagnostic(message, location, code, note, label))

    def format_error(self, diagnostic: Diagnostic, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(diagnostic, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(d, color=use_color) for d in self.errors]
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": {summary}", _BOLD, color=use_color)
        )
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0
