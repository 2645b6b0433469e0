"""
Configuration constants to replace magic values throughout treefold
"""

import os
import tempfile

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "treefold_parser.cache")
DEFAULT_SOURCE_NAME = "<input>"

# Trail rendering constants
TRAIL_SEPARATOR = " > "
TRAIL_KIND_SEPARATOR = ":"

# Driver constants
DEFAULT_MAX_STEPS = None  # No step budget unless a caller asks for one

# CLI constants
DEFAULT_ALGEBRA = "count"
JSON_INDENT = 2

# Environment variables controlling diagnostic colour
NO_COLOR_ENV = "NO_COLOR"
COLOR_ENV = "TREEFOLD_COLOR"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Error reporting constants
ERROR_POINTER_CHAR = "^"
