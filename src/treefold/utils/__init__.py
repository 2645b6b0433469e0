"""
treefold utilities package
"""

from .config import DEFAULT_FILE_ENCODING, DEFAULT_SOURCE_NAME

__all__ = ["DEFAULT_FILE_ENCODING", "DEFAULT_SOURCE_NAME"]
