"""
Frontend: source text to kind-tagged node trees.
"""

from .parser import Parser, ParseError

__all__ = ["Parser", "ParseError"]
