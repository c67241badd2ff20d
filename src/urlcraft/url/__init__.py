"""src/urlcraft/url/__init__.py

URL building, parsing and placeholder substitution.
"""

from .formatter import UrlFormatter
from .replacements import apply_replacements

__all__ = ["UrlFormatter", "apply_replacements"]
