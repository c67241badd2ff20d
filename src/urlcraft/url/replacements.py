"""src/urlcraft/url/replacements.py

Placeholder substitution for endpoint templates.
"""

import re
from typing import Mapping, Optional

__all__ = ["apply_replacements"]


def apply_replacements(
    template: str, replacements: Optional[Mapping[str, str]]
) -> str:
    """
    Replace every ``{key}`` token in ``template`` with its mapped value.

    All keys are substituted in a single left-to-right pass, so the result
    does not depend on key order and inserted values are never scanned for
    further placeholders. Tokens without a mapping entry are left as-is.

    Args:
        template: Endpoint template, e.g. ``"users/{userId}"``.
        replacements: Mapping of placeholder name to value.

    Returns:
        The template with known placeholders substituted.
    """
    if not template or not replacements:
        return template

    tokens = {"{" + key + "}": str(value) for key, value in replacements.items()}
    # Longest first so a token never shadows a longer one sharing its prefix
    pattern = re.compile(
        "|".join(re.escape(token) for token in sorted(tokens, key=len, reverse=True))
    )
    return pattern.sub(lambda match: tokens[match.group(0)], template)
