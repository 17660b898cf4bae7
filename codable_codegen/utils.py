"""
Naming helpers shared by the analyzer and the code backends.
"""

import re

_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def snake_to_pascal_case(text: str) -> str:
    """Convert a snake_case member name to PascalCase.

    Examples:
        "hex_color" -> "HexColor"
        "iso8601_date" -> "Iso8601Date"
        "not_found" -> "NotFound"
        "stepCount" -> "StepCount"
    """
    words = _WORD_PATTERN.findall(text.replace("_", " ").replace("-", " "))
    return "".join(word[:1].upper() + word[1:] for word in words)
