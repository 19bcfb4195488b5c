"""
Pattern preprocessing for the quoted-string shorthand.

Format patterns may write ``\\"`` or ``\\'`` where a whole quoted string
literal is expected. ``expand`` rewrites each such token into a standard
sub-pattern before compilation.
"""

import regex
from typing import Dict


# Body: any char except backslash or the closing quote, or any escaped char.
DOUBLE_QUOTED_STRING = r'(?:"(?:[^\\"]|(?:\\.))*")'
SINGLE_QUOTED_STRING = r"(?:'(?:[^\\']|(?:\\.))*')"

QUOTED_STRING_PATTERNS: Dict[str, str] = {
    '"': DOUBLE_QUOTED_STRING,
    "'": SINGLE_QUOTED_STRING,
}

# A backslash always consumes the following character, so "\\\\" followed
# by a quote is an escaped backslash and a plain quote, not the shorthand.
_ESCAPE_PAIR = regex.compile(r'\\(.)', regex.DOTALL)


def _expand_quote(pattern: str, quote: str, replacement: str) -> str:
    def substitute(match) -> str:
        if match.group(1) == quote:
            return replacement
        return match.group(0)

    return _ESCAPE_PAIR.sub(substitute, pattern)


def expand(pattern: str) -> str:
    """
    Convert a pattern using the ``\\"`` / ``\\'`` shorthand into a standard
    regular expression.

    Args:
        pattern: Raw pattern text, possibly containing shorthand tokens

    Returns:
        The equivalent pattern. Text without shorthand is returned unchanged,
        and expanding an already expanded pattern is a no-op.
    """
    for quote, replacement in QUOTED_STRING_PATTERNS.items():
        pattern = _expand_quote(pattern, quote, replacement)
    return pattern
