"""
Source text normalization.

This module contains pure functions that strip comments and whitespace
from C-like source code (TypeScript, JavaScript, C, C++, Java) and split
it into tokens for the similarity scorers.
"""
import re

# Line comments and block comments
COMMENT_RE = re.compile(r"//.*|/\*[\s\S]*?\*/")
WHITESPACE_RE = re.compile(r"\s+")
# Token boundaries: whitespace plus punctuation and operators
TOKEN_SPLIT_RE = re.compile(r"[\s,;{}()\[\]<>=!+\-*/%&|^~?:]+")


def strip_comments(text: str) -> str:
    """
    Remove // line comments and /* */ block comments.

    Examples:
        >>> strip_comments("x = 1; // one")
        'x = 1; '
        >>> strip_comments("a /* b */ c")
        'a  c'
    """
    if not text:
        return ""
    return COMMENT_RE.sub("", text)


def normalize(text: str) -> list[str]:
    """
    Normalize source text into an ordered token sequence.

    Removes comments, collapses whitespace and splits on punctuation and
    operator boundaries. Empty tokens are dropped.

    Args:
        text: Raw source text (may be empty)

    Returns:
        List of tokens, empty for empty input

    Examples:
        >>> normalize("for (let i = 0; i < 4; i++) { turtle.forward(100); }")
        ['for', 'let', 'i', '0', 'i', '4', 'i', 'turtle.forward', '100']
        >>> normalize("")
        []
    """
    collapsed = WHITESPACE_RE.sub(" ", strip_comments(text)).strip()
    return [token for token in TOKEN_SPLIT_RE.split(collapsed) if token]


def normalize_for_distance(text: str) -> str:
    """
    Normalize source text for character-level comparison.

    Comments and all whitespace are removed and the text is lower-cased.

    Examples:
        >>> normalize_for_distance("Return  X; // done")
        'returnx;'
    """
    return WHITESPACE_RE.sub("", strip_comments(text)).lower()
