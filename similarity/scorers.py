"""
Similarity scorers.

Jaccard similarity over token sets catches structural copying that survives
renaming and reordering; Levenshtein similarity over normalized characters
catches near-verbatim copies. Both return a ratio in [0, 1] and never raise.
"""
import math
from typing import Iterable

from rapidfuzz.distance import Levenshtein

from .normalizer import normalize_for_distance


def jaccard(tokens_a: Iterable[str], tokens_b: Iterable[str]) -> float:
    """
    Jaccard similarity of two token collections.

    Duplicates are collapsed: |A ∩ B| / |A ∪ B| over the token sets.

    Args:
        tokens_a: Tokens of the first text
        tokens_b: Tokens of the second text

    Returns:
        Ratio in [0, 1]; 0 if either set is empty

    Examples:
        >>> jaccard(["a", "b"], ["b", "c"])
        0.3333333333333333
        >>> jaccard([], ["a"])
        0.0
    """
    set_a = set(tokens_a)
    set_b = set(tokens_b)
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def levenshtein_distance(a: str, b: str) -> int:
    """
    Unit-cost edit distance (insertion, deletion, substitution).

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
    """
    return Levenshtein.distance(a, b)


def levenshtein_similarity(text_a: str, text_b: str) -> float:
    """
    Character-level similarity of two source texts.

    Both texts are normalized (comments and whitespace removed, lower-cased)
    and compared as 1 - distance / max(len_a, len_b).

    Returns:
        Ratio in [0, 1]; 0 if either normalized text is empty

    Examples:
        >>> levenshtein_similarity("abcd", "abce")
        0.75
        >>> levenshtein_similarity("x = 1;", "X=1; // same")
        1.0
    """
    s1 = normalize_for_distance(text_a or "")
    s2 = normalize_for_distance(text_b or "")
    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0
    return 1 - levenshtein_distance(s1, s2) / max(len(s1), len(s2))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded up.

    Unlike built-in round(), 40.5 becomes 41, not 40.

    Examples:
        >>> round_half_up(40.5)
        41
        >>> round_half_up(94.5)
        95
        >>> round_half_up(2.4)
        2
    """
    return math.floor(value + 0.5)
