"""
Words, alphabets and the shortlex order.

This is the layer everything else builds on. Nothing in here knows
about rules or completion.

Words:
    External words are plain strings over the presentation alphabet:
    "abba" over the alphabet "ab".

    Internal words are strings where every letter has been replaced by
    chr(index-of-letter). Native string comparison on internal words is
    then the lexicographic order on letter indices, which is what
    shortlex needs, whatever characters the alphabet uses.
"""

import string


class PresentationError(ValueError):
    """Base class for bad input to a presentation."""


class AlphabetError(PresentationError):
    """The alphabet is malformed (duplicate letters, wrong type)."""


class LetterError(PresentationError):
    """A word uses a letter that is not in the alphabet."""


def make_alphabet(alphabet) -> str:
    """
    Normalize an alphabet.

    A str is used as-is (its letters must be distinct). An int n means
    the first n lowercase letters.
    """
    if isinstance(alphabet, bool):
        raise AlphabetError(f"expected a str or int alphabet, got {alphabet!r}")
    if isinstance(alphabet, int):
        if alphabet < 0 or alphabet > len(string.ascii_lowercase):
            raise AlphabetError(
                f"alphabet size must be in [0, {len(string.ascii_lowercase)}], got {alphabet}"
            )
        return string.ascii_lowercase[:alphabet]
    if not isinstance(alphabet, str):
        raise AlphabetError(f"expected a str or int alphabet, got {type(alphabet).__name__}")
    seen = set()
    for letter in alphabet:
        if letter in seen:
            raise AlphabetError(f"duplicate letter {letter!r} in alphabet {alphabet!r}")
        seen.add(letter)
    return alphabet


def validate_word(word: str, alphabet: str):
    """Raise LetterError if word is not a str over alphabet."""
    if not isinstance(word, str):
        raise LetterError(f"expected a str word, got {type(word).__name__}")
    for i, letter in enumerate(word):
        if letter not in alphabet:
            raise LetterError(
                f"invalid letter {letter!r} in position {i} of {word!r}, "
                f"valid letters are {alphabet!r}"
            )


def to_internal_table(alphabet: str) -> dict:
    """Translation table external letter -> internal letter."""
    return {ord(letter): chr(i) for i, letter in enumerate(alphabet)}


def to_external_table(alphabet: str) -> dict:
    """Translation table internal letter -> external letter."""
    return {i: letter for i, letter in enumerate(alphabet)}


def shortlex_less(u: str, v: str) -> bool:
    """Is u < v in shortlex order? Shorter first, then lexicographic."""
    if len(u) != len(v):
        return len(u) < len(v)
    return u < v


def is_subword(x: str, y: str) -> bool:
    """Does x occur as a contiguous subword of y?"""
    return x in y


def max_common_prefix(x: str, i: int, y: str) -> int:
    """Length of the longest common prefix of x[i:] and y."""
    n = min(len(x) - i, len(y))
    k = 0
    while k < n and x[i + k] == y[k]:
        k += 1
    return k
