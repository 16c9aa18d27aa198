"""
Presentations: semigroups and monoids.

    zero_semigroup        a is a zero for a, b:  aa = ab = ba = a
    aba_bab               aba = a, bab = b
    free_semilattice(n)   n idempotent commuting letters, 2^n - 1 elements
    bicyclic_monoid       ab = 1, infinite
    free_commutative(n)   n commuting letters, infinite
"""

import math
import string

from ..core.engine import KnuthBendix


def zero_semigroup(**kwargs) -> KnuthBendix:
    """b generates a free semigroup with a zero adjoined: infinite."""
    kwargs.setdefault("contains_empty_word", False)
    return KnuthBendix("ab", [("aa", "a"), ("ab", "a"), ("ba", "a")], **kwargs)


def aba_bab(**kwargs) -> KnuthBendix:
    kwargs.setdefault("contains_empty_word", False)
    return KnuthBendix("ab", [("aba", "a"), ("bab", "b")], **kwargs)


def free_semilattice(n: int = 3, **kwargs) -> KnuthBendix:
    if n < 1 or n > len(string.ascii_lowercase):
        raise ValueError(f"free_semilattice needs 1 <= n <= 26, got {n}")
    letters = string.ascii_lowercase[:n]
    relations = [(x + x, x) for x in letters]
    for i, x in enumerate(letters):
        for y in letters[i + 1:]:
            relations.append((y + x, x + y))
    kwargs.setdefault("contains_empty_word", False)
    return KnuthBendix(letters, relations, **kwargs)


def bicyclic_monoid(**kwargs) -> KnuthBendix:
    return KnuthBendix("ab", [("ab", "")], **kwargs)


def free_commutative(n: int = 2, **kwargs) -> KnuthBendix:
    if n < 1 or n > len(string.ascii_lowercase):
        raise ValueError(f"free_commutative needs 1 <= n <= 26, got {n}")
    letters = string.ascii_lowercase[:n]
    relations = []
    for i, x in enumerate(letters):
        for y in letters[i + 1:]:
            relations.append((y + x, x + y))
    return KnuthBendix(letters, relations, **kwargs)


def free_semilattice_order(n: int = 3) -> int:
    return 2 ** n - 1


def infinite_order(n: int = 0):
    return math.inf
