"""
Presentations: finite groups, as monoid presentations.

All of these are given by involutions or by generators of finite order,
so no inverse letters are needed: the inverse of a is a^(n-1).

    cyclic_group(n)     <a | a^n = 1>                       order n
    dihedral_group(n)   <a, b | a^n = b^2 = (ab)^2 = 1>     order 2n
    symmetric_group(n)  Coxeter presentation on n-1
                        adjacent transpositions             order n!
"""

import math
import string

from ..core.engine import KnuthBendix


def cyclic_group(n: int = 5, **kwargs) -> KnuthBendix:
    if n < 1:
        raise ValueError(f"cyclic_group needs n >= 1, got {n}")
    return KnuthBendix("a", [("a" * n, "")], **kwargs)


def dihedral_group(n: int = 4, **kwargs) -> KnuthBendix:
    if n < 2:
        raise ValueError(f"dihedral_group needs n >= 2, got {n}")
    return KnuthBendix("ab", [("a" * n, ""), ("bb", ""), ("abab", "")], **kwargs)


def symmetric_group(n: int = 4, **kwargs) -> KnuthBendix:
    """
    Coxeter presentation of S_n:

        s_i^2 = 1
        (s_i s_{i+1})^3 = 1
        (s_i s_j)^2 = 1       for |i - j| > 1
    """
    if n < 2 or n - 1 > len(string.ascii_lowercase):
        raise ValueError(f"symmetric_group needs 2 <= n <= 27, got {n}")
    letters = string.ascii_lowercase[:n - 1]
    relations = []
    for i, s in enumerate(letters):
        relations.append((s + s, ""))
        for j in range(i + 1, len(letters)):
            t = letters[j]
            if j == i + 1:
                relations.append(((s + t) * 3, ""))
            else:
                relations.append(((s + t) * 2, ""))
    return KnuthBendix(letters, relations, **kwargs)


def cyclic_group_order(n: int = 5) -> int:
    return n


def dihedral_group_order(n: int = 4) -> int:
    return 2 * n


def symmetric_group_order(n: int = 4) -> int:
    return math.factorial(n)
