"""
Cheap sufficient conditions for a presentation to be infinite.

Used by size() before anything expensive is built. Both checks only
ever answer "infinite" or "don't know".

    free letter:    a letter that occurs in no relation generates a
                    free (hence infinite) submonoid
    abelian rank:   every relation u = v gives the row
                    count(u) - count(v) of letter counts. If the rows
                    have rank < |alphabet|, the abelianised universal
                    group has a Z factor. A finite semigroup has a finite
                    universal group, so the presentation is infinite.
"""

import numpy as np


def has_free_letter(alphabet: str, relations: list) -> bool:
    used = set()
    for u, v in relations:
        used.update(u)
        used.update(v)
    return any(letter not in used for letter in alphabet)


def relation_matrix(alphabet: str, relations: list) -> np.ndarray:
    """Rows count(u) - count(v), one per relation, columns in alphabet order."""
    position = {letter: i for i, letter in enumerate(alphabet)}
    matrix = np.zeros((len(relations), len(alphabet)), dtype=np.int64)
    for row, (u, v) in enumerate(relations):
        for letter in u:
            matrix[row, position[letter]] += 1
        for letter in v:
            matrix[row, position[letter]] -= 1
    return matrix


def is_obviously_infinite(kb) -> bool:
    alphabet = kb.alphabet
    relations = kb.relations
    if not alphabet:
        return False
    if has_free_letter(alphabet, relations):
        return True
    return int(np.linalg.matrix_rank(relation_matrix(alphabet, relations))) < len(alphabet)
