"""
Presentation registry.

Each presentation is a dict describing how to build it:
    make:        (n, **kwargs) -> KnuthBendix   [n ignored if takes_n is False]
    order:       (n) -> int | math.inf, the known size
    takes_n:     whether the presentation has a size parameter
    description: str
"""

from .groups import (
    cyclic_group, dihedral_group, symmetric_group,
    cyclic_group_order, dihedral_group_order, symmetric_group_order,
)
from .semigroups import (
    zero_semigroup, aba_bab, free_semilattice, bicyclic_monoid, free_commutative,
    free_semilattice_order, infinite_order,
)


PRESENTATIONS = {
    "cyclic": {
        "make":        cyclic_group,
        "order":       cyclic_group_order,
        "takes_n":     True,
        "description": "Cyclic group of order n: <a | a^n = 1>",
    },
    "dihedral": {
        "make":        dihedral_group,
        "order":       dihedral_group_order,
        "takes_n":     True,
        "description": "Dihedral group of order 2n",
    },
    "symmetric": {
        "make":        symmetric_group,
        "order":       symmetric_group_order,
        "takes_n":     True,
        "description": "Symmetric group S_n, Coxeter presentation",
    },
    "zero": {
        "make":        lambda n=None, **kwargs: zero_semigroup(**kwargs),
        "order":       infinite_order,
        "takes_n":     False,
        "description": "aa = ab = ba = a: a is a zero, b is free",
    },
    "aba_bab": {
        "make":        lambda n=None, **kwargs: aba_bab(**kwargs),
        "order":       infinite_order,
        "takes_n":     False,
        "description": "aba = a, bab = b",
    },
    "semilattice": {
        "make":        free_semilattice,
        "order":       free_semilattice_order,
        "takes_n":     True,
        "description": "Free semilattice on n letters (2^n - 1 elements)",
    },
    "bicyclic": {
        "make":        lambda n=None, **kwargs: bicyclic_monoid(**kwargs),
        "order":       infinite_order,
        "takes_n":     False,
        "description": "Bicyclic monoid <a, b | ab = 1>",
    },
    "free_commutative": {
        "make":        free_commutative,
        "order":       infinite_order,
        "takes_n":     True,
        "description": "Free commutative monoid on n letters",
    },
}


def make_presentation(name: str, n=None, **kwargs):
    """Build the named presentation. n=None uses the presentation's default."""
    if name not in PRESENTATIONS:
        raise ValueError(f"unknown presentation {name!r}, choose from {sorted(PRESENTATIONS)}")
    entry = PRESENTATIONS[name]
    if entry["takes_n"] and n is not None:
        return entry["make"](n, **kwargs)
    return entry["make"](**kwargs)


def presentation_order(name: str, n=None):
    entry = PRESENTATIONS[name]
    if entry["takes_n"] and n is not None:
        return entry["order"](n)
    return entry["order"]()
