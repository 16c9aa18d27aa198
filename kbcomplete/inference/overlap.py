"""
Overlaps between two rules: OVERLAP_2 (Sims, p77).

If u = AB -> Q_u and v = BC -> Q_v, the word ABC can be rewritten in
two ways:

    A(BC) -> A Q_v
    (AB)C -> Q_u C

so A Q_v = Q_u C holds, and becomes a candidate rule. B runs over the
suffixes of u.lhs that are also prefixes of v.lhs, shortest first, and
is always strictly shorter than both left hand sides: inclusions are
handled by stack draining, not here.

How big an overlap may get is bounded by a measure:

    ABC        |A| + |BC|
    AB_BC      |AB| + |BC|
    MAX_AB_BC  max(|AB|, |BC|)
"""

import math
from typing import Iterator, Tuple

from ..core.state import OverlapPolicy, Rule


def measure_abc(ab: str, bc: str, split: int) -> int:
    return split + len(bc)


def measure_ab_bc(ab: str, bc: str, split: int) -> int:
    return len(ab) + len(bc)


def measure_max_ab_bc(ab: str, bc: str, split: int) -> int:
    return max(len(ab), len(bc))


OVERLAP_MEASURES = {
    OverlapPolicy.ABC: measure_abc,
    OverlapPolicy.AB_BC: measure_ab_bc,
    OverlapPolicy.MAX_AB_BC: measure_max_ab_bc,
}


def overlaps(u: Rule, v: Rule, policy: OverlapPolicy = OverlapPolicy.ABC,
             max_overlap=math.inf) -> Iterator[Tuple[str, str]]:
    """
    Yield (A + v.rhs, u.rhs + C) for every overlap of u.lhs with v.lhs.

    Works on the words u and v hold when the generator starts, so the
    caller may change the rules between two yields; it is the caller's
    job to stop iterating if it does.

    The pairs are not oriented: either side may be the bigger one.
    """
    measure = OVERLAP_MEASURES[policy]
    u_lhs, u_rhs = u.lhs, u.rhs
    v_lhs, v_rhs = v.lhs, v.rhs
    limit = len(u_lhs) - min(len(u_lhs), len(v_lhs))

    for split in range(len(u_lhs) - 1, limit, -1):
        if max_overlap != math.inf and measure(u_lhs, v_lhs, split) > max_overlap:
            continue
        # B = u_lhs[split:], is it a prefix of v_lhs?
        if v_lhs.startswith(u_lhs[split:]):
            a = u_lhs[:split]
            c = v_lhs[len(u_lhs) - split:]
            yield a + v_rhs, u_rhs + c
