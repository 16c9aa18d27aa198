"""
Confluence check by critical pairs.

A terminating rule set is confluent iff every critical pair resolves:
for rules r1 = P1 -> Q1 and r2 = P2 -> Q2, and every way a suffix of P1
lines up with a prefix of P2 (or P2 sits inside P1), the two one-step
rewrites of the overlapped word must have the same normal form.

    P1 = A B D,  P2 = B       ->  A Q2 D  vs  Q1       (inclusion)
    P1 = A B,    P2 = B E     ->  A Q2    vs  Q1 E     (overlap)

Both shapes come out of one loop: walk the suffixes of P1, take the
longest common prefix with P2, and keep the split whenever one of the
two words is used up.
"""

from typing import Callable, Iterator, Optional, Sequence, Tuple

from ..core.state import Rule
from ..core.words import max_common_prefix


def critical_pairs(r1: Rule, r2: Rule) -> Iterator[Tuple[str, str]]:
    """Yield the unreduced critical pairs (A S D, Q E) of r1 against r2."""
    p1, q1 = r1.lhs, r1.rhs
    p2, q2 = r2.lhs, r2.rhs
    for i in range(len(p1) - 1, -1, -1):
        k = max_common_prefix(p1, i, p2)
        if i + k == len(p1) or k == len(p2):
            yield p1[:i] + q2 + p1[i + k:], q1 + p2[k:]


def is_confluent(
    rules: Sequence[Rule],
    rewrite: Callable[[str], str],
    stopped: Optional[Callable[[], bool]] = None,
) -> Optional[bool]:
    """
    Check every ordered pair of rules for an unresolved critical pair.

    Returns False on the first mismatch, True if there is none, and None
    if stopped() fired before the check could finish (unknown).

    The inner loop runs backwards over the rules. The answer does not
    depend on the order.
    """
    stopped = stopped or (lambda: False)
    for r1 in rules:
        if stopped():
            return None
        for r2 in reversed(rules):
            if stopped():
                return None
            for word1, word2 in critical_pairs(r1, r2):
                if stopped():
                    return None
                if word1 != word2 and rewrite(word1) != rewrite(word2):
                    return False
    return True
