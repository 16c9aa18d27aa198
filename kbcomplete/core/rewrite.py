"""
Rewriting a word to normal form: REWRITE_FROM_LEFT (Sims, p67).

The word is copied into a list buffer that is split in two regions:

    buffer[:v_end]       already reduced
    buffer[w_begin:]     not yet looked at

One letter at a time moves from the second region to the end of the
first. After every move the index is asked for an active rule whose lhs
is a suffix of the reduced region. If there is one, its lhs is cut off
the reduced region and its rhs is written back just in front of the
unprocessed region, so it gets looked at again.

This only works because rules never make a word longer: |rhs| <= |lhs|
keeps v_end <= w_begin, so the rhs always fits in the gap.
"""

from .index import RuleIndex


def rewrite_from_left(word: str, index: RuleIndex, min_lhs_length) -> str:
    """Reduce an internal word with the rules in index. Returns a new str."""
    if len(word) < min_lhs_length:
        return word

    buffer = list(word)
    prefix = int(min_lhs_length) - 1
    v_end = prefix
    w_begin = prefix
    w_end = len(buffer)

    while w_begin != w_end:
        buffer[v_end] = buffer[w_begin]
        v_end += 1
        w_begin += 1

        rule = index.find_suffix(buffer, v_end)
        if rule is not None:
            v_end -= len(rule.lhs)
            w_begin -= len(rule.rhs)
            buffer[w_begin:w_begin + len(rule.rhs)] = rule.rhs

        while w_begin != w_end and prefix > v_end:
            buffer[v_end] = buffer[w_begin]
            v_end += 1
            w_begin += 1

    return "".join(buffer[:v_end])
