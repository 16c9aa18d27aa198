"""
The Gilman digraph of a confluent rule set, and what it counts.

Nodes are the proper prefixes of the left hand sides of the active
rules (the empty prefix is node 0). Reading a letter x from prefix p:

    p + x is itself a prefix        -> go there
    p + x contains a lhs            -> no edge, p + x is reducible
    otherwise                       -> go to the longest suffix of p + x
                                       that is a prefix

Paths from node 0 are then exactly the irreducible words, that is the
normal forms. Finitely many paths iff no cycle is reachable from node 0.

The digraph is a networkx.MultiDiGraph: one edge per (node, letter),
with the letter index as edge key and the letter as the "letter"
attribute; nodes carry their prefix as the "prefix" attribute.
"""

import math
from typing import Iterator

import networkx as nx

from .core.words import to_external_table


def build_gilman_digraph(kb) -> nx.MultiDiGraph:
    """Build the digraph from the active rules of kb as they are now."""
    alphabet = kb.alphabet
    external = to_external_table(alphabet)
    lhss = [rule.lhs for rule in kb.state.active]

    prefixes = {"": 0}
    for lhs in lhss:
        for k in range(1, len(lhs)):
            if lhs[:k] not in prefixes:
                prefixes[lhs[:k]] = len(prefixes)

    digraph = nx.MultiDiGraph()
    for prefix, node in prefixes.items():
        digraph.add_node(node, prefix=prefix.translate(external))

    for prefix, node in prefixes.items():
        for i, letter in enumerate(alphabet):
            word = prefix + chr(i)
            if word in prefixes:
                digraph.add_edge(node, prefixes[word], key=i, letter=letter)
                continue
            if any(lhs in word for lhs in lhss):
                continue
            while word:
                word = word[1:]
                if word in prefixes:
                    digraph.add_edge(node, prefixes[word], key=i, letter=letter)
                    break
    return digraph


def number_of_paths(digraph: nx.MultiDiGraph, source: int = 0):
    """Number of paths (the empty one included) starting at source, or math.inf."""
    reachable = nx.descendants(digraph, source) | {source}
    sub = digraph.subgraph(reachable)
    if not nx.is_directed_acyclic_graph(sub):
        return math.inf
    counts = {node: 0 for node in sub}
    counts[source] = 1
    for node in nx.topological_sort(sub):
        for _, target in sub.out_edges(node):
            counts[target] += counts[node]
    return sum(counts.values())


def number_of_normal_forms(kb):
    """
    How many normal forms kb has, or math.inf.

    The empty word only counts if kb presents a monoid.
    """
    total = number_of_paths(kb.gilman_digraph())
    if total == math.inf or kb.contains_empty_word:
        return total
    return total - 1


def normal_forms(kb, min_length=None, max_length=math.inf) -> Iterator[str]:
    """
    Yield the normal forms of length in [min_length, max_length) in
    shortlex order. Lazy: fine on infinite monoids with a finite bound.

    min_length defaults to 0 for monoids and 1 for semigroups.
    """
    digraph = kb.gilman_digraph()
    if min_length is None:
        min_length = 0 if kb.contains_empty_word else 1

    level = [("", 0)]
    length = 0
    while level and length < max_length:
        if length >= min_length:
            for word, _ in level:
                yield word
        next_level = []
        for word, node in level:
            edges = sorted(digraph.out_edges(node, keys=True, data="letter"),
                           key=lambda edge: edge[2])
            for _, target, _, letter in edges:
                next_level.append((word + letter, target))
        level = next_level
        length += 1
