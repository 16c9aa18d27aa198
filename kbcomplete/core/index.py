"""
Suffix index over the left hand sides of the active rules.

The index is a trie keyed on the reversed left hand sides. Looking up
"which active rule has a lhs that is a suffix of buffer[:end]" is then
a single walk backwards from end-1.

Keys are the lhs strings as they were when the rule was inserted. Python
strings are immutable, so the trie never holds a live view into a word
that is being rewritten.
"""

from typing import Optional

from .state import Rule


class _Node:
    __slots__ = ("children", "rule")

    def __init__(self):
        self.children = {}
        self.rule = None


class RuleIndex:
    """Reversed-suffix trie of active rules."""

    def __init__(self):
        self._root = _Node()
        self._keys = {}  # id(rule) -> lhs at insertion time

    def __len__(self):
        return len(self._keys)

    def __contains__(self, rule: Rule):
        return id(rule) in self._keys

    def insert(self, rule: Rule):
        """Index rule under its lhs. The lhs must not already be a key."""
        node = self._root
        for letter in reversed(rule.lhs):
            node = node.children.setdefault(letter, _Node())
        if node.rule is not None:
            raise ValueError(f"{rule!r} collides with indexed {node.rule!r}")
        node.rule = rule
        self._keys[id(rule)] = rule.lhs

    def remove(self, rule: Rule):
        """Drop rule from the index, pruning branches left empty."""
        key = self._keys.pop(id(rule))
        path = [self._root]
        for letter in reversed(key):
            path.append(path[-1].children[letter])
        path[-1].rule = None
        for depth in range(len(key), 0, -1):
            node = path[depth]
            if node.rule is not None or node.children:
                break
            del path[depth - 1].children[key[len(key) - depth]]

    def clear(self):
        self._root = _Node()
        self._keys.clear()

    def find_suffix(self, buffer, end: int) -> Optional[Rule]:
        """
        The indexed rule whose lhs is a suffix of buffer[:end], if any.

        buffer is any indexable sequence of internal letters. If several
        left hand sides are suffixes, the shortest wins; a reduced rule
        set never has more than one.
        """
        node = self._root
        i = end - 1
        while i >= 0:
            node = node.children.get(buffer[i])
            if node is None:
                return None
            if node.rule is not None:
                return node.rule
            i -= 1
        return None
