"""
kbcomplete: Knuth-Bendix completion for finitely presented semigroups
and monoids.

Turns a presentation (alphabet + relations) into a confluent,
terminating string rewriting system, when one can be found. The
completed system decides the word problem, gives normal forms, counts
elements and builds the Gilman automaton.

Usage:
    python -m kbcomplete --presentation symmetric --n 4
    python -m kbcomplete --presentation dihedral --n 6 --normal-forms 12
    python -m kbcomplete --presentation bicyclic --max-rules 10
    python -m kbcomplete --presentation semilattice --n 4 --dot gilman.dot
"""

from .core.state import Rule, RuleState, OverlapPolicy, Settings, KBState, POSITIVE_INFINITY
from .core.words import PresentationError, AlphabetError, LetterError
from .core.index import RuleIndex
from .core.rewrite import rewrite_from_left
from .core.engine import KnuthBendix, NotConfluentError
from .inference.overlap import overlaps
from .inference.confluence import critical_pairs, is_confluent
from .gilman import build_gilman_digraph, number_of_paths, number_of_normal_forms, normal_forms
from .infinite import is_obviously_infinite
from .presentations import PRESENTATIONS, make_presentation, presentation_order

__all__ = [
    "Rule", "RuleState", "OverlapPolicy", "Settings", "KBState", "POSITIVE_INFINITY",
    "PresentationError", "AlphabetError", "LetterError",
    "RuleIndex", "rewrite_from_left",
    "KnuthBendix", "NotConfluentError",
    "overlaps", "critical_pairs", "is_confluent",
    "build_gilman_digraph", "number_of_paths", "number_of_normal_forms", "normal_forms",
    "is_obviously_infinite",
    "PRESENTATIONS", "make_presentation", "presentation_order",
]
