from .state import Rule, RuleState, OverlapPolicy, Settings, KBState, POSITIVE_INFINITY
from .words import (
    PresentationError, AlphabetError, LetterError,
    make_alphabet, validate_word, shortlex_less, is_subword, max_common_prefix,
)
from .index import RuleIndex
from .rewrite import rewrite_from_left
from .engine import KnuthBendix, NotConfluentError

__all__ = [
    "Rule", "RuleState", "OverlapPolicy", "Settings", "KBState", "POSITIVE_INFINITY",
    "PresentationError", "AlphabetError", "LetterError",
    "make_alphabet", "validate_word", "shortlex_less", "is_subword", "max_common_prefix",
    "RuleIndex", "rewrite_from_left",
    "KnuthBendix", "NotConfluentError",
]
