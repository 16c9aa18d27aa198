"""
Core data structures: Rule, Settings, KBState.

These are the atoms of the completion engine. Nothing in here depends
on rewriting, overlaps or the completion loop.

    Rule:     lhs -> rhs over internal words, with an id (creation
              order) and an explicit RuleState.
    Settings: the knobs of the completion loop.
    KBState:  the full state of a KnuthBendix instance, serializable
              for continuity.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
import json
import math

from .words import make_alphabet, shortlex_less, to_external_table, to_internal_table


POSITIVE_INFINITY = math.inf


class RuleState(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class OverlapPolicy(Enum):
    """Which measure bounds an overlap AB, BC (see inference.overlap)."""
    ABC = "ABC"
    AB_BC = "AB_BC"
    MAX_AB_BC = "MAX_AB_BC"


@dataclass(eq=False)
class Rule:
    """
    A rewriting rule lhs -> rhs.

    Rules compare by identity: the same lhs/rhs pair can be held by a
    rule on the stack and by an active rule at the same time.
    """
    lhs: str = ""
    rhs: str = ""
    id: int = 0
    state: RuleState = RuleState.INACTIVE

    @property
    def active(self) -> bool:
        return self.state is RuleState.ACTIVE

    def activate(self):
        self.state = RuleState.ACTIVE

    def deactivate(self):
        self.state = RuleState.INACTIVE

    def reorder(self):
        """Swap the sides if needed so that lhs > rhs in shortlex order."""
        if shortlex_less(self.lhs, self.rhs):
            self.lhs, self.rhs = self.rhs, self.lhs

    def clear(self):
        self.lhs = ""
        self.rhs = ""

    @property
    def is_trivial(self) -> bool:
        return self.lhs == self.rhs

    def __repr__(self):
        lhs = [ord(c) for c in self.lhs]
        rhs = [ord(c) for c in self.rhs]
        return f"Rule(#{self.id} {lhs} -> {rhs}, {self.state.value})"


def _check_limit(name, value):
    if value is None:
        return POSITIVE_INFINITY
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        raise ValueError(f"{name} must be a positive int or math.inf, got {value!r}")
    if value != POSITIVE_INFINITY and (value < 1 or value != int(value)):
        raise ValueError(f"{name} must be a positive int or math.inf, got {value!r}")
    return value


@dataclass
class Settings:
    """
    Settings for the completion loop. Validated on every assignment.

    check_confluence_interval: overlap resolutions between confluence checks
    max_overlap:               cap on the overlap measure (math.inf = none)
    max_rules:                 cap on the number of active rules (math.inf = none)
    overlap_policy:            which overlap measure to use
    """
    check_confluence_interval: float = 4096
    max_overlap: float = POSITIVE_INFINITY
    max_rules: float = POSITIVE_INFINITY
    overlap_policy: OverlapPolicy = OverlapPolicy.ABC

    def __setattr__(self, name, value):
        if name in ("check_confluence_interval", "max_overlap", "max_rules"):
            value = _check_limit(name, value)
        elif name == "overlap_policy":
            if isinstance(value, str):
                try:
                    value = OverlapPolicy[value.upper()]
                except KeyError:
                    raise ValueError(f"unknown overlap policy {value!r}") from None
            if not isinstance(value, OverlapPolicy):
                raise ValueError(f"expected an OverlapPolicy, got {value!r}")
        super().__setattr__(name, value)

    def to_dict(self):
        def limit(v):
            return None if v == POSITIVE_INFINITY else int(v)
        return {
            "check_confluence_interval": limit(self.check_confluence_interval),
            "max_overlap": limit(self.max_overlap),
            "max_rules": limit(self.max_rules),
            "overlap_policy": self.overlap_policy.value,
        }

    @classmethod
    def from_dict(cls, d):
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})


@dataclass
class KBState:
    """
    Full state of a KnuthBendix instance, serializable for continuity.

    active:    activated rules, in activation order
    inactive:  pool of rule objects kept for reuse
    stack:     pending rules, top of the stack is the end of the list
    relations: the defining relations as given (external words)
    history:   one entry per call to run()
    """
    alphabet: str = ""
    contains_empty_word: bool = True
    relations: list = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    active: list = field(default_factory=list)
    inactive: list = field(default_factory=list)
    stack: list = field(default_factory=list)
    total_rules: int = 0
    min_lhs_length: float = POSITIVE_INFINITY
    confluent: bool = False
    confluence_known: bool = False
    history: list = field(default_factory=list)
    halt_reason: str = ""

    def to_dict(self):
        table = to_external_table(self.alphabet)

        def serialize(rule):
            return {"lhs": rule.lhs.translate(table),
                    "rhs": rule.rhs.translate(table),
                    "id": rule.id}

        return {
            "alphabet": self.alphabet,
            "contains_empty_word": self.contains_empty_word,
            "relations": [list(r) for r in self.relations],
            "settings": self.settings.to_dict(),
            "active": [serialize(r) for r in self.active],
            "stack": [serialize(r) for r in self.stack],
            "total_rules": self.total_rules,
            "confluent": self.confluent,
            "confluence_known": self.confluence_known,
            "history": self.history,
            "halt_reason": self.halt_reason,
        }

    @classmethod
    def from_dict(cls, d):
        alphabet = make_alphabet(d["alphabet"])
        table = to_internal_table(alphabet)

        def deserialize(data, state):
            return Rule(data["lhs"].translate(table), data["rhs"].translate(table),
                        data["id"], state)

        state = cls(alphabet=alphabet)
        state.contains_empty_word = d.get("contains_empty_word", True)
        state.relations = [tuple(r) for r in d.get("relations", [])]
        state.settings = Settings.from_dict(d.get("settings", {}))
        state.active = [deserialize(r, RuleState.ACTIVE) for r in d["active"]]
        state.stack = [deserialize(r, RuleState.INACTIVE) for r in d["stack"]]
        state.total_rules = d.get("total_rules", 0)
        if state.active:
            state.min_lhs_length = min(len(r.lhs) for r in state.active)
        state.confluent = d.get("confluent", False)
        state.confluence_known = d.get("confluence_known", False)
        state.history = d.get("history", [])
        state.halt_reason = d.get("halt_reason", "")
        return state

    def save(self, path="kb_state.json"):
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path="kb_state.json"):
        with open(path) as f:
            return cls.from_dict(json.load(f))
