"""
The Knuth-Bendix completion loop.

Rules flow through three places:

    stack:   pending, not yet rewritten (TEST_2 in Sims, p76, drains it)
    active:  rewritten, reduced, indexed; these define normal forms
    pool:    trivial or superseded rule objects, kept for reuse

run() reseeds the stack with copies of the active rules, then walks the
active rules with two cursors, overlapping each rule with itself and
with every rule activated before it, in both directions. Every overlap
is pushed and the stack drained straight away. Every so often the
whole system is checked for confluence.

A run stops when the system is confluent, when max_rules is reached,
or when it is killed, times out or its stop_fn fires. Nothing is rolled
back: calling run() again picks up where the last call left off.
"""

from datetime import timedelta
from typing import Callable, Iterator, Optional, Tuple
import dataclasses
import math
import threading
import time

from .index import RuleIndex
from .rewrite import rewrite_from_left
from .state import KBState, Rule, RuleState, Settings, POSITIVE_INFINITY
from .words import (
    PresentationError, make_alphabet, to_external_table, to_internal_table, validate_word,
)
from ..inference.confluence import is_confluent
from ..inference.overlap import overlaps
from ..gilman import build_gilman_digraph, number_of_normal_forms
from ..infinite import is_obviously_infinite


class NotConfluentError(RuntimeError):
    """A confluent rule set was needed but the run stopped short of one."""


_INTERRUPTED = ("killed", "timed out", "stopped by predicate", "too many rules")


def _validate_relation(u, v, alphabet: str, contains_empty_word: bool):
    validate_word(u, alphabet)
    validate_word(v, alphabet)
    if not contains_empty_word and (not u or not v):
        raise PresentationError(
            f"relation {u!r} = {v!r} uses the empty word, which is not in a semigroup"
        )


class KnuthBendix:
    """
    Knuth-Bendix completion for a finitely presented semigroup or monoid.

    Args:
        alphabet:            str of distinct letters, or int n for "abc..."[:n]
        relations:           iterable of (u, v) word pairs
        contains_empty_word: monoid (True) or semigroup (False); a semigroup
                             rejects relations with an empty side
        settings:            Settings for the completion loop
        verbose:             print progress
    """

    def __init__(self, alphabet="", relations=(), contains_empty_word: bool = True,
                 settings: Optional[Settings] = None, verbose: bool = False):
        alphabet = make_alphabet(alphabet)
        relations = list(relations)
        for u, v in relations:
            _validate_relation(u, v, alphabet, contains_empty_word)

        self.state = KBState(alphabet=alphabet, contains_empty_word=contains_empty_word,
                             settings=settings or Settings())
        self.index = RuleIndex()
        self.verbose = verbose
        self._to_internal = to_internal_table(alphabet)
        self._to_external = to_external_table(alphabet)
        self._cursor1 = None
        self._cursor2 = None
        self._running = False
        self._kill = threading.Event()
        self._deadline = None
        self._stop_fn = None
        self._gilman = None

        for u, v in relations:
            self.add_rule(u, v)

    # ── Presentation ─────────────────────────────────────────────────────────

    @property
    def alphabet(self) -> str:
        return self.state.alphabet

    @property
    def contains_empty_word(self) -> bool:
        return self.state.contains_empty_word

    @property
    def relations(self) -> list:
        return list(self.state.relations)

    @property
    def settings(self) -> Settings:
        return self.state.settings

    @settings.setter
    def settings(self, settings: Settings):
        if not isinstance(settings, Settings):
            raise ValueError(f"expected Settings, got {type(settings).__name__}")
        self.state.settings = settings

    @property
    def total_rules(self) -> int:
        return self.state.total_rules

    @property
    def halt_reason(self) -> str:
        return self.state.halt_reason

    @property
    def history(self) -> list:
        return self.state.history

    def add_rule(self, u: str, v: str):
        """
        Add the relation u = v.

        Both words are checked before anything changes. Equal words are
        ignored. The rule is only pushed onto the stack; it is rewritten
        and activated by the next run.
        """
        _validate_relation(u, v, self.alphabet, self.contains_empty_word)
        if u == v:
            return
        self.state.relations.append((u, v))
        rule = self._new_rule(self._internal(u), self._internal(v))
        rule.reorder()
        self._push_stack(rule)
        self.state.confluence_known = False
        self._gilman = None

    # ── Rules ────────────────────────────────────────────────────────────────

    def active_rules(self) -> Iterator[Tuple[str, str]]:
        """Yield (lhs, rhs) for each active rule, in activation order."""
        for rule in list(self.state.active):
            yield self._external(rule.lhs), self._external(rule.rhs)

    def number_of_active_rules(self) -> int:
        return len(self.state.active)

    def number_of_inactive_rules(self) -> int:
        return len(self.state.inactive)

    def number_of_pending_rules(self) -> int:
        return len(self.state.stack)

    def _internal(self, word: str) -> str:
        return word.translate(self._to_internal)

    def _external(self, word: str) -> str:
        return word.translate(self._to_external)

    def _new_rule(self, lhs: str = "", rhs: str = "") -> Rule:
        """A rule with a fresh id, taken from the pool if possible. Not reordered."""
        self.state.total_rules += 1
        rule = self.state.inactive.pop() if self.state.inactive else Rule()
        rule.lhs = lhs
        rule.rhs = rhs
        rule.id = self.state.total_rules
        rule.state = RuleState.INACTIVE
        return rule

    def _push_stack(self, rule: Rule):
        if rule.is_trivial:
            self.state.inactive.append(rule)
        else:
            self.state.stack.append(rule)

    def _activate(self, rule: Rule):
        self.index.insert(rule)
        rule.activate()
        self.state.active.append(rule)
        self.state.confluence_known = False
        self._gilman = None
        if len(rule.lhs) < self.state.min_lhs_length:
            self.state.min_lhs_length = len(rule.lhs)

    def _deactivate(self, position: int) -> Rule:
        """Remove the active rule at position. Cursors past it shift down by one."""
        rule = self.state.active.pop(position)
        rule.deactivate()
        self.index.remove(rule)
        if self._cursor1 is not None and self._cursor1 > position:
            self._cursor1 -= 1
        if self._cursor2 is not None and self._cursor2 > position:
            self._cursor2 -= 1
        self.state.confluence_known = False
        self._gilman = None
        return rule

    def _clear_stack(self):
        """
        Drain the stack (TEST_2, Sims p76).

        Each popped rule is rewritten and reordered. Trivial rules go to
        the pool. Otherwise every active rule whose lhs contains the new
        lhs is deactivated and pushed back, every rhs that contains it is
        rewritten, and the new rule is activated. Activation comes after
        the removals so the index never holds two equal keys.
        """
        state = self.state
        while state.stack and not self.stopped() and not self._too_many_rules():
            rule1 = state.stack.pop()
            rule1.lhs = self._rewrite(rule1.lhs)
            rule1.rhs = self._rewrite(rule1.rhs)
            rule1.reorder()
            if rule1.is_trivial:
                state.inactive.append(rule1)
                continue

            lhs = rule1.lhs
            stale_rhs = []
            position = 0
            while position < len(state.active):
                rule2 = state.active[position]
                if lhs in rule2.lhs:
                    state.stack.append(self._deactivate(position))
                else:
                    if lhs in rule2.rhs:
                        stale_rhs.append(rule2)
                    position += 1
            self._activate(rule1)
            for rule2 in stale_rhs:
                rule2.rhs = self._rewrite(rule2.rhs)

    # ── Rewriting ────────────────────────────────────────────────────────────

    def _rewrite(self, word: str) -> str:
        return rewrite_from_left(word, self.index, self.state.min_lhs_length)

    def rewrite(self, word: str) -> str:
        """Rewrite word with the current active rules. Does not run."""
        validate_word(word, self.alphabet)
        return self._external(self._rewrite(self._internal(word)))

    def normal_form(self, word: str) -> str:
        """Run to completion, then rewrite word."""
        validate_word(word, self.alphabet)
        self.run()
        return self._external(self._rewrite(self._internal(word)))

    def equal_to(self, u: str, v: str) -> bool:
        """
        Do u and v represent the same element?

        Cheap answers first: the words are equal, or they rewrite to the
        same word with the rules there are. Only then run.
        """
        validate_word(u, self.alphabet)
        validate_word(v, self.alphabet)
        if u == v:
            return True
        uu = self._rewrite(self._internal(u))
        vv = self._rewrite(self._internal(v))
        if uu == vv:
            return True
        self.run()
        return self._rewrite(uu) == self._rewrite(vv)

    # ── Confluence ───────────────────────────────────────────────────────────

    def confluent_known(self) -> bool:
        return self.state.confluence_known

    def confluent(self) -> bool:
        """
        Is the active rule set confluent? Never while rules are pending.

        The answer is remembered until the rules change. A check that is
        interrupted by a stop condition leaves confluence unknown.
        """
        state = self.state
        if state.stack:
            return False
        if not state.confluence_known:
            if self.verbose:
                print(f"  checking confluence of {len(state.active)} rules")
            result = is_confluent(state.active, self._rewrite, self.stopped)
            state.confluent = bool(result)
            state.confluence_known = result is not None
        return state.confluent

    def finished(self) -> bool:
        return self.state.confluence_known and self.confluent()

    # ── Stopping ─────────────────────────────────────────────────────────────

    def kill(self):
        """Ask a running (or the next) run to stop at its next checkpoint."""
        self._kill.set()

    def running(self) -> bool:
        return self._running

    def timed_out(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def stopped_by_predicate(self) -> bool:
        return self._stop_fn is not None and bool(self._stop_fn(self))

    def stopped(self) -> bool:
        """Should the current run stop? Always False outside a run."""
        return self._running and (
            self._kill.is_set() or self.timed_out() or self.stopped_by_predicate()
        )

    def _too_many_rules(self) -> bool:
        return len(self.state.active) >= self.state.settings.max_rules

    def _why_stopped(self) -> str:
        if self._kill.is_set():
            return "killed"
        if self.timed_out():
            return "timed out"
        if self._stop_fn is not None and self._stop_fn(self):
            return "stopped by predicate"
        if self._too_many_rules():
            return "too many rules"
        if self.state.stack:
            return "rules pending"
        if self.state.confluence_known:
            return "confluent" if self.state.confluent else "not confluent"
        return "confluence unknown"

    # ── Running ──────────────────────────────────────────────────────────────

    def run(self):
        """Run until confluent or max_rules is reached."""
        self._run()

    def run_for(self, duration):
        """Run for at most duration (seconds, or a timedelta)."""
        if isinstance(duration, timedelta):
            duration = duration.total_seconds()
        self._deadline = time.monotonic() + float(duration)
        try:
            self._run()
        finally:
            self._deadline = None

    def run_until(self, stop_fn: Callable[["KnuthBendix"], bool]):
        """Run until stop_fn(self) is True, or as run() would."""
        self._stop_fn = stop_fn
        try:
            self._run()
        finally:
            self._stop_fn = None

    def run_by_overlap_length(self):
        """
        Complete by increasing overlap size: max_overlap = 1, 2, 3, ...

        No periodic confluence checks. The settings are restored after.
        """
        settings = self.state.settings
        max_overlap = settings.max_overlap
        interval = settings.check_confluence_interval
        settings.max_overlap = 1
        settings.check_confluence_interval = POSITIVE_INFINITY
        try:
            while not self.confluent():
                self.run()
                if self.state.halt_reason in _INTERRUPTED:
                    break
                settings.max_overlap += 1
        finally:
            settings.max_overlap = max_overlap
            settings.check_confluence_interval = interval

    def _run(self):
        state = self.state
        start = time.monotonic()
        if self.finished():
            state.halt_reason = "confluent"
            self._kill.clear()
        else:
            if self.verbose:
                print(f"running with active rules = {len(state.active)}, "
                      f"pending rules = {len(state.stack)}")
            self._running = True
            try:
                self._knuth_bendix()
            finally:
                state.halt_reason = self._why_stopped()
                self._running = False
                self._cursor1 = None
                self._cursor2 = None
                self._kill.clear()

        state.history.append({
            "run": len(state.history) + 1,
            "active_rules": len(state.active),
            "inactive_rules": len(state.inactive),
            "pending_rules": len(state.stack),
            "total_rules": state.total_rules,
            "halt_reason": state.halt_reason,
            "elapsed": round(time.monotonic() - start, 6),
        })
        if self.verbose:
            print(f"stopping with active rules = {len(state.active)}, "
                  f"inactive rules = {len(state.inactive)}, "
                  f"rules defined = {state.total_rules} [{state.halt_reason}]")

    def _knuth_bendix(self):
        state = self.state
        settings = state.settings

        if not state.stack and self.confluent() and not self.stopped():
            if self.verbose:
                print("the system is confluent already")
            return
        if self._too_many_rules():
            if self.verbose:
                print("too many rules")
            return

        # Reseed: the active rules may not be reduced with respect to each
        # other or to the rules still on the stack.
        self._cursor1 = 0
        while (self._cursor1 < len(state.active)
               and not self._too_many_rules() and not self.stopped()):
            rule = state.active[self._cursor1]
            self._push_stack(self._new_rule(rule.lhs, rule.rhs))
            self._clear_stack()
            self._cursor1 += 1
        self._clear_stack()

        self._cursor1 = 0
        resolved = 0
        while (self._cursor1 < len(state.active)
               and not self._too_many_rules() and not self.stopped()):
            rule1 = state.active[self._cursor1]
            self._cursor2 = self._cursor1
            self._cursor1 += 1
            self._overlap(rule1, rule1)
            while (self._cursor2 > 0 and rule1.active
                   and not self._too_many_rules() and not self.stopped()):
                self._cursor2 -= 1
                rule2 = state.active[self._cursor2]
                self._overlap(rule1, rule2)
                resolved += 1
                if rule1.active and rule2.active:
                    resolved += 1
                    self._overlap(rule2, rule1)

            if resolved > settings.check_confluence_interval:
                if self.verbose:
                    print(f"  active rules = {len(state.active)}, "
                          f"inactive rules = {len(state.inactive)}, "
                          f"rules defined = {state.total_rules}")
                if self.confluent():
                    break
                resolved = 0
            if self._cursor1 == len(state.active):
                self._clear_stack()

        if (settings.max_overlap == POSITIVE_INFINITY
                and settings.max_rules == POSITIVE_INFINITY
                and not self.stopped() and not state.stack):
            state.confluence_known = True
            state.confluent = True
            state.inactive.clear()

    def _overlap(self, u: Rule, v: Rule):
        """Push and drain every overlap of u with v, while both stay unchanged."""
        settings = self.state.settings
        u_id, u_lhs = u.id, u.lhs
        v_id, v_lhs = v.id, v.lhs
        for lhs, rhs in overlaps(u, v, settings.overlap_policy, settings.max_overlap):
            if self.stopped() or self._too_many_rules():
                break
            self._push_stack(self._new_rule(lhs, rhs))
            self._clear_stack()
            # u or v may have been deactivated (and maybe rewritten and
            # reactivated at the end of the active list) by the drain; their
            # remaining overlaps come round again from there.
            if not (u.active and v.active and u.id == u_id and v.id == v_id
                    and u.lhs == u_lhs and v.lhs == v_lhs):
                break

    # ── Gilman digraph, size ─────────────────────────────────────────────────

    def gilman_digraph(self):
        """
        The Gilman digraph of the completed system (cached).

        Lifts max_rules so the run can really finish. Raises
        NotConfluentError if it still stops without confluence.
        """
        if self._gilman is None:
            if self.alphabet:
                self.state.settings.max_rules = POSITIVE_INFINITY
                self.run()
                if not self.confluent():
                    raise NotConfluentError(
                        f"run stopped without a confluent system ({self.halt_reason})"
                    )
            self._gilman = build_gilman_digraph(self)
        return self._gilman

    def size(self):
        """Number of elements, or math.inf."""
        if is_obviously_infinite(self):
            return math.inf
        if not self.alphabet:
            return 1 if self.contains_empty_word else 0
        return number_of_normal_forms(self)

    # ── Copies and persistence ───────────────────────────────────────────────

    def copy(self) -> "KnuthBendix":
        """An independent copy: active rules and stack copied, pool not."""
        def clone(rule):
            return Rule(rule.lhs, rule.rhs, rule.id, rule.state)

        state = self.state
        new_state = KBState(
            alphabet=state.alphabet,
            contains_empty_word=state.contains_empty_word,
            relations=list(state.relations),
            settings=dataclasses.replace(state.settings),
            active=[clone(r) for r in state.active],
            stack=[clone(r) for r in state.stack],
            total_rules=state.total_rules,
            min_lhs_length=state.min_lhs_length,
            confluent=state.confluent,
            confluence_known=state.confluence_known,
            history=[dict(h) for h in state.history],
            halt_reason=state.halt_reason,
        )
        return KnuthBendix.from_state(new_state, verbose=self.verbose)

    __copy__ = copy

    @classmethod
    def from_state(cls, state: KBState, verbose: bool = False) -> "KnuthBendix":
        """Wrap an existing KBState, rebuilding the index over its active rules."""
        kb = cls(state.alphabet, contains_empty_word=state.contains_empty_word,
                 verbose=verbose)
        kb.state = state
        for rule in state.active:
            rule.activate()
            kb.index.insert(rule)
        return kb

    def save(self, path="kb_state.json"):
        self.state.save(path)

    @classmethod
    def load(cls, path="kb_state.json", verbose: bool = False) -> "KnuthBendix":
        return cls.from_state(KBState.load(path), verbose=verbose)

    def __repr__(self):
        if self.state.confluence_known:
            status = "confluent" if self.state.confluent else "not confluent"
        else:
            status = "confluence unknown"
        return (f"<KnuthBendix over {self.alphabet!r} with "
                f"{len(self.state.active)} active rules, {status}>")
