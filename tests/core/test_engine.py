"""
Property-based and unit tests for the completion engine.

Core invariants:
    - a finished run leaves a confluent, reduced rule set; normal forms
      are then unique and equal_to() decides the word problem
    - runs are resumable: stopping early (max_rules, kill, deadline,
      predicate) and running again gives the same rules as one long run
    - the same input always gives the same rules in the same order
    - bad words are rejected before anything changes
    - to_dict() -> from_dict() keeps a run resumable
"""

import itertools
import math
import threading
import time
from datetime import timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from kbcomplete.core.engine import KnuthBendix, NotConfluentError
from kbcomplete.core.state import OverlapPolicy, Settings
from kbcomplete.core.words import AlphabetError, LetterError, PresentationError
from kbcomplete.presentations.groups import symmetric_group


# ── Helpers ──────────────────────────────────────────────────────────────────

def zero_semigroup() -> KnuthBendix:
    return KnuthBendix("ab", [("aa", "a"), ("ab", "a"), ("ba", "a")])


def braid_monoid() -> KnuthBendix:
    """<a, b | aba = bab>: has no finite complete rewriting system on {a, b}."""
    return KnuthBendix("ab", [("aba", "bab")])


def naive_normal_form(word, rules):
    changed = True
    while changed:
        changed = False
        for lhs, rhs in rules:
            if lhs in word:
                word = word.replace(lhs, rhs, 1)
                changed = True
    return word


def all_words(alphabet, max_length):
    for n in range(max_length + 1):
        for letters in itertools.product(alphabet, repeat=n):
            yield "".join(letters)


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestConstruction:
    def test_relations_are_pending(self):
        kb = zero_semigroup()
        assert kb.number_of_active_rules() == 0
        assert kb.number_of_pending_rules() == 3
        assert kb.total_rules == 3
        assert not kb.confluent()

    def test_int_alphabet(self):
        assert KnuthBendix(3).alphabet == "abc"

    def test_bad_alphabet(self):
        with pytest.raises(AlphabetError):
            KnuthBendix("aa")

    def test_bad_relation_rejected(self):
        with pytest.raises(LetterError):
            KnuthBendix("ab", [("aa", "a"), ("ac", "a")])

    def test_add_rule_rejects_without_mutation(self):
        kb = zero_semigroup()
        with pytest.raises(LetterError):
            kb.add_rule("a", "c")
        with pytest.raises(LetterError):
            kb.add_rule("c", "a")
        assert len(kb.relations) == 3
        assert kb.number_of_pending_rules() == 3
        assert kb.total_rules == 3

    def test_add_equal_words_ignored(self):
        kb = zero_semigroup()
        kb.add_rule("ab", "ab")
        assert len(kb.relations) == 3
        assert kb.number_of_pending_rules() == 3

    def test_semigroup_rejects_empty_side(self):
        with pytest.raises(PresentationError):
            KnuthBendix("ab", [("ab", "")], contains_empty_word=False)
        kb = KnuthBendix("ab", [("aa", "a")], contains_empty_word=False)
        with pytest.raises(PresentationError):
            kb.add_rule("", "b")
        assert kb.relations == [("aa", "a")]
        assert kb.number_of_pending_rules() == 1

    def test_monoid_accepts_empty_side(self):
        assert KnuthBendix("ab", [("ab", "")]).number_of_pending_rules() == 1

    def test_settings_type_checked(self):
        kb = zero_semigroup()
        with pytest.raises(ValueError):
            kb.settings = {"max_rules": 3}

    def test_empty_alphabet(self):
        kb = KnuthBendix("")
        kb.run()
        assert kb.finished()
        assert kb.size() == 1
        assert KnuthBendix("", contains_empty_word=False).size() == 0


class TestScenarios:
    def test_zero_semigroup_completes(self):
        kb = zero_semigroup()
        kb.run()
        assert kb.number_of_active_rules() == 3
        assert kb.confluent()
        assert kb.confluent_known()
        assert kb.finished()
        assert kb.halt_reason == "confluent"
        assert sorted(kb.active_rules()) == [("aa", "a"), ("ab", "a"), ("ba", "a")]
        assert kb.normal_form("aab") == "a"
        assert kb.size() == math.inf

    def test_max_rules_then_resume(self):
        kb = zero_semigroup()
        kb.settings = Settings(max_rules=1)
        kb.run()
        assert kb.number_of_active_rules() < 3
        assert not kb.confluent_known()
        assert not kb.finished()
        assert kb.halt_reason == "too many rules"

        kb.settings.max_rules = math.inf
        kb.run()
        assert kb.finished()
        reference = zero_semigroup()
        reference.run()
        assert list(kb.active_rules()) == list(reference.active_rules())

    def test_aba_bab(self):
        kb = KnuthBendix("ab", [("aba", "a"), ("bab", "b")])
        kb.run()
        assert kb.finished()
        assert kb.number_of_active_rules() == 2
        rules = list(kb.active_rules())
        naive = {w: naive_normal_form(w, rules) for w in all_words("ab", 6)}
        assert len(naive) == 127
        for u, v in itertools.product(naive, repeat=2):
            assert kb.equal_to(u, v) == (naive[u] == naive[v])

    def test_symmetric_group(self):
        kb = symmetric_group(4)
        kb.run()
        assert kb.finished()
        assert kb.size() == 24

    @pytest.mark.parametrize("policy", list(OverlapPolicy))
    def test_overlap_policies_agree(self, policy):
        kb = symmetric_group(3, settings=Settings(overlap_policy=policy))
        kb.run()
        assert kb.finished()
        assert kb.size() == 6

    def test_frequent_confluence_checks(self):
        kb = symmetric_group(4, settings=Settings(check_confluence_interval=1))
        kb.run()
        assert kb.finished()
        assert kb.size() == 24


class TestRewriting:
    def test_rewrite_does_not_run(self):
        kb = zero_semigroup()
        assert kb.rewrite("aab") == "aab"
        assert kb.number_of_active_rules() == 0

    def test_normal_form_runs(self):
        kb = zero_semigroup()
        assert kb.normal_form("bbab") == "a"
        assert kb.finished()

    def test_normal_form_rejects_bad_word(self):
        kb = zero_semigroup()
        with pytest.raises(LetterError):
            kb.normal_form("abc")
        assert kb.number_of_active_rules() == 0

    def test_equal_to(self):
        kb = zero_semigroup()
        assert kb.equal_to("aab", "ba")
        assert not kb.equal_to("bb", "b")
        assert kb.equal_to("", "")

    def test_equal_to_fast_path(self):
        kb = zero_semigroup()
        assert kb.equal_to("ab", "ab")
        assert kb.number_of_active_rules() == 0

    def test_active_rules_fresh_each_call(self):
        kb = zero_semigroup()
        kb.run()
        assert list(kb.active_rules()) == list(kb.active_rules())


class TestStopping:
    def test_run_for_times_out(self):
        kb = braid_monoid()
        kb.run_for(0.05)
        assert kb.halt_reason == "timed out"
        assert not kb.finished()
        assert not kb.timed_out()

    def test_run_for_timedelta(self):
        kb = braid_monoid()
        kb.run_for(timedelta(milliseconds=50))
        assert kb.halt_reason == "timed out"

    def test_run_until(self):
        kb = braid_monoid()
        kb.run_until(lambda k: k.number_of_active_rules() >= 5)
        assert kb.halt_reason == "stopped by predicate"
        assert kb.number_of_active_rules() >= 5
        assert not kb.stopped_by_predicate()

    def test_kill_from_other_thread(self):
        kb = braid_monoid()
        thread = threading.Thread(target=kb.run)
        thread.start()
        time.sleep(0.05)
        kb.kill()
        thread.join(timeout=10)
        assert not thread.is_alive()
        assert kb.halt_reason == "killed"
        assert not kb.running()

    def test_kill_before_run_then_resume(self):
        kb = zero_semigroup()
        kb.kill()
        kb.run()
        assert kb.halt_reason == "killed"
        assert not kb.finished()
        kb.run()
        assert kb.finished()

    def test_kill_used_up_by_finished_run(self):
        kb = KnuthBendix("ab", [("aa", "a")])
        kb.run()
        kb.kill()
        kb.run()
        assert kb.halt_reason == "confluent"
        kb.add_rule("bb", "b")
        kb.run()
        assert kb.halt_reason == "confluent"
        assert kb.finished()

    def test_reseed_stops_at_max_rules(self):
        # cc, bcbcbc, bb are activated; aa, ababab, acac stay pending.
        kb = symmetric_group(4, settings=Settings(max_rules=3))
        kb.run()
        assert kb.total_rules == 6
        assert kb.number_of_pending_rules() == 3
        kb.settings.max_rules = 4
        kb.run()
        assert kb.halt_reason == "too many rules"
        assert kb.number_of_active_rules() == 4
        # One reseed copy, drained straight away; no copies left behind.
        assert kb.total_rules == 7
        assert kb.number_of_pending_rules() == 2

    def test_stopped_false_outside_run(self):
        kb = zero_semigroup()
        kb.kill()
        assert not kb.stopped()

    def test_finished_run_is_noop(self):
        kb = zero_semigroup()
        kb.run()
        total = kb.total_rules
        kb.run()
        assert kb.total_rules == total
        assert kb.halt_reason == "confluent"

    def test_history(self):
        kb = zero_semigroup()
        kb.settings = Settings(max_rules=1)
        kb.run()
        kb.settings.max_rules = None
        kb.run()
        assert [h["run"] for h in kb.history] == [1, 2]
        assert kb.history[0]["halt_reason"] == "too many rules"
        assert kb.history[1]["halt_reason"] == "confluent"

    def test_verbose(self, capsys):
        kb = KnuthBendix("ab", [("aa", "a"), ("ab", "a"), ("ba", "a")], verbose=True)
        kb.run()
        assert "stopping with active rules = 3" in capsys.readouterr().out


class TestCursors:
    def test_removal_relocates_cursors(self):
        kb = KnuthBendix("abc", [("aa", ""), ("bb", ""), ("cc", "")])
        kb.run()
        after = kb.state.active[2]
        kb._cursor1 = 2
        kb._cursor2 = 1
        kb._deactivate(1)
        assert kb._cursor1 == 1
        assert kb._cursor2 == 1
        assert kb.state.active[kb._cursor2] is after


class TestGilman:
    def test_not_confluent_error(self):
        kb = symmetric_group(3)
        kb.kill()
        with pytest.raises(NotConfluentError):
            kb.gilman_digraph()
        assert kb.size() == 6

    def test_gilman_lifts_max_rules(self):
        kb = symmetric_group(3, settings=Settings(max_rules=2))
        kb.run()
        assert not kb.finished()
        assert kb.size() == 6

    def test_cached_until_mutation(self):
        kb = symmetric_group(3)
        digraph = kb.gilman_digraph()
        assert kb.gilman_digraph() is digraph
        kb.add_rule("a", "b")
        assert kb.gilman_digraph() is not digraph


class TestCopyAndPersistence:
    def test_copy_is_independent(self):
        kb = symmetric_group(3)
        other = kb.copy()
        other.run()
        assert other.finished()
        assert kb.number_of_active_rules() == 0
        assert kb.number_of_pending_rules() == 3
        assert not kb.finished()

    def test_copy_of_finished(self):
        kb = symmetric_group(3)
        kb.run()
        other = kb.copy()
        assert other.finished()
        assert list(other.active_rules()) == list(kb.active_rules())
        assert other.settings is not kb.settings

    def test_save_load_finished(self, tmp_path):
        kb = symmetric_group(3)
        kb.run()
        path = str(tmp_path / "s3.json")
        kb.save(path)
        loaded = KnuthBendix.load(path)
        assert loaded.finished()
        assert list(loaded.active_rules()) == list(kb.active_rules())
        assert loaded.normal_form("abab") == kb.normal_form("abab")
        assert loaded.size() == 6

    def test_save_load_resume(self, tmp_path):
        kb = symmetric_group(4, settings=Settings(max_rules=3))
        kb.run()
        path = str(tmp_path / "s4.json")
        kb.save(path)
        loaded = KnuthBendix.load(path)
        assert loaded.settings.max_rules == 3
        loaded.settings.max_rules = math.inf
        loaded.run()
        assert loaded.finished()
        assert loaded.size() == 24

    def test_repr(self):
        kb = zero_semigroup()
        assert "confluence unknown" in repr(kb)
        kb.run()
        assert "3 active rules, confluent" in repr(kb)


class TestRunByOverlapLength:
    def test_completes_and_restores_settings(self):
        kb = symmetric_group(3, settings=Settings(check_confluence_interval=100))
        kb.run_by_overlap_length()
        assert kb.confluent()
        assert kb.settings.max_overlap == math.inf
        assert kb.settings.check_confluence_interval == 100
        assert kb.size() == 6


# ── Property-based tests ─────────────────────────────────────────────────────

s4_words = st.text(alphabet="abc", max_size=10)


class TestEngineProperties:
    @given(st.integers(min_value=1, max_value=12))
    @settings(max_examples=12, deadline=None)
    def test_resume_after_max_rules(self, max_rules):
        kb = symmetric_group(4, settings=Settings(max_rules=max_rules))
        kb.run()
        kb.settings.max_rules = math.inf
        kb.run()
        assert kb.finished()
        reference = symmetric_group(4)
        reference.run()
        assert list(kb.active_rules()) == list(reference.active_rules())
        assert kb.size() == 24

    def test_deterministic(self):
        first, second = symmetric_group(4), symmetric_group(4)
        first.run()
        second.run()
        assert list(first.active_rules()) == list(second.active_rules())
        assert first.total_rules == second.total_rules

    @given(s4_words, s4_words)
    @settings(max_examples=50, deadline=None)
    def test_normal_form_of_product(self, u, v):
        kb = symmetric_group(4)
        nf = kb.normal_form(u + v)
        assert kb.normal_form(kb.normal_form(u) + kb.normal_form(v)) == nf
        assert kb.normal_form(nf) == nf
