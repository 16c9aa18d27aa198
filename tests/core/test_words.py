"""
Tests for alphabets, word validation and the shortlex order.

Core claims:
    - shortlex is a strict total order: shorter first, then lexicographic
    - internal words compare by letter index, not by character code
    - bad letters and bad alphabets are rejected with PresentationError
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kbcomplete.core.words import (
    PresentationError, AlphabetError, LetterError,
    make_alphabet, validate_word, to_internal_table, to_external_table,
    shortlex_less, is_subword, max_common_prefix,
)


words = st.text(alphabet="abc", max_size=6)


class TestMakeAlphabet:
    def test_str_kept(self):
        assert make_alphabet("xyz") == "xyz"

    def test_int_gives_lowercase(self):
        assert make_alphabet(3) == "abc"

    def test_zero_is_empty(self):
        assert make_alphabet(0) == ""

    def test_duplicate_letter_rejected(self):
        with pytest.raises(AlphabetError):
            make_alphabet("aba")

    def test_negative_rejected(self):
        with pytest.raises(AlphabetError):
            make_alphabet(-1)

    def test_wrong_type_rejected(self):
        with pytest.raises(AlphabetError):
            make_alphabet(["a", "b"])

    def test_errors_are_value_errors(self):
        assert issubclass(AlphabetError, PresentationError)
        assert issubclass(LetterError, ValueError)


class TestValidateWord:
    def test_valid_word(self):
        validate_word("abba", "ab")

    def test_empty_word_valid(self):
        validate_word("", "ab")

    def test_bad_letter(self):
        with pytest.raises(LetterError, match="'c'"):
            validate_word("abc", "ab")

    def test_non_str(self):
        with pytest.raises(LetterError):
            validate_word([0, 1], "ab")


class TestTranslation:
    def test_round_trip(self):
        alphabet = "ba"
        internal = "abba".translate(to_internal_table(alphabet))
        assert internal == "\x01\x00\x00\x01"
        assert internal.translate(to_external_table(alphabet)) == "abba"

    def test_internal_order_follows_alphabet(self):
        # In the alphabet "ba", b comes before a.
        table = to_internal_table("ba")
        assert "b".translate(table) < "a".translate(table)


class TestShortlex:
    def test_shorter_is_less(self):
        assert shortlex_less("b", "aa")
        assert not shortlex_less("aa", "b")

    def test_same_length_lexicographic(self):
        assert shortlex_less("ab", "ba")

    def test_irreflexive(self):
        assert not shortlex_less("ab", "ab")

    @given(words, words)
    def test_total(self, u, v):
        assert (u == v) + shortlex_less(u, v) + shortlex_less(v, u) == 1

    @given(words, words, words)
    def test_compatible_with_concatenation(self, u, v, w):
        if shortlex_less(u, v):
            assert shortlex_less(w + u, w + v)
            assert shortlex_less(u + w, v + w)


class TestSubwords:
    def test_is_subword(self):
        assert is_subword("bb", "abba")
        assert not is_subword("aa", "abba")
        assert is_subword("", "ab")

    def test_max_common_prefix(self):
        assert max_common_prefix("abcab", 3, "abba") == 2
        assert max_common_prefix("abc", 0, "abc") == 3
        assert max_common_prefix("abc", 1, "c") == 0
