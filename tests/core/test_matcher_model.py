"""Tests for the segment matcher data model."""

from __future__ import annotations

import pytest

from nameguard.core.matcher.model import MatcherKind, SegmentMatcher, fold


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


class TestEquals:
    def test_exact(self) -> None:
        assert SegmentMatcher(MatcherKind.EQUALS, start="Item").matches("Item") is True

    def test_case_insensitive(self) -> None:
        matcher = SegmentMatcher(MatcherKind.EQUALS, start="Item")
        assert matcher.matches("ITEM") is True
        assert matcher.matches("item") is True

    def test_longer_name_does_not_match(self) -> None:
        assert SegmentMatcher(MatcherKind.EQUALS, start="Item").matches("Item1") is False


class TestContains:
    @pytest.mark.parametrize("name", ["Item", "1Item", "Item1", "1ITEM1"])
    def test_substring(self, name: str) -> None:
        assert SegmentMatcher(MatcherKind.CONTAINS, start="Item").matches(name) is True

    def test_missing_substring(self) -> None:
        assert SegmentMatcher(MatcherKind.CONTAINS, start="Item").matches("Itm") is False


class TestAny:
    @pytest.mark.parametrize("name", ["", "Item", "whatever"])
    def test_always_true(self, name: str) -> None:
        assert SegmentMatcher(MatcherKind.ANY).matches(name) is True


class TestStartsWith:
    def test_prefix(self) -> None:
        matcher = SegmentMatcher(MatcherKind.STARTS_WITH, start="Item")
        assert matcher.matches("Item1") is True
        assert matcher.matches("item") is True
        assert matcher.matches("1Item") is False


class TestEndsWith:
    def test_suffix(self) -> None:
        matcher = SegmentMatcher(MatcherKind.ENDS_WITH, end="Item")
        assert matcher.matches("1Item") is True
        assert matcher.matches("1ITEM") is True
        assert matcher.matches("Item1") is False


class TestStartsAndEnds:
    def test_prefix_and_suffix(self) -> None:
        matcher = SegmentMatcher(MatcherKind.STARTS_AND_ENDS, start="It", end="em")
        assert matcher.matches("Item") is True
        assert matcher.matches("It--em") is True
        assert matcher.matches("Itm") is False

    def test_prefix_and_suffix_do_not_overlap(self) -> None:
        matcher = SegmentMatcher(MatcherKind.STARTS_AND_ENDS, start="ab", end="bc")
        assert matcher.matches("abc") is False
        assert matcher.matches("abbc") is True

    def test_shorter_than_prefix_fails_closed(self) -> None:
        matcher = SegmentMatcher(MatcherKind.STARTS_AND_ENDS, start="Items", end="x")
        assert matcher.matches("It") is False
        assert matcher.matches("") is False


# ---------------------------------------------------------------------------
# Case folding
# ---------------------------------------------------------------------------


class TestFold:
    """Only ASCII letters are folded; other characters compare as-is."""

    def test_ascii_letters_lowered(self) -> None:
        assert fold("ItemList_01") == "itemlist_01"

    @pytest.mark.parametrize("value", ["Straße", "\u212a", "\u0130", "ÄÖÜ"])
    def test_non_ascii_unchanged(self, value: str) -> None:
        assert fold(value) == value

    def test_sharp_s_does_not_expand(self) -> None:
        matcher = SegmentMatcher(MatcherKind.EQUALS, start="Straße")
        assert matcher.matches("STRAßE") is True
        assert matcher.matches("STRASSE") is False
        assert matcher.matches("strasse") is False

    def test_kelvin_sign_is_not_k(self) -> None:
        assert SegmentMatcher(MatcherKind.EQUALS, start="k").matches("\u212a") is False

    def test_sharp_s_and_ss_are_distinct_matchers(self) -> None:
        assert SegmentMatcher(MatcherKind.EQUALS, start="Straße") != SegmentMatcher(
            MatcherKind.EQUALS, start="STRASSE"
        )


# ---------------------------------------------------------------------------
# Structural equality
# ---------------------------------------------------------------------------


class TestStructuralEquality:
    def test_equal_ignoring_case(self) -> None:
        a = SegmentMatcher(MatcherKind.STARTS_WITH, start="Item")
        b = SegmentMatcher(MatcherKind.STARTS_WITH, start="ITEM")
        assert a == b
        assert hash(a) == hash(b)
        assert a.key == b.key

    def test_different_kind_not_equal(self) -> None:
        a = SegmentMatcher(MatcherKind.STARTS_WITH, start="Item")
        b = SegmentMatcher(MatcherKind.CONTAINS, start="Item")
        assert a != b

    def test_usable_in_sets(self) -> None:
        matchers = {
            SegmentMatcher(MatcherKind.EQUALS, start="Item"),
            SegmentMatcher(MatcherKind.EQUALS, start="item"),
            SegmentMatcher(MatcherKind.EQUALS, start="Other"),
        }
        assert len(matchers) == 2

    def test_literal_text_preserved(self) -> None:
        matcher = SegmentMatcher(MatcherKind.EQUALS, start="ItemList")
        assert matcher.start == "ItemList"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestStr:
    @pytest.mark.parametrize(
        ("matcher", "expected"),
        [
            (SegmentMatcher(MatcherKind.EQUALS, start="Item"), "Item"),
            (SegmentMatcher(MatcherKind.CONTAINS, start="Item"), "*Item*"),
            (SegmentMatcher(MatcherKind.ANY), "*"),
            (SegmentMatcher(MatcherKind.STARTS_WITH, start="Item"), "Item*"),
            (SegmentMatcher(MatcherKind.ENDS_WITH, end="Item"), "*Item"),
            (SegmentMatcher(MatcherKind.STARTS_AND_ENDS, start="It", end="em"), "It*em"),
        ],
    )
    def test_renders_glob_token(self, matcher: SegmentMatcher, expected: str) -> None:
        assert str(matcher) == expected
