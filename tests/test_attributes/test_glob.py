"""Tests for the attribute glob engine."""
from __future__ import annotations

import pytest

from aumos_access_control.attributes.glob import (
    AttributeGlob,
    filter_all,
    filter_attributes,
    is_granted,
    matches,
    sort_patterns,
    union,
)
from aumos_access_control.errors import AccessControlError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def account_doc() -> dict[str, object]:
    return {
        "name": "Jane",
        "email": "jane@example.com",
        "secret": {"value": "x"},
        "account": {
            "id": 42,
            "country": "US",
            "balance": {"credit": 100, "debit": 20},
        },
        "tags": ["a", "b"],
    }


# ---------------------------------------------------------------------------
# AttributeGlob
# ---------------------------------------------------------------------------


class TestAttributeGlobParse:
    def test_plain_path(self) -> None:
        glob = AttributeGlob.parse("account.balance")
        assert glob.segments == ("account", "balance")
        assert glob.negated is False

    def test_negation_and_whitespace_stripped(self) -> None:
        glob = AttributeGlob.parse("  ! account.id ")
        assert glob.negated is True
        assert glob.path == "account.id"
        assert str(glob) == "!account.id"

    @pytest.mark.parametrize("pattern", ["", "   ", "!", "a..b", ".a"])
    def test_empty_segments_rejected(self, pattern: str) -> None:
        with pytest.raises(AccessControlError):
            AttributeGlob.parse(pattern)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(AccessControlError):
            AttributeGlob.parse(3)

    def test_covers_shorter_prefix(self) -> None:
        assert AttributeGlob.parse("account").covers(AttributeGlob.parse("account.id"))
        assert AttributeGlob.parse("*").covers(AttributeGlob.parse("account.id"))
        assert not AttributeGlob.parse("account.id").covers(AttributeGlob.parse("account"))

    def test_literal_does_not_cover_wildcard(self) -> None:
        assert not AttributeGlob.parse("a.b").covers(AttributeGlob.parse("a.*"))
        assert AttributeGlob.parse("a.*").covers(AttributeGlob.parse("a.b"))

    def test_overlaps_with_wildcards(self) -> None:
        assert AttributeGlob.parse("a.b").overlaps(AttributeGlob.parse("a.*"))
        assert AttributeGlob.parse("a").overlaps(AttributeGlob.parse("a.b.c"))
        assert not AttributeGlob.parse("a.b").overlaps(AttributeGlob.parse("a.c"))


class TestMatches:
    def test_exact(self) -> None:
        assert matches("account.id", "account.id") is True

    def test_wildcard_matches_one_segment(self) -> None:
        assert matches("account.*", "account.id") is True
        assert matches("account.*", "account.balance.credit") is False

    def test_segment_count_must_be_equal(self) -> None:
        assert matches("account", "account.id") is False

    def test_negation_ignored(self) -> None:
        assert matches("!account.id", "account.id") is True


class TestSortPatterns:
    def test_least_specific_first(self) -> None:
        patterns = ["!account.balance.credit", "account.*", "!secret", "*"]
        assert sort_patterns(patterns) == [
            "*",
            "!secret",
            "account.*",
            "!account.balance.credit",
        ]

    def test_wildcards_before_literals_at_same_depth(self) -> None:
        assert sort_patterns(["a.b", "a.*"]) == ["a.*", "a.b"]

    def test_positive_before_negation_at_same_rank(self) -> None:
        assert sort_patterns(["!name", "name"]) == ["name", "!name"]


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


class TestFilterAttributes:
    def test_nested_negations(self, account_doc: dict[str, object]) -> None:
        patterns = ["*", "!account.balance.credit", "!account.id", "!secret"]
        result = filter_attributes(account_doc, patterns)
        assert result == {
            "name": "Jane",
            "email": "jane@example.com",
            "account": {"country": "US", "balance": {"debit": 20}},
            "tags": ["a", "b"],
        }

    def test_source_not_mutated(self, account_doc: dict[str, object]) -> None:
        filter_attributes(account_doc, ["*", "!account.id"])
        assert account_doc["account"]["id"] == 42  # type: ignore[index]

    def test_result_is_deep_copy(self, account_doc: dict[str, object]) -> None:
        result = filter_attributes(account_doc, ["account"])
        result["account"]["country"] = "FR"  # type: ignore[index]
        assert account_doc["account"]["country"] == "US"  # type: ignore[index]

    def test_positive_paths_only(self, account_doc: dict[str, object]) -> None:
        result = filter_attributes(account_doc, ["name", "account.balance.debit"])
        assert result == {"name": "Jane", "account": {"balance": {"debit": 20}}}

    def test_wildcard_segment(self, account_doc: dict[str, object]) -> None:
        result = filter_attributes(account_doc, ["account.*", "!account.balance"])
        assert result == {"account": {"id": 42, "country": "US"}}

    def test_specific_positive_restores_after_negation(
        self, account_doc: dict[str, object]
    ) -> None:
        result = filter_attributes(account_doc, ["!account", "account.id"])
        assert result == {"account": {"id": 42}}

    def test_missing_path_ignored(self, account_doc: dict[str, object]) -> None:
        assert filter_attributes(account_doc, ["nope.deeper"]) == {}

    def test_lists_are_leaves(self, account_doc: dict[str, object]) -> None:
        assert filter_attributes(account_doc, ["tags.0"]) == {}
        assert filter_attributes(account_doc, ["tags"]) == {"tags": ["a", "b"]}

    def test_empty_patterns_yield_empty(self, account_doc: dict[str, object]) -> None:
        assert filter_attributes(account_doc, []) == {}
        assert filter_attributes(account_doc, None) == {}

    def test_negations_only_yield_empty(self, account_doc: dict[str, object]) -> None:
        assert filter_attributes(account_doc, ["!name"]) == {}

    def test_non_mapping_yields_empty(self) -> None:
        assert filter_attributes("text", ["*"]) == {}
        assert filter_attributes(None, ["*"]) == {}


class TestFilterAll:
    def test_list_filtered_item_by_item(self) -> None:
        data = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        assert filter_all(data, ["*", "!id"]) == [{"name": "a"}, {"name": "b"}]

    def test_single_mapping(self) -> None:
        assert filter_all({"id": 1, "name": "a"}, ["name"]) == {"name": "a"}


class TestIsGranted:
    def test_any_positive_grants(self) -> None:
        assert is_granted(["!id", "name"]) is True

    def test_only_negations_not_granted(self) -> None:
        assert is_granted(["!id", "!name"]) is False

    def test_empty_not_granted(self) -> None:
        assert is_granted([]) is False
        assert is_granted(None) is False


# ---------------------------------------------------------------------------
# Union
# ---------------------------------------------------------------------------


class TestUnion:
    def test_wildcard_absorbs_negations(self) -> None:
        assert union(["*"], ["*", "!id", "!pwd"]) == ["*"]
        assert union(["*", "!id", "!pwd"], ["*"]) == ["*"]

    def test_shared_negation_survives(self) -> None:
        assert union(["*", "!pwd", "title"], ["*", "!id", "!pwd"]) == ["*", "!pwd"]

    def test_partly_granted_negation_kept_with_granted_part(self) -> None:
        assert union(["*", "!account"], ["account.id"]) == [
            "*",
            "account.id",
            "!account",
        ]

    def test_granted_part_added_back_under_kept_negation(self) -> None:
        assert union(["a.*", "!a.b"], ["a.b.c"]) == ["a.*", "a.b.c", "!a.b"]

    def test_unreachable_negation_dropped(self) -> None:
        assert union(["image", "name"], ["name", "!location"]) == ["image", "name"]

    def test_chained_union_of_three_lists(self) -> None:
        first = union(["image", "name"], ["name", "!location"])
        assert union(first, ["*", "!location"]) == ["*", "!location"]

    def test_disjoint_positives_kept_in_order(self) -> None:
        assert union(["title"], ["id", "title"]) == ["title", "id"]

    def test_covered_positive_kept_when_negation_in_between(self) -> None:
        assert union(["*", "!account"], ["account.id", "!account"]) == [
            "*",
            "account.id",
            "!account",
        ]

    def test_union_grants_superset(self) -> None:
        doc = {"id": 1, "name": "n", "pwd": "p", "title": "t"}
        first = ["*", "!pwd", "!id"]
        second = ["id", "title"]
        merged = filter_attributes(doc, union(first, second))
        for patterns in (first, second):
            for key, value in filter_attributes(doc, patterns).items():
                assert merged[key] == value

    def test_union_grants_exactly_what_either_list_grants(self) -> None:
        doc = {"a": {"b": {"c": 1, "d": 2}, "e": 3}}
        merged = union(["a.*", "!a.b"], ["a.b.c"])
        assert filter_attributes(doc, merged) == {"a": {"b": {"c": 1}, "e": 3}}

    def test_partly_granted_negation_does_not_leak_siblings(self) -> None:
        doc = {"name": "n", "account": {"id": 1, "balance": 5}}
        merged = union(["*", "!account"], ["account.id"])
        assert filter_attributes(doc, merged) == {"name": "n", "account": {"id": 1}}

    def test_invalid_pattern_rejected(self) -> None:
        with pytest.raises(AccessControlError):
            union(["*"], [""])
