"""Tests for keyword search ranking and edge cases."""

import pytest

from effect_solutions.docs import Document, DocumentStore, SearchIndex
from effect_solutions.docs.search import normalize_query, score_fields
from effect_solutions.errors import InvalidArgumentError


def test_title_outranks_description_outranks_body(small_store) -> None:
    results = SearchIndex(small_store).search("error handling")

    assert [r.slug for r in results] == ["errors", "layers", "testing"]
    assert [r.matched_in for r in results] == [["title"], ["description"], ["body"]]


def test_search_is_case_insensitive(small_store) -> None:
    index = SearchIndex(small_store)

    lower = [r.slug for r in index.search("error handling")]
    upper = [r.slug for r in index.search("ERROR Handling")]

    assert lower == upper


def test_empty_query_returns_nothing(small_store) -> None:
    index = SearchIndex(small_store)

    assert index.search("") == []
    assert index.search("   \t ") == []


def test_limit_truncates(small_store) -> None:
    results = SearchIndex(small_store).search("error handling", limit=1)

    assert [r.slug for r in results] == ["errors"]


@pytest.mark.parametrize("limit", [0, -1, True, "5"])
def test_invalid_limit_is_rejected(small_store, limit) -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        SearchIndex(small_store).search("error", limit=limit)

    assert exc_info.value.argument == "limit"


def test_non_string_query_is_rejected(small_store) -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        SearchIndex(small_store).search(42)

    assert exc_info.value.argument == "query"


def test_any_token_matches(small_store) -> None:
    results = SearchIndex(small_store).search("catchtag layers")

    # Neither document contains the phrase; each matches one token.
    assert [r.slug for r in results] == ["layers", "errors"]
    assert results[1].matched_in == ["body"]


def test_no_match_returns_empty(small_store) -> None:
    assert SearchIndex(small_store).search("kubernetes") == []


def test_equal_matches_break_ties_by_order_then_slug() -> None:
    store = DocumentStore(
        [
            Document(slug="zeta", title="Schema", body="", order=0),
            Document(slug="beta", title="Schema", body="", order=1),
            Document(slug="alpha", title="Schema", body="", order=1),
        ]
    )

    results = SearchIndex(store).search("schema")

    assert [r.slug for r in results] == ["zeta", "alpha", "beta"]


def test_search_is_deterministic(small_store) -> None:
    index = SearchIndex(small_store)

    first = [r.to_dict() for r in index.search("error handling")]
    second = [r.to_dict() for r in index.search("error handling")]

    assert first == second


def test_result_serialization_keys(small_store) -> None:
    result = SearchIndex(small_store).search("error handling")[0]

    assert result.to_dict() == {
        "slug": "errors",
        "title": "Error Handling",
        "description": "Typed failures",
        "score": 1200,
        "matched_in": ["title"],
    }


def test_bundled_corpus_finds_error_handling() -> None:
    results = SearchIndex(DocumentStore.from_manifest()).search("error handling")

    assert results
    assert results[0].slug == "error-handling"


def test_normalize_query_collapses_whitespace() -> None:
    assert normalize_query("  Layer  layer PROVIDE ") == ("layer layer provide", ["layer", "provide"])


def test_single_token_has_no_token_bonus() -> None:
    score, matched = score_fields({"title": "testing", "description": "", "body": "testing"}, "testing", ["testing"])

    assert score == 1010
    assert matched == ["title", "body"]
