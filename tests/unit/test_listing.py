from unittest.mock import Mock

import pytest

from src.components.listing import (
    ListingConfig,
    ListingInput,
    ListingService,
    build_match_query,
    config_from_rules,
    paginate,
    run_list,
    to_pos_int,
)
from src.domain.errors import ValidationFailedError


@pytest.fixture
def repo():
    mock = Mock()
    mock.search.return_value = ([], 0)
    return mock


@pytest.mark.parametrize(
    "raw,expected",
    [("3", 3), (" 7 ", 7), ("0", 1), ("-2", 1), ("abc", 1), (None, 1), ("2.5", 1), (4, 4)],
)
def test_to_pos_int(raw, expected):
    assert to_pos_int(raw, 1) == expected


def test_build_match_query_quotes_words():
    assert build_match_query("first scheduling") == '"first" OR "scheduling"'
    assert build_match_query('a "quoted" OR-thing*') == '"a" OR "quoted" OR "OR" OR "thing"'
    assert build_match_query("!!! ...") is None


def test_paginate():
    p = paginate(45, 3, 20)
    assert (p.total_pages, p.has_prev, p.has_next) == (3, True, False)

    empty = paginate(0, 1, 20)
    assert empty.total_pages == 1
    assert not empty.has_next


def test_limit_is_capped(repo):
    service = ListingService(repo, ListingConfig(max_limit=100, max_page=50))

    out = service.list("post", page="50", limit="5000")

    assert (out.pagination.page, out.pagination.limit) == (50, 100)
    assert repo.search.call_args.kwargs["offset"] == 49 * 100


def test_page_above_cap_is_rejected(repo):
    service = ListingService(repo, ListingConfig(max_page=50))

    with pytest.raises(ValidationFailedError) as exc:
        service.list("post", page="51")

    assert exc.value.field == "page"
    repo.search.assert_not_called()


def test_run_list_reports_page_above_cap(repo):
    out = run_list(ListingInput(type="post", page="20000"), repo=repo, config=ListingConfig())

    assert not out.success
    assert out.pagination is None
    assert out.errors[0].code == "validation_failed"


def test_defaults_for_garbage_paging(repo):
    out = ListingService(repo).list("post", page="x", limit="-1")
    assert (out.pagination.page, out.pagination.limit) == (1, 20)


def test_long_query_uses_fulltext(repo):
    out = ListingService(repo).list("post", q="  scheduling ")

    kwargs = repo.search.call_args.kwargs
    assert out.mode == "fulltext"
    assert kwargs["fts_query"] == '"scheduling"'
    assert kwargs["substring"] is None
    assert kwargs["weights"] == (10.0, 6.0, 4.0)


def test_short_query_uses_substring(repo):
    out = ListingService(repo).list("post", q="ab")

    kwargs = repo.search.call_args.kwargs
    assert out.mode == "substring"
    assert kwargs["fts_query"] is None
    assert kwargs["substring"] == "ab"


def test_substring_needle_is_case_folded_and_literal(repo):
    ListingService(repo).list("post", q="ÉC")
    assert repo.search.call_args.kwargs["substring"] == "éc"

    ListingService(repo).list("post", q="5%")
    assert repo.search.call_args.kwargs["substring"] == "5%"


def test_punctuation_only_query_falls_back_to_substring(repo):
    out = ListingService(repo).list("post", q="%%%")
    assert out.mode == "substring"


def test_no_query_mode_none(repo):
    assert ListingService(repo).list("post", q="   ").mode == "none"


@pytest.mark.parametrize("status,expected", [("all", None), (None, None), ("draft", "draft")])
def test_status_filter(repo, status, expected):
    ListingService(repo).list("post", status=status)
    assert repo.search.call_args.kwargs["status"] == expected


def test_unknown_status_is_validation_error(repo):
    out = run_list(ListingInput(type="post", status="trashed"), repo=repo)

    assert not out.success
    assert out.errors[0].code == "validation_failed"
    assert out.errors[0].field == "status"
    repo.search.assert_not_called()


def test_config_from_rules(rules):
    config = config_from_rules(rules.listing)
    assert config.default_limit == 20
    assert config.text_search_min_length == 3
    assert config.title_weight == 10.0
