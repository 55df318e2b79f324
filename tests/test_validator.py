import pytest

from mediashelf_app.catalog.models import SearchMediaType
from mediashelf_app.routes.validators import validate_search_params
from mediashelf_app.search.validator import MAX_QUERY_LENGTH, parse_media_type, validate_query


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", None, 42, "Матрица", "dune 砂丘", "a@b", "50%"])
def test_invalid_queries_yield_none(raw):
    assert validate_query(raw) is None


@pytest.mark.parametrize("raw", ["Inception", "Spider-Man", "Ocean's Eleven", "Dr. Strangelove", "What?!", "2001"])
def test_valid_queries(raw):
    assert validate_query(raw).text == raw


def test_query_is_trimmed_and_defaults_to_movie():
    query = validate_query("  the matrix  ")

    assert query.text == "the matrix"
    assert query.media_type == SearchMediaType.MOVIE


def test_media_type_is_carried():
    assert validate_query("dune", "book").media_type == SearchMediaType.BOOK
    assert validate_query("lost", SearchMediaType.TV_SHOW).media_type == SearchMediaType.TV_SHOW


def test_unknown_media_type_falls_back_to_movie():
    assert validate_query("dune", "podcast").media_type == SearchMediaType.MOVIE


def test_parse_media_type():
    assert parse_media_type(None) == SearchMediaType.MOVIE
    assert parse_media_type("") == SearchMediaType.MOVIE
    assert parse_media_type(" TV_SHOW ") == SearchMediaType.TV_SHOW
    assert parse_media_type("podcast") is None


def test_over_long_query_is_rejected_not_truncated():
    assert validate_query("a" * MAX_QUERY_LENGTH).text == "a" * MAX_QUERY_LENGTH
    assert validate_query("a" * (MAX_QUERY_LENGTH + 1)) is None
    assert validate_query("a" * 200 + "Матрица") is None


def test_control_characters_are_not_stripped():
    assert validate_query("dune\x07") is None
    assert validate_query("du\x00ne") is None


def test_validate_search_params_passes_query_through():
    query, media_type, error = validate_search_params("dune\x07" + "x" * 300, "book")

    assert query == "dune\x07" + "x" * 300
    assert media_type == SearchMediaType.BOOK
    assert error is None


def test_validate_search_params_unknown_media_type():
    _, media_type, error = validate_search_params("dune", "podcast")

    assert media_type is None
    assert "podcast" in error
    assert "tv_show" in error
