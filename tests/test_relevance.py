from mediashelf_app.catalog.models import ResultSource, SearchMediaType
from mediashelf_app.search import relevance
from mediashelf_app.search.relevance import (
    completeness_score,
    contains_words_in_order,
    filter_latin,
    filter_title_match,
    is_book_relevant,
    normalize,
    rank,
    relevance_score,
)

from conftest import make_result


def book(title, subtitle=None, description=None, id="google_books_1"):
    return make_result(
        id=id,
        title=title,
        subtitle=subtitle,
        description=description,
        media_type=SearchMediaType.BOOK,
        source=ResultSource.GOOGLE_BOOKS
    )


def test_normalize():
    assert normalize("The Dark Knight Rises") == "the dark knight rises"
    assert normalize("Spider-Man: No Way Home") == "spider man no way home"
    assert normalize("  Multiple   spaces  ") == "multiple spaces"
    assert normalize("") == ""


def test_normalize_treats_non_ascii_letters_as_punctuation():
    assert normalize("Crouching Tiger, Hidden Dragon 臥虎藏龍") == "crouching tiger hidden dragon"
    assert normalize("Amélie") == "am lie"


def test_non_ascii_suffix_keeps_exact_match_tier():
    query = "Crouching Tiger, Hidden Dragon"
    original = make_result(id="tmdb_146", title="Crouching Tiger, Hidden Dragon 臥虎藏龍")
    sequel = make_result(id="tmdb_263", title="Crouching Tiger Hidden Dragon Sword of Destiny")

    assert relevance_score(original, query) == 130
    assert relevance_score(sequel, query) == 110
    assert [r.id for r in rank([sequel, original], query)] == ["tmdb_146", "tmdb_263"]


def test_contains_words_in_order():
    assert contains_words_in_order("the dark knight rises", ["dark", "rises"])
    assert not contains_words_in_order("the dark knight rises", ["rises", "dark"])
    assert contains_words_in_order("anything", [])


def test_filter_latin_drops_cyrillic_titles_and_subtitles():
    results = [
        make_result(id="tmdb_1", title="Solaris"),
        make_result(id="tmdb_2", title="Солярис"),
        make_result(id="tmdb_3", title="Solaris", subtitle="Фильм Тарковского"),
    ]

    assert [r.id for r in filter_latin(results)] == ["tmdb_1"]


def test_title_filter_requires_words_in_order():
    results = [
        make_result(id="tmdb_1", title="The Dark Knight"),
        make_result(id="tmdb_2", title="Knight and Dark"),
    ]

    assert [r.id for r in filter_title_match(results, "dark knight")] == ["tmdb_1"]
    assert [r.id for r in filter_title_match(results, "knight dark")] == []


def test_title_filter_ignores_punctuation_and_case():
    results = [make_result(id="tmdb_1", title="Spider-Man: No Way Home")]

    assert filter_title_match(results, "spider man no way") == results


def test_relevance_tiers():
    query = "dark knight"

    exact = relevance_score(make_result(title="The Dark Knight"), "the dark knight")
    starts = relevance_score(make_result(title="Dark Knight Rises"), query)
    contains = relevance_score(make_result(title="The Dark Knight"), query)
    in_order = relevance_score(make_result(title="Dark of the Knight"), query)

    assert exact == 100 + 20 + 10
    assert starts == 80 + 20 + 10
    assert contains == 60 + 20 + 10
    assert in_order == 40 + 20 + 10


def test_relevance_partial_word_ratio():
    score = relevance_score(make_result(title="Knight Moves"), "dark knight")

    assert score == 5.0


def test_relevance_punctuation_only_query_skips_word_bonus():
    # Normalizes to "", which every title starts with
    assert relevance_score(make_result(title="Anything"), "...") == 80


def test_completeness_score():
    full = make_result(
        title="Inception",
        image_url="http://img/1.jpg",
        description="Dreams",
        rating=8.4,
        year=2010
    )
    bare = make_result(title="Inception")
    zero_rating = make_result(title="Inception", rating=0.0)

    assert completeness_score(full) == 11
    assert completeness_score(bare) == 1
    assert completeness_score(zero_rating) == 1


def test_rank_prefers_exact_then_completeness_then_rating():
    exact_bare = make_result(id="tmdb_1", title="Inception")
    exact_full = make_result(id="tmdb_2", title="Inception", image_url="http://img", rating=8.4)
    prefix_rich = make_result(
        id="tmdb_3",
        title="Inception: The Cobol Job",
        image_url="http://img",
        description="Prequel",
        rating=9.9,
        year=2010
    )
    exact_same_but_rated = make_result(id="tmdb_4", title="Inception", image_url="http://img", rating=9.0)

    ranked = rank([prefix_rich, exact_bare, exact_full, exact_same_but_rated], "inception")

    assert [r.id for r in ranked] == ["tmdb_4", "tmdb_2", "tmdb_1", "tmdb_3"]


def test_rank_is_stable_for_ties():
    first = make_result(id="tmdb_1", title="Heat")
    second = make_result(id="tmdb_2", title="Heat")

    assert rank([first, second], "heat") == [first, second]
    assert rank([second, first], "heat") == [second, first]


def test_apply_runs_full_pipeline():
    results = [
        make_result(id="tmdb_1", title="Начало"),
        make_result(id="tmdb_2", title="The Inception of Chaos"),
        make_result(id="tmdb_3", title="Inception"),
        make_result(id="tmdb_4", title="Interstellar"),
    ]

    assert [r.id for r in relevance.apply(results, "Inception")] == ["tmdb_3", "tmdb_2"]


def test_book_relevance_short_query_passes_everything():
    assert is_book_relevant(book("Completely Unrelated"), "it")


def test_book_relevance_title_or_author_match():
    assert is_book_relevant(book("Dune Messiah"), "dune")
    assert is_book_relevant(book("Children of God", subtitle="Frank Herbert"), "herbert")
    assert not is_book_relevant(book("Cooking for One"), "herbert")


def test_book_relevance_description_only_counts_for_short_queries():
    about_dune = book("Sand Planet", description="A dune saga on Arrakis")

    assert is_book_relevant(about_dune, "dune saga")
    assert not is_book_relevant(about_dune, "dune saga arrakis")
