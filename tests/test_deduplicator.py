from mediashelf_app.search.deduplicator import SearchDeduplicator, dedupe

from conftest import make_result


def test_first_occurrence_wins_and_order_is_kept():
    first = make_result(id="tmdb_42", title="The Hitchhiker's Guide")
    other = make_result(id="tmdb_7", title="Se7en")
    repeat = make_result(id="tmdb_42", title="Different payload, same id")

    unique = dedupe([first, other, repeat])

    assert unique == [first, other]
    assert unique[0].title == "The Hitchhiker's Guide"


def test_dedupe_is_idempotent():
    results = [make_result(id=f"tmdb_{i % 3}") for i in range(7)]

    once = dedupe(results)

    assert dedupe(once) == once
    assert [r.id for r in once] == ["tmdb_0", "tmdb_1", "tmdb_2"]


def test_ids_are_provider_qualified():
    movie = make_result(id="tmdb_1")
    book = make_result(id="google_books_1")

    assert dedupe([movie, book]) == [movie, book]


def test_empty_input():
    assert dedupe([]) == []
    assert SearchDeduplicator().deduplicate([]) == []


def test_deduplicator_wrapper():
    results = [make_result(id="tmdb_1"), make_result(id="tmdb_1")]

    assert len(SearchDeduplicator().deduplicate(results)) == 1
