import pytest

from mediashelf_app import create_app
from mediashelf_app.catalog.models import SearchMediaType, SearchResponse
from mediashelf_app.search.smart_search import SearchService

from conftest import make_result


class StubService:
    def __init__(self, response=None, error=None):
        self.response = response or SearchResponse.empty()
        self.error = error
        self.calls = []

    async def search(self, query, media_type=None):
        self.calls.append((query, media_type))
        if self.error:
            raise self.error
        return self.response


class EmptyAggregator:
    def __init__(self):
        self.queries = []

    async def collect(self, query):
        self.queries.append(query)
        return []


def make_client(service):
    app = create_app(search_service=service)
    app.config['TESTING'] = True
    return app.test_client()


def test_health():
    client = make_client(StubService())

    response = client.get('/api/health')

    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}


def test_search_returns_camel_case_payload():
    result = make_result(id="tmdb_155", title="The Dark Knight", image_url="http://img/155.jpg", year=2008)
    service = StubService(SearchResponse(results=[result], total_results=1))
    client = make_client(service)

    response = client.get('/api/search?query=dark%20knight&mediaType=movie')

    assert response.status_code == 200
    payload = response.get_json()
    assert payload['totalResults'] == 1
    assert payload['hasMore'] is False
    item = payload['results'][0]
    assert item['id'] == 'tmdb_155'
    assert item['imageUrl'] == 'http://img/155.jpg'
    assert item['type'] == 'movie'
    assert item['source'] == 'tmdb'
    assert item['year'] == 2008
    assert service.calls == [('dark knight', SearchMediaType.MOVIE)]


def test_media_type_defaults_to_movie():
    service = StubService()
    client = make_client(service)

    client.get('/api/search?query=dune')

    assert service.calls == [('dune', SearchMediaType.MOVIE)]


def test_unknown_media_type_is_rejected():
    service = StubService()
    client = make_client(service)

    response = client.get('/api/search?query=dune&mediaType=podcast')

    assert response.status_code == 400
    assert response.get_json()['code'] == 'invalid_request'
    assert service.calls == []


def test_non_latin_query_returns_empty_response():
    aggregator = EmptyAggregator()
    client = make_client(SearchService(aggregator))

    response = client.get('/api/search', query_string={'query': 'Матрица', 'mediaType': 'movie'})

    assert response.status_code == 200
    assert response.get_json() == {'results': [], 'totalResults': 0, 'hasMore': False}
    assert aggregator.queries == []


@pytest.mark.parametrize("query", ["a" * 200 + "Матрица", "dune\x07", "a" * 201])
def test_query_is_validated_as_received(query):
    aggregator = EmptyAggregator()
    client = make_client(SearchService(aggregator))

    response = client.get('/api/search', query_string={'query': query, 'mediaType': 'book'})

    assert response.status_code == 200
    assert response.get_json() == {'results': [], 'totalResults': 0, 'hasMore': False}
    assert aggregator.queries == []


def test_missing_query_returns_empty_response():
    client = make_client(SearchService(EmptyAggregator()))

    response = client.get('/api/search')

    assert response.status_code == 200
    assert response.get_json()['results'] == []


def test_unexpected_failure_returns_500():
    client = make_client(StubService(error=RuntimeError("boom")))

    response = client.get('/api/search?query=dune&mediaType=book')

    assert response.status_code == 500
    assert response.get_json()['code'] == 'search_failed'


@pytest.mark.parametrize("media_type,label", [("movie", "Movies"), ("tv_show", "Serials"), ("book", "Books")])
def test_media_types_listing(media_type, label):
    client = make_client(StubService())

    payload = client.get('/api/search/media-types').get_json()

    assert {'value': media_type, 'label': label} in payload['mediaTypes']
