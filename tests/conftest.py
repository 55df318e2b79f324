import json
from typing import Callable, List

import httpx
import pytest

from mediashelf_app.catalog.models import ResultSource, SearchMediaType, SearchResult
from mediashelf_app.config import GoogleBooksConfig, TMDBConfig
from mediashelf_app.http_client import RequestExecutor, RetryPolicy


FAST_POLICY = RetryPolicy(max_retries=3, base_delay=0.0, timeout=1.0)


def make_result(id: str = "tmdb_1", title: str = "Inception", **kwargs) -> SearchResult:
    kwargs.setdefault('media_type', SearchMediaType.MOVIE)
    kwargs.setdefault('source', ResultSource.TMDB)
    return SearchResult(id=id, title=title, **kwargs)


def json_response(payload, status: int = 200) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(payload), headers={'Content-Type': 'application/json'})


class RecordingSleep:
    """Stands in for asyncio.sleep and remembers the requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_executor(sleep) -> Callable[..., RequestExecutor]:
    def _make(handler, policy: RetryPolicy = FAST_POLICY) -> RequestExecutor:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return RequestExecutor(client=client, default_policy=policy, sleep=sleep)
    return _make


@pytest.fixture
def tmdb_config() -> TMDBConfig:
    return TMDBConfig(api_key="tmdb-test-key", base_url="https://tmdb.test/3")


@pytest.fixture
def books_config() -> GoogleBooksConfig:
    return GoogleBooksConfig(api_key="books-test-key", base_url="https://books.test/v1")


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    monkeypatch.setenv('LOG_DIR', str(tmp_path / 'logs'))
    monkeypatch.setenv('DEBUG_LOGGING', 'false')


@pytest.fixture
def created_clients(monkeypatch):
    """Route every AsyncClient the executor opens itself through a mock transport."""
    real_client = httpx.AsyncClient
    created = []

    def install(handler):
        def factory(**kwargs):
            created.append(kwargs)
            return real_client(transport=httpx.MockTransport(handler), **kwargs)
        monkeypatch.setattr(httpx, 'AsyncClient', factory)
        return created

    return install
