"""
================================================================================
MediaShelf - Configuration
================================================================================
Environment-driven settings for the catalog providers and the search engine.

Variables (a .env file is loaded by the app factory):
  TMDB_API_KEY            (required)
  TMDB_LANGUAGE           default: en-US
  TMDB_BASE_URL           default: https://api.themoviedb.org/3
  TMDB_IMAGE_BASE_URL     default: https://image.tmdb.org/t/p/w500
  GOOGLE_BOOKS_API_KEY    (required)
  GOOGLE_BOOKS_BASE_URL   default: https://www.googleapis.com/books/v1
  GOOGLE_BOOKS_LANG       default: en
  GOOGLE_BOOKS_PRINT_TYPE default: books
  SEARCH_CACHE_TTL        default: 300 seconds (0 disables the result cache)
  SEARCH_CACHE_SIZE       default: 500 entries
================================================================================
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


class ConfigurationError(Exception):
    """Raised at construction time when required settings are missing."""


def _require(env: Mapping[str, str], name: str) -> str:
    value = (env.get(name) or '').strip()
    if not value:
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return value


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'")


@dataclass(frozen=True)
class TMDBConfig:
    api_key: str
    base_url: str = "https://api.themoviedb.org/3"
    image_base_url: str = "https://image.tmdb.org/t/p/w500"
    language: str = "en-US"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TMDBConfig":
        env = os.environ if env is None else env
        return cls(
            api_key=_require(env, 'TMDB_API_KEY'),
            base_url=env.get('TMDB_BASE_URL') or cls.base_url,
            image_base_url=env.get('TMDB_IMAGE_BASE_URL') or cls.image_base_url,
            language=env.get('TMDB_LANGUAGE') or cls.language
        )


@dataclass(frozen=True)
class GoogleBooksConfig:
    api_key: str
    base_url: str = "https://www.googleapis.com/books/v1"
    lang_restrict: str = "en"
    print_type: str = "books"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GoogleBooksConfig":
        env = os.environ if env is None else env
        return cls(
            api_key=_require(env, 'GOOGLE_BOOKS_API_KEY'),
            base_url=env.get('GOOGLE_BOOKS_BASE_URL') or cls.base_url,
            lang_restrict=env.get('GOOGLE_BOOKS_LANG') or cls.lang_restrict,
            print_type=env.get('GOOGLE_BOOKS_PRINT_TYPE') or cls.print_type
        )


@dataclass(frozen=True)
class SearchSettings:
    cache_ttl: int = 300
    cache_size: int = 500

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SearchSettings":
        env = os.environ if env is None else env
        return cls(
            cache_ttl=max(0, _int(env, 'SEARCH_CACHE_TTL', cls.cache_ttl)),
            cache_size=max(1, _int(env, 'SEARCH_CACHE_SIZE', cls.cache_size))
        )
