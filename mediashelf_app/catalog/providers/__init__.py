from .base import BaseCatalogProvider, ProviderError, parse_year
from .google_books import GoogleBooksProvider
from .tmdb import TMDBProvider

__all__ = [
    'BaseCatalogProvider',
    'GoogleBooksProvider',
    'ProviderError',
    'TMDBProvider',
    'parse_year',
]
