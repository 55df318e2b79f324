from .search_api import search_bp

__all__ = ['search_bp']
