from .api import CancelToken, FetchError, PaginatedFetcher, fetch_all

__all__ = ["CancelToken", "FetchError", "PaginatedFetcher", "fetch_all"]
