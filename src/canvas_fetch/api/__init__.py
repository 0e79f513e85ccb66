from .auth import select_auth_token
from .errors import (
    FetchCancelled,
    FetchError,
    MalformedJsonError,
    PageLimitExceeded,
    TransportError,
    UnexpectedContentError,
)
from .pagination import (
    FetchRequest,
    PaginatedFetcher,
    Record,
    fetch_all,
    next_link,
    parse_page_body,
)
from .retry import fetch_all_with_retry
from .transport import CancelToken, HttpxTransport, Page

__all__ = [
    "CancelToken",
    "FetchCancelled",
    "FetchError",
    "FetchRequest",
    "HttpxTransport",
    "MalformedJsonError",
    "Page",
    "PageLimitExceeded",
    "PaginatedFetcher",
    "Record",
    "TransportError",
    "UnexpectedContentError",
    "fetch_all",
    "fetch_all_with_retry",
    "next_link",
    "parse_page_body",
    "select_auth_token",
]
