"""Link-header pagination for Canvas-style REST APIs.

Canvas returns long listings a page at a time (10 items by default). While more
results remain, the response carries a header such as::

    Link: <https://canvas.example.edu/api/v1/courses?page=2&per_page=10>; rel="next"

``PaginatedFetcher`` keeps requesting the ``next`` URL until a page arrives
without one, and returns every record from every page in order. A fetch is
all-or-nothing: any error discards the pages collected so far.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping
from urllib.parse import urlparse

import httpx

from .errors import MalformedJsonError, PageLimitExceeded, UnexpectedContentError
from .transport import CancelToken, GetFunc, HttpxTransport, Page

logger = logging.getLogger(__name__)

NEXT_URL_PATTERN = re.compile(r'<([^>]+)>; rel="next"')

Record = dict[str, Any]


@dataclass(frozen=True)
class FetchRequest:
    url: str
    token: str = field(repr=False)

    def __post_init__(self) -> None:
        parsed = urlparse(self.url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Start URL must be absolute: {self.url!r}")
        if not self.token:
            raise ValueError("Auth token must not be empty")

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    @property
    def masked_token(self) -> str:
        return mask_token(self.token)


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "****"
    return f"****{token[-4:]}"


def parse_page_body(
    body: str, *, url: str | None = None, status: int | None = None
) -> list[Record]:
    """Turn one page body into a list of records.

    A body starting with ``{`` is a single object and becomes a one-element
    list. A body starting with ``[`` must be an array of objects. Anything else,
    including leading whitespace or an empty body, is rejected.
    """
    if body.startswith("{"):
        return [_loads(body, url)]
    if body.startswith("["):
        items = _loads(body, url)
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise MalformedJsonError(
                    url,
                    f"array element {index} is {type(item).__name__}, not an object",
                )
        return items
    raise UnexpectedContentError(url, body, status)


def _loads(body: str, url: str | None) -> Any:
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise MalformedJsonError(url, str(exc)) from exc


def next_link(headers: Mapping[str, str] | httpx.Headers) -> str | None:
    if not isinstance(headers, httpx.Headers):
        headers = httpx.Headers(headers)
    for value in headers.get_list("Link"):
        match = NEXT_URL_PATTERN.search(value)
        if match:
            return match.group(1)
    return None


class PaginatedFetcher:
    def __init__(
        self,
        transport: GetFunc | None = None,
        *,
        timeout: float = 30.0,
        max_pages: int | None = None,
        user_agent: str = "canvas-fetch",
    ) -> None:
        if max_pages is not None and max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._max_pages = max_pages
        self._owned: HttpxTransport | None = None
        if transport is None:
            self._owned = HttpxTransport(timeout=timeout, user_agent=user_agent)
            transport = self._owned.get
        self._transport = transport

    def __enter__(self) -> "PaginatedFetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owned is not None:
            self._owned.close()

    def iter_pages(
        self,
        start_url: str,
        token: str,
        *,
        cancel: CancelToken | None = None,
    ) -> Iterator[tuple[Page, list[Record]]]:
        request = FetchRequest(url=start_url, token=token)
        return self._iter_pages(request, cancel)

    def _iter_pages(
        self, request: FetchRequest, cancel: CancelToken | None
    ) -> Iterator[tuple[Page, list[Record]]]:
        headers = request.headers()
        logger.debug(
            "fetch started",
            extra={"start_url": request.url, "auth": request.masked_token},
        )
        url: str | None = request.url
        pages = 0
        while url is not None:
            if self._max_pages is not None and pages >= self._max_pages:
                raise PageLimitExceeded(url, self._max_pages)
            if cancel is not None:
                cancel.raise_if_cancelled(url)
            page = self._transport(url, headers, cancel)
            records = parse_page_body(page.body, url=url, status=page.status)
            next_url = next_link(page.headers)
            pages += 1
            logger.debug(
                "page fetched",
                extra={
                    "url": url,
                    "status": page.status,
                    "records": len(records),
                    "has_next": next_url is not None,
                },
            )
            yield page, records
            url = next_url

    def fetch_all(
        self,
        start_url: str,
        token: str,
        *,
        cancel: CancelToken | None = None,
    ) -> list[Record]:
        results: list[Record] = []
        pages = 0
        for _page, records in self.iter_pages(start_url, token, cancel=cancel):
            results.extend(records)
            pages += 1
        logger.info(
            "fetch complete",
            extra={"start_url": start_url, "pages": pages, "records": len(results)},
        )
        return results


def fetch_all(
    start_url: str,
    token: str,
    *,
    transport: GetFunc | None = None,
    timeout: float = 30.0,
    max_pages: int | None = None,
    cancel: CancelToken | None = None,
) -> list[Record]:
    with PaginatedFetcher(transport, timeout=timeout, max_pages=max_pages) as fetcher:
        return fetcher.fetch_all(start_url, token, cancel=cancel)
