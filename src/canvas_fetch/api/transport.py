from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Mapping

import httpx

from .errors import FetchCancelled, TransportError


@dataclass(frozen=True)
class Page:
    url: str
    status: int
    body: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    def __post_init__(self) -> None:
        # Fake transports hand in plain dicts or (name, value) lists.
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers))


class CancelToken:
    """Cooperative cancellation flag shared between a fetch and its caller.

    ``cancel()`` may be called from any thread. The fetch notices it before the
    next request and between body chunks of the response being read.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, url: str | None = None) -> None:
        if self._event.is_set():
            raise FetchCancelled(url)


GetFunc = Callable[[str, Mapping[str, str], CancelToken | None], Page]


class HttpxTransport:
    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "canvas-fetch",
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers={"User-Agent": user_agent},
            timeout=timeout,
        )

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def get(
        self,
        url: str,
        headers: Mapping[str, str],
        cancel: CancelToken | None = None,
    ) -> Page:
        try:
            with self._client.stream("GET", url, headers=dict(headers)) as response:
                chunks: list[bytes] = []
                for chunk in response.iter_bytes():
                    if cancel is not None:
                        cancel.raise_if_cancelled(url)
                    chunks.append(chunk)
                body = b"".join(chunks).decode(
                    response.encoding or "utf-8", errors="replace"
                )
                return Page(
                    url=url,
                    status=response.status_code,
                    body=body,
                    headers=response.headers,
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(url, str(exc) or type(exc).__name__) from exc

    __call__ = get
