from __future__ import annotations

import logging

import httpx
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from .errors import TransportError
from .pagination import PaginatedFetcher, Record
from .transport import CancelToken

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    # A bad URL fails the same way on every attempt.
    return isinstance(exc, TransportError) and not isinstance(
        exc.__cause__, (httpx.UnsupportedProtocol, httpx.InvalidURL)
    )


def fetch_all_with_retry(
    fetcher: PaginatedFetcher,
    start_url: str,
    token: str,
    *,
    attempts: int = 3,
    cancel: CancelToken | None = None,
    wait: wait_base | None = None,
) -> list[Record]:
    """Repeat a whole ``fetch_all`` call on transport failures.

    Every attempt restarts from ``start_url``, so the result is still either
    the complete collection or an exception. Content errors and unusable URLs
    are not retried.
    """
    if wait is None:
        wait = wait_exponential(multiplier=0.5, min=0.5, max=8)
    for attempt in Retrying(
        retry=retry_if_exception(_is_transient),
        wait=wait,
        stop=stop_after_attempt(attempts),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            return fetcher.fetch_all(start_url, token, cancel=cancel)
    raise RuntimeError("fetch retries exhausted")
