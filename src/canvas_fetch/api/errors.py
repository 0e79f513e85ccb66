from __future__ import annotations

SNIPPET_LENGTH = 200


class FetchError(RuntimeError):
    """Base class for every failure of a paginated fetch."""

    def __init__(self, url: str | None, message: str) -> None:
        self.url = url
        super().__init__(f"{message} ({url})" if url else message)


class TransportError(FetchError):
    def __init__(self, url: str | None, detail: str) -> None:
        self.detail = detail
        super().__init__(url, f"Request failed: {detail}")


class UnexpectedContentError(FetchError):
    """The body does not start with ``{`` or ``[``."""

    def __init__(self, url: str | None, body: str, status: int | None = None) -> None:
        self.status = status
        self.snippet = body[:SNIPPET_LENGTH]
        status_text = f"HTTP {status}, " if status is not None else ""
        super().__init__(
            url,
            f"Response is not JSON ({status_text}body {self.snippet!r}). "
            "Did you get the URL right?",
        )


class MalformedJsonError(FetchError):
    def __init__(self, url: str | None, detail: str) -> None:
        self.detail = detail
        super().__init__(url, f"Malformed JSON: {detail}")


class FetchCancelled(FetchError):
    def __init__(self, url: str | None) -> None:
        super().__init__(url, "Fetch cancelled")


class PageLimitExceeded(FetchError):
    def __init__(self, url: str | None, max_pages: int) -> None:
        self.max_pages = max_pages
        super().__init__(url, f"Page limit of {max_pages} reached with pages remaining")
