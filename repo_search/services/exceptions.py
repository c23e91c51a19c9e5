"""Domain-specific exceptions."""

from __future__ import annotations


class SearchError(Exception):
    pass


class InvalidQueryError(SearchError):
    def __init__(self, query: str, reason: str) -> None:
        super().__init__(f"Cannot build a search request: {reason}")
        self.query = query
        self.reason = reason


class FetchError(SearchError):
    pass


class NetworkError(FetchError):
    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Network request failed: {cause}")
        self.cause = cause


class ServerError(FetchError):
    def __init__(self, status_code: int, detail: str = "") -> None:
        message = f"Search endpoint returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class DecodeError(FetchError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Unexpected response body: {message}")
        self.message = message


def describe_error(exc: Exception) -> str:
    """User-facing wording for a pipeline error."""

    if isinstance(exc, InvalidQueryError):
        return f"That search can't be sent ({exc.reason})."
    if isinstance(exc, NetworkError):
        return "Couldn't reach GitHub. Check your connection and try again."
    if isinstance(exc, ServerError):
        if exc.status_code in (403, 429):
            return f"GitHub is rate limiting searches (HTTP {exc.status_code}). Try again shortly."
        if exc.status_code == 422:
            return "GitHub rejected this search query (HTTP 422)."
        return f"GitHub search failed (HTTP {exc.status_code})."
    if isinstance(exc, DecodeError):
        return "GitHub returned a response that couldn't be read."
    return "Search failed unexpectedly."


__all__ = [
    "SearchError",
    "InvalidQueryError",
    "FetchError",
    "NetworkError",
    "ServerError",
    "DecodeError",
    "describe_error",
]
