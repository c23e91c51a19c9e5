"""Map raw query text to a validated search request."""

from __future__ import annotations

from urllib.parse import quote

import httpx

from repo_search.domain.models import RequestDescriptor
from repo_search.services.exceptions import InvalidQueryError

SEARCH_ENDPOINT = "https://api.github.com/search/repositories"


def build_request(query: str) -> RequestDescriptor | None:
    """Return a request for ``query``, or ``None`` when there is nothing to search.

    Only the exact empty string yields ``None``; whitespace is encoded like any
    other character.
    """

    if query == "":
        return None
    try:
        encoded = quote(query, safe="")
    except UnicodeEncodeError as exc:
        raise InvalidQueryError(query, "query is not valid unicode text") from exc

    url = f"{SEARCH_ENDPOINT}?q={encoded}"
    try:
        httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidQueryError(query, f"encoded url is invalid: {exc}") from exc
    return RequestDescriptor(query=query, url=url)


__all__ = ["SEARCH_ENDPOINT", "build_request"]
