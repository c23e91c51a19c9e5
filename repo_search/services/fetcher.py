"""GitHub repository search over HTTP."""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from repo_search.config import HttpSettings
from repo_search.domain.models import RequestDescriptor, SearchResult
from repo_search.logging import logger
from repo_search.services.exceptions import DecodeError, NetworkError, ServerError

DETAIL_CHAR_LIMIT = 200


class SearchFetcher:
    """Performs one search request per call and decodes the body.

    Cancellation of the awaiting task is left alone: ``asyncio.CancelledError``
    is never converted into a ``FetchError``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: HttpSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or HttpSettings()

    async def fetch(self, descriptor: RequestDescriptor) -> SearchResult:
        try:
            response = await self._client.get(
                descriptor.url,
                headers=self._headers(),
                timeout=self._settings.request_timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise NetworkError(exc) from exc

        if response.status_code != 200:
            raise ServerError(response.status_code, self._error_detail(response))

        try:
            result = SearchResult.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(_summarize_validation(exc)) from exc

        logger.debug(
            "search_response_decoded",
            query=descriptor.query,
            total_count=result.total_count,
            items=len(result.items),
            incomplete=result.incomplete_results,
        )
        return result

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self._settings.user_agent,
        }
        token = self._settings.github_token
        if token is not None:
            headers["Authorization"] = f"Bearer {token.get_secret_value()}"
        return headers

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            detail = payload["message"]
        else:
            detail = response.text
        return detail.strip()[:DETAIL_CHAR_LIMIT]


def _summarize_validation(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "body"
    summary = f"{location}: {first.get('msg', 'invalid value')}"
    if len(errors) > 1:
        summary = f"{summary} (+{len(errors) - 1} more)"
    return summary


__all__ = ["SearchFetcher"]
