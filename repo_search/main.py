"""Console entrypoint: each stdin line replaces the current query."""

from __future__ import annotations

import asyncio
import sys
from typing import TextIO

import httpx

from repo_search.config import SearchSettings, get_settings
from repo_search.domain.models import ErrorMessage
from repo_search.logging import configure_logging, logger
from repo_search.pipeline import SearchController
from repo_search.services.fetcher import SearchFetcher


class ConsoleView:
    """Prints published state; the only thing it writes back is error dismissal."""

    def __init__(self, controller: SearchController, stream: TextIO | None = None) -> None:
        self._controller = controller
        self._stream = stream
        controller.results_changed.connect(self.render_results)
        controller.error_changed.connect(self.render_error)

    def render_results(self, results: tuple[str, ...]) -> None:
        print(f"-- {len(results)} repositories --", file=self._out)
        for full_name in results:
            print(full_name, file=self._out)

    def render_error(self, error: ErrorMessage | None) -> None:
        if error is None:
            return
        print(f"! {error.text}", file=self._out)
        self._controller.dismiss_error()

    @property
    def _out(self) -> TextIO:
        return self._stream or sys.stdout


def _build_http_client(settings: SearchSettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http.request_timeout_seconds)


async def feed_queries(controller: SearchController, stream: TextIO) -> int:
    """Push every line of ``stream`` into the controller until EOF."""

    loop = asyncio.get_running_loop()
    count = 0
    while True:
        line = await loop.run_in_executor(None, stream.readline)
        if not line:
            return count
        controller.query = line.rstrip("\r\n")
        count += 1


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    async with _build_http_client(settings) as client:
        fetcher = SearchFetcher(client, settings.http)
        async with SearchController(fetcher, settings=settings.pipeline) as controller:
            ConsoleView(controller)
            logger.info(
                "repo_search_starting",
                debounce_seconds=controller.debounce_seconds,
                authenticated=settings.http.github_token is not None,
            )
            lines = await feed_queries(controller, sys.stdin)
            await controller.drain()
            logger.info("repo_search_stopping", queries=lines, final_results=len(controller.results))


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
