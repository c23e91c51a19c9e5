"""Query session state machine: debounce, dedupe, fetch, publish latest."""

from __future__ import annotations

import asyncio
from typing import Protocol

from repo_search.config import PipelineSettings
from repo_search.domain.models import (
    ErrorMessage,
    PipelineState,
    PipelineStatus,
    RequestDescriptor,
    SearchResult,
)
from repo_search.logging import logger
from repo_search.pipeline.clock import Clock, LoopClock
from repo_search.pipeline.debounce import Debouncer
from repo_search.pipeline.dedupe import Deduplicator
from repo_search.pipeline.signals import Signal
from repo_search.services.exceptions import FetchError, InvalidQueryError, describe_error
from repo_search.services.url_builder import build_request

_UNSET = object()


class Fetcher(Protocol):
    async def fetch(self, descriptor: RequestDescriptor) -> SearchResult: ...


class SearchController:
    """Owns one search session and publishes ``results`` and ``error``.

    Every dispatch takes a new request token. A fetch may only touch published
    state while its token is still the active one, so a superseded response is
    dropped no matter when it arrives. All mutation happens on the event loop
    that runs the clock callbacks and fetch tasks.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        clock: Clock | None = None,
        debounce_seconds: float | None = None,
        cancel_superseded: bool | None = None,
        settings: PipelineSettings | None = None,
    ) -> None:
        settings = settings or PipelineSettings()
        if debounce_seconds is None:
            debounce_seconds = settings.debounce_seconds
        if cancel_superseded is None:
            cancel_superseded = settings.cancel_superseded

        self._fetcher = fetcher
        self._clock = clock or LoopClock()
        self._cancel_superseded = cancel_superseded

        self._query = ""
        self._results: tuple[str, ...] = ()
        self._error: ErrorMessage | None = None
        self._status = PipelineStatus.IDLE
        self._token = 0
        self._active_task: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()
        self._closed = False

        self._dedupe: Deduplicator[str] = Deduplicator(self._dispatch)
        self._debouncer: Debouncer[str] = Debouncer(self._clock, debounce_seconds, self._on_debounced)

        self.results_changed: Signal[tuple[str, ...]] = Signal("results_changed")
        self.error_changed: Signal[ErrorMessage | None] = Signal("error_changed")
        self.state_changed: Signal[PipelineState] = Signal("state_changed")

    # -- published state -------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @query.setter
    def query(self, value: str) -> None:
        if self._closed:
            raise RuntimeError("SearchController is closed")
        self._debouncer.push(value)
        self._publish(query=value, status=PipelineStatus.DEBOUNCING)

    @property
    def results(self) -> tuple[str, ...]:
        return self._results

    @property
    def error(self) -> ErrorMessage | None:
        return self._error

    @error.setter
    def error(self, value: ErrorMessage | None) -> None:
        if value is not None:
            raise ValueError("error can only be cleared from outside the controller")
        self.dismiss_error()

    @property
    def status(self) -> PipelineStatus:
        return self._status

    @property
    def active_token(self) -> int:
        return self._token

    @property
    def debounce_seconds(self) -> float:
        return self._debouncer.delay

    @property
    def closed(self) -> bool:
        return self._closed

    def dismiss_error(self) -> None:
        self._publish(error=None)

    def snapshot(self) -> PipelineState:
        return PipelineState(
            query=self._query,
            results=self._results,
            error=self._error,
            status=self._status,
            active_token=self._token,
        )

    # -- lifecycle -------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait until the most recently dispatched fetch has finished."""

        while self._active_task is not None and not self._active_task.done():
            await asyncio.wait({self._active_task})

    async def drain(self) -> None:
        """Dispatch a pending debounced query right away and wait for it."""

        self._debouncer.flush()
        await self.wait_idle()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()
        tasks = list(self._inflight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._active_task = None
        self._publish(status=PipelineStatus.IDLE)
        logger.debug("search_controller_closed", cancelled=len(tasks))

    async def __aenter__(self) -> "SearchController":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -- pipeline stages -------------------------------------------------

    def _on_debounced(self, query: str) -> None:
        if not self._dedupe.push(query):
            logger.debug("duplicate_query_dropped", token=self._token)
            self._publish(status=self._current_status())

    def _dispatch(self, query: str) -> None:
        try:
            descriptor = build_request(query)
        except InvalidQueryError as exc:
            token = self._supersede()
            logger.warning("invalid_query", token=token, reason=exc.reason)
            self._publish(
                error=ErrorMessage.from_text(describe_error(exc)),
                status=self._current_status(),
            )
            return

        if descriptor is None:
            self._publish(error=None, status=self._current_status())
            return

        token = self._supersede()
        task = asyncio.get_running_loop().create_task(self._run_fetch(token, descriptor))
        self._active_task = task
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        logger.info("search_dispatched", token=token, query=query)
        self._publish(status=PipelineStatus.FETCHING)

    def _supersede(self) -> int:
        self._token += 1
        previous, self._active_task = self._active_task, None
        if previous is not None and not previous.done() and self._cancel_superseded:
            previous.cancel()
        return self._token

    async def _run_fetch(self, token: int, descriptor: RequestDescriptor) -> None:
        try:
            result = await self._fetcher.fetch(descriptor)
        except asyncio.CancelledError:
            logger.debug("search_cancelled", token=token)
            raise
        except FetchError as exc:
            self._complete(token, error=exc)
        except Exception as exc:
            logger.exception("search_fetch_crashed", token=token)
            self._complete(token, error=exc)
        else:
            self._complete(token, result=result)

    def _complete(
        self,
        token: int,
        *,
        result: SearchResult | None = None,
        error: Exception | None = None,
    ) -> None:
        if token != self._token:
            logger.debug("stale_search_dropped", token=token, active_token=self._token)
            return

        self._active_task = None
        if error is not None:
            logger.warning(
                "search_failed",
                token=token,
                error_type=error.__class__.__name__,
                error=str(error),
            )
            self._publish(
                error=ErrorMessage.from_text(describe_error(error)),
                status=self._current_status(),
            )
            return

        self._publish(
            results=result.full_names(),
            error=None,
            status=self._current_status(),
        )

    # -- helpers -----------------------------------------------------------

    def _current_status(self) -> PipelineStatus:
        if self._debouncer.pending:
            return PipelineStatus.DEBOUNCING
        if self._active_task is not None and not self._active_task.done():
            return PipelineStatus.FETCHING
        return PipelineStatus.IDLE

    def _publish(
        self,
        *,
        query: object = _UNSET,
        results: object = _UNSET,
        error: object = _UNSET,
        status: PipelineStatus | None = None,
    ) -> None:
        query_changed = query is not _UNSET and query != self._query
        results_changed = results is not _UNSET and results != self._results
        error_changed = error is not _UNSET and error != self._error
        status_changed = status is not None and status != self._status

        if query_changed:
            self._query = query  # type: ignore[assignment]
        if results_changed:
            self._results = results  # type: ignore[assignment]
        if error_changed:
            self._error = error  # type: ignore[assignment]
        if status_changed:
            self._status = status

        if results_changed:
            self.results_changed.emit(self._results)
        if error_changed:
            self.error_changed.emit(self._error)
        if query_changed or results_changed or error_changed or status_changed:
            self.state_changed.emit(self.snapshot())


__all__ = ["Fetcher", "SearchController"]
