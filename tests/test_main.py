"""Tests for logging configuration, console rendering and the entrypoint."""

from __future__ import annotations

import io

import pytest
import httpx
import structlog

from repo_search import main as main_module
from repo_search.config import PipelineSettings, SearchSettings
from repo_search.logging import configure_logging
from repo_search.pipeline.controller import SearchController
from repo_search.services.exceptions import ServerError


def test_configure_logging_outputs_json(capsys):
    configure_logging("debug")
    logger = structlog.get_logger()
    logger.info("unit-test", foo="bar")
    out = capsys.readouterr().out
    assert "unit-test" in out
    assert "foo" in out


@pytest.mark.asyncio
async def test_console_view_prints_results_and_dismisses_errors(fetcher, clock):
    fetcher.script("repo", "org/a", "org/b")
    fetcher.script("fail", error=ServerError(500))
    stream = io.StringIO()
    controller = SearchController(fetcher, clock=clock, debounce_seconds=0.1)
    main_module.ConsoleView(controller, stream=stream)

    controller.query = "repo"
    await clock.advance(0.2)
    controller.query = "fail"
    await clock.advance(0.2)

    lines = stream.getvalue().splitlines()
    assert lines == [
        "-- 2 repositories --",
        "org/a",
        "org/b",
        "! GitHub search failed (HTTP 500).",
    ]
    assert controller.error is None
    assert controller.results == ("org/a", "org/b")


@pytest.mark.asyncio
async def test_main_feeds_stdin_and_prints_results(monkeypatch, capsys, fixture_body):
    requested: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.params["q"])
        return httpx.Response(200, content=fixture_body.encode())

    settings = SearchSettings(pipeline=PipelineSettings(debounce_seconds=5))
    monkeypatch.setattr(main_module, "get_settings", lambda: settings)
    monkeypatch.setattr(main_module, "configure_logging", lambda level: None)
    monkeypatch.setattr(
        main_module,
        "_build_http_client",
        lambda settings: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    monkeypatch.setattr(main_module.sys, "stdin", io.StringIO("sw\nswift\n"))

    await main_module.main()

    assert requested == ["swift"]
    out = capsys.readouterr().out
    assert "org/foo" in out
    assert "org/bar" in out
