"""Readiness polling against an in-memory httpx transport."""

from dataclasses import replace
from unittest.mock import Mock

import httpx
import pytest

from df_installer.exceptions import ReadinessTimeoutError
from df_installer.readiness import probe_once, wait_for_web_app
from df_installer.retry import WEB_APP_READINESS


def _client(statuses):
    """Client whose responses follow ``statuses``; an exception entry is raised."""
    seen = []
    remaining = list(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        status = remaining.pop(0) if remaining else 500
        if isinstance(status, Exception):
            raise status
        return httpx.Response(status, headers={"Location": "/dreamfactory/dist/"} if status == 302 else {})

    return httpx.Client(transport=httpx.MockTransport(handler)), seen


def test_ready_on_first_200(ctx):
    client, seen = _client([503, 302, 200, 200])
    sleep = Mock()

    wait_for_web_app(ctx, client=client, sleep=sleep)

    assert len(seen) == 3
    assert sleep.call_count == 2
    sleep.assert_called_with(2.0)
    assert all(str(r.url) == "http://127.0.0.1/" for r in seen)


def test_transport_errors_are_retried(ctx):
    request = httpx.Request("GET", "http://127.0.0.1/")
    client, seen = _client(
        [httpx.ConnectError("refused", request=request), httpx.ReadTimeout("slow", request=request), 200]
    )

    wait_for_web_app(ctx, client=client, sleep=Mock())

    assert len(seen) == 3


def test_gives_up_after_thirty_attempts(ctx):
    client, seen = _client([500] * 40)
    sleep = Mock()

    with pytest.raises(ReadinessTimeoutError) as exc_info:
        wait_for_web_app(ctx, client=client, sleep=sleep)

    assert len(seen) == WEB_APP_READINESS.max_attempts == 30
    assert sleep.call_count == 29
    assert exc_info.value.context["attempts"] == 30


def test_redirect_is_not_ready():
    client, seen = _client([302])

    assert probe_once(client, "http://127.0.0.1/", attempt=1) is False
    assert len(seen) == 1


def test_debug_output_does_not_change_result(ctx, capsys):
    client, _ = _client([200])

    wait_for_web_app(replace(ctx, debug_http=True), client=client, sleep=Mock())

    assert "Response status: 200" in capsys.readouterr().out
