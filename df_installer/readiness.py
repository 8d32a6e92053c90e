"""Readiness polling for the local DreamFactory web application."""

import json
import time
from typing import Callable, Optional

import httpx
import structlog

from df_installer import console
from df_installer.config import InstallerContext
from df_installer.exceptions import ReadinessTimeoutError
from df_installer.retry import WEB_APP_READINESS, RetryPolicy, poll_until
from df_installer.timeout_config import Timeouts

logger = structlog.get_logger(__name__)

USER_AGENT = "DreamFactory-Installer/1.0"


def probe_once(client: httpx.Client, url: str, attempt: int, debug: bool = False) -> bool:
    """
    Issue one readiness GET. Only HTTP 200 counts as ready.

    Non-2xx statuses are returned, not raised; the first request to a fresh
    DreamFactory answers with a redirect, so redirects are not followed.
    """
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        console.hint(f"Attempt {attempt}: {e.__class__.__name__}: {e}")
        logger.debug(event="Readiness probe failed", url=url, attempt=attempt, error=str(e))
        return False

    if debug:
        console.hint(f"Response status: {response.status_code}")
        console.hint(f"Response headers: {json.dumps(dict(response.headers), indent=2)}")

    if response.status_code == 200:
        return True
    console.warning(f"Unexpected status code: {response.status_code}")
    logger.debug(
        event="Readiness probe not ready",
        url=url,
        attempt=attempt,
        status=response.status_code,
    )
    return False


def wait_for_web_app(
    ctx: InstallerContext,
    policy: RetryPolicy = WEB_APP_READINESS,
    client: Optional[httpx.Client] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Poll DreamFactory until it answers HTTP 200.

    Raises:
        ReadinessTimeoutError: if every attempt in the policy fails.
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(
            timeout=Timeouts.READINESS_PROBE,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=False,
        )
    url = ctx.readiness_url
    try:
        with console.spinner("Waiting for DreamFactory to start...") as status:

            def probe(attempt: int) -> bool:
                status.update(
                    f"[bold green]Waiting for DreamFactory to start... "
                    f"(attempt {attempt}/{policy.max_attempts})"
                )
                return probe_once(client, url, attempt, debug=ctx.debug_http)

            ready = poll_until(policy, probe, sleep=sleep)
    finally:
        if owns_client:
            client.close()

    if not ready:
        console.failure("DreamFactory failed to start in time")
        raise ReadinessTimeoutError(
            "DreamFactory failed to start. Please check Docker logs and container status.",
            url=url,
            attempts=policy.max_attempts,
        )
    console.success("DreamFactory is ready")
