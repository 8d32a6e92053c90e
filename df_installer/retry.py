"""Bounded retry with a fixed delay between attempts."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    name: str
    max_attempts: int
    delay_seconds: float


DOCKER_RECHECK = RetryPolicy(name="docker-recheck", max_attempts=3, delay_seconds=3.0)
WEB_APP_READINESS = RetryPolicy(name="web-app-readiness", max_attempts=30, delay_seconds=2.0)


def poll_until(
    policy: RetryPolicy,
    probe: Callable[[int], bool],
    on_retry: Optional[Callable[[int], bool]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Call ``probe(attempt)`` until it returns True or the attempts run out.

    Attempts are numbered from 1. Between a failed attempt and the next one
    ``on_retry(attempt)`` is consulted (returning False stops polling early)
    and then the policy delay elapses. No delay follows the final attempt.

    Returns:
        True if the probe succeeded, False otherwise.
    """
    for attempt in range(1, policy.max_attempts + 1):
        if probe(attempt):
            logger.debug(event="Probe succeeded", policy=policy.name, attempt=attempt)
            return True
        if attempt == policy.max_attempts:
            break
        if on_retry is not None and not on_retry(attempt):
            logger.debug(event="Polling stopped early", policy=policy.name, attempt=attempt)
            return False
        sleep(policy.delay_seconds)
    logger.warning(
        event="Attempts exhausted", policy=policy.name, attempts=policy.max_attempts
    )
    return False
