"""Retrying operations that fail with transient errors, with exponential backoff."""

from __future__ import annotations

import errno
import logging
import random
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import timedelta
from typing import TypeVar

T = TypeVar("T")

_MICROSECOND = timedelta(microseconds=1)

_TRANSIENT_REASONS = frozenset(
    {"TooManyRequests", "ServerTimeout", "InternalError", "ServiceUnavailable"}
)
_PERMANENT_CODES = frozenset({401, 403, 404})


class ApiStatusError(Exception):
    """An error reported by the API server with an HTTP status code."""

    def __init__(self, code: int, reason: str = "", message: str = "") -> None:
        self.code = code
        self.reason = reason
        self.message = message
        super().__init__(message or reason or f"status {code}")


class RetryError(Exception):
    """An operation gave up: retries ran out or the wait was cancelled."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        retries: int,
        last_error: BaseException | None = None,
        cancelled: bool = False,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.retries = retries
        self.last_error = last_error
        self.cancelled = cancelled


@dataclass
class RetryConfig:
    """How often and how patiently to retry."""

    max_retries: int = 5
    initial_backoff: timedelta = timedelta(milliseconds=100)
    max_backoff: timedelta = timedelta(milliseconds=1600)
    jitter_fraction: float = 0.5
    logger: logging.Logger | None = None


def default_retry_config() -> RetryConfig:
    """Five retries, 100 ms initial backoff capped at 1600 ms, 50% jitter."""
    return RetryConfig()


def _error_chain(err: BaseException) -> Iterator[BaseException]:
    """The error followed by every error it was raised from or during."""
    seen: set[int] = set()
    pending: list[BaseException] = [err]
    while pending:
        current = pending.pop(0)
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                pending.append(linked)


def _is_connection_refused(err: BaseException) -> bool:
    if isinstance(err, ConnectionRefusedError):
        return True
    return isinstance(err, OSError) and err.errno == errno.ECONNREFUSED


def is_transient_error(err: BaseException | None) -> bool:
    """Whether err is worth retrying.

    Timeouts, refused connections, 429 and 5xx statuses are transient;
    401, 403 and 404 are permanent.
    """
    if err is None:
        return False

    chain = list(_error_chain(err))

    if any(isinstance(e, TimeoutError) for e in chain):
        return True
    if any(_is_connection_refused(e) for e in chain):
        return True

    status = next((e for e in chain if isinstance(e, ApiStatusError)), None)
    if status is None:
        return False
    code = status.code
    if code == 429 or 500 <= code < 600:
        return True
    if code in _PERMANENT_CODES:
        return False
    return status.reason in _TRANSIENT_REASONS


def calculate_backoff(config: RetryConfig, attempt: int) -> timedelta:
    """Backoff before the next attempt: initial * 2**attempt, capped, plus jitter."""
    initial_us = config.initial_backoff / _MICROSECOND
    max_us = config.max_backoff / _MICROSECOND
    try:
        base = initial_us * 2.0**attempt
    except OverflowError:
        base = max_us
    base = min(base, max_us)
    jitter = base * config.jitter_fraction * random.random()  # noqa: S311
    return timedelta(microseconds=int(base + jitter))


def with_retry(
    config: RetryConfig,
    operation: str,
    fn: Callable[[], T],
    cancel: threading.Event | None = None,
) -> T:
    """Call fn, retrying on transient errors, and return its result.

    A permanent error is raised as it is. Running out of retries or a set
    cancel event raises RetryError.
    """
    last_error: Exception | None = None

    for attempt in range(config.max_retries + 1):
        if cancel is not None and cancel.is_set():
            if last_error is not None:
                raise RetryError(
                    f"{operation}: context cancelled after {attempt} retries "
                    f"(last error: {last_error})",
                    operation=operation,
                    retries=attempt,
                    last_error=last_error,
                    cancelled=True,
                ) from last_error
            raise RetryError(
                f"{operation}: context cancelled",
                operation=operation,
                retries=0,
                cancelled=True,
            )

        try:
            return fn()
        except Exception as exc:  # noqa: BLE001 - classified below
            last_error = exc

        if not is_transient_error(last_error):
            raise last_error

        if attempt == config.max_retries:
            break

        backoff = calculate_backoff(config, attempt)
        logger = config.logger
        if logger is not None and logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "retrying %s: attempt %d/%d after %.3fs: %s",
                operation,
                attempt + 1,
                config.max_retries,
                backoff.total_seconds(),
                last_error,
            )

        seconds = backoff.total_seconds()
        if cancel is not None:
            if cancel.wait(seconds):
                raise RetryError(
                    f"{operation}: context cancelled during backoff after "
                    f"{attempt + 1} retries (last error: {last_error})",
                    operation=operation,
                    retries=attempt + 1,
                    last_error=last_error,
                    cancelled=True,
                ) from last_error
        else:
            time.sleep(seconds)

    raise RetryError(
        f"{operation}: failed after {config.max_retries} retries: {last_error}",
        operation=operation,
        retries=config.max_retries,
        last_error=last_error,
    ) from last_error