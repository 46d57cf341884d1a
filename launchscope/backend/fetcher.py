"""Retrying HTTP fetch primitive shared by the SpaceX and NASA clients.

A single :class:`RetryingFetcher` issues one logical request, classifies the
response and absorbs transient failures (transport errors, 429/5xx, broken or
malformed bodies) by sleeping and trying again. Only a final, categorised
:class:`FetchError` ever leaves :meth:`RetryingFetcher.fetch`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

import logging
import math
import random
import threading
import time

import requests

from .backoff import backoff_delay


logger = logging.getLogger(__name__)

T = TypeVar("T")

BODY_PREFIX_BYTES = 200

# Malformed requests fail the same way on every attempt.
NON_RETRYABLE_REQUEST_ERRORS = (
    requests.exceptions.URLRequired,
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
    requests.exceptions.InvalidJSONError,
)


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------
class FetchError(RuntimeError):
    """Base class for every terminal outcome of a failed fetch."""


class TransportError(FetchError):
    """No response was obtained (DNS, refused connection, timeout, broken read)."""


class UpstreamError(FetchError):
    """The upstream answered with a non-2xx status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"upstream returned status {status}: {body}")
        self.status = status
        self.body = body

    @property
    def retryable(self) -> bool:
        return is_retryable_status(self.status)


class DecodeError(FetchError):
    """The body was not valid JSON or did not match the expected shape."""

    def __init__(self, message: str, body_prefix: str = "") -> None:
        super().__init__(f"{message}. Response: {body_prefix}")
        self.body_prefix = body_prefix


class Cancelled(FetchError):
    """The caller's cancellation token fired."""


class RetriesExhausted(FetchError):
    """The attempt budget ran out without a categorised outcome."""


class ResourceError(RuntimeError):
    """A fetch for a named upstream resource failed; ``cause`` is the final FetchError."""

    def __init__(self, resource: str, cause: FetchError) -> None:
        super().__init__(f"failed to fetch {resource}: {cause}")
        self.resource = resource
        self.cause = cause


def is_retryable_status(status: int) -> bool:
    return status == 429 or 500 <= status < 600


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------
class CancellationToken:
    """Cooperative cancellation flag with an optional monotonic deadline.

    One token is attached to a whole command and handed to every fetch.
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancellationToken":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True as soon as the token is cancelled."""

        if self._deadline is not None:
            remaining = self._deadline - time.monotonic()
            if remaining <= seconds:
                self._event.wait(max(remaining, 0.0))
                return True
        return self._event.wait(seconds)


# ---------------------------------------------------------------------------
# Request descriptor
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FetchRequest(Generic[T]):
    """What to send and how to turn the decoded JSON into the expected shape.

    ``decode`` must raise ``ValueError``, ``KeyError`` or ``TypeError`` when the
    payload does not conform.
    """

    url: str
    decode: Callable[[Any], T]
    method: str = "GET"
    params: Optional[Dict[str, object]] = None
    json_body: Optional[Any] = None

    def describe(self) -> str:
        return f"{self.method} {self.url}"


class _RetryableFailure(Exception):
    """Internal signal: this attempt failed transiently."""

    def __init__(self, final: FetchError, reason: str, delay: Optional[float] = None) -> None:
        super().__init__(reason)
        self.final = final
        self.reason = reason
        self.delay = delay


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------
class RetryingFetcher:
    """Issue JSON requests with retry, backoff and cancellation."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout: float = 30.0,
        max_retries: int = 5,
        base_delay: float = 0.2,
        max_delay: float = 5.0,
        rng: Optional[random.Random] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.rng = rng
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Any, session: Optional[requests.Session] = None) -> "RetryingFetcher":
        return cls(
            session,
            timeout=settings.timeout_s,
            max_retries=settings.max_retries,
            base_delay=settings.base_delay_s,
            max_delay=settings.max_delay_s,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def fetch(self, request: FetchRequest[T], cancel: Optional[CancellationToken] = None) -> T:
        """Return the decoded value or raise the final categorised :class:`FetchError`."""

        total = self.max_retries + 1
        for attempt in range(total):
            if cancel is not None and cancel.cancelled:
                raise Cancelled(f"{request.describe()} cancelled before attempt {attempt + 1}")
            try:
                return self._attempt(request)
            except _RetryableFailure as failure:
                if attempt == self.max_retries:
                    raise failure.final from failure.__cause__
                delay = failure.delay
                if delay is None:
                    delay = backoff_delay(attempt, self.base_delay, self.max_delay, self.rng)
                logger.warning(
                    "%s failed (%s), retrying in %.2fs (attempt %d/%d)",
                    request.describe(),
                    failure.reason,
                    delay,
                    attempt + 1,
                    total,
                )
                self._pause(delay, cancel)

        raise RetriesExhausted(f"{request.describe()}: max retries exceeded")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _attempt(self, request: FetchRequest[T]) -> T:
        total = self.max_retries + 1
        try:
            response = self.session.request(
                request.method,
                request.url,
                params=request.params,
                json=request.json_body,
                timeout=self.timeout,
                stream=True,
            )
        except NON_RETRYABLE_REQUEST_ERRORS as exc:
            raise TransportError(f"{request.describe()} cannot be sent: {exc}") from exc
        except requests.RequestException as exc:
            raise _RetryableFailure(
                TransportError(f"{request.describe()} failed after {total} attempts: {exc}"),
                reason=str(exc),
            ) from exc

        try:
            status = response.status_code
            if is_retryable_status(status):
                raise _RetryableFailure(
                    UpstreamError(status, self._safe_text(response)),
                    reason=f"status {status}",
                    delay=parse_retry_after(response.headers.get("Retry-After")),
                )
            if not 200 <= status < 300:
                raise UpstreamError(status, self._safe_text(response))

            try:
                body = response.content
            except requests.RequestException as exc:
                raise _RetryableFailure(
                    TransportError(f"failed to read response body after {total} attempts: {exc}"),
                    reason=f"body read failed: {exc}",
                ) from exc

            try:
                return request.decode(response.json())
            except (ValueError, KeyError, TypeError, AttributeError) as exc:
                prefix = body[:BODY_PREFIX_BYTES].decode("utf-8", errors="replace")
                raise _RetryableFailure(
                    DecodeError(f"failed to decode JSON after {total} attempts: {exc}", prefix),
                    reason=f"decode failed: {exc}",
                ) from exc
        finally:
            response.close()

    def _pause(self, delay: float, cancel: Optional[CancellationToken]) -> None:
        if self._sleep is not None:
            self._sleep(delay)
        elif cancel is not None:
            cancel.wait(delay)
        else:
            time.sleep(delay)

    @staticmethod
    def _safe_text(response: requests.Response) -> str:
        try:
            return response.text
        except requests.RequestException:
            return ""


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Interpret a ``Retry-After`` header given in seconds; ``None`` when unusable."""

    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds
