from __future__ import annotations

import logging
import socket
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .config_types import ClientConfig
from .errors import ApiError, NetworkError, RequestTimeout
from .errors_utils import normalize_error
from .result import Err, Ok, Result

API_KEY_HEADER = "X-Api-Key"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestDescriptor:
    path: str
    method: str = "GET"
    body: bytes | None = None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ResponseEnvelope:
    status_code: int
    content: bytes
    headers: Mapping[str, str] = field(default_factory=dict)


class _Deadline:
    """One wall-clock budget over a whole exchange.

    httpx timeouts bound each connect, write and read on its own, so a peer
    that trickles bytes never trips them. The timer shuts down the sockets
    opened for the call once the budget is spent; the blocked read then fails
    and the caller sees ``expired``.
    """

    def __init__(self, seconds: float):
        self.seconds = seconds
        self.started = time.monotonic()
        self.expired = False
        self._lock = threading.Lock()
        self._streams: list[Any] = []
        self._timer = threading.Timer(seconds, self._expire)
        self._timer.daemon = True

    def __enter__(self) -> _Deadline:
        self._timer.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self._timer.cancel()

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)

    def trace(self, event: str, info: dict[str, Any]) -> None:
        if event not in _STREAM_EVENTS:
            return
        stream = info.get("return_value")
        if stream is None:
            return
        with self._lock:
            self._streams.append(stream)
            expired = self.expired
        if expired:
            _shutdown(stream)

    def _expire(self) -> None:
        with self._lock:
            self.expired = True
            streams = list(self._streams)
        for stream in streams:
            _shutdown(stream)


_STREAM_EVENTS = ("connection.connect_tcp.complete", "connection.start_tls.complete")


def _shutdown(stream: Any) -> None:
    sock = stream.get_extra_info("socket")
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # already closed by httpcore
        return


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        headers = {
            API_KEY_HEADER: cfg.api_key,
            "Content-Type": "application/json",
            "User-Agent": cfg.client_id,
        }

        # no idle keep-alive: every call opens the socket its deadline can reach
        self._client = httpx.Client(
            base_url=cfg.base_url.rstrip("/"),
            timeout=httpx.Timeout(cfg.timeout_s),
            limits=httpx.Limits(max_keepalive_connections=0),
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _timed_out(self, descriptor: RequestDescriptor, deadline: _Deadline, reason: str) -> RequestTimeout:
        return RequestTimeout(
            f"Request timed out after {self._cfg.timeout_ms}ms",
            details={
                "path": descriptor.path,
                "timeout_ms": self._cfg.timeout_ms,
                "elapsed_ms": deadline.elapsed_ms,
                "reason": reason,
            },
        )

    def dispatch(self, descriptor: RequestDescriptor) -> Result[ResponseEnvelope, ApiError]:
        """Send one request and return the raw response or a normalized error.

        Caller-supplied headers are layered over the defaults, so an override
        of e.g. ``Content-Type`` wins. ``timeout_ms`` bounds the whole call,
        from the first connect to the last body byte. Nothing is retried.
        """
        method = descriptor.method.upper()
        log.debug("%s %s", method, descriptor.path)
        with _Deadline(self._cfg.timeout_s) as deadline:
            try:
                with self._client.stream(
                    method,
                    descriptor.path,
                    content=descriptor.body,
                    headers=dict(descriptor.headers) or None,
                    extensions={"trace": deadline.trace},
                ) as r:
                    content = r.read()
            except httpx.TimeoutException as e:
                log.debug("%s %s timed out after %sms", method, descriptor.path, deadline.elapsed_ms)
                return Err(self._timed_out(descriptor, deadline, str(e) or type(e).__name__))
            except httpx.RequestError as e:
                if deadline.expired:
                    log.debug("%s %s cut off after %sms", method, descriptor.path, deadline.elapsed_ms)
                    return Err(self._timed_out(descriptor, deadline, "deadline exceeded"))
                log.debug("%s %s failed: %s", method, descriptor.path, e)
                return Err(NetworkError(str(e) or type(e).__name__, details={"path": descriptor.path}))

        if deadline.expired:
            return Err(self._timed_out(descriptor, deadline, "deadline exceeded"))

        if r.is_success:
            return Ok(ResponseEnvelope(status_code=r.status_code, content=content, headers=dict(r.headers)))

        error = normalize_error(r.status_code, content)
        log.debug("%s %s failed with %s (%s)", method, descriptor.path, r.status_code, error.code)
        return Err(error)
