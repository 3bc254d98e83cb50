from __future__ import annotations

from typing import Any

import httpx
import structlog

from sockpeek.errors import ApiError, TransportError

logger = structlog.get_logger(__name__)


class UnixSocketClient:
    """
    Single-shot HTTP client for daemon APIs served on a Unix domain socket.

    The host only shows up in the URL and Host header; every connection goes
    through `socket_path`. The path is not checked up front, a missing or
    unreadable socket surfaces as TransportError on the first request.
    """

    def __init__(
        self,
        socket_path: str,
        *,
        host: str = "localhost",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.socket_path = str(socket_path)
        self.host = host
        self._client = httpx.Client(
            transport=transport if transport is not None else httpx.HTTPTransport(uds=self.socket_path),
            base_url=f"http://{host}",
            timeout=None,
        )

    def __enter__(self) -> UnixSocketClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        p = str(path or "").strip()
        if not p.startswith("/"):
            p = "/" + p
        log = logger.bind(socket=self.socket_path, path=p)
        log.debug("request", params=params)
        try:
            resp = self._client.get(p, params=params)
        except httpx.TransportError as exc:
            log.debug("transport_failed", error=f"{type(exc).__name__}: {exc}")
            raise TransportError(_describe_transport_error(exc, self.socket_path), socket_path=self.socket_path) from exc
        except OSError as exc:
            log.debug("transport_failed", error=f"{type(exc).__name__}: {exc}")
            raise TransportError(str(exc) or type(exc).__name__, socket_path=self.socket_path) from exc
        log.debug("response", status=resp.status_code)
        return resp


def _describe_transport_error(exc: httpx.TransportError, socket_path: str) -> str:
    msg = str(exc).strip() or type(exc).__name__
    if isinstance(exc, httpx.ConnectError):
        return f"cannot connect to {socket_path}: {msg}"
    return msg


def raise_for_api_status(
    response: httpx.Response,
    *,
    error_cls: type[ApiError],
    message_prefix: str,
    include_body: bool,
) -> httpx.Response:
    """
    Pass 2xx responses through, turn anything else into `error_cls`.

    With include_body the message is "<prefix> <status>: <body>", otherwise
    "<prefix>: <status> <reason>".
    """
    status = int(response.status_code)
    if 200 <= status < 300:
        return response
    if include_body:
        body = response.read().decode(response.encoding or "utf-8", errors="replace")
        message = f"{message_prefix} {status}: {body}"
    else:
        message = f"{message_prefix}: {status} {response.reason_phrase}"
    logger.debug("api_error", status=status, error_cls=error_cls.__name__)
    raise error_cls(message, status=status)
