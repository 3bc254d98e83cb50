from __future__ import annotations


class SockpeekError(RuntimeError):
    """Base class for every failure a query can end in."""


class TransportError(SockpeekError):
    """The socket could not be reached or the exchange broke off."""

    def __init__(self, message: str, *, socket_path: str) -> None:
        self.socket_path = socket_path
        super().__init__(message)


class ApiError(SockpeekError):
    """The daemon answered with a non-2xx status."""

    def __init__(self, message: str, *, status: int) -> None:
        self.status = status
        super().__init__(message)


class DockerApiError(ApiError):
    pass


class TailscaleApiError(ApiError):
    pass


class DecodeError(SockpeekError):
    """The response body was not the JSON document we expected."""
