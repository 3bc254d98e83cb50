"""Query local daemon APIs over Unix domain sockets and print summaries."""

from .docker import format_containers, list_containers
from .errors import ApiError, DecodeError, DockerApiError, SockpeekError, TailscaleApiError, TransportError
from .tailscale import format_status, get_status
from .unix_http import UnixSocketClient

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "DecodeError",
    "DockerApiError",
    "SockpeekError",
    "TailscaleApiError",
    "TransportError",
    "UnixSocketClient",
    "format_containers",
    "format_status",
    "get_status",
    "list_containers",
]
