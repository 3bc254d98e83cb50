from __future__ import annotations

import httpx
import structlog

from sockpeek.config import DEFAULT_DOCKER_SOCKET
from sockpeek.errors import DockerApiError
from sockpeek.models import Container, ContainerList, decode_json
from sockpeek.unix_http import UnixSocketClient, raise_for_api_status

logger = structlog.get_logger(__name__)

CONTAINERS_PATH = "/containers/json"


def list_containers(
    *,
    all: bool = False,  # noqa: A002
    socket_path: str = DEFAULT_DOCKER_SOCKET,
    host: str = "localhost",
    transport: httpx.BaseTransport | None = None,
) -> list[Container]:
    """
    GET /containers/json from the Docker Engine API.

    `all=True` adds `?all=true` so stopped containers are listed as well.
    Non-2xx answers raise DockerApiError with the status and reason phrase only.
    """
    params = {"all": "true"} if all else None
    with UnixSocketClient(socket_path, host=host, transport=transport) as client:
        resp = client.get(CONTAINERS_PATH, params=params)
        raise_for_api_status(
            resp,
            error_cls=DockerApiError,
            message_prefix="Docker API error",
            include_body=False,
        )
        containers = decode_json(resp, ContainerList)
    logger.debug("containers_listed", count=len(containers), all=all)
    return containers


def format_containers(containers: list[Container]) -> list[str]:
    lines = [f"Found {len(containers)} containers:", ""]
    for c in containers:
        lines.append(f"  {', '.join(c.names)}")
        lines.append(f"    Image: {c.image}")
        lines.append(f"    Status: {c.status}")
        lines.append(f"    ID: {c.short_id}")
        lines.append("")
    return lines
