"""Configuration for the socket query tools."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

DEFAULT_DOCKER_SOCKET = "/var/run/docker.sock"
DEFAULT_TAILSCALE_SOCKET = "/var/run/tailscale/tailscaled.sock"
DEFAULT_CONFIG_PATH = "~/.config/sockpeek.yaml"


class SockpeekConfig(BaseModel):
    """Socket locations and logging settings shared by both tools."""

    # Docker Engine API
    docker_socket: str = Field(default=DEFAULT_DOCKER_SOCKET, description="Docker Engine API socket")
    docker_host: str = Field(default="localhost", description="Virtual host name sent to the Docker daemon")

    # Tailscale local API
    tailscale_socket: str = Field(default=DEFAULT_TAILSCALE_SOCKET, description="tailscaled local API socket")
    tailscale_host: str = Field(default="local-tailscaled.sock", description="Virtual host name sent to tailscaled")

    # Logging goes to stderr; stdout carries the report
    log_level: str = Field(default="WARNING", description="Logging level")


def load_config(config_path: Optional[str] = None) -> SockpeekConfig:
    """Load configuration from file, then apply environment overrides."""
    if config_path is None:
        config_path = os.getenv("SOCKPEEK_CONFIG", DEFAULT_CONFIG_PATH)
    path = Path(config_path).expanduser()

    config_data = {}

    if path.is_file():
        with open(path, "r") as f:
            config_data = yaml.safe_load(f) or {}
        if not isinstance(config_data, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")

    env_overrides = {
        "docker_socket": os.getenv("SOCKPEEK_DOCKER_SOCKET"),
        "tailscale_socket": os.getenv("SOCKPEEK_TAILSCALE_SOCKET"),
        "log_level": os.getenv("SOCKPEEK_LOG_LEVEL"),
    }
    for key, value in env_overrides.items():
        if value:
            config_data[key] = value

    return SockpeekConfig(**config_data)
