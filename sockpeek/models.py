"""Response schemas for the Docker Engine and Tailscale local APIs."""

from __future__ import annotations

import json
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from sockpeek.errors import DecodeError

T = TypeVar("T")


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


def _empty_if_none(v: Any, factory: Any) -> Any:
    return factory() if v is None else v


# Docker /containers/json


class PortMapping(_ApiModel):
    type: str = Field(alias="Type")
    private_port: int = Field(alias="PrivatePort")
    public_port: int | None = Field(default=None, alias="PublicPort")
    ip: str | None = Field(default=None, alias="IP")


class Mount(_ApiModel):
    type: str = Field(alias="Type")
    name: str | None = Field(default=None, alias="Name")
    source: str = Field(default="", alias="Source")
    destination: str = Field(alias="Destination")
    mode: str = Field(default="", alias="Mode")
    rw: bool = Field(default=False, alias="RW")


class NetworkEndpoint(_ApiModel):
    network_id: str = Field(default="", alias="NetworkID")
    gateway: str = Field(default="", alias="Gateway")
    ip_address: str = Field(default="", alias="IPAddress")
    mac_address: str = Field(default="", alias="MacAddress")


class NetworkSettings(_ApiModel):
    networks: dict[str, NetworkEndpoint] = Field(default_factory=dict, alias="Networks")

    @field_validator("networks", mode="before")
    @classmethod
    def networks_null_as_empty(cls, v: Any) -> Any:
        return _empty_if_none(v, dict)


class Container(_ApiModel):
    id: str = Field(alias="Id")
    names: list[str] = Field(alias="Names", min_length=1)
    image: str = Field(alias="Image")
    image_id: str = Field(default="", alias="ImageID")
    command: str = Field(default="", alias="Command")
    created: int = Field(default=0, alias="Created")
    state: str = Field(alias="State")
    status: str = Field(alias="Status")
    ports: list[PortMapping] = Field(default_factory=list, alias="Ports")
    labels: dict[str, str] = Field(default_factory=dict, alias="Labels")
    mounts: list[Mount] = Field(default_factory=list, alias="Mounts")
    network_settings: NetworkSettings = Field(default_factory=NetworkSettings, alias="NetworkSettings")

    @field_validator("ports", "mounts", mode="before")
    @classmethod
    def lists_null_as_empty(cls, v: Any) -> Any:
        return _empty_if_none(v, list)

    @field_validator("labels", "network_settings", mode="before")
    @classmethod
    def maps_null_as_empty(cls, v: Any) -> Any:
        return _empty_if_none(v, dict)

    @property
    def short_id(self) -> str:
        return self.id[:12]


# Tailscale /localapi/v0/status


class PeerStatus(_ApiModel):
    id: str = Field(default="", alias="ID")
    name: str = Field(default="", alias="Name")
    tailscale_ips: list[str] = Field(default_factory=list, alias="TailscaleIPs")
    host_name: str = Field(default="", alias="HostName")
    dns_name: str = Field(default="", alias="DNSName")
    user_id: int = Field(default=0, alias="UserID")
    online: bool = Field(default=False, alias="Online")
    os: str = Field(default="", alias="OS")
    last_seen: str = Field(default="", alias="LastSeen")
    tags: list[str] | None = Field(default=None, alias="Tags")

    @field_validator("tailscale_ips", mode="before")
    @classmethod
    def ips_null_as_empty(cls, v: Any) -> Any:
        return _empty_if_none(v, list)

    @field_validator("last_seen", mode="before")
    @classmethod
    def last_seen_null_as_empty(cls, v: Any) -> Any:
        return _empty_if_none(v, str)


class UserProfile(_ApiModel):
    id: int = Field(alias="ID")
    display_name: str = Field(default="", alias="DisplayName")
    profile_pic_url: str = Field(default="", alias="ProfilePicURL")
    roles: list[str] = Field(default_factory=list, alias="Roles")

    @field_validator("roles", mode="before")
    @classmethod
    def roles_null_as_empty(cls, v: Any) -> Any:
        return _empty_if_none(v, list)


class TailscaleStatus(_ApiModel):
    version: str = Field(alias="Version")
    backend_state: str = Field(alias="BackendState")
    self_peer: PeerStatus = Field(alias="Self")
    peers: dict[str, PeerStatus] = Field(default_factory=dict, alias="Peer")
    users: dict[str, UserProfile] = Field(default_factory=dict, alias="User")

    @field_validator("peers", "users", mode="before")
    @classmethod
    def maps_null_as_empty(cls, v: Any) -> Any:
        return _empty_if_none(v, dict)


ContainerList = TypeAdapter(list[Container])
StatusRecord = TypeAdapter(TailscaleStatus)


def decode_json(response: httpx.Response, adapter: TypeAdapter[T]) -> T:
    """Read the whole body and validate it; nothing is returned on failure."""
    try:
        payload = json.loads(response.read())
    except ValueError as exc:
        raise DecodeError(f"invalid JSON in response body: {exc}") from exc
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(f"unexpected response schema: {exc.error_count()} error(s)\n{exc}") from exc
