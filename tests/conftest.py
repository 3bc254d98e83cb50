from __future__ import annotations

import json
import shutil
import socketserver
import tempfile
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler
from pathlib import Path
from typing import Any, Callable, Iterator

import pytest
import structlog

from sockpeek.log import configure_logging


@dataclass
class FakeRoute:
    status: int = 200
    body: bytes = b""
    content_type: str = "application/json"


@dataclass
class FakeDaemon:
    socket_path: str
    routes: dict[str, FakeRoute] = field(default_factory=dict)
    requests: list[str] = field(default_factory=list)
    host_headers: list[str] = field(default_factory=list)

    def route(self, path: str, *, status: int = 200, json_body: Any = None, text: str | None = None) -> None:
        if text is not None:
            self.routes[path] = FakeRoute(status=status, body=text.encode("utf-8"), content_type="text/plain; charset=utf-8")
        else:
            self.routes[path] = FakeRoute(status=status, body=json.dumps(json_body).encode("utf-8"))


class _UnixHTTPServer(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    daemon_threads = True

    def __init__(self, socket_path: str, daemon: FakeDaemon) -> None:
        self.fake = daemon
        super().__init__(socket_path, _FakeDaemonHandler)


class _FakeDaemonHandler(BaseHTTPRequestHandler):
    server: _UnixHTTPServer

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        return

    def do_GET(self) -> None:  # noqa: N802
        fake = self.server.fake
        fake.requests.append(self.path)
        fake.host_headers.append(self.headers.get("Host") or "")
        route = fake.routes.get(self.path)
        if route is None:
            route = FakeRoute(status=404, body=b'{"message":"page not found"}')
        self.send_response(route.status)
        self.send_header("Content-Type", route.content_type)
        self.send_header("Content-Length", str(len(route.body)))
        self.end_headers()
        self.wfile.write(route.body)


@pytest.fixture(autouse=True)
def _quiet_logging() -> Iterator[None]:
    configure_logging("WARNING")
    yield
    structlog.reset_defaults()


@pytest.fixture()
def short_tmp_dir() -> Iterator[Path]:
    # AF_UNIX paths are capped near 108 bytes; pytest's tmp_path can run longer.
    d = tempfile.mkdtemp(prefix="sockpeek-")
    try:
        yield Path(d)
    finally:
        shutil.rmtree(d, ignore_errors=True)


@pytest.fixture()
def fake_daemon(short_tmp_dir: Path) -> Iterator[FakeDaemon]:
    daemon = FakeDaemon(socket_path=str(short_tmp_dir / "daemon.sock"))
    httpd = _UnixHTTPServer(daemon.socket_path, daemon)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield daemon
    finally:
        httpd.shutdown()
        thread.join(timeout=5)
        httpd.server_close()


def container_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "Id": "abcdef0123456789full",
        "Names": ["/web"],
        "Image": "nginx:1.27",
        "ImageID": "sha256:0a1b2c",
        "Command": "nginx -g 'daemon off;'",
        "Created": 1718000000,
        "State": "running",
        "Status": "Up 3 hours",
        "Ports": [{"IP": "0.0.0.0", "PrivatePort": 80, "PublicPort": 8080, "Type": "tcp"}],
        "Labels": {"com.docker.compose.project": "site"},
        "Mounts": [
            {
                "Type": "bind",
                "Source": "/srv/site",
                "Destination": "/usr/share/nginx/html",
                "Mode": "ro",
                "RW": False,
            }
        ],
        "NetworkSettings": {
            "Networks": {
                "bridge": {
                    "NetworkID": "f00d",
                    "Gateway": "172.17.0.1",
                    "IPAddress": "172.17.0.2",
                    "MacAddress": "02:42:ac:11:00:02",
                }
            }
        },
    }
    data.update(overrides)
    return data


def peer_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "ID": "n1",
        "Name": "laptop",
        "TailscaleIPs": ["100.64.0.2", "fd7a:115c:a1e0::2"],
        "HostName": "laptop",
        "DNSName": "laptop.tail1234.ts.net.",
        "UserID": 101,
        "Online": True,
        "OS": "linux",
        "LastSeen": "",
    }
    data.update(overrides)
    return data


def status_payload(peers: dict[str, Any] | None = None, users: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "Version": "1.76.1-t1234",
        "BackendState": "Running",
        "Self": peer_payload(ID="self", Name="desk", HostName="desk", DNSName="desk.tail1234.ts.net.", TailscaleIPs=["100.64.0.1"]),
        "Peer": peers if peers is not None else {"nodekey:aa": peer_payload()},
        "User": users if users is not None else {"101": {"ID": 101, "DisplayName": "Ada", "ProfilePicURL": "", "Roles": []}},
    }


@pytest.fixture()
def make_status() -> Callable[..., dict[str, Any]]:
    return status_payload


@pytest.fixture()
def make_container() -> Callable[..., dict[str, Any]]:
    return container_payload


@pytest.fixture()
def make_peer() -> Callable[..., dict[str, Any]]:
    return peer_payload
