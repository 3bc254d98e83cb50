from __future__ import annotations

import re
from datetime import datetime

import httpx
import structlog

from sockpeek.config import DEFAULT_TAILSCALE_SOCKET
from sockpeek.errors import TailscaleApiError
from sockpeek.models import StatusRecord, TailscaleStatus, decode_json
from sockpeek.unix_http import UnixSocketClient, raise_for_api_status

logger = structlog.get_logger(__name__)

STATUS_PATH = "/localapi/v0/status"
UNKNOWN_USER = "Unknown"

# Go marshals time.Time with up to nine fractional digits; datetime keeps six.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def get_status(
    *,
    socket_path: str = DEFAULT_TAILSCALE_SOCKET,
    host: str = "local-tailscaled.sock",
    transport: httpx.BaseTransport | None = None,
) -> TailscaleStatus:
    """
    GET /localapi/v0/status from tailscaled.

    Unlike the Docker listing, a non-2xx answer has its body read into the
    TailscaleApiError message, since tailscaled explains failures there.
    """
    with UnixSocketClient(socket_path, host=host, transport=transport) as client:
        resp = client.get(STATUS_PATH)
        raise_for_api_status(
            resp,
            error_cls=TailscaleApiError,
            message_prefix="Local API error",
            include_body=True,
        )
        status = decode_json(resp, StatusRecord)
    logger.debug("status_fetched", backend_state=status.backend_state, peers=len(status.peers))
    return status


def resolve_display_name(status: TailscaleStatus, user_id: int) -> str:
    profile = status.users.get(str(user_id))
    if profile is None or not profile.display_name:
        return UNKNOWN_USER
    return profile.display_name


def format_last_seen(raw: str) -> str:
    """Render an ISO 8601 timestamp in local time; unusable values come back as-is."""
    s = (raw or "").strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    s = _FRACTION_RE.sub(r"\1", s)
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        logger.debug("last_seen_unparsed", raw=raw)
        return raw
    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone()
        except (OverflowError, ValueError):
            # Go's zero time (year 1) can't shift west of UTC; render it as sent.
            logger.debug("last_seen_not_localized", raw=raw)
    return dt.strftime("%c")


def format_status(status: TailscaleStatus) -> list[str]:
    me = status.self_peer
    lines = [
        f"Tailscale v{status.version} - Backend: {status.backend_state}",
        "",
        "📱 This device:",
        f"   {me.dns_name}",
        f"   IPs: {', '.join(me.tailscale_ips)}",
        "",
    ]

    peers = list(status.peers.values())
    lines.append(f"🌐 {len(peers)} peer device(s):")
    lines.append("")

    for peer in peers:
        online = "● Online" if peer.online else "○ Offline"
        lines.append(f"   {peer.dns_name}")
        lines.append(f"   IPs: {', '.join(peer.tailscale_ips)}")
        lines.append(f"   Host: {peer.host_name} | OS: {peer.os}")
        lines.append(f"   User: {resolve_display_name(status, peer.user_id)} | {online}")
        if peer.tags:
            lines.append(f"   Tags: {', '.join(peer.tags)}")
        if peer.last_seen:
            lines.append(f"   Last seen: {format_last_seen(peer.last_seen)}")
        lines.append("")
    return lines
