"""Helper utilities (ids, timestamps, request helpers)."""
import uuid
from datetime import datetime, timezone
from fastapi import Request

from vetconnect.core.constants import CLINIC_ID_PREFIX


def generate_clinic_id() -> str:
    return f"{CLINIC_ID_PREFIX}{uuid.uuid4().hex}"


def generate_short_id() -> str:
    return uuid.uuid4().hex[:12]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_client_ip(request: Request) -> str:
    """Return client's IP address from request headers or connection info.

    Checks `X-Forwarded-For` first (comma-separated), then falls back to
    `request.client.host`. Returns 'unknown' if not found.
    """
    x_forwarded_for = request.headers.get("x-forwarded-for")
    if x_forwarded_for:
        # X-Forwarded-For can contain a list of IPs
        return x_forwarded_for.split(",")[0].strip()

    client = getattr(request, "client", None)
    if client and getattr(client, "host", None):
        return client.host

    return "unknown"
