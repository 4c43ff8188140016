"""
Request Headers
===============
Builds the signed header set for outbound Fintecture API calls.
"""

import json
import time
import uuid
from email.utils import formatdate
from typing import Any, Dict, Optional

import structlog

from .config import FintectureConfig
from .signing.canonical import REQUEST_TARGET
from .signing.crypto import digest_header_value
from .signing.signer import build_signature_header

logger = structlog.get_logger(__name__)


def generate_uuid() -> str:
    """UUID4 as 32 hex characters."""
    return uuid.uuid4().hex


def generate_uuid_v4() -> str:
    """UUID4 in its dashed form."""
    return str(uuid.uuid4())


def http_date(timestamp: Optional[float] = None) -> str:
    """RFC 7231 date, e.g. ``Mon, 01 Jan 2024 00:00:00 GMT``."""
    return formatdate(timestamp if timestamp is not None else time.time(), usegmt=True)


def serialize_payload(payload: Any) -> str:
    """Compact JSON body as sent on the wire; strings pass through."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def get_headers(
    method: str,
    url: str,
    config: FintectureConfig,
    access_token: Optional[str] = None,
    payload: Any = None,
    now: Optional[float] = None,
) -> Dict[str, str]:
    """
    Build headers for an API request.

    When the configuration carries a private key, the request is signed:
    Date, X-Request-ID and (for POST) Digest are added and covered by the
    Signature header together with the request target.

    Args:
        method: HTTP method
        url: Request path (and query) as sent
        config: Application configuration
        access_token: OAuth access token (optional)
        payload: Request body for POST requests
        now: Unix timestamp for the Date header (defaults to current time)

    Returns:
        Dictionary of headers to include in the request
    """
    headers: Dict[str, str] = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "app_id": config.app_id,
    }
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"

    if not config.private_key:
        return headers

    method = method.lower()
    headers["Date"] = http_date(now)
    headers["X-Request-ID"] = generate_uuid_v4()
    headers[REQUEST_TARGET] = f"{method} {url}"
    if method == "post":
        headers["Digest"] = digest_header_value(serialize_payload(payload))

    headers["Signature"] = build_signature_header(headers, config)
    del headers[REQUEST_TARGET]

    logger.debug(
        "request_headers_signed",
        method=method,
        url=url,
        request_id=headers["X-Request-ID"],
    )
    return headers
