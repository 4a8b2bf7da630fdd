"""
Event logger utility for authentication and purchase events.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "payment",
}


def client_ip(request: Request) -> Optional[str]:
    ip_address = None
    if request.client:
        ip_address = request.client.host

    # X-Forwarded-For can contain multiple IPs, take the first one
    if not ip_address and request.headers.get("x-forwarded-for"):
        ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()
    return ip_address


def log_auth_event(
    event_type: str,
    request: Request,
    user_id: Optional[int] = None,
    email: Optional[str] = None,
    **details
) -> None:
    """
    Write one ``AUTH`` log line for an account or purchase event.

    Args:
        event_type: One of: register, login_success, login_failure, payment
        request: FastAPI Request object
        user_id: Id of the user involved, if known
        email: Email of the user involved, if known
        **details: Extra key=value context (never passwords or tokens)

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    extra = "".join(f" {key}={value}" for key, value in sorted(details.items()))
    logger.info(
        "AUTH %s user_id=%s email=%s ip=%s user_agent=%s timestamp=%s%s",
        event_type, user_id, email, client_ip(request),
        request.headers.get("user-agent"),
        datetime.now(timezone.utc).isoformat(),
        extra
    )
