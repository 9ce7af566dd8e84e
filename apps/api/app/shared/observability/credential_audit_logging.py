import logging
from typing import Any

from app.shared.infrastructure.settings import get_settings

settings = get_settings()
logger = logging.getLogger("uvicorn.error")


def log_credential_event(
    *,
    event: str,
    user_id: int,
    service_type: str | None = None,
    error_code: str | None = None,
) -> None:
    """
    Emits audit logs for portal credential store activity.
    Controlled via LOG_CREDENTIAL_EVENTS. Never receives secrets.
    """
    if not settings.log_credential_events:
        return

    payload: dict[str, Any] = {
        "event": event,
        "user_id": user_id,
    }
    if service_type is not None:
        payload["service_type"] = service_type
    if error_code is not None:
        payload["error_code"] = error_code
        logger.warning("portal_credential | %s", payload)
        return

    logger.info("portal_credential | %s", payload)
