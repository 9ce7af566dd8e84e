from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from app.models import PortalSession
from app.modules.security import CredentialCipherError, SecretsVaultPort
from app.modules.security.adapters.cipher_vault import CipherSecretsVaultAdapter
from app.shared.infrastructure.settings import get_settings

logger = logging.getLogger("uvicorn.error")


class PortalSessionService:
    """Encrypted storage for the portal's browser cookies between automation runs."""

    def __init__(
        self,
        db: Session,
        vault: SecretsVaultPort | None = None,
        *,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._db = db
        self._vault = vault or CipherSecretsVaultAdapter()
        self._ttl = ttl or timedelta(hours=get_settings().portal_session_ttl_hours)
        self._clock = clock

    def _find(self, user_id: int) -> PortalSession | None:
        return self._db.query(PortalSession).filter(PortalSession.user_id == user_id).first()

    def save_session(self, user_id: int, cookies: list[dict[str, Any]]) -> PortalSession:
        payload = json.dumps({"cookies": cookies}, separators=(",", ":"), ensure_ascii=False)
        now = self._clock()

        record = self._find(user_id)
        if record is None:
            record = PortalSession(user_id=user_id, created_at=now)
            self._db.add(record)

        record.session_data = self._vault.encrypt(payload)
        record.expires_at = now + self._ttl
        record.updated_at = now

        self._db.commit()
        self._db.refresh(record)
        return record

    def load_session(self, user_id: int) -> list[dict[str, Any]] | None:
        record = self._find(user_id)
        if record is None:
            return None

        if record.expires_at < self._clock():
            self._discard(record)
            return None

        try:
            payload = json.loads(self._vault.decrypt(record.session_data))
            cookies = payload["cookies"]
        except CredentialCipherError as exc:
            logger.warning("Discarding unreadable portal session for user %s (%s)", user_id, exc.code)
            self._discard(record)
            return None
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding malformed portal session payload for user %s", user_id)
            self._discard(record)
            return None

        if not isinstance(cookies, list):
            logger.warning("Discarding malformed portal session payload for user %s", user_id)
            self._discard(record)
            return None
        return cookies

    def delete_session(self, user_id: int) -> bool:
        record = self._find(user_id)
        if record is None:
            return False
        self._discard(record)
        return True

    def cleanup_expired_sessions(self) -> int:
        removed = (
            self._db.query(PortalSession)
            .filter(PortalSession.expires_at < self._clock())
            .delete(synchronize_session=False)
        )
        self._db.commit()
        return int(removed or 0)

    def _discard(self, record: PortalSession) -> None:
        self._db.delete(record)
        self._db.commit()
