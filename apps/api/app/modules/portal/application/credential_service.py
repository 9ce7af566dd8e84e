from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from app.models import PortalCredential, PortalSession
from app.modules.portal.domain.errors import (
    CredentialsNotConfigured,
    CredentialsUnreadable,
    InvalidCredentialsInput,
)
from app.modules.portal.domain.models import SERVICE_TYPES, PortalLoginCredentials
from app.modules.security import CredentialCipherError, SecretsVaultPort
from app.modules.security.adapters.cipher_vault import CipherSecretsVaultAdapter
from app.shared.observability.credential_audit_logging import log_credential_event


class PortalCredentialService:
    """Per-user store of salon portal logins with the password encrypted at rest."""

    def __init__(self, db: Session, vault: SecretsVaultPort | None = None) -> None:
        self._db = db
        self._vault = vault or CipherSecretsVaultAdapter()

    def _find(self, user_id: int) -> PortalCredential | None:
        return (
            self._db.query(PortalCredential)
            .filter(PortalCredential.user_id == user_id)
            .first()
        )

    def save_credentials(
        self,
        *,
        user_id: int,
        username: str,
        password: str,
        service_type: str | None = None,
    ) -> PortalCredential:
        username = (username or "").strip()
        if not username:
            raise InvalidCredentialsInput("Username is required")
        if not password:
            raise InvalidCredentialsInput("Password is required")
        if service_type is not None and service_type not in SERVICE_TYPES:
            raise InvalidCredentialsInput("service_type must be 'hair' or 'spa'")

        encrypted_password = self._vault.encrypt(password)
        now = datetime.utcnow()

        record = self._find(user_id)
        if record is None:
            record = PortalCredential(user_id=user_id, created_at=now)
            self._db.add(record)

        record.username = username
        record.encrypted_password = encrypted_password
        if service_type is not None:
            record.service_type = service_type
        record.updated_at = now

        self._db.commit()
        self._db.refresh(record)
        log_credential_event(event="saved", user_id=user_id, service_type=record.service_type)
        return record

    def get_metadata(self, user_id: int) -> PortalCredential | None:
        return self._find(user_id)

    def get_login_credentials(self, user_id: int) -> PortalLoginCredentials:
        """
        Decrypt the stored login for the portal automation.

        Raises CredentialsNotConfigured when nothing is stored and
        CredentialsUnreadable when the password cannot be recovered, so the
        login never runs with an empty or corrupted password.
        """
        record = self._find(user_id)
        if record is None:
            raise CredentialsNotConfigured(user_id)

        try:
            password = self._vault.decrypt(record.encrypted_password)
        except CredentialCipherError as exc:
            log_credential_event(event="decrypt_failed", user_id=user_id, error_code=exc.code)
            raise CredentialsUnreadable(user_id, exc.code) from exc

        if not password:
            log_credential_event(event="decrypt_failed", user_id=user_id, error_code="empty_password")
            raise CredentialsUnreadable(user_id, "empty_password")

        record.last_used_at = datetime.utcnow()
        self._db.commit()
        log_credential_event(event="read_for_login", user_id=user_id, service_type=record.service_type)

        return PortalLoginCredentials(
            username=record.username,
            password=password,
            service_type=record.service_type,
        )

    def delete_credentials(self, user_id: int) -> bool:
        record = self._find(user_id)
        if record is None:
            return False

        self._db.delete(record)
        self._db.query(PortalSession).filter(PortalSession.user_id == user_id).delete(
            synchronize_session=False
        )
        self._db.commit()
        log_credential_event(event="deleted", user_id=user_id)
        return True
