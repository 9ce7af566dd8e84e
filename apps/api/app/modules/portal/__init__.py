from app.modules.portal.application.credential_service import PortalCredentialService
from app.modules.portal.application.session_service import PortalSessionService
from app.modules.portal.application.sync_status import SyncStatusRegistry, sync_status_registry
from app.modules.portal.domain.errors import (
    CredentialsNotConfigured,
    CredentialsUnreadable,
    InvalidCredentialsInput,
    PortalCredentialError,
)
from app.modules.portal.domain.models import PortalLoginCredentials, SyncStatus

__all__ = [
    "CredentialsNotConfigured",
    "CredentialsUnreadable",
    "InvalidCredentialsInput",
    "PortalCredentialError",
    "PortalCredentialService",
    "PortalLoginCredentials",
    "PortalSessionService",
    "SyncStatus",
    "SyncStatusRegistry",
    "sync_status_registry",
]
