from __future__ import annotations


class PortalCredentialError(Exception):
    """Base class for credential store failures surfaced to the operator."""

    code = "portal_credential_error"


class InvalidCredentialsInput(PortalCredentialError, ValueError):
    code = "invalid_credentials_input"


class CredentialsNotConfigured(PortalCredentialError):
    code = "credentials_not_configured"

    def __init__(self, user_id: int) -> None:
        super().__init__(f"No portal credentials stored for user {user_id}")
        self.user_id = user_id


class CredentialsUnreadable(PortalCredentialError):
    """Stored password cannot be used; the operator has to save it again."""

    code = "credentials_unreadable"

    def __init__(self, user_id: int, reason: str) -> None:
        super().__init__(f"Stored portal credentials for user {user_id} are unreadable: {reason}")
        self.user_id = user_id
        self.reason = reason
