from app.modules.security.domain.errors import (
    ConfigurationError,
    CredentialCipherError,
    DecryptionIntegrityError,
    MalformedCiphertextError,
)
from app.modules.security.domain.models import CipherText, EncryptionKey
from app.modules.security.domain.ports import SecretsVaultPort

__all__ = [
    "CipherText",
    "ConfigurationError",
    "CredentialCipherError",
    "DecryptionIntegrityError",
    "EncryptionKey",
    "MalformedCiphertextError",
    "SecretsVaultPort",
]
