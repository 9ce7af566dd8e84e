from __future__ import annotations

from app.modules.security.adapters.aes_cbc_cipher import AesCbcCredentialCipher, credential_cipher
from app.modules.security.domain.ports import SecretsVaultPort


class CipherSecretsVaultAdapter(SecretsVaultPort):
    """Vault adapter backed by the AES-256-CBC cipher keyed from ENCRYPTION_KEY."""

    def __init__(self, cipher: AesCbcCredentialCipher | None = None) -> None:
        self._cipher = cipher or credential_cipher

    def encrypt(self, plaintext: str) -> str:
        return self._cipher.encrypt(plaintext)

    def decrypt(self, ciphertext: str) -> str:
        return self._cipher.decrypt(ciphertext)
