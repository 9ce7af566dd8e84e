"""AES-256-CBC encryption for credentials stored at rest."""
from __future__ import annotations

import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from app.modules.security.domain.errors import DecryptionIntegrityError
from app.modules.security.domain.models import (
    BLOCK_SIZE_BYTES,
    IV_SIZE_BYTES,
    CipherText,
    EncryptionKey,
)
from app.shared.infrastructure.settings import Settings, get_settings

_BLOCK_SIZE_BITS = BLOCK_SIZE_BYTES * 8


class AesCbcCredentialCipher:
    """
    Encrypt/decrypt portal credentials.

    Output is ``hex(iv):hex(ciphertext)`` with a fresh random IV per call.
    CBC carries no MAC, so tampering is only caught when it breaks padding
    or UTF-8 decoding.
    """

    def __init__(self, key: EncryptionKey) -> None:
        self._key = key

    def encrypt(self, plaintext: str) -> str:
        if not isinstance(plaintext, str):
            raise TypeError("plaintext must be a string")

        iv = os.urandom(IV_SIZE_BYTES)
        padder = padding.PKCS7(_BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(self._key.material), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return CipherText(iv=iv, ciphertext=ciphertext).encode()

    def decrypt(self, ciphertext: str) -> str:
        token = CipherText.decode(ciphertext)

        decryptor = Cipher(algorithms.AES(self._key.material), modes.CBC(token.iv)).decryptor()
        padded = decryptor.update(token.ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(_BLOCK_SIZE_BITS).unpadder()
        try:
            raw = unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise DecryptionIntegrityError(
                "Decryption failed. Invalid key or corrupted data."
            ) from exc

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionIntegrityError(
                "Decrypted value is not valid UTF-8. Invalid key or corrupted data."
            ) from exc


def build_credential_cipher(settings: Settings | None = None) -> AesCbcCredentialCipher:
    settings = settings or get_settings()
    return AesCbcCredentialCipher(EncryptionKey.from_hex(settings.encryption_key))


# Global instance, built at import so a bad ENCRYPTION_KEY stops startup.
credential_cipher = build_credential_cipher()
