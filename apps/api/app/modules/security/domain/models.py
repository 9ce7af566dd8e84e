from __future__ import annotations

import re
from dataclasses import dataclass, field

from app.modules.security.domain.errors import ConfigurationError, MalformedCiphertextError

KEY_SIZE_BYTES = 32
KEY_HEX_LENGTH = KEY_SIZE_BYTES * 2
IV_SIZE_BYTES = 16
BLOCK_SIZE_BYTES = 16
DELIMITER = ":"

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True, slots=True)
class EncryptionKey:
    """32 raw bytes of AES-256 key material."""

    material: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.material, bytes) or len(self.material) != KEY_SIZE_BYTES:
            size = len(self.material) if isinstance(self.material, bytes) else "non-bytes"
            raise ConfigurationError(
                f"Encryption key must be exactly {KEY_SIZE_BYTES} bytes, got {size}"
            )

    @classmethod
    def from_hex(cls, value: str | None) -> "EncryptionKey":
        """
        Build the key from an ENCRYPTION_KEY style value.

        Only the first 64 characters are used; they must be hexadecimal and
        decode to exactly 32 bytes.
        """
        if not isinstance(value, str):
            raise ConfigurationError("ENCRYPTION_KEY must be a string")
        if not value.strip():
            raise ConfigurationError("ENCRYPTION_KEY is not configured")

        candidate = value.strip()[:KEY_HEX_LENGTH]
        if not _HEX_RE.fullmatch(candidate):
            raise ConfigurationError("ENCRYPTION_KEY must be a hexadecimal string")
        if len(candidate) % 2:
            raise ConfigurationError("ENCRYPTION_KEY has an odd number of hex characters")

        return cls(bytes.fromhex(candidate))


@dataclass(frozen=True, slots=True)
class CipherText:
    iv: bytes
    ciphertext: bytes

    def encode(self) -> str:
        return f"{self.iv.hex()}{DELIMITER}{self.ciphertext.hex()}"

    @classmethod
    def decode(cls, value: str) -> "CipherText":
        if not isinstance(value, str):
            raise MalformedCiphertextError("Encrypted value must be a string")

        iv_hex, sep, body_hex = value.partition(DELIMITER)
        if not sep:
            raise MalformedCiphertextError("Encrypted value is missing the IV delimiter")
        if not iv_hex or not _HEX_RE.fullmatch(iv_hex):
            raise MalformedCiphertextError("IV segment is not hexadecimal")
        if not body_hex or not _HEX_RE.fullmatch(body_hex):
            raise MalformedCiphertextError("Ciphertext segment is not hexadecimal")
        if len(iv_hex) != IV_SIZE_BYTES * 2:
            raise MalformedCiphertextError(
                f"IV must be {IV_SIZE_BYTES} bytes, got {len(iv_hex) / 2:g}"
            )
        if len(body_hex) % (BLOCK_SIZE_BYTES * 2):
            raise MalformedCiphertextError(
                f"Ciphertext length is not a multiple of the {BLOCK_SIZE_BYTES}-byte block size"
            )

        return cls(iv=bytes.fromhex(iv_hex), ciphertext=bytes.fromhex(body_hex))
