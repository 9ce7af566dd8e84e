from __future__ import annotations


class CredentialCipherError(Exception):
    """Base class for failures raised by the credential cipher."""

    code = "credential_cipher_error"


class ConfigurationError(CredentialCipherError, ValueError):
    """Key material is unusable. Raised at startup only."""

    code = "invalid_encryption_key"


class MalformedCiphertextError(CredentialCipherError, ValueError):
    """Stored value is not in the ``hex(iv):hex(ciphertext)`` form."""

    code = "malformed_ciphertext"


class DecryptionIntegrityError(CredentialCipherError):
    """Ciphertext decrypted to garbage: wrong key, corruption or tampering."""

    code = "decryption_integrity"
