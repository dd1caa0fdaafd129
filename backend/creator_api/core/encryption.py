"""
Encryption utilities for user-supplied API keys
Uses AES-256-GCM from the cryptography library with a PBKDF2-derived key

Blob layout (hex encoded): salt (16 bytes) || iv (12 bytes) || ciphertext + GCM tag
"""

import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from creator_api.core.errors import ConfigurationError, DecryptionError, InvalidCredential

logger = logging.getLogger(__name__)

SALT_LENGTH = 16
IV_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32
KDF_ITERATIONS = 100000


class CredentialCipher:
    """
    Encrypts and decrypts a single credential string under a server-held secret

    A fresh salt and IV are drawn for every encryption, so the same credential
    never produces the same blob twice.
    """

    def __init__(self, server_secret: str):
        """
        Args:
            server_secret: ENCRYPTION_KEY from settings, used as PBKDF2 input

        Raises:
            ConfigurationError: if the secret is empty or unset
        """
        if not server_secret:
            raise ConfigurationError("ENCRYPTION_KEY is not set in environment variables.")
        self._secret = server_secret.encode("utf-8")

    def _derive_key(self, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=KDF_ITERATIONS,
        )
        return kdf.derive(self._secret)

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt plaintext string

        Args:
            plaintext: String to encrypt

        Returns:
            Hex string of salt || iv || ciphertext
        """
        if not plaintext:
            raise InvalidCredential("Cannot encrypt empty string")

        salt = os.urandom(SALT_LENGTH)
        iv = os.urandom(IV_LENGTH)
        ciphertext = AESGCM(self._derive_key(salt)).encrypt(iv, plaintext.encode("utf-8"), None)
        return (salt + iv + ciphertext).hex()

    def decrypt(self, blob: str) -> str:
        """
        Decrypt a hex blob produced by encrypt()

        Args:
            blob: Hex string of salt || iv || ciphertext

        Returns:
            Decrypted plaintext string

        Raises:
            DecryptionError: malformed blob, tampered data or wrong secret,
                all reported identically
        """
        try:
            combined = bytes.fromhex(blob or "")
        except (TypeError, ValueError):
            logger.error("Decryption failed: blob is not valid hex")
            raise DecryptionError()

        if len(combined) < SALT_LENGTH + IV_LENGTH + TAG_LENGTH:
            logger.error("Decryption failed: blob too short")
            raise DecryptionError()

        salt = combined[:SALT_LENGTH]
        iv = combined[SALT_LENGTH:SALT_LENGTH + IV_LENGTH]
        ciphertext = combined[SALT_LENGTH + IV_LENGTH:]

        try:
            plaintext = AESGCM(self._derive_key(salt)).decrypt(iv, ciphertext, None)
            return plaintext.decode("utf-8")
        except (InvalidTag, UnicodeDecodeError):
            logger.error("Decryption failed: authentication check did not pass")
            raise DecryptionError()


def encrypt(plaintext: str, server_secret: str) -> str:
    """
    Convenience function to encrypt a credential

    Args:
        plaintext: Credential to encrypt
        server_secret: Server-held KDF secret

    Returns:
        Hex encoded blob
    """
    return CredentialCipher(server_secret).encrypt(plaintext)


def decrypt(blob: str, server_secret: str) -> str:
    """
    Convenience function to decrypt a credential

    Args:
        blob: Hex encoded blob
        server_secret: Server-held KDF secret

    Returns:
        Decrypted credential
    """
    return CredentialCipher(server_secret).decrypt(blob)
