"""
Error taxonomy for the generation and credential endpoints

Every failure a request can end in is one of the variants below. Handlers
branch on ``kind`` and the HTTP layer renders ``message`` into the failure
envelope; ``detail`` is for logs only and never leaves the process.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    INVALID_REQUEST = "invalid_request"
    INVALID_CREDENTIAL = "invalid_credential"
    QUOTA_EXCEEDED = "quota_exceeded"
    MISSING_CREDENTIAL = "missing_credential"
    CONFIGURATION = "configuration"
    DECRYPTION = "decryption"
    CREDENTIAL = "credential"
    PROVIDER = "provider"
    PERSISTENCE = "persistence"
    ACCOUNT_LOAD = "account_load"


class CreatorApiError(Exception):
    """Base exception for all request-terminating failures"""

    kind: ErrorKind
    default_message = "Request failed"
    status_code = 400

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class Unauthorized(CreatorApiError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidRequest(CreatorApiError):
    kind = ErrorKind.INVALID_REQUEST
    default_message = "Invalid request"


class InvalidCredential(CreatorApiError):
    kind = ErrorKind.INVALID_CREDENTIAL
    default_message = "A valid OpenAI API key is required."


class QuotaExceeded(CreatorApiError):
    kind = ErrorKind.QUOTA_EXCEEDED
    default_message = "Daily generation limit reached. Upgrade to Pro for unlimited access."


class MissingCredential(CreatorApiError):
    kind = ErrorKind.MISSING_CREDENTIAL
    default_message = "Please configure your OpenAI API key in Settings."


class ConfigurationError(CreatorApiError):
    """Server misconfiguration, e.g. ENCRYPTION_KEY unset"""
    kind = ErrorKind.CONFIGURATION
    default_message = "Server configuration error"
    status_code = 500

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail=detail)

    def __str__(self) -> str:
        return self.detail or self.message


class DecryptionError(CreatorApiError):
    """Blob malformed or failed authentication; the cause is deliberately not exposed"""
    kind = ErrorKind.DECRYPTION
    default_message = "Failed to decrypt data"


class CredentialError(CreatorApiError):
    kind = ErrorKind.CREDENTIAL
    default_message = "Your stored API key could not be read. Please save it again in Settings."


class ProviderError(CreatorApiError):
    kind = ErrorKind.PROVIDER
    default_message = "Failed to generate content from AI."


class PersistenceError(CreatorApiError):
    kind = ErrorKind.PERSISTENCE
    default_message = "Failed to save creation"


class AccountLoadError(CreatorApiError):
    kind = ErrorKind.ACCOUNT_LOAD
    default_message = "Failed to fetch user profile"
