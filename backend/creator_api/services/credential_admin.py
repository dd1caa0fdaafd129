"""
Saving and deleting a user's OpenAI API key
"""

from typing import Optional
import logging

from sqlalchemy.exc import SQLAlchemyError

from creator_api.core.encryption import CredentialCipher
from creator_api.core.errors import AccountLoadError, InvalidCredential, InvalidRequest, PersistenceError
from creator_api.core.security import AuthenticatedUser
from creator_api.services.account_store import AccountRepository

logger = logging.getLogger(__name__)

API_KEY_PREFIX = "sk-"


class CredentialAdmin:
    def __init__(self, accounts: AccountRepository, cipher: CredentialCipher):
        self.accounts = accounts
        self.cipher = cipher

    def _ensure_account(self, user: AuthenticatedUser) -> None:
        try:
            self.accounts.ensure_account(user)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load account {user.id}: {e}")
            raise AccountLoadError()

    def save(self, user: AuthenticatedUser, raw_key: Optional[str]) -> str:
        """
        Encrypt and store an API key, replacing any previous one

        Returns:
            Success message
        """
        api_key = (raw_key or "").strip()
        if not api_key or not api_key.startswith(API_KEY_PREFIX):
            raise InvalidCredential()

        encrypted_key = self.cipher.encrypt(api_key)
        self._ensure_account(user)
        try:
            self.accounts.set_api_key(user.id, encrypted_key)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save API key for {user.id}: {e}")
            raise PersistenceError("Failed to save API key.")

        logger.info(f"API key saved for {user.id}")
        return "API key saved successfully"

    def delete(self, user: AuthenticatedUser) -> str:
        """Clear the stored API key; succeeds when none is stored"""
        self._ensure_account(user)
        try:
            self.accounts.set_api_key(user.id, None)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete API key for {user.id}: {e}")
            raise PersistenceError("Failed to delete API key.")

        logger.info(f"API key deleted for {user.id}")
        return "API key deleted successfully"

    def handle(self, user: AuthenticatedUser, action: Optional[str], api_key: Optional[str] = None) -> str:
        if action == "save":
            return self.save(user, api_key)
        if action == "delete":
            return self.delete(user)
        raise InvalidRequest('Invalid action. Use "save" or "delete".')
