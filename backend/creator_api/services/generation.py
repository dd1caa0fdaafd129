"""
Content generation request handling

One call to GenerationOrchestrator.generate() runs the whole request:
validate, load the account, admit against the daily quota, unlock the
user's API key, call the provider, then store the Creation and charge the
quota together. The first failure ends the request.

Known limitation: if storing fails after the provider call succeeded, the
user's provider account has been billed for a generation we did not keep.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError

from creator_api.core.encryption import CredentialCipher
from creator_api.core.errors import (
    AccountLoadError,
    CredentialError,
    DecryptionError,
    InvalidRequest,
    MissingCredential,
    PersistenceError,
    QuotaExceeded,
)
from creator_api.core.security import AuthenticatedUser
from creator_api.services.account_store import AccountRepository
from creator_api.services.generation_provider import GenerationProvider
from creator_api.services.quota import QuotaLedger, quota_ledger, utc_today

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    generated_text: str
    generated_image_url: str
    remaining_today: int


class GenerationOrchestrator:
    """Runs a generate request against injected collaborators"""

    def __init__(
        self,
        accounts: AccountRepository,
        cipher: CredentialCipher,
        provider: GenerationProvider,
        ledger: QuotaLedger = quota_ledger,
        today: Callable[[], date] = utc_today,
    ):
        self.accounts = accounts
        self.cipher = cipher
        self.provider = provider
        self.ledger = ledger
        self.today = today

    async def generate(self, user: AuthenticatedUser, prompt: Optional[str]) -> GenerationResult:
        if not prompt or not prompt.strip():
            raise InvalidRequest("Prompt is required")

        try:
            account = self.accounts.ensure_account(user)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load account {user.id}: {e}")
            raise AccountLoadError()

        # "today" is fixed once per request and used for admission and commit
        today = self.today()
        if not self.ledger.can_generate(account, today):
            logger.info(f"Generation refused for {user.id}: daily limit reached")
            raise QuotaExceeded()

        if not account.api_key_encrypted:
            raise MissingCredential()

        try:
            api_key = self.cipher.decrypt(account.api_key_encrypted)
        except DecryptionError:
            logger.error(f"Stored API key for {user.id} could not be decrypted")
            raise CredentialError()

        content = await self.provider.generate(prompt, api_key)

        try:
            saved = self.accounts.save_generation(
                account,
                prompt=prompt,
                generated_text=content.text,
                generated_image_url=content.image_url,
                today=today,
                ledger=self.ledger,
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to save creation for {user.id}: {e}")
            raise PersistenceError()

        logger.info(f"Generation stored for {user.id}")
        return GenerationResult(
            generated_text=content.text,
            generated_image_url=content.image_url,
            remaining_today=self.ledger.remaining_today(saved, today),
        )
