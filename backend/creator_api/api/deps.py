"""
FastAPI dependencies wiring services to settings and the database session
"""

from datetime import date
from typing import Callable, Type, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from creator_api.core.config import settings
from creator_api.core.database import get_db
from creator_api.core.encryption import CredentialCipher
from creator_api.core.errors import InvalidRequest
from creator_api.services.account_store import AccountRepository
from creator_api.services.credential_admin import CredentialAdmin
from creator_api.services.generation import GenerationOrchestrator
from creator_api.services.generation_provider import GenerationProvider, OpenAIChatProvider
from creator_api.services.quota import utc_today

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_cipher() -> CredentialCipher:
    return CredentialCipher(settings.ENCRYPTION_KEY)


def get_generation_provider() -> GenerationProvider:
    return OpenAIChatProvider()


def get_today_provider() -> Callable[[], date]:
    return utc_today


def get_account_repository(db: Session = Depends(get_db)) -> AccountRepository:
    return AccountRepository(db)


def get_generation_orchestrator(
    accounts: AccountRepository = Depends(get_account_repository),
    cipher: CredentialCipher = Depends(get_cipher),
    provider: GenerationProvider = Depends(get_generation_provider),
    today: Callable[[], date] = Depends(get_today_provider),
) -> GenerationOrchestrator:
    return GenerationOrchestrator(accounts, cipher, provider, today=today)


def get_credential_admin(
    accounts: AccountRepository = Depends(get_account_repository),
    cipher: CredentialCipher = Depends(get_cipher),
) -> CredentialAdmin:
    return CredentialAdmin(accounts, cipher)


async def read_body(request: Request, schema: Type[ModelT]) -> ModelT:
    """
    Parse a JSON request body into a schema

    Handlers call this after their auth dependency has resolved, so an
    unauthenticated caller is refused before the body is looked at.
    """
    try:
        payload = await request.json()
        return schema.model_validate(payload)
    except (ValueError, ValidationError):
        raise InvalidRequest("Invalid request body")
