"""Shared fixtures: in-memory SQLite store, fake provider, token factory"""

import os
import time
from datetime import date
from typing import Callable, List, Optional

# Settings are read at import time, so the environment must be ready first
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENCRYPTION_KEY"] = "test-encryption-secret-for-the-suite"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-with-32-plus-bytes"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["JWT_AUDIENCE"] = "authenticated"

import jwt
import pytest
from fastapi.testclient import TestClient

from creator_api.api.deps import get_generation_provider, get_today_provider
from creator_api.core.database import SessionLocal, create_all_tables, drop_all_tables, get_db
from creator_api.core.encryption import CredentialCipher
from creator_api.core.errors import ProviderError
from creator_api.main import app
from creator_api.models import UserAccount
from creator_api.services.generation_provider import GeneratedContent, placeholder_image_url

TODAY = date(2026, 10, 19)
YESTERDAY = date(2026, 10, 18)


class FakeProvider:
    """Stands in for the OpenAI client and records every call"""

    def __init__(self, text: str = "hi there"):
        self.text = text
        self.calls: List[tuple] = []
        self.error: Optional[ProviderError] = None
        self.on_call: Optional[Callable[[], None]] = None

    async def generate(self, prompt: str, api_key: str) -> GeneratedContent:
        self.calls.append((prompt, api_key))
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return GeneratedContent(text=self.text, image_url=placeholder_image_url(prompt))


@pytest.fixture
def db():
    create_all_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_all_tables()


@pytest.fixture
def cipher():
    return CredentialCipher(os.environ["ENCRYPTION_KEY"])


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def make_account(db, cipher):
    def _make(
        user_id: str = "user-1",
        count: int = 0,
        last_date: Optional[date] = None,
        pro: bool = False,
        api_key: Optional[str] = "sk-test-key",
    ) -> UserAccount:
        account = UserAccount(
            id=user_id,
            email=f"{user_id}@example.com",
            display_name=user_id,
            daily_generation_count=count,
            last_generation_date=last_date,
            is_pro_member=pro,
            api_key_encrypted=cipher.encrypt(api_key) if api_key else None,
        )
        db.add(account)
        db.commit()
        return account

    return _make


@pytest.fixture
def make_token():
    def _make(sub: str = "user-1", email: str = "ada@example.com", **claims) -> str:
        payload = {
            "sub": sub,
            "email": email,
            "aud": "authenticated",
            "exp": int(time.time()) + 3600,
        }
        payload.update(claims)
        return jwt.encode(payload, os.environ["JWT_SECRET_KEY"], algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def client(db, provider):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_generation_provider] = lambda: provider
    app.dependency_overrides[get_today_provider] = lambda: (lambda: TODAY)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
