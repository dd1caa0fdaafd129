"""
Account profile and creation history endpoints
"""

from datetime import date
from typing import Callable, Optional
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError

from creator_api.api.deps import get_account_repository, get_today_provider
from creator_api.core.errors import AccountLoadError
from creator_api.core.security import AuthenticatedUser, get_current_user
from creator_api.schemas.account import AccountProfile, CreationList, CreationResponse
from creator_api.services.account_store import AccountRepository
from creator_api.services.quota import quota_ledger

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/account/me", response_model=AccountProfile)
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    accounts: AccountRepository = Depends(get_account_repository),
    today: Callable[[], date] = Depends(get_today_provider),
):
    """
    Caller's profile with today's quota usage

    The first call for a new identity creates the account.
    """
    try:
        account = accounts.ensure_account(user)
        total_creations = accounts.count_creations(user.id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to load profile for {user.id}: {e}")
        raise AccountLoadError()

    current_day = today()
    return AccountProfile(
        id=account.id,
        email=account.email,
        display_name=account.display_name,
        is_pro_member=account.is_pro_member,
        daily_limit=quota_ledger.DAILY_LIMIT,
        generations_today=quota_ledger.effective_count(account, current_day),
        remaining_today=quota_ledger.remaining_today(account, current_day),
        last_generation_date=account.last_generation_date,
        has_api_key=account.has_api_key(),
        total_creations=total_creations,
    )


@router.get("/creations", response_model=CreationList)
async def list_creations(
    q: Optional[str] = Query(None, description="Search prompt and generated text"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    user: AuthenticatedUser = Depends(get_current_user),
    accounts: AccountRepository = Depends(get_account_repository),
):
    """
    Caller's creations, newest first
    """
    try:
        creations = accounts.list_creations(user.id, search=(q or "").strip() or None, limit=limit)
    except SQLAlchemyError as e:
        logger.error(f"Failed to list creations for {user.id}: {e}")
        raise AccountLoadError("Failed to fetch creations")

    return CreationList(
        creations=[CreationResponse.model_validate(c) for c in creations],
        total=len(creations),
    )
