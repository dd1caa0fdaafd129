"""
Record-store access for accounts and creations
"""

from datetime import date, datetime, timezone
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from sqlalchemy import case, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from creator_api.core.errors import AccountLoadError, PersistenceError, QuotaExceeded
from creator_api.core.security import AuthenticatedUser
from creator_api.models import Creation, UserAccount
from creator_api.services.quota import QuotaLedger

logger = logging.getLogger(__name__)

# Optimistic quota commits re-read the account and try again this many times
MAX_COMMIT_ATTEMPTS = 3


@dataclass(frozen=True)
class SavedGeneration:
    """A committed Creation and the counter values committed with it"""
    creation: Creation
    daily_generation_count: int
    last_generation_date: date


class AccountRepository:
    """
    Account and creation persistence on top of a SQLAlchemy session

    Methods let SQLAlchemyError propagate after rolling back; callers map it
    onto the error taxonomy with the message that fits their operation.
    """

    def __init__(self, db: Session):
        self.db = db

    # ── Accounts ───────────────────────────────────────────────────────

    def _insert_account_if_missing(self, user: AuthenticatedUser) -> None:
        values = {
            "id": user.id,
            "email": user.email or "",
            "display_name": user.display_name or "User",
            "daily_generation_count": 0,
            "is_pro_member": False,
        }
        dialect = self.db.get_bind().dialect.name

        if dialect == "postgresql":
            stmt = pg_insert(UserAccount).values(**values).on_conflict_do_nothing(index_elements=["id"])
        elif dialect == "sqlite":
            stmt = sqlite_insert(UserAccount).values(**values).on_conflict_do_nothing(index_elements=["id"])
        else:
            if self.get_account(user.id) is not None:
                return
            try:
                self.db.add(UserAccount(**values))
                self.db.commit()
            except IntegrityError:
                # Lost an insert race; the other request created the row
                self.db.rollback()
            return

        self.db.execute(stmt)
        self.db.commit()

    def ensure_account(self, user: AuthenticatedUser) -> UserAccount:
        """
        Create the account on first sight and return it

        An existing row is left untouched so signing in again never resets
        the generation counter.
        """
        try:
            self._insert_account_if_missing(user)
            account = self.get_account(user.id)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        if account is None:
            raise AccountLoadError(detail=f"Account {user.id} missing after upsert")
        return account

    def get_account(self, user_id: str) -> Optional[UserAccount]:
        return self.db.get(UserAccount, user_id, populate_existing=True)

    def set_api_key(self, user_id: str, encrypted_key: Optional[str]) -> None:
        """Overwrite (or clear, with None) the stored encrypted API key"""
        try:
            self.db.execute(
                update(UserAccount)
                .where(UserAccount.id == user_id)
                .values(api_key_encrypted=encrypted_key)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # ── Generations ────────────────────────────────────────────────────

    def _commit_quota(self, account: UserAccount, today: date, ledger: QuotaLedger) -> Optional[Tuple[int, date]]:
        """
        Conditionally apply one generation to the counter

        Only matches if the counter still holds the values admission was
        evaluated against. Returns the new (count, date), or None when
        another request got there first.
        """
        new_count, new_date = ledger.record_generation(account, today)

        if account.last_generation_date is None:
            date_unchanged = UserAccount.last_generation_date.is_(None)
        else:
            date_unchanged = UserAccount.last_generation_date == account.last_generation_date

        result = self.db.execute(
            update(UserAccount)
            .where(
                UserAccount.id == account.id,
                UserAccount.daily_generation_count == account.daily_generation_count,
                date_unchanged,
            )
            .values(daily_generation_count=new_count, last_generation_date=new_date)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None
        return new_count, new_date

    def _charge_pro_member(self, account: UserAccount, today: date) -> Tuple[int, date]:
        """Unconditional increment for accounts without a ceiling"""
        self.db.execute(
            update(UserAccount)
            .where(UserAccount.id == account.id)
            .values(
                daily_generation_count=case(
                    (UserAccount.last_generation_date == today, UserAccount.daily_generation_count + 1),
                    else_=1,
                ),
                last_generation_date=today,
            )
            .execution_options(synchronize_session=False)
        )
        new_count = self.db.scalar(
            select(UserAccount.daily_generation_count).where(UserAccount.id == account.id)
        )
        return new_count, today

    def save_generation(
        self,
        account: UserAccount,
        prompt: str,
        generated_text: str,
        generated_image_url: str,
        today: date,
        ledger: QuotaLedger,
    ) -> SavedGeneration:
        """
        Insert the Creation and charge the quota in one transaction

        Pro members are charged with a plain increment; everyone else goes
        through the conditional update so the last slot is spent only once.

        Raises:
            QuotaExceeded: a concurrent request used the last slot first;
                nothing is written
            PersistenceError: the counter kept changing underneath us
            SQLAlchemyError: store failure; nothing is written
        """
        creation = Creation(
            user_id=account.id,
            prompt=prompt,
            generated_text=generated_text,
            generated_image_url=generated_image_url,
            created_at=datetime.now(timezone.utc),
        )

        try:
            self.db.add(creation)
            self.db.flush()

            if account.is_pro_member:
                charged = self._charge_pro_member(account, today)
            else:
                charged = None
                for attempt in range(1, MAX_COMMIT_ATTEMPTS + 1):
                    charged = self._commit_quota(account, today, ledger)
                    if charged is not None:
                        break

                    logger.warning(
                        f"Quota counter for {account.id} changed concurrently (attempt {attempt})"
                    )
                    self.db.refresh(account)
                    if not ledger.can_generate(account, today):
                        self.db.rollback()
                        raise QuotaExceeded()

            if charged is None:
                self.db.rollback()
                raise PersistenceError(detail=f"Quota commit for {account.id} kept conflicting")

            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        # Nothing past the commit may fail: the generation is stored
        new_count, new_date = charged
        return SavedGeneration(
            creation=creation,
            daily_generation_count=new_count,
            last_generation_date=new_date,
        )

    def list_creations(
        self, user_id: str, search: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Creation]:
        """
        Creations owned by a user, newest first

        Args:
            search: case-insensitive substring matched against prompt or text
            limit: maximum number of rows
        """
        stmt = select(Creation).where(Creation.user_id == user_id)
        if search:
            stmt = stmt.where(
                Creation.prompt.icontains(search, autoescape=True)
                | Creation.generated_text.icontains(search, autoescape=True)
            )
        stmt = stmt.order_by(Creation.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt))

    def count_creations(self, user_id: str) -> int:
        return self.db.scalar(
            select(func.count()).select_from(Creation).where(Creation.user_id == user_id)
        ) or 0
