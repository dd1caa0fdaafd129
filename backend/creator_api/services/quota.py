"""
Daily generation quota with lazy UTC-day rollover

The ledger never reads a clock: callers pass "today" in, and a stored
counter only counts when its date equals that day.
"""

from datetime import date, datetime, timezone
from typing import Any, Tuple


def utc_today() -> date:
    """Current calendar date in UTC"""
    return datetime.now(timezone.utc).date()


class QuotaLedger:
    """Pure quota arithmetic over an account's counter fields"""

    DAILY_LIMIT = 5

    def _is_new_day(self, account: Any, today: date) -> bool:
        return account.last_generation_date != today

    def effective_count(self, account: Any, today: date) -> int:
        """Generations already used today"""
        if self._is_new_day(account, today):
            return 0
        return account.daily_generation_count or 0

    def remaining_today(self, account: Any, today: date) -> int:
        if self._is_new_day(account, today):
            return self.DAILY_LIMIT
        return max(0, self.DAILY_LIMIT - (account.daily_generation_count or 0))

    def can_generate(self, account: Any, today: date) -> bool:
        return bool(account.is_pro_member) or self.remaining_today(account, today) > 0

    def record_generation(self, account: Any, today: date) -> Tuple[int, date]:
        """
        Counter values after one more generation today

        Returns:
            (new_count, new_date); persisting them is up to the caller
        """
        if self._is_new_day(account, today):
            return 1, today
        return (account.daily_generation_count or 0) + 1, today


quota_ledger = QuotaLedger()
