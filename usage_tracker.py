"""
Daily usage limit and cooldown enforcement.

Policy: at most `daily_limit` accepted invocations per local calendar day,
and a strict cooldown of `cooldown_seconds` after every accepted invocation.
When both rules apply, the daily limit wins.
"""

from datetime import date, datetime

from pydantic import ValidationError

from exceptions import CooldownActive, LimitExceeded
from logging_config import get_logger
from schemas import RemainingUsage, UsageRecord
from storage import USAGE_RECORD_KEY, KeyValueStore

logger = get_logger("self_reliance.usage")


class UsageTracker:
    def __init__(
        self,
        store: KeyValueStore,
        daily_limit: int = 3,
        cooldown_seconds: float = 30.0,
    ):
        if daily_limit < 1:
            raise ValueError("daily_limit must be at least 1")
        if cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must not be negative")
        self.store = store
        self.daily_limit = daily_limit
        self.cooldown_seconds = cooldown_seconds

    # ---------- persistence ----------

    def _save(self, record: UsageRecord) -> None:
        self.store.set(USAGE_RECORD_KEY, record.model_dump(mode="json"))

    def _record(self, now: datetime) -> UsageRecord:
        """
        Load today's record.

        A record left over from an earlier day is replaced by a fresh one and
        written back immediately, so the rollover happens on first access
        and every later query of the same day sees the new record.

        A record dated after `now` means the clock went backwards; it is
        kept as-is so the limit cannot be reset by changing the date.
        """
        today = now.date()
        raw = self.store.get(USAGE_RECORD_KEY)

        record = None
        if raw is not None:
            try:
                record = UsageRecord.model_validate(raw)
                record_day = date.fromisoformat(record.date)
            except (ValidationError, ValueError) as e:
                logger.warning(f"Discarding malformed usage record: {e}")
                record = None

        if record is not None and record_day > today:
            logger.warning(f"Usage record dated {record.date} is ahead of the clock ({today}), keeping it")
        elif record is None or record_day < today:
            if record is not None:
                logger.info(f"New day {today}: resetting usage (was {record.count} on {record.date})")
            record = UsageRecord(date=today.isoformat())
            self._save(record)
            return record

        if record.count > self.daily_limit:
            record = record.model_copy(update={"count": self.daily_limit})
        return record

    # ---------- queries ----------

    def _cooldown_left(self, record: UsageRecord, now: datetime) -> float:
        if record.last_used_at is None:
            return 0.0
        elapsed = (now - record.last_used_at).total_seconds()
        if elapsed < 0:
            # clock moved backwards: treat the cooldown as over
            return 0.0
        return max(0.0, self.cooldown_seconds - elapsed)

    def check(self, now: datetime) -> UsageRecord:
        """Raise LimitExceeded or CooldownActive if an invocation is not allowed now."""
        record = self._record(now)
        if record.count >= self.daily_limit:
            raise LimitExceeded(record.count, self.daily_limit)
        seconds_left = self._cooldown_left(record, now)
        if seconds_left > 0:
            raise CooldownActive(seconds_left)
        return record

    def can_invoke(self, now: datetime) -> bool:
        try:
            self.check(now)
        except (LimitExceeded, CooldownActive):
            return False
        return True

    def remaining(self, now: datetime) -> RemainingUsage:
        record = self._record(now)
        return RemainingUsage(
            uses_left=max(0, self.daily_limit - record.count),
            cooldown_seconds_left=self._cooldown_left(record, now),
            count=record.count,
            daily_limit=self.daily_limit,
        )

    def used_today(self, now: datetime) -> bool:
        return self._record(now).count > 0

    # ---------- mutations ----------

    def record_invocation(self, now: datetime) -> UsageRecord:
        """
        Count one accepted invocation.

        Raises LimitExceeded / CooldownActive without touching the stored
        record when the invocation is not allowed.
        """
        try:
            record = self.check(now)
        except (LimitExceeded, CooldownActive) as e:
            logger.warning(f"Invocation rejected: {e}")
            raise

        record = record.model_copy(update={"count": record.count + 1, "last_used_at": now})
        self._save(record)
        logger.info(f"Invocation recorded ({record.count}/{self.daily_limit} today)")
        return record

    def reset_today(self, now: datetime) -> UsageRecord:
        record = UsageRecord(date=now.date().isoformat())
        self._save(record)
        logger.info("Today's usage count reset")
        return record
