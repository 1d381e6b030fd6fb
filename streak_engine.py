"""
Streak of consecutive days without the assistant, and the badges it unlocks.
"""

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Set

from logging_config import get_logger
from schemas import Badge, BadgeProgress, StreakRecord
from storage import EARNED_BADGES_KEY, STREAK_EVALUATED_KEY, STREAK_KEY, KeyValueStore

logger = get_logger("self_reliance.streak")


BADGES: List[Badge] = [
    Badge(
        id=1,
        title="Getting started",
        description="Reach a 1-day streak without AI",
        requirement=1,
    ),
    Badge(
        id=2,
        title="Self-reliant basics",
        description="Keep going for 3 days without leaning on AI",
        requirement=3,
    ),
    Badge(
        id=3,
        title="Self-reliance master",
        description="Conquer a 7-day streak",
        requirement=7,
    ),
]

BadgeListener = Callable[[List[Badge]], None]


def _as_int(value, default: int = 0) -> int:
    # streak may have been written as a string
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return default


class StreakEngine:
    def __init__(self, store: KeyValueStore, badges: Optional[Iterable[Badge]] = None):
        self.store = store
        self.badges: List[Badge] = sorted(badges or BADGES, key=lambda b: b.requirement)
        self._by_id: Dict[int, Badge] = {b.id: b for b in self.badges}
        self._listeners: List[BadgeListener] = []
        self.last_newly_earned: List[Badge] = []

    # ---------- state ----------

    def record(self) -> StreakRecord:
        return StreakRecord(
            current_streak=_as_int(self.store.get(STREAK_KEY, 0)),
            last_evaluated_date=self.store.get(STREAK_EVALUATED_KEY),
        )

    @property
    def current_streak(self) -> int:
        return self.record().current_streak

    def _save(self, record: StreakRecord) -> None:
        self.store.set(STREAK_KEY, record.current_streak)
        self.store.set(STREAK_EVALUATED_KEY, record.last_evaluated_date)

    # ---------- badges ----------

    def badges_for(self, streak: int) -> Set[int]:
        return {b.id for b in self.badges if streak >= b.requirement}

    def earned_badges(self) -> Set[int]:
        """Lifetime unlocks; a badge stays earned after the streak breaks."""
        raw = self.store.get(EARNED_BADGES_KEY) or []
        return {_as_int(b) for b in raw if _as_int(b, -1) in self._by_id}

    def badge_progress(self, streak: Optional[int] = None) -> List[BadgeProgress]:
        if streak is None:
            streak = self.current_streak
        earned = self.earned_badges() | self.badges_for(streak)
        return [
            BadgeProgress(
                badge=b,
                earned=b.id in earned,
                percent=min(streak / b.requirement * 100, 100.0),
            )
            for b in self.badges
        ]

    def on_badge_earned(self, listener: BadgeListener) -> None:
        self._listeners.append(listener)

    def _crossed(self, before: int, after: int) -> List[Badge]:
        new_ids = self.badges_for(after) - self.badges_for(before)
        return [self._by_id[i] for i in sorted(new_ids, key=lambda i: self._by_id[i].requirement)]

    # ---------- evaluation ----------

    def evaluate_day(self, today: date, used_ai_today: bool) -> int:
        """
        Update the streak for `today` and return it.

        Any usage today resets the streak to 0. Otherwise the streak grows
        by one the first time a given day is evaluated; further calls on
        the same day return it unchanged.
        """
        day = today.isoformat()
        record = self.record()
        before = record.current_streak
        self.last_newly_earned = []

        if used_ai_today:
            if before:
                logger.info(f"Streak of {before} day(s) reset: assistant used on {day}")
            record = StreakRecord(current_streak=0, last_evaluated_date=day)
            self._save(record)
            return 0

        if record.last_evaluated_date == day:
            return before

        record = StreakRecord(current_streak=before + 1, last_evaluated_date=day)
        self._save(record)

        crossed = self._crossed(before, record.current_streak)
        if crossed:
            earned = self.earned_badges() | {b.id for b in crossed}
            self.store.set(EARNED_BADGES_KEY, sorted(earned))
            self.last_newly_earned = crossed
            for badge in crossed:
                logger.info(f"Badge unlocked: {badge.title} ({badge.requirement}-day streak)")
            for listener in self._listeners:
                listener(crossed)

        return record.current_streak
