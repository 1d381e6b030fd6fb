"""
Single owner of the tracker state.

The controller wires the reflection gate, usage tracker, streak engine
and response provider together over one injected key-value store.
Views call its operations and render what comes back; nothing else
touches the store.

Submission flow:

  input -> reflection gate -> usage admission -> record usage
        -> streak reset -> response provider -> transcript
"""

import math
import random
import uuid
from datetime import date, datetime
from typing import Callable, List, Optional

from pydantic import ValidationError

from config import Settings, get_settings
from countdown import CountdownTicker
from exceptions import CooldownActive, LimitExceeded
from logging_config import get_logger
from prompts import COOLDOWN_MESSAGE, DAILY_TIPS, LIMIT_EXCEEDED_MESSAGE, REFLECTION_INTRO
from reflection_gate import ReflectionGate
from responders import CannedResponder, ResponseProvider, safe_respond
from schemas import Badge, ChatMessage, DailyTip, ProgressStats, SubmissionOutcome
from storage import (
    AI_SOLVED_KEY,
    HAS_VISITED_KEY,
    MESSAGES_KEY,
    SELF_SOLVED_KEY,
    KeyValueStore,
    open_store,
)
from streak_engine import StreakEngine
from usage_tracker import UsageTracker

logger = get_logger("self_reliance.controller")


class SelfRelianceController:
    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[Settings] = None,
        responder: Optional[ResponseProvider] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.clock = clock

        self.tracker = UsageTracker(
            store,
            daily_limit=self.settings.daily_limit,
            cooldown_seconds=self.settings.cooldown_seconds,
        )
        self.streaks = StreakEngine(store)
        self.gate = ReflectionGate(self.settings.reflection_threshold, rng=rng)
        self.responder = responder or CannedResponder(rng=rng)

        self._ticker: Optional[CountdownTicker] = None
        self._newly_earned: List[Badge] = []

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "SelfRelianceController":
        """Build a controller over the profile file named in settings."""
        settings = settings or get_settings()
        return cls(open_store(settings.store_path), settings=settings, **kwargs)

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self.clock()

    # --------------------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------------------

    def load(self, now: Optional[datetime] = None) -> int:
        """
        Evaluate today's streak. Call once whenever the view is opened;
        repeated calls on the same day are harmless.
        """
        now = self._now(now)
        streak = self.streaks.evaluate_day(now.date(), self.tracker.used_today(now))
        self._newly_earned.extend(self.streaks.last_newly_earned)
        return streak

    def pop_newly_earned(self) -> List[Badge]:
        """Badges unlocked since the last call, for a one-time celebration."""
        badges, self._newly_earned = self._newly_earned, []
        return badges

    def first_visit(self) -> bool:
        """True exactly once per profile."""
        if self.store.get(HAS_VISITED_KEY):
            return False
        self.store.set(HAS_VISITED_KEY, True)
        return True

    def start_countdown(self, on_tick: Callable[[int], None], interval: float = 1.0) -> CountdownTicker:
        """Start reporting the remaining cooldown every `interval` seconds."""
        self.close()
        self._ticker = CountdownTicker(
            lambda: self.tracker.remaining(self.clock()).cooldown_seconds_left,
            on_tick,
            interval=interval,
        )
        self._ticker.start()
        return self._ticker

    def close(self) -> None:
        """Cancel scheduled work when the hosting view goes away."""
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    # --------------------------------------------------------------------
    # Submission
    # --------------------------------------------------------------------

    def can_submit(self, now: Optional[datetime] = None) -> bool:
        return self.tracker.can_invoke(self._now(now))

    def remaining(self, now: Optional[datetime] = None):
        return self.tracker.remaining(self._now(now))

    def submit(
        self,
        text: str,
        now: Optional[datetime] = None,
        confirmed: bool = False,
    ) -> SubmissionOutcome:
        """
        Try to send `text` to the assistant.

        `confirmed=True` is the "continue anyway" answer to a reflection
        prompt: the gate is skipped for this submission only.
        """
        now = self._now(now)

        if not text.strip():
            return SubmissionOutcome(status="empty", remaining=self.tracker.remaining(now))

        if not confirmed and self.gate.should_intercept(len(text)):
            logger.info(f"Reflection prompt shown for a {len(text)}-character question")
            return SubmissionOutcome(
                status="reflect",
                remaining=self.tracker.remaining(now),
                reflection_prompt=self.gate.reflection_prompt(),
                message=REFLECTION_INTRO,
            )

        try:
            self.tracker.record_invocation(now)
        except LimitExceeded as e:
            return SubmissionOutcome(
                status="limit_exceeded",
                remaining=self.tracker.remaining(now),
                message=LIMIT_EXCEEDED_MESSAGE.format(daily_limit=e.daily_limit),
            )
        except CooldownActive as e:
            return SubmissionOutcome(
                status="cooldown",
                remaining=self.tracker.remaining(now),
                message=COOLDOWN_MESSAGE.format(seconds=math.ceil(e.seconds_left)),
            )

        self.streaks.evaluate_day(now.date(), used_ai_today=True)

        user_message = self._message("user", text, now)
        reply = self._message("assistant", safe_respond(self.responder, text), now)
        self._append_messages([user_message, reply])
        self._increment(AI_SOLVED_KEY)

        return SubmissionOutcome(
            status="answered",
            remaining=self.tracker.remaining(now),
            reply=reply,
        )

    def abandon(self, now: Optional[datetime] = None) -> ProgressStats:
        """
        The "I'll solve it myself" answer to a reflection prompt.
        Nothing is sent and no usage is recorded.
        """
        now = self._now(now)
        self._increment(SELF_SOLVED_KEY)
        if self.settings.abandon_resets_usage:
            self.tracker.reset_today(now)
        logger.info("User chose to solve the problem on their own")
        return self.stats()

    # --------------------------------------------------------------------
    # Transcript
    # --------------------------------------------------------------------

    @staticmethod
    def _message(role: str, content: str, now: datetime) -> ChatMessage:
        return ChatMessage(id=uuid.uuid4().hex, role=role, content=content, timestamp=now)

    def messages(self) -> List[ChatMessage]:
        history = []
        for raw in self.store.get(MESSAGES_KEY) or []:
            try:
                history.append(ChatMessage.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed message in stored history")
        return history

    def _append_messages(self, new: List[ChatMessage]) -> None:
        history = self.messages() + new
        if self.settings.max_history:
            history = history[-self.settings.max_history:]
        self.store.set(MESSAGES_KEY, [m.model_dump(mode="json") for m in history])

    def clear_messages(self) -> None:
        self.store.set(MESSAGES_KEY, [])

    # --------------------------------------------------------------------
    # Progress
    # --------------------------------------------------------------------

    def _increment(self, key: str) -> int:
        try:
            value = int(self.store.get(key, 0)) + 1
        except (TypeError, ValueError):
            value = 1
        self.store.set(key, value)
        return value

    def stats(self) -> ProgressStats:
        def _count(key: str) -> int:
            try:
                return max(0, int(self.store.get(key, 0)))
            except (TypeError, ValueError):
                return 0

        return ProgressStats(self_solved=_count(SELF_SOLVED_KEY), ai_solved=_count(AI_SOLVED_KEY))

    def streak(self) -> int:
        return self.streaks.current_streak


def daily_tip(today: date) -> DailyTip:
    """Tip of the day, rotating with the day of the month."""
    index = today.day % len(DAILY_TIPS)
    return DailyTip(index=index + 1, total=len(DAILY_TIPS), text=DAILY_TIPS[index])
