# schemas.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


# ---------- Usage ----------

class UsageRecord(BaseModel):
    """
    Daily usage of the assistant for one calendar day.

    - date: local calendar day, ISO format ("2026-10-19")
    - count: accepted invocations on that day
    - last_used_at: timestamp of the most recent accepted invocation
    """
    date: str
    count: int = Field(default=0, ge=0)
    last_used_at: Optional[datetime] = None


class RemainingUsage(BaseModel):
    """Read-only projection of the tracker for display."""
    uses_left: int
    cooldown_seconds_left: float
    count: int
    daily_limit: int

    @property
    def exhausted(self) -> bool:
        return self.uses_left <= 0

    @property
    def on_cooldown(self) -> bool:
        return self.cooldown_seconds_left > 0 and not self.exhausted


# ---------- Streak & badges ----------

class StreakRecord(BaseModel):
    current_streak: int = Field(default=0, ge=0)
    last_evaluated_date: Optional[str] = None


class Badge(BaseModel):
    id: int
    title: str
    description: str
    requirement: int = Field(ge=1)


class BadgeProgress(BaseModel):
    badge: Badge
    earned: bool
    percent: float


# ---------- Chat ----------

class ChatMessage(BaseModel):
    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime


# ---------- Controller outputs ----------

SubmissionStatus = Literal["empty", "reflect", "limit_exceeded", "cooldown", "answered"]


class SubmissionOutcome(BaseModel):
    """
    Result of one submit attempt.

    - empty: blank input, nothing happened
    - reflect: long input, show the reflection prompt first
    - limit_exceeded / cooldown: admission refused, nothing recorded
    - answered: usage recorded and a reply produced
    """
    status: SubmissionStatus
    remaining: RemainingUsage
    reply: Optional[ChatMessage] = None
    reflection_prompt: Optional[str] = None
    message: Optional[str] = None


class ProgressStats(BaseModel):
    self_solved: int = 0
    ai_solved: int = 0

    @property
    def total(self) -> int:
        return self.self_solved + self.ai_solved

    @property
    def self_solved_percent(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.self_solved / self.total * 100, 1)

    @property
    def ai_solved_percent(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.ai_solved / self.total * 100, 1)


class DailyTip(BaseModel):
    index: int  # 1-based
    total: int
    text: str
