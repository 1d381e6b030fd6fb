"""Tests for the submission flow and progress tracking."""

import random
from datetime import date, timedelta

import pytest

from config import Settings
from controller import SelfRelianceController, daily_tip
from prompts import DAILY_TIPS, FALLBACK_REPLY, REFLECTION_QUESTIONS
from responders import FixedResponder
from storage import STREAK_EVALUATED_KEY, STREAK_KEY

LONG_QUESTION = "x" * 60


class SpyResponder:
    def __init__(self, text="Try it yourself first."):
        self.text = text
        self.prompts = []

    def respond(self, prompt):
        self.prompts.append(prompt)
        return self.text


class ExplodingResponder:
    def respond(self, prompt):
        raise RuntimeError("model offline")


@pytest.fixture
def controller(store, settings, t0):
    return SelfRelianceController(
        store,
        settings=settings,
        responder=FixedResponder("Think first."),
        rng=random.Random(1),
        clock=lambda: t0,
    )


def test_blank_input_is_ignored(controller, t0):
    outcome = controller.submit("   ", now=t0)
    assert outcome.status == "empty"
    assert controller.remaining(t0).count == 0


def test_short_question_is_answered(controller, t0):
    outcome = controller.submit("What is a closure?", now=t0)

    assert outcome.status == "answered"
    assert outcome.reply.role == "assistant"
    assert outcome.reply.content == "Think first."
    assert outcome.remaining.uses_left == 2
    assert [m.role for m in controller.messages()] == ["user", "assistant"]
    assert controller.stats().ai_solved == 1


def test_long_question_shows_reflection_then_continue_anyway(controller, t0):
    outcome = controller.submit(LONG_QUESTION, now=t0)

    assert outcome.status == "reflect"
    assert outcome.reflection_prompt in REFLECTION_QUESTIONS
    assert outcome.message
    assert controller.remaining(t0).count == 0

    outcome = controller.submit(LONG_QUESTION, now=t0, confirmed=True)
    assert outcome.status == "answered"
    assert controller.remaining(t0).count == 1


def test_reflection_comes_before_admission(controller, t0):
    controller.submit("quick one", now=t0)
    outcome = controller.submit(LONG_QUESTION, now=t0 + timedelta(seconds=1))
    assert outcome.status == "reflect"

    outcome = controller.submit(LONG_QUESTION, now=t0 + timedelta(seconds=1), confirmed=True)
    assert outcome.status == "cooldown"


def test_cooldown_outcome(controller, t0):
    controller.submit("first", now=t0)
    outcome = controller.submit("second", now=t0 + timedelta(seconds=1))

    assert outcome.status == "cooldown"
    assert outcome.reply is None
    assert "29" in outcome.message
    assert outcome.remaining.count == 1


def test_limit_outcome(controller, t0):
    for i in range(3):
        assert controller.submit(f"q{i}", now=t0 + timedelta(seconds=31 * i)).status == "answered"

    outcome = controller.submit("one more", now=t0 + timedelta(hours=1))
    assert outcome.status == "limit_exceeded"
    assert "3" in outcome.message
    assert outcome.remaining.exhausted


def test_responder_called_only_after_admission(store, settings, t0):
    spy = SpyResponder()
    controller = SelfRelianceController(store, settings=settings, responder=spy)

    controller.submit("first", now=t0)
    controller.submit("second", now=t0 + timedelta(seconds=1))
    controller.submit(LONG_QUESTION, now=t0 + timedelta(seconds=40))

    assert spy.prompts == ["first"]


def test_responder_failure_falls_back(store, settings, t0):
    controller = SelfRelianceController(store, settings=settings, responder=ExplodingResponder())
    outcome = controller.submit("help", now=t0)

    assert outcome.status == "answered"
    assert outcome.reply.content == FALLBACK_REPLY
    assert controller.remaining(t0).count == 1


def test_abandon_records_no_usage(controller, t0):
    controller.submit("first", now=t0)
    controller.submit(LONG_QUESTION, now=t0 + timedelta(seconds=40))

    stats = controller.abandon(now=t0 + timedelta(seconds=41))

    assert stats.self_solved == 1
    assert controller.remaining(t0 + timedelta(seconds=42)).count == 1
    assert len(controller.messages()) == 2


def test_abandon_can_reset_usage_when_configured(store, t0):
    settings = Settings(abandon_resets_usage=True)
    controller = SelfRelianceController(store, settings=settings, responder=FixedResponder("ok"))
    controller.submit("first", now=t0)

    controller.abandon(now=t0 + timedelta(seconds=5))

    assert controller.remaining(t0 + timedelta(seconds=5)).count == 0
    assert controller.can_submit(t0 + timedelta(seconds=5))


def test_load_counts_clean_day_and_usage_resets_streak(store, controller, t0):
    yesterday = t0.date() - timedelta(days=1)
    store.set(STREAK_KEY, 4)
    store.set(STREAK_EVALUATED_KEY, yesterday.isoformat())

    assert controller.load(t0) == 5
    assert controller.load(t0) == 5

    controller.submit("help", now=t0)
    assert controller.streak() == 0
    assert controller.load(t0 + timedelta(hours=1)) == 0


def test_load_reports_newly_earned_badges_once(store, controller, t0):
    yesterday = t0.date() - timedelta(days=1)
    store.set(STREAK_KEY, 2)
    store.set(STREAK_EVALUATED_KEY, yesterday.isoformat())

    assert controller.load(t0) == 3
    assert [b.requirement for b in controller.pop_newly_earned()] == [3]
    assert controller.pop_newly_earned() == []

    controller.load(t0 + timedelta(hours=2))
    assert controller.pop_newly_earned() == []


def test_load_next_day_after_usage_starts_new_streak(controller, t0):
    controller.submit("help", now=t0)
    assert controller.load(t0 + timedelta(days=1)) == 1


def test_history_is_capped(store, t0):
    settings = Settings(max_history=4, cooldown_seconds=0, daily_limit=10)
    controller = SelfRelianceController(store, settings=settings, responder=FixedResponder("ok"))
    for i in range(3):
        controller.submit(f"q{i}", now=t0 + timedelta(seconds=i))

    history = controller.messages()
    assert len(history) == 4
    assert history[0].content == "q1"


def test_history_survives_new_controller(store, settings, t0):
    SelfRelianceController(store, settings=settings, responder=FixedResponder("ok")).submit("hi", now=t0)
    again = SelfRelianceController(store, settings=settings)
    assert [m.content for m in again.messages()] == ["hi", "ok"]


def test_clear_messages(controller, t0):
    controller.submit("hi", now=t0)
    controller.clear_messages()
    assert controller.messages() == []


def test_first_visit_only_once(controller):
    assert controller.first_visit()
    assert not controller.first_visit()


def test_stats_percentages(controller, t0):
    controller.submit("hi", now=t0)
    controller.abandon(now=t0)
    controller.abandon(now=t0)
    controller.abandon(now=t0)

    stats = controller.stats()
    assert stats.total == 4
    assert stats.self_solved_percent == 75.0
    assert stats.ai_solved_percent == 25.0


def test_daily_tip_rotates_with_day_of_month():
    tip = daily_tip(date(2026, 10, 19))
    assert tip.index == 10
    assert tip.total == len(DAILY_TIPS)
    assert tip.text == DAILY_TIPS[9]

    assert daily_tip(date(2026, 10, 20)).index == 1


def test_from_settings_uses_store_path(tmp_path, t0):
    settings = Settings(store_path=str(tmp_path / "p.json"))
    controller = SelfRelianceController.from_settings(settings, responder=FixedResponder("ok"))
    controller.submit("hi", now=t0)
    assert (tmp_path / "p.json").exists()
