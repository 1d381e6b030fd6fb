import math
import time
from datetime import datetime

import streamlit as st

from config import get_settings
from controller import SelfRelianceController, daily_tip
from schemas import SubmissionOutcome

settings = get_settings()

# --------------------- Streamlit setup --------------------- #

st.set_page_config(
    page_title="AI Self-Reliance",
    page_icon="🧠",
    layout="wide",
)

st.title("🧠 AI Self-Reliance")
st.caption(
    "Lean on AI less: track how often you ask, take the daily self-learning "
    "challenge and collect self-reliance badges."
)


# --------------------- Session State helpers --------------------- #

def init_state():
    if "controller" not in st.session_state:
        controller = SelfRelianceController.from_settings(settings)
        controller.load()
        st.session_state.controller = controller
        st.session_state.show_tutorial = controller.first_visit()
        st.session_state.new_badges = controller.pop_newly_earned()
    if "reply_pending_id" not in st.session_state:
        # reply held back until the thinking delay is over
        st.session_state.reply_pending_id = None
    if "pending_text" not in st.session_state:
        # question held back by the reflection prompt
        st.session_state.pending_text = None
        st.session_state.reflection_prompt = None
    if "last_outcome" not in st.session_state:
        st.session_state.last_outcome = None
    if "question_input" not in st.session_state:
        st.session_state.question_input = ""


init_state()

if st.session_state.get("new_badges"):
    st.balloons()
    for badge in st.session_state.new_badges:
        st.toast(f"🏆 Badge unlocked: {badge.title}")
    st.session_state.new_badges = []


def apply_outcome(outcome: SubmissionOutcome, text: str):
    st.session_state.last_outcome = outcome
    if outcome.status == "reflect":
        st.session_state.pending_text = text
        st.session_state.reflection_prompt = outcome.reflection_prompt
    else:
        st.session_state.pending_text = None
        st.session_state.reflection_prompt = None
    if outcome.status in ("answered", "empty"):
        st.session_state.question_input = ""
    if outcome.status == "answered" and settings.reply_delay_seconds:
        st.session_state.reply_pending_id = outcome.reply.id


def on_send():
    controller: SelfRelianceController = st.session_state.controller
    text = st.session_state.question_input
    apply_outcome(controller.submit(text), text)


def on_continue_anyway():
    controller: SelfRelianceController = st.session_state.controller
    text = st.session_state.pending_text or ""
    apply_outcome(controller.submit(text, confirmed=True), text)


def on_self_solve():
    controller: SelfRelianceController = st.session_state.controller
    controller.abandon()
    st.session_state.pending_text = None
    st.session_state.reflection_prompt = None
    st.session_state.question_input = ""
    st.session_state.last_outcome = None
    st.toast("💪 Nice! Solving it yourself counts.")


controller: SelfRelianceController = st.session_state.controller


# --------------------- UI Sections --------------------- #

with st.sidebar:
    st.header("⚙️ Controls")
    if st.button("📖 How it works", use_container_width=True):
        st.session_state.show_tutorial = True
    if st.button("🧹 Clear chat history", use_container_width=True):
        controller.clear_messages()
        st.rerun()

    if settings.debug:
        st.markdown("### Debug info")
        st.json(
            {
                "remaining": controller.remaining().model_dump(),
                "streak": controller.streak(),
                "stats": controller.stats().model_dump(),
                "store_degraded": getattr(controller.store, "degraded", False),
            },
            expanded=False,
        )

if st.session_state.show_tutorial:
    with st.container(border=True):
        st.markdown(
            f"""
**Welcome!** 🎉

- You get **{settings.daily_limit}** questions to the assistant per day.
- After each question there is a **{int(settings.cooldown_seconds)}s** pause.
- Questions longer than **{settings.reflection_threshold}** characters trigger a short reflection first.
- Every day without the assistant grows your streak and unlocks badges.
"""
        )
        if st.button("Got it"):
            st.session_state.show_tutorial = False
            st.rerun()

col_left, col_right = st.columns([1, 2])


# ----------------------------------------------------
# LEFT: daily challenge, badges, progress
# ----------------------------------------------------
with col_left:
    tip = daily_tip(datetime.now().date())
    st.subheader("🎯 Today's challenge")
    st.info(tip.text)
    st.caption(f"Tip #{tip.index}/{tip.total} · Goal: apply this tip at least once today!")

    st.subheader("🏅 Badges")
    streak = controller.streak()
    st.metric("Current streak", f"{streak} day(s)")
    progress = controller.streaks.badge_progress(streak)
    for item in progress:
        if item.earned:
            st.success(f"**{item.badge.title}**: {item.badge.description}")
        else:
            st.markdown(f"**{item.badge.title}**: {item.badge.description}")
            st.progress(int(item.percent), text=f"Progress: {streak}/{item.badge.requirement}")
    earned = sum(1 for item in progress if item.earned)
    st.caption(f"Unlocked: {earned}/{len(progress)} badges")

    st.subheader("📊 Self-solved vs AI")
    stats = controller.stats()
    if stats.total == 0:
        st.caption("No data yet. Solve something yourself or ask a question!")
    else:
        c1, c2 = st.columns(2)
        c1.metric("Self-solved", stats.self_solved, f"{stats.self_solved_percent}%")
        c2.metric("Asked AI", stats.ai_solved, f"{stats.ai_solved_percent}%")


# ----------------------------------------------------
# RIGHT: assistant box
# ----------------------------------------------------
with col_right:
    st.subheader("🤖 AI Assistant")
    st.caption("Limited use to encourage learning on your own")

    @st.fragment(run_every=1)
    def usage_panel():
        remaining = controller.remaining()
        c1, c2 = st.columns(2)
        c1.metric("Uses left", remaining.uses_left)
        if remaining.on_cooldown:
            c2.metric("Cooldown", f"{math.ceil(remaining.cooldown_seconds_left)}s")
        if remaining.exhausted:
            st.error("No questions left today. Come back tomorrow!")
        elif remaining.on_cooldown:
            st.warning(
                f"{math.ceil(remaining.cooldown_seconds_left)}s until you can ask again. "
                "Use the time to think a little deeper."
            )

    usage_panel()

    # Show chat history
    history = controller.messages()
    if not history:
        st.markdown(
            f"**Your AI assistant.** Try thinking it through first! "
            f"You only get {settings.daily_limit} questions a day."
        )
    pending_id = st.session_state.reply_pending_id
    for msg in history:
        if msg.id == pending_id:
            continue
        with st.chat_message(msg.role):
            st.markdown(msg.content)
            st.caption(msg.timestamp.strftime("%H:%M"))

    if pending_id is not None:
        with st.chat_message("assistant"):
            with st.spinner("The assistant is thinking..."):
                time.sleep(settings.reply_delay_seconds)
        st.session_state.reply_pending_id = None
        st.rerun()

    outcome: SubmissionOutcome = st.session_state.last_outcome
    if outcome is not None and outcome.status in ("limit_exceeded", "cooldown"):
        st.error(outcome.message)

    # Reflection prompt with its two continuations
    if st.session_state.pending_text:
        with st.container(border=True):
            st.markdown("#### 💭 Take a moment")
            st.markdown(f"**{st.session_state.reflection_prompt}**")
            st.markdown(outcome.message if outcome is not None and outcome.message else "")
            b1, b2 = st.columns(2)
            b1.button("I'll solve it myself", type="primary", on_click=on_self_solve)
            b2.button("Continue anyway", on_click=on_continue_anyway)

    st.text_area(
        "Your question",
        key="question_input",
        placeholder="Type your question... (try thinking it through first!)",
        height=90,
        disabled=st.session_state.pending_text is not None,
    )
    if len(st.session_state.question_input) > settings.reflection_threshold:
        st.caption("⚠️ Long question. Try thinking it through yourself first!")

    st.button(
        "Send",
        type="primary",
        on_click=on_send,
        disabled=st.session_state.pending_text is not None,
    )

st.markdown("---")
st.caption("💡 **Tip:** The less you depend on AI, the more your independent thinking grows!")
