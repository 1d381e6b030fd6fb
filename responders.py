# responders.py
import random
from typing import List, Optional, Protocol

from logging_config import get_logger
from prompts import FALLBACK_REPLY, REPLY_TEMPLATES

logger = get_logger("self_reliance.responders")


class ResponseProvider(Protocol):
    """
    Anything that turns a user prompt into reply text.

    A real deployment plugs a language-model call in here; the tracker
    only ever calls it after the usage has been recorded.
    """

    def respond(self, prompt: str) -> str:
        ...


# ---------- Canned responder ----------

class CannedResponder:
    """
    Simulated assistant: picks one of the reply templates and quotes
    the user's question back into it.
    """

    def __init__(
        self,
        templates: Optional[List[str]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.templates = list(REPLY_TEMPLATES if templates is None else templates)
        if not self.templates:
            raise ValueError("CannedResponder needs at least one template")
        self._rng = rng or random.Random()

    def respond(self, prompt: str) -> str:
        template = self._rng.choice(self.templates)
        return template.format(prompt=prompt.strip())


class FixedResponder:
    """Always returns the same text. Handy for tests and demos."""

    def __init__(self, text: str):
        self.text = text

    def respond(self, prompt: str) -> str:
        return self.text


def safe_respond(provider: ResponseProvider, prompt: str) -> str:
    """
    Call the provider, falling back to a fixed nudge if it fails
    or comes back empty.
    """
    try:
        reply = provider.respond(prompt)
    except Exception as e:
        logger.exception(f"Response provider {type(provider).__name__} failed: {e}")
        return FALLBACK_REPLY

    reply = (reply or "").strip()
    if not reply:
        logger.warning(f"Response provider {type(provider).__name__} returned an empty reply")
        return FALLBACK_REPLY
    return reply
