import random
from typing import Optional

from prompts import REFLECTION_QUESTIONS


class ReflectionGate:
    """
    Interrupts long submissions with a reflection prompt.

    Stateless: the caller decides what "continue anyway" means for
    the submission it is holding.
    """

    def __init__(self, threshold: int = 50, rng: Optional[random.Random] = None):
        self.threshold = threshold
        self._rng = rng or random.Random()

    def should_intercept(self, input_length: int) -> bool:
        return input_length > self.threshold

    def reflection_prompt(self) -> str:
        return self._rng.choice(REFLECTION_QUESTIONS)
