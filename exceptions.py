"""Exception hierarchy for the self-reliance tracker."""

from typing import Optional


class SelfRelianceError(Exception):
    """Base exception for all tracker errors."""


# Admission
class AdmissionError(SelfRelianceError):
    """The assistant may not be invoked right now."""


class LimitExceeded(AdmissionError):
    """The daily invocation cap has been reached."""

    def __init__(self, count: int, daily_limit: int):
        super().__init__(f"Daily limit reached ({count}/{daily_limit} uses today)")
        self.count = count
        self.daily_limit = daily_limit


class CooldownActive(AdmissionError):
    """Not enough time has passed since the last invocation."""

    def __init__(self, seconds_left: float):
        super().__init__(f"Cooldown active, {seconds_left:.0f}s left")
        self.seconds_left = seconds_left


# Storage
class StorageUnavailable(SelfRelianceError):
    """The persistence layer could not be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
