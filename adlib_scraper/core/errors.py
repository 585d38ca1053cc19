"""Failure types raised by the scraping session.

Each failure carries the ``stage`` it happened in so the orchestrator can
print a precise diagnostic before giving up on the run.

Taxonomy:
    - ResolutionError: no visible element found by any locator strategy
    - InteractionVerificationError: a DOM check after an action did not hold
    - WaitTimeoutError: a bounded wait elapsed
    - PayloadParseError: a captured payload could not be parsed/extracted
    - TransportError: the browser or network layer itself failed
"""

from typing import Optional


class ScraperError(Exception):
    """Base class for every failure raised by adlib_scraper."""

    def __init__(self, message: str, stage: Optional[str] = None, original: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.original = original

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class ResolutionError(ScraperError):
    """No locator strategy produced a visible element."""


class InteractionVerificationError(ScraperError):
    """A DOM-state assertion after a UI action failed."""


class DropdownInteractionError(InteractionVerificationError):
    """A dropdown transition check failed.

    Attributes:
        phase: Transition that failed (open, focus_search, focus_option, filter, commit)
        session: DropdownSession snapshot at the time of failure
    """

    def __init__(self, phase: str, reason: str, session=None):
        super().__init__(f"{phase}: {reason}", stage='dropdown')
        self.phase = phase
        self.reason = reason
        self.session = session


class WaitTimeoutError(ScraperError):
    """A bounded wait elapsed before its condition held."""


class PayloadParseError(ScraperError):
    """A captured payload was not valid JSON or extraction failed."""

    def __init__(self, message: str, sequence_index: int, original: Optional[Exception] = None):
        super().__init__(message, stage='parse', original=original)
        self.sequence_index = sequence_index


class TransportError(ScraperError):
    """The browser or network layer failed."""
