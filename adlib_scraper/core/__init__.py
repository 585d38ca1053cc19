# adlib_scraper/core/__init__.py
"""Core scraper components."""

from .config import ScraperConfig
from .errors import (
    ScraperError,
    ResolutionError,
    InteractionVerificationError,
    DropdownInteractionError,
    WaitTimeoutError,
    PayloadParseError,
    TransportError,
)
from .models import AdRecord, CapturedPayload

__all__ = [
    'ScraperConfig',
    'ScraperError',
    'ResolutionError',
    'InteractionVerificationError',
    'DropdownInteractionError',
    'WaitTimeoutError',
    'PayloadParseError',
    'TransportError',
    'AdRecord',
    'CapturedPayload',
]
