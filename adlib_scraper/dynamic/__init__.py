"""Browser-driven interaction with the ads library search UI.

Components:
    - browser_engine: Playwright browser lifecycle and overlay dismissal
    - element_resolver: Fallback locator cascade for unstable controls
    - dropdown_machine: Keyboard-driven dropdown state machine
    - network_capture: Classified response capture
"""

from .browser_engine import BrowserConfig, PlaywrightEngine, dismiss_overlays
from .element_resolver import ElementResolver, LocatorStrategy, LocatorTarget, ResolvedElement
from .dropdown_machine import DropdownChecks, DropdownInteractionMachine, DropdownSession, DropdownState
from .network_capture import NetworkCapture

__all__ = [
    'BrowserConfig',
    'PlaywrightEngine',
    'dismiss_overlays',
    'ElementResolver',
    'LocatorStrategy',
    'LocatorTarget',
    'ResolvedElement',
    'DropdownChecks',
    'DropdownInteractionMachine',
    'DropdownSession',
    'DropdownState',
    'NetworkCapture',
]
