"""
Test fixtures for the ads library scraper.

Fake Playwright objects exposing just the surface the scraper uses, so
no browser is launched during tests.
"""
import asyncio

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from adlib_scraper.core.config import ScraperConfig


class FakeElement:
    """Stand-in for a Playwright ElementHandle."""

    def __init__(self, name="el", visible=True, width=300.0, height=30.0,
                 focusable=True, visibility_error=False):
        self.name = name
        self.visible = visible
        self.width = width
        self.height = height
        self.focusable = focusable
        self.visibility_error = visibility_error
        self.focused = False
        self.clicks = 0
        self.value = ""

    async def is_visible(self):
        if self.visibility_error:
            raise RuntimeError("element detached")
        return self.visible

    async def bounding_box(self):
        if not self.visible:
            return None
        return {'x': 0, 'y': 0, 'width': self.width, 'height': self.height}

    async def click(self, **kwargs):
        self.clicks += 1

    async def focus(self):
        self.focused = self.focusable

    async def fill(self, value):
        self.value = value

    async def input_value(self):
        return self.value

    async def evaluate(self, expression, arg=None):
        # Only used to ask whether this element is document.activeElement
        return self.focused

    def __repr__(self):
        return f"FakeElement({self.name})"


class FakeKeyboard:
    def __init__(self):
        self.presses = []
        self.typed = []
        self.target = None
        self.on_press = None

    async def press(self, key):
        self.presses.append(key)
        if self.on_press is not None:
            self.on_press(key)

    async def type(self, text, delay=None):
        self.typed.append(text)
        if self.target is not None:
            self.target.value += text


class FakePage:
    """Stand-in for a Playwright Page keyed by selector."""

    def __init__(self, selectors=None, failing_selectors=()):
        self.selectors = selectors or {}
        self.failing_selectors = set(failing_selectors)
        self.keyboard = FakeKeyboard()
        self.waits = []
        self.evaluations = []
        self.handlers = {}
        self.queried = []
        self.ready = True
        self.clickable = set()
        self.clicked = []
        self.evaluate_result = None

    async def wait_for_selector(self, selector, state=None, timeout=None):
        if not self.ready:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def click(self, selector, timeout=None):
        if selector not in self.clickable:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded clicking {selector}")
        self.clicked.append(selector)

    async def query_selector_all(self, selector):
        self.queried.append(selector)
        if selector in self.failing_selectors:
            raise ValueError(f"bad selector {selector}")
        return list(self.selectors.get(selector, []))

    async def wait_for_timeout(self, ms):
        self.waits.append(ms)

    async def evaluate(self, script, arg=None):
        self.evaluations.append((script, arg))
        return self.evaluate_result

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)


class FakeRequest:
    def __init__(self, headers=None):
        self.headers = headers or {}


class FakeResponse:
    """Stand-in for a Playwright Response."""

    def __init__(self, url, headers=None, request_headers=None, body="{}", delay=0.0, body_error=None):
        self.url = url
        self.headers = headers or {}
        self.request = FakeRequest(request_headers)
        self.status = 200
        self._body = body
        self._delay = delay
        self._body_error = body_error
        self.text_calls = 0

    async def text(self):
        self.text_calls += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._body_error:
            raise self._body_error
        return self._body


@pytest.fixture
def fast_config(tmp_path):
    """Configuration with every delay shrunk for tests."""
    return ScraperConfig(
        output_dir=str(tmp_path / "responses"),
        screenshot_dir=str(tmp_path / "screenshots"),
        settle_delay=0,
        scroll_pause=0,
        scroll_response_timeout=10,
        first_response_timeout=10,
        typing_delay_min=0,
        typing_delay_max=0,
    )
