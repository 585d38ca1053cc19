from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from adlib_scraper.dynamic.browser_engine import PlaywrightEngine, dismiss_overlays
from conftest import FakePage


class TestDismissOverlays:
    @pytest.mark.asyncio
    async def test_first_clickable_consent_button_wins(self):
        page = FakePage()
        page.clickable = {'button:has-text("Accept all")', 'button:has-text("OK")'}

        result = await dismiss_overlays(page, timeout=5)

        assert result == "clicked:Accept all"
        assert page.clicked == ['button:has-text("Accept all")']
        assert page.evaluations == []

    @pytest.mark.asyncio
    async def test_falls_back_to_hiding_overlays(self):
        page = FakePage()
        page.evaluate_result = 2

        result = await dismiss_overlays(page, button_texts=("Accept",), timeout=5)

        assert result == "hidden:2"
        assert len(page.evaluations) == 1

    @pytest.mark.asyncio
    async def test_nothing_to_dismiss(self):
        page = FakePage()
        page.evaluate_result = 0

        assert await dismiss_overlays(page, button_texts=("Accept",), timeout=5) == "none"

    @pytest.mark.asyncio
    async def test_script_failure_is_not_fatal(self):
        page = MagicMock()
        page.click = AsyncMock(side_effect=PlaywrightError("detached"))
        page.evaluate = AsyncMock(side_effect=PlaywrightError("execution context destroyed"))

        assert await dismiss_overlays(page, button_texts=("Accept",), timeout=5) == "none"


class TestCleanup:
    def make_engine(self, closed, failing=()):
        engine = PlaywrightEngine()

        def resource(name):
            mock = MagicMock()

            async def close():
                closed.append(name)
                if name in failing:
                    raise PlaywrightError(f"{name} already closed")

            mock.close = close
            return mock

        engine.page = resource('page')
        engine.context = resource('context')
        engine.browser = resource('browser')
        engine.playwright = MagicMock()
        engine.playwright.stop = AsyncMock()
        return engine

    @pytest.mark.asyncio
    async def test_closes_page_context_browser_in_order(self):
        closed = []
        engine = self.make_engine(closed)
        playwright = engine.playwright

        await engine.cleanup()

        assert closed == ['page', 'context', 'browser']
        playwright.stop.assert_awaited_once()
        assert engine.page is None and engine.browser is None

    @pytest.mark.asyncio
    async def test_failing_close_does_not_block_the_rest(self):
        closed = []
        engine = self.make_engine(closed, failing=('page', 'context'))
        playwright = engine.playwright

        await engine.cleanup()

        assert closed == ['page', 'context', 'browser']
        playwright.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cleanup_without_launch(self):
        engine = PlaywrightEngine()

        await engine.cleanup()

        assert engine.playwright is None
