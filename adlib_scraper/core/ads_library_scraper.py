"""Ads library scraper: drives the search UI and rebuilds ads from network payloads.

The page renders its results from GraphQL/XHR responses, so the scraper
never reads ads from the DOM. It brings the UI into a known search state,
records every response the classifier accepts, and mines those payloads
for ad records once the session is over.

Workflow:
    1. Navigate, wait for network idle (bounded)
    2. Wait for the readiness text marker
    3. Resolve and focus the search input
    4. Dismiss consent dialogs/overlays (best effort)
    5. Select country, then category (dropdown state machine)
    6. Type and submit the search term
    7. Wait for the first accepted payload
    8. Scroll N rounds to trigger pagination
    9. Wait for a final network idle (bounded)
    10. Parse payloads -> extract -> dedupe -> save

Steps 1-7 are hard gates: any failure aborts the run after a diagnostic
screenshot (plus DOM snapshot for resolution/verification failures).

Usage:
    config = ScraperConfig(country="Germany", query="solar panels")
    scraper = AdsLibraryScraper(config)
    records = asyncio.run(scraper.run())
"""

import asyncio
import json
import random
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import ScraperConfig
from .errors import (
    InteractionVerificationError,
    PayloadParseError,
    ResolutionError,
    ScraperError,
    TransportError,
    WaitTimeoutError,
)
from .models import AdRecord, CapturedPayload
from ..classifiers.base_classifier import BaseResponseClassifier
from ..classifiers.response_classifier import build_classifier
from ..dynamic.browser_engine import BrowserConfig, PlaywrightEngine, dismiss_overlays
from ..dynamic.dropdown_machine import DropdownInteractionMachine
from ..dynamic.element_resolver import ElementResolver, LocatorTarget
from ..dynamic.network_capture import NetworkCapture
from ..extractors.deduplicator import dedupe_records
from ..extractors.record_extractor import RecordExtractor
from ..storage.result_storage import ResultStorage


# Anti-hijacking prefix some endpoints put in front of JSON bodies
JSON_GUARD_PREFIX = "for (;;);"


def build_start_url(base_url: str, country: str = "", category: str = "", query: str = "") -> str:
    """
    Append pre-fill query parameters to the start URL.

    Empty values are omitted; with no values the base URL is returned as is.
    """
    params = []
    if country:
        params.append(f"country={quote(country, safe='')}")
    if category:
        params.append(f"ad_type={quote(category, safe='')}")
    if query:
        params.append(f"search_terms={quote(query, safe='')}")

    if not params:
        return base_url
    return f"{base_url.rstrip('/')}/?{'&'.join(params)}"


class AdsLibraryScraper:
    """Single-session scraper for the ads library search UI.

    Attributes:
        config: ScraperConfig with target, search state and timeouts
        storage: Sink for raw payloads, results and diagnostics
        engine: PlaywrightEngine owning browser, context and page
        capture: NetworkCapture recording accepted responses
        skipped_payloads: PayloadParseError for every payload that failed to parse
    """

    def __init__(
        self,
        config: ScraperConfig,
        storage: Optional[ResultStorage] = None,
        engine: Optional[PlaywrightEngine] = None,
        classifier: Optional[BaseResponseClassifier] = None,
        extractor: Optional[RecordExtractor] = None
    ):
        self.config = config
        self.storage = storage or ResultStorage(config.output_dir, config.screenshot_dir)
        self.engine = engine or PlaywrightEngine(BrowserConfig(
            headless=config.headless,
            viewport={'width': config.viewport_width, 'height': config.viewport_height},
            user_agent=config.user_agent
        ))
        self.classifier = classifier or build_classifier(config.classifier_mode)
        self.capture = NetworkCapture(self.classifier, self.storage, config.max_payloads)
        self.extractor = extractor or RecordExtractor()

        self.page: Any = None
        self.resolver: Optional[ElementResolver] = None
        self.dropdowns: Optional[DropdownInteractionMachine] = None
        self.skipped_payloads: List[PayloadParseError] = []

    async def run(self) -> List[AdRecord]:
        """
        Execute one full scraping session.

        Returns:
            Deduplicated records in extraction order

        Raises:
            ScraperError subclass describing the first fatal failure
        """
        print(f"\n{'='*80}")
        print("ADS LIBRARY SCRAPER")
        print(f"{'='*80}")
        print(f"Country: {self.config.country} | Category: {self.config.category or '(default)'} "
              f"| Query: {self.config.query or '(none)'}")
        print(f"Classifier: {self.classifier.name} | Scroll rounds: {self.config.scroll_rounds}\n")

        try:
            if not await self.engine.initialize():
                raise TransportError("Browser could not be launched", stage='launch')

            self.page = await self.engine.create_page()
            self.capture.attach_to_page(self.page)
            self.resolver = ElementResolver(self.page)
            self.dropdowns = DropdownInteractionMachine(
                self.page,
                self.resolver,
                settle_delay=self.config.settle_delay
            )

            await self._drive_session()

            print("  [PARSE] Finished scrolling, parsing collected payloads...")
            records = self.parse_payloads(self.capture.snapshot())
            self.storage.save_results(records)
            await self._capture_diagnostics('success', with_dom=False)
            return records

        except ScraperError as e:
            print(f"✗ Scraping run failed: {e}")
            with_dom = isinstance(e, (ResolutionError, InteractionVerificationError))
            await self._capture_diagnostics('error', with_dom=with_dom)
            raise
        except PlaywrightTimeoutError as e:
            print(f"✗ Scraping run timed out: {e}")
            await self._capture_diagnostics('error', with_dom=False)
            raise WaitTimeoutError(str(e), stage='browser', original=e) from e
        except PlaywrightError as e:
            print(f"✗ Browser error: {e}")
            await self._capture_diagnostics('error', with_dom=False)
            raise TransportError(str(e), stage='browser', original=e) from e
        except Exception as e:
            print(f"✗ Scraping run failed: {e}")
            await self._capture_diagnostics('error', with_dom=False)
            raise
        finally:
            await self.engine.cleanup()

    async def _drive_session(self):
        cfg = self.config

        # Step 1: navigation
        url = cfg.start_url
        if cfg.prefill_url_params:
            url = build_start_url(cfg.start_url, cfg.country_code, cfg.category, cfg.query)
        print(f"  [NAV] Navigating to: {url}")
        await self.engine.goto(url, timeout=cfg.navigation_timeout)
        await self.engine.wait_for_network_idle(cfg.network_idle_timeout)

        if not cfg.headless:
            print("  [NAV] Running headful - if a CAPTCHA appears, solve it in the browser window.")

        # Step 2: readiness marker
        await self._wait_until_ready()

        # Step 3: search input
        await self._focus_search_input()

        # Step 4: consent dialogs, never fatal
        print("  [PREP] Dismissing consent dialogs/overlays...")
        await dismiss_overlays(self.page, timeout=cfg.overlay_click_timeout)

        # Payloads from page load do not count as search results
        baseline = self.capture.count

        # Step 5: dropdowns
        await self.dropdowns.select_country(cfg.country_trigger_label, cfg.country)
        await self.dropdowns.select_category(cfg.category_trigger_label, cfg.category or None)

        # Step 6: search term
        if cfg.query:
            baseline = self.capture.count
            await self._submit_query(cfg.query)

        # Step 7: first payload proves the search ran
        print(f"  [CAPTURE] Waiting for first search payload (up to {cfg.first_response_timeout} ms)...")
        await self.capture.wait_for_payloads(baseline + 1, cfg.first_response_timeout)
        print("  [CAPTURE] ✓ Search results payload observed")

        # Step 8: pagination
        await self._scroll_for_more()

        # Step 9: trailing responses
        await self.engine.wait_for_network_idle(cfg.final_idle_timeout)

    async def _wait_until_ready(self):
        marker = self.config.readiness_text
        try:
            await self.page.wait_for_selector(
                f'text={marker}',
                state='visible',
                timeout=self.config.readiness_timeout
            )
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"Readiness marker '{marker}' not visible within {self.config.readiness_timeout} ms",
                stage='readiness',
                original=e
            ) from e
        print(f"  [READY] ✓ '{marker}' visible")

    async def _focus_search_input(self):
        resolved = await self.resolver.require(LocatorTarget.SEARCH_INPUT)
        await resolved.element.focus()

        focused = await resolved.element.evaluate("el => el === document.activeElement")
        if not focused:
            raise InteractionVerificationError(
                "Search input resolved but did not become the active element",
                stage='search_input'
            )
        print("  [SEARCH] ✓ Search input focused")

    async def _submit_query(self, query: str):
        """Type the query key by key with human-like pacing, then submit."""
        resolved = await self.resolver.require(LocatorTarget.SEARCH_INPUT)
        element = resolved.element
        await element.click()
        await element.fill("")

        low, high = self.config.typing_delay_range
        for char in query:
            await self.page.keyboard.type(char)
            await asyncio.sleep(random.uniform(low, high))

        value = await element.input_value()
        if query not in value:
            raise InteractionVerificationError(
                f"Search input holds '{value}' after typing '{query}'",
                stage='search_query'
            )

        await self.page.keyboard.press("Enter")
        print(f"  [SEARCH] ✓ Submitted query '{query}'")

    async def _scroll_for_more(self):
        rounds = self.config.scroll_rounds
        for i in range(rounds):
            print(f"  [SCROLL] Round {i + 1}/{rounds}")
            before = self.capture.count
            await self.page.evaluate(
                "(factor) => { window.scrollBy(0, window.innerHeight * factor); }",
                self.config.scroll_factor
            )

            try:
                await self.capture.wait_for_payloads(before + 1, self.config.scroll_response_timeout)
                print("    ✓ New payload after scroll")
            except WaitTimeoutError:
                print("    → No network response in this scroll interval")

            await self.page.wait_for_timeout(self.config.scroll_pause)

    def parse_payloads(self, payloads: Iterable[CapturedPayload]) -> List[AdRecord]:
        """
        Parse captured payloads, extract records and deduplicate them.

        A payload that fails to parse is recorded in ``skipped_payloads``
        and skipped; the remaining payloads are still processed.
        """
        parsed: List[AdRecord] = []
        self.skipped_payloads = []

        for payload in sorted(payloads, key=lambda p: p.sequence_index):
            try:
                body = payload.raw_body.lstrip()
                if body.startswith(JSON_GUARD_PREFIX):
                    body = body[len(JSON_GUARD_PREFIX):]
                data = json.loads(body)
                parsed.extend(self.extractor.extract(data))
            except Exception as e:
                error = PayloadParseError(
                    f"payload #{payload.sequence_index} skipped: {e}",
                    sequence_index=payload.sequence_index,
                    original=e
                )
                self.skipped_payloads.append(error)
                print(f"  [PARSE] ⚠ {error}")

        deduped = dedupe_records(parsed)
        print(f"  [PARSE] Parsed {len(parsed)} items -> {len(deduped)} deduped")
        return deduped

    async def _capture_diagnostics(self, label: str, with_dom: bool):
        """Save a screenshot (and optionally the DOM); failures are printed, never raised."""
        if self.page is None:
            return

        try:
            shot = await self.engine.screenshot()
            if shot:
                path = self.storage.save_screenshot(shot, label)
                print(f"  📸 Screenshot: {path}")

            if with_dom:
                html = await self.engine.dom_snapshot()
                if html:
                    path = self.storage.save_dom_snapshot(html, label)
                    print(f"  📄 DOM snapshot: {path}")
        except Exception as e:
            print(f"  ⚠ Diagnostic capture failed: {e}")
