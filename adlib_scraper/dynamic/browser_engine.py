"""Browser automation engine for the ads library session."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright


@dataclass
class BrowserConfig:
    """Configuration for browser execution."""
    headless: bool = False
    timeout: int = 30000  # ms
    viewport: Dict = field(default_factory=lambda: {'width': 1280, 'height': 900})
    user_agent: str = (
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/120 Safari/537.36'
    )


# Affirmative button texts of common consent/cookie dialogs
CONSENT_BUTTON_TEXTS = (
    "Allow all cookies",
    "Accept all",
    "Accept All",
    "Allow all",
    "Accept",
    "I agree",
    "Got it",
    "OK",
)

HIDE_OVERLAYS_JS = """
() => {
    let hidden = 0;
    const vw = window.innerWidth, vh = window.innerHeight;
    document.querySelectorAll('body *').forEach(el => {
        const style = getComputedStyle(el);
        if (style.position !== 'fixed') return;
        const z = parseInt(style.zIndex, 10);
        if (isNaN(z) || z < 100) return;
        const r = el.getBoundingClientRect();
        // Only layers covering a large part of the viewport
        if (r.width * r.height < vw * vh * 0.3) return;
        el.style.display = 'none';
        el.style.pointerEvents = 'none';
        hidden += 1;
    });
    return hidden;
}
"""


class PlaywrightEngine:
    """
    Browser automation using Playwright.

    Handles browser launch, page creation, screenshots and cleanup.
    """

    def __init__(self, config: BrowserConfig = None):
        self.config = config or BrowserConfig()
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

    async def initialize(self) -> bool:
        """Initialize browser instance."""
        try:
            self.playwright = await async_playwright().start()

            self.browser = await self.playwright.chromium.launch(
                headless=self.config.headless
            )

            self.context = await self.browser.new_context(
                viewport=self.config.viewport,
                user_agent=self.config.user_agent
            )

            print(f"✓ Browser initialized (headless={self.config.headless})")
            return True

        except PlaywrightError as e:
            print(f"✗ Browser initialization failed: {e}")
            print("  Make sure browsers are installed: playwright install chromium")
            return False

    async def create_page(self) -> Any:
        """Create new page instance."""
        if not self.context:
            await self.initialize()

        self.page = await self.context.new_page()
        self.page.set_default_timeout(self.config.timeout)

        return self.page

    async def goto(self, url: str, timeout: int, wait_until: str = "domcontentloaded"):
        """
        Navigate to URL.

        Raises Playwright errors to the caller: a failed navigation is fatal.
        """
        await self.page.goto(url, wait_until=wait_until, timeout=timeout)
        print(f"  ✓ Loaded: {url}")

    async def wait_for_network_idle(self, timeout: int) -> bool:
        """Wait for network idle or until the bound elapses, whichever is first."""
        try:
            await self.page.wait_for_load_state("networkidle", timeout=timeout)
            return True
        except PlaywrightTimeoutError:
            print(f"    → Network not idle after {timeout} ms, continuing")
            return False

    async def screenshot(self) -> Optional[bytes]:
        """Take a screenshot for diagnostics; None if the page cannot be captured."""
        try:
            return await self.page.screenshot()
        except Exception as e:
            print(f"  ✗ Screenshot failed: {e}")
            return None

    async def dom_snapshot(self) -> Optional[str]:
        try:
            return await self.page.content()
        except Exception as e:
            print(f"  ✗ DOM snapshot failed: {e}")
            return None

    async def cleanup(self):
        """Close page, context and browser; each step independent of the others."""
        for name, resource in (('page', self.page), ('context', self.context), ('browser', self.browser)):
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as e:
                print(f"⚠ Cleanup warning ({name}): {e}")

        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                print(f"⚠ Cleanup warning (playwright): {e}")

        self.page = self.context = self.browser = self.playwright = None
        print("✓ Browser cleanup complete")


async def dismiss_overlays(
    page: Any,
    button_texts: Sequence[str] = CONSENT_BUTTON_TEXTS,
    timeout: int = 1500
) -> str:
    """
    Best-effort removal of consent dialogs and blocking overlays. Never raises.

    Tries clicking each affirmative button text; if none can be clicked,
    hides high z-index fixed-position layers covering the viewport.

    Returns:
        'clicked:<text>', 'hidden:<count>' or 'none'
    """
    for text in button_texts:
        try:
            await page.click(f'button:has-text("{text}")', timeout=timeout)
            print(f"    ✓ Dismissed dialog via '{text}'")
            return f"clicked:{text}"
        except Exception:
            continue

    try:
        hidden = await page.evaluate(HIDE_OVERLAYS_JS)
    except Exception as e:
        print(f"    ⚠ Overlay neutralization failed: {e}")
        return "none"

    if hidden:
        print(f"    ✓ Overlays neutralized ({hidden} hidden)")
        return f"hidden:{hidden}"
    return "none"
