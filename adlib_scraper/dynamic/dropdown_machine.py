"""Keyboard-driven state machine for custom dropdown widgets.

The country and category widgets are proprietary controls with no
selection API. They are operated the way a keyboard user would, and the
DOM is checked after every step instead of assuming the step worked.

States:
    CLOSED -> OPENED -> SEARCH_FOCUSED -> FILTERED -> COMMITTED
    any state -> FAILED(reason)

Country:   click trigger, ArrowDown, Tab until the "Search" input has focus,
           type the country, confirm that options were filtered, Enter.
Category:  click trigger, Tab onto the first option, optionally type the
           category name (jump-to-match), Enter.

Every success check lives in DropdownChecks so it can be replaced when the
widget markup changes, without touching the transition logic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.errors import DropdownInteractionError
from .element_resolver import ElementResolver, LocatorTarget


class DropdownState(Enum):
    CLOSED = "closed"
    OPENED = "opened"
    SEARCH_FOCUSED = "search_focused"
    FILTERED = "filtered"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass
class DropdownSession:
    """Ephemeral state of one dropdown selection."""
    target: LocatorTarget
    opened: bool = False
    search_focused: bool = False
    typed: str = ""
    committed: bool = False
    state: DropdownState = DropdownState.CLOSED
    failure: Optional[str] = None
    history: List[DropdownState] = field(default_factory=lambda: [DropdownState.CLOSED])

    def advance(self, state: DropdownState):
        self.state = state
        self.history.append(state)


ACTIVE_ELEMENT_JS = """
() => {
    const el = document.activeElement;
    if (!el || el === document.body) return null;
    const placeholder = el.getAttribute('placeholder') || '';
    const role = el.getAttribute('role') || '';
    const marker = '[role="listbox"], [role="menu"], [class*="dropdown" i], [class*="menu" i], [class*="listbox" i]';
    const ancestor = el.parentElement ? el.parentElement.closest(marker) : null;
    return {
        tag: el.tagName.toLowerCase(),
        placeholder: placeholder,
        role: role,
        in_listbox: !!ancestor,
        is_search_combobox: el.tagName === 'INPUT' && role === 'combobox'
            && placeholder.toLowerCase().includes('search')
    };
}
"""

FILTER_STATE_JS = """
(text) => {
    const needle = text.toLowerCase();
    const visible = (el) => {
        const r = el.getBoundingClientRect();
        const s = getComputedStyle(el);
        return r.width > 0 && r.height > 0 && s.display !== 'none' && s.visibility !== 'hidden';
    };
    const options = [...document.querySelectorAll('[role="option"]')].filter(visible);
    return {
        matched: options.some(o => (o.innerText || '').toLowerCase().includes(needle)),
        count: options.length
    };
}
"""

LISTBOX_CLOSED_JS = """
() => {
    const listbox = document.querySelector('[role="listbox"]');
    if (!listbox) return true;
    const s = getComputedStyle(listbox);
    const r = listbox.getBoundingClientRect();
    return s.display === 'none' || s.visibility === 'hidden' || r.width === 0 || r.height === 0;
}
"""


class DropdownChecks:
    """DOM queries backing each transition check.

    These encode the current markup of a third-party widget; subclass and
    inject into DropdownInteractionMachine to adapt to markup changes.
    """

    search_placeholder = "search"
    filter_threshold = 10

    async def active_element(self, page: Any) -> Optional[Dict]:
        return await page.evaluate(ACTIVE_ELEMENT_JS)

    async def filter_state(self, page: Any, text: str) -> Dict:
        return await page.evaluate(FILTER_STATE_JS, text)

    async def listbox_closed(self, page: Any) -> bool:
        return bool(await page.evaluate(LISTBOX_CLOSED_JS))

    def is_search_input(self, active: Optional[Dict]) -> bool:
        """Focused element is an input whose placeholder contains 'Search'."""
        if not active:
            return False
        return (
            active.get('tag') == 'input'
            and self.search_placeholder in (active.get('placeholder') or '').lower()
        )

    def is_option_focus(self, active: Optional[Dict]) -> bool:
        """Focus landed on a selectable option, or at least left the search box."""
        if not active:
            return False
        return (
            active.get('role') == 'option'
            or bool(active.get('in_listbox'))
            or not active.get('is_search_combobox')
        )

    def is_filtered(self, state: Dict) -> bool:
        return bool(state.get('matched')) or state.get('count', 0) < self.filter_threshold


class DropdownInteractionMachine:
    """
    Drive one dropdown widget from closed to a committed selection.

    Each public method creates a fresh DropdownSession and either returns it
    in COMMITTED state or raises DropdownInteractionError naming the phase
    whose check did not hold.
    """

    def __init__(
        self,
        page: Any,
        resolver: ElementResolver,
        checks: Optional[DropdownChecks] = None,
        settle_delay: int = 800,
        max_focus_steps: int = 8,
        key_delay: int = 60
    ):
        self.page = page
        self.resolver = resolver
        self.checks = checks or DropdownChecks()
        self.settle_delay = settle_delay
        self.max_focus_steps = max_focus_steps
        self.key_delay = key_delay

    async def select_country(self, trigger_label: str, country: str) -> DropdownSession:
        """
        Select a country through the searchable country widget.

        Args:
            trigger_label: Label the country trigger currently displays
            country: Exact option label to type and confirm
        """
        session = DropdownSession(target=LocatorTarget.COUNTRY_DROPDOWN_TRIGGER)
        print(f"  [DROPDOWN] Country: '{trigger_label}' -> '{country}'")

        await self._open(session, trigger_label)
        await self._focus_search(session)
        await self._filter(session, country)
        await self._commit(session)

        print(f"  [DROPDOWN] ✓ Country set to '{country}'")
        return session

    async def select_category(self, trigger_label: str, category: Optional[str] = None) -> DropdownSession:
        """
        Select an ad category; with no category the default option is accepted.

        Args:
            trigger_label: Label the category trigger currently displays
            category: Option name to jump to, or None/empty for the default
        """
        session = DropdownSession(target=LocatorTarget.CATEGORY_DROPDOWN_TRIGGER)
        print(f"  [DROPDOWN] Category: '{trigger_label}' -> '{category or '(default)'}'")

        await self._open(session, trigger_label)
        await self._focus_option(session)

        if category:
            await self.page.keyboard.type(category, delay=self.key_delay)
            session.typed = category
            await self._settle()

        await self._commit(session)

        print(f"  [DROPDOWN] ✓ Category set to '{category or '(default)'}'")
        return session

    async def _open(self, session: DropdownSession, trigger_label: str):
        resolved = await self.resolver.resolve(session.target, trigger_label)
        if resolved is None:
            self._fail(session, 'open', f"no visible trigger showing '{trigger_label}'")

        try:
            await resolved.element.click()
        except Exception as e:
            self._fail(session, 'open', f"clicking trigger failed: {e}")

        # The widget exposes no "opened" signal; wait for its render
        await self._settle()
        session.opened = True
        session.advance(DropdownState.OPENED)

    async def _focus_search(self, session: DropdownSession):
        # ArrowDown arms keyboard navigation inside the widget
        await self.page.keyboard.press("ArrowDown")

        for attempt in range(1, self.max_focus_steps + 1):
            await self.page.keyboard.press("Tab")
            active = await self.checks.active_element(self.page)
            if self.checks.is_search_input(active):
                print(f"    ✓ Search box focused after {attempt} Tab press(es)")
                session.search_focused = True
                session.advance(DropdownState.SEARCH_FOCUSED)
                return

        self._fail(
            session, 'focus_search',
            f"no input with a 'Search' placeholder focused after {self.max_focus_steps} Tab presses"
        )

    async def _focus_option(self, session: DropdownSession):
        await self.page.keyboard.press("Tab")
        active = await self.checks.active_element(self.page)
        if not self.checks.is_option_focus(active):
            self._fail(session, 'focus_option', f"focus did not reach an option (active element: {active})")

        session.search_focused = True
        session.advance(DropdownState.SEARCH_FOCUSED)

    async def _filter(self, session: DropdownSession, text: str):
        # Key events, not value assignment, so the widget's filter listeners fire
        await self.page.keyboard.type(text, delay=self.key_delay)
        session.typed = text
        await self._settle()

        state = await self.checks.filter_state(self.page, text)
        if not self.checks.is_filtered(state):
            self._fail(
                session, 'filter',
                f"no visible option contains '{text}' and {state.get('count')} options remain "
                f"(threshold {self.checks.filter_threshold})"
            )
        session.advance(DropdownState.FILTERED)

    async def _commit(self, session: DropdownSession):
        await self.page.keyboard.press("Enter")
        await self._settle()

        if not await self.checks.listbox_closed(self.page):
            self._fail(session, 'commit', "listbox still rendered after confirm")

        session.committed = True
        session.advance(DropdownState.COMMITTED)

    async def _settle(self):
        await self.page.wait_for_timeout(self.settle_delay)

    def _fail(self, session: DropdownSession, phase: str, reason: str):
        session.failure = f"{phase}: {reason}"
        session.advance(DropdownState.FAILED)
        print(f"  [DROPDOWN] ✗ {session.target.value} failed at {phase}: {reason}")
        raise DropdownInteractionError(phase, reason, session)
