"""Resolve UI controls whose markup is not guaranteed stable.

Each semantic target maps to an ordered list of locator strategies:
- attribute match (placeholder, aria-label, type, popup markers)
- ARIA-role match
- text match (dropdown triggers) or generic tag filtered by geometry (inputs)

Strategies are tried in priority order and never merged: the first strategy
that yields at least one visible element wins, and its first visible match
is returned.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.errors import ResolutionError


class LocatorTarget(Enum):
    """Semantic role of a control on the search page."""
    SEARCH_INPUT = "search_input"
    COUNTRY_DROPDOWN_TRIGGER = "country_dropdown_trigger"
    CATEGORY_DROPDOWN_TRIGGER = "category_dropdown_trigger"


@dataclass(frozen=True)
class LocatorStrategy:
    """One way of finding a target.

    Selectors may contain ``{label}``, filled with the widget's current
    display label at resolution time. ``min_width`` rejects visible matches
    narrower than the threshold (decorative or collapsed inputs).
    """
    name: str
    selectors: Tuple[str, ...]
    min_width: Optional[float] = None


GEOMETRY_MIN_WIDTH = 200

LOCATOR_STRATEGIES: Dict[LocatorTarget, Tuple[LocatorStrategy, ...]] = {
    LocatorTarget.SEARCH_INPUT: (
        LocatorStrategy('attribute', (
            'input[type="search"]',
            'input[placeholder*="Search" i]',
            'input[aria-label*="Search" i]',
        )),
        LocatorStrategy('role', (
            'input[role="combobox"]',
            '[role="searchbox"]',
        )),
        LocatorStrategy('geometry', (
            'input:not([type="hidden"])',
        ), min_width=GEOMETRY_MIN_WIDTH),
    ),
    LocatorTarget.COUNTRY_DROPDOWN_TRIGGER: (
        LocatorStrategy('attribute', (
            '[aria-haspopup="listbox"]:has-text("{label}")',
            '[aria-expanded]:has-text("{label}")',
        )),
        LocatorStrategy('role', (
            '[role="combobox"]:has-text("{label}")',
            '[role="button"]:has-text("{label}")',
        )),
        LocatorStrategy('text', (
            'text="{label}"',
            'text={label}',
        )),
    ),
    LocatorTarget.CATEGORY_DROPDOWN_TRIGGER: (
        LocatorStrategy('attribute', (
            '[aria-haspopup="listbox"]:has-text("{label}")',
            '[aria-expanded]:has-text("{label}")',
        )),
        LocatorStrategy('role', (
            '[role="combobox"]:has-text("{label}")',
            '[role="button"]:has-text("{label}")',
        )),
        LocatorStrategy('text', (
            'text="{label}"',
            'text={label}',
        )),
    ),
}


@dataclass
class ResolvedElement:
    """A visible element and the strategy that found it."""
    target: LocatorTarget
    strategy: str
    selector: str
    element: Any


def _escape_label(label: str) -> str:
    return label.replace('\\', '\\\\').replace('"', '\\"')


class ElementResolver:
    """
    Find the first visible element for a semantic target.

    Pure read of DOM state: no clicks, no focus changes. Not-found is a
    normal return value (None); callers decide whether it is fatal.
    """

    def __init__(self, page: Any, strategies: Optional[Dict[LocatorTarget, Tuple[LocatorStrategy, ...]]] = None):
        self.page = page
        self.strategies = strategies or LOCATOR_STRATEGIES

    async def resolve(self, target: LocatorTarget, label: Optional[str] = None) -> Optional[ResolvedElement]:
        """
        Run the strategy cascade for a target.

        Args:
            target: Semantic control to find
            label: Current display label, required by label-based selectors

        Returns:
            ResolvedElement, or None if no strategy yields a visible match
        """
        for strategy in self.strategies.get(target, ()):
            found = await self._first_visible(strategy, label)
            if found is not None:
                selector, element = found
                print(f"    [RESOLVE] ✓ {target.value} via {strategy.name} strategy ({selector})")
                return ResolvedElement(
                    target=target,
                    strategy=strategy.name,
                    selector=selector,
                    element=element
                )

        print(f"    [RESOLVE] ✗ {target.value}: no visible match")
        return None

    async def require(self, target: LocatorTarget, label: Optional[str] = None) -> ResolvedElement:
        """Like ``resolve`` but raises ResolutionError when nothing is found."""
        resolved = await self.resolve(target, label)
        if resolved is None:
            detail = f" with label '{label}'" if label else ""
            raise ResolutionError(
                f"No visible element for {target.value}{detail}",
                stage=target.value
            )
        return resolved

    async def _first_visible(self, strategy: LocatorStrategy, label: Optional[str]) -> Optional[Tuple[str, Any]]:
        for selector in self._expand(strategy, label):
            try:
                elements = await self.page.query_selector_all(selector)
            except Exception as e:
                print(f"    ⚠ Selector failed ({selector}): {e}")
                continue

            for element in elements:
                if await self._is_usable(element, strategy):
                    return selector, element

        return None

    def _expand(self, strategy: LocatorStrategy, label: Optional[str]) -> List[str]:
        selectors = []
        for selector in strategy.selectors:
            if '{label}' in selector:
                if not label:
                    continue
                selector = selector.replace('{label}', _escape_label(label))
            selectors.append(selector)
        return selectors

    async def _is_usable(self, element: Any, strategy: LocatorStrategy) -> bool:
        """Visible, and wide enough when the strategy sets a width threshold."""
        try:
            if not await element.is_visible():
                return False

            if strategy.min_width is not None:
                bbox = await element.bounding_box()
                if not bbox or bbox.get('width', 0) <= strategy.min_width:
                    return False

            return True
        except Exception:
            # Detached or re-rendered between query and inspection
            return False
