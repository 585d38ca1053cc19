import pytest

from adlib_scraper.core.errors import ResolutionError
from adlib_scraper.dynamic.element_resolver import ElementResolver, LocatorTarget
from conftest import FakeElement, FakePage


GEOMETRY_SELECTOR = 'input:not([type="hidden"])'
PLACEHOLDER_SELECTOR = 'input[placeholder*="Search" i]'
ROLE_SELECTOR = 'input[role="combobox"]'


@pytest.mark.asyncio
async def test_falls_through_to_geometry_strategy():
    third = FakeElement("third", visible=True, width=480)
    page = FakePage({
        GEOMETRY_SELECTOR: [
            FakeElement("first", visible=False),
            FakeElement("second", visible=False),
            third,
        ]
    })

    resolved = await ElementResolver(page).resolve(LocatorTarget.SEARCH_INPUT)

    assert resolved is not None
    assert resolved.element is third
    assert resolved.strategy == 'geometry'


@pytest.mark.asyncio
async def test_geometry_rejects_narrow_inputs():
    page = FakePage({GEOMETRY_SELECTOR: [FakeElement("narrow", width=150), FakeElement("edge", width=200)]})
    assert await ElementResolver(page).resolve(LocatorTarget.SEARCH_INPUT) is None


@pytest.mark.asyncio
async def test_no_visible_candidates_is_not_found():
    page = FakePage({
        PLACEHOLDER_SELECTOR: [FakeElement(visible=False)],
        GEOMETRY_SELECTOR: [FakeElement(visible=False)],
    })
    resolver = ElementResolver(page)

    assert await resolver.resolve(LocatorTarget.SEARCH_INPUT) is None
    with pytest.raises(ResolutionError):
        await resolver.require(LocatorTarget.SEARCH_INPUT)


@pytest.mark.asyncio
async def test_first_productive_strategy_wins_without_merging():
    attribute_hit = FakeElement("attribute")
    geometry_hit = FakeElement("geometry", width=900)
    page = FakePage({
        PLACEHOLDER_SELECTOR: [FakeElement("hidden", visible=False), attribute_hit],
        GEOMETRY_SELECTOR: [geometry_hit],
    })

    resolved = await ElementResolver(page).resolve(LocatorTarget.SEARCH_INPUT)

    assert resolved.element is attribute_hit
    assert resolved.strategy == 'attribute'
    assert GEOMETRY_SELECTOR not in page.queried


@pytest.mark.asyncio
async def test_invisible_attribute_matches_fall_through_to_role():
    role_hit = FakeElement("role")
    page = FakePage({
        PLACEHOLDER_SELECTOR: [FakeElement(visible=False)],
        ROLE_SELECTOR: [role_hit],
    })

    resolved = await ElementResolver(page).resolve(LocatorTarget.SEARCH_INPUT)
    assert resolved.element is role_hit
    assert resolved.strategy == 'role'


@pytest.mark.asyncio
async def test_label_is_substituted_into_trigger_selectors():
    trigger = FakeElement("country")
    page = FakePage({'[role="combobox"]:has-text("United States")': [trigger]})
    resolver = ElementResolver(page)

    resolved = await resolver.resolve(LocatorTarget.COUNTRY_DROPDOWN_TRIGGER, "United States")
    assert resolved.element is trigger

    assert await resolver.resolve(LocatorTarget.COUNTRY_DROPDOWN_TRIGGER) is None


@pytest.mark.asyncio
async def test_selector_errors_and_detached_elements_are_skipped():
    wide = FakeElement("wide", width=640)
    page = FakePage(
        {
            'input[type="search"]': [FakeElement("detached", visibility_error=True)],
            GEOMETRY_SELECTOR: [wide],
        },
        failing_selectors=[PLACEHOLDER_SELECTOR],
    )

    resolved = await ElementResolver(page).resolve(LocatorTarget.SEARCH_INPUT)
    assert resolved.element is wide
