import pytest

from storefront_tests.ui_testing.framework.element_actions import ElementActions
from storefront_tests.ui_testing.framework.errors import (
    MissingControlError,
    RetryExhaustedError,
    StaleElementError,
    WaitTimeoutError,
)
from storefront_tests.ui_testing.framework.locators import chain, css
from storefront_tests.ui_testing.framework.retry import RetryPolicy

from .fakes import FakeElement, detached_error


BUTTON = chain("Submit button", css("button.submit"))
EMAIL = chain("Email", css("input#email"))
PASSWORD = chain("Password", css("input#pass"))
SIZE = chain("Size select", css("select.size"))

SIZE_OPTIONS = [
    {"label": "Choose an Option...", "value": ""},
    {"label": "S", "value": "s"},
    {"label": "M", "value": "m"},
]


@pytest.fixture
def actions(page, waiter) -> ElementActions:
    return ElementActions(page, waiter, retry_policy=RetryPolicy(budget=2), action_timeout=0.1)


@pytest.mark.asyncio
async def test_click_scrolls_then_clicks_natively(page, actions):
    button = FakeElement("Submit")
    page.add(BUTTON, button)

    await actions.click(BUTTON)

    assert button.scrolls == 1
    assert button.clicks == 1
    assert button.js_clicks == 0


@pytest.mark.asyncio
async def test_scroll_is_idempotent(actions):
    button = FakeElement("Submit")

    await actions.scroll_into_view(button)
    await actions.scroll_into_view(button)

    assert button.scrolls == 2
    assert button.visible and button.clicks == 0


@pytest.mark.asyncio
async def test_intercepted_click_falls_back_to_javascript(page, actions):
    clicked = []
    button = FakeElement("Submit", intercepted=True, on_click=clicked.append)
    page.add(BUTTON, button)

    await actions.click(BUTTON)

    assert button.clicks == 0
    assert button.js_clicks == 1
    assert clicked == [button]


@pytest.mark.asyncio
async def test_stale_handle_is_re_resolved(page, actions):
    button = FakeElement("Submit")
    button.pending_errors.append(detached_error())
    page.add(BUTTON, button)

    await actions.click(BUTTON)

    assert button.clicks == 1
    assert page.queries.count("button.submit") == 2


@pytest.mark.asyncio
async def test_stale_resolved_handle_propagates(actions):
    button = FakeElement("Submit")
    button.detach()

    with pytest.raises(StaleElementError):
        await actions.click(button)


@pytest.mark.asyncio
async def test_hidden_element_exhausts_the_budget(page, actions):
    page.add(BUTTON, FakeElement("Submit", visible=False))

    with pytest.raises(RetryExhaustedError) as exc_info:
        await actions.click(BUTTON)

    assert exc_info.value.attempts == 2
    assert isinstance(exc_info.value.last_error, WaitTimeoutError)


@pytest.mark.asyncio
async def test_missing_element_exhausts_the_budget(actions):
    with pytest.raises(RetryExhaustedError):
        await actions.click(BUTTON)


@pytest.mark.asyncio
async def test_type_text_replaces_or_appends(page, actions):
    field = FakeElement(value="old")
    page.add(EMAIL, field)

    await actions.type_text(EMAIL, "user@example.com")
    assert field.value == "user@example.com"

    await actions.type_text(EMAIL, ".au", clear=False)
    assert field.value == "user@example.com.au"


@pytest.mark.asyncio
async def test_intercepted_typing_sets_value_with_javascript(page, actions):
    field = FakeElement(value="", intercepted=True)
    page.add(PASSWORD, field)

    await actions.type_text(PASSWORD, "Secret123!")

    assert field.value == "Secret123!"
    assert field.typed == []


@pytest.mark.asyncio
async def test_select_option_by_label_and_index(page, actions):
    select = FakeElement(options=SIZE_OPTIONS)
    page.add(SIZE, select)

    await actions.select_option(SIZE, label="M")
    assert select.selected_index == 2

    await actions.select_option(SIZE, index=1)
    assert select.selected_index == 1


@pytest.mark.asyncio
async def test_select_option_needs_exactly_one_choice(actions):
    with pytest.raises(ValueError):
        await actions.select_option(SIZE)
    with pytest.raises(ValueError):
        await actions.select_option(SIZE, label="M", index=1)


@pytest.mark.asyncio
async def test_intercepted_select_of_unknown_option(page, actions):
    page.add(SIZE, FakeElement(options=SIZE_OPTIONS, intercepted=True))

    with pytest.raises(MissingControlError):
        await actions.select_option(SIZE, label="XXL")


@pytest.mark.asyncio
async def test_intercepted_hover_dispatches_mouse_events(page, actions):
    menu = FakeElement("WOMEN", intercepted=True)
    page.add(BUTTON, menu)

    await actions.hover(BUTTON)

    assert menu.hovers == 0
    assert menu.js_hovers == 1


@pytest.mark.asyncio
async def test_scoped_click(page, actions):
    inner = FakeElement("Add to Cart")
    row = FakeElement().add(BUTTON, inner)
    page.add(BUTTON, FakeElement("elsewhere"))

    await actions.click(BUTTON, scope=row)

    assert inner.clicks == 1
