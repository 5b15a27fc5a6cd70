"""
@PURPOSE: 测试弹窗关闭器 - 优先级 Skip → X 图标 → Got it, 异常不外泄
"""

from unittest.mock import MagicMock

import pytest

from src.browser.popup_dismisser import PopupDismisser
from src.browser.selector_config import DEFAULT_SELECTORS
from tests.mocks import build_meesho_page

POPUPS = DEFAULT_SELECTORS["popups"]


@pytest.fixture
def dismisser() -> PopupDismisser:
    return PopupDismisser(render_wait_ms=1500)


class TestPopupDismisser:
    """测试弹窗关闭."""

    @pytest.mark.asyncio
    async def test_no_popup_returns_none(self, dismisser, meesho_page):
        assert await dismisser.dismiss(meesho_page) is None
        assert meesho_page.events[0] == ("pause", 1500)

    @pytest.mark.asyncio
    async def test_skip_clicks_container(self, dismisser):
        page = build_meesho_page(popup="skip")

        assert await dismisser.dismiss(page, context="pending orders") == "skip"
        assert ("click", "skip-container") in page.events
        assert ("click", "skip-span") not in page.events

    @pytest.mark.asyncio
    async def test_skip_without_container_clicks_span(self, dismisser):
        page = build_meesho_page(popup="skip", skip_container=False)

        assert await dismisser.dismiss(page) == "skip"
        assert ("click", "skip-span") in page.events

    @pytest.mark.asyncio
    async def test_close_icon_force_click(self, dismisser):
        page = build_meesho_page(popup="close_icon")

        assert await dismisser.dismiss(page) == "close_icon"
        icon = page.locators[POPUPS["close_icon"]]
        assert icon.click_kwargs == [{"force": True}]

    @pytest.mark.asyncio
    async def test_got_it_button(self, dismisser):
        page = build_meesho_page(popup="got_it")

        assert await dismisser.dismiss(page) == "got_it"
        assert ("click", "got-it") in page.events

    @pytest.mark.asyncio
    async def test_skip_has_priority_over_other_popups(self, dismisser):
        page = build_meesho_page(popup="skip")
        page.add_locator(POPUPS["close_icon"], name="close-icon")
        page.add_role("button", "Got it", label="got-it")

        assert await dismisser.dismiss(page) == "skip"
        assert ("click", "close-icon") not in page.events
        assert ("click", "got-it") not in page.events

    @pytest.mark.asyncio
    async def test_close_icon_before_got_it(self, dismisser):
        page = build_meesho_page(popup="close_icon")
        page.add_role("button", "Got it", label="got-it")

        assert await dismisser.dismiss(page) == "close_icon"

    @pytest.mark.asyncio
    async def test_click_failure_is_swallowed(self, dismisser):
        """关闭失败只告警, 返回 None"""
        page = build_meesho_page(popup="close_icon")
        page.locators[POPUPS["close_icon"]].click_error = RuntimeError("detached")

        assert await dismisser.dismiss(page) is None

    @pytest.mark.asyncio
    async def test_unexpected_page_error_is_swallowed(self, dismisser):
        page = MagicMock()
        page.wait_for_timeout.side_effect = RuntimeError("page closed")

        assert await dismisser.dismiss(page) is None

    def test_from_settings_uses_timing(self, make_settings):
        dismisser = PopupDismisser.from_settings(make_settings())
        assert dismisser.render_wait_ms == 0
        assert dismisser.selectors["close_icon"] == "svg.css-1fmevri"
