"""
@PURPOSE: 测试页面等待工具
@OUTLINE:
  - TestWaitStrategy: 测试等待策略配置
  - TestPageWaiterLoad: 测试尽力等待(超时不抛出)
  - TestSafeActions: 测试 safe_click / safe_fill
  - TestSafeCheck: 测试勾选复选框及回退点击
@DEPENDENCIES:
  - 外部: pytest, pytest-asyncio, playwright
  - 内部: src.utils.page_waiter, tests.mocks
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from src.utils.page_waiter import PageWaiter, WaitStrategy
from tests.mocks import MockLocator, MockPage


class TestWaitStrategy:
    """测试等待策略配置"""

    def test_default_values(self):
        strategy = WaitStrategy()

        assert strategy.action_timeout_ms == 60_000
        assert strategy.load_timeout_ms == 60_000
        assert strategy.network_idle_timeout_ms == 5_000
        assert strategy.wait_after_action_ms == 0

    def test_from_settings(self, make_settings):
        """测试根据配置构建"""
        settings = make_settings()
        strategy = WaitStrategy.from_settings(settings)

        assert strategy.action_timeout_ms == settings.browser.timeout
        assert strategy.network_idle_timeout_ms == 10


class TestPageWaiterLoad:
    """测试加载状态等待"""

    @pytest.mark.asyncio
    async def test_wait_for_load_success(self, mock_page):
        waiter = PageWaiter(mock_page)
        assert await waiter.wait_for_load() is True
        assert ("load_state", "domcontentloaded") in mock_page.events

    @pytest.mark.asyncio
    async def test_network_idle_timeout_is_swallowed(self, mock_page):
        """网络空闲超时只返回 False"""
        mock_page.load_state_errors["networkidle"] = PlaywrightTimeoutError("idle timeout")
        waiter = PageWaiter(mock_page)

        assert await waiter.wait_for_network_idle() is False

    @pytest.mark.asyncio
    async def test_network_idle_uses_strategy_timeout(self):
        page = MagicMock()
        page.wait_for_load_state = AsyncMock()
        waiter = PageWaiter(page, WaitStrategy(network_idle_timeout_ms=1234))

        await waiter.wait_for_network_idle()

        page.wait_for_load_state.assert_awaited_once_with("networkidle", timeout=1234)

    @pytest.mark.asyncio
    async def test_pause_skips_non_positive(self, mock_page):
        waiter = PageWaiter(mock_page)
        await waiter.pause(0)
        await waiter.pause(1500)
        assert mock_page.events == [("pause", 1500)]

    @pytest.mark.asyncio
    async def test_wait_visible_raises_on_timeout(self):
        waiter = PageWaiter(MockPage())
        with pytest.raises(PlaywrightTimeoutError):
            await waiter.wait_visible(MockLocator("hidden", visible=False))


class TestSafeActions:
    """测试安全点击与填充"""

    @pytest.mark.asyncio
    async def test_safe_click_success(self, mock_page):
        locator = MockLocator("button", events=mock_page.events)
        waiter = PageWaiter(mock_page)

        assert await waiter.safe_click(locator, name="button") is True
        assert mock_page.events == [("wait_for", "button"), ("click", "button")]

    @pytest.mark.asyncio
    async def test_safe_click_invisible_returns_false(self, mock_page):
        waiter = PageWaiter(mock_page)

        assert await waiter.safe_click(MockLocator("hidden", visible=False)) is False
        assert isinstance(waiter.last_error, PlaywrightTimeoutError)

    @pytest.mark.asyncio
    async def test_safe_click_none_locator(self, mock_page):
        assert await PageWaiter(mock_page).safe_click(None) is False

    @pytest.mark.asyncio
    async def test_safe_click_passes_force(self, mock_page):
        locator = MockLocator("icon")
        await PageWaiter(mock_page).safe_click(locator, force=True, timeout_ms=100)
        assert locator.click_kwargs == [{"timeout": 100, "force": True}]

    @pytest.mark.asyncio
    async def test_safe_fill(self, mock_page):
        locator = MockLocator("email")
        waiter = PageWaiter(mock_page)

        assert await waiter.safe_fill(locator, "me@example.com") is True
        assert locator.value == "me@example.com"

    @pytest.mark.asyncio
    async def test_safe_fill_error_recorded(self, mock_page):
        locator = MockLocator("email", fill_error=RuntimeError("detached"))
        waiter = PageWaiter(mock_page)

        assert await waiter.safe_fill(locator, "x") is False
        assert str(waiter.last_error) == "detached"


class TestSafeCheck:
    """测试勾选复选框"""

    @pytest.mark.asyncio
    async def test_already_checked_is_skipped(self, mock_page):
        locator = MockLocator("select-all", checked=True, events=mock_page.events)
        waiter = PageWaiter(mock_page)

        assert await waiter.safe_check(locator, name="select-all") is True
        assert ("check", "select-all") not in mock_page.events
        assert ("click", "select-all") not in mock_page.events

    @pytest.mark.asyncio
    async def test_check_success(self, mock_page):
        locator = MockLocator("select-all", events=mock_page.events)

        assert await PageWaiter(mock_page).safe_check(locator) is True
        assert ("check", "select-all") in mock_page.events
        assert await locator.is_checked() is True

    @pytest.mark.asyncio
    async def test_check_failure_falls_back_to_click(self, mock_page):
        """check 失败时强制点击"""
        locator = MockLocator(
            "select-all",
            check_error=RuntimeError("intercepts pointer events"),
            events=mock_page.events,
        )

        assert await PageWaiter(mock_page).safe_check(locator) is True
        assert ("click", "select-all") in mock_page.events
        assert locator.click_kwargs[0]["force"] is True

    @pytest.mark.asyncio
    async def test_check_and_click_both_fail(self, mock_page):
        locator = MockLocator(
            "select-all",
            check_error=RuntimeError("check failed"),
            click_error=RuntimeError("click failed"),
        )
        waiter = PageWaiter(mock_page)

        assert await waiter.safe_check(locator) is False
        assert str(waiter.last_error) == "click failed"

    @pytest.mark.asyncio
    async def test_invisible_checkbox(self, mock_page):
        waiter = PageWaiter(mock_page)
        assert await waiter.safe_check(MockLocator("select-all", visible=False)) is False
