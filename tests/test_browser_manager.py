"""
@PURPOSE: 测试 BrowserManager 的启动参数与资源清理
@OUTLINE:
  - TestBrowserManagerStart: 启动时的 headless/slow_mo/超时设置
  - TestBrowserManagerClose: close() 的逐个释放与容错
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from config.settings import BrowserConfig
from src.browser.browser_manager import BrowserManager
from tests.mocks import MockPlaywrightContextManager


def _bare_manager() -> BrowserManager:
    manager = BrowserManager.__new__(BrowserManager)
    manager.close_timeouts = dict(BrowserManager.close_timeouts)
    return manager


class TestBrowserManagerStart:
    """测试浏览器启动."""

    @pytest.mark.asyncio
    async def test_start_launches_chromium_with_options(self):
        playwright_cm = MockPlaywrightContextManager()
        manager = BrowserManager(
            headless=True,
            slow_mo=0,
            timeout_ms=30_000,
            viewport={"width": 1280, "height": 720},
            locale="en-IN",
        )

        with patch("src.browser.browser_manager.async_playwright", return_value=playwright_cm):
            page = await manager.start()

        chromium = playwright_cm.playwright.chromium
        assert chromium.launch_kwargs == {"headless": True, "slow_mo": 0}
        context = chromium.browser.contexts[0]
        assert context.options == {"viewport": {"width": 1280, "height": 720}, "locale": "en-IN"}
        assert page is manager.page
        assert page.default_timeout == 30_000

    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self):
        playwright_cm = MockPlaywrightContextManager()

        with patch("src.browser.browser_manager.async_playwright", return_value=playwright_cm):
            async with BrowserManager(headless=True) as manager:
                assert manager.page is not None

        assert playwright_cm.playwright.stopped is True
        assert manager.page is None
        assert manager.playwright is None

    def test_from_settings_ci(self, make_settings):
        """CI 环境: 无头, slow_mo 为 0."""
        manager = BrowserManager.from_settings(make_settings(ci=True))
        assert manager.headless is True
        assert manager.slow_mo == 0

    def test_from_settings_local(self, make_settings):
        manager = BrowserManager.from_settings(
            make_settings(browser=BrowserConfig(headless=False, slow_mo=200, timeout=45_000))
        )
        assert manager.headless is False
        assert manager.slow_mo == 200
        assert manager.timeout_ms == 45_000

    def test_from_settings_explicit_headless_wins(self, make_settings):
        manager = BrowserManager.from_settings(make_settings(ci=True), headless=False)
        assert manager.headless is False


class TestBrowserManagerClose:
    """测试 BrowserManager.close() 方法的资源清理."""

    @pytest.mark.asyncio
    async def test_close_cleans_all_resources_on_success(self):
        manager = _bare_manager()
        page, context, browser, playwright = AsyncMock(), AsyncMock(), AsyncMock(), AsyncMock()
        manager.page, manager.context = page, context
        manager.browser, manager.playwright = browser, playwright

        await manager.close()

        assert manager.page is None
        assert manager.context is None
        assert manager.browser is None
        assert manager.playwright is None
        page.close.assert_awaited_once()
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_continues_after_page_close_failure(self):
        """page.close() 失败后继续清理其他资源."""
        manager = _bare_manager()
        manager.page = AsyncMock()
        manager.page.close = AsyncMock(side_effect=Exception("模拟 page 关闭错误"))

        context_mock = AsyncMock()
        browser_mock = AsyncMock()
        playwright_mock = AsyncMock()
        manager.context = context_mock
        manager.browser = browser_mock
        manager.playwright = playwright_mock

        await manager.close()

        assert manager.page is None
        assert manager.playwright is None
        context_mock.close.assert_awaited_once()
        browser_mock.close.assert_awaited_once()
        playwright_mock.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_handles_timeout(self):
        """browser.close() 超时后仍会停止 Playwright."""
        manager = _bare_manager()
        manager.close_timeouts["browser"] = 0.01

        async def hang():
            await asyncio.sleep(10)

        manager.page = None
        manager.context = None
        manager.browser = AsyncMock()
        manager.browser.close = hang
        playwright_mock = AsyncMock()
        manager.playwright = playwright_mock

        await manager.close()

        assert manager.browser is None
        playwright_mock.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_without_start_is_noop(self):
        manager = BrowserManager()
        await manager.close()
        assert manager.page is None

    @pytest.mark.asyncio
    async def test_screenshot_requires_started_browser(self, tmp_path):
        with pytest.raises(RuntimeError):
            await BrowserManager().screenshot(tmp_path / "x.png")
