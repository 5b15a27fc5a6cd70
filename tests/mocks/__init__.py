"""
@PURPOSE: 测试 Mock 模块
@OUTLINE:
  - MockPage: 模拟 Playwright Page 对象
  - MockLocator: 模拟 Playwright Locator 对象
  - MockBrowserManager: 模拟 BrowserManager
  - MockPlaywright 等: 模拟 Playwright 核心对象
@DEPENDENCIES:
  - 外部: playwright(仅异常类型)
"""

from .browser_mock import MockBrowserManager, MockLocator, MockPage, build_meesho_page
from .playwright_mock import (
    MockBrowser,
    MockBrowserContext,
    MockBrowserType,
    MockPlaywright,
    MockPlaywrightContextManager,
)

__all__ = [
    # Browser mocks
    "MockBrowserManager",
    "MockLocator",
    "MockPage",
    "build_meesho_page",
    # Playwright mocks
    "MockBrowser",
    "MockBrowserContext",
    "MockBrowserType",
    "MockPlaywright",
    "MockPlaywrightContextManager",
]
