"""
@PURPOSE: 浏览器管理器, 使用 Playwright 管理唯一的浏览器实例与页面
@OUTLINE:
  - class BrowserManager: 浏览器管理器主类
  - async def start(): 启动 Chromium, 创建上下文和页面
  - async def close(): 按 Page → Context → Browser → Playwright 顺序释放资源
  - async def screenshot(): 截图
@GOTCHAS:
  - 必须使用 async/await 异步操作
  - 每个资源的关闭都有独立超时, 一个失败不影响其他资源
  - CI 环境由调用方传入 headless=True, slow_mo=0
@DEPENDENCIES:
  - 外部: playwright, loguru
@RELATED: login_controller.py, ../workflows/accept_orders_workflow.py
"""

import asyncio
from pathlib import Path
from typing import Any

from loguru import logger
from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

DEFAULT_TIMEOUT_MS = 60_000


class BrowserManager:
    """浏览器管理器.

    管理 Playwright 浏览器实例的创建, 配置和销毁.

    Attributes:
        playwright: Playwright 实例
        browser: 浏览器实例
        context: 浏览器上下文
        page: 当前页面

    Examples:
        >>> async with BrowserManager(headless=True) as manager:
        ...     await manager.page.goto("https://example.com")
    """

    # 单个资源关闭的超时(秒)
    close_timeouts: dict[str, float] = {
        "page": 5.0,
        "context": 5.0,
        "browser": 10.0,
        "playwright": 5.0,
    }

    def __init__(
        self,
        headless: bool = False,
        slow_mo: int = 0,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        viewport: dict[str, int] | None = None,
        locale: str | None = None,
    ):
        """初始化管理器.

        Args:
            headless: 是否无头模式
            slow_mo: 每个操作之间的延迟(毫秒)
            timeout_ms: 页面默认超时(毫秒)
            viewport: 视口大小
            locale: 语言区域
        """
        self.headless = headless
        self.slow_mo = slow_mo
        self.timeout_ms = timeout_ms
        self.viewport = viewport
        self.locale = locale

        self.playwright: Playwright | None = None
        self.browser: Browser | None = None
        self.context: BrowserContext | None = None
        self.page: Page | None = None

    @classmethod
    def from_settings(cls, settings, headless: bool | None = None) -> "BrowserManager":
        """根据应用配置创建管理器, headless 参数优先于配置."""
        effective_headless = settings.effective_headless() if headless is None else headless
        return cls(
            headless=effective_headless,
            slow_mo=settings.effective_slow_mo(),
            timeout_ms=settings.browser.timeout,
            viewport=settings.browser.viewport,
            locale=settings.browser.locale,
        )

    async def start(self) -> Page:
        """启动浏览器并打开页面.

        Returns:
            新创建的页面
        """
        logger.info(f"启动 Chromium (headless={self.headless}, slow_mo={self.slow_mo}ms)")

        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(
            headless=self.headless,
            slow_mo=max(int(self.slow_mo), 0),
        )

        context_options: dict[str, Any] = {}
        if self.viewport:
            context_options["viewport"] = self.viewport
        if self.locale:
            context_options["locale"] = self.locale

        self.context = await self.browser.new_context(**context_options)
        self.page = await self.context.new_page()
        self.page.set_default_timeout(self.timeout_ms)

        logger.success(f"✓ 浏览器已启动 (timeout={self.timeout_ms}ms)")
        return self.page

    async def screenshot(self, path: str | Path, full_page: bool = True) -> Path:
        """截图.

        Args:
            path: 截图保存路径
            full_page: 是否截取整个页面
        """
        if not self.page:
            raise RuntimeError("浏览器未启动")

        screenshot_path = Path(path)
        screenshot_path.parent.mkdir(parents=True, exist_ok=True)

        await self.page.screenshot(path=str(screenshot_path), full_page=full_page)
        logger.debug(f"截图已保存: {screenshot_path}")
        return screenshot_path

    async def _close_resource(
        self,
        resource: Any,
        name: str,
        method_name: str,
        timeout: float,
        errors: list[tuple[str, Exception]],
    ) -> None:
        if resource is None:
            return
        try:
            await asyncio.wait_for(getattr(resource, method_name)(), timeout=timeout)
        except TimeoutError:
            errors.append((name, TimeoutError(f"{name}.{method_name}() 超时 ({timeout:g}s)")))
            logger.warning(f"{name}.{method_name}() 超时 ({timeout:g}s)")
        except Exception as exc:
            errors.append((name, exc))
            logger.debug(f"{name}.{method_name}() 失败: {exc}")

    async def close(self) -> None:
        """关闭浏览器, 确保所有资源被释放.

        清理顺序: Page → Context → Browser → Playwright, 每一步独立超时,
        无论成功与否都会把句柄置为 None.
        """
        errors: list[tuple[str, Exception]] = []

        # Playwright 不停止会残留驱动进程, 所以 stop 放在最后且必须执行
        for name, method_name in (
            ("page", "close"),
            ("context", "close"),
            ("browser", "close"),
            ("playwright", "stop"),
        ):
            try:
                await self._close_resource(
                    getattr(self, name),
                    name,
                    method_name,
                    self.close_timeouts[name],
                    errors,
                )
            finally:
                setattr(self, name, None)

        if errors:
            error_summary = ", ".join(f"{name}:{type(e).__name__}" for name, e in errors)
            logger.warning(f"浏览器关闭过程中有 {len(errors)} 个错误: {error_summary}")
        else:
            logger.info("浏览器已关闭")

    async def __aenter__(self):
        """异步上下文管理器入口."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口."""
        await self.close()
