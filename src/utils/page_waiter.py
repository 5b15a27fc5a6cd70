"""
@PURPOSE: 提供统一的页面等待能力, 先等待再操作, 并把可选等待的超时吞掉
@OUTLINE:
  - @dataclass WaitStrategy: 存放等待策略
  - class PageWaiter: 封装可复用的等待工具
    - async def wait_for_load(): 尽力等待页面加载状态
    - async def wait_for_network_idle(): 尽力等待网络空闲
    - async def pause(): 固定渲染等待
    - async def wait_visible(): 等待元素可见(超时抛出)
    - async def safe_click(): 确保可见的安全点击
    - async def safe_fill(): 确保可见的安全填充
    - async def safe_check(): 勾选复选框, check 失败时回退到点击
@GOTCHAS:
  - safe_* 方法只返回布尔值不抛异常, 需要"失败即中止"时使用 src.browser.steps
  - 网络空闲在 Meesho 后台经常无法触发(长轮询), 只能尽力等待
@DEPENDENCIES:
  - 外部: playwright, loguru
@RELATED: ../browser/steps.py, ../browser/browser_manager.py
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


@dataclass(slots=True)
class WaitStrategy:
    """等待策略配置.

    默认值与 Meesho 后台的实际加载速度对齐, 单步最长 60 秒.
    """

    action_timeout_ms: int = 60_000
    load_timeout_ms: int = 60_000
    network_idle_timeout_ms: int = 5_000
    wait_after_action_ms: int = 0

    @classmethod
    def from_settings(cls, settings) -> WaitStrategy:
        """根据应用配置构建等待策略."""
        return cls(
            action_timeout_ms=settings.browser.timeout,
            load_timeout_ms=settings.browser.timeout,
            network_idle_timeout_ms=settings.timing.network_idle_timeout_ms,
        )


class PageWaiter:
    """可复用的页面等待工具."""

    def __init__(self, page: Page, strategy: WaitStrategy | None = None):
        """初始化等待工具.

        Args:
            page: Playwright Page 对象
            strategy: 等待策略配置
        """
        self.page = page
        self.strategy = strategy or WaitStrategy()
        self.last_error: BaseException | None = None

    async def wait_for_load(
        self,
        state: str = "domcontentloaded",
        timeout_ms: int | None = None,
    ) -> bool:
        """等待页面加载状态, 超时只记录日志.

        Returns:
            True 表示在超时内达到该状态
        """
        timeout = timeout_ms or self.strategy.load_timeout_ms
        try:
            await self.page.wait_for_load_state(state, timeout=timeout)
            return True
        except PlaywrightTimeoutError:
            logger.debug(f"等待 {state} 超时 ({timeout}ms),继续执行后续逻辑")
            return False

    async def wait_for_network_idle(self, timeout_ms: int | None = None) -> bool:
        """等待网络空闲."""
        return await self.wait_for_load(
            "networkidle",
            timeout_ms or self.strategy.network_idle_timeout_ms,
        )

    async def pause(self, ms: int) -> None:
        """固定等待, 给弹窗或表格留出渲染时间."""
        if ms > 0:
            await self.page.wait_for_timeout(ms)

    async def wait_visible(self, locator: Locator, timeout_ms: int | None = None) -> None:
        """等待元素可见, 超时抛出 PlaywrightTimeoutError."""
        await locator.wait_for(
            state="visible",
            timeout=timeout_ms or self.strategy.action_timeout_ms,
        )

    async def _after_action(self) -> None:
        if self.strategy.wait_after_action_ms > 0:
            await self.page.wait_for_timeout(self.strategy.wait_after_action_ms)

    async def safe_click(
        self,
        locator: Locator | None,
        *,
        timeout_ms: int | None = None,
        ensure_visible: bool = True,
        force: bool = False,
        name: str | None = None,
    ) -> bool:
        """安全点击:先等待可见再点击.

        Args:
            locator: 目标元素定位器
            timeout_ms: 超时时间(毫秒)
            ensure_visible: 是否确保元素可见
            force: 是否强制点击(跳过可操作性检查)
            name: 元素名称(用于日志)

        Returns:
            点击是否成功
        """
        if locator is None:
            return False

        effective_timeout = timeout_ms or self.strategy.action_timeout_ms
        label = name or ""

        try:
            if ensure_visible:
                await locator.wait_for(state="visible", timeout=effective_timeout)
            await locator.click(timeout=effective_timeout, force=force)
            await self._after_action()
            return True
        except PlaywrightTimeoutError as exc:
            self.last_error = exc
            logger.debug(f"safe_click: 超时 name={label} err={exc}")
            return False
        except Exception as exc:
            self.last_error = exc
            logger.debug(f"safe_click: 点击异常 name={label} err={exc}")
            return False

    async def safe_fill(
        self,
        locator: Locator | None,
        value: str,
        *,
        timeout_ms: int | None = None,
        ensure_visible: bool = True,
        name: str | None = None,
    ) -> bool:
        """安全填充:先等待可见再填充.

        Returns:
            填充是否成功
        """
        if locator is None:
            return False

        effective_timeout = timeout_ms or self.strategy.action_timeout_ms
        label = name or ""

        try:
            if ensure_visible:
                await locator.wait_for(state="visible", timeout=effective_timeout)
            await locator.fill(value, timeout=effective_timeout)
            await self._after_action()
            return True
        except PlaywrightTimeoutError as exc:
            self.last_error = exc
            logger.debug(f"safe_fill: 超时 name={label} err={exc}")
            return False
        except Exception as exc:
            self.last_error = exc
            logger.debug(f"safe_fill: 填充异常 name={label} err={exc}")
            return False

    async def safe_check(
        self,
        locator: Locator | None,
        *,
        timeout_ms: int | None = None,
        name: str | None = None,
    ) -> bool:
        """勾选复选框.

        已勾选时直接返回; check(force=True) 失败时回退为 click(force=True).
        MUI 的复选框 input 常被样式层遮挡, 所以两种方式都强制执行.

        Returns:
            勾选是否成功
        """
        if locator is None:
            return False

        effective_timeout = timeout_ms or self.strategy.action_timeout_ms
        label = name or ""

        try:
            await locator.wait_for(state="visible", timeout=effective_timeout)
        except Exception as exc:
            self.last_error = exc
            logger.debug(f"safe_check: 元素不可见 name={label} err={exc}")
            return False

        try:
            already_checked = await locator.is_checked()
        except Exception:
            already_checked = False
        if already_checked:
            logger.info(f"ℹ {label} 已勾选, 跳过")
            return True

        try:
            await locator.check(force=True, timeout=effective_timeout)
            logger.debug(f"safe_check: 已通过 check 勾选 name={label}")
            return True
        except Exception as exc:
            logger.warning(f"⚠ check 失败 ({label}), 改用点击: {exc}")

        try:
            await locator.click(force=True, timeout=effective_timeout)
            logger.debug(f"safe_check: 已通过点击勾选 name={label}")
            return True
        except Exception as exc:
            self.last_error = exc
            logger.debug(f"safe_check: 点击回退失败 name={label} err={exc}")
            return False
