"""
@PURPOSE: 关闭 Pending Orders 页面上可能出现的引导弹窗/提示层
@OUTLINE:
  - class PopupDismisser: 按优先级尝试已知的弹窗关闭方式
  - async def dismiss(): 尝试 Skip → X 图标 → Got it, 返回命中的策略名
@GOTCHAS:
  - 弹窗是可选的, 任何异常都只记录警告, 不会中断工作流
  - Skip 文本本身不可点击时, 点击其外层 css-gq3nwx 容器
  - X 图标经常被遮罩层判定为不可操作, 需要 force 点击
@DEPENDENCIES:
  - 内部: .selector_config, .steps, ..utils.page_waiter
  - 外部: playwright, loguru
"""

from __future__ import annotations

from loguru import logger
from playwright.async_api import Page

from ..utils.page_waiter import PageWaiter, WaitStrategy
from .selector_config import load_selectors, role_name
from .steps import click_or_fail

STRATEGY_SKIP = "skip"
STRATEGY_CLOSE_ICON = "close_icon"
STRATEGY_GOT_IT = "got_it"


class PopupDismisser:
    """弹窗关闭器.

    三种策略按固定优先级尝试, 第一个存在的元素胜出.
    """

    def __init__(
        self,
        selectors: dict[str, str] | None = None,
        strategy: WaitStrategy | None = None,
        render_wait_ms: int = 1500,
    ):
        self.selectors = selectors or load_selectors()["popups"]
        self.strategy = strategy or WaitStrategy()
        self.render_wait_ms = render_wait_ms

    @classmethod
    def from_settings(cls, settings, selectors: dict | None = None) -> PopupDismisser:
        selectors = selectors or load_selectors(settings.selector_file)
        return cls(
            selectors=selectors["popups"],
            strategy=WaitStrategy.from_settings(settings),
            render_wait_ms=settings.timing.popup_render_wait_ms,
        )

    async def dismiss(self, page: Page, context: str = "") -> str | None:
        """尝试关闭弹窗.

        Args:
            page: 当前页面
            context: 日志中附带的上下文说明

        Returns:
            命中的策略名 (skip / close_icon / got_it), 未发现弹窗或出错时返回 None
        """
        suffix = f" ({context})" if context else ""
        logger.info(f"🧹 尝试关闭弹窗{suffix}...")

        try:
            return await self._dismiss(page)
        except Exception as exc:
            logger.warning(f"⚠ 关闭弹窗时出现问题, 继续执行: {exc}")
            return None

    async def _dismiss(self, page: Page) -> str | None:
        waiter = PageWaiter(page, self.strategy)
        await waiter.pause(self.render_wait_ms)

        skip_span = page.locator(self.selectors["skip_span"]).first
        if await skip_span.count():
            logger.debug("发现 Skip 文本")
            container = skip_span.locator(self.selectors["skip_container"]).first
            target = container if await container.count() else skip_span
            await click_or_fail(waiter, target, "Skip 弹窗区域")
            logger.success("✓ 已通过 Skip 关闭弹窗")
            return STRATEGY_SKIP

        close_icon = page.locator(self.selectors["close_icon"]).first
        if await close_icon.count():
            logger.debug("发现 X 关闭图标")
            await close_icon.wait_for(state="visible", timeout=self.strategy.action_timeout_ms)
            await close_icon.click(force=True)
            logger.success("✓ 已通过 X 图标关闭弹窗")
            return STRATEGY_CLOSE_ICON

        got_it = page.get_by_role("button", name=role_name(self.selectors["got_it_pattern"]))
        if await got_it.count():
            await click_or_fail(waiter, got_it.first, "Got it 按钮")
            logger.success("✓ 已通过 Got it 关闭弹窗")
            return STRATEGY_GOT_IT

        logger.info("ℹ 未发现已知弹窗")
        return None
