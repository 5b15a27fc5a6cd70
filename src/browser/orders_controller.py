"""
@PURPOSE: Pending Orders 页面操作 - 进入待处理订单, 全选, 批量接单并确认
@OUTLINE:
  - class OrdersController: 待处理订单控制器
  - async def open_pending_orders(): 点击首页的 Pending Orders 卡片
  - async def select_all_rows(): 勾选表头的"全选"复选框
  - async def accept_selected(): 点击 Accept Selected Orders 并在弹框中确认
@GOTCHAS:
  - Pending Orders 卡片的文字节点不可点击, 需要点击外层 data-testid='box' 容器
  - 表格渲染比 domcontentloaded 晚, 全选前固定等待 table_render_wait_ms
@DEPENDENCIES:
  - 内部: .selector_config, .steps, ..utils.page_waiter
  - 外部: playwright, loguru
@RELATED: login_controller.py, popup_dismisser.py
"""

from __future__ import annotations

from loguru import logger
from playwright.async_api import Page

from ..errors import StepFailedError
from ..utils.page_waiter import PageWaiter, WaitStrategy
from .selector_config import load_selectors
from .steps import check_or_fail, click_or_fail, load_or_fail


class OrdersController:
    """待处理订单控制器."""

    def __init__(
        self,
        selectors: dict[str, str] | None = None,
        strategy: WaitStrategy | None = None,
        table_render_wait_ms: int = 2000,
    ):
        self.selectors = selectors or load_selectors()["pending_orders"]
        self.strategy = strategy or WaitStrategy()
        self.table_render_wait_ms = table_render_wait_ms

    @classmethod
    def from_settings(cls, settings, selectors: dict | None = None) -> OrdersController:
        selectors = selectors or load_selectors(settings.selector_file)
        return cls(
            selectors=selectors["pending_orders"],
            strategy=WaitStrategy.from_settings(settings),
            table_render_wait_ms=settings.timing.table_render_wait_ms,
        )

    async def open_pending_orders(self, page: Page) -> None:
        """打开 Pending Orders 页面.

        Raises:
            StepFailedError: 卡片未出现或无法点击
        """
        waiter = PageWaiter(page, self.strategy)
        logger.info("⏳ 等待 Pending Orders 卡片...")

        card = page.locator(self.selectors["card_text"]).first
        try:
            await waiter.wait_visible(card)
        except Exception as exc:
            logger.error(f"✗ Pending Orders 卡片未出现: {exc}")
            raise StepFailedError("Pending Orders 卡片", cause=exc) from exc
        logger.success("✓ Pending Orders 卡片已出现")

        card_box = card.locator(self.selectors["card_box"])
        await click_or_fail(waiter, card_box, "Pending Orders 卡片")

        await load_or_fail(waiter, "Pending Orders 页面加载")
        logger.info("📄 Pending Orders 页面已打开")

    async def select_all_rows(self, page: Page) -> None:
        """勾选全选复选框, 已勾选则跳过."""
        waiter = PageWaiter(page, self.strategy)
        await waiter.pause(self.table_render_wait_ms)

        checkbox = page.locator(self.selectors["select_all_checkbox"])
        await check_or_fail(waiter, checkbox, "全选复选框")

    async def accept_selected(self, page: Page) -> None:
        """批量接单并在确认弹框中点击 Accept Order."""
        waiter = PageWaiter(page, self.strategy)

        accept_button = page.get_by_role("button", name=self.selectors["accept_button_name"])
        await click_or_fail(waiter, accept_button, "Accept Selected Orders 按钮")

        confirm_button = page.get_by_role("button", name=self.selectors["confirm_button_name"])
        await click_or_fail(waiter, confirm_button, "Accept Order 确认按钮")

        await load_or_fail(waiter, "接单提交后页面加载")
        logger.success("✓ 已提交批量接单")
