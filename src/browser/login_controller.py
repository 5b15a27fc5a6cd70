"""
@PURPOSE: 登录控制器, 使用 Playwright 自动化登录 Meesho 供应商后台
@OUTLINE:
  - class LoginController: 登录控制器主类
  - async def login(): 执行登录流程(打开登录页 → 填写账号密码 → 点击登录)
@GOTCHAS:
  - 登录页首次导航可能超时(后台资源很多), 只记录警告, 以邮箱输入框是否出现为准
  - 登录后 Meesho 会持续长轮询, networkidle 只能尽力等待
  - 登录按钮文案在 "Log in" / "Login" 之间变化, 使用忽略大小写的正则匹配
@DEPENDENCIES:
  - 内部: .selector_config, .steps, ..utils.page_waiter
  - 外部: playwright, loguru
@RELATED: debug_tools.py, orders_controller.py, ../workflows/accept_orders_workflow.py
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from playwright.async_api import Page

from ..errors import StepFailedError
from ..utils.page_waiter import PageWaiter, WaitStrategy
from .selector_config import load_selectors, role_name
from .steps import click_or_fail, fill_or_fail, load_or_fail

if TYPE_CHECKING:
    from .debug_tools import CheckpointRecorder


class LoginController:
    """登录控制器.

    Attributes:
        url: 登录页地址
        selectors: login 段选择器
        strategy: 等待策略

    Examples:
        >>> controller = LoginController.from_settings(settings)
        >>> await controller.login(page, "me@example.com", "secret")
    """

    def __init__(
        self,
        url: str,
        selectors: dict[str, str] | None = None,
        strategy: WaitStrategy | None = None,
    ):
        self.url = url
        self.selectors = selectors or load_selectors()["login"]
        self.strategy = strategy or WaitStrategy()

    @classmethod
    def from_settings(cls, settings, selectors: dict | None = None) -> LoginController:
        """根据应用配置创建控制器."""
        selectors = selectors or load_selectors(settings.selector_file)
        return cls(
            url=settings.meesho_url,
            selectors=selectors["login"],
            strategy=WaitStrategy.from_settings(settings),
        )

    async def _goto_login_page(self, page: Page) -> None:
        try:
            await page.goto(
                self.url,
                wait_until="domcontentloaded",
                timeout=self.strategy.load_timeout_ms,
            )
        except Exception as exc:
            logger.warning(f"⚠ 登录页导航未完成, 继续等待输入框: {exc}")

    async def login(
        self,
        page: Page,
        email: str,
        password: str,
        checkpoints: CheckpointRecorder | None = None,
    ) -> None:
        """执行登录.

        Args:
            page: 当前页面
            email: 登录邮箱或手机号
            password: 登录密码
            checkpoints: 检查点截图器, 为 None 时不截图

        Raises:
            StepFailedError: 输入框未出现或登录按钮无法点击
        """
        logger.info("=" * 60)
        logger.info("开始登录 Meesho 供应商后台")
        logger.info("=" * 60)

        waiter = PageWaiter(page, self.strategy)

        logger.info(f"打开登录页: {self.url}")
        await self._goto_login_page(page)
        logger.info(f"当前URL: {page.url}")
        if checkpoints is not None:
            await checkpoints.capture("login-page")

        email_input = page.locator(self.selectors["email_input"])
        try:
            await waiter.wait_visible(email_input)
        except Exception as exc:
            logger.error(f"✗ 登录表单未出现: {exc}")
            raise StepFailedError("登录表单", cause=exc) from exc
        logger.success("✓ 登录表单已出现")

        await fill_or_fail(waiter, email_input, email, "邮箱输入框")
        await fill_or_fail(
            waiter,
            page.locator(self.selectors["password_input"]),
            password,
            "密码输入框",
        )

        login_button = page.get_by_role(
            "button",
            name=role_name(self.selectors["login_button_pattern"]),
        )
        await click_or_fail(waiter, login_button, "登录按钮")

        await load_or_fail(waiter, "登录后页面加载")
        if not await waiter.wait_for_network_idle():
            logger.debug("登录后网络未空闲, 继续执行")

        logger.success(f"✓ 登录已提交, 当前URL: {page.url}")
        if checkpoints is not None:
            await checkpoints.capture("after-login")
