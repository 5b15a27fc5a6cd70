"""
@PURPOSE: Meesho 接单工作流 - 登录后进入 Pending Orders, 全选并批量接单
@OUTLINE:
  - class AcceptOrdersWorkflow: 工作流控制类
  - async def run(): 按顺序执行全部步骤, 返回 AcceptRunResult
  - def execute(): 同步入口, 内部使用 asyncio.run
@GOTCHAS:
  - 凭证在启动浏览器之前检查, 缺失时直接抛出 MissingCredentialsError
  - 任一必需步骤失败: 记录日志 → 保存失败现场 → 记录失败步骤 → 重新抛出
  - 无论成功与否, finally 中都会关闭浏览器
  - 工作流日志绑定 run_id, 步骤日志额外绑定 step
  - run() 抛出异常时, 运行结果仍可通过 self.result 读取
@DEPENDENCIES:
  - 内部: browser.*, models.result, utils.logger_setup
  - 外部: playwright, loguru
@RELATED: ../../main.py, ../browser/login_controller.py, ../browser/orders_controller.py
"""

from __future__ import annotations

import asyncio
import contextlib
import time
import uuid
from datetime import datetime

from loguru import logger

from ..browser.browser_manager import BrowserManager
from ..browser.debug_tools import CheckpointRecorder, capture_debug_artifacts
from ..browser.login_controller import LoginController
from ..browser.orders_controller import OrdersController
from ..browser.popup_dismisser import PopupDismisser
from ..browser.selector_config import load_selectors
from ..models.result import AcceptRunResult
from ..utils.logger_setup import get_logger_with_context, log_section

STEP_LAUNCH = "launch"
STEP_LOGIN = "login"
STEP_OPEN_PENDING = "open-pending-orders"
STEP_DISMISS_POPUPS = "dismiss-popups"
STEP_SELECT_ALL = "select-all"
STEP_ACCEPT = "accept-orders"


class AcceptOrdersWorkflow:
    """接单工作流.

    步骤:
    1. 启动浏览器
    2. 登录(截图 login-page / after-login)
    3. 打开 Pending Orders
    4. 关闭可能出现的弹窗
    5. 全选订单
    6. Accept Selected Orders → Accept Order(截图 after-accept)

    Attributes:
        settings: 应用配置
        headless: 覆盖配置中的无头模式, None 表示按配置/CI 决定
        screenshot_dir: 覆盖配置中的截图目录
        result: 最近一次运行结果

    Examples:
        >>> workflow = AcceptOrdersWorkflow(settings)
        >>> result = workflow.execute()
        >>> result.success
        True
    """

    def __init__(
        self,
        settings,
        *,
        headless: bool | None = None,
        screenshot_dir: str | None = None,
        browser_manager: BrowserManager | None = None,
    ):
        self.settings = settings
        self.headless = headless
        self.screenshot_dir = settings.get_absolute_path(
            screenshot_dir or settings.debug.screenshot_dir
        )
        self.browser_manager = browser_manager or BrowserManager.from_settings(
            settings, headless=headless
        )

        selectors = load_selectors(settings.selector_file)
        self.login_ctrl = LoginController.from_settings(settings, selectors)
        self.popup_dismisser = PopupDismisser.from_settings(settings, selectors)
        self.orders_ctrl = OrdersController.from_settings(settings, selectors)

        self.result: AcceptRunResult | None = None
        self._current_step = STEP_LAUNCH
        self._log = logger

    def execute(self) -> AcceptRunResult:
        """同步执行工作流."""
        return asyncio.run(self.run())

    @contextlib.asynccontextmanager
    async def _step(self, result: AcceptRunResult, name: str):
        self._current_step = name
        self._log.bind(step=name).info(f"▶ 步骤: {name}")
        yield
        result.record(name)

    async def run(self) -> AcceptRunResult:
        """执行完整接单流程.

        Returns:
            运行结果

        Raises:
            MissingCredentialsError: 缺少 MEESHO_EMAIL / MEESHO_PASSWORD
            StepFailedError: 必需步骤超时或元素缺失
        """
        result = AcceptRunResult()
        self.result = result

        try:
            email, password = self.settings.require_credentials()
        except Exception as exc:
            logger.error(f"✗ {exc}")
            result.failed_step = "credentials"
            result.error_message = str(exc)
            result.finished_at = datetime.now().isoformat()
            raise

        self._log = log = get_logger_with_context(run_id=uuid.uuid4().hex)
        started = time.perf_counter()
        page = None
        checkpoints: CheckpointRecorder | None = None

        log_section("🌐 开始 Meesho 自动接单")
        log.info(f"URL: {self.settings.meesho_url}")

        try:
            async with self._step(result, STEP_LAUNCH):
                page = await self.browser_manager.start()

            checkpoints = CheckpointRecorder(
                page,
                self.screenshot_dir,
                full_page=self.settings.debug.screenshot_full_page,
            )

            async with self._step(result, STEP_LOGIN):
                await self.login_ctrl.login(page, email, password, checkpoints)

            async with self._step(result, STEP_OPEN_PENDING):
                await self.orders_ctrl.open_pending_orders(page)

            # 弹窗是可选的, dismiss 不会抛出异常
            self._current_step = STEP_DISMISS_POPUPS
            result.popup_strategy = await self.popup_dismisser.dismiss(page)
            result.record(STEP_DISMISS_POPUPS, detail=result.popup_strategy or "未发现弹窗")

            async with self._step(result, STEP_SELECT_ALL):
                await self.orders_ctrl.select_all_rows(page)

            async with self._step(result, STEP_ACCEPT):
                await self.orders_ctrl.accept_selected(page)

            await checkpoints.capture("after-accept")
            result.success = True
            log.success("🎉 流程完成, 已接受选中的待处理订单")
            return result

        except Exception as exc:
            step = self._current_step
            result.failed_step = step
            result.error_message = str(exc)
            result.record(step, status="failed", detail=str(exc))
            log.bind(step=step).opt(exception=exc).error(f"✗ 接单流程失败于步骤 [{step}]: {exc}")
            if page is not None:
                await self._capture_error_artifacts(page, step)
            raise

        finally:
            if checkpoints is not None:
                result.screenshots = [str(path) for path in checkpoints.captured]
            result.finished_at = datetime.now().isoformat()
            result.duration_seconds = round(time.perf_counter() - started, 2)
            await self.browser_manager.close()
            log.info(f"运行结束, 耗时 {result.duration_seconds}s")

    async def _capture_error_artifacts(self, page, step: str) -> None:
        if not self.settings.debug.capture_on_error:
            return
        log = self._log.bind(step=step)
        try:
            artifacts = await capture_debug_artifacts(
                page,
                step=f"error_{step}",
                output_dir=self.settings.get_absolute_path(self.settings.debug.error_dir),
            )
            log.info(f"失败现场已保存: {artifacts['screenshot']}")
        except Exception as exc:
            log.warning(f"⚠ 保存失败现场失败: {exc}")
