"""
@PURPOSE: 必需步骤守卫 - 先等待再操作, 失败时记录错误并抛出 StepFailedError
@OUTLINE:
  - async def click_or_fail(): 点击, 失败即中止
  - async def fill_or_fail(): 填充, 失败即中止
  - async def check_or_fail(): 勾选, 失败即中止
  - async def load_or_fail(): 等待页面加载状态, 超时即中止
@GOTCHAS:
  - 与 PageWaiter.safe_* 的区别: 这里的失败会中断整个工作流
  - 导航后的 domcontentloaded 是必需等待, 只有 networkidle 允许超时后继续
@DEPENDENCIES:
  - 外部: playwright, loguru
  - 内部: src.utils.page_waiter, src.errors
"""

from __future__ import annotations

from loguru import logger
from playwright.async_api import Locator

from ..errors import StepFailedError
from ..utils.page_waiter import PageWaiter


def _fail(waiter: PageWaiter, what: str, verb: str) -> StepFailedError:
    cause = waiter.last_error
    logger.error(f"✗ {verb}失败: {what}" + (f" | {type(cause).__name__}: {cause}" if cause else ""))
    return StepFailedError(what, cause=cause)


async def click_or_fail(
    waiter: PageWaiter,
    locator: Locator,
    what: str,
    *,
    timeout_ms: int | None = None,
    force: bool = False,
) -> None:
    """等待元素可见后点击.

    Raises:
        StepFailedError: 超时或点击失败
    """
    clicked = await waiter.safe_click(locator, timeout_ms=timeout_ms, force=force, name=what)
    if not clicked:
        raise _fail(waiter, what, "点击")
    logger.success(f"✓ 已点击: {what}")


async def fill_or_fail(
    waiter: PageWaiter,
    locator: Locator,
    value: str,
    what: str,
    *,
    timeout_ms: int | None = None,
) -> None:
    """等待输入框可见后填充.

    Raises:
        StepFailedError: 超时或填充失败
    """
    filled = await waiter.safe_fill(locator, value, timeout_ms=timeout_ms, name=what)
    if not filled:
        raise _fail(waiter, what, "填充")
    logger.debug(f"✓ 已填充: {what}")


async def check_or_fail(
    waiter: PageWaiter,
    locator: Locator,
    what: str,
    *,
    timeout_ms: int | None = None,
) -> None:
    """勾选复选框(已勾选则跳过).

    Raises:
        StepFailedError: 不可见或勾选失败
    """
    checked = await waiter.safe_check(locator, timeout_ms=timeout_ms, name=what)
    if not checked:
        raise _fail(waiter, what, "勾选")
    logger.success(f"✓ 已勾选: {what}")


async def load_or_fail(
    waiter: PageWaiter,
    what: str,
    *,
    state: str = "domcontentloaded",
    timeout_ms: int | None = None,
) -> None:
    """等待页面达到加载状态.

    Raises:
        StepFailedError: 超时未达到该状态
    """
    timeout = timeout_ms or waiter.strategy.load_timeout_ms
    try:
        await waiter.page.wait_for_load_state(state, timeout=timeout)
    except Exception as exc:
        waiter.last_error = exc
        raise _fail(waiter, what, f"等待 {state}") from exc
    logger.debug(f"✓ {what}: {state}")
