"""
@PURPOSE: 定义接单工作流相关的自定义异常
@OUTLINE:
  - MeeshoAutomationError: 所有工作流异常的基类
  - MissingCredentialsError: 缺少登录凭证
  - StepFailedError: 必需步骤失败(元素缺失/超时)
@DEPENDENCIES:
  - 外部: 无
"""

from __future__ import annotations


class MeeshoAutomationError(Exception):
    """Meesho 自动化异常基类."""


class MissingCredentialsError(MeeshoAutomationError):
    """环境变量中缺少登录凭证时抛出此异常.

    在启动浏览器之前检查, 缺失时工作流直接失败。
    """

    def __init__(self, missing: list[str]) -> None:
        """初始化凭证缺失异常.

        Args:
            missing: 缺失的环境变量名列表
        """
        self.missing = list(missing)
        super().__init__(f"{' or '.join(self.missing)} env var missing")


class StepFailedError(MeeshoAutomationError):
    """必需步骤在超时内未能完成时抛出此异常.

    Attributes:
        step: 失败的步骤名称
        cause: 原始异常(如 Playwright 超时)
    """

    def __init__(
        self,
        step: str,
        cause: BaseException | None = None,
        message: str | None = None,
    ) -> None:
        self.step = step
        self.cause = cause
        self.message = message or f"步骤失败: {step}" + (f" ({cause})" if cause else "")
        super().__init__(self.message)
