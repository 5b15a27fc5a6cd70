"""
@PURPOSE: 定义接单工作流运行结果的数据结构
@OUTLINE:
  - class StepRecord: 单个步骤的执行记录
  - class AcceptRunResult: 一次接单运行的汇总结果
@DEPENDENCIES:
  - 外部: pydantic
@RELATED: src/workflows/accept_orders_workflow.py, main.py
"""

from datetime import datetime

from pydantic import BaseModel, Field


class StepRecord(BaseModel):
    """步骤执行记录.

    Attributes:
        name: 步骤名称
        status: 执行状态(success|failed|skipped)
        detail: 附加说明
    """

    name: str = Field(..., description="步骤名称")
    status: str = Field(default="success", description="执行状态")
    detail: str | None = Field(default=None, description="附加说明")


class AcceptRunResult(BaseModel):
    """接单运行结果.

    只在内存中使用, 运行结束后写入日志并在命令行展示.

    Attributes:
        success: 是否全部完成
        started_at: 开始时间
        finished_at: 结束时间
        duration_seconds: 耗时(秒)
        steps: 按执行顺序记录的步骤
        popup_strategy: 关闭弹窗命中的策略
        screenshots: 检查点截图路径
        failed_step: 失败的步骤名称
        error_message: 错误信息
    """

    success: bool = Field(default=False, description="是否成功")
    started_at: str = Field(
        default_factory=lambda: datetime.now().isoformat(), description="开始时间"
    )
    finished_at: str | None = Field(default=None, description="结束时间")
    duration_seconds: float = Field(default=0.0, description="耗时")
    steps: list[StepRecord] = Field(default_factory=list, description="步骤记录")
    popup_strategy: str | None = Field(default=None, description="弹窗关闭策略")
    screenshots: list[str] = Field(default_factory=list, description="检查点截图")
    failed_step: str | None = Field(default=None, description="失败步骤")
    error_message: str | None = Field(default=None, description="错误信息")

    def record(self, name: str, status: str = "success", detail: str | None = None) -> None:
        """追加一条步骤记录."""
        self.steps.append(StepRecord(name=name, status=status, detail=detail))
