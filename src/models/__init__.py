"""
@PURPOSE: 数据模型模块, 使用 Pydantic 定义运行结果
@OUTLINE:
  - StepRecord, AcceptRunResult: 接单运行结果
@DEPENDENCIES:
  - 内部: .result
"""

from .result import AcceptRunResult, StepRecord

__all__ = ["AcceptRunResult", "StepRecord"]
