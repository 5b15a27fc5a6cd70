"""
@PURPOSE: 工作流包
@OUTLINE:
  - accept_orders_workflow: 登录 → Pending Orders → 全选 → 批量接单
@DEPENDENCIES:
  - 内部: browser, models
  - 外部: playwright
"""

from .accept_orders_workflow import AcceptOrdersWorkflow

__all__ = ["AcceptOrdersWorkflow"]
