"""
@PURPOSE: 浏览器自动化模块, 封装 Playwright 操作和 Meesho 页面控制器
@OUTLINE:
  - BrowserManager: 浏览器管理器
  - LoginController: 登录控制器
  - PopupDismisser: 弹窗关闭器
  - OrdersController: 待处理订单控制器
  - CheckpointRecorder: 检查点截图
@DEPENDENCIES:
  - 外部: playwright
@RELATED: ../workflows/, ../../config/
"""

from .browser_manager import BrowserManager
from .debug_tools import CheckpointRecorder, capture_debug_artifacts
from .login_controller import LoginController
from .orders_controller import OrdersController
from .popup_dismisser import PopupDismisser

__all__ = [
    "BrowserManager",
    "CheckpointRecorder",
    "LoginController",
    "OrdersController",
    "PopupDismisser",
    "capture_debug_artifacts",
]
