"""
@PURPOSE: 加载 Meesho 后台选择器配置, JSON 文件覆盖内置默认值
@OUTLINE:
  - DEFAULT_SELECTORS: 内置默认选择器
  - def load_selectors(): 读取 JSON 并与默认值合并
  - def role_name(): 将 *_pattern 配置编译为忽略大小写的正则
@GOTCHAS:
  - Meesho 的 MUI 类名(css-xxxx)随发版变化, 失效时只需改 config/meesho_selectors.json
  - 键名以 _pattern 结尾的是正则, 其余 *_name 是 get_by_role 的普通名称
@DEPENDENCIES:
  - 外部: loguru
@RELATED: ../../config/meesho_selectors.json
"""

from __future__ import annotations

import copy
import json
import re
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_SELECTORS: dict[str, dict[str, str]] = {
    "login": {
        "email_input": 'input[name="emailOrPhone"]',
        "password_input": 'input[name="password"]',
        "login_button_pattern": "log in|login",
    },
    "pending_orders": {
        "card_text": 'p:has-text("Pending Orders")',
        "card_box": "xpath=ancestor::div[@data-testid='box']",
        "select_all_checkbox": 'input[aria-label="select all rows"]',
        "accept_button_name": "Accept Selected Orders",
        "confirm_button_name": "Accept Order",
    },
    "popups": {
        "skip_span": 'span.MuiTypography-button:has-text("Skip")',
        "skip_container": 'xpath=ancestor::div[contains(@class,"css-gq3nwx")]',
        "close_icon": "svg.css-1fmevri",
        "got_it_pattern": "got it",
    },
}


def _resolve(path: Path) -> Path:
    if path.is_absolute():
        return path
    project_root = Path(__file__).resolve().parents[2]
    return project_root / path


def load_selectors(selector_path: str | Path | None = None) -> dict[str, dict[str, str]]:
    """加载选择器配置.

    Args:
        selector_path: JSON 文件路径(相对路径基于项目根目录), None 则只用默认值

    Returns:
        合并后的选择器字典, 读取失败时返回默认值
    """
    selectors = copy.deepcopy(DEFAULT_SELECTORS)
    if selector_path is None:
        return selectors

    selector_file = _resolve(Path(selector_path))
    try:
        with open(selector_file, encoding="utf-8") as f:
            overrides: dict[str, Any] = json.load(f)
    except Exception as e:
        logger.warning(f"加载选择器配置失败, 使用默认选择器: {e}")
        return selectors

    for section, values in overrides.items():
        if isinstance(values, dict):
            selectors.setdefault(section, {}).update(values)
    return selectors


def role_name(pattern: str) -> re.Pattern[str]:
    """把配置中的正则字符串编译为忽略大小写的正则."""
    return re.compile(pattern, re.IGNORECASE)
