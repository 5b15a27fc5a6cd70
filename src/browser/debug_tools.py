"""
@PURPOSE: 检查点截图与失败现场保存, 以及结构化数据的 Rich 表格输出
@OUTLINE:
  - class CheckpointRecorder: 固定检查点截图(login-page / after-login / after-accept)
  - async def capture_debug_artifacts(): 保存带时间戳的截图与HTML
  - def log_payload_preview(): 使用 Rich 输出结构化数据
@GOTCHAS:
  - 截图失败只记录警告, 不会中断工作流
@DEPENDENCIES:
  - 外部: playwright, rich, loguru
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from loguru import logger
from playwright.async_api import Page
from rich.console import Console
from rich.table import Table


class CheckpointRecorder:
    """固定检查点截图.

    每个检查点写入 ``<output_dir>/<name>.png``, 同名文件会被覆盖,
    方便 CI 直接把截图目录作为产物上传.

    Attributes:
        output_dir: 截图目录
        full_page: 是否整页截图
        enabled: 是否启用
        captured: 已保存的截图路径(按顺序)
    """

    def __init__(
        self,
        page: Page,
        output_dir: Path,
        *,
        full_page: bool = True,
        enabled: bool = True,
    ):
        self.page = page
        self.output_dir = Path(output_dir)
        self.full_page = full_page
        self.enabled = enabled
        self.captured: list[Path] = []

    async def capture(self, name: str) -> Path | None:
        """保存一个检查点截图.

        Args:
            name: 检查点名称, 同时作为文件名

        Returns:
            截图路径, 未启用或失败时返回 None
        """
        if not self.enabled:
            return None

        path = self.output_dir / f"{name}.png"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await self.page.screenshot(path=str(path), full_page=self.full_page)
        except Exception as exc:
            logger.warning(f"⚠ 检查点截图失败 [{name}]: {exc}")
            return None

        self.captured.append(path)
        logger.info(f"📸 检查点截图: {path}")
        return path


async def capture_debug_artifacts(
    page: Page,
    *,
    step: str,
    output_dir: Path,
) -> dict[str, str]:
    """保存当前页面的截图和HTML, 便于调试回溯.

    Args:
        page: Playwright 页面对象.
        step: 当前步骤名称, 用于生成文件名前缀.
        output_dir: 输出目录.

    Returns:
        包含截图与HTML路径的字典.
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    safe_step = step.replace(" ", "_").replace("/", "-")
    output_dir.mkdir(parents=True, exist_ok=True)

    screenshot_path = output_dir / f"{timestamp}_{safe_step}.png"
    html_path = output_dir / f"{timestamp}_{safe_step}.html"

    await page.screenshot(path=str(screenshot_path), full_page=True)
    html_content = await page.content()
    html_path.write_text(html_content, encoding="utf-8")

    logger.debug(
        "调试资源已保存 | screenshot={} | html={}",
        screenshot_path,
        html_path,
    )
    return {"screenshot": str(screenshot_path), "html": str(html_path)}


def log_payload_preview(
    payload: Mapping[str, Any],
    *,
    title: str = "Payload",
    console: Console | None = None,
) -> None:
    """使用 Rich 表格展示结构化 payload, 便于快速校验."""
    console = console or Console()
    table = Table(title=title)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")

    for key, value in payload.items():
        formatted = (
            json.dumps(value, ensure_ascii=False) if isinstance(value, (dict, list)) else str(value)
        )
        table.add_row(str(key), formatted)

    console.print(table)
