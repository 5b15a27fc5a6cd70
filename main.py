"""
@PURPOSE: Meesho 自动接单 CLI 入口
@OUTLINE:
  - app: Typer 应用实例
  - def run(): 执行接单工作流(默认命令)
  - def info(): 显示当前生效的配置(密码已隐藏)
@GOTCHAS:
  - 不带子命令运行等同于 run
  - 任何失败(包括缺少凭证)退出码均为 1, 便于 CI 判定
  - CI 环境变量存在时强制无头模式, 除非显式传入 --no-headless
@DEPENDENCIES:
  - 内部: config.settings, src.workflows, src.utils.logger_setup
  - 外部: typer, rich, loguru
"""

from __future__ import annotations

from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.settings import create_settings
from src.browser.debug_tools import log_payload_preview
from src.models.result import AcceptRunResult
from src.utils.logger_setup import setup_logger
from src.workflows.accept_orders_workflow import AcceptOrdersWorkflow

app = typer.Typer(
    name="meesho-auto-accept",
    help="Meesho 供应商后台自动接单",
    add_completion=False,
)

console = Console()

HEADLESS_OPTION = typer.Option(
    None,
    "--headless/--no-headless",
    help="手动覆盖 headless 设置 (默认: CI 环境无头, 本地有头)",
)

URL_OPTION = typer.Option(
    None,
    "--url",
    help="覆盖 MEESHO_URL 登录页地址",
)

SCREENSHOT_DIR_OPTION = typer.Option(
    None,
    "--screenshot-dir",
    help="检查点截图目录 (默认: screenshots)",
)


def _print_summary(result: AcceptRunResult | None) -> None:
    if result is None:
        return

    table = Table(title="运行步骤")
    table.add_column("步骤", style="cyan", no_wrap=True)
    table.add_column("状态")
    table.add_column("说明", style="magenta")
    for step in result.steps:
        status = "[green]✓[/green]" if step.status == "success" else f"[red]✗ {step.status}[/red]"
        table.add_row(step.name, status, step.detail or "")
    console.print(table)

    if result.popup_strategy:
        console.print(f"  弹窗关闭方式: {result.popup_strategy}")
    for path in result.screenshots:
        console.print(f"  截图: {path}")
    console.print(f"  耗时: {result.duration_seconds}s")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Meesho 供应商后台自动接单."""
    if ctx.invoked_subcommand is None:
        run(headless=None, url=None, screenshot_dir=None)


@app.command()
def run(
    headless: bool | None = HEADLESS_OPTION,
    url: str | None = URL_OPTION,
    screenshot_dir: Path | None = SCREENSHOT_DIR_OPTION,
) -> None:
    """登录 Meesho 并接受全部待处理订单.

    Examples:
        python main.py
        python main.py run --headless
        CI=true python main.py run --screenshot-dir artifacts
    """
    settings = create_settings()
    if url:
        settings = settings.model_copy(update={"meesho_url": url})

    settings.ensure_directories()
    setup_logger(settings.logging)
    console.print(Panel.fit("🌐 Meesho 自动接单", style="bold blue"))

    workflow = AcceptOrdersWorkflow(
        settings,
        headless=headless,
        screenshot_dir=str(screenshot_dir) if screenshot_dir else None,
    )

    try:
        workflow.execute()
    except Exception as exc:
        logger.error(f"❌ 接单失败: {exc}")
        _print_summary(workflow.result)
        console.print(f"[red]✗ 接单失败: {exc}[/red]")
        raise typer.Exit(1) from exc

    _print_summary(workflow.result)
    console.print("[green]✓ 待处理订单已全部接受[/green]")


@app.command()
def info() -> None:
    """显示当前生效的配置(密码已隐藏)."""
    settings = create_settings()
    console.print(Panel.fit("📊 当前配置", style="bold blue"))

    summary = settings.to_dict()
    summary["effective_headless"] = settings.effective_headless()
    summary["effective_slow_mo"] = settings.effective_slow_mo()
    log_payload_preview(summary, title="Settings", console=console)


if __name__ == "__main__":
    app()
