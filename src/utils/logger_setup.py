"""
@PURPOSE: 日志系统设置 - 配置结构化日志、日志轮转和多级别输出
@OUTLINE:
  - def setup_logger(): 配置全局日志系统
  - def get_logger_with_context(): 获取带上下文的logger
  - def format_detailed(): 详细格式化器
  - def format_json(): JSON格式化器
  - def format_simple(): 简单格式化器
  - def log_section(): 记录分隔行
@GOTCHAS:
  - loguru 会自动管理日志轮转
  - 需要在入口调用 setup_logger(), 导入本模块不会改动 handler
  - JSON 格式适合 CI/服务器日志分析
@DEPENDENCIES:
  - 外部: loguru
  - 内部: config.settings
"""

import json
import sys
from typing import Any, Dict, Optional

from loguru import logger

from config.settings import settings

_CONTEXT_KEYS = ("run_id", "step")


# ========== 日志格式化器 ==========


def format_detailed(record: Dict[str, Any]) -> str:
    """详细格式化器（开发环境）.

    Args:
        record: 日志记录

    Returns:
        格式化后的日志字符串
    """
    extra = record["extra"]
    run_id = extra.get("run_id", "")
    step = extra.get("step", "")

    context_parts = []
    if run_id:
        context_parts.append(f"run={run_id[:8]}")
    if step:
        context_parts.append(f"step={step}")

    context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
        f"{context_str} - "
        "<level>{message}</level>\n"
        "{exception}"
    )


def format_json(record: Dict[str, Any]) -> str:
    """JSON格式化器（生产环境）.

    Args:
        record: 日志记录

    Returns:
        JSON格式的日志字符串
    """
    log_entry = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
        "message": record["message"],
    }

    extra = record["extra"]
    context = {key: extra[key] for key in _CONTEXT_KEYS if key in extra}
    if context:
        log_entry["context"] = context

    if record["exception"]:
        log_entry["exception"] = {
            "type": record["exception"].type.__name__,
            "value": str(record["exception"].value),
        }

    # loguru 会对返回值再做一次 format, 花括号需要转义
    serialized = json.dumps(log_entry, ensure_ascii=False)
    return serialized.replace("{", "{{").replace("}", "}}") + "\n"


def format_simple(record: Dict[str, Any]) -> str:
    """简单格式化器."""
    return "{time:HH:mm:ss} | {level: <8} | {message}\n"


# ========== 日志设置 ==========


def setup_logger(config: Optional[Any] = None, force: bool = True) -> None:
    """配置全局日志系统.

    Args:
        config: 日志配置，默认使用 settings.logging
        force: 是否移除已有 handler 后重新配置

    Examples:
        >>> from src.utils.logger_setup import setup_logger
        >>> setup_logger()
    """
    if config is None:
        config = settings.logging

    if force:
        logger.remove()

    if config.format == "json":
        formatter = format_json
    elif config.format == "simple":
        formatter = format_simple
    else:
        formatter = format_detailed

    if "console" in config.output:
        logger.add(
            sys.stderr,
            format=formatter,
            level=config.level,
            colorize=config.format != "json",
            backtrace=True,
            diagnose=False,
        )

    if "file" in config.output:
        log_file = settings.get_absolute_path(config.file_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(log_file),
            format=formatter,
            level=config.level,
            rotation=config.rotation,
            retention=config.retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
            encoding="utf-8",
        )

    logger.debug(
        f"日志系统已配置: level={config.level}, format={config.format}, output={config.output}"
    )


def get_logger_with_context(**context) -> Any:
    """获取带上下文的logger.

    Examples:
        >>> log = get_logger_with_context(run_id="xxx", step="login")
        >>> log.info("开始登录")
    """
    return logger.bind(**context)


def log_section(title: str, char: str = "=", width: int = 60) -> None:
    """记录分隔行.

    Examples:
        >>> log_section("开始接单")
        ============================================================
        开始接单
        ============================================================
    """
    logger.info(char * width)
    logger.info(title)
    logger.info(char * width)
