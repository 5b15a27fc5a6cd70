"""
@PURPOSE: 应用配置管理，使用Pydantic Settings管理配置，支持多环境和从YAML加载
@OUTLINE:
  - class LoggingConfig: 日志配置
  - class BrowserConfig: 浏览器配置
  - class TimingConfig: 页面渲染等待配置
  - class DebugConfig: 截图与调试配置
  - class Settings: 应用配置主类
  - def load_environment_config(): 加载环境配置
  - def create_settings(): 创建配置实例
@GOTCHAS:
  - 账号密码只从环境变量或.env读取, 不写入YAML
  - CI 变量只要非空且不是 0/false/no/off 即视为 CI 环境
  - 顶层字段: 环境变量 > 默认值; 子配置: YAML > 前缀环境变量(如 BROWSER_TIMEOUT) > 默认值
@DEPENDENCIES:
  - 外部: pydantic, pydantic_settings, pyyaml
  - 内部: src.errors
@RELATED: __init__.py, environments/
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from src.errors import MissingCredentialsError

DEFAULT_MEESHO_URL = "https://supplier.meesho.com/panel/v3/new/root/login"

_FALSY_FLAGS = {"", "0", "false", "no", "off"}

# 子配置只从 YAML 和各自前缀的环境变量构建, 同名的 BROWSER/DEBUG 等变量与本项目无关
_NESTED_FIELDS = frozenset({"logging", "browser", "timing", "debug"})


# ========== 子配置类 ==========


class LoggingConfig(BaseSettings):
    """日志配置.

    Attributes:
        level: 日志级别
        format: 日志格式(detailed/simple/json)
        output: 输出目标列表
        file_path: 文件路径
        rotation: 轮转大小
        retention: 保留时间
    """

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="日志级别")
    format: str = Field(default="detailed", description="日志格式")
    output: list[str] = Field(default=["console", "file"], description="输出目标")
    file_path: str = Field(default="data/logs/meesho.log", description="文件路径")
    rotation: str = Field(default="10 MB", description="轮转大小")
    retention: str = Field(default="7 days", description="保留时间")


class BrowserConfig(BaseSettings):
    """浏览器配置.

    Attributes:
        headless: 无头模式(CI 环境下强制开启)
        slow_mo: 慢速模式(毫秒, CI 环境下为 0)
        timeout: 单步默认超时(毫秒)
        viewport: 视口大小
        locale: 语言区域
    """

    model_config = SettingsConfigDict(env_prefix="BROWSER_", extra="ignore")

    headless: bool = Field(default=False, description="无头模式")
    slow_mo: int = Field(default=200, ge=0, description="慢速模式（毫秒）")
    timeout: int = Field(default=60_000, ge=1, description="默认超时（毫秒）")
    viewport: dict[str, int] = Field(
        default={"width": 1440, "height": 900},
        description="视口大小",
    )
    locale: str = Field(default="en-IN", description="语言区域")


class TimingConfig(BaseSettings):
    """页面渲染等待配置.

    Attributes:
        popup_render_wait_ms: 弹窗渲染等待
        table_render_wait_ms: 订单表格渲染等待
        network_idle_timeout_ms: 网络空闲最长等待(超时不报错)
    """

    model_config = SettingsConfigDict(env_prefix="TIMING_", extra="ignore")

    popup_render_wait_ms: int = Field(default=1500, ge=0, description="弹窗渲染等待")
    table_render_wait_ms: int = Field(default=2000, ge=0, description="表格渲染等待")
    network_idle_timeout_ms: int = Field(default=5000, ge=0, description="网络空闲等待")


class DebugConfig(BaseSettings):
    """截图与调试配置.

    Attributes:
        screenshot_dir: 检查点截图目录
        screenshot_full_page: 是否整页截图
        capture_on_error: 失败时保存截图和HTML
        error_dir: 失败现场保存目录
    """

    model_config = SettingsConfigDict(env_prefix="DEBUG_", extra="ignore")

    screenshot_dir: str = Field(default="screenshots", description="截图目录")
    screenshot_full_page: bool = Field(default=True, description="整页截图")
    capture_on_error: bool = Field(default=True, description="失败时保存现场")
    error_dir: str = Field(default="data/debug", description="失败现场目录")


# ========== 配置来源 ==========


class _SkipNestedFieldsMixin:
    def get_field_value(self, field, field_name: str) -> tuple[Any, str, bool]:
        if field_name in _NESTED_FIELDS:
            return None, field_name, False
        return super().get_field_value(field, field_name)


class TopLevelEnvSource(_SkipNestedFieldsMixin, EnvSettingsSource):
    """只读取顶层字段的环境变量来源."""


class TopLevelDotEnvSource(_SkipNestedFieldsMixin, DotEnvSettingsSource):
    """只读取顶层字段的 .env 来源."""


# ========== 主配置类 ==========


class Settings(BaseSettings):
    """应用配置主类.

    从环境变量、.env文件和YAML配置文件加载配置。
    优先级: 顶层字段取环境变量, 子配置以 YAML 为准, YAML 未设置的字段可用前缀环境变量覆盖

    Attributes:
        environment: 运行环境
        meesho_email: Meesho 登录邮箱/手机号
        meesho_password: Meesho 登录密码
        meesho_url: 登录页地址
        ci: 是否运行在 CI 环境
        data_logs_dir: 日志目录
        selector_file: 选择器配置文件
        logging: 日志配置
        browser: 浏览器配置
        timing: 等待配置
        debug: 调试配置

    Examples:
        >>> from config.settings import settings
        >>> settings.meesho_url
        'https://supplier.meesho.com/panel/v3/new/root/login'
    """

    environment: str = Field(default="development", description="运行环境")

    # Meesho 账号配置（从.env加载）
    meesho_email: str = Field(default="", description="Meesho 邮箱或手机号")
    meesho_password: str = Field(default="", description="Meesho 密码")
    meesho_url: str = Field(default=DEFAULT_MEESHO_URL, description="Meesho 登录页")

    ci: bool = Field(default=False, description="是否 CI 环境")

    data_logs_dir: str = Field(default="data/logs", description="日志目录")
    selector_file: str = Field(
        default="config/meesho_selectors.json",
        description="选择器配置文件",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """环境变量和 .env 不参与子配置(logging/browser/timing/debug)的解析."""
        return (
            init_settings,
            TopLevelEnvSource(settings_cls),
            TopLevelDotEnvSource(
                settings_cls,
                env_file=dotenv_settings.env_file,
                env_file_encoding=dotenv_settings.env_file_encoding,
            ),
            file_secret_settings,
        )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """验证环境名称."""
        valid_envs = ["development", "staging", "production"]
        if v not in valid_envs:
            raise ValueError(f"环境必须是: {valid_envs}")
        return v

    @field_validator("ci", mode="before")
    @classmethod
    def parse_ci_flag(cls, v: Any) -> bool:
        """CI 标记: 非空即真, 常见假值除外."""
        if isinstance(v, bool):
            return v
        if v is None:
            return False
        return str(v).strip().lower() not in _FALSY_FLAGS

    @field_validator("meesho_url")
    @classmethod
    def default_blank_url(cls, v: str) -> str:
        """空字符串回退到默认登录页."""
        return v.strip() or DEFAULT_MEESHO_URL

    def effective_headless(self) -> bool:
        """CI 环境强制无头模式."""
        return self.ci or self.browser.headless

    def effective_slow_mo(self) -> int:
        """CI 环境不放慢操作."""
        return 0 if self.ci else self.browser.slow_mo

    def require_credentials(self) -> tuple[str, str]:
        """返回登录凭证, 缺失时抛出异常.

        Returns:
            (邮箱, 密码)

        Raises:
            MissingCredentialsError: 任一凭证为空
        """
        missing = []
        if not self.meesho_email:
            missing.append("MEESHO_EMAIL")
        if not self.meesho_password:
            missing.append("MEESHO_PASSWORD")
        if missing:
            raise MissingCredentialsError(missing)
        return self.meesho_email, self.meesho_password

    def get_absolute_path(self, relative_path: str) -> Path:
        """将相对路径转换为绝对路径(相对于项目根目录).

        Args:
            relative_path: 相对路径

        Returns:
            绝对路径
        """
        path = Path(relative_path)
        if path.is_absolute():
            return path
        base_dir = Path(__file__).parent.parent
        return base_dir / path

    def ensure_directories(self) -> None:
        """确保所有必需的目录存在."""
        for dir_path in [
            self.data_logs_dir,
            self.debug.screenshot_dir,
            self.debug.error_dir,
        ]:
            self.get_absolute_path(dir_path).mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典（隐藏敏感信息）."""
        data = self.model_dump()
        if data.get("meesho_password"):
            data["meesho_password"] = "***"
        return data


# ========== 配置加载 ==========


def load_environment_config(env: str = "development") -> dict[str, Any]:
    """从YAML文件加载环境配置，支持别名引用."""

    config_dir = Path(__file__).parent / "environments"
    target_file = config_dir / f"{env}.yaml"

    def _load(file_path: Path, seen: set[Path]) -> dict[str, Any]:
        if file_path in seen:
            raise ValueError(f"检测到环境配置的循环引用: {file_path}")
        seen.add(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"环境配置文件不存在: {file_path}")

        with file_path.open("r", encoding="utf-8") as handle:
            content = yaml.safe_load(handle)

        if content is None:
            return {}

        if isinstance(content, str):
            alias = content.strip()
            if not alias:
                raise ValueError(f"环境配置别名不能为空: {file_path}")

            if alias.endswith((".yaml", ".yml")):
                alias_file = file_path.parent / alias
            else:
                alias_file = file_path.parent / f"{alias}.yaml"

            return _load(alias_file, seen)

        if not isinstance(content, dict):
            raise TypeError(
                f"环境配置 {file_path} 必须是字典或别名字符串, 当前类型: {type(content).__name__}",
            )

        return content

    return _load(target_file, set())


def create_settings(env: str | None = None) -> Settings:
    """创建配置实例.

    Args:
        env: 环境名称，如果为None则从环境变量获取

    Returns:
        配置实例
    """
    if env is None:
        env = os.getenv("ENVIRONMENT", "development")

    yaml_config = load_environment_config(env)

    # 子配置: YAML 未设置的字段可由 BROWSER_TIMEOUT 之类的前缀变量覆盖
    return Settings(
        environment=env,
        logging=LoggingConfig(**yaml_config.get("logging", {})),
        browser=BrowserConfig(**yaml_config.get("browser", {})),
        timing=TimingConfig(**yaml_config.get("timing", {})),
        debug=DebugConfig(**yaml_config.get("debug", {})),
    )


# ========== 全局配置实例 ==========

_env = os.getenv("ENVIRONMENT", "development")
settings = create_settings(_env)
