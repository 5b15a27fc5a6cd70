"""
@PURPOSE: Pytest配置文件, 配置测试环境和fixtures
@OUTLINE:
  - pytest_configure(): 注册标记
  - clean_env: 清除会影响配置的环境变量
  - Mock fixtures: mock_page, meesho_page, mock_browser_manager
  - Settings fixtures: make_settings, test_settings
@DEPENDENCIES:
  - 外部: pytest, pytest-asyncio
  - 内部: tests.mocks, config.settings
"""

import sys
from pathlib import Path

import pytest

# 添加项目根目录到Python路径
app_root = Path(__file__).parent
if str(app_root) not in sys.path:
    sys.path.insert(0, str(app_root))

from config.settings import DebugConfig, Settings, TimingConfig
from tests.mocks import MockBrowserManager, MockPage, build_meesho_page

_ENV_VARS = (
    "MEESHO_EMAIL",
    "MEESHO_PASSWORD",
    "MEESHO_URL",
    "CI",
    "ENVIRONMENT",
    "BROWSER_HEADLESS",
    "BROWSER_SLOW_MO",
    "BROWSER_TIMEOUT",
    "LOGGING_LEVEL",
)


def pytest_configure(config):
    """配置pytest."""
    config.addinivalue_line("markers", "asyncio: 标记异步测试")
    config.addinivalue_line("markers", "integration: 标记集成测试（需要浏览器环境）")


pytest_plugins = ("pytest_asyncio",)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """清除会影响配置的环境变量, 避免本机 .env/CI 变量干扰测试."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_page() -> MockPage:
    """空白 Mock 页面."""
    return MockPage()


@pytest.fixture
def meesho_page() -> MockPage:
    """包含登录表单/订单卡片/全选/接单按钮的 Mock 页面, 无弹窗."""
    return build_meesho_page()


@pytest.fixture
def mock_browser_manager(meesho_page) -> MockBrowserManager:
    return MockBrowserManager(page=meesho_page)


@pytest.fixture
def make_settings(tmp_path):
    """构建不读取 .env 的测试配置, 渲染等待置零, 输出目录指向 tmp_path."""

    def _make(**overrides) -> Settings:
        values = {
            "meesho_email": "supplier@example.com",
            "meesho_password": "secret",
            "timing": TimingConfig(
                popup_render_wait_ms=0,
                table_render_wait_ms=0,
                network_idle_timeout_ms=10,
            ),
            "debug": DebugConfig(
                screenshot_dir=str(tmp_path / "screenshots"),
                error_dir=str(tmp_path / "debug"),
            ),
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def test_settings(make_settings) -> Settings:
    return make_settings()
