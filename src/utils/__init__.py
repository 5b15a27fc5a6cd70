"""工具模块."""

from .page_waiter import PageWaiter, WaitStrategy

__all__ = [
    "PageWaiter",
    "WaitStrategy",
]
