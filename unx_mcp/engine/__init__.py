"""Tool-invocation engine: registry and data-aggregating handlers."""

from .handlers import HandlerContext, ToolArgumentError
from .registry import RegisteredTool, ToolRegistry, build_registry

__all__ = [
    "HandlerContext",
    "ToolArgumentError",
    "RegisteredTool",
    "ToolRegistry",
    "build_registry",
]
