"""Tool registry: name -> (definition, handler).

The catalog published by tools/list and the set of callable tools are built
from the same entries, so a tool is listed if and only if it can be called.
"""

from dataclasses import dataclass

from ..config import Settings
from ..mcp.tool_defs import GET_ACTIVE_COURSES, GET_COURSE_DETAILS, RECOMMEND_COURSE
from .handlers import (
    HandlerFunc,
    handle_get_active_courses,
    handle_get_course_details,
    handle_recommend_course,
)


@dataclass(frozen=True)
class RegisteredTool:
    definition: dict
    handler: HandlerFunc

    @property
    def name(self) -> str:
        return self.definition["name"]


class ToolRegistry:
    """Read-only catalog of tools. Does not validate arguments."""

    def __init__(self, tools: list[RegisteredTool]):
        self._tools = {tool.name: tool for tool in tools}

    def list_tools(self) -> list[dict]:
        return [tool.definition for tool in self._tools.values()]

    def get(self, name: str | None) -> RegisteredTool | None:
        if not name or not isinstance(name, str):
            return None
        return self._tools.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_registry(settings: Settings) -> ToolRegistry:
    """Build the registry for the configured feature set."""
    tools = [
        RegisteredTool(GET_ACTIVE_COURSES, handle_get_active_courses),
        RegisteredTool(GET_COURSE_DETAILS, handle_get_course_details),
    ]
    if settings.enable_recommendations:
        tools.append(RegisteredTool(RECOMMEND_COURSE, handle_recommend_course))
    return ToolRegistry(tools)
