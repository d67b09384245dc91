"""Tool handlers.

- courses: get_active_courses, get_course_details
- careers: recommend_course

Each handler is a standalone async function that takes:
- params: dict[str, Any] - tool arguments from tools/call
- ctx: HandlerContext - repository and settings

And returns a ToolResult with the text for the agent.
"""

from .base import HandlerContext, HandlerFunc, ToolArgumentError
from .careers import handle_recommend_course
from .courses import format_course_detail, handle_get_active_courses, handle_get_course_details

__all__ = [
    # Base
    "HandlerContext",
    "HandlerFunc",
    "ToolArgumentError",
    # Course handlers
    "handle_get_active_courses",
    "handle_get_course_details",
    "format_course_detail",
    # Career handlers
    "handle_recommend_course",
]
