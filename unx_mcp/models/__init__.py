"""Pydantic models for the UNX MCP server.

    from unx_mcp.models import Course, ToolName, ToolResult
"""

from .entities import (
    CareerRecommendation,
    Course,
    MediaAsset,
    PricingRecord,
    SessionRecord,
)
from .enums import CourseStatus, MediaKind, ToolName
from .requests import (
    GetActiveCoursesParams,
    GetCourseDetailsParams,
    RecommendCourseParams,
)
from .responses import HealthResponse, ReadyResponse, ToolResult

__all__ = [
    # Entities
    "Course",
    "PricingRecord",
    "SessionRecord",
    "MediaAsset",
    "CareerRecommendation",
    # Enums
    "ToolName",
    "CourseStatus",
    "MediaKind",
    # Tool parameters
    "GetActiveCoursesParams",
    "GetCourseDetailsParams",
    "RecommendCourseParams",
    # Responses
    "ToolResult",
    "HealthResponse",
    "ReadyResponse",
]
