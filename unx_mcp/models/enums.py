"""Enumeration types for the UNX MCP server."""

from enum import StrEnum


class ToolName(StrEnum):
    """Tools exposed through tools/list and tools/call."""

    GET_ACTIVE_COURSES = "get_active_courses"
    GET_COURSE_DETAILS = "get_course_details"
    RECOMMEND_COURSE = "recommend_course"


class CourseStatus(StrEnum):
    """Publication status of a course."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class MediaKind(StrEnum):
    """Kind tag of a course media asset."""

    MAIN_IMAGE = "main_image"
