"""Argument models for tool calls.

Each model mirrors the inputSchema published for its tool in tools/list.
"""

from pydantic import BaseModel, Field


class GetActiveCoursesParams(BaseModel):
    """Parameters for get_active_courses (none)."""


class GetCourseDetailsParams(BaseModel):
    """Parameters for get_course_details tool."""

    keyword: str = Field(..., min_length=1, description="Partial course name, e.g. Integral")
    modality: str | None = Field(default=None, description="Partial modality, e.g. Presencial")


class RecommendCourseParams(BaseModel):
    """Parameters for recommend_course tool."""

    career: str = Field(..., min_length=1, description="Career the applicant is aiming for")
