"""Career recommendation tool handler."""

import logging
from typing import Any

from ...models import RecommendCourseParams, ToolName, ToolResult
from .base import HandlerContext, parse_params

logger = logging.getLogger(__name__)


async def handle_recommend_course(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> ToolResult:
    """Recommend a course for the career an applicant is aiming for.

    Falls back to the configured default course when the career is unknown,
    and to the raw course id when the recommended course cannot be resolved.
    """
    args = parse_params(RecommendCourseParams, ToolName.RECOMMEND_COURSE, params)

    recommendation = await ctx.repository.find_recommendation(args.career)
    if recommendation is None:
        logger.info(f"recommend_course: no mapping for career={args.career!r}, using default")
        return ToolResult(
            text=(
                f"No tenemos una recomendación específica para {args.career}. "
                f"Te recomendamos el {ctx.settings.default_recommended_course}, "
                "que prepara para el examen de admisión de cualquier carrera."
            )
        )

    course = await ctx.repository.get_course(recommendation.course_id)
    course_name = course.name if course else recommendation.course_id

    return ToolResult(
        text=f"Para la carrera {recommendation.career} te recomendamos el curso: {course_name}."
    )
