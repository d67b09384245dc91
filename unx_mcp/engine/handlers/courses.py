"""Course catalog tool handlers.

Handles:
- get_active_courses: one line per active course
- get_course_details: course merged with current-calendar pricing, schedule and image

Missing rows never fail a call: they render as placeholders. Only repository
faults propagate.
"""

import logging
from typing import Any

from ...config import Settings
from ...models import (
    Course,
    GetActiveCoursesParams,
    GetCourseDetailsParams,
    MediaAsset,
    MediaKind,
    PricingRecord,
    SessionRecord,
    ToolName,
    ToolResult,
)
from .base import DASH, HandlerContext, format_date, format_money, parse_params, run_concurrently

logger = logging.getLogger(__name__)

PRICE_PENDING = "Precio por confirmar"


def _course_line(course: Course, pricing: PricingRecord | None) -> str:
    promo = pricing.promo_price if pricing else None
    price = format_money(promo) if promo is not None else PRICE_PENDING
    if course.start_date:
        start = format_date(course.start_date)
    else:
        start = course.duration_label or DASH
    return f"- {course.name} ({course.modality or DASH}): {price}. Inicio: {start}"


async def handle_get_active_courses(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> ToolResult:
    """List active courses with their current promotional price.

    Pricing for every course is fetched concurrently; one failed lookup
    cancels the others. An empty catalog yields
    an empty (successful) text.

    Returns:
        ToolResult with one line per course
    """
    parse_params(GetActiveCoursesParams, ToolName.GET_ACTIVE_COURSES, params)

    courses = await ctx.repository.list_active_courses(ctx.settings.active_courses_category)
    if not courses:
        logger.info("get_active_courses: no active courses")
        return ToolResult(text="")

    pricing = await run_concurrently(
        *(ctx.repository.find_pricing(course.id, ctx.calendar) for course in courses)
    )
    lines = [_course_line(course, price) for course, price in zip(courses, pricing)]
    return ToolResult(text="\n".join(lines))


def _not_found_text(args: GetCourseDetailsParams) -> str:
    target = f'"{args.keyword}"'
    if args.modality:
        target += f' en modalidad "{args.modality}"'
    return (
        f"No se encontró información de un curso activo que coincida con {target}. "
        "Verifica el nombre del curso o consulta la lista de cursos activos."
    )


def _resolve_modality(
    course: Course, pricing: PricingRecord | None, session: SessionRecord | None
) -> str:
    if pricing and pricing.modality:
        return pricing.modality
    if session and session.modality:
        return session.modality
    return course.modality or DASH


def format_course_detail(
    course: Course,
    pricing: PricingRecord | None,
    session: SessionRecord | None,
    media: MediaAsset | None,
    settings: Settings,
) -> str:
    """Compose the multi-line detail block for one course."""
    modality = _resolve_modality(course, pricing, session)

    start = session.start_date if session and session.start_date else course.start_date
    end = session.end_date if session and session.end_date else course.end_date
    schedule = session.schedule if session and session.schedule else DASH

    list_price = format_money(pricing.list_price if pricing else None)
    promo_price = format_money(pricing.promo_price if pricing else None)
    reservation = format_money(pricing.reservation_amount if pricing else None)
    deadline = format_date(pricing.promo_expires_at if pricing else None)

    image = media.url if media else (course.image_url or settings.default_image_url)
    purchase = course.purchase_url or settings.purchase_url

    lines = [
        f"CURSO: {course.name} ({modality})",
        f"Fechas: {format_date(start)} al {format_date(end)}",
        f"Horario: {schedule}",
        f"Precio de lista: {list_price}",
        f"Precio promocional: {promo_price}",
        f"Promoción válida hasta: {deadline}",
        f"Apartado: {reservation}",
        f"Link de compra: {purchase}",
        f"Imagen: {image}",
    ]
    if course.duration_label:
        lines.append(f"Duración: {course.duration_label}")
    if course.description:
        lines.append(course.description)
    return "\n".join(lines)


async def handle_get_course_details(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> ToolResult:
    """Get full detail of the first active course matching keyword/modality.

    Args:
        params: Dict containing:
            - keyword: Partial course name (case-insensitive)
            - modality: Optional partial modality (case-insensitive)

    Returns:
        ToolResult with the detail block, or a "not found" text when no
        active course matches
    """
    args = parse_params(GetCourseDetailsParams, ToolName.GET_COURSE_DETAILS, params)

    course = await ctx.repository.find_course(args.keyword, args.modality)
    if course is None:
        logger.info(f"get_course_details: no active course for keyword={args.keyword!r}")
        return ToolResult(text=_not_found_text(args))

    # The three lookups only depend on the course id
    pricing, session, media = await run_concurrently(
        ctx.repository.find_pricing(course.id, ctx.calendar, args.modality),
        ctx.repository.find_session(course.id, ctx.calendar, args.modality),
        ctx.repository.find_media(course.id, MediaKind.MAIN_IMAGE.value),
    )
    if pricing is None:
        logger.info(f"No pricing for course {course.id} in calendar {ctx.calendar}")
    if session is None:
        logger.info(f"No session for course {course.id} in calendar {ctx.calendar}")

    return ToolResult(text=format_course_detail(course, pricing, session, media, ctx.settings))
