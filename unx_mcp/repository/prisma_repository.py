"""Prisma-backed implementation of `CourseRepository`."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from ..models import (
    CareerRecommendation,
    Course,
    CourseStatus,
    MediaAsset,
    PricingRecord,
    SessionRecord,
)

if TYPE_CHECKING:
    from prisma import Prisma

T = TypeVar("T")

COURSE_ORDER = [{"name": "asc"}, {"id": "asc"}]
ID_ORDER = {"id": "asc"}


def _icontains(value: str) -> dict[str, str]:
    """Case-insensitive partial match filter."""
    return {"contains": value, "mode": "insensitive"}


def _calendar_scope(course_id: str, calendar: str, modality: str | None) -> dict[str, Any]:
    where: dict[str, Any] = {"course_id": course_id, "calendar": calendar}
    if modality:
        where["modality"] = _icontains(modality)
    return where


class PrismaCourseRepository:
    """Reads the five catalog relations through Prisma.

    `get_client` returns a connected client for each query (normally
    `unx_mcp.db.get_db`), so the connection lifecycle stays in `unx_mcp.db`.
    `on_failure` is called when a query raises (normally `unx_mcp.db.mark_stale`,
    so the next call re-checks the connection). Nothing here writes.
    """

    def __init__(
        self,
        get_client: Callable[[], Awaitable["Prisma"]],
        on_failure: Callable[[], None] | None = None,
    ):
        self.get_client = get_client
        self.on_failure = on_failure

    async def _query(self, run: Callable[["Prisma"], Awaitable[T]]) -> T:
        db = await self.get_client()
        try:
            return await run(db)
        except Exception:
            if self.on_failure is not None:
                self.on_failure()
            raise

    async def list_active_courses(self, category: str | None = None) -> list[Course]:
        where: dict[str, Any] = {"status": CourseStatus.ACTIVE.value}
        if category:
            where["category"] = _icontains(category)
        rows = await self._query(lambda db: db.course.find_many(where=where, order=COURSE_ORDER))
        return [Course.model_validate(row) for row in rows]

    async def find_course(self, keyword: str, modality: str | None = None) -> Course | None:
        where: dict[str, Any] = {
            "name": _icontains(keyword),
            "status": CourseStatus.ACTIVE.value,
        }
        if modality:
            where["modality"] = _icontains(modality)
        row = await self._query(lambda db: db.course.find_first(where=where, order=COURSE_ORDER))
        return Course.model_validate(row) if row else None

    async def get_course(self, course_id: str) -> Course | None:
        row = await self._query(lambda db: db.course.find_unique(where={"id": course_id}))
        return Course.model_validate(row) if row else None

    async def find_pricing(
        self, course_id: str, calendar: str, modality: str | None = None
    ) -> PricingRecord | None:
        where = _calendar_scope(course_id, calendar, modality)
        row = await self._query(lambda db: db.pricing.find_first(where=where, order=ID_ORDER))
        return PricingRecord.model_validate(row) if row else None

    async def find_session(
        self, course_id: str, calendar: str, modality: str | None = None
    ) -> SessionRecord | None:
        where = _calendar_scope(course_id, calendar, modality)
        row = await self._query(lambda db: db.coursesession.find_first(where=where, order=ID_ORDER))
        return SessionRecord.model_validate(row) if row else None

    async def find_media(self, course_id: str, kind: str) -> MediaAsset | None:
        where = {"course_id": course_id, "kind": kind}
        row = await self._query(lambda db: db.coursemedia.find_first(where=where, order=ID_ORDER))
        return MediaAsset.model_validate(row) if row else None

    async def find_recommendation(self, career: str) -> CareerRecommendation | None:
        where = {"career": _icontains(career)}
        row = await self._query(
            lambda db: db.careerrecommendation.find_first(where=where, order=ID_ORDER)
        )
        return CareerRecommendation.model_validate(row) if row else None

    async def ping(self) -> None:
        await self._query(lambda db: db.query_raw("SELECT 1"))
