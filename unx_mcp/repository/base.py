"""Read-only repository interface for the course catalog.

Handlers only talk to the catalog through `CourseRepository`, so they can be
exercised against any implementation (Prisma in production, in-memory fakes
in tests).

Ordering of "first match" lookups:
    - courses: name ascending, then id ascending
    - pricing, sessions, media, recommendations: id ascending
"""

from typing import Protocol

from ..models import (
    CareerRecommendation,
    Course,
    MediaAsset,
    PricingRecord,
    SessionRecord,
)


class RepositoryError(Exception):
    """The backing store failed (connectivity or query error)."""


class RepositoryTimeoutError(RepositoryError):
    """A repository call did not complete within the configured timeout."""


class CourseRepository(Protocol):
    """Capabilities the tool handlers need from the catalog."""

    async def list_active_courses(self, category: str | None = None) -> list[Course]: ...

    async def find_course(self, keyword: str, modality: str | None = None) -> Course | None: ...

    async def get_course(self, course_id: str) -> Course | None: ...

    async def find_pricing(
        self, course_id: str, calendar: str, modality: str | None = None
    ) -> PricingRecord | None: ...

    async def find_session(
        self, course_id: str, calendar: str, modality: str | None = None
    ) -> SessionRecord | None: ...

    async def find_media(self, course_id: str, kind: str) -> MediaAsset | None: ...

    async def find_recommendation(self, career: str) -> CareerRecommendation | None: ...

    async def ping(self) -> None: ...
