"""Timeout and fault classification around any `CourseRepository`."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from ..models import (
    CareerRecommendation,
    Course,
    MediaAsset,
    PricingRecord,
    SessionRecord,
)
from .base import CourseRepository, RepositoryError, RepositoryTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuardedRepository:
    """
    Wrap a repository so every call is bounded and every failure is typed.

    - A call exceeding `timeout` seconds raises RepositoryTimeoutError.
    - Any other exception from the inner repository is re-raised as
      RepositoryError carrying the original message.

    An empty result (None / []) is passed through untouched: missing data is
    never a fault.
    """

    def __init__(self, inner: CourseRepository, timeout: float):
        self.inner = inner
        self.timeout = timeout

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except TimeoutError as e:
            logger.error(f"Repository call {operation} timed out after {self.timeout}s")
            raise RepositoryTimeoutError(
                f"Backing store timed out after {self.timeout}s ({operation})"
            ) from e
        except RepositoryError:
            raise
        except Exception as e:
            logger.error(f"Repository call {operation} failed: {e}")
            raise RepositoryError(str(e) or type(e).__name__) from e

    async def list_active_courses(self, category: str | None = None) -> list[Course]:
        return await self._call("list_active_courses", self.inner.list_active_courses(category))

    async def find_course(self, keyword: str, modality: str | None = None) -> Course | None:
        return await self._call("find_course", self.inner.find_course(keyword, modality))

    async def get_course(self, course_id: str) -> Course | None:
        return await self._call("get_course", self.inner.get_course(course_id))

    async def find_pricing(
        self, course_id: str, calendar: str, modality: str | None = None
    ) -> PricingRecord | None:
        return await self._call(
            "find_pricing", self.inner.find_pricing(course_id, calendar, modality)
        )

    async def find_session(
        self, course_id: str, calendar: str, modality: str | None = None
    ) -> SessionRecord | None:
        return await self._call(
            "find_session", self.inner.find_session(course_id, calendar, modality)
        )

    async def find_media(self, course_id: str, kind: str) -> MediaAsset | None:
        return await self._call("find_media", self.inner.find_media(course_id, kind))

    async def find_recommendation(self, career: str) -> CareerRecommendation | None:
        return await self._call("find_recommendation", self.inner.find_recommendation(career))

    async def ping(self) -> None:
        await self._call("ping", self.inner.ping())
