"""Shared fixtures: settings, an in-memory catalog and a dispatcher over it."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from unx_mcp.config import Settings
from unx_mcp.engine import HandlerContext, build_registry
from unx_mcp.mcp.auth import AuthGuard
from unx_mcp.mcp.dispatcher import ProtocolDispatcher
from unx_mcp.models import (
    CareerRecommendation,
    Course,
    MediaAsset,
    PricingRecord,
    SessionRecord,
)
from unx_mcp.repository import GuardedRepository

API_KEY = "test-secret"
CURRENT_CALENDAR = "2025-2"
STALE_CALENDAR = "2024-2"
PURCHASE_URL = "https://unx.test/comprar"
DEFAULT_IMAGE_URL = "https://unx.test/default.png"
DEFAULT_COURSE = "Curso Propedéutico PAA"


def _contains(value: str | None, needle: str) -> bool:
    return value is not None and needle.lower() in value.lower()


class FakeCourseRepository:
    """In-memory CourseRepository that records every call."""

    def __init__(
        self,
        courses: list[Course] | None = None,
        pricing: list[PricingRecord] | None = None,
        sessions: list[SessionRecord] | None = None,
        media: list[MediaAsset] | None = None,
        recommendations: list[CareerRecommendation] | None = None,
    ):
        self.courses = courses or []
        self.pricing = pricing or []
        self.sessions = sessions or []
        self.media = media or []
        self.recommendations = recommendations or []
        self.calls: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def list_active_courses(self, category=None):
        self.calls.append("list_active_courses")
        rows = [
            c
            for c in self.courses
            if c.status == "active" and (not category or _contains(c.category, category))
        ]
        return sorted(rows, key=lambda c: (c.name, c.id))

    async def find_course(self, keyword, modality=None):
        self.calls.append("find_course")
        rows = [
            c
            for c in self.courses
            if c.status == "active"
            and _contains(c.name, keyword)
            and (not modality or _contains(c.modality, modality))
        ]
        rows.sort(key=lambda c: (c.name, c.id))
        return rows[0] if rows else None

    async def get_course(self, course_id):
        self.calls.append("get_course")
        return next((c for c in self.courses if c.id == course_id), None)

    def _scoped(self, rows, course_id, calendar, modality):
        matches = [
            r
            for r in rows
            if r.course_id == course_id
            and r.calendar == calendar
            and (not modality or _contains(r.modality, modality))
        ]
        matches.sort(key=lambda r: r.id or 0)
        return matches[0] if matches else None

    async def find_pricing(self, course_id, calendar, modality=None):
        self.calls.append("find_pricing")
        return self._scoped(self.pricing, course_id, calendar, modality)

    async def find_session(self, course_id, calendar, modality=None):
        self.calls.append("find_session")
        return self._scoped(self.sessions, course_id, calendar, modality)

    async def find_media(self, course_id, kind):
        self.calls.append("find_media")
        return next(
            (m for m in self.media if m.course_id == course_id and m.kind == kind),
            None,
        )

    async def find_recommendation(self, career):
        self.calls.append("find_recommendation")
        return next((r for r in self.recommendations if _contains(r.career, career)), None)

    async def ping(self):
        self.calls.append("ping")


def seed_catalog() -> FakeCourseRepository:
    return FakeCourseRepository(
        courses=[
            Course(
                id="C-INT",
                name="Cálculo Integral",
                modality="Presencial",
                status="active",
                start_date=date(2025, 8, 4),
                end_date=date(2025, 12, 5),
                description="Integrales definidas, indefinidas y aplicaciones.",
                category="Matemáticas",
            ),
            Course(
                id="C-INT-Z",
                name="Cálculo Integral",
                modality="Zoom",
                status="active",
                start_date=date(2025, 8, 6),
                end_date=date(2025, 12, 3),
                category="Matemáticas",
            ),
            Course(
                id="C-EXP",
                name="Funciones Exponenciales",
                modality="Zoom",
                status="active",
                duration_label="6 semanas",
                category="Matemáticas",
            ),
            Course(
                id="C-DIF",
                name="Cálculo Diferencial",
                modality="Presencial",
                status="inactive",
            ),
            Course(
                id="C-PAA",
                name="Curso Propedéutico PAA",
                modality="Presencial",
                status="active",
                start_date=date(2025, 9, 1),
                category="PAA",
            ),
        ],
        pricing=[
            PricingRecord(
                id=1,
                course_id="C-INT",
                calendar=CURRENT_CALENDAR,
                modality="Presencial",
                list_price=Decimal("2000"),
                promo_price=Decimal("1500"),
                promo_expires_at=datetime(2025, 7, 31, 23, 59),
                reservation_amount=Decimal("500"),
            ),
            PricingRecord(
                id=2,
                course_id="C-INT-Z",
                calendar=STALE_CALENDAR,
                modality="Zoom",
                list_price=Decimal("1800"),
                promo_price=Decimal("777"),
            ),
            PricingRecord(
                id=3,
                course_id="C-PAA",
                calendar=CURRENT_CALENDAR,
                modality="Presencial",
                list_price=Decimal("3500"),
                promo_price=Decimal("2999.50"),
            ),
        ],
        sessions=[
            SessionRecord(
                id=1,
                course_id="C-INT",
                calendar=CURRENT_CALENDAR,
                modality="Presencial",
                schedule="Sábados 9:00-13:00",
                start_date=date(2025, 8, 9),
                end_date=date(2025, 11, 29),
            ),
        ],
        media=[
            MediaAsset(
                id=1,
                course_id="C-INT",
                kind="main_image",
                url="https://unx.test/img/integral.png",
            ),
        ],
        recommendations=[
            CareerRecommendation(id=1, career="Medicina", course_id="C-PAA"),
            CareerRecommendation(id=2, career="Ingeniería Civil", course_id="C-MISSING"),
        ],
    )


def make_settings(**overrides) -> Settings:
    values = dict(
        mcp_api_key=API_KEY,
        current_calendar=CURRENT_CALENDAR,
        purchase_url=PURCHASE_URL,
        default_image_url=DEFAULT_IMAGE_URL,
        default_recommended_course=DEFAULT_COURSE,
        active_courses_category=None,
        enable_recommendations=True,
        repository_timeout_seconds=1.0,
        debug=True,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_dispatcher(repository, settings: Settings | None = None) -> ProtocolDispatcher:
    settings = settings or make_settings()
    return ProtocolDispatcher(
        registry=build_registry(settings),
        repository=GuardedRepository(repository, timeout=settings.repository_timeout_seconds),
        guard=AuthGuard(settings.mcp_api_key),
        settings=settings,
    )


def tool_call(name: str, arguments: dict | None = None, id: int | str = 1) -> dict:
    params: dict = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return {"jsonrpc": "2.0", "id": id, "method": "tools/call", "params": params}


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def repository() -> FakeCourseRepository:
    return seed_catalog()


@pytest.fixture
def ctx(repository, settings) -> HandlerContext:
    return HandlerContext(repository=repository, settings=settings)


@pytest.fixture
def dispatcher(repository, settings) -> ProtocolDispatcher:
    return make_dispatcher(repository, settings)
