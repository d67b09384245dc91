"""Catalog entities read from the backing store.

All entities are frozen: the server only reads the catalog.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _to_date(value):
    # DateTime columns come back as midnight datetimes
    if isinstance(value, datetime):
        return value.date()
    return value


CalendarDate = Annotated[date, BeforeValidator(_to_date)]


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class Course(_Entity):
    """A course offered in the catalog."""

    id: str = Field(..., description="Course identifier")
    name: str = Field(..., description="Display name")
    modality: str | None = Field(default=None, description="Delivery mode, e.g. Presencial, Zoom")
    status: str = Field(default="active", description="active / inactive")
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None
    description: str | None = None
    purchase_url: str | None = None
    image_url: str | None = None
    duration_label: str | None = Field(default=None, description="Human label, e.g. '8 semanas'")
    category: str | None = Field(default=None, description="Category tag, e.g. PAA")


class PricingRecord(_Entity):
    """Price of a course for one calendar and modality."""

    id: int | None = None
    course_id: str
    calendar: str
    modality: str | None = None
    list_price: Decimal | None = None
    promo_price: Decimal | None = None
    promo_expires_at: datetime | None = None
    reservation_amount: Decimal | None = None


class SessionRecord(_Entity):
    """Schedule of a course for one calendar and modality."""

    id: int | None = None
    course_id: str
    calendar: str
    modality: str | None = None
    schedule: str | None = Field(default=None, description="Schedule label, e.g. 'Sábados 9:00-13:00'")
    start_date: CalendarDate | None = None
    end_date: CalendarDate | None = None


class MediaAsset(_Entity):
    """Media attached to a course."""

    id: int | None = None
    course_id: str
    kind: str
    url: str


class CareerRecommendation(_Entity):
    """Course recommended for applicants to a career."""

    id: int | None = None
    career: str
    course_id: str
