"""Base infrastructure for tool handlers.

Each handler receives the tool arguments and a HandlerContext, and returns a
ToolResult. Handlers must stay pure functions of (arguments, repository,
settings): no caching, no counters, nothing that outlives one call.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Coroutine, TypeVar

from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from ...config import Settings
    from ...models import ToolResult
    from ...repository import CourseRepository

# Placeholders for data not yet published for the current calendar
PENDING = "Por confirmar"
DASH = "—"


class ToolArgumentError(Exception):
    """Tool arguments do not match the tool's inputSchema."""


@dataclass(frozen=True)
class HandlerContext:
    """Dependencies passed to every handler."""

    repository: "CourseRepository"
    settings: "Settings"

    @property
    def calendar(self) -> str:
        return self.settings.current_calendar


HandlerFunc = Callable[
    [dict[str, Any], HandlerContext],
    Coroutine[Any, Any, "ToolResult"],
]


T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def parse_params(model: type[M], tool: str, params: dict[str, Any] | None) -> M:
    """Validate raw tool arguments against the tool's params model."""
    try:
        return model.model_validate(params or {})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise ToolArgumentError(f"Invalid arguments for {tool}: {problems}") from e


def format_money(value: Decimal | int | float | None) -> str:
    """Render an amount as $1500 / $1499.50, or the pending placeholder."""
    if value is None:
        return PENDING
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        return f"${int(amount)}"
    return f"${amount:.2f}"


def format_date(value: Any) -> str:
    if value is None:
        return DASH
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


async def run_concurrently(*lookups: Coroutine[Any, Any, T]) -> list[T]:
    """Await independent lookups together.

    The first failure cancels the lookups still running and is re-raised as
    is (not wrapped in an ExceptionGroup).
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(lookup) for lookup in lookups]
    except ExceptionGroup as group:
        raise group.exceptions[0]
    return [task.result() for task in tasks]
