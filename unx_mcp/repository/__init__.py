"""Catalog repository layer.

- base: CourseRepository protocol and backing-store exceptions
- guarded: per-call timeout and fault classification wrapper
- prisma_repository: production implementation over the Prisma client
"""

from .base import CourseRepository, RepositoryError, RepositoryTimeoutError
from .guarded import GuardedRepository
from .prisma_repository import PrismaCourseRepository

__all__ = [
    "CourseRepository",
    "RepositoryError",
    "RepositoryTimeoutError",
    "GuardedRepository",
    "PrismaCourseRepository",
]
