from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.database import get_session_factory
from app.errors import ErrorMapper
from app.repositories import PostRepository
from app.schemas import Pagination

# Largest value the database accepts for an integer bind parameter.
MAX_INT64 = 2**63 - 1


def _positive_int(raw: str | None, default: int) -> int:
    """Parse *raw* as a positive 64-bit int, falling back to *default*."""
    try:
        value = int(raw) if raw is not None else 0
    except ValueError:
        return default
    return value if 1 <= value <= MAX_INT64 else default


class PaginationParams:
    """
    Reusable FastAPI dependency that parses the ``page`` / ``limit`` query
    parameters.

    Unlike strict validation, bad input never fails the request: a missing,
    non-numeric, non-positive or out-of-range ``page`` becomes 1 and
    ``limit`` becomes ``settings.DEFAULT_PAGE_SIZE``.

    Attributes
    ----------
    page:
        1-based page number.
    limit:
        Number of posts per page, clamped to ``settings.MAX_PAGE_SIZE``.
    offset:
        Number of posts skipped, derived from *page* and *limit*.
    """

    def __init__(
        self,
        page: str | None = Query(None, description="Page number (1-based)."),
        limit: str | None = Query(
            None,
            description="Number of posts returned per page.",
        ),
    ) -> None:
        self.page = _positive_int(page, 1)
        self.limit = min(
            _positive_int(limit, settings.DEFAULT_PAGE_SIZE), settings.MAX_PAGE_SIZE
        )
        # The derived offset must fit in 64 bits as well.
        if (self.page - 1) * self.limit > MAX_INT64:
            self.page = 1

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_schema(self) -> Pagination:
        return Pagination(limit=self.limit, offset=self.offset, page=self.page)


def get_post_repository(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> PostRepository:
    return PostRepository(session_factory)


def get_error_mapper(request: Request) -> ErrorMapper:
    return request.app.state.error_mapper
