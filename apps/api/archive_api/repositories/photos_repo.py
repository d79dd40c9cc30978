import asyncio
import time
from typing import Any, Callable, Dict, List, Sequence, Tuple, TypeVar

from sqlalchemy import Table
from sqlalchemy.engine import Result
from sqlalchemy.exc import (
    InterfaceError, NotSupportedError, OperationalError, ProgrammingError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import Select

from archive_api.core.config import Settings
from archive_api.core.enums import SortKey
from archive_api.core.exceptions import AggregationUnavailableError, StoreError, TransientStoreError
from archive_api.core.logging import get_logger
from archive_api.domain.filters import Predicate
from archive_api.repositories import query_builder as qb
from archive_api.repositories.tables import photo_metadata

logger = get_logger(__name__)

T = TypeVar("T")


class PhotosRepository:
    """
    Read-only access to photo_metadata.

    Every call opens its own session, so concurrent callers never share a
    connection. SQLAlchemy errors never leave this class: they surface as
    AggregationUnavailableError, TransientStoreError or StoreError.
    """

    def __init__(self, sessions: async_sessionmaker[AsyncSession], settings: Settings,
                 table: Table = photo_metadata):
        self.sessions = sessions
        self.settings = settings
        self.photos = table

    async def grouped_count(self, column: str, predicates: Sequence[Predicate]) -> List[Tuple[str, int]]:
        """(value, count) pairs from one GROUP BY query."""
        stmt = qb.grouped_count_stmt(self.photos, column, predicates)
        return await self._execute(
            f"grouped_count:{column}", stmt, self.settings.aggregation_timeout_seconds,
            lambda res: [(value, int(n)) for value, n in res.all()],
            grouped=True,
        )

    async def distinct_values(self, column: str, predicates: Sequence[Predicate]) -> List[str]:
        stmt = qb.distinct_stmt(self.photos, column, predicates)
        return await self._execute(
            f"distinct:{column}", stmt, self.settings.aggregation_timeout_seconds,
            lambda res: list(res.scalars().all()),
        )

    async def count(self, predicates: Sequence[Predicate]) -> int:
        stmt = qb.count_stmt(self.photos, predicates)
        return await self._execute(
            "count", stmt, self.settings.aggregation_timeout_seconds,
            lambda res: int(res.scalar_one()),
        )

    async def fetch_page(self, predicates: Sequence[Predicate], sort: SortKey,
                         offset: int, limit: int) -> List[Dict[str, Any]]:
        """Raw records for one window, as plain dicts."""
        stmt = qb.page_stmt(self.photos, predicates, sort, offset, limit)
        return await self._execute(
            f"page:{sort}", stmt, self.settings.query_timeout_seconds,
            lambda res: [dict(row) for row in res.mappings().all()],
        )

    async def _execute(self, label: str, stmt: Select, timeout: float,
                       consume: Callable[[Result], T], grouped: bool = False) -> T:
        attempts = self.settings.transient_retries + 1
        for attempt in range(1, attempts + 1):
            started = time.perf_counter()
            try:
                async with asyncio.timeout(timeout):
                    async with self.sessions() as session:
                        result = await session.execute(stmt)
                        value = consume(result)
                logger.debug("%s took %.1fms", label, (time.perf_counter() - started) * 1000)
                return value
            except (ProgrammingError, NotSupportedError) as exc:
                if grouped:
                    raise AggregationUnavailableError(f"{label}: {exc.orig}") from exc
                raise StoreError(f"{label} failed: {exc.orig}") from exc
            except (TimeoutError, OperationalError, InterfaceError) as exc:
                reason = "timed out" if isinstance(exc, TimeoutError) else str(getattr(exc, "orig", exc))
                if attempt >= attempts:
                    raise TransientStoreError(f"{label} {reason}") from exc
                logger.warning("%s %s; retrying (%d/%d)", label, reason, attempt, attempts - 1)
            except SQLAlchemyError as exc:
                raise StoreError(f"{label} failed: {exc}") from exc
        raise StoreError(f"{label} was not attempted")
