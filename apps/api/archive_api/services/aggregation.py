"""
Facet aggregation strategies.

GroupedCountAggregator answers a dimension with one grouped-count query.
EnumerateCountAggregator is the fallback for stores that refuse grouped
aggregation: it lists the distinct values and counts each one in turn, so a
dimension holds at most one store connection at a time.

AggregationExecutor picks the strategy and owns the "grouped count is
unavailable" flag for the lifetime of the application.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Sequence, Set, Tuple

from archive_api.core.config import Settings
from archive_api.core.enums import AggregationMode
from archive_api.core.exceptions import AggregationUnavailableError, InvalidFilterError, StoreError
from archive_api.core.logging import get_logger
from archive_api.domain.facets import FacetDefinition, FacetRegistry, FacetResult, FacetValue, facet_registry
from archive_api.domain.filters import FilterState, Operator, Predicate, build_conditions
from archive_api.repositories.photos_repo import PhotosRepository

logger = get_logger(__name__)

# Non-canonical values remembered for log de-duplication; past this, new ones are not warned about.
MAX_REPORTED_VALUES = 1000


def ordered_values(pairs: Iterable[Tuple[str, int]]) -> List[FacetValue]:
    """Drop zero counts; sort by count desc, then value asc."""
    kept = [(str(value), int(count)) for value, count in pairs if count and count > 0]
    kept.sort(key=lambda p: (-p[1], p[0]))
    return [FacetValue(value=v, count=c) for v, c in kept]


class Aggregator(ABC):
    strategy: str = ""

    def __init__(self, repo: PhotosRepository):
        self.repo = repo

    @abstractmethod
    async def aggregate(self, facet: FacetDefinition, predicates: Sequence[Predicate]) -> FacetResult:
        """Count each value of `facet` among records matching `predicates`."""


class GroupedCountAggregator(Aggregator):
    strategy = "grouped"

    async def aggregate(self, facet: FacetDefinition, predicates: Sequence[Predicate]) -> FacetResult:
        rows = await self.repo.grouped_count(facet.column, predicates)
        return FacetResult(facet_name=facet.name, values=ordered_values(rows), strategy=self.strategy)


class EnumerateCountAggregator(Aggregator):
    strategy = "enumerate"

    async def aggregate(self, facet: FacetDefinition, predicates: Sequence[Predicate]) -> FacetResult:
        try:
            values = await self.repo.distinct_values(facet.column, predicates)
        except StoreError as exc:
            logger.error("Listing %s values failed: %s", facet.name, exc.message)
            return FacetResult.empty(facet.name)

        counted: List[Tuple[str, int]] = []
        for value in values:
            narrowed = [*predicates, Predicate(facet.column, Operator.eq, value, dimension=facet.name)]
            try:
                counted.append((value, await self.repo.count(narrowed)))
            except StoreError as exc:
                logger.warning("Dropping %s=%s from facet counts: %s", facet.name, value, exc.message)
        return FacetResult(facet_name=facet.name, values=ordered_values(counted), strategy=self.strategy)


class AggregationExecutor:
    def __init__(self, repo: PhotosRepository, settings: Settings, registry: FacetRegistry = facet_registry):
        self.registry = registry
        self.mode = settings.facet_aggregation
        self.remember_unavailable = settings.remember_unavailable_aggregation
        self.grouped = GroupedCountAggregator(repo)
        self.enumerate = EnumerateCountAggregator(repo)
        self._grouped_unavailable = False
        self._reported: Set[Tuple[str, str]] = set()

    @property
    def grouped_available(self) -> bool:
        return self.mode != AggregationMode.enumerate and not self._grouped_unavailable

    async def aggregate(self, dimension: str, state: FilterState) -> FacetResult:
        """Counts for `dimension` under `state` with its own constraint removed."""
        facet = self.registry.get_facet(dimension)
        if facet is None:
            raise InvalidFilterError(f"Unknown filter dimension '{dimension}'", dimension=dimension)
        predicates = build_conditions(state, exclude=dimension, registry=self.registry)
        result = await self._run(facet, predicates)
        self._report_non_canonical(facet, result)
        return result

    async def _run(self, facet: FacetDefinition, predicates: List[Predicate]) -> FacetResult:
        if not self.grouped_available:
            return await self.enumerate.aggregate(facet, predicates)
        try:
            return await self.grouped.aggregate(facet, predicates)
        except AggregationUnavailableError as exc:
            if self.mode == AggregationMode.grouped:
                raise
            if self.remember_unavailable:
                self._grouped_unavailable = True
            logger.warning(
                "Grouped count unavailable for %s (%s); falling back to per-value counts",
                facet.name, exc.message,
            )
            return await self.enumerate.aggregate(facet, predicates)

    def _report_non_canonical(self, facet: FacetDefinition, result: FacetResult) -> None:
        # Stored values are reported as-is; flag each unexpected one once.
        for item in result.values:
            key = (facet.name, item.value)
            if facet.accepts(item.value) or key in self._reported:
                continue
            if len(self._reported) >= MAX_REPORTED_VALUES:
                logger.debug("Non-canonical %s value in store: %r", facet.name, item.value)
                continue
            self._reported.add(key)
            logger.warning("Non-canonical %s value in store: %r", facet.name, item.value)
            if len(self._reported) == MAX_REPORTED_VALUES:
                logger.warning("Reported %d non-canonical values; further ones are logged at debug level",
                               MAX_REPORTED_VALUES)
