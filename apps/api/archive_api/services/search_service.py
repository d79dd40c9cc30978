import asyncio
from typing import List, Optional

from archive_api.core.config import Settings
from archive_api.core.exceptions import InvalidFilterError, StoreError
from archive_api.core.logging import get_logger
from archive_api.core.pagination import page_window
from archive_api.domain.facets import FacetRegistry, facet_registry
from archive_api.domain.filters import FilterState, build_conditions
from archive_api.repositories.photos_repo import PhotosRepository
from archive_api.schemas.search_request import SearchRequest
from archive_api.schemas.search_response import (
    DistributionEntry, DistributionResponse, FacetsResponse, ResultPage, SearchResponse,
)
from archive_api.services.aggregation import AggregationExecutor
from archive_api.services.facets import FacetFanout
from archive_api.services.row_mapper import RowMapper

logger = get_logger(__name__)

UNKNOWN_VALUE = "unknown"


class SearchService:
    def __init__(self, repo: PhotosRepository, executor: AggregationExecutor, fanout: FacetFanout,
                 mapper: RowMapper, settings: Settings, registry: FacetRegistry = facet_registry):
        self.repo = repo
        self.executor = executor
        self.fanout = fanout
        self.mapper = mapper
        self.settings = settings
        self.registry = registry

    async def search(self, state: FilterState, req: SearchRequest) -> SearchResponse:
        """Result page and facet counts for the same filter state, computed concurrently."""
        async with asyncio.TaskGroup() as tg:
            page_task = tg.create_task(self.photos(state, req))
            facets_task = tg.create_task(self.fanout.compute(state))
        facets = FacetsResponse.from_results(facets_task.result())
        return SearchResponse(hits=page_task.result(), facets=facets.facets, degraded_facets=facets.degraded_facets)

    async def photos(self, state: FilterState, req: SearchRequest) -> ResultPage:
        page_size = req.page.page_size
        if page_size is None:
            page_size = self.settings.default_page_size
        page_size = min(page_size, self.settings.max_page_size)
        offset, limit = page_window(req.page.page, page_size)
        page = ResultPage(sort=req.sort, page=req.page.page, page_size=page_size, offset=offset, limit=limit)
        if limit == 0:
            return page

        predicates = build_conditions(state)
        rows = []
        try:
            if req.page.include_total:
                async with asyncio.TaskGroup() as tg:
                    rows_task = tg.create_task(self.repo.fetch_page(predicates, req.sort, offset, limit))
                    total_task = tg.create_task(self._total(predicates))
                rows, page.total = rows_task.result(), total_task.result()
            else:
                rows = await self.repo.fetch_page(predicates, req.sort, offset, limit)
        except* StoreError as group:
            logger.error("Photo page failed, returning a degraded page: %s",
                         "; ".join(exc.message for exc in group.exceptions))
            page.degraded = True
            page.total = None

        page.items = self.mapper.map_rows(rows)
        return page

    async def _total(self, predicates) -> Optional[int]:
        # A failed count leaves total unset; the page itself is unaffected.
        try:
            return await self.repo.count(predicates)
        except StoreError as exc:
            logger.warning("Total count failed, page returned without total: %s", exc.message)
            return None

    async def facets(self, state: FilterState) -> FacetsResponse:
        return FacetsResponse.from_results(await self.fanout.compute(state))

    async def distribution(self, dimension: str, state: Optional[FilterState] = None) -> DistributionResponse:
        """Count and share of each value of one dimension, `unknown` left out."""
        if dimension not in self.registry:
            raise InvalidFilterError(f"Unknown filter dimension '{dimension}'", dimension=dimension)
        try:
            result = await self.executor.aggregate(dimension, state or FilterState())
        except StoreError as exc:
            logger.error("Distribution for %s failed: %s", dimension, exc.message)
            return DistributionResponse(dimension=dimension, total=0, degraded=True)
        if result.failed:
            return DistributionResponse(dimension=dimension, total=0, degraded=True)
        values = [v for v in result.values if v.value != UNKNOWN_VALUE]
        total = sum(v.count for v in values)
        entries: List[DistributionEntry] = [
            DistributionEntry(name=v.value, count=v.count, percentage=round(v.count * 100 / total, 1))
            for v in values
        ]
        return DistributionResponse(dimension=dimension, total=total, entries=entries)
