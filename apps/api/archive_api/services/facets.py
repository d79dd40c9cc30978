import asyncio
import time
from typing import Dict

from archive_api.core.config import Settings
from archive_api.core.exceptions import StoreError
from archive_api.core.logging import get_logger
from archive_api.domain.facets import FacetRegistry, FacetResult, facet_registry
from archive_api.domain.filters import FilterState
from archive_api.services.aggregation import AggregationExecutor

logger = get_logger(__name__)


class FacetFanout:
    """
    Computes every registered facet concurrently.

    One task per dimension, bounded by a semaphore and a per-dimension
    timeout. A dimension that fails comes back empty with strategy "failed"
    and never affects its siblings. Cancelling compute() cancels all of them.
    """

    def __init__(self, executor: AggregationExecutor, settings: Settings,
                 registry: FacetRegistry = facet_registry):
        self.executor = executor
        self.registry = registry
        self.concurrency = max(1, min(settings.facet_concurrency, len(registry)))
        self.timeout = settings.facet_timeout_seconds

    async def compute(self, state: FilterState) -> Dict[str, FacetResult]:
        semaphore = asyncio.Semaphore(self.concurrency)
        results: Dict[str, FacetResult] = {}

        async def run(name: str) -> None:
            results[name] = await self._compute_one(name, state, semaphore)

        async with asyncio.TaskGroup() as tg:
            for name in self.registry.names():
                tg.create_task(run(name))

        return {name: results[name] for name in self.registry.names()}

    async def _compute_one(self, name: str, state: FilterState, semaphore: asyncio.Semaphore) -> FacetResult:
        started = time.perf_counter()
        try:
            async with semaphore:
                async with asyncio.timeout(self.timeout):
                    result = await self.executor.aggregate(name, state)
        except TimeoutError:
            logger.error("Facet %s timed out after %.1fs", name, self.timeout)
            return FacetResult.empty(name)
        except StoreError as exc:
            logger.error("Facet %s failed: %s", name, exc.message)
            return FacetResult.empty(name)
        except Exception:
            logger.exception("Facet %s failed unexpectedly", name)
            return FacetResult.empty(name)
        logger.debug("Facet %s via %s in %.1fms", name, result.strategy, (time.perf_counter() - started) * 1000)
        return result
