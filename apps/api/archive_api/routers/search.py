import asyncio
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Request

from archive_api.core.config import Settings
from archive_api.core.exceptions import ClientDisconnectedError
from archive_api.core.logging import get_logger
from archive_api.dependencies import get_search_service, get_settings
from archive_api.schemas.search_request import FilterParams, SearchRequest, filter_params, page_params
from archive_api.schemas.search_response import DistributionResponse, FacetsResponse, ResultPage, SearchResponse
from archive_api.services.search_service import SearchService

logger = get_logger(__name__)

router = APIRouter(tags=["search"])

T = TypeVar("T")


async def _wait_for_disconnect(request: Request, poll_seconds: float) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(poll_seconds)


async def run_until_disconnected(request: Request, settings: Settings, work: Awaitable[T]) -> T:
    """Await `work`, cancelling it (and every store call under it) if the client goes away."""
    task = asyncio.ensure_future(work)
    watcher = asyncio.ensure_future(_wait_for_disconnect(request, settings.disconnect_poll_seconds))
    try:
        await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        watcher.cancel()
        if not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
    if task.cancelled():
        logger.info("Client disconnected from %s; work cancelled", request.url.path)
        raise ClientDisconnectedError()
    return task.result()


@router.get("/search", response_model=SearchResponse)
async def search_endpoint(
    request: Request,
    filters: FilterParams = Depends(filter_params),
    req: SearchRequest = Depends(page_params),
    svc: SearchService = Depends(get_search_service),
    settings: Settings = Depends(get_settings),
) -> SearchResponse:
    state = filters.to_state()
    return await run_until_disconnected(request, settings, svc.search(state, req))


@router.get("/photos", response_model=ResultPage)
async def photos_endpoint(
    request: Request,
    filters: FilterParams = Depends(filter_params),
    req: SearchRequest = Depends(page_params),
    svc: SearchService = Depends(get_search_service),
    settings: Settings = Depends(get_settings),
) -> ResultPage:
    state = filters.to_state()
    return await run_until_disconnected(request, settings, svc.photos(state, req))


@router.get("/facets", response_model=FacetsResponse)
async def facets_endpoint(
    request: Request,
    filters: FilterParams = Depends(filter_params),
    svc: SearchService = Depends(get_search_service),
    settings: Settings = Depends(get_settings),
) -> FacetsResponse:
    state = filters.to_state()
    return await run_until_disconnected(request, settings, svc.facets(state))


@router.get("/distributions/{dimension}", response_model=DistributionResponse)
async def distribution_endpoint(
    dimension: str,
    request: Request,
    filters: FilterParams = Depends(filter_params),
    svc: SearchService = Depends(get_search_service),
    settings: Settings = Depends(get_settings),
) -> DistributionResponse:
    state = filters.to_state()
    return await run_until_disconnected(request, settings, svc.distribution(dimension, state))
