from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from archive_api.core.config import Settings
from archive_api.repositories.photos_repo import PhotosRepository
from archive_api.services.aggregation import AggregationExecutor
from archive_api.services.facets import FacetFanout
from archive_api.services.row_mapper import RowMapper
from archive_api.services.search_service import SearchService


def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, echo=settings.sql_echo)


def build_search_service(engine: AsyncEngine, settings: Settings) -> SearchService:
    """Wire the repository, executor and fan-out for one application."""
    sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    repo = PhotosRepository(sessions, settings)
    executor = AggregationExecutor(repo, settings)
    return SearchService(
        repo=repo,
        executor=executor,
        fanout=FacetFanout(executor, settings),
        mapper=RowMapper(settings.image_proxy_base),
        settings=settings,
    )


# In tests, TestClient runs the lifespan and these read what it stored.
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service
