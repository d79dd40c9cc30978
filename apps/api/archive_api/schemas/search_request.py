from typing import List, Optional

from fastapi import Query
from pydantic import BaseModel, Field

from archive_api.core.enums import SortKey
from archive_api.domain.filters import FilterState


class PageSpec(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: Optional[int] = Field(default=None, ge=0)
    include_total: bool = True


class SearchRequest(BaseModel):
    sort: SortKey = SortKey.newest
    page: PageSpec = PageSpec()


class FilterParams(BaseModel):
    """Query parameters for every facet dimension; repeatable or comma-separated."""
    sport: List[str] = []
    category: List[str] = []
    play_type: List[str] = []
    intensity: List[str] = []
    composition: List[str] = []
    time_of_day: List[str] = []
    lighting: List[str] = []
    color_temp: List[str] = []
    album: Optional[str] = None

    def to_state(self) -> FilterState:
        params = self.model_dump(exclude={"album"})
        return FilterState.from_params(params, album_key=self.album)


def filter_params(
    sport: List[str] = Query(default=[]),
    category: List[str] = Query(default=[]),
    play_type: List[str] = Query(default=[]),
    intensity: List[str] = Query(default=[]),
    composition: List[str] = Query(default=[]),
    time_of_day: List[str] = Query(default=[]),
    lighting: List[str] = Query(default=[]),
    color_temp: List[str] = Query(default=[]),
    album: Optional[str] = Query(default=None),
) -> FilterParams:
    return FilterParams(
        sport=sport, category=category, play_type=play_type, intensity=intensity,
        composition=composition, time_of_day=time_of_day, lighting=lighting,
        color_temp=color_temp, album=album,
    )


def page_params(
    sort: SortKey = Query(default=SortKey.newest),
    page: int = Query(default=1, ge=1),
    page_size: Optional[int] = Query(default=None, ge=0),
    include_total: bool = Query(default=True),
) -> SearchRequest:
    return SearchRequest(sort=sort, page=PageSpec(page=page, page_size=page_size, include_total=include_total))
