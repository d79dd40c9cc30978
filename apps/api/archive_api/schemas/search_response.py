from typing import Dict, List, Optional

from pydantic import BaseModel

from archive_api.core.enums import SortKey
from archive_api.domain.facets import FacetResult
from archive_api.schemas.photo import Photo


class FacetCount(BaseModel):
    value: str
    count: int


class ResultPage(BaseModel):
    items: List[Photo] = []
    sort: SortKey = SortKey.newest
    page: int = 1
    page_size: int = 0
    offset: int = 0
    limit: int = 0
    total: Optional[int] = None
    degraded: bool = False


class FacetsResponse(BaseModel):
    facets: Dict[str, List[FacetCount]] = {}
    degraded_facets: List[str] = []

    @classmethod
    def from_results(cls, results: Dict[str, FacetResult]) -> "FacetsResponse":
        return cls(
            facets={
                name: [FacetCount(value=v.value, count=v.count) for v in result.values]
                for name, result in results.items()
            },
            degraded_facets=[name for name, result in results.items() if result.failed],
        )


class SearchResponse(BaseModel):
    hits: ResultPage
    facets: Dict[str, List[FacetCount]] = {}
    degraded_facets: List[str] = []


class DistributionEntry(BaseModel):
    name: str
    count: int
    percentage: float


class DistributionResponse(BaseModel):
    dimension: str
    total: int
    entries: List[DistributionEntry] = []
    degraded: bool = False
