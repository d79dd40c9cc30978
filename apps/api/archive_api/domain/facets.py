"""
Domain model for facets.

A facet is one independently filterable categorical column of
photo_metadata. The registry is the single list of dimensions that the
condition builder, the aggregation executor and the fan-out coordinator
all iterate over.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, FrozenSet, List, Optional, Type

from archive_api.core.enums import (
    ActionIntensity, ColorTemperature, Composition, Lighting,
    PhotoCategory, PlayType, SportType, TimeOfDay,
)


@dataclass(frozen=True)
class FacetDefinition:
    """A facet dimension: wire name, backing column and canonical values."""
    name: str
    column: str
    label: str
    values: FrozenSet[str]

    @classmethod
    def from_enum(cls, name: str, column: str, label: str, enum: Type[StrEnum]) -> "FacetDefinition":
        return cls(name=name, column=column, label=label, values=frozenset(m.value for m in enum))

    def accepts(self, value: str) -> bool:
        return value in self.values


@dataclass(frozen=True)
class FacetValue:
    """A single facet value with its count."""
    value: str
    count: int


@dataclass
class FacetResult:
    """Result of computing one facet."""
    facet_name: str
    values: List[FacetValue] = field(default_factory=list)
    strategy: str = "grouped"

    @property
    def total_count(self) -> int:
        return sum(v.count for v in self.values)

    @property
    def failed(self) -> bool:
        return self.strategy == "failed"

    @classmethod
    def empty(cls, facet_name: str, strategy: str = "failed") -> "FacetResult":
        return cls(facet_name=facet_name, values=[], strategy=strategy)

    def count_for(self, value: str) -> int:
        return next((v.count for v in self.values if v.value == value), 0)


class FacetRegistry:
    """Registry of the facet dimensions, in display order."""

    def __init__(self):
        self._facets: Dict[str, FacetDefinition] = {}
        self._register_default_facets()

    def _register_default_facets(self):
        self.register(FacetDefinition.from_enum("sport", "sport_type", "Sport", SportType))
        self.register(FacetDefinition.from_enum("category", "photo_category", "Category", PhotoCategory))
        self.register(FacetDefinition.from_enum("play_type", "play_type", "Play Type", PlayType))
        self.register(FacetDefinition.from_enum("intensity", "action_intensity", "Intensity", ActionIntensity))
        self.register(FacetDefinition.from_enum("composition", "composition", "Composition", Composition))
        self.register(FacetDefinition.from_enum("time_of_day", "time_of_day", "Time of Day", TimeOfDay))
        self.register(FacetDefinition.from_enum("lighting", "lighting", "Lighting", Lighting))
        self.register(FacetDefinition.from_enum("color_temp", "color_temperature", "Color Temperature", ColorTemperature))

    def register(self, facet: FacetDefinition):
        self._facets[facet.name] = facet

    def get_facet(self, name: str) -> Optional[FacetDefinition]:
        return self._facets.get(name)

    def names(self) -> List[str]:
        return list(self._facets)

    def __iter__(self):
        return iter(self._facets.values())

    def __len__(self) -> int:
        return len(self._facets)

    def __contains__(self, name: object) -> bool:
        return name in self._facets


# Global registry instance
facet_registry = FacetRegistry()
