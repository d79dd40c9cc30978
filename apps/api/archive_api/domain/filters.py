"""
Filter state and the condition builder.

FilterState is the normalized, immutable description of the active
constraints. build_conditions() turns it into structured predicates; the
repository binds predicate values as SQL parameters, so nothing here ever
produces query text.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from archive_api.core.exceptions import InvalidFilterError
from archive_api.domain.facets import FacetRegistry, facet_registry

ENRICHED_COLUMN = "sharpness"
ALBUM_COLUMN = "album_key"

RawValues = Union[None, str, Iterable[str]]


class Operator(StrEnum):
    not_null = "not_null"
    eq = "eq"
    in_ = "in"


@dataclass(frozen=True)
class Predicate:
    """One atomic condition: column, operator, bound value(s)."""
    column: str
    operator: Operator
    value: Union[None, str, Tuple[str, ...]] = None
    dimension: Optional[str] = None


ENRICHED = Predicate(column=ENRICHED_COLUMN, operator=Operator.not_null)


def _split(raw: RawValues) -> List[str]:
    """Accept a single value, repeated values, or comma-separated values."""
    if raw is None:
        return []
    items = [raw] if isinstance(raw, str) else list(raw)
    out: List[str] = []
    for item in items:
        if item is None:
            continue
        out.extend(part.strip().lower() for part in str(item).split(","))
    return [v for v in out if v]


@dataclass(frozen=True)
class FilterState:
    """Active constraint per dimension; an absent or empty set means unconstrained."""
    constraints: Tuple[Tuple[str, FrozenSet[str]], ...] = ()
    album_key: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, RawValues], album_key: Optional[str] = None,
                    registry: FacetRegistry = facet_registry) -> "FilterState":
        """Validate and normalize caller input. Raises InvalidFilterError."""
        collected: Dict[str, FrozenSet[str]] = {}
        for name, raw in params.items():
            facet = registry.get_facet(name)
            if facet is None:
                raise InvalidFilterError(f"Unknown filter dimension '{name}'", dimension=name)
            values = _split(raw)
            for value in values:
                if not facet.accepts(value):
                    raise InvalidFilterError(
                        f"'{value}' is not a valid {facet.label.lower()} value", dimension=name, value=value
                    )
            if values:
                collected[name] = frozenset(values)

        # registry order keeps the state (and therefore the predicate list) canonical
        ordered = tuple((name, collected[name]) for name in registry.names() if name in collected)
        album = album_key.strip() if album_key else None
        return cls(constraints=ordered, album_key=album or None)

    def values_for(self, dimension: str) -> FrozenSet[str]:
        return next((vals for name, vals in self.constraints if name == dimension), frozenset())


def build_conditions(state: FilterState, exclude: Optional[str] = None,
                     registry: FacetRegistry = facet_registry) -> List[Predicate]:
    """
    Predicates for `state`, omitting the constraint on `exclude`.

    The enriched gate always comes first; pass exclude=None for the
    result-page query.
    """
    if exclude is not None and exclude not in registry:
        raise InvalidFilterError(f"Unknown filter dimension '{exclude}'", dimension=exclude)

    predicates = [ENRICHED]
    if state.album_key:
        predicates.append(Predicate(column=ALBUM_COLUMN, operator=Operator.eq, value=state.album_key))

    for facet in registry:
        if facet.name == exclude:
            continue
        values = state.values_for(facet.name)
        if not values:
            continue
        if len(values) == 1:
            (only,) = values
            predicates.append(Predicate(facet.column, Operator.eq, only, dimension=facet.name))
        else:
            predicates.append(Predicate(facet.column, Operator.in_, tuple(sorted(values)), dimension=facet.name))
    return predicates
