from typing import Iterable, List, Sequence

from sqlalchemy import Table, and_, case, func, select, true
from sqlalchemy.sql import ColumnElement, Select

from archive_api.core.enums import ActionIntensity, SortKey
from archive_api.domain.filters import Operator, Predicate


def predicate_clause(table: Table, predicate: Predicate) -> ColumnElement:
    col = table.c[predicate.column]
    if predicate.operator == Operator.not_null:
        return col.is_not(None)
    if predicate.operator == Operator.eq:
        return col == predicate.value
    if predicate.operator == Operator.in_:
        return col.in_(list(predicate.value))
    raise ValueError(f"Unsupported operator: {predicate.operator}")


def where_clause(table: Table, predicates: Iterable[Predicate]) -> ColumnElement:
    """AND of all predicates. Values are always bound parameters."""
    return and_(true(), *[predicate_clause(table, p) for p in predicates])


def ordering(table: Table, sort: SortKey) -> List[ColumnElement]:
    # upload_date + photo_id close every ordering so pages never overlap
    newest = [table.c.upload_date.desc(), table.c.photo_id.desc()]
    if sort == SortKey.oldest:
        return [table.c.upload_date.asc(), table.c.photo_id.asc()]
    if sort == SortKey.action:
        return [table.c.play_type.asc().nulls_last(), *newest]
    if sort == SortKey.intensity:
        rank = case(
            {level.value: level.rank() for level in ActionIntensity},
            value=table.c.action_intensity,
            else_=0,
        )
        return [rank.desc(), *newest]
    return newest


def grouped_count_stmt(table: Table, column: str, predicates: Sequence[Predicate]) -> Select:
    col = table.c[column]
    count = func.count().label("count")
    return (
        select(col.label("value"), count)
        .where(where_clause(table, predicates), col.is_not(None))
        .group_by(col)
        .order_by(count.desc(), col.asc())
    )


def distinct_stmt(table: Table, column: str, predicates: Sequence[Predicate]) -> Select:
    col = table.c[column]
    return (
        select(col.label("value"))
        .where(where_clause(table, predicates), col.is_not(None))
        .distinct()
        .order_by(col.asc())
    )


def count_stmt(table: Table, predicates: Sequence[Predicate]) -> Select:
    return select(func.count()).select_from(table).where(where_clause(table, predicates))


def page_stmt(table: Table, predicates: Sequence[Predicate], sort: SortKey, offset: int, limit: int) -> Select:
    return (
        select(table)
        .where(where_clause(table, predicates))
        .order_by(*ordering(table, sort))
        .offset(offset)
        .limit(limit)
    )
