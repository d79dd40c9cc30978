# features/steps/search_steps.py
from collections import Counter
from typing import Any, Dict, List, Optional, Set

import parse
from behave import given, register_type, then, when

from archive_api.domain.facets import facet_registry


@parse.with_pattern(r'\[.*\]')  # matches a list-like string
def _parse_list(s: str):
    """Convert comma separated string in brackets to list of strings."""
    s = s.strip()[1:-1]
    return [item.strip() for item in s.split(",") if item.strip()]


register_type(List=_parse_list)


def _column(dimension: str) -> str:
    return facet_registry.get_facet(dimension).column


def matches(row: Dict[str, Any], filters: Dict[str, Set[str]], exclude: Optional[str] = None) -> bool:
    """Reference implementation of the filter semantics over seeded rows."""
    if row["sharpness"] is None:
        return False
    for dimension, values in filters.items():
        if dimension == exclude or not values:
            continue
        if dimension == "album":
            if row["album_key"] not in values:
                return False
        elif row[_column(dimension)] not in values:
            return False
    return True


def expected_facet(rows, filters, dimension) -> List[Dict[str, Any]]:
    column = _column(dimension)
    counts = Counter(
        row[column] for row in rows
        if matches(row, filters, exclude=dimension) and row[column] is not None
    )
    return [{"value": v, "count": c} for v, c in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]


def query_params(filters: Dict[str, Set[str]]) -> List[tuple]:
    params = []
    for dimension, values in filters.items():
        for value in sorted(values):
            params.append((dimension, value))
    return params


# ---------------- Background ----------------
@given('an archive of sports photos, some not yet enriched')
def step_seeded(ctx):
    # environment.py already seeded the database
    assert any(row["sharpness"] is None for row in ctx.rows)


# ---------------- Filters ----------------
@given('I filter {dimension} by {values:List}')
def step_filter_many(ctx, dimension, values):
    ctx.current_filters[dimension] = set(values)


@given('I filter {dimension} by "{value}"')
def step_filter_one(ctx, dimension, value):
    ctx.current_filters[dimension] = {value}


@given('I restrict the search to album "{album}"')
def step_album(ctx, album):
    ctx.current_filters["album"] = {album}


@when('I search')
def step_search(ctx):
    ctx.last_response = ctx.client.get(ctx.search_url, params=query_params(ctx.current_filters))
    assert ctx.last_response.status_code == 200, ctx.last_response.text
    ctx.last_data = ctx.last_response.json()


@when('I search again with the same filters')
def step_search_again(ctx):
    ctx.previous_data = ctx.last_data
    step_search(ctx)


# ---------------- Assertions ----------------
@then('every returned photo matches the filters')
def step_photos_match(ctx):
    by_id = {row["photo_id"]: row for row in ctx.rows}
    for item in ctx.last_data["hits"]["items"]:
        assert matches(by_id[item["id"]], ctx.current_filters), item["id"]


@then('the total equals the number of matching enriched photos')
def step_total(ctx):
    expected = sum(1 for row in ctx.rows if matches(row, ctx.current_filters))
    assert ctx.last_data["hits"]["total"] == expected, (ctx.last_data["hits"]["total"], expected)


@then('every facet matches counts computed from the seeded photos')
def step_all_facets(ctx):
    for dimension in facet_registry.names():
        expected = expected_facet(ctx.rows, ctx.current_filters, dimension)
        assert ctx.last_data["facets"][dimension] == expected, dimension
    assert ctx.last_data["degraded_facets"] == []


@then('the "{dimension}" facet still offers {values:List}')
def step_facet_offers(ctx, dimension, values):
    offered = {f["value"] for f in ctx.last_data["facets"][dimension]}
    assert set(values) <= offered, offered


@then('the "{dimension}" facet sums to the total')
def step_facet_sum(ctx, dimension):
    total = sum(f["count"] for f in ctx.last_data["facets"][dimension])
    assert total == ctx.last_data["hits"]["total"], (total, ctx.last_data["hits"]["total"])


@then('facet values are ordered by count descending then value ascending')
def step_facet_order(ctx):
    for dimension, values in ctx.last_data["facets"].items():
        keys = [(-f["count"], f["value"]) for f in values]
        assert keys == sorted(keys), dimension
        assert all(f["count"] > 0 for f in values), dimension


@then('the response is identical to the previous one')
def step_identical(ctx):
    assert ctx.last_data == ctx.previous_data


@then('every returned photo has a display URL')
def step_display_urls(ctx):
    for item in ctx.last_data["hits"]["items"]:
        assert item["image_url"], item["id"]
        assert item["thumbnail_url"] and item["original_url"], item["id"]
