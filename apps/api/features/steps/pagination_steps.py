# features/steps/pagination_steps.py
from datetime import datetime

from behave import then, when

PHOTOS_URL = "/api/v1/photos"


def _enriched_ids(ctx):
    return {row["photo_id"] for row in ctx.rows if row["sharpness"] is not None}


@when('I page through all photos sorted "{sort}" with page size {size:d}')
def step_page_through(ctx, sort, size):
    """Request pages until an empty one comes back."""
    ctx.collected = []
    page = 1
    while True:
        response = ctx.client.get(PHOTOS_URL, params={"sort": sort, "page": page, "page_size": size})
        assert response.status_code == 200
        items = response.json()["items"]
        if not items:
            break
        assert len(items) <= size
        ctx.collected.extend(items)
        page += 1
    ctx.pages_requested = page


@then('every enriched photo appears exactly once')
def step_each_once(ctx):
    ids = [item["id"] for item in ctx.collected]
    assert len(ids) == len(set(ids)), "Pages should not share photo IDs"
    assert set(ids) == _enriched_ids(ctx)


@then('the photos are ordered by creation time {direction}')
def step_ordered(ctx, direction):
    stamps = [datetime.fromisoformat(item["created_at"].replace("Z", "+00:00")) for item in ctx.collected]
    expected = sorted(stamps, reverse=(direction == "descending"))
    assert stamps == expected, "Sort order not maintained across pages"


@when('I request page {page:d} with page size {size:d}')
def step_request_page(ctx, page, size):
    ctx.last_response = ctx.client.get(PHOTOS_URL, params={"page": page, "page_size": size})
    assert ctx.last_response.status_code == 200
    ctx.last_page = ctx.last_response.json()


@then('the page is empty')
def step_page_empty(ctx):
    assert ctx.last_page["items"] == []
    assert ctx.last_page["degraded"] is False


@then('the page holds {count:d} photos')
def step_page_count(ctx, count):
    assert len(ctx.last_page["items"]) == count


@then('the page window is offset {offset:d} and limit {limit:d}')
def step_window(ctx, offset, limit):
    assert (ctx.last_page["offset"], ctx.last_page["limit"]) == (offset, limit)


@then('the reported total counts every enriched photo')
def step_total_all(ctx):
    assert ctx.last_page["total"] == len(_enriched_ids(ctx))
