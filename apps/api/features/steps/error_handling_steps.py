# features/steps/error_handling_steps.py
import json

from behave import then, when


@when('I request "{path}"')
def step_request_path(ctx, path):
    """Send a raw GET so malformed query strings reach the API untouched."""
    ctx.last_response = ctx.client.get(path)


@then('I receive a 400 error response')
def step_400_error(ctx):
    assert ctx.last_response.status_code == 400, ctx.last_response.text


@then('the error code is "{code}"')
def step_error_code(ctx, code):
    assert ctx.last_response.json()["error"]["code"] == code


@then('the error names dimension "{dimension}"')
def step_error_dimension(ctx, dimension):
    assert ctx.last_response.json()["error"]["details"]["dimension"] == dimension


@then('the error message mentions "{text}"')
def step_error_message(ctx, text):
    error_text = json.dumps(ctx.last_response.json()).lower()
    assert text.lower() in error_text


@then('I receive a 422 validation error')
def step_422_error(ctx):
    assert ctx.last_response.status_code == 422


@then('the response includes validation details')
def step_validation_details(ctx):
    error_data = ctx.last_response.json()
    # FastAPI returns request validation errors in 'detail'
    assert "detail" in error_data


@then('I receive a 200 response')
def step_200(ctx):
    assert ctx.last_response.status_code == 200, ctx.last_response.text
