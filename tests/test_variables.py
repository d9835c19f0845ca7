import pytest

from pokehttp.errors import UndefinedVariableError
from pokehttp.http.variables import (
    find_placeholders,
    resolve_request,
    substitute,
    used_variables,
)
from pokehttp.models import Method, RequestSpec


def test_substitute_single_variable():
    assert substitute("Hello, {{name}}!", {"name": "world"}) == "Hello, world!"


def test_substitute_multiple_variables():
    variables = {"baseUrl": "https://api.example.com", "id": "42"}

    assert substitute("{{baseUrl}}/users/{{id}}", variables) == "https://api.example.com/users/42"


def test_substitute_same_variable_multiple_times():
    assert substitute("{{a}}-{{a}}", {"a": "9"}) == "9-9"


def test_substitute_no_variables():
    assert substitute("No variables here", {}) == "No variables here"


def test_substitute_undefined_variable_names_it():
    with pytest.raises(UndefinedVariableError) as exc_info:
        substitute("Hello, {{missing}}!", {})

    assert exc_info.value.name == "missing"
    assert "Undefined variable: missing" in str(exc_info.value)


def test_substitute_reports_first_unresolved_token():
    with pytest.raises(UndefinedVariableError) as exc_info:
        substitute("{{a}} {{b}} {{c}}", {"a": "1"})

    assert exc_info.value.name == "b"


@pytest.mark.parametrize(
    "text",
    ["{not_a_var}", "{{ spaced }}", "{{with-dash}}", "{{unclosed", "}}{{"],
)
def test_non_placeholders_left_verbatim(text):
    assert substitute(text, {}) == text


def test_substitute_in_json():
    variables = {"userId": "123", "title": "Test"}
    text = '{"userId": {{userId}}, "title": "{{title}}"}'

    assert substitute(text, variables) == '{"userId": 123, "title": "Test"}'


def test_substitution_is_not_recursive():
    assert substitute("{{a}}", {"a": "{{b}}", "b": "x"}) == "{{b}}"


def test_find_placeholders():
    assert find_placeholders("{{a}}/{b}/{{c_1}}/{{a}}") == ["a", "c_1", "a"]


def _request():
    return RequestSpec(
        method=Method.POST,
        url="{{host}}/users/{{id}}",
        headers={"Authorization": "Bearer {{token}}", "X-Host": "{{host}}"},
        body='{"id": "{{id}}", "x": "{{undefined}}"}',
    )


def test_used_variables_first_seen_order_and_known_only():
    variables = {"token": "t", "id": "7", "host": "h", "unused": "u"}

    assert used_variables(_request(), variables) == [
        ("host", "h"),
        ("id", "7"),
        ("token", "t"),
    ]


def test_resolve_request_substitutes_url_headers_and_body():
    request = RequestSpec(
        method=Method.GET,
        url="https://x/y",
        headers={"Authorization": "Bearer {{tok}}"},
        name="Who am I",
    )

    resolved = resolve_request(request, {"tok": "abc"})

    assert resolved.headers == {"Authorization": "Bearer abc"}
    assert resolved.name == "Who am I"
    assert resolved.body is None
    assert request.headers == {"Authorization": "Bearer {{tok}}"}


def test_resolve_request_fails_on_missing_variable():
    with pytest.raises(UndefinedVariableError):
        resolve_request(_request(), {"host": "h", "id": "1", "token": "t"})
