import pytest

from pokehttp.errors import RequestFileError
from pokehttp.http.parser import (
    parse_content,
    parse_file,
    parse_header_line,
    parse_request_line,
    parse_variable_line,
)
from pokehttp.models import Method


def test_parse_simple_get():
    requests, variables = parse_content("GET https://api.example.com/users")

    assert len(requests) == 1
    assert requests[0].method is Method.GET
    assert requests[0].url == "https://api.example.com/users"
    assert requests[0].body is None
    assert requests[0].headers == {}
    assert variables == {}


def test_method_is_case_insensitive_and_extra_tokens_ignored():
    requests, _ = parse_content("post https://x/y HTTP/1.1")

    assert requests[0].method is Method.POST
    assert requests[0].url == "https://x/y"


def test_parse_with_headers():
    content = """
GET https://api.example.com/users
Authorization: Bearer token123
Content-Type: application/json
"""
    requests, _ = parse_content(content)

    assert len(requests) == 1
    assert requests[0].headers == {
        "Authorization": "Bearer token123",
        "Content-Type": "application/json",
    }


def test_repeated_header_last_value_wins():
    requests, _ = parse_content("GET https://x\nX-Token: v1\nX-Token: v2\n")

    assert requests[0].headers == {"X-Token": "v2"}


def test_parse_with_body_trims_surrounding_blank_lines():
    content = """
POST https://api.example.com/users
Content-Type: application/json


{
    "name": "John"
}


"""
    requests, _ = parse_content(content)

    assert requests[0].method is Method.POST
    assert requests[0].body == '{\n    "name": "John"\n}'


def test_blank_line_inside_body_is_kept():
    requests, _ = parse_content("POST https://x\n\nline one\n\nline two\n")

    assert requests[0].body == "line one\n\nline two"


def test_only_blank_lines_after_headers_means_no_body():
    requests, _ = parse_content("POST https://x\nA: b\n\n\n   \n\n")

    assert requests[0].body is None


def test_invalid_header_starts_body():
    requests, _ = parse_content("POST https://x\nA: b\nnot a header line\nmore\n")

    assert requests[0].headers == {"A": "b"}
    assert requests[0].body == "not a header line\nmore"


def test_header_key_with_space_is_body():
    requests, _ = parse_content("POST https://x\nBad Key: value\n")

    assert requests[0].headers == {}
    assert requests[0].body == "Bad Key: value"


def test_parse_multiple_named_requests():
    content = """
### Get all users
GET https://api.example.com/users

### Create user
POST https://api.example.com/users
Content-Type: application/json

{"name": "John"}
"""
    requests, _ = parse_content(content)

    assert [r.name for r in requests] == ["Get all users", "Create user"]
    assert [r.method for r in requests] == [Method.GET, Method.POST]
    assert requests[0].body is None
    assert requests[1].body == '{"name": "John"}'


def test_separator_without_name():
    requests, _ = parse_content("###\nGET https://a\n###   \nGET https://b\n")

    assert [r.name for r in requests] == [None, None]
    assert [r.url for r in requests] == ["https://a", "https://b"]


def test_name_only_applies_to_next_request():
    content = "### First\nGET https://a\n###\nGET https://b\n"
    requests, _ = parse_content(content)

    assert requests[0].name == "First"
    assert requests[1].name is None


def test_comments_and_junk_are_dropped():
    content = """
# a comment
// another comment
this line is junk
FETCH https://nope
GET https://ok
"""
    requests, _ = parse_content(content)

    assert len(requests) == 1
    assert requests[0].url == "https://ok"


def test_junk_line_after_separator_discards_name():
    requests, _ = parse_content("### Login\nnot a request line\nPOST https://x/login\n")

    assert len(requests) == 1
    assert requests[0].url == "https://x/login"
    assert requests[0].name is None


def test_comment_inside_request_is_not_body():
    requests, _ = parse_content("POST https://x\n\n# note\nhello\n")

    assert requests[0].body == "hello"


def test_parse_variables():
    content = """
@baseUrl = https://api.example.com
@token = secret123

GET https://api.example.com/users
"""
    requests, variables = parse_content(content)

    assert len(requests) == 1
    assert variables == {"baseUrl": "https://api.example.com", "token": "secret123"}


def test_variable_last_assignment_wins():
    _, variables = parse_content("@x = 1\n@x = 2\n")

    assert variables == {"x": "2"}


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("@key=value", ("key", "value")),
        ("@message = hello world", ("message", "hello world")),
        ("@ spaced = a=b", ("spaced", "a=b")),
        ("@=value", None),
        ("@novalue", None),
        ("key=value", None),
    ],
)
def test_parse_variable_line(line, expected):
    assert parse_variable_line(line) == expected


def test_variable_line_wins_inside_body():
    requests, variables = parse_content("POST https://x\n\nfirst\n@x = y\nlast\n")

    assert variables == {"x": "y"}
    assert requests[0].body == "first\nlast"


def test_variable_after_request_start_is_still_defined():
    content = "GET https://x/y\nAuthorization: Bearer {{tok}}\n\n@tok=abc"
    requests, variables = parse_content(content)

    assert variables == {"tok": "abc"}
    assert requests[0].headers == {"Authorization": "Bearer {{tok}}"}
    assert requests[0].body is None


def test_parse_request_line():
    assert parse_request_line("DELETE https://x") == (Method.DELETE, "https://x")
    assert parse_request_line("GET") is None
    assert parse_request_line("SEND https://x") is None


def test_parse_header_line():
    assert parse_header_line("Content-Type:  text/plain ") == ("Content-Type", "text/plain")
    assert parse_header_line("X-Url: http://a:80") == ("X-Url", "http://a:80")
    assert parse_header_line("no colon") is None
    assert parse_header_line("Two Words: x") is None


def test_crlf_line_endings():
    requests, _ = parse_content("GET https://x\r\nAccept: */*\r\n\r\nbody\r\n")

    assert requests[0].headers == {"Accept": "*/*"}
    assert requests[0].body == "body"


def test_parse_file(tmp_path):
    path = tmp_path / "api.http"
    path.write_text("@host = example.com\n### Ping\nGET https://{{host}}/ping\n")

    request_file = parse_file(path)

    assert request_file.path == path
    assert len(request_file.requests) == 1
    assert request_file.requests[0].name == "Ping"
    assert request_file.variables == {"host": "example.com"}


def test_parse_file_missing(tmp_path):
    with pytest.raises(RequestFileError):
        parse_file(tmp_path / "missing.http")
