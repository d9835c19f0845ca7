from __future__ import annotations

import logging
from pathlib import Path

from pokehttp.errors import RequestFileError
from pokehttp.models import Method, RequestFile, RequestSpec

logger = logging.getLogger("pokehttp.parser")

SEPARATOR_PREFIX = "###"
COMMENT_PREFIXES = ("#", "//")
VARIABLE_PREFIX = "@"


class _RequestBuilder:
    __slots__ = ("body_lines", "headers", "headers_done", "method", "name", "url")

    def __init__(self, *, method: Method, url: str, name: str | None) -> None:
        self.method = method
        self.url = url
        self.name = name
        self.headers: list[tuple[str, str]] = []
        self.body_lines: list[str] = []
        self.headers_done = False

    def build(self) -> RequestSpec:
        headers: dict[str, str] = {}
        for key, value in self.headers:
            headers[key] = value

        body = "\n".join(self.body_lines).strip()

        return RequestSpec(
            method=self.method,
            url=self.url,
            headers=headers,
            body=body or None,
            name=self.name,
        )


def parse_variable_line(line: str) -> tuple[str, str] | None:
    if not line.startswith(VARIABLE_PREFIX):
        return None

    rest = line[1:]
    if "=" not in rest:
        return None

    name, value = rest.split("=", 1)
    name = name.strip()
    if not name:
        return None
    return name, value.strip()


def parse_request_line(line: str) -> tuple[Method, str] | None:
    parts = line.split()
    if len(parts) < 2:
        return None

    method = Method.parse(parts[0])
    if method is None:
        return None
    return method, parts[1]


def parse_header_line(line: str) -> tuple[str, str] | None:
    if ":" not in line:
        return None

    key, value = line.split(":", 1)
    key = key.strip()
    if " " in key:
        return None
    return key, value.strip()


def _separator_name(line: str) -> str | None:
    name = line.lstrip("#").strip()
    return name or None


def parse_content(content: str) -> tuple[list[RequestSpec], dict[str, str]]:
    """Scan request-file text into requests (file order) and variables.

    Never fails on malformed input: lines that fit no rule are dropped.
    Variable lines win everywhere, including inside what would otherwise
    be a request body.
    """
    requests: list[RequestSpec] = []
    variables: dict[str, str] = {}
    pending_name: str | None = None
    current: _RequestBuilder | None = None

    for lineno, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.rstrip()

        variable = parse_variable_line(line)
        if variable is not None:
            name, value = variable
            variables[name] = value
            continue

        if line.startswith(SEPARATOR_PREFIX):
            if current is not None:
                requests.append(current.build())
                current = None
            pending_name = _separator_name(line)
            continue

        if line.startswith(COMMENT_PREFIXES):
            continue

        if not line:
            if current is not None:
                if current.headers_done:
                    current.body_lines.append("")
                else:
                    current.headers_done = True
            continue

        if current is None:
            # A pending name is spent on the first request-line attempt.
            name, pending_name = pending_name, None
            request_line = parse_request_line(line)
            if request_line is None:
                logger.debug("line %d dropped: %r", lineno, line)
                continue
            method, url = request_line
            current = _RequestBuilder(method=method, url=url, name=name)
            continue

        if not current.headers_done:
            header = parse_header_line(line)
            if header is not None:
                current.headers.append(header)
                continue
            current.headers_done = True

        current.body_lines.append(line)

    if current is not None:
        requests.append(current.build())

    logger.debug("parsed %d requests, %d variables", len(requests), len(variables))
    return requests, variables


def parse_file(path: str | Path) -> RequestFile:
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RequestFileError(str(file_path), str(e)) from e

    requests, variables = parse_content(content)
    return RequestFile(path=file_path, requests=tuple(requests), variables=variables)
