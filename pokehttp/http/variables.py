from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable, Mapping

from pokehttp.errors import UndefinedVariableError
from pokehttp.models import RequestSpec

VAR_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def substitute(text: str, variables: Mapping[str, str]) -> str:
    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in variables:
            raise UndefinedVariableError(name)
        return variables[name]

    return VAR_PATTERN.sub(replacer, text)


def find_placeholders(text: str) -> list[str]:
    return [match.group(1) for match in VAR_PATTERN.finditer(text)]


def _request_texts(request: RequestSpec) -> Iterable[str]:
    yield request.url
    yield from request.headers.values()
    if request.body is not None:
        yield request.body


def used_variables(
    request: RequestSpec, variables: Mapping[str, str]
) -> list[tuple[str, str]]:
    """Variables referenced by ``request`` that the file defines, first-seen order."""
    seen: set[str] = set()
    out: list[tuple[str, str]] = []
    for text in _request_texts(request):
        for name in find_placeholders(text):
            if name in seen:
                continue
            seen.add(name)
            if name in variables:
                out.append((name, variables[name]))
    return out


def resolve_request(request: RequestSpec, variables: Mapping[str, str]) -> RequestSpec:
    url = substitute(request.url, variables)
    headers = {key: substitute(value, variables) for key, value in request.headers.items()}
    body = substitute(request.body, variables) if request.body is not None else None
    return dataclasses.replace(request, url=url, headers=headers, body=body)
