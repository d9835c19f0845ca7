from __future__ import annotations

import dataclasses
import enum
from pathlib import Path


class Method(enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, token: str) -> Method | None:
        try:
            return cls(token.upper())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True, slots=True)
class RequestSpec:
    method: Method
    url: str
    headers: dict[str, str] = dataclasses.field(default_factory=dict)
    body: str | None = None
    name: str | None = None

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return f"{self.method} {self.url}"

    def clone(self) -> RequestSpec:
        return dataclasses.replace(self, headers=dict(self.headers))


@dataclasses.dataclass(frozen=True, slots=True)
class RequestFile:
    path: Path
    requests: tuple[RequestSpec, ...] = ()
    variables: dict[str, str] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True, slots=True)
class Response:
    status: int
    status_text: str
    headers: list[tuple[str, str]]
    body: str
    elapsed: float

    @classmethod
    def error(cls, message: str) -> Response:
        return cls(
            status=0,
            status_text="Error",
            headers=[],
            body=f"Error: {message}",
            elapsed=0.0,
        )

    @property
    def is_error(self) -> bool:
        return self.status == 0


@dataclasses.dataclass(frozen=True, slots=True)
class HistoryEntry:
    request: RequestSpec
    response: Response
    ts: float
