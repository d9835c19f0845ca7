from pathlib import Path

import pytest

from pokehttp.http.parser import parse_content
from pokehttp.models import HistoryEntry, RequestFile, Response
from pokehttp.tui.state import SessionState

SAMPLE = """
@host = https://api.example.com
@token = secret

### List users
GET {{host}}/users
Authorization: Bearer {{token}}

### Create user
POST {{host}}/users
Content-Type: application/json

{
  "name": "Ada"
}

### Health
GET https://status.example.com/health
"""


def make_state(content: str = SAMPLE, **kwargs) -> SessionState:
    requests, variables = parse_content(content)
    request_file = RequestFile(
        path=Path("sample.http"), requests=tuple(requests), variables=variables
    )
    return SessionState(request_file=request_file, **kwargs)


def make_entry(state: SessionState, index: int = 0, status: int = 200) -> HistoryEntry:
    response = Response(
        status=status, status_text="OK", headers=[], body="{}", elapsed=0.01
    )
    return HistoryEntry(request=state.requests[index], response=response, ts=1000.0 + index)


@pytest.fixture
def state() -> SessionState:
    return make_state()
