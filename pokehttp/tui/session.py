from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol

from pokehttp.errors import TransportError, UndefinedVariableError
from pokehttp.http.variables import resolve_request
from pokehttp.models import HistoryEntry, RequestSpec, Response
from pokehttp.tui.dispatch import Command
from pokehttp.tui.state import SessionState

logger = logging.getLogger("pokehttp.session")


class Transport(Protocol):
    async def execute(self, request: RequestSpec) -> Response: ...


class Session:
    """Folds executions into a SessionState, one at a time."""

    def __init__(
        self,
        state: SessionState,
        transport: Transport,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.state = state
        self._transport = transport
        self._clock = clock

    def prepare(self, command: Command) -> RequestSpec | None:
        """Pick the request ``command`` targets and mark the state loading.

        Returns None when nothing should be sent: another execution is in
        flight, the command is not an execute command, or nothing is selected.
        """
        if self.state.loading:
            return None

        request: RequestSpec | None = None
        if command is Command.EXECUTE_SELECTED:
            request = self.state.selected_request()
        elif command is Command.EXECUTE_HISTORY_ENTRY:
            entry = self.state.selected_history_entry()
            if entry is not None:
                request = entry.request

        if request is None:
            return None

        self.state.begin_execution()
        return request.clone()

    async def perform(self, request: RequestSpec) -> HistoryEntry:
        """Resolve, send and record ``request``.

        History keeps the request as written, so replaying an entry
        substitutes from the file's text exactly once.
        """
        try:
            response = await self._send(request)
        except Exception as e:
            logger.exception("%s failed unexpectedly", request.display_name)
            response = Response.error(f"Request failed: {e}")
        return self._record(request, response)

    async def _send(self, request: RequestSpec) -> Response:
        try:
            resolved = resolve_request(request, self.state.variables)
        except UndefinedVariableError as e:
            logger.warning("%s not sent: %s", request.display_name, e)
            return Response.error(str(e))

        try:
            return await self._transport.execute(resolved)
        except TransportError as e:
            return Response.error(e.message)

    async def run_command(self, command: Command) -> HistoryEntry | None:
        request = self.prepare(command)
        if request is None:
            return None
        return await self.perform(request)

    def _record(self, request: RequestSpec, response: Response) -> HistoryEntry:
        entry = HistoryEntry(request=request, response=response, ts=self._clock())
        self.state.record(entry)
        logger.info(
            "recorded %s -> %d (%d in history)",
            request.display_name,
            response.status,
            len(self.state.history),
        )
        return entry
