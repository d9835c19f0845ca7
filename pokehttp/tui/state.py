from __future__ import annotations

import dataclasses
import enum

from pokehttp.http.variables import used_variables as referenced_variables
from pokehttp.models import HistoryEntry, RequestFile, RequestSpec, Response

DEFAULT_PAGE_STEP = 10

# Rows a bordered panel loses to its frame.
PANEL_CHROME_ROWS = 2


class Focus(enum.Enum):
    REQUEST_LIST = "request_list"
    RESPONSE_BODY = "response_body"
    REQUEST_DETAILS = "request_details"
    VARIABLES_LIST = "variables_list"
    HISTORY_LIST = "history_list"
    HISTORY_DETAIL = "history_detail"


class ResponseTab(enum.Enum):
    BODY = "body"
    HEADERS = "headers"


MAIN_FOCUS_RING: tuple[Focus, ...] = (
    Focus.REQUEST_LIST,
    Focus.RESPONSE_BODY,
    Focus.REQUEST_DETAILS,
    Focus.VARIABLES_LIST,
)
HISTORY_FOCUS_RING: tuple[Focus, ...] = (Focus.HISTORY_LIST, Focus.HISTORY_DETAIL)


def _step(value: int, delta: int, upper: int | None = None) -> int:
    value = max(0, value + delta)
    if upper is not None:
        value = min(value, max(0, upper))
    return value


@dataclasses.dataclass(slots=True)
class SessionState:
    """Everything the terminal session shows and navigates.

    ``selected_index`` points into the visible (possibly filtered) request
    list. ``selected_history`` is chronological: 0 is the oldest entry.
    """

    request_file: RequestFile
    page_step: int = DEFAULT_PAGE_STEP

    focus: Focus = Focus.REQUEST_LIST
    selected_index: int = 0
    filter_active: bool = False
    filter_text: str = ""

    last_response: Response | None = None
    response_tab: ResponseTab = ResponseTab.BODY
    response_scroll: int = 0
    headers_scroll: int = 0

    request_details_scroll: int = 0
    request_details_height: int = 0
    selected_variable: int = 0

    loading: bool = False

    history: list[HistoryEntry] = dataclasses.field(default_factory=list)
    history_view_active: bool = False
    selected_history: int = 0
    history_detail_scroll: int = 0

    @property
    def requests(self) -> tuple[RequestSpec, ...]:
        return self.request_file.requests

    @property
    def variables(self) -> dict[str, str]:
        return self.request_file.variables

    # request list

    def filtered_requests(self) -> list[tuple[int, RequestSpec]]:
        if not self.filter_active or not self.filter_text:
            return list(enumerate(self.requests))

        needle = self.filter_text.lower()
        out: list[tuple[int, RequestSpec]] = []
        for index, request in enumerate(self.requests):
            name = (request.name or "").lower()
            if needle in name or needle in request.url.lower():
                out.append((index, request))
        return out

    @property
    def visible_count(self) -> int:
        return len(self.filtered_requests())

    def selected_request(self) -> RequestSpec | None:
        visible = self.filtered_requests()
        if not 0 <= self.selected_index < len(visible):
            return None
        return visible[self.selected_index][1]

    def _set_selected(self, index: int) -> None:
        if index == self.selected_index:
            return
        self.selected_index = index
        self.request_details_scroll = 0
        self.selected_variable = 0

    def select_previous(self) -> None:
        self._set_selected(_step(self.selected_index, -1))

    def select_next(self) -> None:
        self._set_selected(_step(self.selected_index, 1, self.visible_count - 1))

    def _reset_selection(self) -> None:
        self.selected_index = 0
        self.request_details_scroll = 0
        self.selected_variable = 0

    # filter

    def enter_filter_mode(self) -> None:
        self.filter_active = True
        self.filter_text = ""
        self._reset_selection()

    def exit_filter_mode(self) -> None:
        self.filter_active = False
        self.filter_text = ""
        self._reset_selection()

    def filter_append_char(self, char: str) -> None:
        self.filter_text += char
        self._reset_selection()

    def filter_backspace(self) -> None:
        if not self.filter_text:
            self.exit_filter_mode()
            return
        self.filter_text = self.filter_text[:-1]
        self._reset_selection()

    # focus

    def focus_ring(self) -> tuple[Focus, ...]:
        return HISTORY_FOCUS_RING if self.history_view_active else MAIN_FOCUS_RING

    def cycle_focus(self) -> None:
        ring = self.focus_ring()
        if self.focus not in ring:
            self.focus = ring[0]
            return
        self.focus = ring[(ring.index(self.focus) + 1) % len(ring)]

    # response panel

    def switch_to_body_tab(self) -> None:
        self.response_tab = ResponseTab.BODY

    def switch_to_headers_tab(self) -> None:
        self.response_tab = ResponseTab.HEADERS

    def scroll_response(self, delta: int) -> None:
        if self.response_tab is ResponseTab.BODY:
            self.response_scroll = _step(self.response_scroll, delta)
        else:
            self.headers_scroll = _step(self.headers_scroll, delta)

    # request details panel

    def request_details_line_count(self) -> int:
        request = self.selected_request()
        if request is None:
            return 1

        count = 1 + len(request.headers)
        if request.body is not None:
            count += len(request.body.splitlines())
            if request.headers:
                count += 1
        return count

    def request_details_max_scroll(self) -> int:
        return max(
            0,
            self.request_details_line_count()
            - self.request_details_height
            + PANEL_CHROME_ROWS,
        )

    def scroll_request_details(self, delta: int) -> None:
        self.request_details_scroll = _step(
            self.request_details_scroll, delta, self.request_details_max_scroll()
        )

    # variables panel

    def used_variables(self) -> list[tuple[str, str]]:
        request = self.selected_request()
        if request is None:
            return []
        return referenced_variables(request, self.variables)

    def select_previous_variable(self) -> None:
        self.selected_variable = _step(self.selected_variable, -1)

    def select_next_variable(self) -> None:
        self.selected_variable = _step(
            self.selected_variable, 1, len(self.used_variables()) - 1
        )

    # history

    def toggle_history_view(self) -> None:
        self.history_view_active = not self.history_view_active
        if self.history_view_active:
            self.focus = Focus.HISTORY_LIST
            if self.history:
                self._set_history_selected(len(self.history) - 1)
        else:
            self.focus = Focus.REQUEST_LIST

    def selected_history_entry(self) -> HistoryEntry | None:
        if not 0 <= self.selected_history < len(self.history):
            return None
        return self.history[self.selected_history]

    def _set_history_selected(self, index: int) -> None:
        if index != self.selected_history:
            self.history_detail_scroll = 0
        self.selected_history = index

    # History is listed newest first, so "up" walks toward newer entries.

    def select_newer_history(self) -> None:
        self._set_history_selected(
            _step(self.selected_history, 1, len(self.history) - 1)
        )

    def select_older_history(self) -> None:
        self._set_history_selected(_step(self.selected_history, -1))

    def scroll_history_detail(self, delta: int) -> None:
        self.history_detail_scroll = _step(self.history_detail_scroll, delta)

    # execution

    def begin_execution(self) -> None:
        self.loading = True
        self.response_scroll = 0
        self.headers_scroll = 0

    def record(self, entry: HistoryEntry) -> None:
        self.history.append(entry)
        self.last_response = entry.response
        self.loading = False
        if self.history_view_active:
            self._set_history_selected(len(self.history) - 1)
