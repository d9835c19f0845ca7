from __future__ import annotations

import json
import time

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from pokehttp.http.client import headers_list_to_text
from pokehttp.models import HistoryEntry, Method, RequestSpec, Response
from pokehttp.tui.state import PANEL_CHROME_ROWS, Focus, ResponseTab, SessionState

FOCUSED_BORDER = "cyan"
IDLE_BORDER = "grey50"
HIGHLIGHT = "bold on grey23"
MUTED = "grey50"

METHOD_STYLES: dict[Method, str] = {
    Method.GET: "green",
    Method.POST: "yellow",
    Method.PUT: "blue",
    Method.PATCH: "cyan",
    Method.DELETE: "red",
}

HISTORY_HELP = (
    " History | ESC/H: back | Tab: switch panels | Enter: re-execute | j/k: navigate"
)
MAIN_HELP = (
    " Enter: send | /: filter | Tab: switch panels | H: history | j/k: navigate | q: quit"
)

STATUS_PANEL_HEIGHT = 3


def method_style(method: Method) -> str:
    return f"bold {METHOD_STYLES.get(method, 'white')}"


def status_style(response: Response) -> str:
    if response.is_error or response.status >= 400:
        return "bold red"
    if response.status >= 300:
        return "bold yellow"
    return "bold green"


def format_body(body: str) -> str:
    try:
        loaded: object = json.loads(body)
    except ValueError:
        return body
    return json.dumps(loaded, ensure_ascii=False, indent=2)


def format_elapsed(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.2f}ms"
    return f"{seconds:.2f}s"


def _border(state: SessionState, focus: Focus) -> str:
    return FOCUSED_BORDER if state.focus is focus else IDLE_BORDER


def _list_window(count: int, selected: int, rows: int) -> range:
    if rows <= 0 or count <= rows:
        return range(count)
    start = min(max(0, selected - rows + 1), count - rows)
    return range(start, start + rows)


def _request_lines(request: RequestSpec) -> list[Text]:
    first = Text()
    first.append(str(request.method), style=method_style(request.method))
    first.append(" ")
    first.append(request.url)

    lines = [first]
    lines.extend(Text(f"{key}: {value}") for key, value in request.headers.items())
    if request.body is not None:
        if request.headers:
            lines.append(Text(""))
        lines.extend(Text(line) for line in request.body.splitlines())
    return lines


def _status_line(response: Response) -> Text:
    line = Text()
    line.append(f"{response.status} {response.status_text}", style=status_style(response))
    line.append("  ")
    line.append(format_elapsed(response.elapsed), style=MUTED)
    return line


def _scrolled(text: str, offset: int) -> Text:
    return Text("\n".join(text.splitlines()[offset:]))


def request_list_panel(state: SessionState, height: int | None = None) -> Panel:
    visible = state.filtered_requests()

    rows = (height - PANEL_CHROME_ROWS) if height is not None else 0
    if state.filter_active and rows:
        rows -= 1

    lines: list[Text] = []
    for position in _list_window(len(visible), state.selected_index, rows):
        _, request = visible[position]
        line = Text()
        line.append(f"{request.method!s:7}", style=method_style(request.method))
        line.append(" ")
        line.append(request.name or request.url)
        if position == state.selected_index:
            line.stylize(HIGHLIGHT)
        lines.append(line)

    if state.filter_active:
        title = f" Requests ({len(visible)}/{len(state.requests)}) "
        lines.append(Text(f"/{state.filter_text}", style="yellow"))
    else:
        title = " Requests "

    return Panel(
        Group(*lines),
        title=title,
        title_align="left",
        border_style=_border(state, Focus.REQUEST_LIST),
        height=height,
    )


def response_panel(state: SessionState, height: int | None = None) -> RenderableType:
    response = state.last_response
    if state.loading:
        status = Text("Loading...", style="yellow")
    elif response is not None:
        status = _status_line(response)
    else:
        status = Text("No response yet. Press Enter to send request.", style=MUTED)

    status_block = Panel(
        status,
        title=" Status ",
        title_align="left",
        border_style=IDLE_BORDER,
        height=STATUS_PANEL_HEIGHT,
    )

    if state.response_tab is ResponseTab.BODY:
        title = Text(" [Body] Headers ")
        content = format_body(response.body) if response is not None else ""
        offset = state.response_scroll
    else:
        title = Text(" Body [Headers] ")
        content = headers_list_to_text(response.headers) if response is not None else ""
        offset = state.headers_scroll

    body_height = None if height is None else max(height - STATUS_PANEL_HEIGHT, 0)
    body_block = Panel(
        _scrolled(content, offset),
        title=title,
        title_align="left",
        border_style=_border(state, Focus.RESPONSE_BODY),
        height=body_height,
    )
    return Group(status_block, body_block)


def request_details_panel(state: SessionState, height: int | None = None) -> Panel:
    if height is not None:
        state.request_details_height = height

    request = state.selected_request()
    if request is None:
        content: RenderableType = Text("No request selected", style=MUTED)
    else:
        lines = _request_lines(request)[state.request_details_scroll :]
        content = Group(*lines)

    return Panel(
        content,
        title=" Request ",
        title_align="left",
        border_style=_border(state, Focus.REQUEST_DETAILS),
        height=height,
    )


def variables_panel(state: SessionState, height: int | None = None) -> Panel:
    used = state.used_variables()

    lines: list[Text] = []
    for index, (name, value) in enumerate(used):
        line = Text(f"@{name} = {value}")
        if index == state.selected_variable:
            line.stylize(HIGHLIGHT)
        lines.append(line)

    return Panel(
        Group(*lines),
        title=" Variables " if used else " Variables (none) ",
        title_align="left",
        border_style=_border(state, Focus.VARIABLES_LIST),
        height=height,
    )


def _history_row(entry: HistoryEntry) -> Text:
    line = Text()
    line.append(time.strftime("%H:%M:%S", time.localtime(entry.ts)), style=MUTED)
    line.append(" ")
    line.append(str(entry.response.status), style=status_style(entry.response))
    line.append(" ")
    line.append(f"{entry.request.method!s:7}", style=method_style(entry.request.method))
    line.append(" ")
    line.append(entry.request.name or entry.request.url)
    return line


def history_list_panel(state: SessionState, height: int | None = None) -> Panel:
    newest_first = list(reversed(state.history))
    display_index = len(state.history) - 1 - state.selected_history if state.history else 0

    rows = (height - PANEL_CHROME_ROWS) if height is not None else 0
    lines: list[Text] = []
    for position in _list_window(len(newest_first), display_index, rows):
        line = _history_row(newest_first[position])
        if position == display_index:
            line.stylize(HIGHLIGHT)
        lines.append(line)

    return Panel(
        Group(*lines),
        title=f" History ({len(state.history)}) ",
        title_align="left",
        border_style=_border(state, Focus.HISTORY_LIST),
        height=height,
    )


def history_detail_panel(state: SessionState) -> RenderableType:
    entry = state.selected_history_entry()
    if entry is None:
        return Panel(
            Text("No history entries yet. Execute a request first.", style=MUTED),
            title=" Details ",
            title_align="left",
            border_style=IDLE_BORDER,
        )

    request_block = Panel(
        Group(*_request_lines(entry.request)),
        title=" Request ",
        title_align="left",
        border_style=IDLE_BORDER,
    )

    response_lines = [_status_line(entry.response), Text("")]
    response_lines.extend(
        Text(line) for line in format_body(entry.response.body).splitlines()
    )
    response_block = Panel(
        Group(*response_lines[state.history_detail_scroll :]),
        title=" Response ",
        title_align="left",
        border_style=_border(state, Focus.HISTORY_DETAIL),
    )
    return Group(request_block, response_block)
