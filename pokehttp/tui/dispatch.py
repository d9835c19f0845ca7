from __future__ import annotations

import dataclasses
import enum
from collections.abc import Callable

from pokehttp.tui.state import Focus, SessionState

QUIT_CHAR = "q"
HISTORY_TOGGLE_CHAR = "H"
FILTER_CHAR = "/"
UP_CHAR = "k"
DOWN_CHAR = "j"
BODY_TAB_CHAR = "b"
HEADERS_TAB_CHAR = "h"


class Key(enum.Enum):
    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    TAB = "tab"
    INTERRUPT = "interrupt"


@dataclasses.dataclass(frozen=True, slots=True)
class KeyEvent:
    key: Key
    char: str | None = None
    ctrl: bool = False

    @classmethod
    def text(cls, char: str, *, ctrl: bool = False) -> KeyEvent:
        return cls(key=Key.CHAR, char=char, ctrl=ctrl)

    def is_char(self, char: str, *, ctrl: bool = False) -> bool:
        return self.key is Key.CHAR and self.char == char and self.ctrl == ctrl


class Command(enum.Enum):
    EXECUTE_SELECTED = "execute_selected"
    EXECUTE_HISTORY_ENTRY = "execute_history_entry"
    QUIT = "quit"


Handler = Callable[[SessionState, KeyEvent], "Command | None"]


def _is_up(event: KeyEvent) -> bool:
    return event.key is Key.UP or event.is_char(UP_CHAR)


def _is_down(event: KeyEvent) -> bool:
    return event.key is Key.DOWN or event.is_char(DOWN_CHAR)


def _scroll_delta(state: SessionState, event: KeyEvent) -> int:
    if _is_up(event):
        return -1
    if _is_down(event):
        return 1
    if event.key is Key.PAGE_UP:
        return -state.page_step
    if event.key is Key.PAGE_DOWN:
        return state.page_step
    return 0


def _handle_global(state: SessionState, event: KeyEvent) -> tuple[bool, Command | None]:
    if event.key is Key.INTERRUPT or event.is_char("c", ctrl=True):
        return True, Command.QUIT

    if event.is_char(QUIT_CHAR):
        return True, Command.QUIT

    if event.is_char(HISTORY_TOGGLE_CHAR) and not state.filter_active:
        state.toggle_history_view()
        return True, None

    if event.key is Key.ESCAPE and state.history_view_active:
        state.toggle_history_view()
        return True, None

    if event.key is Key.TAB:
        state.cycle_focus()
        return True, None

    return False, None


def _handle_request_list(state: SessionState, event: KeyEvent) -> Command | None:
    if state.filter_active:
        return _handle_filter(state, event)

    if _is_up(event):
        state.select_previous()
    elif _is_down(event):
        state.select_next()
    elif event.key is Key.ENTER:
        return Command.EXECUTE_SELECTED
    elif event.is_char(FILTER_CHAR):
        state.enter_filter_mode()
    return None


def _handle_filter(state: SessionState, event: KeyEvent) -> Command | None:
    if event.key is Key.ESCAPE:
        state.exit_filter_mode()
    elif event.key is Key.BACKSPACE:
        state.filter_backspace()
    elif event.key is Key.UP or event.is_char(UP_CHAR, ctrl=True):
        state.select_previous()
    elif event.key is Key.DOWN or event.is_char(DOWN_CHAR, ctrl=True):
        state.select_next()
    elif event.key is Key.ENTER:
        return Command.EXECUTE_SELECTED
    elif event.key is Key.CHAR and event.char and not event.ctrl:
        state.filter_append_char(event.char)
    return None


def _handle_response(state: SessionState, event: KeyEvent) -> Command | None:
    if event.key is Key.LEFT or event.is_char(BODY_TAB_CHAR):
        state.switch_to_body_tab()
    elif event.key is Key.RIGHT or event.is_char(HEADERS_TAB_CHAR):
        state.switch_to_headers_tab()
    else:
        delta = _scroll_delta(state, event)
        if delta:
            state.scroll_response(delta)
    return None


def _handle_request_details(state: SessionState, event: KeyEvent) -> Command | None:
    delta = _scroll_delta(state, event)
    if delta:
        state.scroll_request_details(delta)
    return None


def _handle_variables(state: SessionState, event: KeyEvent) -> Command | None:
    if _is_up(event):
        state.select_previous_variable()
    elif _is_down(event):
        state.select_next_variable()
    return None


def _handle_history_list(state: SessionState, event: KeyEvent) -> Command | None:
    if _is_up(event):
        state.select_newer_history()
    elif _is_down(event):
        state.select_older_history()
    elif event.key is Key.ENTER:
        return Command.EXECUTE_HISTORY_ENTRY
    return None


def _handle_history_detail(state: SessionState, event: KeyEvent) -> Command | None:
    delta = _scroll_delta(state, event)
    if delta:
        state.scroll_history_detail(delta)
    return None


_MAIN_HANDLERS: dict[Focus, Handler] = {
    Focus.REQUEST_LIST: _handle_request_list,
    Focus.RESPONSE_BODY: _handle_response,
    Focus.REQUEST_DETAILS: _handle_request_details,
    Focus.VARIABLES_LIST: _handle_variables,
}

_HISTORY_HANDLERS: dict[Focus, Handler] = {
    Focus.HISTORY_LIST: _handle_history_list,
    Focus.HISTORY_DETAIL: _handle_history_detail,
}


def dispatch(state: SessionState, event: KeyEvent) -> Command | None:
    """Apply one input event to ``state``.

    Returns the session-level command the event asks for, if any. Never
    performs I/O; executing a request is the caller's job.
    """
    handled, command = _handle_global(state, event)
    if handled:
        return command

    handlers = _HISTORY_HANDLERS if state.history_view_active else _MAIN_HANDLERS
    handler = handlers.get(state.focus)
    if handler is None:
        return None
    return handler(state, event)
