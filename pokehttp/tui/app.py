from __future__ import annotations

import logging

from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Static

from pokehttp.http.client import HttpClient
from pokehttp.models import RequestSpec
from pokehttp.tui import render
from pokehttp.tui.dispatch import Command, Key, KeyEvent, dispatch
from pokehttp.tui.session import Session

logger = logging.getLogger("pokehttp.app")

_NAMED_KEYS: dict[str, Key] = {
    "up": Key.UP,
    "down": Key.DOWN,
    "left": Key.LEFT,
    "right": Key.RIGHT,
    "pageup": Key.PAGE_UP,
    "pagedown": Key.PAGE_DOWN,
    "enter": Key.ENTER,
    "escape": Key.ESCAPE,
    "backspace": Key.BACKSPACE,
    "tab": Key.TAB,
}

CTRL_PREFIX = "ctrl+"


def translate_key(key: str, character: str | None) -> KeyEvent | None:
    if key in _NAMED_KEYS:
        return KeyEvent(key=_NAMED_KEYS[key])

    if key.startswith(CTRL_PREFIX):
        rest = key[len(CTRL_PREFIX) :]
        if len(rest) == 1:
            return KeyEvent.text(rest, ctrl=True)
        return None

    if character is not None and len(character) == 1 and character.isprintable():
        return KeyEvent.text(character)
    return None


class PokeApp(App[None]):
    CSS = """
    #main, #history { height: 1fr; }
    #top { height: 75%; }
    #bottom { height: 25%; }
    #requests { width: 35%; }
    #response { width: 65%; }
    #details { width: 60%; }
    #variables { width: 40%; }
    #help, #history-help { height: 1; color: $text-muted; }
    #history-list { width: 40%; }
    #history-detail { width: 60%; }
    """

    # Textual claims these for itself unless bound with priority.
    BINDINGS = [
        Binding("tab", "press('tab')", show=False, priority=True),
        Binding("ctrl+c", "press('ctrl+c')", show=False, priority=True),
    ]

    def __init__(self, session: Session, client: HttpClient) -> None:
        super().__init__()
        self.session = session
        self._client = client
        self.title = f"poke - {session.state.request_file.path}"

    def compose(self) -> ComposeResult:
        with Vertical(id="main"):
            with Horizontal(id="top"):
                yield Static(id="requests")
                yield Static(id="response")
            with Horizontal(id="bottom"):
                yield Static(id="details")
                yield Static(id="variables")
            yield Static(render.MAIN_HELP, id="help")
        with Vertical(id="history"):
            yield Static(render.HISTORY_HELP, id="history-help")
            with Horizontal():
                yield Static(id="history-list")
                yield Static(id="history-detail")

    def on_mount(self) -> None:
        self.call_after_refresh(self.refresh_view)

    def on_resize(self, _: events.Resize) -> None:
        self.call_after_refresh(self.refresh_view)

    async def on_unmount(self) -> None:
        await self._client.aclose()

    def _height(self, selector: str) -> int | None:
        return self.query_one(selector, Static).size.height or None

    def refresh_view(self) -> None:
        state = self.session.state
        history = state.history_view_active

        self.query_one("#main").display = not history
        self.query_one("#history").display = history

        if history:
            self.query_one("#history-list", Static).update(
                render.history_list_panel(state, self._height("#history-list"))
            )
            self.query_one("#history-detail", Static).update(
                render.history_detail_panel(state)
            )
            return

        self.query_one("#requests", Static).update(
            render.request_list_panel(state, self._height("#requests"))
        )
        self.query_one("#response", Static).update(
            render.response_panel(state, self._height("#response"))
        )
        self.query_one("#details", Static).update(
            render.request_details_panel(state, self._height("#details"))
        )
        self.query_one("#variables", Static).update(
            render.variables_panel(state, self._height("#variables"))
        )

    def on_key(self, event: events.Key) -> None:
        key_event = translate_key(event.key, event.character)
        if key_event is None:
            return
        event.stop()
        event.prevent_default()
        self.handle(key_event)

    def action_press(self, key: str) -> None:
        key_event = translate_key(key, None)
        if key_event is not None:
            self.handle(key_event)

    def handle(self, key_event: KeyEvent) -> None:
        command = dispatch(self.session.state, key_event)

        if command is Command.QUIT:
            self.exit()
            return

        if command is not None:
            request = self.session.prepare(command)
            if request is not None:
                self._execute(request)
            else:
                logger.debug("%s ignored", command.name)

        self.refresh_view()

    @work(exclusive=True)
    async def _execute(self, request: RequestSpec) -> None:
        await self.session.perform(request)
        self.refresh_view()
