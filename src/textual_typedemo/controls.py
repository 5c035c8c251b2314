"""Keyboard controls and status bar for the demo player."""

from typing import Callable, Dict, Optional

from textual.reactive import reactive
from textual.widgets import Static

from .engine import Command, format_elapsed

KEY_COMMANDS: Dict[str, Command] = {
    "question_mark": Command.HELP,
    "h": Command.HELP,
    "n": Command.NEXT,
    "p": Command.PREVIOUS,
    "a": Command.AUTO_PLAY,
    "q": Command.QUIT,
    "v": Command.VIEW_SOURCE,
    "t": Command.TIME_CHECK,
    "s": Command.SUSPEND,
    "g": Command.GOTO,
    "f": Command.FIND,
    "c": Command.CLEAR,
    "enter": Command.EXECUTE,
}

MODE_LABELS = {
    "awaiting_key": "ready",
    "awaiting_resume": "press any key",
    "auto_playing": "auto",
    "finished": "done",
}


class DemoControls(Static):
    """Status bar that turns single keystrokes into demo commands."""

    can_focus = True

    line_number = reactive(0)
    line_count = reactive(0)
    elapsed = reactive(0.0)
    mode = reactive("awaiting_key")

    def __init__(self, line_count: int = 0, **kwargs):
        super().__init__("", **kwargs)
        self.line_count = line_count

        # Callbacks
        self.on_command: Optional[Callable[[Command], None]] = None

    def command_for_key(self, key: str) -> Command:
        """Return the command bound to a key, or UNRECOGNIZED."""
        return KEY_COMMANDS.get(key, Command.UNRECOGNIZED)

    def on_key(self, event) -> None:
        """Map a keystroke to a command."""
        # Tab moves focus, leave it to textual
        if event.key in ("tab", "shift+tab"):
            return
        event.prevent_default()
        event.stop()
        if self.on_command:
            self.on_command(self.command_for_key(event.key))

    def update_status(self, line_number: int, elapsed: float, mode: str) -> None:
        """Update the line number, elapsed seconds and engine mode shown."""
        self.line_number = line_number
        self.elapsed = elapsed
        self.mode = mode

    def _format_status(self) -> str:
        mode = MODE_LABELS.get(self.mode, self.mode)
        if self.mode == "finished":
            position = f"{self.line_count}/{self.line_count}"
        else:
            position = f"{min(self.line_number, self.line_count)}/{self.line_count}"
        return f" Line {position}  |  {format_elapsed(self.elapsed)}  |  {mode}  |  ? help"

    def _refresh_status(self) -> None:
        if self.is_mounted:
            self.update(self._format_status())

    def on_mount(self) -> None:
        self._refresh_status()

    def watch_line_number(self, line_number: int) -> None:
        self._refresh_status()

    def watch_elapsed(self, elapsed: float) -> None:
        self._refresh_status()

    def watch_mode(self, mode: str) -> None:
        self._refresh_status()
