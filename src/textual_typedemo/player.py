"""Main demo player widget."""

from pathlib import Path
from typing import Optional

from rich.text import Text
from textual import log
from textual.app import ComposeResult, SuspendNotSupported
from textual.containers import Vertical
from textual.timer import Timer
from textual.widget import Widget
from textual.widgets import Input, RichLog

from .config import PlayerConfig
from .controls import DemoControls
from .engine import Command, DemoEngine, EngineState, format_elapsed
from .executor import CommandExecutor, NestedPrompt, create_executor
from .script import DemoScript

# Shortest auto-play tick, so an interval of 0 does not spin the event loop
MIN_AUTO_PLAY_TICK = 0.01


class DemoPlayer(Widget):
    """Demo player widget with a transcript, an argument prompt and controls."""

    DEFAULT_CSS = """
    DemoPlayer {
        height: 1fr;
    }

    #demo-transcript {
        height: 1fr;
        border: solid $primary;
        scrollbar-size: 1 1;
    }

    #demo-prompt {
        height: 3;
        display: none;
    }

    #demo-controls {
        height: 1;
        width: 100%;
        background: $surface;
        color: $text-muted;
    }

    #demo-controls:focus {
        color: $text;
    }
    """

    def __init__(
        self,
        script_path: str | Path,
        config: Optional[PlayerConfig] = None,
        executor: Optional[CommandExecutor] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.config = config or PlayerConfig()
        self.executor = executor or create_executor(self.config.executor)
        self.script_path = Path(script_path)
        self.script = DemoScript.load(
            self.script_path,
            comment_marker=self.config.comment_marker,
            trailer=self.executor.trailer,
        )
        self.engine = DemoEngine(self.script, self.executor, self.config)
        self.transcript: Optional[RichLog] = None
        self.prompt_input: Optional[Input] = None
        self.controls: Optional[DemoControls] = None
        self.summary: Optional[str] = None

        self._pending_command: Optional[Command] = None
        self._auto_timer: Optional[Timer] = None

    def compose(self) -> ComposeResult:
        """Compose the player with transcript, prompt and controls."""
        self.transcript = RichLog(id="demo-transcript", wrap=True, markup=False, highlight=False)
        self.transcript.can_focus = False
        self.prompt_input = Input(id="demo-prompt")
        self.controls = DemoControls(line_count=self.script.line_count, id="demo-controls")

        # Wire up controls to the engine
        self.controls.on_command = self.handle_command

        # Wire up engine output to the widgets
        self.engine.on_output = self._write
        self.engine.on_clear = self.transcript.clear
        self.engine.on_line_change = self._on_line_change
        self.engine.on_auto_play = self._start_auto_play
        self.engine.on_suspend = self._suspend
        self.engine.on_finished = self._on_finished

        with Vertical():
            yield self.transcript
            yield self.prompt_input
            yield self.controls

    def on_mount(self) -> None:
        """Start the demo when mounted."""
        self.controls.focus()
        self.set_interval(1.0, self._sync_status)
        self.engine.start()
        self._sync_status()

    def handle_command(self, command: Command) -> None:
        """Handle a command from the controls."""
        if self.engine.is_finished:
            self.app.exit(self.summary)
            return

        if command.needs_argument and self.engine.state == EngineState.AWAITING_KEY:
            self._ask_argument(command)
            return

        self.engine.dispatch(command)
        self._sync_status()

        if command == Command.QUIT and self.engine.is_finished:
            self.app.exit(self.summary)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Pass the prompt answer to the command that asked for it."""
        event.stop()
        self._finish_argument(event.value)

    def on_key(self, event) -> None:
        """Cancel an open prompt with escape."""
        if event.key == "escape" and self._pending_command is not None:
            event.stop()
            self._finish_argument("")

    def _ask_argument(self, command: Command) -> None:
        self._pending_command = command
        self.prompt_input.placeholder = command.argument_prompt
        self.prompt_input.value = ""
        self.prompt_input.display = True
        self.prompt_input.focus()

    def _finish_argument(self, value: str) -> None:
        command = self._pending_command
        self._pending_command = None
        self.prompt_input.display = False
        self.controls.focus()
        if command is not None:
            self.engine.dispatch(command, value)
            self._sync_status()

    def _write(self, content: Text) -> None:
        if self.transcript:
            self.transcript.write(content)

    def _on_line_change(self, index: int, line: str) -> None:
        self._sync_status()

    def _sync_status(self) -> None:
        """Refresh the status bar and the window title."""
        if self.controls:
            self.controls.update_status(self.engine.cursor + 1, self.engine.elapsed, self.engine.state.value)
        if self.is_mounted:
            self.app.title = f"{format_elapsed(self.engine.elapsed)} | {self.engine.current_line.strip()}"

    def _start_auto_play(self, interval: float) -> None:
        self._stop_auto_play()
        self._auto_timer = self.set_interval(max(interval, MIN_AUTO_PLAY_TICK), self._auto_step)

    def _stop_auto_play(self) -> None:
        if self._auto_timer is not None:
            self._auto_timer.stop()
            self._auto_timer = None

    def _auto_step(self) -> None:
        if not self.engine.auto_step():
            self._stop_auto_play()
        self._sync_status()

    def _suspend(self) -> None:
        """Leave the TUI for a nested prompt in the same command context."""
        try:
            with self.app.suspend():
                NestedPrompt(self.executor).run()
        except SuspendNotSupported:
            log.warning("suspend not supported by this terminal")
            self._write(Text("Suspend is not supported in this terminal", style=self.config.error_color))

    def _on_finished(self, summary: str) -> None:
        self.summary = summary
        self._stop_auto_play()
        self._write(Text("Press any key to exit", style=self.config.prompt_color))
