"""Demo engine: the cursor state machine that drives a script."""

import math
import time
from enum import Enum
from typing import Callable, List, Optional, Tuple

from rich.text import Text
from textual import log

from .config import PlayerConfig
from .exceptions import CommandExecutionError
from .executor import CommandExecutor
from .script import DemoScript


class Command(Enum):
    """Operator commands, each triggered by a single keystroke."""

    HELP = "help"
    NEXT = "next"
    PREVIOUS = "previous"
    AUTO_PLAY = "auto_play"
    QUIT = "quit"
    VIEW_SOURCE = "view_source"
    TIME_CHECK = "time_check"
    SUSPEND = "suspend"
    GOTO = "goto"
    FIND = "find"
    CLEAR = "clear"
    EXECUTE = "execute"
    UNRECOGNIZED = "unrecognized"

    @property
    def needs_argument(self) -> bool:
        return self in ARGUMENT_PROMPTS

    @property
    def argument_prompt(self) -> str:
        return ARGUMENT_PROMPTS.get(self, "")


ARGUMENT_PROMPTS = {
    Command.AUTO_PLAY: "Seconds between lines",
    Command.GOTO: "Go to line number",
    Command.FIND: "Find text",
}

HELP_LEGEND: List[Tuple[str, str]] = [
    ("Enter", "Execute the current line"),
    ("n", "Next line (skip without executing)"),
    ("p", "Previous line"),
    ("g", "Go to line number"),
    ("f", "Find lines containing text"),
    ("a", "Auto-play with a delay between lines"),
    ("v", "View the whole script"),
    ("t", "Time check"),
    ("s", "Suspend into a nested prompt ('exit' to resume)"),
    ("c", "Clear the screen"),
    ("q", "Quit"),
    ("? / h", "Show this help"),
]


class EngineState(Enum):
    AWAITING_KEY = "awaiting_key"
    AWAITING_RESUME = "awaiting_resume"
    AUTO_PLAYING = "auto_playing"
    FINISHED = "finished"


def format_elapsed(seconds: float) -> str:
    """Format a duration, leaving out hours and minutes when they are zero."""
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


class DemoEngine:
    """Walks an operator through a DemoScript one line at a time.

    The cursor points at the line waiting for a command. Comment lines are
    echoed and skipped without waiting. All output goes through the
    callbacks so the engine can run without a UI.
    """

    def __init__(
        self,
        script: DemoScript,
        executor: CommandExecutor,
        config: Optional[PlayerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.script = script
        self.executor = executor
        self.config = config or PlayerConfig()
        self.clock = clock

        # Session state
        self.start_time = clock()
        self.cursor = 0
        self.state = EngineState.AWAITING_KEY
        self.auto_play_interval: Optional[float] = None

        # Callbacks
        self.on_output: Optional[Callable[[Text], None]] = None
        self.on_clear: Optional[Callable[[], None]] = None
        self.on_line_change: Optional[Callable[[int, str], None]] = None
        self.on_auto_play: Optional[Callable[[float], None]] = None
        self.on_suspend: Optional[Callable[[], None]] = None
        self.on_finished: Optional[Callable[[str], None]] = None

    @property
    def elapsed(self) -> float:
        return self.clock() - self.start_time

    @property
    def is_finished(self) -> bool:
        return self.state == EngineState.FINISHED

    @property
    def current_line(self) -> str:
        if 0 <= self.cursor < len(self.script):
            return self.script[self.cursor]
        return ""

    def start(self) -> None:
        """Display the starting line, then enter auto-play if configured."""
        start = self.config.start_line
        if not 0 <= start <= self.script.line_count:
            log.warning(f"start line {start} out of range, starting at 0")
            start = 0
        self._display_from(start)

        if self.config.auto_play_interval is not None and not self.is_finished:
            self._begin_auto_play(self.config.auto_play_interval)

    def dispatch(self, command: Command, argument: Optional[str] = None) -> None:
        """Apply one operator command to the current line."""
        if self.state == EngineState.FINISHED:
            return

        if self.state == EngineState.AWAITING_RESUME:
            # Any key continues after an execution pause
            self.state = EngineState.AWAITING_KEY
            self._advance()
            return

        if self.state == EngineState.AUTO_PLAYING:
            if command == Command.QUIT:
                self.quit()
            return

        log.debug(f"line {self.cursor}: {command.value}")
        handlers = {
            Command.HELP: self.show_help,
            Command.NEXT: self._advance,
            Command.PREVIOUS: self.previous,
            Command.QUIT: self.quit,
            Command.VIEW_SOURCE: self.view_source,
            Command.TIME_CHECK: self.time_check,
            Command.SUSPEND: self.suspend,
            Command.CLEAR: self.clear,
            Command.EXECUTE: self.execute_current,
            Command.UNRECOGNIZED: self.unrecognized,
        }
        argument_handlers = {
            Command.AUTO_PLAY: self.start_auto_play,
            Command.GOTO: self.goto,
            Command.FIND: self.find,
        }
        if command in argument_handlers:
            argument_handlers[command](argument)
        else:
            handlers[command]()

    # Commands

    def show_help(self) -> None:
        """Print the key legend."""
        self._write("")
        for key, description in HELP_LEGEND:
            self._write(Text.assemble((f"{key:>7}  ", self.config.prompt_color), description))
        self._redisplay()

    def previous(self) -> None:
        """Step back to the nearest earlier line that is not a comment."""
        self._display_from(self.script.rewind(self.cursor, 1))

    def quit(self) -> None:
        """Move past the last line and finish the demo."""
        self._display_from(len(self.script))

    def view_source(self) -> None:
        """Print the whole script with 1-based numbers, highlighting the current line."""
        self._write("")
        for index, line in enumerate(self.script.lines[:-1]):
            if index == self.cursor:
                style = f"reverse {self.config.command_color}"
            elif self.script.is_comment(index):
                style = self.config.comment_color
            else:
                style = self.config.command_color
            self._write(Text.assemble((f"{index + 1:>4}  ", self.config.prompt_color), (line, style)))
        self._redisplay()

    def time_check(self) -> None:
        """Print the time since the demo started."""
        self._write(Text(f"Elapsed: {format_elapsed(self.elapsed)}", style=self.config.prompt_color))
        self._redisplay()

    def suspend(self) -> None:
        """Hand the terminal to a nested prompt, then show the same line again."""
        if self.on_suspend:
            self.on_suspend()
        else:
            self._write(Text("Suspend is not available here", style=self.config.error_color))
        self._redisplay()

    def clear(self) -> None:
        """Clear the transcript and show the current line again."""
        if self.on_clear:
            self.on_clear()
        self._redisplay()

    def unrecognized(self) -> None:
        """Remind the operator of the help and execute keys."""
        self._write(Text("Press ? for help, Enter to run the line", style=self.config.prompt_color))
        self._redisplay()

    def goto(self, argument: Optional[str]) -> None:
        """Jump so the next displayed line is the 1-based line number given."""
        try:
            number = int(str(argument).strip())
        except ValueError:
            self._redisplay()
            return

        if number <= 0:
            self._display_from(0)
        elif number <= self.script.line_count:
            self._display_from(number - 1)
        else:
            self._redisplay()

    def find(self, argument: Optional[str]) -> None:
        """Print every line containing the text. The cursor does not move."""
        pattern = (argument or "").strip()
        if not pattern:
            self._write(Text("Nothing to find", style=self.config.error_color))
        else:
            matches = list(self.script.search(pattern))
            if matches:
                for index, line in matches:
                    self._write(Text.assemble((f"{index:>4}: ", self.config.prompt_color), line))
            else:
                self._write(Text(f"'{pattern}' not found", style=self.config.error_color))
        self._redisplay()

    def start_auto_play(self, argument: Optional[str]) -> None:
        """Start auto-play with the interval in seconds. Invalid intervals are ignored."""
        try:
            interval = float(str(argument).strip())
        except ValueError:
            self._redisplay()
            return
        if not math.isfinite(interval) or interval < 0:
            self._redisplay()
            return
        self._begin_auto_play(interval)

    def execute_current(self) -> None:
        """Run the current line, report its output or error, then move on."""
        line = self.current_line
        self._write("")
        try:
            output = self.executor.execute(line)
        except CommandExecutionError as e:
            self._report_error(e.message, e.details.get("output", ""))
        except (Exception, SystemExit) as e:
            log.error(f"executor raised {e!r} on line {self.cursor}")
            self._report_error(f"{type(e).__name__}: {e}")
        else:
            if output:
                self._write(output.rstrip("\n"))

        if self.state == EngineState.AUTO_PLAYING or self.config.no_pause:
            self._advance()
        else:
            self.state = EngineState.AWAITING_RESUME

    def auto_step(self) -> bool:
        """Execute the current line in auto-play mode. Returns True while still playing."""
        if self.state != EngineState.AUTO_PLAYING:
            return False
        self.execute_current()
        return self.state == EngineState.AUTO_PLAYING

    # Internals

    def _begin_auto_play(self, interval: float) -> None:
        self.auto_play_interval = interval
        self.state = EngineState.AUTO_PLAYING
        self._write(Text(f"Auto-playing, {interval:g}s between lines", style=self.config.prompt_color))
        if self.on_auto_play:
            self.on_auto_play(interval)

    def _advance(self) -> None:
        self._display_from(self.cursor + 1)

    def _redisplay(self) -> None:
        self._display_from(self.cursor)

    def _display_from(self, index: int) -> None:
        """Move the cursor to index, echoing and skipping any comment lines."""
        self.cursor = max(0, index)
        while self.cursor < len(self.script) and self.script.is_comment(self.cursor):
            self._write(self.render_line(self.cursor))
            self.cursor += 1

        if self.cursor >= len(self.script):
            self._finish()
            return

        self._write(self.render_line(self.cursor))
        if self.on_line_change:
            self.on_line_change(self.cursor, self.current_line)

    def _finish(self) -> None:
        self.cursor = len(self.script)
        if self.state == EngineState.FINISHED:
            return
        self.state = EngineState.FINISHED
        summary = f"Demo complete in {format_elapsed(self.elapsed)}"
        log.info(summary)
        self._write(Text(summary, style=self.config.prompt_color))
        if self.on_finished:
            self.on_finished(summary)

    def render_line(self, index: int) -> Text:
        """Render a script line with its prompt."""
        style = self.config.comment_color if self.script.is_comment(index) else self.config.command_color
        prompt = f"[{index + 1}] {self.executor.prompt}"
        return Text.assemble((prompt, self.config.prompt_color), (self.script[index], style))

    def _report_error(self, message: str, output: str = "") -> None:
        if output:
            self._write(output.rstrip("\n"))
        self._write(Text(f"Error: {message}", style=self.config.error_color))

    def _write(self, content: Text | str) -> None:
        if self.on_output:
            self.on_output(content if isinstance(content, Text) else Text(content))
