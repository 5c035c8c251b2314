"""Player configuration."""

from dataclasses import dataclass
from typing import Optional

from .script import DEFAULT_COMMENT_MARKER


@dataclass
class PlayerConfig:
    """Settings for one demo session, built once at startup and passed around."""

    prompt_color: str = "yellow"
    command_color: str = "bold white"
    comment_color: str = "green"
    error_color: str = "bold red"
    comment_marker: str = DEFAULT_COMMENT_MARKER
    start_line: int = 0
    auto_play_interval: Optional[float] = None  # seconds; None means wait for keys
    no_pause: bool = False  # skip the extra keystroke after each execution
    executor: str = "python"
