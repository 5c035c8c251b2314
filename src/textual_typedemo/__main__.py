"""Main entry point for the textual-typedemo player."""

from pathlib import Path
from typing import Optional

import click
from textual.app import App

from .config import PlayerConfig
from .player import DemoPlayer


class DemoApp(App):
    """Main application for the demo player."""

    def __init__(self, script_path: str | Path, config: Optional[PlayerConfig] = None):
        super().__init__()
        self.script_path = Path(script_path)
        self.config = config or PlayerConfig()

    def compose(self):
        """Compose the app with the player widget."""
        yield DemoPlayer(self.script_path, self.config)

    def on_mount(self) -> None:
        self.sub_title = self.script_path.name


def resolve_script_path(script_path: Optional[str]) -> Path:
    """Keep asking for a script path until one points at a file."""
    while not script_path or not Path(script_path).is_file():
        if script_path:
            click.echo(f"Error: Script file '{script_path}' not found", err=True)
        script_path = click.prompt("Path to demo script")
    return Path(script_path)


@click.command(context_settings={"auto_envvar_prefix": "TYPEDEMO"})
@click.argument("script_path", required=False)
@click.option("--start", "-s", type=int, default=0, show_default=True, help="Line to start at (0-based)")
@click.option(
    "--auto",
    "-a",
    "auto_play",
    type=click.FloatRange(min=0),
    default=None,
    help="Auto-play with this many seconds between lines",
)
@click.option("--no-pause", is_flag=True, help="Do not wait for a key after each execution")
@click.option("--shell", "use_shell", is_flag=True, help="Run lines through the system shell instead of Python")
@click.option("--comment", default=PlayerConfig.comment_marker, show_default=True, help="Comment marker")
@click.option("--prompt-color", default=PlayerConfig.prompt_color, show_default=True)
@click.option("--command-color", default=PlayerConfig.command_color, show_default=True)
@click.option("--comment-color", default=PlayerConfig.comment_color, show_default=True)
def main(
    script_path: Optional[str],
    start: int,
    auto_play: Optional[float],
    no_pause: bool,
    use_shell: bool,
    comment: str,
    prompt_color: str,
    command_color: str,
    comment_color: str,
) -> None:
    """Play SCRIPT_PATH one line at a time. Press ? in the player for help."""
    path = resolve_script_path(script_path)
    config = PlayerConfig(
        prompt_color=prompt_color,
        command_color=command_color,
        comment_color=comment_color,
        comment_marker=comment,
        start_line=start,
        auto_play_interval=auto_play,
        no_pause=no_pause,
        executor="shell" if use_shell else "python",
    )

    app = DemoApp(path, config)
    summary = app.run()
    if summary:
        click.echo(summary)


if __name__ == "__main__":
    main()
