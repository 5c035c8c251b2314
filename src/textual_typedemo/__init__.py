"""A textual player for typed, line-by-line command demos."""

from .config import PlayerConfig
from .engine import Command, DemoEngine, EngineState
from .executor import CommandExecutor, NestedPrompt, PythonExecutor, ShellExecutor
from .player import DemoPlayer
from .script import DemoScript

__all__ = [
    "Command",
    "CommandExecutor",
    "DemoEngine",
    "DemoPlayer",
    "DemoScript",
    "EngineState",
    "NestedPrompt",
    "PlayerConfig",
    "PythonExecutor",
    "ShellExecutor",
]
