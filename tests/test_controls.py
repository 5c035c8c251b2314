"""Tests for demo controls."""

from unittest.mock import Mock

import pytest

from textual_typedemo.controls import KEY_COMMANDS, DemoControls
from textual_typedemo.engine import Command


def key_event(key):
    event = Mock()
    event.key = key
    return event


class TestDemoControls:
    """Test the DemoControls widget."""

    def test_init(self):
        """Test DemoControls initialization."""
        controls = DemoControls(line_count=12)

        assert controls.line_count == 12
        assert controls.line_number == 0
        assert controls.elapsed == 0.0
        assert controls.mode == "awaiting_key"
        assert controls.can_focus
        assert controls.on_command is None

    @pytest.mark.parametrize(
        "key,command",
        [
            ("enter", Command.EXECUTE),
            ("question_mark", Command.HELP),
            ("h", Command.HELP),
            ("n", Command.NEXT),
            ("p", Command.PREVIOUS),
            ("a", Command.AUTO_PLAY),
            ("q", Command.QUIT),
            ("v", Command.VIEW_SOURCE),
            ("t", Command.TIME_CHECK),
            ("s", Command.SUSPEND),
            ("g", Command.GOTO),
            ("f", Command.FIND),
            ("c", Command.CLEAR),
        ],
    )
    def test_key_mapping(self, key, command):
        """Test each key maps to its command."""
        controls = DemoControls()
        controls.on_command = Mock()

        event = key_event(key)
        controls.on_key(event)

        event.prevent_default.assert_called_once()
        controls.on_command.assert_called_once_with(command)

    def test_every_command_has_a_key(self):
        """Test only the fallback command lacks a key."""
        assert set(Command) - set(KEY_COMMANDS.values()) == {Command.UNRECOGNIZED}

    def test_unknown_key(self):
        """Test unknown keys map to the unrecognized command."""
        controls = DemoControls()
        controls.on_command = Mock()

        controls.on_key(key_event("x"))

        controls.on_command.assert_called_once_with(Command.UNRECOGNIZED)

    def test_tab_left_to_textual(self):
        """Test focus keys are not swallowed."""
        controls = DemoControls()
        controls.on_command = Mock()

        event = key_event("tab")
        controls.on_key(event)

        event.prevent_default.assert_not_called()
        controls.on_command.assert_not_called()

    def test_key_without_callback(self):
        """Test keys are safe when nothing is wired up."""
        controls = DemoControls()

        controls.on_key(key_event("enter"))

    def test_update_status(self):
        """Test update_status sets the reactive fields."""
        controls = DemoControls(line_count=10)

        controls.update_status(3, 65.0, "auto_playing")

        assert controls.line_number == 3
        assert controls.elapsed == 65.0
        assert controls.mode == "auto_playing"

    def test_format_status(self):
        """Test the status line text."""
        controls = DemoControls(line_count=10)
        controls.update_status(3, 65.0, "awaiting_key")

        assert controls._format_status() == " Line 3/10  |  1m 05s  |  ready  |  ? help"

    def test_format_status_at_trailer(self):
        """Test the trailer line never shows past the line count."""
        controls = DemoControls(line_count=10)
        controls.update_status(11, 5.0, "awaiting_resume")

        assert controls._format_status().startswith(" Line 10/10")
        assert "press any key" in controls._format_status()

    def test_format_status_finished(self):
        """Test the finished status."""
        controls = DemoControls(line_count=4)
        controls.update_status(6, 5.0, "finished")

        assert " Line 4/4 " in controls._format_status()
        assert "done" in controls._format_status()

    @pytest.mark.parametrize("method", ["command_for_key", "on_key", "update_status"])
    def test_public_methods_documented(self, method):
        """Test the public methods carry docstrings."""
        assert getattr(DemoControls, method).__doc__

    def test_watchers_when_not_mounted(self):
        """Test watchers don't crash when not mounted."""
        controls = DemoControls(line_count=4)

        controls.watch_line_number(2)
        controls.watch_elapsed(3.0)
        controls.watch_mode("finished")
