#!/usr/bin/env python
"""Demo application for the demo player, using the bundled sample script."""

import sys
from pathlib import Path

from src.textual_typedemo.__main__ import DemoApp
from src.textual_typedemo.config import PlayerConfig

SAMPLE_SCRIPT = Path(__file__).parent / "sample_demo.txt"


if __name__ == "__main__":
    script_file = Path(sys.argv[1]) if len(sys.argv) > 1 else SAMPLE_SCRIPT
    if not script_file.exists():
        print(f"Script file not found: {script_file}")
        sys.exit(1)

    summary = DemoApp(script_file, PlayerConfig()).run()
    if summary:
        print(summary)
