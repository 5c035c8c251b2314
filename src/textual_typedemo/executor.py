"""Command executors that run demo script lines."""

import contextlib
import io
import json
import os
import shlex
import subprocess
import sys
import traceback
import uuid
from typing import Any, Callable, Dict, Optional

from textual import log

from .exceptions import CommandExecutionError


class CommandExecutor:
    """Runs a single line of text and returns what it printed.

    Subclasses raise CommandExecutionError when the line fails.
    """

    name = "base"
    prompt = "> "
    # Line appended to every script so the last real line can be stepped past
    trailer = "pass"

    def execute(self, line: str) -> str:
        raise NotImplementedError


class PythonExecutor(CommandExecutor):
    """Executes lines as Python in one persistent namespace.

    Expressions print the repr of their result, statements are executed for
    their side effects. Anything written to stdout or stderr is captured.
    """

    name = "python"
    prompt = ">>> "
    trailer = "pass"

    def __init__(self, namespace: Optional[Dict[str, Any]] = None):
        self.namespace: Dict[str, Any] = namespace if namespace is not None else {"__name__": "__demo__"}

    def execute(self, line: str) -> str:
        source = line.strip()
        buffer = io.StringIO()

        try:
            code = compile(source, "<demo>", "eval")
            is_expression = True
        except SyntaxError:
            is_expression = False

        try:
            with contextlib.redirect_stdout(buffer), contextlib.redirect_stderr(buffer):
                if is_expression:
                    result = eval(code, self.namespace)
                    if result is not None:
                        print(repr(result))
                else:
                    exec(compile(source, "<demo>", "exec"), self.namespace)
        except (Exception, SystemExit) as e:
            log.debug(f"python executor failed on {source!r}: {e!r}")
            raise CommandExecutionError(
                f"{type(e).__name__}: {e}",
                {"line": source, "output": buffer.getvalue(), "traceback": traceback.format_exc()},
            ) from e

        return buffer.getvalue()


class ShellExecutor(CommandExecutor):
    """Executes lines through the system shell.

    Each line runs in a fresh shell, so the working directory and environment
    are captured after every line and handed to the next one. That way ``cd``,
    ``export`` and plain ``NAME=value`` assignments carry over the way they
    would in an interactive shell.
    """

    name = "shell"
    prompt = "$ "
    trailer = ":"

    STATUS_VAR = "__typedemo_status"
    _STATE_CODE = "import json, os; print(json.dumps({'cwd': os.getcwd(), 'env': dict(os.environ)}))"

    def __init__(self, cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None):
        self.cwd = cwd or os.getcwd()
        self.env: Dict[str, str] = {**os.environ, **(env or {})}
        self._marker = f"__typedemo_state_{uuid.uuid4().hex}__"

    def _wrap(self, line: str) -> str:
        # set -a exports plain assignments so they survive into the next line
        return "\n".join(
            [
                "set -a",
                line,
                f"{self.STATUS_VAR}=$?",
                f"printf '\\n%s\\n' {self._marker}",
                f"{shlex.quote(sys.executable)} -c {shlex.quote(self._STATE_CODE)}",
                f"exit ${self.STATUS_VAR}",
            ]
        )

    def _split_state(self, stdout: str) -> str:
        """Strip the captured state from stdout and remember it."""
        output, marker, state = stdout.rpartition(f"\n{self._marker}\n")
        if not marker:
            # The line left the shell early (exit, exec), state is unchanged
            return stdout
        try:
            captured = json.loads(state)
        except ValueError:
            log.warning(f"shell executor could not read state: {state!r}")
            return output
        captured["env"].pop(self.STATUS_VAR, None)
        self.cwd = captured["cwd"]
        self.env = captured["env"]
        return output

    def execute(self, line: str) -> str:
        try:
            result = subprocess.run(
                self._wrap(line),
                shell=True,
                capture_output=True,
                text=True,
                cwd=self.cwd,
                env=self.env,
            )
        except OSError as e:
            raise CommandExecutionError(f"{type(e).__name__}: {e}", {"line": line, "output": ""}) from e

        output = self._split_state(result.stdout) + result.stderr
        if result.returncode != 0:
            log.debug(f"shell executor exit {result.returncode} on {line!r}")
            raise CommandExecutionError(
                f"Command exited with status {result.returncode}",
                {"line": line, "output": output},
            )
        return output


EXECUTORS: Dict[str, Callable[[], CommandExecutor]] = {
    PythonExecutor.name: PythonExecutor,
    ShellExecutor.name: ShellExecutor,
}


def create_executor(kind: str) -> CommandExecutor:
    """Create an executor by name ("python" or "shell")."""
    try:
        return EXECUTORS[kind]()
    except KeyError:
        raise ValueError(f"Unknown executor '{kind}'") from None


class NestedPrompt:
    """A reentrant prompt that runs lines until the operator types the exit word.

    Used to suspend a demo: the operator can poke around in the same command
    context and then return to the script.
    """

    EXIT_WORDS = ("exit", "exit()", "quit", "quit()")

    def __init__(
        self,
        executor: CommandExecutor,
        read_line: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ):
        self.executor = executor
        self.read_line = read_line
        self.write = write
        self.depth = 0

    def run(self) -> int:
        """Read and execute lines until exit or EOF. Returns the number of lines run."""
        self.depth += 1
        prompt = f"[suspended:{self.depth}] {self.executor.prompt}"
        executed = 0
        self.write("Demo suspended. Type 'exit' to resume.")
        try:
            while True:
                try:
                    line = self.read_line(prompt)
                except EOFError:
                    break

                if line.strip() in self.EXIT_WORDS:
                    break
                if line.strip() == "suspend":
                    executed += self.run()
                    continue
                if not line.strip():
                    continue

                try:
                    output = self.executor.execute(line)
                except CommandExecutionError as e:
                    self.write(f"Error: {e.message}")
                    continue
                except (Exception, SystemExit) as e:
                    log.error(f"nested prompt: executor raised {e!r}")
                    self.write(f"Error: {type(e).__name__}: {e}")
                    continue
                finally:
                    executed += 1

                if output:
                    self.write(output.rstrip("\n"))
        finally:
            self.depth -= 1
        self.write("Resuming demo.")
        return executed
