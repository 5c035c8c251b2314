"""Demo script loading and line navigation."""

from pathlib import Path
from typing import Iterator, List, Tuple

from .exceptions import ScriptNotFoundError

DEFAULT_COMMENT_MARKER = "#"
DEFAULT_TRAILER = "pass"


class DemoScript:
    """An ordered, read-only list of script lines plus a synthetic trailer.

    The trailer is a no-op line appended after the last real line so the
    operator can always step past the end of the script.
    """

    def __init__(
        self,
        lines: List[str],
        comment_marker: str = DEFAULT_COMMENT_MARKER,
        trailer: str = DEFAULT_TRAILER,
        path: Path | None = None,
    ):
        self.path = path
        self.comment_marker = comment_marker
        self.trailer = trailer
        self._lines = tuple(lines) + (trailer,)

    @classmethod
    def load(
        cls,
        path: str | Path,
        comment_marker: str = DEFAULT_COMMENT_MARKER,
        trailer: str = DEFAULT_TRAILER,
    ) -> "DemoScript":
        """Read a script file fully into memory."""
        path = Path(path)
        if not path.is_file():
            raise ScriptNotFoundError(f"Script file '{path}' not found", {"path": str(path)})

        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()

        return cls(lines, comment_marker=comment_marker, trailer=trailer, path=path)

    @property
    def lines(self) -> Tuple[str, ...]:
        """All lines including the trailer."""
        return self._lines

    @property
    def line_count(self) -> int:
        """Number of real lines, excluding the trailer."""
        return len(self._lines) - 1

    @property
    def trailer_index(self) -> int:
        return len(self._lines) - 1

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, index: int) -> str:
        return self._lines[index]

    def is_comment(self, index: int) -> bool:
        """Check whether the line at index is blank or starts with the comment marker."""
        if index == self.trailer_index:
            return False
        text = self._lines[index].strip()
        return not text or text.startswith(self.comment_marker)

    def rewind(self, index: int, steps: int = 1) -> int:
        """Move back from index, skipping comment lines.

        Returns the nearest non-comment line at least ``steps`` lines before
        ``index``. If the beginning of the script is passed without finding
        one, ``index`` itself is returned.
        """
        target = index - steps
        while target >= 0 and self.is_comment(target):
            target -= 1
        if target < 0:
            return index
        return target

    def search(self, pattern: str) -> Iterator[Tuple[int, str]]:
        """Yield (index, line) for every real line containing pattern, ignoring case."""
        needle = pattern.lower()
        for index, line in enumerate(self._lines[:-1]):
            if needle in line.lower():
                yield index, line
