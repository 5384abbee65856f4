# Per-file scan context: root-relative path, decoded text, and line helpers.
# Handles unreadable and binary files by returning None so checkers skip them
# without surfacing infrastructure noise as findings.

import logging
from bisect import bisect_right
from pathlib import Path
from typing import Iterator, Optional

from vibecheck.traversal import relative_posix

logger = logging.getLogger(__name__)

# Bytes inspected for NUL when deciding whether a file is binary.
BINARY_SNIFF_BYTES = 1024


def is_binary(data: bytes) -> bool:
    """True if a NUL byte appears in the first BINARY_SNIFF_BYTES bytes."""
    return b"\0" in data[:BINARY_SNIFF_BYTES]


class FileContext:
    """
    Per-file state for a checker: absolute path, root-relative path, and text.

    Checkers use context.lines for line-by-line matching and
    context.line_of(offset) to turn a whole-file regex match into a 1-based
    line number.
    """

    def __init__(self, path: Path, relative_path: str, text: str) -> None:
        self.path = path
        self.relative_path = relative_path
        self.text = text
        # Split on \n only so numbering agrees with line_of().
        self.lines = [line.rstrip("\r") for line in text.split("\n")]
        self._line_starts: Optional[list[int]] = None

    def iter_lines(self) -> Iterator[tuple[int, str]]:
        """Yield (1-based line number, raw line) pairs."""
        for index, line in enumerate(self.lines):
            yield index + 1, line

    def line_of(self, offset: int) -> int:
        """Return the 1-based line containing character ``offset`` of text."""
        if self._line_starts is None:
            starts = [0]
            for i, ch in enumerate(self.text):
                if ch == "\n":
                    starts.append(i + 1)
            self._line_starts = starts
        return bisect_right(self._line_starts, offset)

    def line_text(self, line: int) -> str:
        """Return the trimmed text of a 1-based line, or '' when out of range."""
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1].strip()
        return ""


def create_context(path: Path, root: Path) -> Optional[FileContext]:
    """
    Read a file into a FileContext.

    - Unreadable file (permission, vanished): returns None and logs at debug.
    - Binary file (NUL byte near the start): returns None.
    - Otherwise decodes as UTF-8 with replacement characters.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.debug("Failed to read file %s: %s", path, e)
        return None

    if is_binary(data):
        logger.debug("Skipping binary file %s", path)
        return None

    text = data.decode("utf-8", errors="replace")
    return FileContext(path=path, relative_path=relative_posix(path, root), text=text)


def load_contexts(paths: list[Path], root: Path) -> list[FileContext]:
    """
    Read multiple files into FileContexts.

    Unreadable and binary files are omitted; order matches input order.
    """
    contexts: list[FileContext] = []
    for path in paths:
        ctx = create_context(path, root)
        if ctx is not None:
            contexts.append(ctx)
    return contexts
