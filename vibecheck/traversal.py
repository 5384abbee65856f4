"""
File system traversal: walk a scan root and collect files matching glob patterns.

Checkers call find_files() with one to three gitignore-style glob patterns
scoped to their concern (e.g. ``**/*.sql``). Traversal always skips a fixed
set of dependency, build-output, VCS and cache directories, honors caller
supplied ignore globs, and honors a ``.gitignore`` at the scan root.

Typical usage:
    from pathlib import Path
    from vibecheck.traversal import find_files

    # Every JS/TS source file
    files = find_files(Path("./my_project"), ["**/*.js", "**/*.ts"])

    # Skip generated code as well
    files = find_files(
        Path("./my_project"),
        ["**/*.sql"],
        ignore_patterns=["**/generated/**"],
    )
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Set

import pathspec

logger = logging.getLogger(__name__)

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Dependency directories
    "node_modules",
    "bower_components",
    "vendor",

    # Build output
    "dist",
    "build",
    ".next",
    "coverage",

    # Version control
    ".git",
    ".svn",
    ".hg",

    # Python virtual environments and caches
    "venv",
    ".venv",
    "__pycache__",
    ".cache",
    ".pytest_cache",
}

GITIGNORE_FILENAME = ".gitignore"


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """
    Check if a directory should be skipped during traversal.

    Only the directory name is compared, not the full path.

    Examples:
        >>> should_ignore_directory(Path("node_modules"), {"node_modules"})
        True
        >>> should_ignore_directory(Path("src"), {"node_modules"})
        False
    """
    return dir_path.name in ignore_dirs


def compile_patterns(patterns: Iterable[str]) -> pathspec.PathSpec:
    """Compile gitignore-style glob patterns (``**/*.ts``, ``config.js``, ``dist/``)."""
    return pathspec.GitIgnoreSpec.from_lines([p for p in patterns if p and p.strip()])


def load_gitignore(root: Path) -> Optional[pathspec.PathSpec]:
    """Return the compiled root ``.gitignore``, or None if absent or unreadable."""
    gitignore = root / GITIGNORE_FILENAME
    if not gitignore.is_file():
        return None
    try:
        lines = gitignore.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        logger.warning("Could not read %s: %s", gitignore, e)
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


def relative_posix(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` with forward slashes."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def find_files(
    root: Path,
    patterns: Sequence[str],
    ignore_patterns: Sequence[str] = (),
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    use_gitignore: bool = True,
) -> list[Path]:
    """
    Recursively find files under ``root`` matching any of ``patterns``.

    Args:
        root: Scan root. A missing root or a non-directory yields ``[]``.
        patterns: Gitignore-style glob patterns a file must match (any of).
        ignore_patterns: Caller-supplied globs; matching files are excluded.
        ignore_dirs: Directory names to prune. Defaults to DEFAULT_IGNORE_DIRS.
        follow_symlinks: Follow symbolic links (off by default).
        use_gitignore: Honor the root .gitignore (on by default).

    Returns:
        Absolute paths, sorted for deterministic ordering.

    Notes:
        - Patterns are matched against the root-relative POSIX path, so a
          bare name like ``config.js`` matches at any depth.
        - Permission errors on subdirectories are logged and skipped.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = Path(root).resolve()
    if not root.is_dir():
        logger.debug("Scan root does not exist or is not a directory: %s", root)
        return []

    include = compile_patterns(patterns)
    exclude = compile_patterns(ignore_patterns)
    gitignore = load_gitignore(root) if use_gitignore else None

    logger.debug(
        "Traversal config: patterns=%s, ignore_patterns=%s, gitignore=%s",
        list(patterns),
        list(ignore_patterns),
        gitignore is not None,
    )

    collected: list[Path] = []

    def _excluded(rel: str) -> bool:
        if exclude.match_file(rel):
            return True
        return gitignore is not None and gitignore.match_file(rel)

    def _walk_directory(current_dir: Path) -> None:
        try:
            entries = sorted(current_dir.iterdir())
        except PermissionError as e:
            logger.warning("Cannot list %s (permission denied): %s", current_dir, e)
            return
        except OSError as e:
            logger.warning("Cannot list %s: %s", current_dir, e)
            return

        for entry in entries:
            if entry.is_symlink() and not follow_symlinks:
                logger.debug("Not following symlink %s", entry)
                continue

            rel = relative_posix(entry, root)
            if entry.is_dir():
                if should_ignore_directory(entry, ignore_dirs) or _excluded(rel + "/"):
                    logger.debug("Pruned directory %s", entry)
                    continue
                _walk_directory(entry)
            elif entry.is_file():
                if not include.match_file(rel):
                    continue
                if _excluded(rel):
                    logger.debug("Ignored by pattern: %s", rel)
                    continue
                collected.append(entry)

    _walk_directory(root)
    collected.sort()

    logger.debug("Traversal complete: %d file(s) matched in %s", len(collected), root)
    return collected
