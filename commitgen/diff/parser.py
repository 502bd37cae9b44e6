"""Unified diff parsing.

Contains:
- SnippetOptions: Line budgets for compact and full snippets
- parse_diff: Parse multi-file unified diff text into ParsedDiff records

Parsing is total: malformed blocks produce zero-valued records or are
dropped when no target path can be resolved.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from commitgen.diff.snippets import extract_snippet
from commitgen.log import get_logger
from commitgen.models import ParsedDiff

logger = get_logger(__name__)

DEV_NULL = "/dev/null"

_HEADER_PATTERN = re.compile(r'^diff --git "?a/(.+?)"? "?b/(.+?)"?$')
_BINARY_PATTERN = re.compile(r"^binary files .*differ$", re.IGNORECASE)


@dataclass(frozen=True)
class SnippetOptions:
    """Line budgets for the two snippet detail levels.

    Attributes:
        compact_max_lines: Maximum lines in the compact snippet.
        compact_context_lines: Context radius around changes in the compact snippet.
        full_max_lines: Maximum lines in the full snippet.
        full_context_lines: Context radius around changes in the full snippet.
    """

    compact_max_lines: int = 20
    compact_context_lines: int = 1
    full_max_lines: int = 80
    full_context_lines: int = 3


def _strip_diff_prefix(path: str) -> str:
    """Remove the a/ or b/ prefix git puts on diff paths."""
    if path == DEV_NULL:
        return path
    if path.startswith("a/") or path.startswith("b/"):
        return path[2:]
    return path


def _clean_marker_path(raw: str) -> str:
    """Normalize the path from a ---/+++ marker line."""
    # git appends a tab before timestamps for some diff producers
    path = raw.split("\t", 1)[0].strip()
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    return path


@dataclass
class _DiffBlock:
    """Accumulator for one file's block while scanning."""

    old_marker: Optional[str] = None
    new_marker: Optional[str] = None
    header_old: Optional[str] = None
    header_new: Optional[str] = None
    rename_from: Optional[str] = None
    rename_to: Optional[str] = None
    in_hunks: bool = False
    lines: list[str] = field(default_factory=list)

    @classmethod
    def from_header(cls, header: str) -> "_DiffBlock":
        match = _HEADER_PATTERN.match(header)
        if not match:
            return cls()
        return cls(header_old=match.group(1), header_new=match.group(2))

    def add_line(self, line: str) -> None:
        if line.startswith("@@"):
            self.in_hunks = True
        elif not self.in_hunks:
            if line.startswith("rename from "):
                self.rename_from = line[len("rename from "):].strip()
            elif line.startswith("rename to "):
                self.rename_to = line[len("rename to "):].strip()
        self.lines.append(line)

    def resolve_paths(self) -> tuple[Optional[str], Optional[str]]:
        """Return (target path, old path), either of which may be missing."""
        old_path = self.old_marker
        new_path = self.new_marker

        if old_path is None and new_path is None:
            # Binary files and pure renames carry no ---/+++ markers
            old_path = self.rename_from or self.header_old
            new_path = self.rename_to or self.header_new

        target = new_path if new_path and new_path != DEV_NULL else old_path
        if target is None or target == DEV_NULL:
            return None, None

        cleaned_old = _strip_diff_prefix(old_path) if old_path else None
        if cleaned_old == DEV_NULL:
            cleaned_old = None
        return _strip_diff_prefix(target), cleaned_old

    def finalize(self, options: SnippetOptions) -> Optional[ParsedDiff]:
        path, old_path = self.resolve_paths()
        if path is None:
            if self.lines:
                logger.debug("Dropping diff block without a target path", line_count=len(self.lines))
            return None

        additions = sum(1 for line in self.lines if line.startswith("+"))
        deletions = sum(1 for line in self.lines if line.startswith("-"))
        has_hunks = any(line.startswith("@@") for line in self.lines)
        is_binary = any(_BINARY_PATTERN.match(line) for line in self.lines)
        line_count = len(self.lines)

        compact = extract_snippet(
            self.lines, options.compact_max_lines, options.compact_context_lines
        )
        full = extract_snippet(
            self.lines, options.full_max_lines, options.full_context_lines
        )

        return ParsedDiff(
            path=path,
            old_path=old_path if old_path != path else None,
            additions=additions,
            deletions=deletions,
            line_count=line_count,
            has_hunks=has_hunks,
            is_binary=is_binary,
            lines=tuple(self.lines),
            compact_snippet=tuple(compact),
            full_snippet=tuple(full),
            is_truncated=line_count > options.full_max_lines,
        )


def _store(results: dict[str, ParsedDiff], parsed: Optional[ParsedDiff]) -> None:
    if parsed is None:
        return
    results[parsed.path] = parsed
    if parsed.old_path:
        results[parsed.old_path] = parsed


def parse_diff(diff_text: str, options: Optional[SnippetOptions] = None) -> dict[str, ParsedDiff]:
    """Parse unified diff text covering one or more files.

    A ``diff --git`` header starts a new block. ``--- `` and ``+++ `` lines
    before the first hunk give the old and new paths (``/dev/null`` meaning
    the side does not exist) and are not kept as block lines. Every other
    line is accumulated into the current block.

    Args:
        diff_text: Raw output of ``git diff``.
        options: Snippet line budgets. Defaults to SnippetOptions().

    Returns:
        Mapping of path -> ParsedDiff. Renamed files are indexed under both
        their new and old paths.
    """
    if not diff_text:
        return {}

    options = options or SnippetOptions()
    results: dict[str, ParsedDiff] = {}

    lines = diff_text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    block = _DiffBlock()
    for line in lines:
        if line.startswith("diff --git "):
            _store(results, block.finalize(options))
            block = _DiffBlock.from_header(line)
            continue

        if not block.in_hunks and line.startswith("--- "):
            block.old_marker = _clean_marker_path(line[4:])
            continue

        if not block.in_hunks and line.startswith("+++ "):
            block.new_marker = _clean_marker_path(line[4:])
            continue

        block.add_line(line)

    _store(results, block.finalize(options))

    logger.debug("Parsed diff", file_count=len({parsed.path for parsed in results.values()}))
    return results
