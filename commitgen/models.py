"""Data models for the diff-to-prompt pipeline.

Contains:
- ChangeKind, ChangeLocation: Classification of a path reported by git status
- FileChange: A single path reported by git status
- ChangeHint: Semantic tags derived from diff content and path
- ParsedDiff: Statistics and snippets parsed from one file's diff block
- SnippetMode, TruncationReason: Snippet detail level and truncation causes
- FileSummary, ChangeSummary: Prompt-ready per-file and change-set summaries
- ScoredFile, FileGroup: Derived values used for ordering and grouping
- estimate_tokens, character_count: Token estimation helpers

All models are frozen. Transforms return new values.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional


# ============================================================
# Change classification
# ============================================================

class ChangeKind(Enum):
    """Kind of change git reports for a path."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGE = "type change"
    UNMERGED = "unmerged"
    UNTRACKED = "untracked"
    UNKNOWN = "unknown"

    @classmethod
    def from_status_code(cls, code: str) -> "ChangeKind":
        """Map a porcelain status letter to a ChangeKind.

        Args:
            code: Single status character (A, M, D, R, C, T, U or ?).

        Returns:
            The matching kind, or UNKNOWN for anything else.
        """
        return _STATUS_CODE_KINDS.get(code, cls.UNKNOWN)

    @property
    def status_code(self) -> str:
        """Single-letter status code for this kind (X when unknown)."""
        for code, kind in _STATUS_CODE_KINDS.items():
            if kind is self:
                return code
        return "X"


_STATUS_CODE_KINDS = {
    "A": ChangeKind.ADDED,
    "M": ChangeKind.MODIFIED,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
    "C": ChangeKind.COPIED,
    "T": ChangeKind.TYPE_CHANGE,
    "U": ChangeKind.UNMERGED,
    "?": ChangeKind.UNTRACKED,
}


class ChangeLocation(Enum):
    """Where a change lives relative to the index."""

    STAGED = "staged"
    UNSTAGED = "unstaged"
    UNTRACKED = "untracked"


@dataclass(frozen=True)
class FileChange:
    """A path reported by git status."""

    path: str
    kind: ChangeKind
    location: ChangeLocation
    old_path: Optional[str] = None


class ChangeHint(Enum):
    """Semantic tag derived from a file's diff content or path."""

    IMPORTS = "imports"
    TYPE_DEFINITION = "type definition"
    PROTOCOL_CONFORMANCE = "protocol conformance"
    TEST_CHANGES = "test changes"
    CONFIGURATION = "configuration"


# ============================================================
# Token estimation
# ============================================================

def estimate_tokens(character_count: int) -> int:
    """Estimate tokens for a character count using a 4 chars/token ratio.

    Args:
        character_count: Number of characters.

    Returns:
        0 for non-positive counts, otherwise ceil(count / 4) and at least 1.
    """
    if character_count <= 0:
        return 0
    return max(1, math.ceil(character_count / 4))


def character_count(lines: Iterable[str]) -> int:
    """Count characters of rendered lines, including one newline per line."""
    return sum(len(line) + 1 for line in lines)


# ============================================================
# Parsed diff
# ============================================================

@dataclass(frozen=True)
class ParsedDiff:
    """Statistics and snippets for one file's block of a unified diff.

    Attributes:
        path: Target path (new path unless the file was deleted).
        old_path: Previous path, None when the old side is /dev/null.
        additions: Number of added lines.
        deletions: Number of removed lines.
        line_count: Number of raw lines in the block (markers excluded).
        has_hunks: Whether the block contains at least one @@ header.
        is_binary: Whether git reported the file as binary.
        lines: Raw block lines.
        compact_snippet: Change-focused excerpt at compact detail.
        full_snippet: Excerpt at full detail.
        is_truncated: Whether the full snippet could not hold every raw line.
    """

    path: str
    old_path: Optional[str] = None
    additions: int = 0
    deletions: int = 0
    line_count: int = 0
    has_hunks: bool = False
    is_binary: bool = False
    lines: tuple[str, ...] = ()
    compact_snippet: tuple[str, ...] = ()
    full_snippet: tuple[str, ...] = ()
    is_truncated: bool = False


# ============================================================
# File and change summaries
# ============================================================

class SnippetMode(Enum):
    """Detail level of the diff excerpt shown for a file."""

    COMPACT = "compact"
    FULL = "full"


class TruncationReason(Enum):
    """Why a file's snippet does not show the whole diff."""

    PARSE_LIMIT = "parse limit"
    LINE_LIMIT = "line limit"
    GENERATED = "generated"
    PROMPT_LIMIT = "prompt limit"


# A diff this large is described by a note instead of a snippet
LARGE_CHANGE_THRESHOLD = 400
LARGE_DIFF_LINE_THRESHOLD = 200

DIFF_OMITTED_NOTE = "diff omitted (summarize intent in subject/body)."


@dataclass(frozen=True)
class FileSummary:
    """Prompt-ready summary of a single changed file.

    The visible ``snippet`` is always ``compact_snippet`` or ``full_snippet``
    depending on ``snippet_mode``.
    """

    path: str
    kind: ChangeKind
    location: ChangeLocation
    old_path: Optional[str] = None
    additions: int = 0
    deletions: int = 0
    compact_snippet: tuple[str, ...] = ()
    full_snippet: tuple[str, ...] = ()
    snippet_mode: SnippetMode = SnippetMode.COMPACT
    truncation_reasons: frozenset[TruncationReason] = frozenset()
    is_binary: bool = False
    is_generated: bool = False
    diff_line_count: int = 0
    diff_has_hunks: bool = False
    change_hints: frozenset[ChangeHint] = frozenset()

    @property
    def snippet(self) -> tuple[str, ...]:
        """The snippet for the current mode."""
        if self.snippet_mode is SnippetMode.FULL:
            return self.full_snippet
        return self.compact_snippet

    @property
    def snippet_truncated(self) -> bool:
        """True when any truncation cause applies."""
        return bool(self.truncation_reasons)

    @property
    def identifier(self) -> str:
        if self.old_path and self.old_path != self.path:
            return f"{self.old_path} -> {self.path}"
        return self.path

    @property
    def hint_labels(self) -> list[str]:
        """Hint values in a stable order."""
        return [hint.value for hint in ChangeHint if hint in self.change_hints]

    @property
    def is_large_diff(self) -> bool:
        return (
            self.additions + self.deletions >= LARGE_CHANGE_THRESHOLD
            or self.diff_line_count >= LARGE_DIFF_LINE_THRESHOLD
        )

    @property
    def should_render_snippet(self) -> bool:
        return (
            not self.is_binary
            and not self.is_generated
            and not self.is_large_diff
            and len(self.snippet) > 0
        )

    def with_snippet_mode(self, mode: SnippetMode) -> "FileSummary":
        """Return a copy showing the snippet for ``mode``."""
        if mode is self.snippet_mode:
            return self
        return replace(self, snippet_mode=mode)

    def with_snippet_limit(self, limit: int) -> "FileSummary":
        """Return a copy whose current snippet holds at most ``limit`` lines.

        Only the buffer for the current mode is cut. A limit of zero or less
        empties it.
        """
        current = self.snippet
        trimmed = current[:limit] if limit > 0 else ()
        if len(trimmed) == len(current):
            return self

        buffer_name = "full_snippet" if self.snippet_mode is SnippetMode.FULL else "compact_snippet"
        return replace(
            self,
            **{buffer_name: trimmed},
            truncation_reasons=self.truncation_reasons | {TruncationReason.PROMPT_LIMIT},
        )

    def detail_notes(self) -> list[str]:
        """Notes describing the change beyond the snippet itself."""
        notes: list[str] = []

        if self.kind is ChangeKind.ADDED:
            notes.append("new file")

        if self.kind is ChangeKind.DELETED:
            notes.append("entire file removed")

        if self.kind is ChangeKind.RENAMED and self.old_path:
            if self.diff_has_hunks:
                notes.append(f"renamed from {self.old_path}")
            else:
                notes.append(f"pure rename from {self.old_path}")

        if self.kind is ChangeKind.COPIED and self.old_path:
            notes.append(f"copied from {self.old_path}")

        if self.is_binary:
            notes.append("binary file; diff omitted")

        if self.is_large_diff:
            notes.append(f"large diff (+{self.additions}/-{self.deletions})")
        elif self.snippet_truncated:
            if not self.snippet:
                notes.append("diff omitted to reduce prompt size")
            else:
                notes.append(f"diff truncated to {len(self.snippet)} lines")

        if not self.diff_has_hunks and self.kind is ChangeKind.MODIFIED:
            notes.append("metadata-only change")

        if self.is_generated:
            notes.append("marked as generated file (diff skipped)")

        return notes

    def prompt_lines(self) -> list[str]:
        """Render this file as prompt lines."""
        lines = [
            f"- {self.identifier} [{self.kind.value}; {self.location.value}; "
            f"+{self.additions}/-{self.deletions}]"
        ]
        notes = self.detail_notes()
        lines.extend(f"  note: {note}" for note in notes)

        if self.should_render_snippet:
            lines.extend(f"  {line}" for line in self.snippet)
        elif not notes:
            lines.append(f"  note: {DIFF_OMITTED_NOTE}")

        return lines

    def estimated_line_count(self) -> int:
        return len(self.prompt_lines())


@dataclass(frozen=True)
class ChangeSummary:
    """Ordered change set, unique by path."""

    files: tuple[FileSummary, ...] = ()

    def __post_init__(self):
        if not isinstance(self.files, tuple):
            object.__setattr__(self, "files", tuple(self.files))

    @property
    def total_additions(self) -> int:
        return sum(file.additions for file in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(file.deletions for file in self.files)

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [file.path for file in self.files]

    def prompt_lines(self) -> list[str]:
        """Render the change set as prompt lines."""
        lines = ["Changes:"]
        if not self.files:
            lines.append("- No file details captured.")
            return lines

        for file in self.files:
            lines.extend(file.prompt_lines())
            lines.append("")
        return lines


# ============================================================
# Derived values
# ============================================================

@dataclass(frozen=True)
class ScoredFile:
    """A file paired with its importance score."""

    file: FileSummary
    score: int


class GroupReason(Enum):
    """Why files were placed in the same group."""

    PAIR = "pair"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class FileGroup:
    """Ordered group of related files."""

    files: tuple[FileSummary, ...]
    reason: GroupReason = GroupReason.DIRECTORY
    label: str = field(default="")

    def __post_init__(self):
        if not isinstance(self.files, tuple):
            object.__setattr__(self, "files", tuple(self.files))

    def __len__(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [file.path for file in self.files]
