"""Change summary construction.

Combines git status entries, parsed diffs and generated-file hints into a
ChangeSummary. This module does no I/O; see commitgen.generation for the
code that gathers its inputs from git.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from commitgen.diff.hints import detect_hints
from commitgen.diff.parser import SnippetOptions
from commitgen.log import get_logger
from commitgen.models import (
    ChangeKind,
    ChangeLocation,
    ChangeSummary,
    FileChange,
    FileSummary,
    ParsedDiff,
    TruncationReason,
)

logger = get_logger(__name__)

DEFAULT_MAX_LINES_PER_FILE = 80


@dataclass(frozen=True)
class SummaryOptions:
    """Options for building a change summary.

    Attributes:
        max_lines_per_file: Hard cap on snippet lines for any file.
        snippets: Line budgets used when parsing diffs.
    """

    max_lines_per_file: int = DEFAULT_MAX_LINES_PER_FILE
    snippets: SnippetOptions = field(default_factory=SnippetOptions)


def default_snippet(change: FileChange) -> tuple[str, ...]:
    """Placeholder snippet for a change with no captured diff lines."""
    if change.location is ChangeLocation.UNTRACKED:
        return ("(untracked file; diff available after staging)",)
    if change.kind is ChangeKind.ADDED:
        return ("(no diff lines captured; new file)",)
    if change.kind is ChangeKind.DELETED:
        return ("(no diff lines captured; file deleted)",)
    return ("(no diff preview available)",)


def _lookup(diffs: Mapping[str, ParsedDiff], change: FileChange) -> Optional[ParsedDiff]:
    parsed = diffs.get(change.path)
    if parsed is None and change.old_path:
        parsed = diffs.get(change.old_path)
    return parsed


def _is_generated(lookup: Mapping[str, bool], change: FileChange) -> bool:
    if change.path in lookup:
        return lookup[change.path]
    if change.old_path and change.old_path in lookup:
        return lookup[change.old_path]
    return False


def summarize_file(
    change: FileChange,
    parsed: Optional[ParsedDiff],
    is_generated: bool = False,
    max_lines_per_file: int = DEFAULT_MAX_LINES_PER_FILE,
) -> FileSummary:
    """Build the summary for a single changed file.

    Args:
        change: Status entry for the file.
        parsed: Parsed diff block, or None when no diff was captured.
        is_generated: Whether .gitattributes marks the file as generated.
        max_lines_per_file: Cap applied to both snippets.

    Returns:
        The file summary in compact mode.
    """
    reasons: set[TruncationReason] = set()

    if parsed is not None:
        compact = parsed.compact_snippet
        full = parsed.full_snippet
        if parsed.is_truncated:
            reasons.add(TruncationReason.PARSE_LIMIT)
        hints = detect_hints(parsed.lines, change.path)
    else:
        compact = full = default_snippet(change)
        hints = detect_hints((), change.path)

    if is_generated:
        compact = full = ()
        reasons.add(TruncationReason.GENERATED)

    if len(compact) > max_lines_per_file or len(full) > max_lines_per_file:
        reasons.add(TruncationReason.LINE_LIMIT)
    limit = max(0, max_lines_per_file)

    return FileSummary(
        path=change.path,
        old_path=change.old_path,
        kind=change.kind,
        location=change.location,
        additions=parsed.additions if parsed else 0,
        deletions=parsed.deletions if parsed else 0,
        compact_snippet=tuple(compact[:limit]),
        full_snippet=tuple(full[:limit]),
        truncation_reasons=frozenset(reasons),
        is_binary=parsed.is_binary if parsed else False,
        is_generated=is_generated,
        diff_line_count=parsed.line_count if parsed else len(compact),
        diff_has_hunks=parsed.has_hunks if parsed else False,
        change_hints=hints,
    )


def build_change_summary(
    changes: Sequence[FileChange],
    staged_diffs: Optional[Mapping[str, ParsedDiff]] = None,
    unstaged_diffs: Optional[Mapping[str, ParsedDiff]] = None,
    generated: Optional[Mapping[str, bool]] = None,
    options: Optional[SummaryOptions] = None,
) -> ChangeSummary:
    """Build a ChangeSummary from status entries and parsed diffs.

    Staged changes look up their diff in ``staged_diffs`` and unstaged
    changes in ``unstaged_diffs``, first by path and then by old path.
    Untracked files have no diff. A path listed more than once keeps its
    first entry.

    Args:
        changes: Status entries in display order.
        staged_diffs: Parsed ``git diff --cached`` output.
        unstaged_diffs: Parsed ``git diff`` output.
        generated: Path -> generated flag from .gitattributes.
        options: Summary options.

    Returns:
        The change summary, unique by path.
    """
    options = options or SummaryOptions()
    staged_diffs = staged_diffs or {}
    unstaged_diffs = unstaged_diffs or {}
    generated = generated or {}

    files: list[FileSummary] = []
    seen: set[str] = set()

    for change in changes:
        if change.path in seen:
            logger.debug("Skipping duplicate path", path=change.path, location=change.location.value)
            continue
        seen.add(change.path)

        if change.location is ChangeLocation.STAGED:
            parsed = _lookup(staged_diffs, change)
        elif change.location is ChangeLocation.UNSTAGED:
            parsed = _lookup(unstaged_diffs, change)
        else:
            parsed = None

        files.append(
            summarize_file(
                change,
                parsed,
                is_generated=_is_generated(generated, change),
                max_lines_per_file=options.max_lines_per_file,
            )
        )

    summary = ChangeSummary(files=tuple(files))
    logger.debug(
        "Built change summary",
        file_count=summary.file_count,
        additions=summary.total_additions,
        deletions=summary.total_deletions,
    )
    return summary
