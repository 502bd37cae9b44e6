"""Change-prioritized snippet extraction for diff blocks.

Contains:
- extract_snippet: Select a bounded excerpt favoring hunk headers and changed lines
- is_change_line: Whether a diff line is an added or removed line
- cap_line: Truncate a line to MAX_LINE_LENGTH characters
"""

from typing import Sequence

# Longest line kept in a snippet
MAX_LINE_LENGTH = 160

# Stands in for a run of elided lines
ELLIPSIS = "  ..."


def cap_line(line: str, limit: int = MAX_LINE_LENGTH) -> str:
    """Truncate a line to at most ``limit`` characters."""
    return line[:limit]


def is_change_line(line: str) -> bool:
    """Check whether a block line adds or removes content.

    Block lines never hold the ---/+++ file markers, which the parser
    consumes, so "--- note" or "+++i;" inside a hunk is a real change.
    """
    return line.startswith(("+", "-"))


def _important_indices(lines: Sequence[str], context_lines: int) -> set[int]:
    """Indices of hunk headers, changed lines and their surrounding context."""
    important: set[int] = set()
    radius = max(0, context_lines)
    last_index = len(lines) - 1

    for index, line in enumerate(lines):
        if line.startswith("@@"):
            important.add(index)
        elif is_change_line(line):
            start = max(0, index - radius)
            end = min(last_index, index + radius)
            important.update(range(start, end + 1))

    return important


def extract_snippet(lines: Sequence[str], max_lines: int, context_lines: int = 1) -> list[str]:
    """Select a bounded excerpt of a diff block.

    When the block fits in ``max_lines`` it is returned verbatim (with long
    lines capped). Otherwise hunk headers and changed lines are kept along
    with ``context_lines`` lines around each change, and each run of skipped
    lines collapses into a single ELLIPSIS marker. If the budget runs out
    before the walk finishes, the last slot becomes an ELLIPSIS.

    Args:
        lines: Raw diff lines for one file.
        max_lines: Maximum number of lines to return.
        context_lines: Unchanged lines kept before and after each change.

    Returns:
        The excerpt, never longer than ``max_lines``.
    """
    if max_lines <= 0:
        return []

    if len(lines) <= max_lines:
        return [cap_line(line) for line in lines]

    important = _important_indices(lines, context_lines)
    if not important:
        # Nothing changed (e.g. a pure rename), show the head of the block
        return [cap_line(line) for line in lines[:max_lines]]

    output: list[str] = []
    gap = False
    cut_off = False

    for index, line in enumerate(lines):
        if index not in important:
            gap = True
            continue

        needed = 2 if gap else 1
        if len(output) + needed > max_lines:
            cut_off = True
            break

        if gap:
            output.append(ELLIPSIS)
            gap = False
        output.append(cap_line(line))

    if cut_off:
        if len(output) < max_lines:
            output.append(ELLIPSIS)
        elif output and output[-1] != ELLIPSIS:
            output[-1] = ELLIPSIS
    elif gap and len(output) < max_lines:
        output.append(ELLIPSIS)

    return output
