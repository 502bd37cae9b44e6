"""Prompt assembly with iterative compaction.

Contains:
- PromptBuilderConfig: File and snippet limits for a single prompt
- build_prompt: Render a change summary into a PromptPackage
- build_system_prompt: Instructions for drafting a commit message

When the rendered prompt exceeds the line budget, the snippet line limit
shrinks step by step down to its floor, then the file limit shrinks one
file at a time down to its floor. Files that no longer fit are described
in a remainder block.
"""

from dataclasses import dataclass
from typing import Optional

from commitgen.log import get_logger
from commitgen.models import ChangeSummary, character_count, estimate_tokens
from commitgen.prompt.diagnostics import (
    DEFAULT_TOKEN_LIMIT,
    PromptDiagnostics,
    RemainderContext,
    build_remainder,
    file_usage,
)
from commitgen.prompt.models import PromptMetadata, PromptPackage, PromptStyle

logger = get_logger(__name__)

COMPACTION_NOTE = (
    "Context trimmed to stay within the model window; prioritize the most impactful changes."
)

SYSTEM_PROMPT = """Write a git commit message for the code changes shown.

Subject: max 50 chars, imperative mood ("Add X" not "Added X"), describe WHAT changed.
Body: optional, explain WHY if helpful.

Read the diff carefully. Lines with + are additions, - are deletions."""

# Maximum kinds listed in the remainder breakdown
REMAINDER_KIND_LIMIT = 4


@dataclass(frozen=True)
class PromptBuilderConfig:
    """Limits for a single prompt.

    Attributes:
        max_files: Files rendered before compaction.
        max_snippet_lines: Snippet lines per file before compaction.
        line_budget: Ceiling for the estimated user prompt line count.
        min_files: Floor for the file limit.
        min_snippet_lines: Floor for the snippet line limit.
        snippet_reduction_step: Lines removed from the snippet limit per step.
        hint_threshold: Sample paths listed for the remainder.
        medium_file_threshold: File count that caps snippets at medium_snippet_limit.
        high_file_threshold: File count that caps snippets at low_snippet_limit.
        medium_snippet_limit: Snippet cap for medium change sets.
        low_snippet_limit: Snippet cap for large change sets.
        token_limit: Model window reported in diagnostics.
    """

    max_files: int = 12
    max_snippet_lines: int = 50
    line_budget: int = 600
    min_files: int = 3
    min_snippet_lines: int = 6
    snippet_reduction_step: int = 4
    hint_threshold: int = 10
    medium_file_threshold: int = 20
    high_file_threshold: int = 40
    medium_snippet_limit: int = 15
    low_snippet_limit: int = 8
    token_limit: int = DEFAULT_TOKEN_LIMIT


def build_system_prompt(style: PromptStyle) -> str:
    """Instructions for drafting a commit message in ``style``."""
    return f"{SYSTEM_PROMPT}\n\n{style.guidance}"


def adjusted_snippet_limit(total_files: int, config: PromptBuilderConfig) -> int:
    """Starting snippet limit, tightened for large change sets."""
    limit = config.max_snippet_lines
    if total_files >= config.high_file_threshold:
        limit = min(limit, config.low_snippet_limit)
    elif total_files >= config.medium_file_threshold:
        limit = min(limit, config.medium_snippet_limit)
    return max(limit, config.min_snippet_lines)


def trim_summary(summary: ChangeSummary, file_limit: int, snippet_limit: int) -> ChangeSummary:
    """Keep the first ``file_limit`` files with snippets cut to ``snippet_limit`` lines."""
    kept = summary.files[: max(0, file_limit)]
    return ChangeSummary(files=tuple(file.with_snippet_limit(snippet_limit) for file in kept))


def _remainder_lines(remainder: RemainderContext, display: ChangeSummary, full: ChangeSummary) -> list[str]:
    if remainder.is_empty:
        return []

    lines = [
        f"Showing first {display.file_count} files (of {full.file_count}); "
        f"remaining {remainder.count} files contribute "
        f"+{remainder.additions} / -{remainder.deletions}."
    ]
    for entry in remainder.kind_breakdown[:REMAINDER_KIND_LIMIT]:
        lines.append(f"  more: {entry.count} {entry.kind} file(s)")

    if remainder.generated_count > 0:
        lines.append(
            f"  note: {remainder.generated_count} generated file(s) omitted per .gitattributes"
        )

    if remainder.hint_files:
        if remainder.non_generated_count > len(remainder.hint_files):
            lines.append(f"  showing {len(remainder.hint_files)} representative paths:")
        for hint in remainder.hint_files:
            lines.append(f"    • {hint.path} [{hint.descriptor}]")

    return lines


def render_user_prompt(
    display: ChangeSummary,
    full: ChangeSummary,
    metadata: PromptMetadata,
    is_compacted: bool,
    remainder: RemainderContext,
) -> list[str]:
    """Render the user prompt as lines."""
    lines = metadata.header_lines()
    lines.append(
        f"Totals: {full.file_count} files; +{full.total_additions} / -{full.total_deletions}"
    )
    if is_compacted:
        lines.append(COMPACTION_NOTE)
    lines.extend(_remainder_lines(remainder, display, full))
    lines.extend(display.prompt_lines())
    return lines


def build_prompt(
    summary: ChangeSummary,
    metadata: PromptMetadata,
    config: Optional[PromptBuilderConfig] = None,
) -> PromptPackage:
    """Render a change summary into a prompt that fits the line budget.

    Args:
        summary: Files to describe, in priority order.
        metadata: Repository facts for the prompt header.
        config: Prompt limits. Defaults to PromptBuilderConfig().

    Returns:
        The prompt package with diagnostics describing any compaction.
    """
    config = config or PromptBuilderConfig()
    system_prompt = build_system_prompt(metadata.style)
    step = max(1, config.snippet_reduction_step)

    file_limit = min(config.max_files, summary.file_count)
    snippet_limit = adjusted_snippet_limit(summary.file_count, config)

    def render(file_limit: int, snippet_limit: int):
        display = trim_summary(summary, file_limit, snippet_limit)
        remainder = build_remainder(
            list(summary.files[display.file_count:]), config.hint_threshold
        )
        compacted = (
            display.file_count < summary.file_count or snippet_limit < config.max_snippet_lines
        )
        lines = render_user_prompt(display, summary, metadata, compacted, remainder)
        return display, remainder, compacted, lines

    display, remainder, compacted, lines = render(file_limit, snippet_limit)

    while len(lines) > config.line_budget:
        if snippet_limit > config.min_snippet_lines:
            snippet_limit = max(config.min_snippet_lines, snippet_limit - step)
        elif file_limit > config.min_files:
            file_limit = max(config.min_files, file_limit - 1)
        else:
            break
        display, remainder, compacted, lines = render(file_limit, snippet_limit)

    user_prompt = "\n".join(lines)
    usages = tuple(file_usage(file) for file in display.files)
    generated_total = sum(1 for file in summary.files if file.is_generated)

    diagnostics = PromptDiagnostics(
        estimated_line_count=len(lines),
        line_budget=config.line_budget,
        estimated_token_count=estimate_tokens(
            character_count(lines) + character_count(system_prompt.split("\n"))
        ),
        estimated_token_limit=config.token_limit,
        total_files=summary.file_count,
        displayed_files=display.file_count,
        configured_file_limit=config.max_files,
        snippet_line_limit=snippet_limit,
        configured_snippet_line_limit=config.max_snippet_lines,
        snippet_files_truncated=sum(1 for file in display.files if file.snippet_truncated),
        compaction_applied=compacted,
        generated_files_total=generated_total,
        generated_files_displayed=sum(1 for file in display.files if file.is_generated),
        file_usages=usages,
        remainder_count=remainder.count,
        remainder_additions=remainder.additions,
        remainder_deletions=remainder.deletions,
        remainder_generated_count=remainder.generated_count,
        remainder_kind_breakdown=remainder.kind_breakdown,
        remainder_hint_limit=config.hint_threshold,
        remainder_hint_files=remainder.hint_files,
        remainder_non_generated_count=remainder.non_generated_count,
    )

    if compacted:
        logger.debug(
            "Compacted prompt",
            displayed_files=display.file_count,
            total_files=summary.file_count,
            snippet_line_limit=snippet_limit,
            estimated_lines=len(lines),
            line_budget=config.line_budget,
        )

    return PromptPackage(system_prompt=system_prompt, user_prompt=user_prompt, diagnostics=diagnostics)
