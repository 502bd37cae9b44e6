"""Metadata-only overview prompt for large change sets.

The overview pass never sees diff content. It lists each file with its
kind, line counts and hints so the model can describe the overall intent
before the batches are drafted.
"""

from commitgen.models import ChangeSummary, FileSummary, character_count, estimate_tokens
from commitgen.prompt.diagnostics import DEFAULT_TOKEN_LIMIT, PromptDiagnostics
from commitgen.prompt.models import PromptMetadata, PromptPackage

OVERVIEW_LINE_BUDGET = 500

OVERVIEW_SYSTEM_PROMPT = """You are an AI assistant analyzing a large set of code changes to provide a high-level overview.
Your task is to understand the overall purpose of the changeset based on file metadata and change hints.

Focus on:
1. Identifying the primary intent of the changes (feature, bugfix, refactor, etc.)
2. Recognizing which files are most central to the change
3. Summarizing the scope and impact of the changes

You do NOT have access to the actual diff content - only file paths, change types, and semantic hints.
Base your analysis on the patterns you observe in the file names, directories, and change characteristics."""


def file_metadata_line(file: FileSummary) -> str:
    """One-line description of a file without its diff."""
    parts = [f"- {file.path}", f"[{file.kind.value}]", f"+{file.additions}/-{file.deletions}"]

    if file.hint_labels:
        parts.append(f"hints: {', '.join(file.hint_labels)}")

    flags = []
    if file.is_generated:
        flags.append("generated")
    if file.is_binary:
        flags.append("binary")
    if flags:
        parts.append(f"({', '.join(flags)})")

    return " ".join(parts)


def build_overview_prompt(summary: ChangeSummary, metadata: PromptMetadata) -> PromptPackage:
    """Build a prompt asking for a high-level overview of ``summary``.

    Args:
        summary: The full change set.
        metadata: Repository facts for the prompt header.

    Returns:
        The overview prompt package.
    """
    lines = [
        f"Repository: {metadata.repository_name}",
        f"Branch: {metadata.branch_name}",
        f"Total files changed: {summary.file_count}",
        f"Total additions: +{summary.total_additions}",
        f"Total deletions: -{summary.total_deletions}",
        "",
        "File changes (metadata only):",
    ]
    lines.extend(file_metadata_line(file) for file in summary.files)
    lines.extend([
        "",
        "Based on this metadata, provide a high-level overview of what this changeset accomplishes.",
        "Identify the most important files that are central to understanding the changes.",
    ])

    generated_count = sum(1 for file in summary.files if file.is_generated)
    diagnostics = PromptDiagnostics(
        estimated_line_count=len(lines),
        line_budget=OVERVIEW_LINE_BUDGET,
        estimated_token_count=estimate_tokens(
            character_count(lines) + character_count(OVERVIEW_SYSTEM_PROMPT.split("\n"))
        ),
        estimated_token_limit=DEFAULT_TOKEN_LIMIT,
        total_files=summary.file_count,
        displayed_files=summary.file_count,
        configured_file_limit=summary.file_count,
        generated_files_total=generated_count,
        generated_files_displayed=generated_count,
    )

    return PromptPackage(
        system_prompt=OVERVIEW_SYSTEM_PROMPT,
        user_prompt="\n".join(lines),
        diagnostics=diagnostics,
    )
