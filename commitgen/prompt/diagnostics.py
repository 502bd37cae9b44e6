"""Prompt budgeting diagnostics.

Contains:
- FileUsage: Per-file line and token usage inside a prompt
- KindCount, RemainderHint: Entries of the remainder summary
- PromptDiagnostics: Estimated/actual counts and compaction bookkeeping
- file_usage: Build a FileUsage for a rendered file
"""

from dataclasses import asdict, dataclass, replace
from typing import Optional

from commitgen.models import FileSummary, SnippetMode, character_count, estimate_tokens

DEFAULT_TOKEN_LIMIT = 4096


@dataclass(frozen=True)
class FileUsage:
    """How much of the prompt a single file consumes."""

    path: str
    kind: str
    location: str
    line_count: int
    token_estimate: int
    is_generated: bool = False
    is_binary: bool = False
    snippet_truncated: bool = False
    used_full_snippet: bool = False


@dataclass(frozen=True)
class KindCount:
    """Number of remainder files of one kind."""

    kind: str
    count: int


@dataclass(frozen=True)
class RemainderHint:
    """Sample path from the files left out of a prompt."""

    path: str
    kind: str
    location: str
    is_binary: bool = False
    is_generated: bool = False

    @property
    def descriptor(self) -> str:
        parts = [self.kind, self.location]
        if self.is_binary:
            parts.append("binary")
        if self.is_generated:
            parts.append("generated")
        return ", ".join(parts)


def file_usage(file: FileSummary) -> FileUsage:
    """Measure the rendered size of a file.

    Args:
        file: File in the snippet mode it will be rendered with.

    Returns:
        Usage record with line and token estimates.
    """
    lines = file.prompt_lines()
    return FileUsage(
        path=file.path,
        kind=file.kind.value,
        location=file.location.value,
        line_count=len(lines),
        token_estimate=estimate_tokens(character_count(lines)),
        is_generated=file.is_generated,
        is_binary=file.is_binary,
        snippet_truncated=file.snippet_truncated,
        used_full_snippet=file.snippet_mode is SnippetMode.FULL,
    )


@dataclass(frozen=True)
class PromptDiagnostics:
    """Budget bookkeeping for a rendered prompt.

    Attributes:
        estimated_line_count: Lines in the user prompt.
        line_budget: Line ceiling the prompt was compacted against.
        user_context_line_count: Lines appended as additional user context.
        estimated_token_count: Estimated tokens for system and user prompts.
        estimated_token_limit: Model window the estimate is compared with.
        actual_prompt_tokens: Prompt tokens reported by the provider.
        actual_output_tokens: Output tokens reported by the provider.
        actual_total_tokens: Total tokens reported by the provider.
        total_files: Files in the summary the prompt was built from.
        displayed_files: Files rendered in the prompt.
        configured_file_limit: File limit before compaction.
        snippet_line_limit: Snippet line limit after compaction.
        configured_snippet_line_limit: Snippet line limit before compaction.
        snippet_files_truncated: Displayed files whose snippet is truncated.
        compaction_applied: Whether files or snippet lines were cut.
        generated_files_total: Generated files in the summary.
        generated_files_displayed: Generated files rendered in the prompt.
        file_usages: Per-file usage of the displayed files.
        remainder_*: Summary of the files left out of the prompt.
    """

    estimated_line_count: int = 0
    line_budget: int = 0
    user_context_line_count: int = 0
    estimated_token_count: int = 0
    estimated_token_limit: int = DEFAULT_TOKEN_LIMIT
    actual_prompt_tokens: Optional[int] = None
    actual_output_tokens: Optional[int] = None
    actual_total_tokens: Optional[int] = None
    total_files: int = 0
    displayed_files: int = 0
    configured_file_limit: int = 0
    snippet_line_limit: int = 0
    configured_snippet_line_limit: int = 0
    snippet_files_truncated: int = 0
    compaction_applied: bool = False
    generated_files_total: int = 0
    generated_files_displayed: int = 0
    file_usages: tuple[FileUsage, ...] = ()
    remainder_count: int = 0
    remainder_additions: int = 0
    remainder_deletions: int = 0
    remainder_generated_count: int = 0
    remainder_kind_breakdown: tuple[KindCount, ...] = ()
    remainder_hint_limit: int = 0
    remainder_hint_files: tuple[RemainderHint, ...] = ()
    remainder_non_generated_count: int = 0

    @property
    def generated_files_omitted(self) -> int:
        return max(0, self.generated_files_total - self.generated_files_displayed)

    @property
    def exceeds_token_limit(self) -> bool:
        return self.estimated_token_count > self.estimated_token_limit

    def record_additional_user_context(self, line_count: int, char_count: int) -> "PromptDiagnostics":
        """Return a copy that accounts for appended user context."""
        return replace(
            self,
            user_context_line_count=self.user_context_line_count + line_count,
            estimated_line_count=self.estimated_line_count + line_count,
            estimated_token_count=self.estimated_token_count + estimate_tokens(char_count),
        )

    def record_actual_token_usage(
        self,
        prompt_tokens: Optional[int],
        output_tokens: Optional[int],
        total_tokens: Optional[int] = None,
    ) -> "PromptDiagnostics":
        """Return a copy carrying provider-reported token usage.

        When ``total_tokens`` is not given it is derived from whichever of
        the other two counts are known.
        """
        if total_tokens is None:
            known = [count for count in (prompt_tokens, output_tokens) if count is not None]
            total_tokens = sum(known) if known else None
        return replace(
            self,
            actual_prompt_tokens=prompt_tokens,
            actual_output_tokens=output_tokens,
            actual_total_tokens=total_tokens,
        )

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        data = asdict(self)
        data["generated_files_omitted"] = self.generated_files_omitted
        return data


@dataclass(frozen=True)
class RemainderContext:
    """Aggregate description of files left out of a prompt."""

    count: int = 0
    additions: int = 0
    deletions: int = 0
    generated_count: int = 0
    kind_breakdown: tuple[KindCount, ...] = ()
    hint_files: tuple[RemainderHint, ...] = ()
    non_generated_count: int = 0
    hint_limit: int = 0

    @property
    def is_empty(self) -> bool:
        return self.count == 0


def build_remainder(remainder_files: list[FileSummary], hint_limit: int) -> RemainderContext:
    """Summarize the files that did not fit in a prompt.

    Args:
        remainder_files: Files after the displayed ones, in summary order.
        hint_limit: Maximum sample paths to include.

    Returns:
        The remainder context, empty when there are no files.
    """
    if not remainder_files:
        return RemainderContext(hint_limit=hint_limit)

    counts: dict[str, int] = {}
    for file in remainder_files:
        counts[file.kind.value] = counts.get(file.kind.value, 0) + 1
    breakdown = sorted(
        (KindCount(kind=kind, count=count) for kind, count in counts.items()),
        key=lambda entry: (-entry.count, entry.kind),
    )

    non_generated = [file for file in remainder_files if not file.is_generated]
    hints = tuple(
        RemainderHint(
            path=file.path,
            kind=file.kind.value,
            location=file.location.value,
            is_binary=file.is_binary,
            is_generated=file.is_generated,
        )
        for file in non_generated[: max(0, hint_limit)]
    )

    return RemainderContext(
        count=len(remainder_files),
        additions=sum(file.additions for file in remainder_files),
        deletions=sum(file.deletions for file in remainder_files),
        generated_count=len(remainder_files) - len(non_generated),
        kind_breakdown=tuple(breakdown),
        hint_files=hints,
        non_generated_count=len(non_generated),
        hint_limit=hint_limit,
    )
