"""Prompt-level data models.

Contains:
- PromptStyle: Commit message style and its guidance text
- PromptMetadata: Repository facts rendered at the top of every prompt
- PromptPackage: System prompt, user prompt and diagnostics
- PromptBatch: A token-budgeted slice of the change set
- BatchPartialDraft: Draft produced for one batch
"""

from dataclasses import dataclass, replace
from enum import Enum

from commitgen.formatters import CommitDraft
from commitgen.models import ChangeSummary, FileSummary, character_count
from commitgen.prompt.diagnostics import FileUsage, PromptDiagnostics

USER_CONTEXT_HEADING = "Additional context from user:"


class PromptStyle(Enum):
    """Commit message style requested from the model."""

    SUMMARY = "summary"
    CONVENTIONAL = "conventional"
    DETAILED = "detailed"

    @property
    def guidance(self) -> str:
        return STYLE_GUIDANCE[self]


STYLE_GUIDANCE = {
    PromptStyle.SUMMARY: (
        "Style: keep the body to one or two short sentences, or omit it when the subject "
        "already says enough."
    ),
    PromptStyle.CONVENTIONAL: (
        "Style: prefix the subject with a Conventional Commits type and optional scope, "
        'e.g. "feat(parser): add rename detection". Valid types: feat, fix, docs, refactor, '
        "perf, test, build, ci, chore."
    ),
    PromptStyle.DETAILED: (
        "Style: use the body for a few short sentences covering rationale and impact; "
        "separate points with sentences rather than markdown bullets."
    ),
}


@dataclass(frozen=True)
class PromptMetadata:
    """Repository facts shared by every prompt of a run."""

    repository_name: str
    branch_name: str
    style: PromptStyle = PromptStyle.SUMMARY
    include_unstaged: bool = False

    @property
    def scope_description(self) -> str:
        if self.include_unstaged:
            return "staged + unstaged changes"
        return "staged changes only"

    def header_lines(self) -> list[str]:
        return [
            f"Repository: {self.repository_name}",
            f"Branch: {self.branch_name}",
            f"Scope: {self.scope_description}",
            f"Style: {self.style.value}",
        ]


@dataclass(frozen=True)
class PromptPackage:
    """A rendered prompt ready for a provider."""

    system_prompt: str
    user_prompt: str
    diagnostics: PromptDiagnostics

    def appending_user_context(self, text: str) -> "PromptPackage":
        """Return a copy with extra context appended to the user prompt.

        Args:
            text: Context to append. Blank text leaves the package unchanged.

        Returns:
            The updated package with diagnostics accounting for the new lines.
        """
        trimmed = text.strip()
        if not trimmed:
            return self

        added_lines = ["", USER_CONTEXT_HEADING] + trimmed.split("\n")
        diagnostics = self.diagnostics.record_additional_user_context(
            line_count=len(added_lines),
            char_count=character_count(added_lines),
        )
        return replace(
            self,
            user_prompt="\n".join([self.user_prompt] + added_lines),
            diagnostics=diagnostics,
        )


@dataclass(frozen=True)
class PromptBatch:
    """Files planned into one prompt, each resolved to compact or full mode."""

    files: tuple[FileSummary, ...]
    token_estimate: int
    line_estimate: int
    file_usages: tuple[FileUsage, ...]
    exceeds_budget: bool = False

    @property
    def summary(self) -> ChangeSummary:
        return ChangeSummary(files=self.files)

    @property
    def paths(self) -> list[str]:
        return [file.path for file in self.files]

    @property
    def full_snippet_count(self) -> int:
        return sum(1 for usage in self.file_usages if usage.used_full_snippet)


@dataclass(frozen=True)
class BatchPartialDraft:
    """Draft and diagnostics produced for one batch."""

    batch_index: int
    files: tuple[FileSummary, ...]
    draft: CommitDraft
    diagnostics: PromptDiagnostics
