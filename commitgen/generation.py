"""Commit draft generation.

Contains:
- collect_change_summary: Gather status, diffs and attributes from git
- plan_summary: Group and batch a change summary
- generate_commit_draft: Single or batched drafting with the LLM provider
- GenerationReport, BatchInfo, GenerationOutcome: Results for rendering
"""

from dataclasses import dataclass, field
from typing import Optional

from commitgen.config import PromptConfig
from commitgen.diff import SnippetOptions, parse_diff
from commitgen.formatters import ChangesetOverview, CommitDraft
from commitgen.git import (
    DiffOptions,
    NoChangesError,
    get_diff,
    get_generated_file_hints,
    get_status,
)
from commitgen.grouping import group_files
from commitgen.llm.base import BaseLLMProvider
from commitgen.log import get_logger
from commitgen.models import ChangeLocation, ChangeSummary
from commitgen.prompt import (
    BatchPartialDraft,
    PromptBatch,
    PromptBuilderConfig,
    PromptDiagnostics,
    PromptMetadata,
    PromptPackage,
    build_combination_prompt,
    build_overview_prompt,
    build_prompt,
    plan_batches,
    should_use_batching,
)
from commitgen.summary import SummaryOptions, build_change_summary

logger = get_logger(__name__)

MODE_SINGLE = "single"
MODE_BATCHED = "batched"

# Paths listed in the per-batch context block
BATCH_CONTEXT_PATH_LIMIT = 10


@dataclass
class BatchInfo:
    """Per-batch entry of a batched generation report."""

    index: int
    file_count: int
    file_paths: list[str]
    exceeds_budget: bool
    prompt_diagnostics: PromptDiagnostics
    draft: CommitDraft

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "file_count": self.file_count,
            "file_paths": list(self.file_paths),
            "exceeds_budget": self.exceeds_budget,
            "prompt_diagnostics": self.prompt_diagnostics.to_dict(),
            "draft": self.draft.model_dump(),
        }


@dataclass
class GenerationReport:
    """How a draft was produced."""

    mode: str
    final_prompt_diagnostics: PromptDiagnostics
    batches: list[BatchInfo] = field(default_factory=list)
    overview: Optional[ChangesetOverview] = None

    def to_dict(self) -> dict:
        """JSON-serializable representation."""
        return {
            "mode": self.mode,
            "final_prompt_diagnostics": self.final_prompt_diagnostics.to_dict(),
            "batches": [info.to_dict() for info in self.batches],
            "overview": self.overview.model_dump() if self.overview else None,
        }


@dataclass
class GenerationOutcome:
    """Final draft with the prompt that produced it."""

    draft: CommitDraft
    prompt_package: PromptPackage
    diagnostics: PromptDiagnostics
    report: GenerationReport


# ============================================================
# Collecting the change summary
# ============================================================

def summary_options(prompt_config: PromptConfig) -> SummaryOptions:
    """Summary options derived from prompt settings."""
    defaults = SnippetOptions()
    return SummaryOptions(
        max_lines_per_file=prompt_config.max_lines_per_file,
        snippets=SnippetOptions(
            compact_max_lines=prompt_config.compact_snippet_lines,
            compact_context_lines=defaults.compact_context_lines,
            full_max_lines=prompt_config.max_lines_per_file,
            full_context_lines=defaults.full_context_lines,
        ),
    )


def diff_options(prompt_config: PromptConfig) -> DiffOptions:
    return DiffOptions(
        function_context=prompt_config.function_context,
        context_lines=prompt_config.context_lines,
    )


def collect_change_summary(
    include_staged_only: bool,
    prompt_config: Optional[PromptConfig] = None,
) -> ChangeSummary:
    """Read the repository state and build a change summary.

    Args:
        include_staged_only: Only describe staged changes.
        prompt_config: Snippet and diff settings.

    Returns:
        The change summary for the requested scope.

    Raises:
        NoChangesError: If the scope has no changes.
        GitError: If a git command fails.
    """
    prompt_config = prompt_config or PromptConfig()
    changes = get_status().changes(include_staged_only)
    if not changes:
        if include_staged_only:
            raise NoChangesError("No staged changes found. Stage files with 'git add' first.")
        raise NoChangesError("No changes found in the working tree.")

    options = summary_options(prompt_config)
    git_diff_options = diff_options(prompt_config)

    staged_diffs = {}
    if any(change.location is ChangeLocation.STAGED for change in changes):
        staged_diffs = parse_diff(get_diff(staged=True, options=git_diff_options), options.snippets)

    unstaged_diffs = {}
    if any(change.location is ChangeLocation.UNSTAGED for change in changes):
        unstaged_diffs = parse_diff(get_diff(staged=False, options=git_diff_options), options.snippets)

    paths: list[str] = []
    for change in changes:
        paths.append(change.path)
        if change.old_path:
            paths.append(change.old_path)
    generated = get_generated_file_hints(list(dict.fromkeys(paths)))

    summary = build_change_summary(changes, staged_diffs, unstaged_diffs, generated, options)
    logger.info(
        "Collected changes",
        file_count=summary.file_count,
        additions=summary.total_additions,
        deletions=summary.total_deletions,
    )
    return summary


# ============================================================
# Planning and drafting
# ============================================================

def builder_config(prompt_config: PromptConfig) -> PromptBuilderConfig:
    return PromptBuilderConfig(
        max_files=prompt_config.max_files,
        max_snippet_lines=prompt_config.max_snippet_lines,
        line_budget=prompt_config.line_budget,
        token_limit=prompt_config.token_budget,
    )


def plan_summary(summary: ChangeSummary, prompt_config: PromptConfig) -> list[PromptBatch]:
    """Group (when enabled) and batch a change summary."""
    groups = None
    if prompt_config.semantic_grouping:
        groups = group_files(summary.files, max_group_size=prompt_config.max_group_size)

    return plan_batches(
        summary,
        token_budget=prompt_config.token_budget,
        headroom_ratio=prompt_config.headroom_ratio,
        minimum_batch_size=prompt_config.minimum_batch_size,
        groups=groups,
    )


def batch_context(batch_number: int, batch_count: int, batch: PromptBatch) -> str:
    """Context appended to a batch prompt to keep the model on its files."""
    lines = [
        f"Batch {batch_number} of {batch_count}. "
        "Focus exclusively on these files; other batches are handled separately."
    ]
    if batch.files:
        lines.append("Files in this batch:")
        lines.extend(f"- {file.path}" for file in batch.files[:BATCH_CONTEXT_PATH_LIMIT])
    if batch.exceeds_budget:
        lines.append(
            "This batch still approaches the token budget; prioritize the most important changes."
        )
    return "\n".join(lines)


def _with_overview(package: PromptPackage, overview: Optional[ChangesetOverview]) -> PromptPackage:
    if overview is None:
        return package
    return package.appending_user_context(overview.as_context())


def request_overview(
    summary: ChangeSummary,
    metadata: PromptMetadata,
    provider: BaseLLMProvider,
) -> ChangesetOverview:
    """Ask the provider for a metadata-only overview of the change set."""
    package = build_overview_prompt(summary, metadata)
    logger.info("Requesting change set overview", file_count=summary.file_count)
    return provider.generate_overview(package).overview


def _generate_single(
    summary: ChangeSummary,
    metadata: PromptMetadata,
    provider: BaseLLMProvider,
    prompt_config: PromptConfig,
    overview: Optional[ChangesetOverview],
) -> GenerationOutcome:
    package = _with_overview(build_prompt(summary, metadata, builder_config(prompt_config)), overview)
    logger.info("Requesting commit draft", model=provider.model)
    result = provider.generate(package)

    return GenerationOutcome(
        draft=result.draft,
        prompt_package=package,
        diagnostics=result.diagnostics,
        report=GenerationReport(
            mode=MODE_SINGLE,
            final_prompt_diagnostics=result.diagnostics,
            overview=overview,
        ),
    )


def _generate_batched(
    batches: list[PromptBatch],
    summary: ChangeSummary,
    metadata: PromptMetadata,
    provider: BaseLLMProvider,
    prompt_config: PromptConfig,
    overview: Optional[ChangesetOverview],
) -> GenerationOutcome:
    logger.info(
        "Splitting change set into batches",
        file_count=summary.file_count,
        batch_count=len(batches),
    )
    config = builder_config(prompt_config)

    partials: list[BatchPartialDraft] = []
    for index, batch in enumerate(batches):
        logger.info(
            "Generating batch draft",
            batch=index + 1,
            batch_count=len(batches),
            file_count=len(batch.files),
            estimated_tokens=batch.token_estimate,
        )
        package = build_prompt(batch.summary, metadata, config)
        package = _with_overview(package, overview)
        package = package.appending_user_context(batch_context(index + 1, len(batches), batch))

        result = provider.generate(package)
        logger.debug("Batch partial subject", batch=index + 1, subject=result.draft.subject)
        partials.append(
            BatchPartialDraft(
                batch_index=index,
                files=batch.files,
                draft=result.draft,
                diagnostics=result.diagnostics,
            )
        )

    partials.sort(key=lambda partial: partial.batch_index)
    batch_infos = [
        BatchInfo(
            index=partial.batch_index,
            file_count=len(partial.files),
            file_paths=[file.path for file in partial.files],
            exceeds_budget=batches[partial.batch_index].exceeds_budget,
            prompt_diagnostics=partial.diagnostics,
            draft=partial.draft,
        )
        for partial in partials
    ]

    combination = _with_overview(build_combination_prompt(partials, metadata), overview)
    logger.info("Combining partial drafts", draft_count=len(partials))
    result = provider.generate(combination)

    return GenerationOutcome(
        draft=result.draft,
        prompt_package=combination,
        diagnostics=result.diagnostics,
        report=GenerationReport(
            mode=MODE_BATCHED,
            final_prompt_diagnostics=result.diagnostics,
            batches=batch_infos,
            overview=overview,
        ),
    )


def generate_commit_draft(
    summary: ChangeSummary,
    metadata: PromptMetadata,
    provider: BaseLLMProvider,
    prompt_config: Optional[PromptConfig] = None,
    use_overview: bool = False,
) -> GenerationOutcome:
    """Draft a commit message for a change summary.

    Small change sets are drafted from one prompt. When the plan needs
    more than one batch, or its only batch is over budget, each batch is
    drafted separately and the partial drafts are merged by a final
    combination prompt.

    Args:
        summary: The change set.
        metadata: Repository facts for the prompt header.
        provider: LLM provider used for every call.
        prompt_config: Budget and grouping settings.
        use_overview: Request a metadata-only overview first and share it
            with every prompt.

    Returns:
        The final draft and a report of how it was produced.

    Raises:
        MissingAPIKeyError: If the API key is not set.
        JSONParseError: If a response cannot be parsed.
        LLMError: For other LLM-related errors.
    """
    prompt_config = prompt_config or PromptConfig()
    batches = plan_summary(summary, prompt_config)
    overview = request_overview(summary, metadata, provider) if use_overview else None

    if should_use_batching(batches):
        return _generate_batched(batches, summary, metadata, provider, prompt_config, overview)
    return _generate_single(summary, metadata, provider, prompt_config, overview)


def outcome_to_dict(outcome: GenerationOutcome) -> dict:
    """Serialize an outcome for JSON output."""
    return {
        "draft": outcome.draft.model_dump(),
        "commit_message": outcome.draft.commit_message,
        "report": outcome.report.to_dict(),
    }


__all__ = [
    "BatchInfo",
    "GenerationOutcome",
    "GenerationReport",
    "MODE_BATCHED",
    "MODE_SINGLE",
    "batch_context",
    "builder_config",
    "collect_change_summary",
    "generate_commit_draft",
    "outcome_to_dict",
    "plan_summary",
    "request_overview",
]
