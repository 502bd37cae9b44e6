"""Combination pass that merges per-batch drafts into one commit message."""

from typing import Sequence

from commitgen.models import character_count, estimate_tokens
from commitgen.prompt.diagnostics import DEFAULT_TOKEN_LIMIT, PromptDiagnostics
from commitgen.prompt.models import BatchPartialDraft, PromptMetadata, PromptPackage

COMBINATION_LINE_BUDGET = 400

# Paths listed per batch before collapsing into "+k more"
MAX_LISTED_PATHS = 8

COMBINATION_SYSTEM_PROMPT = (
    "You are an AI assistant merging multiple partial commit drafts into a single, "
    "well-structured commit message. Preserve all important intent from the inputs, avoid "
    "redundancy, and keep the final subject concise (<= 50 characters). The title should "
    "succinctly describe the change in a specific and informative manner. Provide an optional "
    "body only when useful for additional context. If a body is present, it should describe "
    "the _purpose_ of the change, not just _what_ was changed: focus on the reasoning behind "
    "the changes rather than a file-by-file summary.\n\n"
    "Be clear and concise, but do not omit critical information."
)

CLOSING_INSTRUCTION = (
    "Produce one final commit subject (<= 50 characters) and an optional body that summarizes "
    "the full change set. Avoid repeating the batch headings, present the combined commit "
    "message only."
)


def _batch_lines(position: int, partial: BatchPartialDraft) -> list[str]:
    additions = sum(file.additions for file in partial.files)
    deletions = sum(file.deletions for file in partial.files)
    lines = [
        "",
        f"Batch {position + 1}: {len(partial.files)} file(s); +{additions} / -{deletions}",
    ]

    paths = [file.path for file in partial.files]
    if paths:
        listed = ", ".join(paths[:MAX_LISTED_PATHS])
        if len(paths) > MAX_LISTED_PATHS:
            listed += f" (+{len(paths) - MAX_LISTED_PATHS} more)"
        lines.append(f"Files: {listed}")

    subject = partial.draft.subject.strip() or "(empty subject)"
    lines.append(f"Partial subject: {subject}")

    body = (partial.draft.body or "").strip()
    if body:
        lines.append("Partial body:")
        lines.extend(f"  {line}" for line in body.split("\n"))

    return lines


def build_combination_prompt(
    partials: Sequence[BatchPartialDraft],
    metadata: PromptMetadata,
) -> PromptPackage:
    """Build the prompt that merges partial drafts into a final commit message.

    Args:
        partials: One draft per batch, in any order.
        metadata: Repository facts for the prompt header.

    Returns:
        The merging prompt. Its diagnostics aggregate the batches' file usages.
    """
    ordered = sorted(partials, key=lambda partial: partial.batch_index)
    system_prompt = f"{COMBINATION_SYSTEM_PROMPT}\n\n{metadata.style.guidance}"

    lines = [
        f"Repository: {metadata.repository_name}",
        f"Branch: {metadata.branch_name}",
        f"Scope: {metadata.scope_description}",
        f"Style: {metadata.style.value}",
        f"We split the diff into {len(ordered)} batch(es) to respect the model context window. "
        "Combine the partial commit drafts below into a single cohesive commit message that "
        "covers every file.",
    ]
    for position, partial in enumerate(ordered):
        lines.extend(_batch_lines(position, partial))
    lines.append("")
    lines.append(CLOSING_INSTRUCTION)

    unique_paths: set[str] = set()
    generated_paths: set[str] = set()
    file_usages = []
    for partial in ordered:
        for file in partial.files:
            unique_paths.add(file.path)
            if file.is_generated:
                generated_paths.add(file.path)
        file_usages.extend(partial.diagnostics.file_usages)

    diagnostics = PromptDiagnostics(
        estimated_line_count=len(lines),
        line_budget=COMBINATION_LINE_BUDGET,
        estimated_token_count=estimate_tokens(
            character_count(lines) + character_count(system_prompt.split("\n"))
        ),
        estimated_token_limit=DEFAULT_TOKEN_LIMIT,
        total_files=len(unique_paths),
        displayed_files=len(unique_paths),
        configured_file_limit=len(unique_paths),
        generated_files_total=len(generated_paths),
        generated_files_displayed=len(generated_paths),
        file_usages=tuple(file_usages),
    )

    return PromptPackage(
        system_prompt=system_prompt,
        user_prompt="\n".join(lines),
        diagnostics=diagnostics,
    )
