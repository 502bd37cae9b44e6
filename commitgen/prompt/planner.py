"""Token-budgeted batch planning.

Contains:
- plan_batches: Partition a change summary into prompt batches
- should_use_batching: Whether a plan needs more than a single prompt
- target_budget: Packing budget after headroom is reserved

Packing works against the headroom-reduced target budget. The per-batch
upgrade pass that swaps compact snippets for full ones is bounded by the
raw token budget instead. The target is only a packing margin; the raw
budget is the hard ceiling for upgrades.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from commitgen.grouping import flatten_groups
from commitgen.log import get_logger
from commitgen.models import (
    ChangeSummary,
    FileGroup,
    FileSummary,
    SnippetMode,
    character_count,
    estimate_tokens,
)
from commitgen.prompt.diagnostics import file_usage
from commitgen.prompt.models import PromptBatch
from commitgen.scoring import score_file

logger = get_logger(__name__)

DEFAULT_TOKEN_BUDGET = 4096
DEFAULT_HEADROOM_RATIO = 0.15
MAX_HEADROOM_RATIO = 0.9
DEFAULT_MINIMUM_BATCH_SIZE = 1


@dataclass(frozen=True)
class _Contribution:
    """Compact and full renderings of one file with their costs."""

    index: int
    compact_file: FileSummary
    full_file: FileSummary
    compact_tokens: int
    full_tokens: int
    compact_lines: int
    full_lines: int
    can_use_full: bool
    score: int

    @property
    def delta(self) -> int:
        return self.full_tokens - self.compact_tokens


def target_budget(token_budget: int, headroom_ratio: float) -> int:
    """Budget used for packing once headroom is reserved.

    Args:
        token_budget: Raw token budget (clamped to at least 1).
        headroom_ratio: Share of the budget to reserve (clamped to [0, 0.9]).

    Returns:
        floor(token_budget * (1 - headroom_ratio)), at least 1.
    """
    token_budget = max(1, token_budget)
    headroom_ratio = max(0.0, min(headroom_ratio, MAX_HEADROOM_RATIO))
    return max(1, int(token_budget * (1.0 - headroom_ratio)))


def _contribution(index: int, file: FileSummary, scorer: Callable[[FileSummary], int]) -> _Contribution:
    compact_file = file.with_snippet_mode(SnippetMode.COMPACT)
    full_file = file.with_snippet_mode(SnippetMode.FULL)
    compact_lines = compact_file.prompt_lines()
    full_lines = full_file.prompt_lines()

    return _Contribution(
        index=index,
        compact_file=compact_file,
        full_file=full_file,
        compact_tokens=estimate_tokens(character_count(compact_lines)),
        full_tokens=estimate_tokens(character_count(full_lines)),
        compact_lines=len(compact_lines),
        full_lines=len(full_lines),
        can_use_full=bool(full_lines) and full_lines != compact_lines,
        score=scorer(file),
    )


def _order(contributions: list[_Contribution], grouped: bool) -> list[_Contribution]:
    if grouped:
        return contributions
    return sorted(contributions, key=lambda item: (-item.compact_tokens, item.compact_file.path))


def _finalize_batch(
    contributions: list[_Contribution],
    token_budget: int,
    packing_budget: int,
) -> PromptBatch:
    """Run the upgrade pass for one batch and measure the result."""
    use_full = [False] * len(contributions)

    for position, item in enumerate(contributions):
        if item.can_use_full and item.delta <= 0:
            use_full[position] = True

    total = sum(
        item.full_tokens if use_full[position] else item.compact_tokens
        for position, item in enumerate(contributions)
    )

    candidates = [
        position
        for position, item in enumerate(contributions)
        if item.can_use_full and not use_full[position]
    ]
    candidates.sort(
        key=lambda position: (
            -contributions[position].score,
            contributions[position].delta,
            contributions[position].index,
        )
    )

    for position in candidates:
        delta = contributions[position].delta
        if total + delta <= token_budget:
            use_full[position] = True
            total += delta

    files: list[FileSummary] = []
    usages = []
    for position, item in enumerate(contributions):
        file = item.full_file if use_full[position] else item.compact_file
        files.append(file)
        usages.append(file_usage(file))

    token_total = sum(usage.token_estimate for usage in usages)
    line_total = sum(usage.line_count for usage in usages)

    return PromptBatch(
        files=tuple(files),
        token_estimate=token_total,
        line_estimate=line_total,
        file_usages=tuple(usages),
        exceeds_budget=token_total > packing_budget,
    )


def plan_batches(
    summary: ChangeSummary,
    token_budget: int = DEFAULT_TOKEN_BUDGET,
    headroom_ratio: float = DEFAULT_HEADROOM_RATIO,
    minimum_batch_size: int = DEFAULT_MINIMUM_BATCH_SIZE,
    groups: Optional[Sequence[FileGroup]] = None,
    scorer: Callable[[FileSummary], int] = score_file,
) -> list[PromptBatch]:
    """Partition a change summary into token-budgeted prompt batches.

    Files are packed greedily in order (group order when ``groups`` is given,
    otherwise largest compact cost first). A batch is closed when the next
    file would push it past the target budget, right after a file that alone
    exceeds the target, or once it holds ``minimum_batch_size`` files and
    reaches the target. Each batch then upgrades files to full snippets,
    highest score first, while staying within the raw ``token_budget``.

    Args:
        summary: The change set to plan.
        token_budget: Raw token budget per prompt (at least 1).
        headroom_ratio: Share of the budget reserved during packing, in [0, 0.9].
        minimum_batch_size: Files a batch must hold before it may close at the target.
        groups: Optional semantic groups whose flattened order is kept.
        scorer: Importance scorer used to rank upgrades.

    Returns:
        Batches that together hold every file exactly once.
    """
    if not summary.files:
        return []

    token_budget = max(1, token_budget)
    minimum_batch_size = max(1, minimum_batch_size)
    packing_budget = target_budget(token_budget, headroom_ratio)

    ordered_files = list(summary.files)
    if groups:
        grouped_files = flatten_groups(groups)
        known = {file.path for file in grouped_files}
        # Files the groups do not cover keep their summary order at the end
        ordered_files = grouped_files + [file for file in summary.files if file.path not in known]

    contributions = _order(
        [_contribution(index, file, scorer) for index, file in enumerate(ordered_files)],
        grouped=bool(groups),
    )

    batches: list[PromptBatch] = []
    current: list[_Contribution] = []
    current_total = 0

    def close_current() -> None:
        nonlocal current, current_total
        if current:
            batches.append(_finalize_batch(current, token_budget, packing_budget))
        current = []
        current_total = 0

    for item in contributions:
        if current and current_total + item.compact_tokens > packing_budget:
            close_current()

        current.append(item)
        current_total += item.compact_tokens

        if item.compact_tokens > packing_budget:
            close_current()
        elif len(current) >= minimum_batch_size and current_total >= packing_budget:
            close_current()

    close_current()

    logger.debug(
        "Planned prompt batches",
        file_count=summary.file_count,
        batch_count=len(batches),
        token_budget=token_budget,
        target_budget=packing_budget,
        over_budget=sum(1 for batch in batches if batch.exceeds_budget),
    )
    return batches


def should_use_batching(batches: Sequence[PromptBatch]) -> bool:
    """Whether a plan needs per-batch prompts plus a combination pass."""
    if not batches:
        return False
    if len(batches) > 1:
        return True
    return batches[0].exceeds_budget
