"""Prompt planning and assembly.

Contains:
- builder: Single-prompt assembly with iterative compaction
- planner: Token-budgeted batch planning
- combination: Merge prompt for per-batch drafts
- overview: Metadata-only overview prompt
- diagnostics, models: Prompt values and budget bookkeeping
"""

# Models
from commitgen.prompt.models import (
    USER_CONTEXT_HEADING,
    BatchPartialDraft,
    PromptBatch,
    PromptMetadata,
    PromptPackage,
    PromptStyle,
)

# Diagnostics
from commitgen.prompt.diagnostics import (
    DEFAULT_TOKEN_LIMIT,
    FileUsage,
    KindCount,
    PromptDiagnostics,
    RemainderContext,
    RemainderHint,
    build_remainder,
    file_usage,
)

# Assembly
from commitgen.prompt.builder import (
    PromptBuilderConfig,
    build_prompt,
    build_system_prompt,
)
from commitgen.prompt.combination import build_combination_prompt
from commitgen.prompt.overview import build_overview_prompt

# Planning
from commitgen.prompt.planner import (
    DEFAULT_HEADROOM_RATIO,
    DEFAULT_MINIMUM_BATCH_SIZE,
    DEFAULT_TOKEN_BUDGET,
    plan_batches,
    should_use_batching,
    target_budget,
)

__all__ = [
    # Models
    "USER_CONTEXT_HEADING",
    "BatchPartialDraft",
    "PromptBatch",
    "PromptMetadata",
    "PromptPackage",
    "PromptStyle",
    # Diagnostics
    "DEFAULT_TOKEN_LIMIT",
    "FileUsage",
    "KindCount",
    "PromptDiagnostics",
    "RemainderContext",
    "RemainderHint",
    "build_remainder",
    "file_usage",
    # Assembly
    "PromptBuilderConfig",
    "build_prompt",
    "build_system_prompt",
    "build_combination_prompt",
    "build_overview_prompt",
    # Planning
    "DEFAULT_HEADROOM_RATIO",
    "DEFAULT_MINIMUM_BATCH_SIZE",
    "DEFAULT_TOKEN_BUDGET",
    "plan_batches",
    "should_use_batching",
    "target_budget",
]
