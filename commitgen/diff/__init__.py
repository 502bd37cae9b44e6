"""Diff parsing, snippet extraction and change hints.

This package provides:
- parser: parse_diff, SnippetOptions
- snippets: extract_snippet, is_change_line, cap_line, ELLIPSIS, MAX_LINE_LENGTH
- hints: detect_hints, is_test_path, is_config_path, LANGUAGE_PATTERNS
"""

from commitgen.diff.snippets import (
    ELLIPSIS,
    MAX_LINE_LENGTH,
    cap_line,
    extract_snippet,
    is_change_line,
)
from commitgen.diff.hints import (
    LANGUAGE_PATTERNS,
    LanguagePatterns,
    detect_hints,
    is_config_path,
    is_test_path,
    patterns_for_extension,
)
from commitgen.diff.parser import (
    SnippetOptions,
    parse_diff,
)


__all__ = [
    # Snippets
    "ELLIPSIS",
    "MAX_LINE_LENGTH",
    "cap_line",
    "extract_snippet",
    "is_change_line",
    # Hints
    "LANGUAGE_PATTERNS",
    "LanguagePatterns",
    "detect_hints",
    "is_config_path",
    "is_test_path",
    "patterns_for_extension",
    # Parser
    "SnippetOptions",
    "parse_diff",
]
