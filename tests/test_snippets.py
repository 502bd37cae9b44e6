"""Tests for commitgen.diff.snippets module."""

from commitgen.diff import ELLIPSIS, MAX_LINE_LENGTH, cap_line, extract_snippet, is_change_line


class TestIsChangeLine:
    """Tests for is_change_line function."""

    def test_added_and_removed_lines(self):
        """Test that +/- lines are changes."""
        assert is_change_line("+added")
        assert is_change_line("-removed")

    def test_marker_lookalikes_are_changes(self):
        """Test that hunk lines starting with +++ or --- are changes."""
        assert is_change_line("--- old sql comment")
        assert is_change_line("+++i;")

    def test_context_and_headers_are_not_changes(self):
        """Test context lines and hunk headers."""
        assert not is_change_line(" context")
        assert not is_change_line("@@ -1 +1 @@")
        assert not is_change_line("")


class TestCapLine:
    """Tests for cap_line function."""

    def test_short_line_unchanged(self):
        """Test that short lines are returned as-is."""
        assert cap_line("+short") == "+short"

    def test_long_line_truncated(self):
        """Test that long lines are cut to the maximum length."""
        assert len(cap_line("+" + "x" * 500)) == MAX_LINE_LENGTH


class TestExtractSnippet:
    """Tests for extract_snippet function."""

    def test_keeps_removed_line_that_looks_like_marker(self):
        """Test that a removed '-- comment' line is kept as a change."""
        lines = (
            ["@@ -1,31 +1,30 @@"]
            + [f" ctx{i}" for i in range(1, 16)]
            + ["--- removed"]
            + [f" ctx{i}" for i in range(17, 32)]
        )

        result = extract_snippet(lines, 10, 1)

        assert result == ["@@ -1,31 +1,30 @@", ELLIPSIS, " ctx15", "--- removed", " ctx17", ELLIPSIS]

    def test_non_positive_limit_returns_empty(self):
        """Test that a zero budget yields no lines."""
        assert extract_snippet(["+a"], 0) == []

    def test_block_that_fits_is_verbatim(self):
        """Test that short blocks are returned unchanged."""
        lines = ["@@ -1,2 +1,2 @@", " keep", "-old", "+new"]

        assert extract_snippet(lines, 10) == lines

    def test_skipped_context_collapses_to_ellipsis(self):
        """Test that runs of unimportant lines become one marker."""
        lines = ["@@ -1,20 +1,20 @@"] + [f" ctx {i}" for i in range(10)] + ["-old", "+new"] + [
            f" tail {i}" for i in range(10)
        ]

        result = extract_snippet(lines, 8, context_lines=1)

        assert result[0] == "@@ -1,20 +1,20 @@"
        assert result[1] == ELLIPSIS
        assert "-old" in result
        assert "+new" in result
        assert result[-1] == ELLIPSIS
        assert len(result) <= 8

    def test_changes_are_preferred_over_context(self):
        """Test that changed lines survive while distant context is dropped."""
        lines = ["@@ -1 +1 @@"] + [f" ctx {i}" for i in range(40)] + ["+important"]

        result = extract_snippet(lines, 6, context_lines=0)

        assert "+important" in result
        assert " ctx 5" not in result

    def test_budget_exhaustion_ends_with_ellipsis(self):
        """Test that running out of budget marks the cut with an ellipsis."""
        lines = ["@@ -1 +1 @@"] + [f"+line {i}" for i in range(50)]

        result = extract_snippet(lines, 5)

        assert len(result) == 5
        assert result[-1] == ELLIPSIS

    def test_block_without_changes_shows_head(self):
        """Test that blocks with nothing important show their first lines."""
        lines = [f"meta {i}" for i in range(10)]

        assert extract_snippet(lines, 3) == ["meta 0", "meta 1", "meta 2"]

    def test_never_exceeds_limit(self):
        """Test the length bound across several budgets."""
        lines = ["@@ -1 +1 @@"]
        for i in range(20):
            lines.extend([f" ctx {i}", f"+add {i}", f" more {i}", f" gap {i}"])

        for limit in range(1, 30):
            assert len(extract_snippet(lines, limit)) <= limit

    def test_long_lines_are_capped(self):
        """Test that every returned line respects the length cap."""
        lines = ["+" + "y" * 400]

        assert extract_snippet(lines, 5) == ["+" + "y" * (MAX_LINE_LENGTH - 1)]
