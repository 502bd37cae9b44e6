"""Tests for commitgen.models module."""

import pytest

from commitgen.models import (
    DIFF_OMITTED_NOTE,
    ChangeHint,
    ChangeKind,
    ChangeSummary,
    SnippetMode,
    TruncationReason,
    character_count,
    estimate_tokens,
)


class TestEstimateTokens:
    """Tests for token estimation helpers."""

    @pytest.mark.parametrize("count,expected", [
        (0, 0),
        (-5, 0),
        (1, 1),
        (4, 1),
        (5, 2),
        (400, 100),
    ])
    def test_estimate_tokens(self, count, expected):
        """Test the 4 characters per token ratio."""
        assert estimate_tokens(count) == expected

    def test_character_count_includes_newlines(self):
        """Test that each line contributes one newline."""
        assert character_count(["ab", "", "c"]) == 6


class TestChangeKind:
    """Tests for ChangeKind status code mapping."""

    def test_from_status_code(self):
        """Test known and unknown codes."""
        assert ChangeKind.from_status_code("R") is ChangeKind.RENAMED
        assert ChangeKind.from_status_code("Z") is ChangeKind.UNKNOWN

    def test_status_code_round_trip(self):
        """Test the reverse lookup."""
        assert ChangeKind.DELETED.status_code == "D"
        assert ChangeKind.UNKNOWN.status_code == "X"


class TestFileSummary:
    """Tests for FileSummary rendering and transforms."""

    def test_snippet_follows_mode(self, make_file):
        """Test that the visible snippet tracks snippet_mode."""
        file = make_file("a.py", compact_snippet=("+c",), full_snippet=("+c", "+f"))

        assert file.snippet == ("+c",)
        assert file.with_snippet_mode(SnippetMode.FULL).snippet == ("+c", "+f")

    def test_with_snippet_mode_same_mode_returns_self(self, make_file):
        """Test that no copy is made when the mode is unchanged."""
        file = make_file("a.py")

        assert file.with_snippet_mode(SnippetMode.COMPACT) is file

    def test_with_snippet_limit_cuts_current_buffer(self, make_file):
        """Test that only the active buffer is cut and the reason is added."""
        file = make_file("a.py", compact_snippet=("1", "2", "3"), full_snippet=("1", "2", "3", "4"))

        trimmed = file.with_snippet_limit(2)

        assert trimmed.compact_snippet == ("1", "2")
        assert trimmed.full_snippet == ("1", "2", "3", "4")
        assert TruncationReason.PROMPT_LIMIT in trimmed.truncation_reasons

    def test_with_snippet_limit_no_change(self, make_file):
        """Test that a generous limit returns the same value."""
        file = make_file("a.py")

        assert file.with_snippet_limit(10) is file

    def test_with_snippet_limit_zero_empties(self, make_file):
        """Test that a zero limit empties the snippet."""
        trimmed = make_file("a.py").with_snippet_limit(0)

        assert trimmed.snippet == ()
        assert "diff omitted to reduce prompt size" in trimmed.detail_notes()

    def test_prompt_lines_header_and_snippet(self, make_file):
        """Test the rendered header line and indented snippet."""
        lines = make_file("src/a.py", additions=3, deletions=2).prompt_lines()

        assert lines[0] == "- src/a.py [modified; staged; +3/-2]"
        assert lines[1:] == ["  @@ -1 +1 @@", "  -old", "  +new"]

    def test_renamed_identifier_and_note(self, make_file):
        """Test rename rendering with hunks."""
        file = make_file("new.py", kind=ChangeKind.RENAMED, old_path="old.py")

        assert file.identifier == "old.py -> new.py"
        assert "renamed from old.py" in file.detail_notes()

    def test_pure_rename_note(self, make_file):
        """Test rename rendering without hunks."""
        file = make_file("new.py", kind=ChangeKind.RENAMED, old_path="old.py", diff_has_hunks=False)

        assert "pure rename from old.py" in file.detail_notes()

    def test_large_diff_omits_snippet(self, make_file):
        """Test that large diffs are described instead of shown."""
        file = make_file("big.py", additions=300, deletions=150)

        lines = file.prompt_lines()

        assert file.is_large_diff
        assert "  note: large diff (+300/-150)" in lines
        assert "  +new" not in lines

    def test_generated_note(self, make_file):
        """Test generated files are rendered with a note only."""
        file = make_file(
            "gen.pb.go",
            is_generated=True,
            compact_snippet=(),
            full_snippet=(),
            truncation_reasons=frozenset({TruncationReason.GENERATED}),
        )

        assert "  note: marked as generated file (diff skipped)" in file.prompt_lines()

    def test_omitted_note_when_nothing_to_show(self, make_file):
        """Test the fallback note when there is no snippet and no other note."""
        file = make_file("a.py", compact_snippet=(), full_snippet=())

        assert file.prompt_lines()[-1] == f"  note: {DIFF_OMITTED_NOTE}"

    def test_metadata_only_change(self, make_file):
        """Test modifications without hunks."""
        file = make_file("run.sh", diff_has_hunks=False)

        assert "metadata-only change" in file.detail_notes()

    def test_hint_labels_stable_order(self, make_file):
        """Test hints are listed in declaration order."""
        file = make_file(
            "a.py",
            change_hints=frozenset({ChangeHint.CONFIGURATION, ChangeHint.IMPORTS}),
        )

        assert file.hint_labels == ["imports", "configuration"]


class TestChangeSummary:
    """Tests for ChangeSummary aggregates."""

    def test_totals_and_paths(self, make_file):
        """Test aggregate properties."""
        summary = ChangeSummary(files=[
            make_file("a.py", additions=2, deletions=1),
            make_file("b.py", additions=3, deletions=0),
        ])

        assert isinstance(summary.files, tuple)
        assert summary.total_additions == 5
        assert summary.total_deletions == 1
        assert summary.paths == ["a.py", "b.py"]

    def test_prompt_lines_separates_files(self, make_file):
        """Test that each file block is followed by a blank line."""
        summary = ChangeSummary(files=[make_file("a.py")])

        lines = summary.prompt_lines()

        assert lines[0] == "Changes:"
        assert lines[-1] == ""
