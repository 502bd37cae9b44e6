"""Tests for commitgen.prompt.models and diagnostics."""

from commitgen.models import ChangeKind, character_count, estimate_tokens
from commitgen.prompt import (
    USER_CONTEXT_HEADING,
    PromptDiagnostics,
    PromptMetadata,
    PromptPackage,
    PromptStyle,
)
from commitgen.prompt.diagnostics import build_remainder, file_usage


class TestPromptMetadata:
    """Tests for PromptMetadata."""

    def test_scope_description(self):
        """Test staged-only and full scopes."""
        assert PromptMetadata("r", "b").scope_description == "staged changes only"
        assert PromptMetadata("r", "b", include_unstaged=True).scope_description == "staged + unstaged changes"

    def test_header_lines(self):
        """Test the rendered header."""
        metadata = PromptMetadata("repo", "dev", style=PromptStyle.DETAILED)

        assert metadata.header_lines() == [
            "Repository: repo",
            "Branch: dev",
            "Scope: staged changes only",
            "Style: detailed",
        ]


class TestAppendingUserContext:
    """Tests for PromptPackage.appending_user_context."""

    def test_appends_heading_and_text(self):
        """Test the appended block and diagnostics bookkeeping."""
        package = PromptPackage(
            system_prompt="sys",
            user_prompt="body",
            diagnostics=PromptDiagnostics(estimated_line_count=1, estimated_token_count=5),
        )

        updated = package.appending_user_context("  first\nsecond  ")

        added = ["", USER_CONTEXT_HEADING, "first", "second"]
        assert updated.user_prompt == "\n".join(["body"] + added)
        assert updated.diagnostics.user_context_line_count == 4
        assert updated.diagnostics.estimated_line_count == 5
        assert updated.diagnostics.estimated_token_count == 5 + estimate_tokens(character_count(added))

    def test_blank_text_is_ignored(self):
        """Test that whitespace-only context leaves the package unchanged."""
        package = PromptPackage("sys", "body", PromptDiagnostics())

        assert package.appending_user_context("   \n ") is package


class TestPromptDiagnostics:
    """Tests for PromptDiagnostics."""

    def test_record_actual_token_usage_derives_total(self):
        """Test the derived total."""
        diagnostics = PromptDiagnostics().record_actual_token_usage(100, 20)

        assert diagnostics.actual_total_tokens == 120

    def test_record_actual_token_usage_unknown(self):
        """Test that unknown counts leave the total unset."""
        diagnostics = PromptDiagnostics().record_actual_token_usage(None, None)

        assert diagnostics.actual_total_tokens is None

    def test_to_dict_includes_omitted_generated(self):
        """Test the serialized form."""
        data = PromptDiagnostics(generated_files_total=3, generated_files_displayed=1).to_dict()

        assert data["generated_files_omitted"] == 2
        assert list(data["file_usages"]) == []

    def test_file_usage(self, make_file):
        """Test per-file usage measurement."""
        file = make_file("a.py")

        usage = file_usage(file)

        assert usage.line_count == len(file.prompt_lines())
        assert usage.token_estimate == estimate_tokens(character_count(file.prompt_lines()))
        assert usage.used_full_snippet is False


class TestBuildRemainder:
    """Tests for build_remainder function."""

    def test_empty(self):
        """Test that no files give an empty remainder."""
        remainder = build_remainder([], 5)

        assert remainder.is_empty
        assert remainder.hint_limit == 5

    def test_breakdown_sorted_by_count_then_kind(self, make_file):
        """Test kind ordering and aggregate counts."""
        files = [
            make_file("a.py", kind=ChangeKind.ADDED, additions=5, deletions=0),
            make_file("b.py"),
            make_file("c.py"),
            make_file("d.py", kind=ChangeKind.DELETED, is_generated=True),
        ]

        remainder = build_remainder(files, 2)

        assert [(entry.kind, entry.count) for entry in remainder.kind_breakdown] == [
            ("modified", 2),
            ("added", 1),
            ("deleted", 1),
        ]
        assert remainder.additions == 8
        assert remainder.generated_count == 1
        assert [hint.path for hint in remainder.hint_files] == ["a.py", "b.py"]
        assert remainder.non_generated_count == 3
