"""Tests for commitgen.formatters module."""

import pytest
from pydantic import ValidationError

from commitgen.formatters import ChangesetOverview, CommitDraft, render_commit_message, sanitize_subject


class TestCommitDraft:
    """Tests for CommitDraft model."""

    def test_strips_subject(self):
        """Test whitespace around the subject is removed."""
        assert CommitDraft(subject="  Add parser  ").subject == "Add parser"

    def test_empty_subject_rejected(self):
        """Test that blank subjects fail validation."""
        with pytest.raises(ValidationError):
            CommitDraft(subject="  ")

    def test_commit_message_property(self):
        """Test that the draft renders as a commit message."""
        draft = CommitDraft(subject="Add parser", body="Parses diffs.")

        assert draft.commit_message == "Add parser\n\nParses diffs."


class TestSanitizeSubject:
    """Tests for sanitize_subject function."""

    def test_first_line_only(self):
        """Test that only the first line is kept."""
        assert sanitize_subject("Add parser\nmore text") == "Add parser"

    def test_truncates_long_subject(self):
        """Test truncation with an ellipsis."""
        result = sanitize_subject("A" * 100)

        assert len(result) == 72
        assert result.endswith("...")

    def test_custom_length(self):
        """Test a custom maximum length."""
        assert sanitize_subject("Update the configuration loader", max_length=10) == "Update..."


class TestRenderCommitMessage:
    """Tests for render_commit_message function."""

    def test_subject_only(self):
        """Test a draft without body."""
        assert render_commit_message(CommitDraft(subject="Fix typo")) == "Fix typo"

    def test_subject_and_body(self):
        """Test the blank line between subject and body."""
        message = render_commit_message(CommitDraft(subject="Fix typo", body="In the README."))

        assert message == "Fix typo\n\nIn the README."


class TestChangesetOverview:
    """Tests for ChangesetOverview model."""

    def test_as_context_with_details(self):
        """Test the rendered context line."""
        overview = ChangesetOverview(summary="Adds batching.", category="feature", key_files=["a.py", "b.py"])

        assert overview.as_context() == "Overview: Adds batching. (category: feature; key files: a.py, b.py)"

    def test_as_context_summary_only(self):
        """Test the context line without details."""
        assert ChangesetOverview(summary="Adds batching.").as_context() == "Overview: Adds batching."
