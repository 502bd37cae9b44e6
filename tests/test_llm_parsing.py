"""Tests for commitgen.llm.parsing module."""

import pytest

from commitgen.llm import JSONParseError, parse_json_response, validate_commit_draft, validate_overview


class TestParseJsonResponse:
    """Tests for parse_json_response function."""

    def test_plain_json(self):
        """Test a bare JSON object."""
        assert parse_json_response('{"subject": "Add parser"}') == {"subject": "Add parser"}

    def test_markdown_fences(self):
        """Test that code fences are stripped."""
        raw = '```json\n{"subject": "Add parser", "body": null}\n```'

        assert parse_json_response(raw) == {"subject": "Add parser", "body": None}

    def test_surrounding_text(self):
        """Test that text around the object is ignored."""
        raw = 'Here you go:\n{"subject": "Fix bug"}\nHope this helps.'

        assert parse_json_response(raw)["subject"] == "Fix bug"

    def test_invalid_json(self):
        """Test that malformed JSON raises JSONParseError."""
        with pytest.raises(JSONParseError, match="Failed to parse"):
            parse_json_response("not json at all")

    def test_non_object(self):
        """Test that arrays are rejected."""
        with pytest.raises(JSONParseError, match="Expected a JSON object"):
            parse_json_response("[1, 2, 3]")


class TestValidateCommitDraft:
    """Tests for validate_commit_draft function."""

    def test_valid_draft(self):
        """Test subject and body."""
        draft = validate_commit_draft({"subject": "  Add parser ", "body": "Why it matters."})

        assert draft.subject == "Add parser"
        assert draft.body == "Why it matters."

    def test_title_and_bullets_are_accepted(self):
        """Test the alternative title/list body shape."""
        draft = validate_commit_draft({"title": "Add parser", "body": ["- one", "- two"]})

        assert draft.subject == "Add parser"
        assert draft.body == "- one\n- two"

    def test_blank_body_becomes_none(self):
        """Test body normalization."""
        assert validate_commit_draft({"subject": "Add parser", "body": "  "}).body is None

    def test_missing_subject(self):
        """Test that a missing subject is a schema error."""
        with pytest.raises(JSONParseError, match="expected schema"):
            validate_commit_draft({"body": "text"})

    def test_empty_subject(self):
        """Test that an empty subject is rejected."""
        with pytest.raises(JSONParseError):
            validate_commit_draft({"subject": "   "})


class TestValidateOverview:
    """Tests for validate_overview function."""

    def test_valid_overview(self):
        """Test the camelCase key alias and key file limit."""
        overview = validate_overview({
            "summary": "Adds batching.",
            "category": "feature",
            "keyFiles": ["a.py", "", "b.py", "c.py", "d.py", "e.py", "f.py"],
        })

        assert overview.key_files == ["a.py", "b.py", "c.py", "d.py", "e.py"]
        assert overview.category == "feature"

    def test_missing_summary(self):
        """Test that a missing summary is rejected."""
        with pytest.raises(JSONParseError, match="overview"):
            validate_overview({"category": "chore"})
