"""Tests for commitgen.prompt.combination module."""

from commitgen.formatters import CommitDraft
from commitgen.prompt import (
    BatchPartialDraft,
    PromptDiagnostics,
    PromptStyle,
    build_combination_prompt,
)
from commitgen.prompt.combination import CLOSING_INSTRUCTION, COMBINATION_LINE_BUDGET
from commitgen.prompt.diagnostics import file_usage


def partial(index, files, subject, body=None):
    return BatchPartialDraft(
        batch_index=index,
        files=tuple(files),
        draft=CommitDraft(subject=subject, body=body),
        diagnostics=PromptDiagnostics(file_usages=tuple(file_usage(file) for file in files)),
    )


class TestBuildCombinationPrompt:
    """Tests for build_combination_prompt function."""

    def test_presents_each_partial_in_batch_order(self, make_file, metadata):
        """Test that partials are sorted by batch index."""
        second = partial(1, [make_file("b.py")], "Update b")
        first = partial(0, [make_file("a.py", additions=4, deletions=2)], "Add a", body="Explains a.")

        package = build_combination_prompt([second, first], metadata)
        lines = package.user_prompt.split("\n")

        assert lines.index("Batch 1: 1 file(s); +4 / -2") < lines.index("Batch 2: 1 file(s); +1 / -1")
        assert "Partial subject: Add a" in lines
        assert "Partial body:" in lines
        assert "  Explains a." in lines
        assert lines[-1] == CLOSING_INSTRUCTION

    def test_header_and_style(self, make_file, metadata):
        """Test the header lines and style guidance."""
        package = build_combination_prompt([partial(0, [make_file("a.py")], "Add a")], metadata)
        lines = package.user_prompt.split("\n")

        assert lines[0] == "Repository: demo"
        assert lines[3] == "Style: summary"
        assert "split the diff into 1 batch(es)" in lines[4]
        assert package.system_prompt.endswith(PromptStyle.SUMMARY.guidance)

    def test_blank_subject_and_body_rendering(self, make_file, metadata):
        """Test that an empty subject is labelled and a blank body is skipped."""
        draft = CommitDraft.model_construct(subject="  ", body=" \n ")
        blank = BatchPartialDraft(
            batch_index=0,
            files=(make_file("a.py"),),
            draft=draft,
            diagnostics=PromptDiagnostics(),
        )

        lines = build_combination_prompt([blank], metadata).user_prompt.split("\n")

        assert "Partial subject: (empty subject)" in lines
        assert "Partial body:" not in lines

    def test_long_file_lists_are_collapsed(self, make_file, metadata):
        """Test the '+k more' suffix for large batches."""
        files = [make_file(f"src/f{i}.py") for i in range(11)]

        package = build_combination_prompt([partial(0, files, "Refactor sources")], metadata)

        files_line = next(line for line in package.user_prompt.split("\n") if line.startswith("Files: "))
        assert files_line.endswith("src/f7.py (+3 more)")

    def test_diagnostics_aggregate_file_usages(self, make_file, metadata):
        """Test that diagnostics combine usage from every batch."""
        partials = [
            partial(0, [make_file("a.py"), make_file("b.py")], "First"),
            partial(1, [make_file("c.py", is_generated=True)], "Second"),
        ]

        diagnostics = build_combination_prompt(partials, metadata).diagnostics

        assert [usage.path for usage in diagnostics.file_usages] == ["a.py", "b.py", "c.py"]
        assert diagnostics.total_files == 3
        assert diagnostics.generated_files_total == 1
        assert diagnostics.line_budget == COMBINATION_LINE_BUDGET
        assert diagnostics.estimated_token_count > 0
