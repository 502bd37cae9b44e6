"""Tests for commitgen.git package."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from commitgen.git import (
    DiffOptions,
    GitError,
    _run_git_command,
    build_diff_args,
    commit_with_message,
    get_branch,
    get_diff,
    get_generated_file_hints,
    get_repo_root,
    get_repository_name,
    get_status,
    parse_check_attr,
    parse_status,
    stage_all,
)
from commitgen.models import ChangeKind, ChangeLocation


def completed(stdout=""):
    result = MagicMock()
    result.stdout = stdout
    return result


class TestRunGitCommand:
    """Tests for _run_git_command function."""

    def test_successful_command(self, mock_git_commands):
        """Test successful git command execution."""
        mock_git_commands.return_value = completed("  output\n")

        assert _run_git_command(["status"]) == "output"
        args, kwargs = mock_git_commands.call_args
        assert args[0] == ["git", "status"]
        assert kwargs["check"] is True

    def test_unstripped_output(self, mock_git_commands):
        """Test that strip=False keeps leading spaces."""
        mock_git_commands.return_value = completed(" M file.py\n")

        assert _run_git_command(["status", "--porcelain"], strip=False) == " M file.py\n"

    def test_failed_command_raises_error(self, mock_git_commands):
        """Test that a failed command raises GitError with stderr."""
        mock_git_commands.side_effect = subprocess.CalledProcessError(
            1, "git", stderr="fatal: bad revision"
        )

        with pytest.raises(GitError, match="bad revision"):
            _run_git_command(["log"])

    def test_git_not_found_raises_error(self, mock_git_commands):
        """Test error when git is not installed."""
        mock_git_commands.side_effect = FileNotFoundError()

        with pytest.raises(GitError, match="not installed"):
            _run_git_command(["status"])


class TestRepository:
    """Tests for repository root, name and branch."""

    def test_get_repo_root(self, mock_git_commands):
        """Test that the root is returned as a Path."""
        mock_git_commands.return_value = completed("/home/user/project\n")

        assert get_repo_root() == Path("/home/user/project")

    def test_get_repo_root_outside_repo(self, mock_git_commands):
        """Test the error outside a repository."""
        mock_git_commands.side_effect = subprocess.CalledProcessError(128, "git", stderr="not a git repository")

        with pytest.raises(GitError, match="Not in a git repository"):
            get_repo_root()

    def test_get_repository_name(self, mock_git_commands):
        """Test that the repository name is the root directory name."""
        mock_git_commands.return_value = completed("/home/user/project\n")

        assert get_repository_name() == "project"

    def test_get_branch(self, mock_git_commands):
        """Test the branch name."""
        mock_git_commands.return_value = completed("feature/x\n")

        assert get_branch() == "feature/x"

    def test_get_branch_without_commits(self, mock_git_commands):
        """Test the fallback when HEAD cannot be resolved."""
        mock_git_commands.side_effect = [
            subprocess.CalledProcessError(128, "git", stderr="unknown revision"),
            completed("main\n"),
        ]

        assert get_branch() == "main"

    def test_get_branch_empty_output(self, mock_git_commands):
        """Test that empty output reports HEAD."""
        mock_git_commands.return_value = completed("")

        assert get_branch() == "HEAD"


class TestParseStatus:
    """Tests for parse_status function."""

    def test_staged_unstaged_and_untracked(self):
        """Test the three locations."""
        raw = "M  staged.py\n M unstaged.py\nMM both.py\n?? new.txt\n"

        status = parse_status(raw)

        assert [change.path for change in status.staged] == ["staged.py", "both.py"]
        assert [change.path for change in status.unstaged] == ["unstaged.py", "both.py"]
        assert status.untracked[0].kind is ChangeKind.UNTRACKED
        assert status.untracked[0].location is ChangeLocation.UNTRACKED

    def test_rename_paths(self):
        """Test that 'old -> new' is split."""
        status = parse_status('R  old.py -> "new name.py"\n')

        change = status.staged[0]
        assert change.kind is ChangeKind.RENAMED
        assert change.old_path == "old.py"
        assert change.path == "new name.py"

    def test_status_kinds(self):
        """Test added and deleted codes."""
        status = parse_status("A  a.py\nD  d.py\n")

        assert [change.kind for change in status.staged] == [ChangeKind.ADDED, ChangeKind.DELETED]

    def test_changes_scope(self):
        """Test staged-only and full scopes."""
        status = parse_status("M  a.py\n M b.py\n?? c.py\n")

        assert [change.path for change in status.changes(True)] == ["a.py"]
        assert [change.path for change in status.changes(False)] == ["a.py", "b.py", "c.py"]

    def test_empty_output(self):
        """Test that empty output is an empty status."""
        assert parse_status("").is_empty

    def test_get_status_keeps_leading_space(self, mock_git_commands):
        """Test that the first unstaged line is not mangled."""
        mock_git_commands.return_value = completed(" M first.py\n")

        status = get_status()

        assert status.unstaged[0].path == "first.py"
        assert status.staged == []


class TestDiff:
    """Tests for diff argument building and retrieval."""

    def test_default_args(self):
        """Test staged diff arguments with rename detection."""
        assert build_diff_args(staged=True) == ["diff", "--cached", "--no-color", "-M", "-C"]

    def test_options(self):
        """Test function context and context radius."""
        options = DiffOptions(function_context=True, detect_renames=False, context_lines=5)

        assert build_diff_args(staged=False, options=options) == [
            "diff",
            "--no-color",
            "--function-context",
            "-U5",
        ]

    def test_get_diff_is_unstripped(self, mock_git_commands):
        """Test that diff text keeps leading whitespace."""
        mock_git_commands.return_value = completed(" context\n")

        assert get_diff(staged=False) == " context\n"


class TestAttributes:
    """Tests for generated-file attribute lookups."""

    def test_parse_check_attr(self):
        """Test set, unset and unspecified values."""
        output = (
            "gen/api.pb.go: linguist-generated: true\n"
            "src/app.py: linguist-generated: unspecified\n"
            "build/out.js: linguist-generated: set\n"
        )

        assert parse_check_attr(output) == {
            "gen/api.pb.go": True,
            "src/app.py": False,
            "build/out.js": True,
        }

    def test_no_paths_skips_git(self, mock_git_commands):
        """Test that an empty path list does not run git."""
        assert get_generated_file_hints([]) == {}
        mock_git_commands.assert_not_called()

    def test_runs_check_attr(self, mock_git_commands):
        """Test the check-attr invocation."""
        mock_git_commands.return_value = completed("a.py: linguist-generated: unset\n")

        assert get_generated_file_hints(["a.py"]) == {"a.py": False}
        args, _ = mock_git_commands.call_args
        assert args[0] == ["git", "check-attr", "linguist-generated", "--", "a.py"]


class TestCommit:
    """Tests for staging and committing."""

    def test_stage_all(self, mock_git_commands):
        """Test that all changes are staged."""
        mock_git_commands.return_value = completed("")

        stage_all()

        args, _ = mock_git_commands.call_args
        assert args[0] == ["git", "add", "--all"]

    def test_commit_writes_message_file(self, mocker):
        """Test that the message is passed through a file that is removed afterwards."""
        captured = {}

        def fake_run(cmd, **kwargs):
            path = cmd[cmd.index("-F") + 1]
            with open(path) as f:
                captured["message"] = f.read()
            captured["path"] = path
            return completed("[main abc123] Add feature\n")

        mocker.patch("subprocess.run", side_effect=fake_run)

        output = commit_with_message("Add feature\n\nBody text")

        assert output == "[main abc123] Add feature"
        assert captured["message"] == "Add feature\n\nBody text\n"
        assert not Path(captured["path"]).exists()

    def test_commit_failure_still_removes_file(self, mocker):
        """Test cleanup when git commit fails."""
        captured = {}

        def failing_run(cmd, **kwargs):
            captured["path"] = cmd[cmd.index("-F") + 1]
            raise subprocess.CalledProcessError(1, "git", stderr="nothing to commit")

        mocker.patch("subprocess.run", side_effect=failing_run)

        with pytest.raises(GitError):
            commit_with_message("Subject")
        assert not Path(captured["path"]).exists()
