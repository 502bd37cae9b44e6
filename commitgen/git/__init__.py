"""Git collaborator for commitgen.

This package wraps the git commands the pipeline needs:
- exceptions: GitError, NoChangesError
- runner: _run_git_command, get_repo_root
- branch: get_branch, get_repository_name
- status: GitStatus, parse_status, get_status
- diff: DiffOptions, build_diff_args, get_diff
- attributes: get_generated_file_hints, parse_check_attr
- commit: commit_with_message, stage_all
"""

# Exceptions
from commitgen.git.exceptions import (
    GitError,
    NoChangesError,
)

# Runner utilities
from commitgen.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Branch utilities
from commitgen.git.branch import (
    get_branch,
    get_repository_name,
)

# Status utilities
from commitgen.git.status import (
    GitStatus,
    get_status,
    parse_status,
)

# Diff utilities
from commitgen.git.diff import (
    DiffOptions,
    build_diff_args,
    get_diff,
)

# Attribute utilities
from commitgen.git.attributes import (
    get_generated_file_hints,
    parse_check_attr,
)

# Commit utilities
from commitgen.git.commit import (
    commit_with_message,
    stage_all,
)


__all__ = [
    # Exceptions
    "GitError",
    "NoChangesError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Branch
    "get_branch",
    "get_repository_name",
    # Status
    "GitStatus",
    "get_status",
    "parse_status",
    # Diff
    "DiffOptions",
    "build_diff_args",
    "get_diff",
    # Attributes
    "get_generated_file_hints",
    "parse_check_attr",
    # Commit
    "commit_with_message",
    "stage_all",
]
