"""Git branch and repository naming utilities.

Contains:
- get_branch: Get the current branch name
- get_repository_name: Get the repository directory name
"""

from commitgen.git.exceptions import GitError
from commitgen.git.runner import _run_git_command, get_repo_root


def get_branch() -> str:
    """Get the current branch name.

    Returns:
        The current branch name, or 'HEAD' when detached.
    """
    try:
        branch = _run_git_command(["rev-parse", "--abbrev-ref", "HEAD"])
    except GitError:
        # No commits yet, so HEAD cannot be resolved
        branch = _run_git_command(["branch", "--show-current"])
    return branch or "HEAD"


def get_repository_name() -> str:
    """Get the name of the repository root directory."""
    return get_repo_root().name
