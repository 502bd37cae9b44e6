"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- NoChangesError: Raised when the requested scope has no changes
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class NoChangesError(GitError):
    """Raised when there are no changes to describe."""

    pass
