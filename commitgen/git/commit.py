"""Git commit utilities.

Contains:
- commit_with_message: Create a commit from a message
- stage_all: Stage every change in the work tree
"""

import os
import tempfile

from commitgen.git.runner import _run_git_command
from commitgen.log import get_logger

logger = get_logger(__name__)


def stage_all() -> None:
    """Stage all changes, including untracked files."""
    _run_git_command(["add", "--all"])


def commit_with_message(message: str) -> str:
    """Commit staged changes with the given message.

    The message is written to a temporary file and passed with -F so
    multi-line bodies survive untouched.

    Args:
        message: The full commit message.

    Returns:
        The git commit output.

    Raises:
        GitError: If the commit fails.
    """
    if not message.endswith("\n"):
        message += "\n"

    fd, path = tempfile.mkstemp(prefix="commitgen-", suffix=".txt")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(message)
        output = _run_git_command(["commit", "-F", path])
    finally:
        os.unlink(path)

    logger.info("Created commit", subject=message.split("\n", 1)[0])
    return output
