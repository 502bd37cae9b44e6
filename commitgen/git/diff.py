"""Git diff utilities.

Contains:
- DiffOptions: Options passed through to git diff
- build_diff_args: Build git diff arguments for a scope
- get_diff: Get the staged or unstaged diff
"""

from dataclasses import dataclass
from typing import Optional

from commitgen.git.runner import _run_git_command


@dataclass(frozen=True)
class DiffOptions:
    """Options for requesting a diff from git.

    Attributes:
        function_context: Show whole functions as context (--function-context).
        detect_renames: Detect renames and copies (-M -C).
        context_lines: Context radius (-U<n>), None for git's default.
    """

    function_context: bool = False
    detect_renames: bool = True
    context_lines: Optional[int] = None


def build_diff_args(staged: bool, options: Optional[DiffOptions] = None) -> list[str]:
    """Build the git diff arguments for a scope.

    Args:
        staged: Diff the index against HEAD instead of the work tree against the index.
        options: Diff options. Defaults to DiffOptions().

    Returns:
        Arguments for _run_git_command.
    """
    options = options or DiffOptions()
    args = ["diff"]
    if staged:
        args.append("--cached")
    args.append("--no-color")
    if options.function_context:
        args.append("--function-context")
    if options.detect_renames:
        args.extend(["-M", "-C"])
    if options.context_lines is not None:
        args.append(f"-U{options.context_lines}")
    return args


def get_diff(staged: bool, options: Optional[DiffOptions] = None) -> str:
    """Get the raw unified diff for a scope.

    Args:
        staged: Return the staged diff instead of the unstaged one.
        options: Diff options.

    Returns:
        The raw diff text, unstripped.
    """
    return _run_git_command(build_diff_args(staged, options), strip=False)
