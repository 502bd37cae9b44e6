"""Git status utilities.

Contains:
- GitStatus: Changes split into staged, unstaged and untracked lists
- parse_status: Parse `git status --porcelain` output
- get_status: Read the status of the current repository
"""

from dataclasses import dataclass, field
from typing import Optional

from commitgen.git.runner import _run_git_command
from commitgen.models import ChangeKind, ChangeLocation, FileChange


@dataclass
class GitStatus:
    """Changes reported by git status, by location."""

    staged: list[FileChange] = field(default_factory=list)
    unstaged: list[FileChange] = field(default_factory=list)
    untracked: list[FileChange] = field(default_factory=list)

    def changes(self, include_staged_only: bool) -> list[FileChange]:
        """Changes in scope.

        Args:
            include_staged_only: Only return staged changes.

        Returns:
            Staged changes, or staged + unstaged + untracked.
        """
        if include_staged_only:
            return list(self.staged)
        return self.staged + self.unstaged + self.untracked

    @property
    def is_empty(self) -> bool:
        return not (self.staged or self.unstaged or self.untracked)


def _strip_quotes(path: str) -> str:
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        return path[1:-1]
    return path


def _split_paths(remainder: str) -> tuple[Optional[str], str]:
    """Split 'old -> new' into (old, new); plain paths give (None, path)."""
    trimmed = remainder.strip()
    if " -> " in trimmed:
        old_path, new_path = trimmed.split(" -> ", 1)
        return _strip_quotes(old_path), _strip_quotes(new_path)
    return None, _strip_quotes(trimmed)


def parse_status(raw: str) -> GitStatus:
    """Parse `git status --porcelain` (v1) output.

    The X column yields a staged change and the Y column an unstaged one,
    so a file modified in both places appears in both lists.

    Args:
        raw: Porcelain status output.

    Returns:
        The parsed GitStatus.
    """
    status = GitStatus()

    for line in raw.splitlines():
        if len(line) < 3:
            continue

        x_status, y_status = line[0], line[1]
        old_path, path = _split_paths(line[3:])

        if x_status == "?" and y_status == "?":
            status.untracked.append(
                FileChange(
                    path=path,
                    kind=ChangeKind.UNTRACKED,
                    location=ChangeLocation.UNTRACKED,
                    old_path=old_path,
                )
            )
            continue

        if x_status != " ":
            status.staged.append(
                FileChange(
                    path=path,
                    kind=ChangeKind.from_status_code(x_status),
                    location=ChangeLocation.STAGED,
                    old_path=old_path,
                )
            )

        if y_status != " ":
            status.unstaged.append(
                FileChange(
                    path=path,
                    kind=ChangeKind.from_status_code(y_status),
                    location=ChangeLocation.UNSTAGED,
                    old_path=old_path,
                )
            )

    return status


def get_status() -> GitStatus:
    """Get the status of the current repository.

    Returns:
        The parsed GitStatus.
    """
    # Unstripped so the leading space of a " M path" first line survives
    return parse_status(_run_git_command(["status", "--porcelain"], strip=False))
