"""Git attribute lookups.

Contains:
- get_generated_file_hints: Which paths are marked linguist-generated
- parse_check_attr: Parse `git check-attr` output
"""

from commitgen.git.runner import _run_git_command

GENERATED_ATTRIBUTE = "linguist-generated"

_TRUTHY_VALUES = {"true", "set", "1", "yes", "on"}


def parse_check_attr(output: str) -> dict[str, bool]:
    """Parse `git check-attr` output lines of the form 'path: attr: value'.

    Args:
        output: Raw command output.

    Returns:
        Mapping of path to whether the attribute is set.
    """
    result: dict[str, bool] = {}
    for line in output.splitlines():
        parts = line.rsplit(":", 2)
        if len(parts) != 3:
            continue
        path, _, value = (part.strip() for part in parts)
        result[path] = value.lower() in _TRUTHY_VALUES
    return result


def get_generated_file_hints(paths: list[str]) -> dict[str, bool]:
    """Look up the linguist-generated attribute for paths.

    Args:
        paths: Paths relative to the repository root.

    Returns:
        Mapping of path to generated flag. Empty when no paths are given.
    """
    if not paths:
        return {}
    output = _run_git_command(["check-attr", GENERATED_ATTRIBUTE, "--"] + list(paths))
    return parse_check_attr(output)
