"""Semantic grouping of changed files.

Groups are built in three phases:
1. Test files are paired with the source file they exercise
2. Remaining files are grouped by parent directory
3. Oversized groups are split into contiguous chunks

The output always partitions the input and is deterministic.
"""

from collections import defaultdict
from pathlib import PurePosixPath
from typing import Optional, Sequence

from commitgen.diff.hints import is_test_path
from commitgen.log import get_logger
from commitgen.models import FileGroup, FileSummary, GroupReason

logger = get_logger(__name__)

DEFAULT_MAX_GROUP_SIZE = 8

# Test directory -> source directory. None drops the component.
DIRECTORY_SUBSTITUTIONS: dict[str, Optional[str]] = {
    "Tests": "Sources",
    "tests": "src",
    "test": "src",
    "__tests__": None,
    "spec": "lib",
}

_STEM_PREFIXES = ("test_",)
_STEM_SUFFIXES = ("_tests", "_test", "_spec", ".test", ".spec", "Tests", "Test", "Spec")
_MODULE_SUFFIXES = ("Tests", "Test")


def _split_name(name: str) -> tuple[str, str]:
    """Split a filename into (stem, extension) on the last dot."""
    if "." in name[1:]:
        stem, extension = name.rsplit(".", 1)
        return stem, f".{extension}"
    return name, ""


def _strip_test_marker(stem: str) -> Optional[str]:
    """Remove the test marker from a filename stem, if there is one."""
    for prefix in _STEM_PREFIXES:
        if stem.startswith(prefix) and len(stem) > len(prefix):
            return stem[len(prefix):]
    for suffix in _STEM_SUFFIXES:
        if stem.endswith(suffix) and len(stem) > len(suffix):
            return stem[: -len(suffix)]
    return None


def _substitute_directories(parts: list[str], strip_modules: bool) -> list[str]:
    """Map test directory components to their source counterparts."""
    mapped: list[str] = []
    for part in parts:
        if part in DIRECTORY_SUBSTITUTIONS:
            replacement = DIRECTORY_SUBSTITUTIONS[part]
            if replacement is not None:
                mapped.append(replacement)
            continue
        if strip_modules:
            for suffix in _MODULE_SUFFIXES:
                if part.endswith(suffix) and len(part) > len(suffix):
                    part = part[: -len(suffix)]
                    break
        mapped.append(part)
    return mapped


def source_candidates(test_path: str) -> list[str]:
    """Candidate source paths for a test file, most likely first.

    Candidates come from stripping the test marker from the filename and
    mapping test directories to source directories (Tests -> Sources,
    tests -> src, test -> src, __tests__ -> same directory, spec -> lib,
    AppTests -> App). The same directory is the last candidate.

    Args:
        test_path: Path of the test file.

    Returns:
        Ordered, de-duplicated candidate paths. Empty when the filename
        carries no test marker.
    """
    path = PurePosixPath(test_path)
    stem, extension = _split_name(path.name)
    source_stem = _strip_test_marker(stem)
    if source_stem is None:
        return []

    source_name = f"{source_stem}{extension}"
    parts = list(path.parent.parts) if str(path.parent) != "." else []

    directories = [
        _substitute_directories(parts, strip_modules=True),
        _substitute_directories(parts, strip_modules=False),
        [part for part in parts if part not in DIRECTORY_SUBSTITUTIONS],
        parts,
    ]

    candidates: list[str] = []
    for directory in directories:
        candidate = "/".join(directory + [source_name])
        if candidate != test_path and candidate not in candidates:
            candidates.append(candidate)
    return candidates


def _find_source(test_path: str, unclaimed: dict[str, int]) -> Optional[int]:
    """Index of the unclaimed source file a test exercises, if any."""
    for candidate in source_candidates(test_path):
        index = unclaimed.get(candidate)
        if index is not None and not is_test_path(candidate):
            return index
    return None


def _parent_directory(path: str) -> str:
    parent = str(PurePosixPath(path).parent)
    return parent if parent else "."


def _chunk(group: FileGroup, max_group_size: int) -> list[FileGroup]:
    if len(group) <= max_group_size:
        return [group]
    return [
        FileGroup(
            files=group.files[start:start + max_group_size],
            reason=group.reason,
            label=group.label,
        )
        for start in range(0, len(group), max_group_size)
    ]


def group_files(
    files: Sequence[FileSummary],
    max_group_size: int = DEFAULT_MAX_GROUP_SIZE,
) -> list[FileGroup]:
    """Partition files into groups of related changes.

    Args:
        files: Files to group.
        max_group_size: Maximum files per group (at least 1).

    Returns:
        Ordered groups. Every input file appears in exactly one group.
    """
    max_group_size = max(1, max_group_size)

    # path -> index of the first unclaimed file with that path
    unclaimed: dict[str, int] = {}
    for index, file in enumerate(files):
        unclaimed.setdefault(file.path, index)
    claimed: set[int] = set()

    groups: list[FileGroup] = []

    # Phase 1: test/source pairs
    for index, file in enumerate(files):
        if index in claimed or not is_test_path(file.path):
            continue
        source_index = _find_source(file.path, unclaimed)
        if source_index is None or source_index == index:
            continue

        source = files[source_index]
        groups.append(
            FileGroup(files=(source, file), reason=GroupReason.PAIR, label=source.path)
        )
        claimed.update((index, source_index))
        unclaimed.pop(source.path, None)
        unclaimed.pop(file.path, None)

    # Phase 2: directories
    by_directory: dict[str, list[FileSummary]] = defaultdict(list)
    for index, file in enumerate(files):
        if index not in claimed:
            by_directory[_parent_directory(file.path)].append(file)

    for directory in sorted(by_directory):
        members = sorted(by_directory[directory], key=lambda item: item.path)
        groups.append(FileGroup(files=members, reason=GroupReason.DIRECTORY, label=directory))

    # Phase 3: size bound
    bounded = [chunk for group in groups for chunk in _chunk(group, max_group_size)]

    logger.debug(
        "Grouped files",
        file_count=len(files),
        group_count=len(bounded),
        pair_count=sum(1 for group in groups if group.reason is GroupReason.PAIR),
    )
    return bounded


def flatten_groups(groups: Sequence[FileGroup]) -> list[FileSummary]:
    """Concatenate group members in group order."""
    return [file for group in groups for file in group.files]
