"""Importance scoring for changed files.

Scores are additive integers with no clamping. They only decide which
files get upgraded to full snippets first when the budget is tight.
"""

from typing import Iterable

from commitgen.models import ChangeHint, ChangeKind, FileSummary, ScoredFile

HINT_WEIGHTS = {
    ChangeHint.TYPE_DEFINITION: 30,
    ChangeHint.PROTOCOL_CONFORMANCE: 25,
    ChangeHint.IMPORTS: 10,
    ChangeHint.TEST_CHANGES: -15,
    ChangeHint.CONFIGURATION: -10,
}

KIND_WEIGHTS = {
    ChangeKind.ADDED: 20,
    ChangeKind.DELETED: 15,
    ChangeKind.RENAMED: 10,
    ChangeKind.COPIED: 5,
}

# (minimum changed lines, bonus), checked in order
VOLUME_WEIGHTS = [
    (100, 20),
    (50, 10),
    (20, 5),
]

GENERATED_PENALTY = -50
BINARY_PENALTY = -30


def _path_adjustment(path: str) -> int:
    """Score contribution from path conventions."""
    lowered = path.lower()
    score = 0

    if "test" in lowered or "spec" in lowered:
        score -= 10
    if lowered.endswith(".lock") or "package-lock" in lowered:
        score -= 40
    if lowered.endswith(".md") or lowered.endswith(".txt"):
        score -= 5
    if "snapshot" in lowered or "fixture" in lowered:
        score -= 20
    if "migration" in lowered:
        score -= 10
    if "main." in lowered or "app." in lowered:
        score += 15
    if "protocol" in lowered or "interface" in lowered:
        score += 10

    return score


def score_file(file: FileSummary) -> int:
    """Compute the importance score for a file.

    Args:
        file: The file to score.

    Returns:
        Sum of hint, kind, volume, flag and path contributions. May be negative.
    """
    score = sum(weight for hint, weight in HINT_WEIGHTS.items() if hint in file.change_hints)
    score += KIND_WEIGHTS.get(file.kind, 0)

    volume = file.additions + file.deletions
    for threshold, bonus in VOLUME_WEIGHTS:
        if volume > threshold:
            score += bonus
            break

    if file.is_generated:
        score += GENERATED_PENALTY
    if file.is_binary:
        score += BINARY_PENALTY

    return score + _path_adjustment(file.path)


def score_files(files: Iterable[FileSummary]) -> list[ScoredFile]:
    """Score files and sort them by descending score. Ties keep input order."""
    scored = [ScoredFile(file=file, score=score_file(file)) for file in files]
    return sorted(scored, key=lambda item: -item.score)


def scores_by_path(files: Iterable[FileSummary]) -> dict[str, int]:
    """Map each file path to its score."""
    return {file.path: score_file(file) for file in files}
