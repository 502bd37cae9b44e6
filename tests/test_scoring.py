"""Tests for commitgen.scoring module."""

from commitgen.models import ChangeHint, ChangeKind
from commitgen.scoring import score_file, score_files, scores_by_path


class TestScoreFile:
    """Tests for score_file function."""

    def test_plain_modification_scores_zero(self, make_file):
        """Test a small modification with no hints or path signals."""
        assert score_file(make_file("src/util.py")) == 0

    def test_hint_weights_add_up(self, make_file):
        """Test that type definition and import hints are rewarded."""
        file = make_file(
            "src/util.py",
            change_hints=frozenset({ChangeHint.TYPE_DEFINITION, ChangeHint.IMPORTS}),
        )

        assert score_file(file) == 40

    def test_added_file_bonus(self, make_file):
        """Test the bonus for new files."""
        assert score_file(make_file("src/util.py", kind=ChangeKind.ADDED)) == 20

    def test_volume_bonus_uses_first_matching_tier(self, make_file):
        """Test that only the highest volume tier applies."""
        assert score_file(make_file("src/util.py", additions=80, deletions=30)) == 20
        assert score_file(make_file("src/util.py", additions=40, deletions=20)) == 10
        assert score_file(make_file("src/util.py", additions=15, deletions=10)) == 5
        assert score_file(make_file("src/util.py", additions=10, deletions=10)) == 0

    def test_generated_and_binary_penalties(self, make_file):
        """Test that generated and binary files are pushed down."""
        assert score_file(make_file("src/util.py", is_generated=True)) == -50
        assert score_file(make_file("assets/icon.png", is_binary=True)) == -30

    def test_lockfile_penalty(self, make_file):
        """Test that lock files score low."""
        assert score_file(make_file("poetry.lock")) == -40

    def test_test_file_penalties_stack(self, make_file):
        """Test that test hint and test path penalties both apply."""
        file = make_file("tests/test_util.py", change_hints=frozenset({ChangeHint.TEST_CHANGES}))

        assert score_file(file) == -25

    def test_entry_point_bonus(self, make_file):
        """Test the bonus for main/app files."""
        assert score_file(make_file("src/main.py")) == 15

    def test_scores_can_be_negative(self, make_file):
        """Test that scores are not clamped."""
        file = make_file("fixtures/snapshot.lock", is_generated=True)

        assert score_file(file) < -100


class TestScoreFiles:
    """Tests for score_files and scores_by_path."""

    def test_sorted_descending_with_stable_ties(self, make_file):
        """Test ordering and tie stability."""
        files = [
            make_file("b.py"),
            make_file("c.py", kind=ChangeKind.ADDED),
            make_file("a.py"),
        ]

        result = score_files(files)

        assert [item.file.path for item in result] == ["c.py", "b.py", "a.py"]
        assert result[0].score == 20

    def test_scores_by_path(self, make_file):
        """Test the path -> score mapping."""
        files = [make_file("src/main.py"), make_file("docs/guide.md")]

        assert scores_by_path(files) == {"src/main.py": 15, "docs/guide.md": -5}
