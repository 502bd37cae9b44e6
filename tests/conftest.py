"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from commitgen.models import (
    ChangeKind,
    ChangeLocation,
    ChangeSummary,
    FileSummary,
)
from commitgen.prompt import PromptMetadata, PromptStyle


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_diff():
    """Multi-file unified diff covering a modification, an addition and a deletion."""
    return """diff --git a/src/app.py b/src/app.py
index 1234567..abcdefg 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,5 +1,8 @@
 import os
+import sys

 def main():
-    print("old")
+    print("new")
+
+def helper():
+    return True
diff --git a/src/new_module.py b/src/new_module.py
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/src/new_module.py
@@ -0,0 +1,3 @@
+class Greeter:
+    def hello(self):
+        return "hello"
diff --git a/docs/old.md b/docs/old.md
deleted file mode 100644
index e69de29..0000000
--- a/docs/old.md
+++ /dev/null
@@ -1,2 +0,0 @@
-# Old docs
-Nothing to see here.
"""


@pytest.fixture
def make_file():
    """Factory for FileSummary values with sensible defaults."""

    def _make_file(path: str, **overrides) -> FileSummary:
        values = {
            "path": path,
            "kind": ChangeKind.MODIFIED,
            "location": ChangeLocation.STAGED,
            "additions": 1,
            "deletions": 1,
            "compact_snippet": ("@@ -1 +1 @@", "-old", "+new"),
            "full_snippet": ("@@ -1 +1 @@", "-old", "+new"),
            "diff_line_count": 3,
            "diff_has_hunks": True,
        }
        values.update(overrides)
        return FileSummary(**values)

    return _make_file


@pytest.fixture
def make_summary(make_file):
    """Build a ChangeSummary from paths."""

    def _make_summary(*paths: str, **overrides) -> ChangeSummary:
        return ChangeSummary(files=tuple(make_file(path, **overrides) for path in paths))

    return _make_summary


@pytest.fixture
def metadata():
    """Prompt metadata for a staged-only run."""
    return PromptMetadata(
        repository_name="demo",
        branch_name="main",
        style=PromptStyle.SUMMARY,
        include_unstaged=False,
    )


@pytest.fixture
def mock_git_commands(mocker):
    """Mock subprocess.run for git commands."""
    mock_run = mocker.patch("subprocess.run")
    return mock_run
