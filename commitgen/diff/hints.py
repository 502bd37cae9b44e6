"""Semantic change hints derived from diff content and file paths.

Contains:
- LanguagePatterns: Import, type and interface regexes for a language family
- LANGUAGE_PATTERNS: Extension -> LanguagePatterns lookup table
- detect_hints: Derive ChangeHint tags for a file
- is_test_path, is_config_path: Path-only checks

Language support is additive: a new family only needs a table entry.
"""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Sequence

from commitgen.diff.snippets import is_change_line
from commitgen.models import ChangeHint


@dataclass(frozen=True)
class LanguagePatterns:
    """Regexes matched against the content of changed lines."""

    imports: tuple[re.Pattern, ...]
    types: tuple[re.Pattern, ...]
    interfaces: tuple[re.Pattern, ...]


# ============================================================
# Language families
# ============================================================

_C_LIKE = LanguagePatterns(
    imports=(
        re.compile(r"^\s*#\s*(?:include|import)\b"),
        re.compile(r"^\s*@?import\b"),
        re.compile(r"^\s*using\s+[\w.]+\s*;"),
        re.compile(r"""\brequire\(\s*['"]"""),
        re.compile(r"""^\s*export\s+.*\bfrom\s+['"]"""),
    ),
    types=(
        re.compile(
            r"^\s*(?:(?:public|private|protected|internal|fileprivate|open|export|default|"
            r"abstract|final|static|sealed|partial|indirect)\s+)*"
            r"(?:class|struct|enum|union|interface|protocol|typedef|type|actor|namespace)\s+\w+"
        ),
    ),
    interfaces=(
        re.compile(
            r"^\s*(?:[\w@]+\s+)*(?:class|struct|enum|actor|extension)\s+\w+(?:<[^>]*>)?\s*:\s*\w+"
        ),
        re.compile(r"\b(?:implements|extends)\s+\w+"),
    ),
)

_PYTHON = LanguagePatterns(
    imports=(
        re.compile(r"^\s*import\s+\w"),
        re.compile(r"^\s*from\s+[\w.]+\s+import\b"),
    ),
    types=(
        re.compile(r"^\s*class\s+\w+"),
        re.compile(r"^\s*\w+\s*=\s*(?:TypedDict|NamedTuple|NewType)\("),
        re.compile(r"^\s*@(?:dataclasses\.)?dataclass\b"),
    ),
    interfaces=(
        re.compile(r"^\s*class\s+\w+\([^)]*\b(?:ABC|ABCMeta|Protocol|Interface)\b"),
        re.compile(r"^\s*@(?:abc\.)?abstractmethod\b"),
    ),
)

_GO = LanguagePatterns(
    imports=(
        re.compile(r"""^\s*import\s*[("\w]"""),
        re.compile(r"""^\s*(?:\w+\s+)?"[\w./-]+"\s*$"""),
    ),
    types=(
        re.compile(r"^\s*type\s+\w+\s+\S"),
    ),
    interfaces=(
        re.compile(r"^\s*type\s+\w+\s+interface\b"),
        re.compile(r"^\s*var\s+_\s+[\w.]+\s*="),
    ),
)

_RUST = LanguagePatterns(
    imports=(
        re.compile(r"^\s*(?:pub(?:\([\w\s:]+\))?\s+)?use\s+[\w:{]"),
        re.compile(r"^\s*(?:pub\s+)?mod\s+\w+\s*;"),
        re.compile(r"^\s*extern\s+crate\b"),
    ),
    types=(
        re.compile(r"^\s*(?:pub(?:\([\w\s:]+\))?\s+)?(?:struct|enum|union|trait|type)\s+\w+"),
    ),
    interfaces=(
        re.compile(r"^\s*(?:unsafe\s+)?impl(?:<[^>]*>)?\s+[\w:<>, ]+\s+for\s+\w+"),
        re.compile(r"^\s*(?:pub\s+)?trait\s+\w+"),
    ),
)

_JVM = LanguagePatterns(
    imports=(
        re.compile(r"^\s*import\s+(?:static\s+)?[\w.]+"),
    ),
    types=(
        re.compile(
            r"^\s*(?:(?:public|private|protected|internal|abstract|final|sealed|open|data|"
            r"static|inner|enum|annotation|case|value)\s+)*"
            r"(?:class|interface|enum|object|record|trait)\s+\w+"
        ),
    ),
    interfaces=(
        re.compile(r"\b(?:implements|extends)\s+\w+"),
        re.compile(r"^\s*(?:\w+\s+)*(?:class|object)\s+\w+[^:{=]*:\s*\w+"),
    ),
)

_RUBY = LanguagePatterns(
    imports=(
        re.compile(r"^\s*(?:require|require_relative|load)\b"),
    ),
    types=(
        re.compile(r"^\s*(?:class|module)\s+[A-Z]\w*"),
        re.compile(r"\bStruct\.new\("),
    ),
    interfaces=(
        re.compile(r"^\s*(?:include|extend|prepend)\s+[A-Z]"),
        re.compile(r"^\s*class\s+[\w:]+\s*<\s*[A-Z]"),
    ),
)

_GENERIC = LanguagePatterns(
    imports=(
        re.compile(r"^\s*(?:import|include|require|use|using)\b"),
    ),
    types=(
        re.compile(r"^\s*(?:class|struct|enum|interface|protocol|trait|type)\s+\w+"),
    ),
    interfaces=(
        re.compile(r"\b(?:implements|extends|conforms)\b"),
    ),
)

_FAMILY_EXTENSIONS: list[tuple[LanguagePatterns, tuple[str, ...]]] = [
    (_C_LIKE, (
        ".c", ".h", ".cc", ".cpp", ".cxx", ".hpp", ".hh", ".m", ".mm", ".cs",
        ".swift", ".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".dart",
    )),
    (_PYTHON, (".py", ".pyi")),
    (_GO, (".go",)),
    (_RUST, (".rs",)),
    (_JVM, (".java", ".kt", ".kts", ".scala", ".groovy")),
    (_RUBY, (".rb", ".rake")),
]

# Map of file extension -> patterns for its language family
LANGUAGE_PATTERNS: dict[str, LanguagePatterns] = {
    extension: patterns
    for patterns, extensions in _FAMILY_EXTENSIONS
    for extension in extensions
}


def patterns_for_extension(extension: Optional[str]) -> LanguagePatterns:
    """Look up the patterns for an extension, falling back to the generic family.

    Args:
        extension: File extension with or without the leading dot.
    """
    if not extension:
        return _GENERIC
    normalized = extension.lower()
    if not normalized.startswith("."):
        normalized = f".{normalized}"
    return LANGUAGE_PATTERNS.get(normalized, _GENERIC)


# ============================================================
# Path checks
# ============================================================

TEST_DIRECTORY_NAMES = {"tests", "test", "__tests__", "spec"}

_TEST_STEM_PATTERNS = (
    re.compile(r"^test_.+"),
    re.compile(r".+_(?:test|tests|spec)$"),
    re.compile(r".+[a-z0-9](?:Test|Tests|Spec)$"),
    re.compile(r".+\.(?:test|spec)$"),
    re.compile(r"^conftest$"),
)

CONFIG_FILENAMES = {
    "package.json", "package.swift", "pyproject.toml", "setup.cfg", "setup.py",
    "requirements.txt", "cargo.toml", "go.mod", "gemfile", "podfile", "makefile",
    "dockerfile", "docker-compose.yml", "docker-compose.yaml", "tsconfig.json",
    "pom.xml", "build.gradle", "build.gradle.kts", "settings.gradle", "tox.ini",
    "pytest.ini", ".gitignore", ".gitattributes", ".editorconfig", ".env",
}

CONFIG_EXTENSIONS = {
    ".yml", ".yaml", ".toml", ".ini", ".cfg", ".conf", ".plist", ".xcconfig",
    ".properties", ".env",
}


def is_test_path(path: str) -> bool:
    """Check whether a path looks like a test file.

    Matches a test directory anywhere in the path (tests/, test/, __tests__/,
    spec/) or a test filename convention (test_foo.py, foo_test.go,
    FooTests.swift, foo.test.ts, foo_spec.rb).
    """
    parts = path.split("/")
    if any(part.lower() in TEST_DIRECTORY_NAMES for part in parts[:-1]):
        return True

    stem = parts[-1].rsplit(".", 1)[0] if "." in parts[-1] else parts[-1]
    return any(pattern.match(stem) for pattern in _TEST_STEM_PATTERNS)


def is_config_path(path: str) -> bool:
    """Check whether a path looks like a configuration file."""
    name = PurePosixPath(path).name.lower()
    if name in CONFIG_FILENAMES:
        return True
    if name.startswith(".") and name.endswith("rc"):
        return True
    return PurePosixPath(name).suffix in CONFIG_EXTENSIONS


# ============================================================
# Detection
# ============================================================

def detect_hints(
    lines: Sequence[str],
    path: str,
    extension: Optional[str] = None,
) -> frozenset[ChangeHint]:
    """Derive semantic hints for one file.

    Changed lines are matched (with their +/- prefix stripped) against the
    patterns for the file's language family. Path checks are applied
    independently of the content.

    Args:
        lines: Raw diff lines for the file.
        path: Repository-relative path.
        extension: Extension override. Defaults to the path's suffix.

    Returns:
        The set of detected hints.
    """
    if extension is None:
        extension = PurePosixPath(path).suffix
    patterns = patterns_for_extension(extension)

    checks = (
        (ChangeHint.IMPORTS, patterns.imports),
        (ChangeHint.TYPE_DEFINITION, patterns.types),
        (ChangeHint.PROTOCOL_CONFORMANCE, patterns.interfaces),
    )

    hints: set[ChangeHint] = set()
    for line in lines:
        if len(hints) == len(checks):
            break
        if not is_change_line(line):
            continue
        content = line[1:]
        if not content.strip():
            continue
        for hint, regexes in checks:
            if hint not in hints and any(regex.search(content) for regex in regexes):
                hints.add(hint)

    if is_test_path(path):
        hints.add(ChangeHint.TEST_CHANGES)
    if is_config_path(path):
        hints.add(ChangeHint.CONFIGURATION)

    return frozenset(hints)
