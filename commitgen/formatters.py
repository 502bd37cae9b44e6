"""Commit draft models and rendering."""

from typing import Optional

from pydantic import BaseModel, field_validator


class CommitDraft(BaseModel):
    """Pydantic model for a drafted commit message.

    Attributes:
        subject: The commit subject line (imperative mood, <=50 chars recommended).
        body: Optional body explaining the change.
    """

    subject: str
    body: Optional[str] = None

    @field_validator("subject")
    @classmethod
    def subject_must_not_be_empty(cls, v: str) -> str:
        """Ensure subject is not empty."""
        if not v or not v.strip():
            raise ValueError("Subject cannot be empty")
        return v.strip()

    @field_validator("body")
    @classmethod
    def normalize_body(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank body as missing."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def commit_message(self) -> str:
        """The draft as a git commit message."""
        return render_commit_message(self)


class ChangesetOverview(BaseModel):
    """High-level overview of a large change set.

    Attributes:
        summary: Two or three sentences on purpose and scope.
        category: feature, bugfix, refactor, test, docs or chore.
        key_files: Up to five paths central to the change.
    """

    summary: str
    category: str = ""
    key_files: list[str] = []

    @field_validator("summary")
    @classmethod
    def summary_must_not_be_empty(cls, v: str) -> str:
        """Ensure summary is not empty."""
        if not v or not v.strip():
            raise ValueError("Summary cannot be empty")
        return v.strip()

    @field_validator("key_files")
    @classmethod
    def limit_key_files(cls, v: list[str]) -> list[str]:
        """Drop blank entries and keep at most five paths."""
        return [path.strip() for path in v if path and path.strip()][:5]

    def as_context(self) -> str:
        """Render the overview as additional prompt context."""
        details = []
        if self.category:
            details.append(f"category: {self.category}")
        if self.key_files:
            details.append(f"key files: {', '.join(self.key_files)}")
        if details:
            return f"Overview: {self.summary} ({'; '.join(details)})"
        return f"Overview: {self.summary}"


def sanitize_subject(subject: str, max_length: int = 72) -> str:
    """Sanitize and truncate the commit subject to max_length characters.

    Args:
        subject: The raw subject string.
        max_length: Maximum allowed length (default 72 for git best practices).

    Returns:
        A sanitized single-line subject, truncated if necessary.
    """
    # Strip whitespace and take only the first line
    subject = subject.strip().split("\n")[0].strip()

    if len(subject) > max_length:
        subject = subject[: max_length - 3].rstrip() + "..."

    return subject


def render_commit_message(draft: CommitDraft) -> str:
    """Render a CommitDraft into a commit message string.

    Args:
        draft: The drafted commit message.

    Returns:
        The subject, followed by a blank line and the body when present.
    """
    subject = sanitize_subject(draft.subject)
    if draft.body:
        return f"{subject}\n\n{draft.body}"
    return subject
