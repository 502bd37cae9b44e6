"""JSON parsing and validation utilities for LLM responses.

Contains:
- parse_json_response: Parse raw LLM response as JSON
- validate_commit_draft: Validate parsed JSON as a CommitDraft
- validate_overview: Validate parsed JSON as a ChangesetOverview
"""

import json

from commitgen.formatters import ChangesetOverview, CommitDraft
from commitgen.llm.exceptions import JSONParseError


def parse_json_response(raw_response: str) -> dict:
    """Parse the LLM response as JSON.

    Args:
        raw_response: The raw text response from the LLM.

    Returns:
        The parsed JSON as a dictionary.

    Raises:
        JSONParseError: If parsing fails or the JSON is not an object.
    """
    cleaned = raw_response.strip()

    # Remove markdown code fences if the model included them despite instructions
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    # Keep only the outermost object when there is surrounding text
    first_brace = cleaned.find("{")
    last_brace = cleaned.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        cleaned = cleaned[first_brace:last_brace + 1]

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise JSONParseError(
            f"Failed to parse LLM response as JSON.\n"
            f"Error: {e}\n"
            f"Raw response:\n{raw_response}"
        )

    if not isinstance(parsed, dict):
        raise JSONParseError(f"Expected a JSON object, got: {type(parsed).__name__}")
    return parsed


def _normalize_draft(parsed: dict) -> dict:
    """Accept 'title' for 'subject' and bullet lists for the body."""
    result = dict(parsed)
    if "subject" not in result and "title" in result:
        result["subject"] = result.pop("title")

    body = result.get("body")
    if isinstance(body, list):
        result["body"] = "\n".join(str(line) for line in body)
    return {"subject": result.get("subject"), "body": result.get("body")}


def validate_commit_draft(parsed: dict) -> CommitDraft:
    """Validate parsed JSON against the CommitDraft schema.

    Args:
        parsed: The parsed JSON dictionary.

    Returns:
        A validated CommitDraft.

    Raises:
        JSONParseError: If validation fails.
    """
    try:
        return CommitDraft(**_normalize_draft(parsed))
    except Exception as e:
        raise JSONParseError(
            f"LLM response does not match expected schema.\n"
            f"Error: {e}\n"
            f"Parsed JSON: {parsed}"
        )


def validate_overview(parsed: dict) -> ChangesetOverview:
    """Validate parsed JSON against the ChangesetOverview schema.

    Raises:
        JSONParseError: If validation fails.
    """
    data = dict(parsed)
    if "keyFiles" in data and "key_files" not in data:
        data["key_files"] = data.pop("keyFiles")
    try:
        return ChangesetOverview(**data)
    except Exception as e:
        raise JSONParseError(
            f"LLM overview does not match expected schema.\n"
            f"Error: {e}\n"
            f"Parsed JSON: {parsed}"
        )
