"""SKILL.md front matter parsing.

A skill document starts with a YAML block between ``---`` lines::

    ---
    name: skill-name
    description: What the skill does
    ---
    # Skill content here

Only safe YAML types are decoded: front matter may come from uploaded archives
or database rows.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from frontmatter import YAMLHandler

from agent_skills.errors import ParseError

if TYPE_CHECKING:
    from os import PathLike


_handler = YAMLHandler()


def _split(content: str) -> tuple[str, str] | None:
    """Split a document into its raw front matter and body, if it has any."""
    if not _handler.detect(content):
        return None
    try:
        front_matter, body = _handler.split(content)
    except ValueError:
        # opening delimiter without a closing one
        return None
    return front_matter, body


def _load_yaml(front_matter: str) -> dict[str, Any]:
    try:
        data = _handler.load(front_matter)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML frontmatter: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(
            f"Invalid YAML frontmatter: expected a mapping, got {type(data).__name__}"
        )
    return {str(key): value for key, value in data.items()}


def parse_file(path: str | PathLike[str]) -> dict[str, Any]:
    """Parse a SKILL.md file and return its front matter.

    Args:
        path: Path to the document.

    Returns:
        The decoded front matter.

    Raises:
        ParseError: If the file cannot be read or its front matter is missing
            or invalid.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ParseError(f"File not found: {path}") from e
    except PermissionError as e:
        raise ParseError(f"Permission denied: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Failed to read {path}: {e}") from e
    return parse_string(content)


def parse_string(content: str) -> dict[str, Any]:
    """Parse SKILL.md content and return its front matter.

    An empty front matter block gives an empty dict.

    Raises:
        ParseError: If the front matter is missing or is not a YAML mapping.
    """
    parts = _split(content)
    if parts is None:
        raise ParseError("Missing YAML frontmatter (must start with ---)")
    return _load_yaml(parts[0])


def extract_body(content: str) -> str:
    """Return the document body without its front matter.

    Never raises. Content without front matter gives an empty string.
    """
    parts = _split(content)
    if parts is None:
        return ""
    return parts[1].strip()


def parse(content: str) -> tuple[dict[str, Any], str]:
    """Parse front matter and body in one pass.

    Raises:
        ParseError: Same conditions as `parse_string`.
    """
    parts = _split(content)
    if parts is None:
        raise ParseError("Missing YAML frontmatter (must start with ---)")
    return _load_yaml(parts[0]), parts[1].strip()
