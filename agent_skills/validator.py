"""Skill validation against the Agent Skills specification.

Ref: https://agentskills.io/specification

Every rule runs and contributes its own message, so callers see all problems
at once rather than the first one.
"""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agent_skills.models import Skill

NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 1024
LICENSE_MAX_LENGTH = 128
COMPATIBILITY_MAX_LENGTH = 500
NAME_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def validate(skill: Skill) -> list[str]:
    """Validate a skill and return every error found.

    Args:
        skill: The skill to check.

    Returns:
        Error messages, empty when the skill is valid.
    """
    errors: list[str] = []
    _validate_name(skill, errors)
    _validate_description(skill, errors)
    _validate_max_length("license", skill.license, LICENSE_MAX_LENGTH, errors)
    _validate_max_length(
        "compatibility", skill.compatibility, COMPATIBILITY_MAX_LENGTH, errors
    )
    _validate_path_name_match(skill, errors)
    return errors


def is_valid(skill: Skill) -> bool:
    """Check if a skill passes validation."""
    return not validate(skill)


def _validate_name(skill: Skill, errors: list[str]) -> None:
    name = skill.name
    if not name:
        errors.append("name is required")
        return

    if len(name) > NAME_MAX_LENGTH:
        errors.append(
            f"name exceeds maximum length of {NAME_MAX_LENGTH} characters"
        )

    # fullmatch so a trailing newline is not accepted
    if not NAME_PATTERN.fullmatch(name):
        errors.append(
            "name must be lowercase letters, numbers, and single hyphens "
            "(no leading/trailing hyphens)"
        )


def _validate_description(skill: Skill, errors: list[str]) -> None:
    description = skill.description
    if not description:
        errors.append("description is required")
        return

    if len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            f"description exceeds maximum length of {DESCRIPTION_MAX_LENGTH} characters"
        )


def _validate_max_length(
    field: str, value: str | None, limit: int, errors: list[str]
) -> None:
    if not value:
        return
    if len(value) > limit:
        errors.append(f"{field} exceeds maximum length of {limit} characters")


def _validate_path_name_match(skill: Skill, errors: list[str]) -> None:
    if skill.is_virtual:
        return

    dir_name = PurePath(skill.path).name
    if skill.name == dir_name:
        return

    errors.append(f"name '{skill.name}' does not match directory name '{dir_name}'")
