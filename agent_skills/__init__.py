"""Agent skills: discoverable, progressively loaded instructions for LLM agents.

Example::

    import agent_skills

    loader = agent_skills.compose(
        agent_skills.from_directory("app/skills"),
        agent_skills.from_zip("shared.zip"),
    )
    tool = agent_skills.SkillTool(loader)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from agent_skills import parser
from agent_skills.config import SkillsConfig
from agent_skills.database_loader import DatabaseLoader
from agent_skills.errors import (
    InvalidSkillError,
    LoadError,
    NotFoundError,
    ParseError,
    SkillError,
)
from agent_skills.filesystem_loader import FilesystemLoader
from agent_skills.loader import CompositeLoader, FilteredLoader, Loader
from agent_skills.manager import (
    SkillManager,
    SkillSource,
    ToolHost,
    apply_skills,
    resolve_loader,
    to_loader,
    with_skills,
)
from agent_skills.models import SKILL_FILE, Skill, SkillRecord, SkillRecordModel
from agent_skills.tools import SkillTool, SkillToolInput
from agent_skills.zip_loader import ZipLoader

if TYPE_CHECKING:
    from collections.abc import Iterable

__version__ = "0.1.0"


def from_directory(
    path: str | os.PathLike[str] | None = None,
    *,
    config: SkillsConfig | None = None,
) -> FilesystemLoader:
    """Load skills from a directory, the configured default path if omitted."""
    if path is None:
        path = (config or SkillsConfig()).default_path
    return FilesystemLoader(path)


def from_zip(
    path: str | os.PathLike[str], *, config: SkillsConfig | None = None
) -> ZipLoader:
    """Load skills from a zip archive."""
    return ZipLoader.from_config(path, config or SkillsConfig())


def from_database(
    records: Iterable[SkillRecord], *, config: SkillsConfig | None = None
) -> DatabaseLoader:
    """Load skills from database records."""
    return DatabaseLoader(records, config=config)


def compose(*loaders: Loader) -> CompositeLoader:
    """Combine loaders, earlier ones taking precedence."""
    return CompositeLoader(loaders)


def load_skill(path: str | os.PathLike[str]) -> Skill:
    """Load a single skill from its directory.

    Raises:
        LoadError: If the directory has no SKILL.md.
        ParseError: If the SKILL.md front matter is invalid.
    """
    skill_file = Path(path) / SKILL_FILE
    if not skill_file.is_file():
        raise LoadError(f"SKILL.md not found in {os.fspath(path)}")
    return Skill(path, parser.parse_file(skill_file))


__all__ = [
    "CompositeLoader",
    "DatabaseLoader",
    "FilesystemLoader",
    "FilteredLoader",
    "InvalidSkillError",
    "LoadError",
    "Loader",
    "NotFoundError",
    "ParseError",
    "Skill",
    "SkillError",
    "SkillManager",
    "SkillRecord",
    "SkillRecordModel",
    "SkillSource",
    "SkillTool",
    "SkillToolInput",
    "SkillsConfig",
    "ToolHost",
    "ZipLoader",
    "apply_skills",
    "compose",
    "from_database",
    "from_directory",
    "from_zip",
    "load_skill",
    "resolve_loader",
    "to_loader",
    "with_skills",
]
