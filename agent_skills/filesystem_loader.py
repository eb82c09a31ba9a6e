"""Load skills from a directory.

Two layouts are recognised::

    app/skills/
    ├── pdf-report/          directory skill
    │   ├── SKILL.md
    │   └── scripts/
    └── write-poem.md        single-file command (virtual, no resources)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from agent_skills import parser
from agent_skills.errors import ParseError
from agent_skills.loader import Loader
from agent_skills.models import SKILL_FILE, Skill

logger = logging.getLogger(__name__)


class FilesystemLoader(Loader):
    """Loader for skill directories and single-file commands under one root."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Initialize with the skills root directory.

        Args:
            path: Directory to scan. It does not need to exist.
        """
        super().__init__()
        self.path = os.fspath(path)

    def __repr__(self) -> str:
        return f"FilesystemLoader({self.path!r})"

    def _load_all(self) -> list[Skill]:
        root = Path(self.path)
        if not root.is_dir():
            logger.debug("skill dir not found: %s", root)
            return []

        try:
            entries = sorted(root.iterdir())
        except OSError:
            logger.warning("cannot read skill dir: %s", root, exc_info=True)
            return []

        directory_skills = [
            skill
            for entry in entries
            if entry.is_dir() and (skill := self._load_directory_skill(entry))
        ]
        single_file_skills = [
            skill
            for entry in entries
            if entry.is_file()
            and entry.suffix == ".md"
            and (skill := self._load_single_file_skill(entry))
        ]
        return directory_skills + single_file_skills

    def _load_directory_skill(self, skill_dir: Path) -> Skill | None:
        skill_file = skill_dir / SKILL_FILE
        if not skill_file.is_file():
            return None

        try:
            metadata = parser.parse_file(skill_file)
        except ParseError as e:
            logger.warning("Failed to parse %s: %s", skill_file, e)
            return None
        return Skill(skill_dir, metadata)

    def _load_single_file_skill(self, md_path: Path) -> Skill | None:
        try:
            metadata = parser.parse_file(md_path)
        except ParseError as e:
            logger.warning("Failed to parse %s: %s", md_path, e)
            return None
        return Skill(md_path, metadata, virtual=True)
