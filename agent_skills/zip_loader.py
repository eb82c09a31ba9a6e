"""Load skills from a zip archive.

The archive holds skill directories at its top level::

    skills.zip
    ├── skill-one/
    │   ├── SKILL.md
    │   └── scripts/helper.py
    └── skill-two/
        └── SKILL.md

Skills are extracted eagerly (body and resource listings) when the archive is
listed, so they stay usable without reopening it. Every entry read is bounded
by the configured size limits before it is inflated.
"""

from __future__ import annotations

import io
import logging
import os
import zipfile
import zlib
from typing import TYPE_CHECKING

from agent_skills import parser
from agent_skills.env import (
    AGENT_SKILLS_MAX_ZIP_ENTRY_SIZE,
    AGENT_SKILLS_MAX_ZIP_TOTAL_SIZE,
)
from agent_skills.errors import LoadError, ParseError
from agent_skills.loader import Loader
from agent_skills.models import (
    CONTENT_KEY,
    PLACEHOLDER_FILES,
    RESOURCE_KINDS,
    SKILL_FILE,
    ResourceKind,
    Skill,
    is_safe_relative_path,
)

if TYPE_CHECKING:
    from agent_skills.config import SkillsConfig

logger = logging.getLogger(__name__)

# RuntimeError: encrypted entry, NotImplementedError: unsupported compression
_ZIP_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    OSError,
    RuntimeError,
    NotImplementedError,
)
_ENTRY_ERRORS = (ParseError, UnicodeDecodeError, *_ZIP_ERRORS)


class ZipLoader(Loader):
    """Loader for skills packed in a zip archive, on disk or in memory."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        data: bytes | None = None,
        max_entry_size: int | None = None,
        max_total_size: int | None = None,
        allow_root_skill: bool = False,
    ) -> None:
        """Initialize with the archive path.

        Args:
            path: Path to the archive, or a label when `data` is given.
            data: In-memory archive content. Use `from_bytes` instead.
            max_entry_size: Largest uncompressed entry accepted.
            max_total_size: Largest total uncompressed size read per listing.
            allow_root_skill: Also accept a ``SKILL.md`` at the archive root.

        Raises:
            LoadError: If `path` does not exist and no `data` is given.
        """
        super().__init__()
        self.path = os.fspath(path)
        self._data = data
        self.max_entry_size = max_entry_size or AGENT_SKILLS_MAX_ZIP_ENTRY_SIZE
        self.max_total_size = max_total_size or AGENT_SKILLS_MAX_ZIP_TOTAL_SIZE
        self.allow_root_skill = allow_root_skill
        if data is None and not os.path.exists(self.path):
            raise LoadError(f"Zip file not found: {self.path}")

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        name: str = "<memory>",
        max_entry_size: int | None = None,
        max_total_size: int | None = None,
        allow_root_skill: bool = False,
    ) -> ZipLoader:
        """Create a loader over an in-memory archive."""
        return cls(
            name,
            data=bytes(data),
            max_entry_size=max_entry_size,
            max_total_size=max_total_size,
            allow_root_skill=allow_root_skill,
        )

    @classmethod
    def from_config(
        cls, path: str | os.PathLike[str], config: SkillsConfig
    ) -> ZipLoader:
        return cls(
            path,
            max_entry_size=config.max_zip_entry_size,
            max_total_size=config.max_zip_total_size,
        )

    def __repr__(self) -> str:
        return f"ZipLoader({self.path!r})"

    def read_file(self, skill_name: str, relative_path: str) -> bytes | None:
        """Read a file inside a skill's directory.

        Args:
            skill_name: Directory name of the skill in the archive.
            relative_path: Path relative to the skill directory.

        Returns:
            The raw entry content, or None if it is missing, unsafe or the
            archive cannot be read.

        Raises:
            LoadError: If the entry is larger than the size limit.
        """
        if not is_safe_relative_path(relative_path):
            return None
        entry_path = f"{skill_name}/{relative_path}" if skill_name else relative_path
        try:
            with self._open() as archive:
                try:
                    info = archive.getinfo(entry_path)
                except KeyError:
                    return None
                if info.is_dir():
                    return None
                return self._read_entry(archive, info)
        except _ZIP_ERRORS:
            logger.debug("cannot read %s from %s", entry_path, self.path, exc_info=True)
            return None

    def _open(self) -> zipfile.ZipFile:
        if self._data is not None:
            return zipfile.ZipFile(io.BytesIO(self._data))
        return zipfile.ZipFile(self.path)

    def _read_entry(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
        if info.file_size > self.max_entry_size:
            raise LoadError(
                f"Zip entry {info.filename} exceeds size limit "
                f"of {self.max_entry_size} bytes"
            )
        # declared sizes can lie, so the read itself is bounded too
        with archive.open(info) as f:
            content = f.read(self.max_entry_size + 1)
        if len(content) > self.max_entry_size:
            raise LoadError(
                f"Zip entry {info.filename} exceeds size limit "
                f"of {self.max_entry_size} bytes"
            )
        return content

    def _load_all(self) -> list[Skill]:
        skills: list[Skill] = []
        try:
            with self._open() as archive:
                entries = archive.infolist()
                budget = self.max_total_size
                for skill_dir in self._find_skill_directories(entries):
                    info = archive.getinfo(_join(skill_dir, SKILL_FILE))
                    budget -= info.file_size
                    if budget < 0:
                        raise LoadError(
                            f"Zip archive {self.path} exceeds size limit "
                            f"of {self.max_total_size} bytes"
                        )
                    skill = self._load_skill(archive, entries, skill_dir, info)
                    if skill is not None:
                        skills.append(skill)
        except _ZIP_ERRORS as e:
            raise LoadError(f"Failed to read zip archive: {e}") from e
        return skills

    def _find_skill_directories(self, entries: list[zipfile.ZipInfo]) -> list[str]:
        dirs: set[str] = set()
        for entry in entries:
            if entry.is_dir():
                continue
            if entry.filename == SKILL_FILE and self.allow_root_skill:
                dirs.add("")
                continue
            head, sep, tail = entry.filename.partition("/")
            # only <dir>/SKILL.md, nested skills are ignored
            if sep and tail == SKILL_FILE and head:
                dirs.add(head)
        return sorted(dirs)

    def _load_skill(
        self,
        archive: zipfile.ZipFile,
        entries: list[zipfile.ZipInfo],
        skill_dir: str,
        info: zipfile.ZipInfo,
    ) -> Skill | None:
        try:
            document = self._read_entry(archive, info).decode("utf-8")
            metadata, body = parser.parse(document)
        except _ENTRY_ERRORS as e:
            logger.warning("Failed to load %s in %s: %s", info.filename, self.path, e)
            return None

        metadata[CONTENT_KEY] = body
        resources = {
            kind: self._list_resources(entries, skill_dir, kind)
            for kind in RESOURCE_KINDS
        }
        return Skill(f"zip:{self.path}:{skill_dir}", metadata, resources=resources)

    def _list_resources(
        self, entries: list[zipfile.ZipInfo], skill_dir: str, kind: ResourceKind
    ) -> list[str]:
        skill_prefix = _join(skill_dir, "")
        prefix = _join(skill_dir, f"{kind}/")
        return sorted(
            entry.filename.removeprefix(skill_prefix)
            for entry in entries
            if entry.filename.startswith(prefix)
            and not entry.is_dir()
            and entry.filename.rsplit("/", 1)[-1] not in PLACEHOLDER_FILES
        )


def _join(skill_dir: str, name: str) -> str:
    return f"{skill_dir}/{name}" if skill_dir else name
