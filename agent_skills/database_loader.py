"""Load skills from database records.

Any object satisfying `SkillRecord` works: ORM rows, pydantic models,
dataclasses. Records store the skill either as text (``content``) or as a zip
blob (``data``)::

    loader = DatabaseLoader(session.scalars(select(SkillRow)).all())
    loader = DatabaseLoader([SkillRecordModel(id=1, name="x", ...)])
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from agent_skills.config import SkillsConfig
from agent_skills.errors import InvalidSkillError, LoadError, SkillError
from agent_skills.loader import Loader
from agent_skills.models import CONTENT_KEY, ReloadableRecords, Skill, SkillRecord
from agent_skills.zip_loader import ZipLoader

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class DatabaseLoader(Loader):
    """Loader that builds one virtual skill per record."""

    def __init__(
        self,
        records: Iterable[SkillRecord],
        *,
        config: SkillsConfig | None = None,
    ) -> None:
        """Initialize with a record collection.

        Args:
            records: Any iterable of records. Iterated again on every reload.
            config: Size limits used when unpacking zip blobs.
        """
        super().__init__()
        self.records = records
        self._config = config or SkillsConfig()

    def __repr__(self) -> str:
        return f"DatabaseLoader({type(self.records).__name__})"

    def reload(self) -> Self:
        """Drop the cache and refresh the records if they support it."""
        if isinstance(self.records, ReloadableRecords):
            self.records.reload()
        return super().reload()

    def _load_all(self) -> list[Skill]:
        skills: list[Skill] = []
        for record in self.records:
            try:
                skills.append(self._load_record(record))
            except SkillError as e:
                logger.warning("Failed to load skill from record %r: %s", record, e)
        return skills

    def _load_record(self, record: Any) -> Skill:
        if not isinstance(record, SkillRecord):
            raise InvalidSkillError("Record must have name and description")
        if data := getattr(record, "data", None):
            return self._load_from_binary(record, bytes(data))
        return self._load_from_text(record)

    def _load_from_text(self, record: SkillRecord) -> Skill:
        if not hasattr(record, "content"):
            raise InvalidSkillError("Record must have content or data")

        metadata = _build_metadata(record)
        content = getattr(record, "content", None)
        metadata[CONTENT_KEY] = "" if content is None else str(content)
        return Skill(f"database:{_record_id(record)}", metadata)

    def _load_from_binary(self, record: SkillRecord, data: bytes) -> Skill:
        record_id = _record_id(record)
        archive = ZipLoader.from_bytes(
            data,
            name=f"database:{record_id}",
            max_entry_size=self._config.max_zip_entry_size,
            max_total_size=self._config.max_zip_total_size,
            allow_root_skill=True,
        )
        extracted = archive.list()
        if not extracted:
            raise LoadError("SKILL.md not found in binary data")
        if len(extracted) > 1:
            logger.warning(
                "record %s holds %s skills, using %s",
                record_id,
                len(extracted),
                extracted[0].name,
            )
        source = extracted[0]

        metadata = dict(source.metadata)
        # record columns win over the packed front matter
        for key, value in _build_metadata(record).items():
            if value:
                metadata[key] = value
        return Skill(
            f"database:{record_id}",
            metadata,
            resources={
                "scripts": source.scripts,
                "references": source.references,
                "assets": source.assets,
            },
        )


def _build_metadata(record: SkillRecord) -> dict[str, Any]:
    name = record.name
    description = record.description
    metadata: dict[str, Any] = {
        "name": "" if name is None else str(name),
        "description": "" if description is None else str(description),
    }

    for key in ("license", "compatibility"):
        value = getattr(record, key, None)
        if value is not None:
            metadata[key] = str(value)

    for key in ("skill_metadata", "metadata"):
        value = getattr(record, key, None)
        if isinstance(value, Mapping):
            metadata["metadata"] = dict(value)
            break

    return metadata


def _record_id(record: SkillRecord) -> object:
    if (record_id := getattr(record, "id", None)) is not None:
        return record_id
    if record.name:
        return record.name
    return id(record)
