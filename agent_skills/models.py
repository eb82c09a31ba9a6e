"""Skill data models.

Ref: https://agentskills.io/specification

A skill is disclosed progressively:

* Level 1: metadata (name, description), available as soon as it is loaded.
* Level 2: content, the SKILL.md body, read on first access.
* Level 3: resources (scripts, references, assets), listed on first access.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path, PurePosixPath
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from agent_skills import parser, validator

type ResourceKind = Literal["scripts", "references", "assets"]

RESOURCE_KINDS: tuple[ResourceKind, ...] = ("scripts", "references", "assets")
PLACEHOLDER_FILES = frozenset({".keep", ".gitkeep"})
VIRTUAL_PREFIXES = ("database:", "zip:")
CONTENT_KEY = "__content__"
SKILL_FILE = "SKILL.md"


class Skill:
    """A discoverable skill: metadata plus lazily loaded content and resources.

    `path` is either a skill directory, a single-file command document, or a
    synthetic ``database:<id>`` / ``zip:<archive>:<dir>`` identifier. Skills
    without filesystem resources are virtual.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        metadata: Mapping[str, Any] | None = None,
        content: str | None = None,
        *,
        virtual: bool | None = None,
        resources: Mapping[ResourceKind, Sequence[str]] | None = None,
    ) -> None:
        """Initialize a skill from parsed front matter.

        Args:
            path: Skill directory, document path or virtual identifier.
            metadata: Parsed front matter. The ``__content__`` key may carry a
                pre-extracted body.
            content: Pre-loaded body, takes precedence over everything else.
            virtual: Force the virtual flag. Derived from `path` when omitted.
            resources: Pre-extracted resource lists, relative to the skill.
        """
        self._path = os.fspath(path)
        self._metadata: dict[str, Any] = dict(metadata or {})
        self._initial_content = content
        self._virtual = (
            virtual if virtual is not None else self._path.startswith(VIRTUAL_PREFIXES)
        )
        self._preset_resources: dict[str, list[str]] = {
            kind: sorted(values) for kind, values in (resources or {}).items()
        }

        self._content: str | None = None
        self._resources: dict[str, list[str]] = {}
        self._errors: list[str] | None = None

    def __repr__(self) -> str:
        return f"Skill(name={self.name!r}, path={self._path!r})"

    @property
    def path(self) -> str:
        """Skill directory, document path or virtual identifier."""
        return self._path

    @property
    def metadata(self) -> dict[str, Any]:
        """The raw front matter."""
        return self._metadata

    def _text(self, key: str) -> str | None:
        value = self._metadata.get(key)
        return None if value is None else str(value)

    @property
    def name(self) -> str | None:
        return self._text("name")

    @property
    def description(self) -> str | None:
        return self._text("description")

    @property
    def license(self) -> str | None:
        return self._text("license")

    @property
    def compatibility(self) -> str | None:
        return self._text("compatibility")

    @property
    def custom_metadata(self) -> dict[str, Any]:
        """The free-form ``metadata`` mapping, empty when absent."""
        value = self._metadata.get("metadata")
        return dict(value) if isinstance(value, Mapping) else {}

    @property
    def allowed_tools(self) -> list[str]:
        """Pre-approved tool names from ``allowed-tools`` (experimental)."""
        value = self._metadata.get("allowed-tools", self._metadata.get("allowed_tools"))
        if value is None:
            return []
        if isinstance(value, str):
            return value.split()
        return [str(item) for item in value]

    @property
    def is_virtual(self) -> bool:
        """True when the skill has no skill directory on disk."""
        return self._virtual

    @property
    def is_filesystem(self) -> bool:
        return not self._virtual

    @property
    def skill_md_path(self) -> Path | None:
        """The document the body is read from, if there is one on disk."""
        if self._path.startswith(VIRTUAL_PREFIXES):
            return None
        if self._virtual:
            # single-file command: the path is the document itself
            return Path(self._path)
        return Path(self._path) / SKILL_FILE

    @property
    def content(self) -> str:
        """The skill instructions (body without front matter)."""
        if self._content is None:
            self._content = self._load_content()
        return self._content

    @property
    def scripts(self) -> list[str]:
        return self._get_resources("scripts")

    @property
    def references(self) -> list[str]:
        return self._get_resources("references")

    @property
    def assets(self) -> list[str]:
        return self._get_resources("assets")

    def resource_paths(self) -> list[str]:
        """Every resource, as a path relative to the skill."""
        return [
            self.relative_resource_path(resource)
            for kind in RESOURCE_KINDS
            for resource in self._get_resources(kind)
        ]

    def relative_resource_path(self, resource: str) -> str:
        """Express a resource entry relative to the skill."""
        if self._virtual:
            return resource
        return Path(resource).relative_to(self._path).as_posix()

    @property
    def errors(self) -> list[str]:
        """Validation errors, computed once until `reload`."""
        if self._errors is None:
            self._errors = validator.validate(self)
        return self._errors

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def reload(self) -> Skill:
        """Drop cached content, resources and validation errors."""
        self._content = None
        self._resources = {}
        self._errors = None
        return self

    def _load_content(self) -> str:
        if self._initial_content is not None:
            return self._initial_content
        if (preset := self._metadata.get(CONTENT_KEY)) is not None:
            return str(preset)

        md_path = self.skill_md_path
        if md_path is None or not md_path.is_file():
            return ""
        return parser.extract_body(md_path.read_text(encoding="utf-8"))

    def _get_resources(self, kind: ResourceKind) -> list[str]:
        if kind not in self._resources:
            self._resources[kind] = self._list_resources(kind)
        return self._resources[kind]

    def _list_resources(self, kind: ResourceKind) -> list[str]:
        if kind in self._preset_resources:
            return list(self._preset_resources[kind])
        if self._virtual:
            return []

        resource_dir = Path(self._path) / kind
        if not resource_dir.is_dir():
            return []

        return sorted(
            str(entry)
            for entry in resource_dir.rglob("*")
            if entry.is_file() and entry.name not in PLACEHOLDER_FILES
        )


@runtime_checkable
class SkillRecord(Protocol):
    """A database row that can be turned into a skill.

    Records must expose ``name`` and ``description`` plus either ``content``
    (text storage) or ``data`` (a zip blob). ``id``, ``license``,
    ``compatibility`` and ``metadata`` are picked up when present.
    """

    @property
    def name(self) -> str | None: ...

    @property
    def description(self) -> str | None: ...


@runtime_checkable
class ReloadableRecords(Protocol):
    """A record collection that can refresh itself, like an ORM query set."""

    def reload(self) -> Any: ...


class SkillRecordModel(BaseModel):
    """A ready-made `SkillRecord`, for callers without their own row type."""

    id: int | str | None = None
    name: str
    description: str
    content: str | None = None
    data: bytes | None = None
    license: str | None = None
    compatibility: str | None = None
    metadata: dict[str, Any] | None = Field(default=None)


def is_safe_relative_path(path: object) -> bool:
    """Reject non-strings, NUL bytes, absolute paths and parent-directory segments."""
    if not isinstance(path, str) or not path or "\x00" in path:
        return False
    if path.startswith(("/", "\\")) or os.path.isabs(path):
        return False
    return ".." not in PurePosixPath(path.replace("\\", "/")).parts
