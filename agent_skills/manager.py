"""Wire skill sources into a chat or agent.

A skill source is a directory path, a zip path, a loader, or a collection of
database records. Any mix of them resolves to one loader, and the loader backs
one ``skill`` tool::

    chat = with_skills(chat, "app/skills", "shared.zip", only=["pdf-report"])

    manager = SkillManager("app/skills")
    agent_tools = manager.get_tools()
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from agent_skills.config import SkillsConfig
from agent_skills.database_loader import DatabaseLoader
from agent_skills.errors import InvalidSkillError
from agent_skills.filesystem_loader import FilesystemLoader
from agent_skills.loader import CompositeLoader, FilteredLoader, Loader
from agent_skills.models import SkillRecord
from agent_skills.tools import SkillTool
from agent_skills.zip_loader import ZipLoader

if TYPE_CHECKING:
    from langchain_core.tools import BaseTool

    from agent_skills.models import Skill

logger = logging.getLogger(__name__)

type SkillSource = str | os.PathLike[str] | Loader | Iterable[SkillRecord]


@runtime_checkable
class ToolHost(Protocol):
    """Anything a tool can be registered on."""

    def with_tool(self, tool: Any) -> Any: ...


def to_loader(source: SkillSource, *, config: SkillsConfig | None = None) -> Loader:
    """Turn one skill source into a loader.

    Args:
        source: A loader, a path (``.zip`` files become a `ZipLoader`, anything
            else a `FilesystemLoader`) or an iterable of records.
        config: Size limits for zip sources.

    Raises:
        InvalidSkillError: If the source is none of the above.
    """
    config = config or SkillsConfig()
    if isinstance(source, Loader):
        return source
    if isinstance(source, str | os.PathLike):
        path = os.fspath(source)
        if path.lower().endswith(".zip"):
            return ZipLoader.from_config(path, config)
        return FilesystemLoader(path)
    if isinstance(source, Iterable) and not isinstance(source, bytes | bytearray):
        return DatabaseLoader(source, config=config)
    raise InvalidSkillError(f"Unsupported skill source: {type(source).__name__}")


def resolve_loader(
    *sources: SkillSource,
    only: str | Iterable[str] | None = None,
    config: SkillsConfig | None = None,
) -> Loader:
    """Resolve any number of sources into a single loader.

    With no source the configured default path is used. Several sources are
    composed, earlier ones taking precedence. ``only`` restricts the result to
    the named skills.
    """
    config = config or SkillsConfig()
    if not sources:
        loader: Loader = FilesystemLoader(config.default_path)
    elif len(sources) == 1:
        loader = to_loader(sources[0], config=config)
    else:
        loader = CompositeLoader(to_loader(s, config=config) for s in sources)

    if only is not None:
        loader = FilteredLoader(loader, only)
    return loader


def with_skills[T: ToolHost](
    chat: T,
    *sources: SkillSource,
    only: str | Iterable[str] | None = None,
    config: SkillsConfig | None = None,
) -> T:
    """Register a skill tool for the given sources on a chat.

    Returns:
        The same chat, for chaining.
    """
    config = config or SkillsConfig()
    loader = resolve_loader(*sources, only=only, config=config)
    chat.with_tool(SkillTool(loader, max_content_length=config.max_content_length))
    logger.debug("registered skill tool on %r with %r", chat, loader)
    return chat


def apply_skills[T: ToolHost](
    chat: T,
    sources: Any,
    *,
    only: str | Iterable[str] | None = None,
    runtime: Any = None,
    config: SkillsConfig | None = None,
) -> T:
    """Apply an agent's declared skill sources to a chat.

    Args:
        chat: The chat to register the tool on.
        sources: One source, a list or tuple of sources, None, or a callable
            taking ``runtime`` and returning any of these.
        only: Optional allow-list of skill names.
        runtime: Context handed to a callable ``sources``.
        config: Skill settings.

    Returns:
        The chat. Nothing is registered when the sources resolve to None.
    """
    if callable(sources) and not isinstance(sources, Loader):
        sources = sources(runtime)
    if sources is None:
        return chat
    return with_skills(chat, *_as_sources(sources), only=only, config=config)


def _as_sources(value: Any) -> list[SkillSource]:
    # a list of paths or loaders is several sources, a list of records is one
    if isinstance(value, list | tuple) and all(
        isinstance(v, str | os.PathLike | Loader) for v in value
    ):
        return list(value)
    return [value]


class SkillManager:
    """Manager for listing skills and building the skill tool."""

    def __init__(
        self,
        *sources: SkillSource,
        only: str | Iterable[str] | None = None,
        config: SkillsConfig | None = None,
    ) -> None:
        """Initialize the skill manager.

        Args:
            sources: Skill sources. The configured default path if empty.
            only: Optional allow-list of skill names.
            config: Skill settings.
        """
        self._config = config or SkillsConfig()
        self._loader = resolve_loader(*sources, only=only, config=self._config)

    @property
    def loader(self) -> Loader:
        """Return the resolved loader."""
        return self._loader

    def refresh(self) -> None:
        """Reload skills."""
        self._loader.reload()
        logger.debug("refresh found %s skills in %r", len(self._loader), self._loader)

    def list_skills(self) -> list[Skill]:
        """List all available skills."""
        return list(self._loader.list())

    def get_skill(self, name: str) -> Skill | None:
        """Get a skill by name."""
        return self._loader.find(name)

    def tool(self, loader: Loader | None = None) -> SkillTool:
        return SkillTool(
            self._loader if loader is None else loader,
            max_content_length=self._config.max_content_length,
        )

    def get_tools(self, skill_names: list[str] | None = None) -> list[BaseTool]:
        """Transform skills into tools.

        Args:
            skill_names: Optional list of skill names to include.
                         If None, all skills are included.
        """
        loader = self._loader
        if skill_names is not None:
            loader = FilteredLoader(loader, skill_names)
        return [self.tool(loader).as_langchain_tool()]
