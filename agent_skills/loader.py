"""Skill loader interface and loader combinators.

Every loader discovers skills from one kind of source and caches the result:
`list` returns the same list object until `reload` is called.

Loaders::

    loader = FilesystemLoader("app/skills")
    loader.list()          # [skill1, skill2, ...]
    loader.find("name")    # Skill or None
    loader.get("name")     # Skill or raises NotFoundError
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Self

from agent_skills.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from agent_skills.models import Skill

logger = logging.getLogger(__name__)


class Loader(ABC):
    """Base class for skill loaders.

    The cache is guarded by a lock. `list` hands out the cached list itself and
    `reload` only drops the reference, so a caller holding a list keeps a
    consistent snapshot while another thread reloads.
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._skills: list[Skill] | None = None
        self._lock = threading.RLock()

    @abstractmethod
    def _load_all(self) -> list[Skill]:
        """Load every skill from the source."""

    def list(self) -> list[Skill]:
        """List all skills from this source."""
        with self._lock:
            if self._skills is None:
                self._skills = self._load_all()
                logger.debug("%r loaded %s skills", self, len(self._skills))
            return self._skills

    def find(self, name: str) -> Skill | None:
        """Find a skill by name, or None."""
        for skill in self.list():
            if skill.name == name:
                return skill
        return None

    def get(self, name: str) -> Skill:
        """Get a skill by name.

        Raises:
            NotFoundError: If no skill has this name.
        """
        skill = self.find(name)
        if skill is None:
            raise NotFoundError(f"Skill not found: {name}")
        return skill

    def exists(self, name: str) -> bool:
        return self.find(name) is not None

    def names(self) -> list[str]:
        return [skill.name or "" for skill in self.list()]

    def reload(self) -> Self:
        """Drop the cache. The next `list` reads the source again."""
        with self._lock:
            self._skills = None
        return self

    def __iter__(self) -> Iterator[Skill]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self.list())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.exists(name)


class CompositeLoader(Loader):
    """Combine several loaders into one source.

    Skills are deduplicated by name and earlier loaders take precedence, so
    per-user skills can be layered over shared defaults.
    """

    def __init__(self, loaders: Iterable[Loader]) -> None:
        """Initialize with the loaders to combine, highest precedence first."""
        super().__init__()
        self.loaders: list[Loader] = list(loaders)

    def __repr__(self) -> str:
        return f"CompositeLoader({self.loaders!r})"

    def reload(self) -> Self:
        """Reload every child loader, then drop the combined cache."""
        for loader in self.loaders:
            loader.reload()
        return super().reload()

    def _load_all(self) -> list[Skill]:
        seen: set[str | None] = set()
        result: list[Skill] = []
        for loader in self.loaders:
            for skill in loader.list():
                if skill.name in seen:
                    logger.debug(
                        "skill %s from %r shadowed by an earlier loader",
                        skill.name,
                        loader,
                    )
                    continue
                seen.add(skill.name)
                result.append(skill)
        return result


class FilteredLoader(Loader):
    """Restrict a loader to an allow-list of skill names.

    Nothing is cached here: the wrapped loader's snapshot is filtered on every
    call, so a reload of the wrapped loader shows through immediately.
    """

    def __init__(self, loader: Loader, only: str | Iterable[str]) -> None:
        """Initialize with the wrapped loader and the allowed names."""
        super().__init__()
        self.loader = loader
        names = [only] if isinstance(only, str) else list(only)
        self.only: list[str] = [str(name) for name in names]

    def __repr__(self) -> str:
        return f"FilteredLoader({self.loader!r}, only={self.only!r})"

    def _allowed(self, name: object) -> bool:
        return str(name) in self.only

    def _load_all(self) -> list[Skill]:
        return [skill for skill in self.loader.list() if self._allowed(skill.name)]

    def list(self) -> list[Skill]:
        return self._load_all()

    def find(self, name: str) -> Skill | None:
        if not self._allowed(name):
            return None
        return self.loader.find(name)

    def get(self, name: str) -> Skill:
        if not self._allowed(name):
            raise NotFoundError(f"Skill not found: {name}")
        return self.loader.get(name)

    def exists(self, name: str) -> bool:
        return self._allowed(name) and self.loader.exists(name)

    def reload(self) -> Self:
        self.loader.reload()
        return self
