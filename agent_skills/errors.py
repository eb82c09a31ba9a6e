"""Errors raised by the skills package."""


class SkillError(Exception):
    """Base error for everything raised by agent_skills."""


class InvalidSkillError(SkillError):
    """Raised when a skill source has an invalid structure."""


class NotFoundError(SkillError):
    """Raised when a requested skill cannot be found."""


class LoadError(SkillError):
    """Raised when loading from a source fails (filesystem, zip, database)."""


class ParseError(SkillError):
    """Raised when YAML front matter is missing or invalid."""
