"""Configuration passed to loader constructors and the chat integration."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from agent_skills.env import (
    AGENT_SKILLS_MAX_ZIP_ENTRY_SIZE,
    AGENT_SKILLS_MAX_ZIP_TOTAL_SIZE,
    AGENT_SKILLS_PATH,
)


class SkillsConfig(BaseModel):
    """Skill discovery settings.

    Defaults come from the environment (see `agent_skills.env`), so
    `SkillsConfig()` is what callers get when they pass nothing.
    """

    default_path: Path = Field(
        default=AGENT_SKILLS_PATH,
        description="Directory searched when no skill source is given.",
    )
    max_zip_entry_size: int = Field(
        default=AGENT_SKILLS_MAX_ZIP_ENTRY_SIZE,
        gt=0,
        description="Largest uncompressed size accepted for one archive entry.",
    )
    max_zip_total_size: int = Field(
        default=AGENT_SKILLS_MAX_ZIP_TOTAL_SIZE,
        gt=0,
        description="Largest uncompressed size accepted for a whole archive.",
    )
    max_content_length: int = Field(
        default=100000,
        gt=0,
        description="Skill tool responses longer than this are truncated.",
    )

    model_config = ConfigDict(frozen=True)
