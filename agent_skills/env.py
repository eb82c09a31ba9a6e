from os import getenv
from pathlib import Path

AGENT_SKILLS_PATH = Path(getenv("AGENT_SKILLS_PATH", "app/skills"))
AGENT_SKILLS_MAX_ZIP_ENTRY_SIZE = int(
    getenv("AGENT_SKILLS_MAX_ZIP_ENTRY_SIZE", str(10 * 1024 * 1024))
)
AGENT_SKILLS_MAX_ZIP_TOTAL_SIZE = int(
    getenv("AGENT_SKILLS_MAX_ZIP_TOTAL_SIZE", str(50 * 1024 * 1024))
)
