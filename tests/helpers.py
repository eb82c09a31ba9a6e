"""Skill documents and archive builders shared by the tests."""

import io
import zipfile
from collections.abc import Mapping
from pathlib import Path

VALID_SKILL = """\
---
name: valid-skill
description: A valid test skill for unit testing
license: MIT
compatibility: Requires Python 3.12+
metadata:
  author: test
  version: "1.0"
allowed-tools: Bash Read
---

# Valid Skill

Follow these instructions carefully.
"""

WITH_SCRIPTS_SKILL = """\
---
name: with-scripts
description: A skill that ships helper scripts
---

# With Scripts

Run the helper script.
"""

WITH_ALL_RESOURCES_SKILL = """\
---
name: with-all-resources
description: A skill with scripts, references and assets
---

# All Resources

Use everything.
"""

MISSING_DESCRIPTION_SKILL = """\
---
name: missing-description
---

No description here.
"""

BROKEN_SKILL = """\
---
name: [invalid
description: : bad yaml {{
---

Body content.
"""

WRITE_POEM_COMMAND = """\
---
name: write-poem
description: Write a short poem about a topic
---

Write a poem about the topic given in the arguments.
"""


def write_file(path: Path, content: str) -> Path:
    """Write a text file, creating its parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def skill_document(name: str, description: str, body: str = "Instructions.") -> str:
    """Build a minimal SKILL.md document."""
    return f"---\nname: {name}\ndescription: {description}\n---\n\n{body}\n"


def build_zip(files: Mapping[str, str | bytes]) -> bytes:
    """Build an in-memory zip archive from entry names and contents."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()




def mark_encrypted(data: bytes, name: str) -> bytes:
    """Set the encryption flag of one entry in the central directory."""
    buffer = bytearray(data)
    encoded = name.encode()
    offset = buffer.find(b"PK\x01\x02")
    while offset != -1:
        name_length = int.from_bytes(buffer[offset + 28 : offset + 30], "little")
        if buffer[offset + 46 : offset + 46 + name_length] == encoded:
            buffer[offset + 8] |= 0x01
            break
        offset = buffer.find(b"PK\x01\x02", offset + 4)
    return bytes(buffer)
