"""Shared fixtures: skill trees and archives written into tmp_path."""

from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from tests.helpers import (
    BROKEN_SKILL,
    MISSING_DESCRIPTION_SKILL,
    VALID_SKILL,
    WITH_ALL_RESOURCES_SKILL,
    WITH_SCRIPTS_SKILL,
    WRITE_POEM_COMMAND,
    build_zip,
    skill_document,
    write_file,
)


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    """A skills root with directory skills, a command file and broken entries."""
    root = tmp_path / "skills"

    write_file(root / "valid-skill" / "SKILL.md", VALID_SKILL)

    write_file(root / "with-scripts" / "SKILL.md", WITH_SCRIPTS_SKILL)
    write_file(root / "with-scripts" / "scripts" / "helper.rb", "puts 'helper'\n")
    write_file(root / "with-scripts" / "scripts" / "setup.sh", "echo setup\n")
    write_file(root / "with-scripts" / "scripts" / ".keep", "")

    write_file(root / "with-all-resources" / "SKILL.md", WITH_ALL_RESOURCES_SKILL)
    write_file(root / "with-all-resources" / "scripts" / "run.py", "print('run')\n")
    write_file(
        root / "with-all-resources" / "references" / "guide.md", "# Guide\n"
    )
    write_file(
        root / "with-all-resources" / "assets" / "template.txt", "template\n"
    )

    write_file(root / "missing-description" / "SKILL.md", MISSING_DESCRIPTION_SKILL)
    write_file(root / "broken-skill" / "SKILL.md", BROKEN_SKILL)
    (root / "not-a-skill").mkdir()
    write_file(root / "not-a-skill" / "README.md", "Nothing to see.\n")

    write_file(root / "write-poem.md", WRITE_POEM_COMMAND)
    write_file(root / "notes.txt", "not a skill\n")
    return root


@pytest.fixture
def skills_zip(tmp_path: Path) -> Path:
    """An archive with two skills, one of them carrying resources."""
    path = tmp_path / "skills.zip"
    path.write_bytes(
        build_zip(
            {
                "zip-skill/SKILL.md": skill_document(
                    "zip-skill", "A skill from a zip", "# Zip Skill\n\nZipped."
                ),
                "zip-skill/scripts/helper.rb": "puts 'zip'\n",
                "zip-skill/scripts/.gitkeep": "",
                "zip-skill/references/notes.md": "# Notes\n",
                "other-skill/SKILL.md": skill_document(
                    "other-skill", "Another zipped skill"
                ),
                "other-skill/nested/inner/SKILL.md": skill_document(
                    "inner", "Nested skills are ignored"
                ),
                "README.md": "archive readme\n",
            }
        )
    )
    return path


@pytest.fixture
def zip_factory(tmp_path: Path) -> Callable[..., Path]:
    """Write archives from entry mappings into tmp_path."""

    def factory(files: Mapping[str, str | bytes], name: str = "archive.zip") -> Path:
        path = tmp_path / name
        path.write_bytes(build_zip(files))
        return path

    return factory
