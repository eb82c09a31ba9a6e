"""Tests for the Skill model."""

from pathlib import Path

from agent_skills.models import (
    Skill,
    SkillRecord,
    SkillRecordModel,
    is_safe_relative_path,
)
from agent_skills.parser import parse_file
from tests.helpers import skill_document, write_file


def _load(skill_dir: Path) -> Skill:
    return Skill(skill_dir, parse_file(skill_dir / "SKILL.md"))


class TestSkillMetadata:
    """Tests for level 1 metadata accessors."""

    def test_metadata_properties(self, skills_dir: Path) -> None:
        """Test the standard front matter fields."""
        skill = _load(skills_dir / "valid-skill")

        assert skill.name == "valid-skill"
        assert skill.description == "A valid test skill for unit testing"
        assert skill.license == "MIT"
        assert skill.compatibility == "Requires Python 3.12+"
        assert skill.custom_metadata == {"author": "test", "version": "1.0"}
        assert skill.allowed_tools == ["Bash", "Read"]

    def test_optional_fields_absent(self) -> None:
        """Test defaults when optional fields are missing."""
        skill = Skill("database:1", {"name": "x", "description": "y"})

        assert skill.license is None
        assert skill.compatibility is None
        assert skill.custom_metadata == {}
        assert skill.allowed_tools == []

    def test_allowed_tools_list(self) -> None:
        """Test that allowed tools may be given as a YAML list."""
        skill = Skill("database:1", {"name": "x", "allowed_tools": ["Bash", "Grep"]})

        assert skill.allowed_tools == ["Bash", "Grep"]

    def test_virtual_paths(self) -> None:
        """Test that database and zip identifiers are virtual."""
        for path in ("database:1", "zip:skills.zip:pdf"):
            skill = Skill(path, {"name": "x"})
            assert skill.is_virtual
            assert not skill.is_filesystem
            assert skill.skill_md_path is None

    def test_directory_path_is_filesystem(self, skills_dir: Path) -> None:
        """Test that a directory skill is filesystem backed."""
        skill = _load(skills_dir / "valid-skill")

        assert skill.is_filesystem
        assert skill.skill_md_path == skills_dir / "valid-skill" / "SKILL.md"
        assert skill.is_valid


class TestSkillContent:
    """Tests for level 2 content loading."""

    def test_content_read_lazily(self, tmp_path: Path) -> None:
        """Test that the body is read on first access and cached."""
        skill_dir = tmp_path / "lazy"
        write_file(skill_dir / "SKILL.md", skill_document("lazy", "d", "First."))
        skill = _load(skill_dir)

        write_file(skill_dir / "SKILL.md", skill_document("lazy", "d", "Second."))
        assert skill.content == "Second."

        write_file(skill_dir / "SKILL.md", skill_document("lazy", "d", "Third."))
        assert skill.content == "Second."
        assert skill.reload().content == "Third."

    def test_explicit_content_wins(self, skills_dir: Path) -> None:
        """Test the content precedence order."""
        metadata = {"name": "valid-skill", "__content__": "from metadata"}

        explicit = Skill(skills_dir / "valid-skill", metadata, "explicit")
        from_metadata = Skill(skills_dir / "valid-skill", metadata)

        assert explicit.content == "explicit"
        assert explicit.reload().content == "explicit"
        assert from_metadata.content == "from metadata"

    def test_virtual_without_content(self) -> None:
        """Test that a virtual skill with no body gives an empty string."""
        assert Skill("database:7", {"name": "x"}).content == ""

    def test_single_file_content(self, skills_dir: Path) -> None:
        """Test that a command document is its own body source."""
        path = skills_dir / "write-poem.md"
        skill = Skill(path, parse_file(path), virtual=True)

        assert skill.skill_md_path == path
        assert skill.content == "Write a poem about the topic given in the arguments."


class TestSkillResources:
    """Tests for level 3 resource listings."""

    def test_scripts_sorted_without_placeholders(self, skills_dir: Path) -> None:
        """Test that resources are sorted and placeholder files are skipped."""
        skill = _load(skills_dir / "with-scripts")

        assert skill.scripts == [
            str(skills_dir / "with-scripts" / "scripts" / "helper.rb"),
            str(skills_dir / "with-scripts" / "scripts" / "setup.sh"),
        ]
        assert skill.references == []
        assert skill.assets == []

    def test_nested_resources(self, tmp_path: Path) -> None:
        """Test that resource directories are walked recursively."""
        skill_dir = tmp_path / "nested"
        write_file(skill_dir / "SKILL.md", skill_document("nested", "d"))
        write_file(skill_dir / "references" / "api" / "v1.md", "v1")
        write_file(skill_dir / "references" / "intro.md", "intro")
        (skill_dir / "references" / "empty").mkdir()

        skill = _load(skill_dir)

        assert skill.resource_paths() == ["references/api/v1.md", "references/intro.md"]

    def test_resource_paths_relative(self, skills_dir: Path) -> None:
        """Test that every resource kind is listed relative to the skill."""
        skill = _load(skills_dir / "with-all-resources")

        assert skill.resource_paths() == [
            "scripts/run.py",
            "references/guide.md",
            "assets/template.txt",
        ]

    def test_virtual_skill_has_no_resources(self, skills_dir: Path) -> None:
        """Test that a virtual skill never scans the disk."""
        skill = Skill(skills_dir / "with-scripts", {"name": "x"}, virtual=True)

        assert skill.scripts == []

    def test_preset_resources(self) -> None:
        """Test resource lists handed over by a loader."""
        skill = Skill(
            "zip:a.zip:x",
            {"name": "x"},
            resources={"scripts": ["scripts/b.sh", "scripts/a.sh"]},
        )

        assert skill.scripts == ["scripts/a.sh", "scripts/b.sh"]
        assert skill.assets == []
        assert skill.resource_paths() == ["scripts/a.sh", "scripts/b.sh"]

    def test_reload_rescans_resources(self, tmp_path: Path) -> None:
        """Test that reload drops the cached listings."""
        skill_dir = tmp_path / "grow"
        write_file(skill_dir / "SKILL.md", skill_document("grow", "d"))
        skill = _load(skill_dir)
        assert skill.assets == []

        write_file(skill_dir / "assets" / "logo.svg", "<svg/>")

        assert skill.assets == []
        assert skill.reload().assets == [str(skill_dir / "assets" / "logo.svg")]


class TestSkillErrors:
    """Tests for cached validation."""

    def test_errors_cached_until_reload(self) -> None:
        """Test that validation results are memoized."""
        skill = Skill("database:1", {"name": "x"})
        assert skill.errors == ["description is required"]

        skill.metadata["description"] = "now described"
        assert not skill.is_valid
        assert skill.reload().is_valid


class TestRecords:
    """Tests for the record protocol and path safety helper."""

    def test_record_model_is_a_skill_record(self) -> None:
        """Test that the bundled record model satisfies the protocol."""
        record = SkillRecordModel(id=1, name="x", description="y", content="z")

        assert isinstance(record, SkillRecord)
        assert not isinstance(object(), SkillRecord)

    def test_safe_relative_paths(self) -> None:
        """Test the traversal and absolute path checks."""
        assert is_safe_relative_path("scripts/run.py")
        assert not is_safe_relative_path("")
        assert not is_safe_relative_path("/etc/passwd")
        assert not is_safe_relative_path("\\windows\\system32")
        assert not is_safe_relative_path("../secret")
        assert not is_safe_relative_path("scripts/../../secret")
        assert not is_safe_relative_path("scripts\\..\\..\\secret")
        assert not is_safe_relative_path("scripts/a\x00b")
        assert not is_safe_relative_path(5)
        assert not is_safe_relative_path(None)
