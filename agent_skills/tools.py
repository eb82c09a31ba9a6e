"""The ``skill`` tool exposed to the model.

The tool description lists every available skill (name and description), so
the model can discover them without loading anything. Calling the tool with a
skill name returns its full instructions. Calling it again with a resource path
returns one of the skill's files.
"""

# ruff: noqa: PLR0911

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any
from xml.sax.saxutils import escape

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from agent_skills.models import is_safe_relative_path

if TYPE_CHECKING:
    from collections.abc import Mapping

    from agent_skills.loader import Loader
    from agent_skills.models import Skill

logger = logging.getLogger(__name__)

TOOL_NAME = "skill"
DEFAULT_MAX_CONTENT_LENGTH = 100000

_BASE_DESCRIPTION = "Execute a skill within the main conversation."
_USAGE = (
    "Use this tool when the user's request matches one of the available skills.\n"
    "Call with just command to get the full skill instructions.\n"
    "Call with command and resource to load a specific file "
    "(script, reference, or asset).\n"
    "Pass arguments to forward free-text input, such as the text after a "
    "slash command, to the skill."
)
_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_SECTIONS = (
    ("scripts", "Scripts"),
    ("references", "References"),
    ("assets", "Assets"),
)


class SkillToolInput(BaseModel):
    """Input schema for the skill tool."""

    command: str = Field(description="The skill name (e.g., 'pdf' or 'xlsx').")
    resource: str | None = Field(
        default=None,
        description=(
            "Optional resource path to load "
            "(e.g., 'scripts/helper.py', 'references/guide.md')."
        ),
    )
    arguments: str | None = Field(
        default=None,
        description="Optional free-text arguments passed to the skill.",
    )


def escape_xml(text: str | None) -> str:
    """Escape the five XML special characters."""
    if text is None:
        return ""
    return escape(str(text), _XML_ENTITIES)


def build_skills_xml(skills: list[Skill]) -> str:
    """Render the ``<available_skills>`` block."""
    if not skills:
        return "<available_skills>\nNo skills available.\n</available_skills>"

    lines = ["<available_skills>"]
    for skill in skills:
        lines.append("  <skill>")
        lines.append(f"    <name>{escape_xml(skill.name)}</name>")
        lines.append(f"    <description>{escape_xml(skill.description)}</description>")
        lines.append("  </skill>")
    lines.append("</available_skills>")
    return "\n".join(lines)


class SkillTool:
    """Tool giving the model progressive access to the skills of a loader.

    The tool keeps no state between calls: the description and every response
    are computed from the loader's current list.
    """

    name = TOOL_NAME

    def __init__(
        self, loader: Loader, *, max_content_length: int | None = None
    ) -> None:
        """Initialize the tool.

        Args:
            loader: Any loader (filesystem, zip, database, composite, filtered).
            max_content_length: Skill content longer than this is truncated.
        """
        self.loader = loader
        self.max_content_length = max_content_length or DEFAULT_MAX_CONTENT_LENGTH

    @property
    def description(self) -> str:
        """Tool description with the available skills embedded."""
        return (
            f"{_BASE_DESCRIPTION}\n\n{_USAGE}\n\n"
            f"{build_skills_xml(self.loader.list())}"
        )

    @property
    def parameters(self) -> dict[str, Any]:
        """JSON schema of the tool input."""
        return SkillToolInput.model_json_schema()

    def to_tool_definition(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    def as_langchain_tool(self) -> StructuredTool:
        """Build a LangChain tool with a snapshot of the current description."""
        return StructuredTool.from_function(
            func=self.execute,
            name=self.name,
            description=self.description,
            args_schema=SkillToolInput,
        )

    def call(self, args: Mapping[str, Any]) -> str:
        """Run the tool from a raw argument mapping.

        ``skill_name`` is accepted as an alias of ``command``.
        """
        command = args.get("command") or args.get("skill_name")
        if not command:
            return "Missing required parameter: command"
        return self.execute(
            str(command),
            resource=args.get("resource"),
            arguments=args.get("arguments"),
        )

    def execute(
        self,
        command: str,
        resource: str | None = None,
        arguments: str | None = None,
    ) -> str:
        """Load a skill's instructions, or one of its resources.

        Args:
            command: Name of the skill.
            resource: Optional path of a resource inside the skill.
            arguments: Optional free text echoed with the instructions.

        Returns:
            The skill content, the resource content or an error message.
        """
        skill = self.loader.find(command)
        if skill is None:
            available = ", ".join(s.name or "" for s in self.loader.list())
            return f"Skill '{command}' not found. Available skills: {available or 'none'}"

        if resource:
            return self._load_resource(skill, resource)
        return self._build_skill_response(skill, arguments)

    def _truncate(self, content: str) -> str:
        if len(content) > self.max_content_length:
            return content[: self.max_content_length] + "\n... (truncated)"
        return content

    def _build_skill_response(self, skill: Skill, arguments: str | None) -> str:
        parts = [f"# Skill: {skill.name}", "", self._truncate(skill.content), ""]

        if arguments:
            parts += [f"# Arguments: {arguments}", ""]

        listed: list[str] = []
        for kind, label in _SECTIONS:
            resources = [
                skill.relative_resource_path(r) for r in getattr(skill, kind)
            ]
            if not resources:
                continue
            parts.append(f"## Available {label}")
            parts += [f"- {r}" for r in resources]
            parts.append("")
            listed += resources

        if listed:
            parts += [
                "---",
                "To load a resource, call this tool again with resource parameter.",
                f'Example: command="{skill.name}", resource="{listed[0]}"',
                "",
            ]

        return "\n".join(parts).strip()

    def _load_resource(self, skill: Skill, resource: str) -> str:
        if skill.is_virtual:
            return "Cannot load resources from virtual skills"

        if not is_safe_relative_path(resource):
            return f"Invalid resource path: {resource}"

        root = Path(skill.path)
        full_path = root / resource
        # symlinks must not lead out of the skill directory either
        try:
            inside = full_path.resolve().is_relative_to(root.resolve())
        except (OSError, ValueError, RuntimeError):
            inside = False
        if not inside:
            return f"Invalid resource path: {resource}"

        available = ", ".join(skill.resource_paths()) or "none"
        if not full_path.exists():
            return (
                f"Resource '{resource}' not found in skill '{skill.name}'. "
                f"Available: {available}"
            )
        if not full_path.is_file():
            return f"Resource '{resource}' is not a file. Available: {available}"

        try:
            content = full_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            logger.warning("cannot read resource %s", full_path, exc_info=True)
            return f"Resource '{resource}' could not be read"
        return f"# Resource: {resource}\n\n{self._truncate(content)}"
