"""Template Loader - fallback answers loaded from YAML.

Each agent owns one file ``templates/<agent-id>.yaml`` mapping intent tags to
canned content. The first intent (in file order) whose keywords occur in the
message wins; ``general`` is mandatory and used when nothing matches.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from advisor.models import Attachment, QuickAction
from advisor.utils.exceptions import TemplateLoadError
from advisor.utils.text import contains_any, normalize

TEMPLATES_DIR = Path(__file__).parent / "templates"

GENERAL_INTENT = "general"
MAX_TEMPLATE_ATTACHMENTS = 4


class IntentTemplate(BaseModel):
    """Canned answer for one intent."""

    keywords: list[str] = Field(default_factory=list, description="Trigger words/phrases")
    content: str = Field(..., min_length=1, description="Answer text (markdown)")
    confidence: float = Field(..., ge=0.7, le=0.95, description="Configured confidence")
    attachments: list[Attachment] = Field(default_factory=list)
    quick_actions: list[QuickAction] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @field_validator("attachments")
    @classmethod
    def validate_attachments(cls, v: list[Attachment]) -> list[Attachment]:
        if len(v) > MAX_TEMPLATE_ATTACHMENTS:
            raise ValueError(f"At most {MAX_TEMPLATE_ATTACHMENTS} attachments per intent")
        return v

    def matches(self, message: str) -> bool:
        return contains_any(normalize(message), self.keywords)


class AgentTemplates(BaseModel):
    """All intents of one agent, in file order."""

    agent_id: str = Field(..., description="Owning agent id")
    intents: dict[str, IntentTemplate] = Field(..., description="Intent tag -> template")

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def require_general(self) -> "AgentTemplates":
        if GENERAL_INTENT not in self.intents:
            raise ValueError(f"Templates for {self.agent_id} lack a '{GENERAL_INTENT}' intent")
        return self

    @property
    def general(self) -> IntentTemplate:
        return self.intents[GENERAL_INTENT]

    def select(self, message: str) -> tuple[str, IntentTemplate]:
        """Pick the template for a message.

        Args:
            message: The user message.

        Returns:
            Tuple of (intent tag, template).
        """
        for intent, template in self.intents.items():
            if intent != GENERAL_INTENT and template.matches(message):
                return intent, template
        return GENERAL_INTENT, self.general


class TemplateLoader:
    """Loads and caches agent templates from a directory."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self._directory = Path(directory) if directory else TEMPLATES_DIR
        self._cache: dict[str, AgentTemplates] = {}

    @property
    def directory(self) -> Path:
        return self._directory

    def load(self, agent_id: str) -> AgentTemplates:
        """Load the templates of one agent, cached after the first read.

        Raises:
            TemplateLoadError: If the file is missing or invalid.
        """
        if agent_id not in self._cache:
            templates = self.load_from_yaml(self._directory / f"{agent_id}.yaml")
            if templates.agent_id != agent_id:
                raise TemplateLoadError(
                    f"Template file declares agent_id '{templates.agent_id}', expected '{agent_id}'",
                    str(self._directory / f"{agent_id}.yaml"),
                )
            self._cache[agent_id] = templates
        return self._cache[agent_id]

    def load_from_yaml(self, path: str | Path) -> AgentTemplates:
        """Load templates from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            The parsed templates.

        Raises:
            TemplateLoadError: If the file cannot be read or is invalid.
        """
        path = Path(path)

        if not path.is_file():
            raise TemplateLoadError("Template file not found", str(path))

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TemplateLoadError(f"Invalid YAML: {e}", str(path)) from e
        except OSError as e:
            raise TemplateLoadError(f"Cannot read file: {e}", str(path)) from e

        if not data:
            raise TemplateLoadError("Empty template file", str(path))

        return self.parse(data, source_path=str(path))

    @staticmethod
    def parse(data: dict[str, Any], source_path: str | None = None) -> AgentTemplates:
        """Validate a template mapping.

        Raises:
            TemplateLoadError: If the mapping does not match the schema.
        """
        try:
            return AgentTemplates.model_validate(data)
        except ValidationError as e:
            raise TemplateLoadError(f"Invalid templates: {e}", source_path) from e

    def load_all(self) -> dict[str, AgentTemplates]:
        """Load every template file in the directory."""
        for path in sorted(self._directory.glob("*.yaml")):
            self.load(path.stem)
        return dict(self._cache)

    def clear(self) -> None:
        self._cache.clear()


_default_loader: TemplateLoader | None = None


def get_template_loader() -> TemplateLoader:
    """Process-wide loader for the packaged templates."""
    global _default_loader
    if _default_loader is None:
        _default_loader = TemplateLoader()
    return _default_loader
