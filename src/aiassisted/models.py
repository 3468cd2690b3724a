"""Pydantic models for ai-assisted."""

from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CANONICAL_LOGS = (
    "PROJECT_DECISIONS.md",
    "LESSONS_LEARNED.md",
    "FUTURE_CONSIDERATIONS.md",
)
STATE_FILE_NAME = ".ai_state"

# log kind -> canonical file
LOG_FILES = {
    "decision": "PROJECT_DECISIONS.md",
    "lesson": "LESSONS_LEARNED.md",
    "suggestion": "FUTURE_CONSIDERATIONS.md",
}

SYNCED_ROOT_FILES = ("AGENTS.md", "Claude.md")


class SessionState(BaseModel):
    """The .ai_state session record.

    Unknown keys written by other assistants are kept on rewrite.
    """

    model_config = ConfigDict(extra="allow")

    session_start: Optional[datetime] = None
    current_focus: str = ""
    modified_files: list[str] = Field(default_factory=list)
    pending_tasks: list[str] = Field(default_factory=list)
    completed: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    blockers: list[str] = Field(default_factory=list)
    last_checkpoint: Optional[datetime] = None

    @field_validator("session_start", "last_checkpoint", mode="before")
    @classmethod
    def blank_timestamp_is_none(cls, value):
        """Templates seed the timestamps as empty strings."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def list_fields(cls) -> list[str]:
        """Names of the list-valued fields."""
        return [
            "modified_files",
            "pending_tasks",
            "completed",
            "next_steps",
            "blockers",
        ]


class RegistryEntry(BaseModel):
    """A rule listed in registry.yaml."""

    path: str
    id: Optional[str] = None
    version: Optional[str] = None
    flags: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class RuleFrontMatter(BaseModel):
    """Metadata from the leading --- block of a rule file."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    globs: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class LogEntry(BaseModel):
    """An entry appended to one of the canonical Markdown logs."""

    kind: str
    title: str
    body: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_markdown(self) -> str:
        """Render as a Markdown section."""
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M")
        md = f"\n## [{stamp}] {self.title}\n"
        if self.body.strip():
            md += f"\n{self.body.strip()}\n"
        return md


class AssistConfig(BaseModel):
    """Configuration for ai-assisted operations."""

    repo_root: Path
    assist_dir_name: str = ".ai-assisted"
    force: bool = False
    header_scan_lines: int = 10
    lock_timeout: float = 10.0

    @property
    def assist_path(self) -> Path:
        """Get the path to the .ai-assisted directory."""
        return self.repo_root / self.assist_dir_name

    @property
    def registry_path(self) -> Path:
        return self.rules_path / "registry.yaml"

    @property
    def rules_path(self) -> Path:
        return self.assist_path / "rules"

    @property
    def templates_path(self) -> Path:
        return self.rules_path / "templates"

    @property
    def state_template_path(self) -> Path:
        """Get the path to the shipped .ai_state template."""
        return self.templates_path / "ai_state.example.json"

    @property
    def claude_prompts_path(self) -> Path:
        return self.templates_path / "prompts" / "claude"

    @property
    def hook_source_path(self) -> Path:
        """Get the path to the pre-commit script shipped with the kit."""
        return self.assist_path / "hooks" / "pre-commit"

    @property
    def git_hooks_path(self) -> Path:
        return self.repo_root / ".git" / "hooks"

    @property
    def state_path(self) -> Path:
        return self.repo_root / STATE_FILE_NAME

    @property
    def log_paths(self) -> list[Path]:
        """Get the paths of the three canonical Markdown logs."""
        return [self.repo_root / name for name in CANONICAL_LOGS]

    def log_path(self, kind: str) -> Path:
        """Get the canonical log for a log kind."""
        return self.repo_root / LOG_FILES[kind]
