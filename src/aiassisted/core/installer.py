"""Kit installation module - creates the .ai-assisted directory structure."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..errors import ErrorKind
from ..models import AssistConfig
from ..templates.content import (
    get_core_rules_template,
    get_kit_readme_template,
    get_precommit_hook_template,
    get_registry_template,
    get_state_template,
)

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of an operation that creates files."""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    created_paths: list[str] = field(default_factory=list)
    skipped_paths: list[str] = field(default_factory=list)


class KitInstaller:
    """Writes the copy-in kit into a repository."""

    def __init__(self, config: AssistConfig) -> None:
        self.config = config

    def install(self) -> InstallResult:
        """Install the .ai-assisted directory structure.

        Creates:
        - .ai-assisted/README.md
        - .ai-assisted/rules/registry.yaml
        - .ai-assisted/rules/core/assistant-rules.md
        - .ai-assisted/rules/templates/ai_state.example.json
        - .ai-assisted/rules/templates/prompts/claude/
        - .ai-assisted/hooks/pre-commit

        If force=False, existing files are skipped (idempotent).
        If force=True, existing files are overwritten.
        """
        result = InstallResult(success=True)

        try:
            self._create_directory(self.config.assist_path, result)
            self._create_directory(self.config.rules_path / "core", result)
            self._create_directory(self.config.claude_prompts_path, result)
            self._create_directory(self.config.hook_source_path.parent, result)

            self._create_file(
                self.config.assist_path / "README.md", get_kit_readme_template(), result
            )
            self._create_file(self.config.registry_path, get_registry_template(), result)
            self._create_file(
                self.config.rules_path / "core" / "assistant-rules.md",
                get_core_rules_template(),
                result,
            )
            self._create_file(self.config.state_template_path, get_state_template(), result)
            self._create_file(
                self.config.hook_source_path, get_precommit_hook_template(), result
            )
            self.config.hook_source_path.chmod(0o755)

            self._create_gitkeep(self.config.claude_prompts_path, result)

        except OSError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = ErrorKind.FILESYSTEM

        return result

    def _relative(self, path: Path) -> str:
        return str(path.relative_to(self.config.repo_root))

    def _create_directory(self, path: Path, result: InstallResult) -> None:
        """Create a directory if it doesn't exist."""
        if path.exists():
            result.skipped_paths.append(self._relative(path))
        else:
            path.mkdir(parents=True, exist_ok=True)
            result.created_paths.append(self._relative(path))

    def _create_file(self, path: Path, content: str, result: InstallResult) -> None:
        """Create a file with content, respecting force flag."""
        relative_path = self._relative(path)

        if path.exists() and not self.config.force:
            result.skipped_paths.append(relative_path)
            return

        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)
        result.created_paths.append(relative_path)

    def _create_gitkeep(self, dir_path: Path, result: InstallResult) -> None:
        """Create .gitkeep file in empty directory."""
        gitkeep_path = dir_path / ".gitkeep"
        if not any(dir_path.iterdir()):
            gitkeep_path.touch()
            result.created_paths.append(self._relative(gitkeep_path))
