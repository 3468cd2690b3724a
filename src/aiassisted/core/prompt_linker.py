"""Links the kit's portable Claude prompts into the user's prompt directory."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..errors import AssistError, ErrorKind, PreconditionError
from ..models import AssistConfig

logger = logging.getLogger(__name__)


def default_prompts_dir() -> Path:
    return Path.home() / ".claude" / "prompts"


@dataclass
class LinkResult:
    """Result of linking prompts."""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    linked: list[str] = field(default_factory=list)


class PromptLinker:
    """Symlinks every prompt file into the target directory.

    Existing entries with the same name are replaced.
    """

    def __init__(self, config: AssistConfig, target_dir: Optional[Path] = None) -> None:
        self.config = config
        self.target_dir = target_dir or default_prompts_dir()

    def link(self) -> LinkResult:
        result = LinkResult(success=True)
        source_dir = self.config.claude_prompts_path

        try:
            if not source_dir.is_dir():
                raise PreconditionError(f"Missing prompts directory {source_dir}")

            self.target_dir.mkdir(parents=True, exist_ok=True)

            for source in sorted(source_dir.iterdir()):
                if source.name.startswith("."):
                    continue
                link_path = self.target_dir / source.name
                if link_path.is_symlink() or link_path.is_file():
                    link_path.unlink()
                link_path.symlink_to(source.resolve())
                logger.debug("Linked %s -> %s", link_path, source)
                result.linked.append(source.name)

        except AssistError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = e.kind
        except OSError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = ErrorKind.FILESYSTEM

        return result
