"""Hook installer - copies the kit's pre-commit script into .git/hooks."""

import logging
import shutil
import stat

from ..errors import AssistError, ErrorKind, PreconditionError
from ..models import AssistConfig
from ..templates.content import get_precommit_hook_template
from .installer import InstallResult

logger = logging.getLogger(__name__)


class HookInstaller:
    """Installs the pre-commit hook, overwriting any existing one."""

    def __init__(self, config: AssistConfig, use_builtin: bool = False) -> None:
        self.config = config
        self.use_builtin = use_builtin

    def install(self) -> InstallResult:
        result = InstallResult(success=True)
        source = self.config.hook_source_path
        target = self.config.git_hooks_path / "pre-commit"

        try:
            if not source.is_file() and not self.use_builtin:
                raise PreconditionError(
                    f"Missing {source}; run 'ai-assisted scaffold' or pass --builtin"
                )

            self.config.git_hooks_path.mkdir(parents=True, exist_ok=True)

            if source.is_file():
                shutil.copyfile(source, target)
            else:
                logger.debug("No hook at %s, writing built-in hook", source)
                target.write_text(get_precommit_hook_template(), encoding="utf-8")

            mode = target.stat().st_mode
            target.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            result.created_paths.append(str(target.relative_to(self.config.repo_root)))

        except AssistError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = e.kind
        except OSError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = ErrorKind.FILESYSTEM

        return result
