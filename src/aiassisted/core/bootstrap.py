"""Bootstrap initializer - ensures the canonical files exist."""

import logging
import shutil

from ..errors import AssistError, ErrorKind
from ..models import AssistConfig
from ..templates.content import get_state_template
from .canonical import locked
from .installer import InstallResult

logger = logging.getLogger(__name__)


class BootstrapInitializer:
    """Creates the canonical logs and seeds .ai_state.

    Running it again changes nothing: logs are only created when absent and
    the state is only seeded when absent or empty.
    """

    def __init__(self, config: AssistConfig) -> None:
        self.config = config

    def initialize(self) -> InstallResult:
        result = InstallResult(success=True)

        try:
            for log_path in self.config.log_paths:
                if log_path.exists():
                    result.skipped_paths.append(log_path.name)
                else:
                    log_path.touch()
                    result.created_paths.append(log_path.name)

            self._seed_state(result)

        except AssistError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = e.kind
        except OSError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = ErrorKind.FILESYSTEM

        return result

    def _seed_state(self, result: InstallResult) -> None:
        state_path = self.config.state_path
        name = state_path.name

        with locked(state_path, self.config.lock_timeout):
            if state_path.exists() and state_path.stat().st_size > 0:
                result.skipped_paths.append(name)
                return

            template = self.config.state_template_path
            if template.is_file():
                logger.debug("Seeding %s from %s", state_path, template)
                shutil.copyfile(template, state_path)
            else:
                logger.debug("No template at %s, seeding built-in default", template)
                state_path.write_text(get_state_template(), encoding="utf-8")
            result.created_paths.append(name)
