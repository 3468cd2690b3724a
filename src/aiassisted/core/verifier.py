"""Registry verifier - checks that every listed rule exists and has a header."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..errors import AssistError, ErrorKind, MalformedHeaderError, MissingFileError
from ..models import AssistConfig, RegistryEntry
from .registry import has_header_marker, load_registry, resolve_rule_path

logger = logging.getLogger(__name__)


class CheckStatus(Enum):
    """Status of a single rule check."""

    OK = "ok"
    ERROR = "error"


@dataclass
class CheckResult:
    """Result of checking one registry entry."""

    path: str
    status: CheckStatus
    message: str
    rule_id: Optional[str] = None


@dataclass
class VerifyResult:
    """Result of a registry verification."""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def checked_count(self) -> int:
        return sum(1 for c in self.checks if c.status == CheckStatus.OK)


class RegistryVerifier:
    """Walks registry.yaml and stops at the first missing or headerless rule."""

    def __init__(self, config: AssistConfig) -> None:
        self.config = config

    def verify(self) -> VerifyResult:
        """Run the verification. Has no side effects."""
        result = VerifyResult(success=True)

        try:
            entries = load_registry(self.config)
            for entry in entries:
                try:
                    result.checks.append(self._check_entry(entry))
                except AssistError as e:
                    result.checks.append(
                        CheckResult(
                            path=entry.path,
                            status=CheckStatus.ERROR,
                            message=str(e),
                            rule_id=entry.id,
                        )
                    )
                    raise
        except AssistError as e:
            logger.debug("Verification stopped: %s", e)
            result.success = False
            result.error = str(e)
            result.error_kind = e.kind
        except OSError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = ErrorKind.FILESYSTEM

        return result

    def _check_entry(self, entry: RegistryEntry) -> CheckResult:
        """Check one entry, raising on the first violation."""
        file_path = resolve_rule_path(self.config, entry)

        if not file_path.is_file():
            raise MissingFileError(f"Missing {file_path}")

        if not has_header_marker(file_path, self.config.header_scan_lines):
            raise MalformedHeaderError(f"{file_path} missing id/front-matter")

        logger.debug("Verified %s", file_path)
        return CheckResult(
            path=entry.path,
            status=CheckStatus.OK,
            message="Present with header",
            rule_id=entry.id,
        )
