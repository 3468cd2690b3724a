"""Secret scan for staged changes - gitleaks when installed, regex fallback otherwise."""

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..errors import ErrorKind

logger = logging.getLogger(__name__)

SECRET_PATTERNS: dict[str, re.Pattern] = {
    "private-key": re.compile(r"-----BEGIN (?:RSA |DSA |EC |OPENSSH |PGP )?PRIVATE KEY"),
    "aws-access-key": re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b"),
    "github-token": re.compile(r"\bgh[pousr]_[A-Za-z0-9]{36,}\b"),
    "slack-token": re.compile(r"\bxox[abpors]-[A-Za-z0-9-]{10,}\b"),
    "generic-assignment": re.compile(
        r"(?i)[A-Za-z0-9_]*(?:api[_-]?key|secret|token|passw(?:or)?d)[A-Za-z0-9_]*['\"]?"
        r"\s*[:=]\s*['\"][^'\"\s]{8,}['\"]"
    ),
}


@dataclass
class SecretFinding:
    """A suspected secret on an added line."""

    file: str
    line: str
    rule: str


@dataclass
class SecretScanResult:
    """Result of a secret scan."""

    success: bool
    engine: str = "regex"
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    findings: list[SecretFinding] = field(default_factory=list)
    output: str = ""


def scan_diff(diff_text: str) -> list[SecretFinding]:
    """Check the added lines of a unified diff against SECRET_PATTERNS."""
    findings: list[SecretFinding] = []
    current_file = "?"
    previous = ""
    in_hunk = False

    for raw in diff_text.splitlines():
        if raw.startswith("diff "):
            in_hunk = False
        elif raw.startswith("@@"):
            in_hunk = True

        # inside a hunk, an added line "++ x" also reads "+++ x"
        is_header = raw.startswith("+++ ") and (
            not in_hunk or previous.startswith("--- ")
        )
        previous = raw
        if is_header:
            in_hunk = False
            name = raw[4:].strip()
            current_file = name[2:] if name.startswith("b/") else name
            continue
        if not raw.startswith("+"):
            continue

        added = raw[1:]
        for rule, pattern in SECRET_PATTERNS.items():
            if pattern.search(added):
                findings.append(SecretFinding(file=current_file, line=added.strip(), rule=rule))
                break

    return findings


class SecretScanner:
    """Scans staged changes in a git repository."""

    def __init__(self, repo_root: Path, use_gitleaks: bool = True) -> None:
        self.repo_root = repo_root
        self.use_gitleaks = use_gitleaks

    def scan(self) -> SecretScanResult:
        gitleaks = shutil.which("gitleaks") if self.use_gitleaks else None
        if gitleaks:
            return self._scan_gitleaks(gitleaks)
        return self._scan_regex()

    def _scan_gitleaks(self, binary: str) -> SecretScanResult:
        logger.debug("Running %s", binary)
        proc = subprocess.run(
            [binary, "protect", "--staged", "--redact"],
            cwd=self.repo_root,
            capture_output=True,
            text=True,
        )
        return SecretScanResult(
            success=proc.returncode == 0,
            engine="gitleaks",
            error=None if proc.returncode == 0 else "gitleaks reported leaks",
            output=(proc.stdout + proc.stderr).strip(),
        )

    def _scan_regex(self) -> SecretScanResult:
        result = SecretScanResult(success=True, engine="regex")

        try:
            proc = subprocess.run(
                ["git", "diff", "--cached", "-U0", "--no-color"],
                cwd=self.repo_root,
                capture_output=True,
                text=True,
                timeout=30,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            result.success = False
            result.error = f"Could not read staged changes: {e}"
            result.error_kind = ErrorKind.PRECONDITION
            return result

        if proc.returncode != 0:
            result.success = False
            result.error = proc.stderr.strip() or "git diff failed"
            result.error_kind = ErrorKind.PRECONDITION
            return result

        result.findings = scan_diff(proc.stdout)
        if result.findings:
            result.success = False
            result.error = f"{len(result.findings)} possible secret(s) in staged changes"
        return result
