"""Pytest fixtures for ai-assisted tests."""

from pathlib import Path
from typing import Generator

import pytest

from aiassisted.core.installer import KitInstaller
from aiassisted.models import AssistConfig


@pytest.fixture
def temp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create an empty repository directory for testing."""
    repo = tmp_path / "test_repo"
    repo.mkdir()
    yield repo


@pytest.fixture
def repo_with_kit(temp_repo: Path) -> Path:
    """Create a repository with the scaffolded .ai-assisted kit."""
    result = KitInstaller(AssistConfig(repo_root=temp_repo)).install()
    assert result.success
    return temp_repo


@pytest.fixture
def source_repo(tmp_path: Path) -> Path:
    """Create a source repository to sync from."""
    source = tmp_path / "source_repo"
    kit = source / ".ai-assisted"
    (kit / "rules" / "core").mkdir(parents=True)
    (kit / "rules" / "lang").mkdir(parents=True)

    (kit / "rules" / "registry.yaml").write_text(
        "rules:\n"
        "  - path: rules/core/assistant-rules.md\n"
        "    id: rules.core.assistant\n"
    )
    (kit / "rules" / "core" / "assistant-rules.md").write_text(
        "---\nid: rules.core.assistant\n---\n# Rules\n"
    )
    (kit / "rules" / "lang" / "python.md").write_text("id: rules.lang.python\n\n# Python\n")
    (source / "AGENTS.md").write_text("# Agents\n")
    (source / "Claude.md").write_text("# Claude\n")
    return source


@pytest.fixture
def write_registry():
    """Return a helper that writes .ai-assisted/rules/registry.yaml."""

    def _write(repo: Path, body: str) -> Path:
        kit = repo / ".ai-assisted" / "rules"
        kit.mkdir(parents=True, exist_ok=True)
        path = kit / "registry.yaml"
        path.write_text(body)
        return path

    return _write


@pytest.fixture
def tree_snapshot():
    """Return a helper mapping every file under a root to its content."""

    def _snapshot(root: Path) -> dict[str, bytes]:
        return {
            str(p.relative_to(root)): p.read_bytes()
            for p in sorted(root.rglob("*"))
            if p.is_file()
        }

    return _snapshot
