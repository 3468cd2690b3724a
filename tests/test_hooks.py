"""Tests for the hook installer and prompt linker modules."""

import os
from pathlib import Path

from aiassisted.core.hooks import HookInstaller
from aiassisted.core.prompt_linker import PromptLinker
from aiassisted.errors import ErrorKind
from aiassisted.models import AssistConfig


class TestHookInstaller:
    """Tests for HookInstaller class."""

    def test_copies_and_marks_executable(self, repo_with_kit: Path) -> None:
        config = AssistConfig(repo_root=repo_with_kit)
        config.hook_source_path.write_text("#!/bin/sh\necho custom\n")
        config.hook_source_path.chmod(0o644)

        result = HookInstaller(config).install()

        target = repo_with_kit / ".git" / "hooks" / "pre-commit"
        assert result.success
        assert target.read_text() == "#!/bin/sh\necho custom\n"
        assert os.access(target, os.X_OK)

    def test_overwrites_existing_hook(self, repo_with_kit: Path) -> None:
        hooks = repo_with_kit / ".git" / "hooks"
        hooks.mkdir(parents=True)
        (hooks / "pre-commit").write_text("old")

        HookInstaller(AssistConfig(repo_root=repo_with_kit)).install()

        assert "scan-secrets" in (hooks / "pre-commit").read_text()

    def test_missing_source_fails(self, temp_repo: Path) -> None:
        result = HookInstaller(AssistConfig(repo_root=temp_repo)).install()

        assert not result.success
        assert result.error_kind == ErrorKind.PRECONDITION
        assert not (temp_repo / ".git" / "hooks" / "pre-commit").exists()

    def test_builtin_when_source_missing(self, temp_repo: Path) -> None:
        result = HookInstaller(AssistConfig(repo_root=temp_repo), use_builtin=True).install()

        target = temp_repo / ".git" / "hooks" / "pre-commit"
        assert result.success
        assert target.read_text().startswith("#!/bin/sh")
        assert os.access(target, os.X_OK)


class TestPromptLinker:
    """Tests for PromptLinker class."""

    def test_links_prompt_files(self, repo_with_kit: Path, tmp_path: Path) -> None:
        config = AssistConfig(repo_root=repo_with_kit)
        (config.claude_prompts_path / "review.md").write_text("Review this")
        (config.claude_prompts_path / "plan.md").write_text("Plan this")
        target = tmp_path / "home" / ".claude" / "prompts"

        result = PromptLinker(config, target_dir=target).link()

        assert result.success
        assert result.linked == ["plan.md", "review.md"]
        assert (target / "review.md").is_symlink()
        assert (target / "review.md").read_text() == "Review this"
        assert not (target / ".gitkeep").exists()

    def test_replaces_existing_links(self, repo_with_kit: Path, tmp_path: Path) -> None:
        config = AssistConfig(repo_root=repo_with_kit)
        (config.claude_prompts_path / "review.md").write_text("new")
        target = tmp_path / "prompts"
        target.mkdir()
        (target / "review.md").write_text("old copy")

        result = PromptLinker(config, target_dir=target).link()

        assert result.success
        assert (target / "review.md").read_text() == "new"

    def test_missing_prompts_dir(self, temp_repo: Path, tmp_path: Path) -> None:
        result = PromptLinker(
            AssistConfig(repo_root=temp_repo), target_dir=tmp_path / "prompts"
        ).link()

        assert not result.success
        assert result.error_kind == ErrorKind.PRECONDITION
