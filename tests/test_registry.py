"""Tests for registry loading and front-matter parsing."""

from pathlib import Path

import pytest

from aiassisted.core.registry import (
    describe_rules,
    has_header_marker,
    load_registry,
    parse_front_matter,
)
from aiassisted.errors import MalformedHeaderError, MissingFileError
from aiassisted.models import AssistConfig


class TestLoadRegistry:
    """Tests for load_registry."""

    def test_mapping_with_rules_list(self, temp_repo: Path, write_registry) -> None:
        write_registry(
            temp_repo,
            "rules:\n"
            "  - path: rules/a.md\n"
            "    id: rules.a\n"
            "    version: 2\n"
            "    flags: [always]\n"
            "    tags: core, style\n",
        )

        entries = load_registry(AssistConfig(repo_root=temp_repo))

        assert len(entries) == 1
        entry = entries[0]
        assert entry.path == "rules/a.md"
        assert entry.id == "rules.a"
        assert entry.version == "2"
        assert entry.flags == ["always"]
        assert entry.tags == ["core", "style"]

    def test_top_level_list(self, temp_repo: Path, write_registry) -> None:
        write_registry(temp_repo, "- path: one.md\n- path: two.md\n")

        entries = load_registry(AssistConfig(repo_root=temp_repo))

        assert [e.path for e in entries] == ["one.md", "two.md"]

    def test_empty_registry(self, temp_repo: Path, write_registry) -> None:
        write_registry(temp_repo, "")

        assert load_registry(AssistConfig(repo_root=temp_repo)) == []

    def test_empty_rules_key(self, temp_repo: Path, write_registry) -> None:
        write_registry(temp_repo, "rules:\n")

        assert load_registry(AssistConfig(repo_root=temp_repo)) == []

    def test_mapping_with_other_list_key(self, temp_repo: Path, write_registry) -> None:
        write_registry(
            temp_repo,
            "version: 1\n"
            "entries:\n"
            "  - path: rules/core/a.md\n"
            "extra:\n"
            "  - path: rules/lang/b.md\n"
            "owners: [platform]\n",
        )

        entries = load_registry(AssistConfig(repo_root=temp_repo))

        assert [e.path for e in entries] == ["rules/core/a.md", "rules/lang/b.md"]

    def test_mapping_without_entries_raises(self, temp_repo: Path, write_registry) -> None:
        write_registry(temp_repo, "version: 1\nowners: [platform]\n")

        with pytest.raises(MalformedHeaderError):
            load_registry(AssistConfig(repo_root=temp_repo))

    def test_missing_registry_raises(self, temp_repo: Path) -> None:
        with pytest.raises(MissingFileError):
            load_registry(AssistConfig(repo_root=temp_repo))

    def test_entry_without_path_raises(self, temp_repo: Path, write_registry) -> None:
        write_registry(temp_repo, "- id: orphan\n")

        with pytest.raises(MalformedHeaderError):
            load_registry(AssistConfig(repo_root=temp_repo))

    def test_invalid_yaml_raises(self, temp_repo: Path, write_registry) -> None:
        write_registry(temp_repo, "rules: [unclosed\n")

        with pytest.raises(MalformedHeaderError):
            load_registry(AssistConfig(repo_root=temp_repo))


class TestHeaderMarker:
    """Tests for has_header_marker."""

    def test_dashes(self, tmp_path: Path) -> None:
        path = tmp_path / "r.md"
        path.write_text("---\nid: x\n---\n")
        assert has_header_marker(path)

    def test_id_line(self, tmp_path: Path) -> None:
        path = tmp_path / "r.md"
        path.write_text("# Title\nid: x\n")
        assert has_header_marker(path)

    def test_indented_id_does_not_count(self, tmp_path: Path) -> None:
        path = tmp_path / "r.md"
        path.write_text("# Title\n  id: x\n")
        assert not has_header_marker(path)

    def test_dashes_with_trailing_text_do_not_count(self, tmp_path: Path) -> None:
        path = tmp_path / "r.md"
        path.write_text("--- not a delimiter\n")
        assert not has_header_marker(path)

    def test_crlf_delimiter(self, tmp_path: Path) -> None:
        path = tmp_path / "r.md"
        path.write_bytes(b"---\r\nid: x\r\n---\r\n")
        assert has_header_marker(path)


class TestParseFrontMatter:
    """Tests for parse_front_matter."""

    def test_delimited_block(self) -> None:
        text = '---\nid: rules.x\nversion: "1.0"\nglobs: "*.py"\ntags: [a, b]\n---\n# Body\n'
        fm, body = parse_front_matter(text)

        assert fm is not None
        assert fm.id == "rules.x"
        assert fm.version == "1.0"
        assert fm.globs == ["*.py"]
        assert fm.tags == ["a", "b"]
        assert body == "# Body"

    def test_bare_block(self) -> None:
        fm, body = parse_front_matter("id: rules.y\ndescription: Why\n\n# Body")

        assert fm.id == "rules.y"
        assert fm.description == "Why"
        assert body == "# Body"

    def test_no_front_matter(self) -> None:
        text = "# Heading\ncontent"
        fm, body = parse_front_matter(text)

        assert fm is None
        assert body == text

    def test_unclosed_block(self) -> None:
        text = "---\nid: x\nno closing"
        fm, body = parse_front_matter(text)

        assert fm is None
        assert body == text


class TestDescribeRules:
    """Tests for describe_rules."""

    def test_reports_missing_and_present(self, repo_with_kit: Path) -> None:
        registry = repo_with_kit / ".ai-assisted" / "rules" / "registry.yaml"
        registry.write_text(
            registry.read_text() + "  - path: rules/gone.md\n    id: rules.gone\n"
        )

        described = describe_rules(AssistConfig(repo_root=repo_with_kit))

        assert len(described) == 2
        entry, fm, exists = described[0]
        assert exists
        assert fm.id == "rules.core.assistant"
        assert described[1][2] is False
