"""Rule registry loading and front-matter parsing."""

import logging
import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from ..errors import MalformedHeaderError, MissingFileError
from ..models import AssistConfig, RegistryEntry, RuleFrontMatter

logger = logging.getLogger(__name__)

HEADER_MARKER = re.compile(r"^(id:|---$)")


def load_registry(config: AssistConfig) -> list[RegistryEntry]:
    """Load registry.yaml and return its entries in file order.

    Accepts either a top-level list of entries or a mapping. A mapping
    uses its ``rules:`` list when present, otherwise every list of
    ``path:`` entries under any key. Entries without a ``path`` are rejected.
    """
    registry_path = config.registry_path
    if not registry_path.is_file():
        raise MissingFileError(f"Missing {registry_path}")

    try:
        data = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise MalformedHeaderError(f"{registry_path} is not valid YAML: {e}") from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = _entries_from_mapping(data)
    if not isinstance(data, list):
        raise MalformedHeaderError(f"{registry_path} has no list of rules")

    entries = []
    for index, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise MalformedHeaderError(f"{registry_path} entry {index} is not a mapping")
        try:
            entries.append(RegistryEntry(**_normalize_entry(raw)))
        except ValidationError as e:
            raise MalformedHeaderError(
                f"{registry_path} entry {index} is invalid: {e.errors()[0]['msg']}"
            ) from e

    logger.debug("Loaded %d registry entries from %s", len(entries), registry_path)
    return entries


def _entries_from_mapping(data: dict) -> Optional[list]:
    """Pick the rule entries out of a mapping-shaped registry.

    Returns None when the mapping holds no list of entries at all.
    """
    if "rules" in data:
        rules = data["rules"]
        return [] if rules is None else rules

    entries = []
    found = False
    for value in data.values():
        if isinstance(value, list) and any(
            isinstance(item, dict) and "path" in item for item in value
        ):
            entries.extend(value)
            found = True
    return entries if found else None


def _normalize_entry(raw: dict) -> dict:
    """Coerce scalar flags/tags and numeric versions into model-friendly values."""
    entry = dict(raw)
    for key in ("flags", "tags", "globs"):
        value = entry.get(key)
        if value is None:
            entry.pop(key, None)
        elif isinstance(value, str):
            entry[key] = [v.strip() for v in value.split(",") if v.strip()]
    for key in ("id", "version"):
        if entry.get(key) is not None:
            entry[key] = str(entry[key])
    return entry


def resolve_rule_path(config: AssistConfig, entry: RegistryEntry) -> Path:
    """Registry paths are relative to the .ai-assisted directory."""
    return config.assist_path / entry.path


def has_header_marker(path: Path, max_lines: int = 10) -> bool:
    """Check whether one of the first lines is an id: field or a --- delimiter."""
    with path.open(encoding="utf-8", errors="replace") as f:
        for lineno, line in enumerate(f):
            if lineno >= max_lines:
                break
            if HEADER_MARKER.match(line.rstrip("\r\n")):
                return True
    return False


def parse_front_matter(text: str) -> tuple[Optional[RuleFrontMatter], str]:
    """Split a rule file into (front matter, body).

    Two shapes are recognized: a ``---`` delimited YAML block, and bare
    ``key: value`` lines at the top of the file ending at the first blank
    line. Returns ``(None, text)`` when neither is present.
    """
    lines = text.splitlines()
    if not lines:
        return None, text

    if lines[0].strip() == "---":
        for i in range(1, len(lines)):
            if lines[i].strip() == "---":
                return _to_front_matter("\n".join(lines[1:i])), "\n".join(lines[i + 1 :])
        return None, text

    if lines[0].startswith("id:"):
        end = next((i for i, line in enumerate(lines) if not line.strip()), len(lines))
        return _to_front_matter("\n".join(lines[:end])), "\n".join(lines[end + 1 :])

    return None, text


def _to_front_matter(block: str) -> Optional[RuleFrontMatter]:
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError:
        logger.debug("Unparseable front matter block")
        return None
    if not isinstance(data, dict):
        return None
    return RuleFrontMatter(**_normalize_entry(data))


def describe_rules(config: AssistConfig) -> list[tuple[RegistryEntry, Optional[RuleFrontMatter], bool]]:
    """Pair each registry entry with its parsed front matter.

    Returns ``(entry, front_matter, exists)`` tuples. Missing files and files
    without front matter are reported rather than raised.
    """
    described = []
    for entry in load_registry(config):
        path = resolve_rule_path(config, entry)
        if not path.is_file():
            described.append((entry, None, False))
            continue
        front_matter, _ = parse_front_matter(path.read_text(encoding="utf-8", errors="replace"))
        described.append((entry, front_matter, True))
    return described
