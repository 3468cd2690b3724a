"""Template content for the copy-in kit and canonical files."""

import json

from ..models import SessionState


def get_state_template() -> str:
    """Generate ai_state.example.json content."""
    return json.dumps(SessionState().model_dump(mode="json"), indent=2) + "\n"


def get_log_header(file_name: str) -> str:
    """Heading written when a canonical log is created by `log`."""
    titles = {
        "PROJECT_DECISIONS.md": "Project Decisions",
        "LESSONS_LEARNED.md": "Lessons Learned",
        "FUTURE_CONSIDERATIONS.md": "Future Considerations",
    }
    return f"# {titles.get(file_name, file_name)}\n"


def get_registry_template() -> str:
    """Generate registry.yaml content."""
    return """# Rule registry. Paths are relative to .ai-assisted/.
# Verify with: ai-assisted verify
rules:
  - path: rules/core/assistant-rules.md
    id: rules.core.assistant
    version: "1.0"
    flags: [always]
    tags: [core]
"""


def get_core_rules_template() -> str:
    """Generate rules/core/assistant-rules.md content."""
    return """---
id: rules.core.assistant
version: "1.0"
description: Baseline rules for every AI assistant working in this repository
globs: ["**/*"]
tags: [core]
---

# Assistant Rules

## Session Context

1. Read `.ai_state` before starting work and update it at checkpoints
2. Record decisions in `PROJECT_DECISIONS.md`
3. Record surprises and fixes in `LESSONS_LEARNED.md`
4. Record deferred ideas in `FUTURE_CONSIDERATIONS.md`

## Writing to Shared Files

- Append to the Markdown logs; never rewrite history
- Use `ai-assisted log` and `ai-assisted state` so writes are serialized
  when several assistants share the repository

## Secrets

- Never commit credentials; the pre-commit hook runs a secret scan
"""


def get_precommit_hook_template() -> str:
    """Generate the default pre-commit hook script."""
    return """#!/bin/sh
# Installed by ai-assisted. Scans staged changes for secrets.
# Uses gitleaks when available, otherwise a regex fallback.
if command -v ai-assisted >/dev/null 2>&1; then
  exec ai-assisted scan-secrets
fi
if command -v gitleaks >/dev/null 2>&1; then
  exec gitleaks protect --staged --redact
fi
echo "[pre-commit] ai-assisted and gitleaks not found; skipping secret scan" >&2
exit 0
"""


def get_kit_readme_template() -> str:
    """Generate .ai-assisted/README.md content."""
    return """# .ai-assisted

Conventions for AI coding assistants, copied into this repository.

## Structure

```
.ai-assisted/
├── README.md            # This file
├── rules/
│   ├── registry.yaml    # Rule registry
│   ├── core/            # Rules every assistant follows
│   └── templates/       # .ai_state template and portable prompts
└── hooks/pre-commit     # Secret scan hook
```

## Commands

- `ai-assisted init` - create the canonical files and seed `.ai_state`
- `ai-assisted verify` - check the registry against the rules tree
- `ai-assisted install-hooks` - install the pre-commit hook
- `ai-assisted sync SOURCE` - dry-run a sync from another repository
"""
