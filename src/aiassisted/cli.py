"""CLI entry point for ai-assisted using Typer."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from aiassisted import __version__
from aiassisted.core.bootstrap import BootstrapInitializer
from aiassisted.core.canonical import CanonicalStore
from aiassisted.core.hooks import HookInstaller
from aiassisted.core.installer import InstallResult, KitInstaller
from aiassisted.core.prompt_linker import PromptLinker
from aiassisted.core.registry import describe_rules
from aiassisted.core.secret_scan import SecretScanner
from aiassisted.core.syncer import ActionKind, RulesSyncer
from aiassisted.core.verifier import CheckStatus, RegistryVerifier
from aiassisted.errors import AssistError
from aiassisted.models import AssistConfig, LogEntry, SessionState

app = typer.Typer(
    name="ai-assisted",
    help="Copy-in conventions and tooling for AI coding assistants.",
    no_args_is_help=True,
)
state_app = typer.Typer(help="Read and update the .ai_state session record.", no_args_is_help=True)
app.add_typer(state_app, name="state")

console = Console()

RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Path to the repository.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
]


class LogKind(str, Enum):
    decision = "decision"
    lesson = "lesson"
    suggestion = "suggestion"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]ai-assisted[/] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Log each filesystem step."),
    ] = False,
) -> None:
    """ai-assisted - keep assistant rules and session files in order."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]✗[/] {message}")
    raise typer.Exit(code=1)


def _print_paths(result: InstallResult) -> None:
    if result.created_paths:
        console.print("\n[dim]Created:[/]")
        for path in result.created_paths:
            console.print(f"  [dim]•[/] {path}")
    if result.skipped_paths:
        console.print("\n[dim]Skipped (already exist):[/]")
        for path in result.skipped_paths:
            console.print(f"  [dim]•[/] {path}")


@app.command()
def scaffold(
    root: RootOption = Path("."),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing kit files.",
        ),
    ] = False,
) -> None:
    """Write the .ai-assisted kit into the repository.

    Creates registry.yaml, the core rule file, the .ai_state template
    and the pre-commit hook script.
    """
    config = AssistConfig(repo_root=root, force=force)

    with console.status("[bold green]Writing kit..."):
        result = KitInstaller(config).install()

    if not result.success:
        _fail(f"Failed to write kit: {result.error}")

    console.print(f"[bold green]✓[/] Kit written to [cyan]{config.assist_path}[/]")
    _print_paths(result)


@app.command()
def init(root: RootOption = Path(".")) -> None:
    """Ensure the canonical files exist and seed .ai_state.

    Never truncates a log and never overwrites a non-empty .ai_state.
    """
    config = AssistConfig(repo_root=root)
    result = BootstrapInitializer(config).initialize()

    if not result.success:
        _fail(f"Init failed: {result.error}")

    console.print(f"[bold green]✓[/] Canonical files ready in [cyan]{root}[/]")
    _print_paths(result)
    console.print("\n[dim]Consider running:[/] ai-assisted verify")


@app.command()
def verify(root: RootOption = Path(".")) -> None:
    """Check that every rule in registry.yaml exists and has front-matter."""
    config = AssistConfig(repo_root=root)
    result = RegistryVerifier(config).verify()

    for check in result.checks:
        icon = "[green]✓[/]" if check.status == CheckStatus.OK else "[red]✗[/]"
        label = f" [dim]({check.rule_id})[/]" if check.rule_id else ""
        console.print(f"  {icon} {check.path}{label}")

    if not result.success:
        _fail(result.error)

    console.print(f"[bold green]✓[/] Registry OK ({result.checked_count} rule(s))")


@app.command("install-hooks")
def install_hooks(
    root: RootOption = Path("."),
    builtin: Annotated[
        bool,
        typer.Option(
            "--builtin",
            help="Install the packaged hook when the kit has none.",
        ),
    ] = False,
) -> None:
    """Install the pre-commit secret-scan hook into .git/hooks."""
    config = AssistConfig(repo_root=root)
    result = HookInstaller(config, use_builtin=builtin).install()

    if not result.success:
        _fail(f"Hook install failed: {result.error}")

    console.print(
        "[bold green]✓[/] Installed pre-commit hook. "
        "If gitleaks is installed, it will run automatically."
    )


@app.command()
def sync(
    source: Annotated[
        Path,
        typer.Argument(
            help="Repository to copy the kit from.",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ],
    root: RootOption = Path("."),
    apply: Annotated[
        bool,
        typer.Option("--apply", help="Write changes instead of a dry run."),
    ] = False,
    delete: Annotated[
        bool,
        typer.Option(
            "--delete",
            help="Remove kit files that no longer exist in the source (use with care).",
        ),
    ] = False,
) -> None:
    """Sync the .ai-assisted kit, AGENTS.md and Claude.md from SOURCE.

    Performs a dry run by default.
    """
    config = AssistConfig(repo_root=root)
    syncer = RulesSyncer(config, source, delete=delete)

    mode = "apply" if apply else "dry-run"
    if delete:
        mode += " with-delete"
    console.print(f"[dim]From:[/] {source}")
    console.print(f"[dim]Into:[/] {root}")
    console.print(f"[dim]Mode:[/] {mode}\n")

    result = syncer.sync(apply=apply)
    if not result.success:
        _fail(result.error)

    plan = result.plan
    styles = {
        ActionKind.MKDIR: "[cyan]mkdir [/]",
        ActionKind.CREATE: "[green]create[/]",
        ActionKind.UPDATE: "[yellow]update[/]",
        ActionKind.DELETE: "[red]delete[/]",
    }
    for action in plan.actions:
        console.print(f"  {styles[action.kind]} {action.path}")

    if plan.is_empty:
        console.print("[bold green]✓[/] Already in sync.")
        return

    summary = ", ".join(
        f"{plan.count(kind)} {kind.value}"
        for kind in ActionKind
        if plan.count(kind)
    )
    if result.applied:
        console.print(f"\n[bold green]✓[/] Applied: {summary}. Review changes, then commit.")
    else:
        console.print(f"\n[bold]Dry run:[/] {summary}. Re-run with --apply to write.")


@app.command("scan-secrets")
def scan_secrets(
    root: RootOption = Path("."),
    no_gitleaks: Annotated[
        bool,
        typer.Option("--no-gitleaks", help="Use the regex fallback even if gitleaks is installed."),
    ] = False,
) -> None:
    """Scan staged changes for secrets (used by the pre-commit hook)."""
    result = SecretScanner(root, use_gitleaks=not no_gitleaks).scan()

    if result.output:
        console.print(result.output, markup=False)
    for finding in result.findings:
        console.print(f"  [red]•[/] {finding.file} [dim]({finding.rule})[/]: {finding.line}")

    if not result.success:
        _fail(f"[{result.engine}] {result.error}")

    console.print(f"[bold green]✓[/] No secrets found [dim]({result.engine})[/]")


@app.command("link-prompts")
def link_prompts(
    root: RootOption = Path("."),
    target: Annotated[
        Optional[Path],
        typer.Option("--target", help="Directory to link into (default: ~/.claude/prompts)."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation."),
    ] = False,
) -> None:
    """Symlink the kit's portable Claude prompts into ~/.claude/prompts."""
    config = AssistConfig(repo_root=root)
    linker = PromptLinker(config, target_dir=target)

    console.print(f"This will symlink portable prompts into [cyan]{linker.target_dir}[/].")
    if not yes and not typer.confirm("Proceed?", default=False):
        console.print("Aborted.")
        raise typer.Exit()

    result = linker.link()
    if not result.success:
        _fail(result.error)

    console.print(f"[bold green]✓[/] Linked {len(result.linked)} prompt(s).")
    console.print(
        "[dim]Never store sessions or secrets from ~/.claude under version control.[/]"
    )


@app.command()
def rules(root: RootOption = Path(".")) -> None:
    """List the registry with each rule's front-matter."""
    config = AssistConfig(repo_root=root)
    try:
        described = describe_rules(config)
    except AssistError as e:
        _fail(str(e))

    table = Table(
        title="[bold]Rule Registry[/]",
        show_header=True,
        header_style="bold",
        border_style="dim",
    )
    table.add_column("Path", style="cyan", no_wrap=True)
    table.add_column("Id", no_wrap=True)
    table.add_column("Version")
    table.add_column("Tags")
    table.add_column("Description")

    for entry, front_matter, exists in described:
        if not exists:
            table.add_row(entry.path, entry.id or "", entry.version or "", "", "[red]missing[/]")
            continue
        fm = front_matter
        table.add_row(
            entry.path,
            (fm.id if fm and fm.id else entry.id) or "",
            (fm.version if fm and fm.version else entry.version) or "",
            ", ".join(sorted(set(entry.tags) | set(fm.tags if fm else []))),
            (fm.description if fm else None) or "[dim]no front-matter[/]",
        )

    console.print(table)


@app.command()
def log(
    kind: Annotated[LogKind, typer.Argument(help="Which log to append to.")],
    title: Annotated[str, typer.Argument(help="Entry heading.")],
    body: Annotated[
        Optional[str],
        typer.Option("--body", "-b", help="Entry text."),
    ] = None,
    root: RootOption = Path("."),
) -> None:
    """Append an entry to PROJECT_DECISIONS.md, LESSONS_LEARNED.md or FUTURE_CONSIDERATIONS.md."""
    config = AssistConfig(repo_root=root)
    entry = LogEntry(kind=kind.value, title=title, body=body or "")
    try:
        path = CanonicalStore(config).append_log(entry)
    except (AssistError, OSError) as e:
        _fail(str(e))

    console.print(f"[bold green]✓[/] Appended {kind.value} to [cyan]{path.name}[/]")


def _print_state(state: SessionState) -> None:
    table = Table(show_header=False, border_style="dim")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in state.model_dump(mode="json").items():
        if isinstance(value, list):
            value = "\n".join(f"• {v}" for v in value) if value else "[dim]-[/]"
        table.add_row(key, str(value) if value not in (None, "") else "[dim]-[/]")
    console.print(Panel.fit(table, title="[bold].ai_state[/]", border_style="blue"))


@state_app.command("show")
def state_show(root: RootOption = Path(".")) -> None:
    """Print the session state."""
    config = AssistConfig(repo_root=root)
    try:
        state = CanonicalStore(config).read_state()
    except AssistError as e:
        _fail(str(e))
    _print_state(state)


@state_app.command("checkpoint")
def state_checkpoint(
    focus: Annotated[
        Optional[str],
        typer.Option("--focus", help="What the session is working on now."),
    ] = None,
    root: RootOption = Path("."),
) -> None:
    """Stamp last_checkpoint, optionally updating current_focus."""
    config = AssistConfig(repo_root=root)
    try:
        state = CanonicalStore(config).checkpoint(focus)
    except (AssistError, OSError) as e:
        _fail(str(e))
    console.print(f"[bold green]✓[/] Checkpoint at {state.last_checkpoint.isoformat()}")


@state_app.command("add")
def state_add(
    field_name: Annotated[
        str,
        typer.Argument(
            metavar="FIELD",
            help=f"One of: {', '.join(SessionState.list_fields())}.",
        ),
    ],
    item: Annotated[str, typer.Argument(help="Item to append. Repeats are kept.")],
    root: RootOption = Path("."),
) -> None:
    """Append an item to a list field of the session state."""
    config = AssistConfig(repo_root=root)
    try:
        CanonicalStore(config).add_item(field_name, item)
    except (AssistError, OSError, ValueError) as e:
        _fail(str(e))
    console.print(f"[bold green]✓[/] Added to {field_name}")


if __name__ == "__main__":
    app()
