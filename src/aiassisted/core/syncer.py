"""Rules sync - one-way mirror of another repository's kit into this one."""

import filecmp
import logging
import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from ..errors import AssistError, ErrorKind, PreconditionError
from ..models import SYNCED_ROOT_FILES, AssistConfig

logger = logging.getLogger(__name__)


class ActionKind(Enum):
    """What a sync step does to the destination."""

    MKDIR = "mkdir"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class SyncAction:
    """A single change to the destination tree."""

    kind: ActionKind
    path: str  # relative to the repository root
    source: Optional[Path] = None
    dest: Optional[Path] = None


@dataclass
class SyncPlan:
    """Ordered list of changes a sync would make."""

    source_root: Path
    dest_root: Path
    actions: list[SyncAction] = field(default_factory=list)

    def count(self, kind: ActionKind) -> int:
        return sum(1 for a in self.actions if a.kind == kind)

    @property
    def is_empty(self) -> bool:
        return not self.actions


@dataclass
class SyncResult:
    """Result of a sync run."""

    success: bool
    applied: bool = False
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    plan: Optional[SyncPlan] = None


class RulesSyncer:
    """Mirrors SOURCE/.ai-assisted/ and the root assistant files into the repo.

    Dry-run is the default. Deleting destination files that the source no
    longer has must be requested explicitly and only touches the kit tree.
    """

    def __init__(self, config: AssistConfig, source_root: Path, delete: bool = False) -> None:
        self.config = config
        self.source_root = source_root
        self.delete = delete

    @property
    def source_kit(self) -> Path:
        return self.source_root / self.config.assist_dir_name

    def sync(self, apply: bool = False) -> SyncResult:
        result = SyncResult(success=True)

        try:
            result.plan = self.plan()
            if apply:
                self.apply(result.plan)
                result.applied = True
        except AssistError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = e.kind
        except OSError as e:
            result.success = False
            result.error = str(e)
            result.error_kind = ErrorKind.FILESYSTEM

        return result

    def plan(self) -> SyncPlan:
        """Compute the changes without touching the destination."""
        if not self.source_kit.is_dir():
            raise PreconditionError(
                f"Source missing {self.config.assist_dir_name}: {self.source_root}"
            )
        if self.source_kit.resolve() == self.config.assist_path.resolve():
            raise PreconditionError("Source and destination are the same repository")

        plan = SyncPlan(source_root=self.source_root, dest_root=self.config.repo_root)
        self._plan_tree(plan)
        if self.delete:
            self._plan_deletions(plan)
        for name in SYNCED_ROOT_FILES:
            source = self.source_root / name
            if source.is_file():
                self._plan_file(plan, source.resolve(), self.config.repo_root / name)

        logger.debug(
            "Planned %d action(s) from %s", len(plan.actions), self.source_root
        )
        return plan

    def _relative(self, path: Path) -> str:
        return str(path.relative_to(self.config.repo_root))

    def _plan_tree(self, plan: SyncPlan) -> None:
        dest_kit = self.config.assist_path
        self._plan_dir(plan, dest_kit)

        for dirpath, dirnames, filenames in os.walk(self.source_kit):
            dirnames.sort()
            rel = Path(dirpath).relative_to(self.source_kit)
            for name in dirnames:
                source = Path(dirpath) / name
                if source.is_symlink():
                    # os.walk does not descend into it; mirror the link itself
                    self._plan_link(plan, source, dest_kit / rel / name)
                else:
                    self._plan_dir(plan, dest_kit / rel / name)
            for name in sorted(filenames):
                source = Path(dirpath) / name
                if source.is_symlink():
                    self._plan_link(plan, source, dest_kit / rel / name)
                else:
                    self._plan_file(plan, source, dest_kit / rel / name)

    def _plan_dir(self, plan: SyncPlan, dest: Path) -> None:
        if dest.is_dir() and not dest.is_symlink():
            return
        if dest.exists() or dest.is_symlink():
            plan.actions.append(SyncAction(ActionKind.DELETE, self._relative(dest), dest=dest))
        plan.actions.append(SyncAction(ActionKind.MKDIR, self._relative(dest), dest=dest))

    def _plan_file(self, plan: SyncPlan, source: Path, dest: Path) -> None:
        if dest.is_dir() and not dest.is_symlink():
            plan.actions.append(SyncAction(ActionKind.DELETE, self._relative(dest), dest=dest))
            kind = ActionKind.CREATE
        elif not dest.exists():
            kind = ActionKind.CREATE
        elif dest.is_symlink():
            kind = ActionKind.UPDATE
        elif filecmp.cmp(source, dest, shallow=False):
            return
        else:
            kind = ActionKind.UPDATE
        plan.actions.append(SyncAction(kind, self._relative(dest), source=source, dest=dest))

    def _plan_link(self, plan: SyncPlan, source: Path, dest: Path) -> None:
        """Copy a symlink as a symlink, keeping its target text."""
        target = os.readlink(source)
        if dest.is_symlink():
            if os.readlink(dest) == target:
                return
            kind = ActionKind.UPDATE
        elif dest.is_dir():
            plan.actions.append(SyncAction(ActionKind.DELETE, self._relative(dest), dest=dest))
            kind = ActionKind.CREATE
        elif dest.exists():
            kind = ActionKind.UPDATE
        else:
            kind = ActionKind.CREATE
        plan.actions.append(SyncAction(kind, self._relative(dest), source=source, dest=dest))

    def _plan_deletions(self, plan: SyncPlan) -> None:
        """Queue destination kit entries the source no longer has, deepest first."""
        dest_kit = self.config.assist_path
        if not dest_kit.is_dir():
            return

        for dirpath, dirnames, filenames in os.walk(dest_kit, topdown=False):
            rel = Path(dirpath).relative_to(dest_kit)
            # Covered by the deletion or replacement of an ancestor
            if rel != Path(".") and (
                not (self.source_kit / rel).is_dir() or self._under_source_link(rel)
            ):
                continue
            for name in sorted(filenames) + sorted(dirnames):
                if os.path.lexists(self.source_kit / rel / name):
                    continue
                dest = dest_kit / rel / name
                plan.actions.append(SyncAction(ActionKind.DELETE, self._relative(dest), dest=dest))

    def _under_source_link(self, rel: Path) -> bool:
        current = self.source_kit
        for part in rel.parts:
            current = current / part
            if current.is_symlink():
                return True
        return False

    def apply(self, plan: SyncPlan) -> None:
        """Carry out a plan in order."""
        for action in plan.actions:
            dest = action.dest
            if action.kind == ActionKind.MKDIR:
                dest.mkdir(parents=True, exist_ok=True)
            elif action.kind in (ActionKind.CREATE, ActionKind.UPDATE):
                dest.parent.mkdir(parents=True, exist_ok=True)
                if dest.is_symlink() or action.source.is_symlink():
                    dest.unlink(missing_ok=True)
                shutil.copy2(action.source, dest, follow_symlinks=False)
            elif action.kind == ActionKind.DELETE:
                if dest.is_dir() and not dest.is_symlink():
                    shutil.rmtree(dest)
                else:
                    dest.unlink(missing_ok=True)
            logger.debug("%s %s", action.kind.value, action.path)
