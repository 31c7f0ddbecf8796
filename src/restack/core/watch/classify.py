"""Turn a batch of raw filesystem event paths into rescan work.

Each path is attributed to the watched root that contains it most
specifically (workspaces usually live inside the repository root). Paths
are then filtered:

- engine metadata (``.git/``, ``.jj/``) and bulky build/dependency trees
  (``node_modules/``, ``target/``) never cause a rescan,
- writes to restack's own database never cause a rescan (it would loop),
- ignored files never cause a rescan,
- a ``.git/HEAD`` change means the checked-out ref moved, so the owning
  workspace gets a full rescan with reindex.

Everything else becomes an incremental rescan of its owner.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import PurePath

from restack.core.local_db import LOCAL_DB_NAME, LOCAL_DIR_NAME

logger = logging.getLogger(__name__)

EXCLUDED_DIR_NAMES = frozenset({".git", ".jj", "node_modules", "target"})

_DB_FILE_NAMES = frozenset(
    f"{LOCAL_DB_NAME}{suffix}" for suffix in ("", "-journal", "-wal", "-shm")
)


@dataclass(frozen=True)
class WatchedPath:
    """A watched root. workspace_id None denotes the repository root."""

    path: str
    workspace_id: int | None


@dataclass(frozen=True)
class RescanPlan:
    """Work derived from one event batch.

    full holds owners whose checked-out ref moved. incremental maps every
    other affected owner to its changed paths, relative to the owner root.
    """

    full: tuple[WatchedPath, ...] = ()
    incremental: dict[WatchedPath, tuple[str, ...]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.full and not self.incremental


def is_head_marker(rel_path: PurePath) -> bool:
    return rel_path.parts[-2:] == (".git", "HEAD")


def is_restack_db_file(rel_path: PurePath) -> bool:
    parts = rel_path.parts
    return len(parts) >= 2 and parts[-2] == LOCAL_DIR_NAME and parts[-1] in _DB_FILE_NAMES


def should_process(rel_path: PurePath) -> bool:
    """Decide whether a change at rel_path (relative to its root) matters.

    The HEAD marker is always processed even though it lives under ``.git/``.
    """
    if is_head_marker(rel_path):
        return True
    if is_restack_db_file(rel_path):
        return False
    return not any(part in EXCLUDED_DIR_NAMES for part in rel_path.parts[:-1])


def find_owner(path: str, watched: Iterable[WatchedPath]) -> WatchedPath | None:
    """Return the watched root containing path with the longest match.

    Matching is per path component, so ``/repo/ws1`` does not own
    ``/repo/ws10/file``.
    """
    candidate = PurePath(path)
    best: WatchedPath | None = None
    best_depth = -1
    for root in watched:
        root_path = PurePath(root.path)
        if not candidate.is_relative_to(root_path):
            continue
        depth = len(root_path.parts)
        if depth > best_depth:
            best = root
            best_depth = depth
    return best


def classify_batch(
    paths: Iterable[str],
    watched: Iterable[WatchedPath],
    is_ignored: Callable[[str], bool],
) -> RescanPlan:
    """Group event paths into full and incremental rescans per owner."""
    roots = list(watched)
    full: list[WatchedPath] = []
    incremental: dict[WatchedPath, list[str]] = {}

    for path in sorted(set(paths)):
        owner = find_owner(path, roots)
        if owner is None:
            logger.debug("Dropping event outside watched roots: %s", path)
            continue

        rel_path = PurePath(path).relative_to(owner.path)
        if is_head_marker(rel_path):
            if owner not in full:
                full.append(owner)
            continue
        if not should_process(rel_path):
            continue
        if is_ignored(path):
            logger.debug("Dropping ignored path %s", path)
            continue

        incremental.setdefault(owner, []).append(rel_path.as_posix())

    return RescanPlan(
        full=tuple(full),
        incremental={
            owner: tuple(rel_paths)
            for owner, rel_paths in incremental.items()
            if owner not in full
        },
    )
