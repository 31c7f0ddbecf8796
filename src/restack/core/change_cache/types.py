"""Cached change rows, one per changed file of a workspace."""

from dataclasses import dataclass

UNTRACKED_MARKER = "??"


@dataclass(frozen=True)
class CachedFileChange:
    """One changed file in a workspace snapshot.

    workspace_id None denotes the repository root checkout. hunks_json is
    populated only when the snapshot was small enough for eager prefetch;
    otherwise hunks are fetched on demand per file.
    """

    workspace_id: int | None
    file_path: str
    staged_status: str | None
    workspace_status: str | None
    is_untracked: bool
    hunks_json: str | None
    updated_at: str
