"""Parsers for jj and git command output.

Kept free of subprocess calls so they can be tested against captured output.
"""

import re
from dataclasses import dataclass

from restack.core.vcs.types import DiffHunk

UNTRACKED_CODE = "??"

_CONFLICT_SECTION_HEADER = "There are unresolved conflicts at these paths:"

# Metadata lines carried over into a single-hunk patch.
_PATCH_METADATA_PREFIXES = (
    "index ",
    "old mode",
    "new mode",
    "deleted file mode",
    "new file mode",
    "similarity index",
    "rename from",
    "rename to",
)

_COMMIT_ID_RE = re.compile(r"\b[0-9a-f]{12,40}\b")


@dataclass(frozen=True)
class StatusEntry:
    """One parsed ``XY path`` porcelain line."""

    path: str
    staged_status: str | None
    workspace_status: str | None
    is_untracked: bool


_RENAME_CODES = frozenset("RC")

_C_ESCAPES = {
    "a": b"\a",
    "b": b"\b",
    "f": b"\f",
    "n": b"\n",
    "r": b"\r",
    "t": b"\t",
    "v": b"\v",
    '"': b'"',
    "\\": b"\\",
}


def split_porcelain_z(output: str) -> list[str]:
    """Turn ``git status --porcelain -z`` output into ``XY path`` lines.

    Paths are verbatim, never quoted. A rename or copy entry is followed by
    an extra field holding the source path, which is dropped so the line
    carries the new path only.
    """
    lines: list[str] = []
    fields = output.split("\0")
    i = 0
    while i < len(fields):
        entry = fields[i]
        i += 1
        if len(entry) < 4:
            continue
        lines.append(entry)
        if entry[0] in _RENAME_CODES or entry[1] in _RENAME_CODES:
            i += 1
    return lines


def unquote_path(path: str) -> str:
    """Decode a path git quoted as a C string literal.

    Unquoted paths are returned unchanged. Octal escapes are bytes of the
    UTF-8 encoded name.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\" or i + 1 == len(body):
            out.extend(ch.encode("utf-8"))
            i += 1
            continue
        nxt = body[i + 1]
        octal = body[i + 1 : i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(int(octal, 8) & 0xFF)
            i += 4
        elif nxt in _C_ESCAPES:
            out.extend(_C_ESCAPES[nxt])
            i += 2
        else:
            out.extend(nxt.encode("utf-8"))
            i += 2
    return out.decode("utf-8", errors="surrogateescape")


def parse_status_line(line: str) -> StatusEntry | None:
    """Parse a porcelain status line.

    Column X is the index status, column Y the working-tree status, and a
    space in either means unset. ``??`` marks an untracked file. For renames
    and copies (``R  old -> new``) the new path is returned. Quoted paths are
    decoded; surrounding spaces are part of the name.

    Returns:
        The parsed entry, or None for lines too short to carry a path
    """
    if len(line) < 4:
        return None

    code = line[:2]
    path = line[3:]
    if (code[0] in _RENAME_CODES or code[1] in _RENAME_CODES) and " -> " in path:
        path = path.split(" -> ", 1)[1]
    path = unquote_path(path)
    if not path:
        return None

    if code == UNTRACKED_CODE:
        return StatusEntry(
            path=path, staged_status=None, workspace_status=UNTRACKED_CODE, is_untracked=True
        )

    staged = code[0] if code[0] != " " else None
    working = code[1] if code[1] != " " else None
    return StatusEntry(path=path, staged_status=staged, workspace_status=working, is_untracked=False)


def has_conflict_text(output: str) -> bool:
    """Report whether engine output mentions a conflict."""
    return "conflict" in output.lower()


def parse_conflicts_from_summary(summary: str) -> list[str]:
    """Extract conflicted paths from ``jj diff --summary`` output.

    Each line is ``<status> <path>``; status ``C`` marks a conflict.
    """
    conflicts: list[str] = []
    for line in summary.splitlines():
        status, sep, path = line.strip().partition(" ")
        if sep and status == "C" and path.strip():
            conflicts.append(path.strip())
    return conflicts


def parse_conflicts_from_status(status: str) -> list[str]:
    """Extract conflicted paths from ``jj st`` output.

    Only trusted when the working-copy line carries the ``(conflict)`` marker;
    paths are read from the unresolved-conflicts section up to the next blank
    line.
    """
    has_marker = any(
        line.strip().startswith("Working copy") and "(conflict)" in line
        for line in status.splitlines()
    )
    if not has_marker:
        return []

    conflicts: list[str] = []
    in_section = False
    for line in status.splitlines():
        stripped = line.strip()
        if stripped.endswith(_CONFLICT_SECTION_HEADER):
            in_section = True
            continue
        if not in_section:
            continue
        if not stripped:
            break
        path = stripped.split()[0]
        if not path.startswith("Warning"):
            conflicts.append(path)
    return conflicts


def parse_commit_candidates(output: str) -> list[str]:
    """Collect the commit ids a conflicted bookmark points at."""
    seen: list[str] = []
    for match in _COMMIT_ID_RE.findall(output):
        if match not in seen:
            seen.append(match)
    return seen


def parse_numstat(output: str) -> tuple[int, int, int]:
    """Sum ``git diff --numstat`` output.

    Binary files report ``-`` for both counts; they count as files with no
    line changes.

    Returns:
        (file_count, lines_added, lines_deleted)
    """
    file_count = 0
    added = 0
    deleted = 0
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        file_count += 1
        if parts[0].isdigit():
            added += int(parts[0])
        if parts[1].isdigit():
            deleted += int(parts[1])
    return file_count, added, deleted


def parse_remote_names(output: str) -> list[str]:
    """First word of each ``jj git remote list`` line."""
    names: list[str] = []
    for line in output.splitlines():
        words = line.split()
        if words:
            names.append(words[0])
    return names


def parse_diff_hunks(
    diff: str, file_path: str, *, is_staged: bool, start_index: int = 0
) -> list[DiffHunk]:
    """Split a single-file unified diff into hunks.

    Lines before the first ``@@`` header are file metadata and are copied into
    every hunk's patch. Hunk ids are ``staged-N`` or ``unstaged-N`` with N
    counting from start_index.
    """
    if not diff.strip():
        return []

    prefix = "staged" if is_staged else "unstaged"
    metadata: list[str] = []
    hunks: list[DiffHunk] = []
    current: list[str] = []

    def flush() -> None:
        if not current:
            return
        index = start_index + len(hunks)
        hunks.append(
            DiffHunk(
                id=f"{prefix}-{index}",
                header=current[0],
                lines=tuple(current[1:]),
                is_staged=is_staged,
                patch=build_patch(file_path, metadata, current),
            )
        )

    for line in diff.splitlines():
        if line.startswith("@@"):
            flush()
            current = [line]
        elif current:
            current.append(line)
        else:
            metadata.append(line)
    flush()

    return hunks


def build_patch(file_path: str, metadata: list[str], hunk_lines: list[str]) -> str:
    """Build an applyable patch containing exactly one hunk."""
    parts: list[str] = []
    has_diff = False
    has_old = False
    has_new = False

    for line in metadata:
        if line.startswith("diff --git"):
            has_diff = True
            parts.append(line)
        elif line.startswith(_PATCH_METADATA_PREFIXES):
            parts.append(line)
        elif line.startswith("--- "):
            has_old = True
            parts.append(line)
        elif line.startswith("+++ "):
            has_new = True
            parts.append(line)

    if not has_diff:
        parts.append(f"diff --git a/{file_path} b/{file_path}")
    if not has_old:
        parts.append(f"--- a/{file_path}")
    if not has_new:
        parts.append(f"+++ b/{file_path}")

    parts.extend(hunk_lines)
    parts.append("")
    return "\n".join(parts)
