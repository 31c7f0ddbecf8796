"""Value objects returned by the version-control gateway."""

from dataclasses import dataclass


@dataclass(frozen=True)
class VcsRebaseResult:
    """Outcome of a single engine rebase invocation.

    success is False when the engine exited non-zero. A rebase that completed
    but left conflicts is reported with success True and has_conflicts True.
    """

    success: bool
    message: str
    has_conflicts: bool


@dataclass(frozen=True)
class DiffHunk:
    """One ``@@`` hunk of a file diff.

    lines excludes the header line. patch is a self-contained unified diff for
    just this hunk, suitable for ``git apply``.
    """

    id: str
    header: str
    lines: tuple[str, ...]
    is_staged: bool
    patch: str

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "header": self.header,
            "lines": list(self.lines),
            "is_staged": self.is_staged,
            "patch": self.patch,
        }


@dataclass(frozen=True)
class ChangeStats:
    """Size of a working-copy change set."""

    file_count: int
    lines_added: int
    lines_deleted: int

    @property
    def total_lines(self) -> int:
        return self.lines_added + self.lines_deleted
