"""Version-control engine gateway."""

from restack.core.vcs.abc import Vcs
from restack.core.vcs.fake import FakeVcs
from restack.core.vcs.real import RealVcs
from restack.core.vcs.types import ChangeStats, DiffHunk, VcsRebaseResult

__all__ = [
    "ChangeStats",
    "DiffHunk",
    "FakeVcs",
    "RealVcs",
    "Vcs",
    "VcsRebaseResult",
]
