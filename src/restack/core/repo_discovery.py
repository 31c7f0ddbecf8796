"""Repository root discovery.

Commands may run from the repository root or from inside any registered
workspace. The registry lives under the repository root, so the root has to
be found before anything else is opened.
"""

from pathlib import Path

from restack.core.local_db import get_local_db_path


def discover_repo_root(cwd: Path) -> Path | None:
    """Walk up from `cwd` to the root of the repository that contains it.

    At each level, in order:
    - a `.jj/repo` file marks a secondary jj workspace; its content points at
      the main repository's `.jj/repo` directory
    - an existing registry database marks the root
    - a `.jj` or `.git` directory marks the root

    Returns:
        The repository root, or None if `cwd` is not inside a repository
    """
    cur = cwd.resolve()
    for parent in [cur, *cur.parents]:
        jj_dir = parent / ".jj"
        repo_pointer = jj_dir / "repo"
        if repo_pointer.is_file():
            store = (jj_dir / repo_pointer.read_text(encoding="utf-8").strip()).resolve()
            return store.parent.parent

        if get_local_db_path(str(parent)).is_file():
            return parent

        if jj_dir.is_dir() or (parent / ".git").is_dir():
            return parent

    return None
