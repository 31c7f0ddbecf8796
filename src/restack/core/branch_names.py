"""Translate git-style branch refs to the engine's native ref syntax.

Git names a remote-tracking branch ``origin/main``; jj spells the same ref
``main@origin``. The translation is a pure string mapping.

A local branch whose name contains ``/`` (``feature/sub``) is indistinguishable
from a remote-qualified ref by shape alone and is translated too
(``sub@feature``). Callers that know the repository's remotes can pass them
to restrict translation to real remote names.
"""

from collections.abc import Collection


def to_engine_ref(ref: str, remotes: Collection[str] | None = None) -> str:
    """Convert a ``remote/branch`` ref into ``branch@remote``.

    Args:
        ref: Branch ref in git notation
        remotes: Optional known remote names. When given, only refs whose
            prefix is one of them are translated.

    Returns:
        The engine-native ref. Refs without ``/`` pass through unchanged.

    Examples:
        >>> to_engine_ref("origin/main")
        'main@origin'
        >>> to_engine_ref("main")
        'main'
        >>> to_engine_ref("feature/sub", remotes={"origin"})
        'feature/sub'
    """
    remote, sep, branch = ref.partition("/")
    if not sep or not remote or not branch:
        return ref
    if remotes is not None and remote not in remotes:
        return ref
    return f"{branch}@{remote}"
