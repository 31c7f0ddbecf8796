"""Error taxonomy for restack core operations.

All errors derive from RuntimeError so callers that already guard integration
calls with ``except RuntimeError`` keep working.

- ResolutionError: a target ref cannot be resolved to a commit. Fatal to a
  whole rebase batch, since staleness cannot be decided without it.
- ProcessError: an engine subprocess failed. Fatal to one workspace attempt,
  never to its siblings.
- WorkspaceNotFoundError: an unknown workspace id was requested.
"""


class RestackError(RuntimeError):
    """Base class for restack errors."""


class ResolutionError(RestackError):
    """Raised when a ref cannot be resolved to a commit id."""

    def __init__(self, ref: str, detail: str) -> None:
        super().__init__(f"Cannot resolve '{ref}': {detail}")
        self.ref = ref
        self.detail = detail


class ProcessError(RestackError):
    """Raised when an engine subprocess invocation fails."""


class WorkspaceNotFoundError(RestackError):
    """Raised when a workspace id is not present in the registry."""

    def __init__(self, repo_path: str, workspace_id: int) -> None:
        super().__init__(f"Workspace {workspace_id} not found in {repo_path}")
        self.repo_path = repo_path
        self.workspace_id = workspace_id
