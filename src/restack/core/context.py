"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from restack.core.background import Background, ThreadBackground
from restack.core.change_cache import ChangeCache, SqliteChangeCache
from restack.core.global_config import ConfigStore, FilesystemConfigStore, GlobalConfig
from restack.core.indexer import FileIndexer, NoopFileIndexer
from restack.core.notifier import ChangeNotifier, LoggingChangeNotifier
from restack.core.rebase import RebaseOrchestrator
from restack.core.time import RealTime, Time
from restack.core.vcs import RealVcs, Vcs
from restack.core.watch import (
    FileWatcher,
    HunkPrefetchPolicy,
    RescanEngine,
    WatchCoordinator,
    WatchdogFileWatcher,
)
from restack.core.workspace_store import SqliteWorkspaceStore, WorkspaceStore


@dataclass(frozen=True)
class RestackContext:
    """Immutable context holding all dependencies for restack operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    vcs: Vcs
    workspace_store: WorkspaceStore
    change_cache: ChangeCache
    background: Background
    indexer: FileIndexer
    notifier: ChangeNotifier
    file_watcher: FileWatcher
    time: Time
    config_store: ConfigStore
    config: GlobalConfig
    cwd: Path  # Current working directory at CLI invocation

    @staticmethod
    def for_test(
        vcs: Vcs | None = None,
        workspace_store: WorkspaceStore | None = None,
        change_cache: ChangeCache | None = None,
        background: Background | None = None,
        indexer: FileIndexer | None = None,
        notifier: ChangeNotifier | None = None,
        file_watcher: FileWatcher | None = None,
        time: Time | None = None,
        config_store: ConfigStore | None = None,
        config: GlobalConfig | None = None,
        cwd: Path | None = None,
    ) -> "RestackContext":
        """Create test context with optional pre-configured implementations.

        Any dependency left as None is replaced by an empty fake.

        Example:
            >>> vcs = FakeVcs(commit_ids={"main": "abc123"})
            >>> ctx = RestackContext.for_test(vcs=vcs, cwd=Path("/repo"))
        """
        from tests.fakes.background import FakeBackground
        from tests.fakes.file_watcher import FakeFileWatcher
        from tests.fakes.indexer import FakeFileIndexer
        from tests.fakes.notifier import FakeChangeNotifier

        from restack.core.change_cache import FakeChangeCache
        from restack.core.global_config import InMemoryConfigStore
        from restack.core.time.fake import FakeTime
        from restack.core.vcs import FakeVcs
        from restack.core.workspace_store import FakeWorkspaceStore

        if vcs is None:
            vcs = FakeVcs()

        if change_cache is None:
            change_cache = FakeChangeCache()

        if workspace_store is None:
            workspace_store = FakeWorkspaceStore(change_cache=change_cache)

        if background is None:
            background = FakeBackground()

        if indexer is None:
            indexer = FakeFileIndexer()

        if notifier is None:
            notifier = FakeChangeNotifier()

        if file_watcher is None:
            file_watcher = FakeFileWatcher()

        if time is None:
            time = FakeTime()

        if config is None:
            config = GlobalConfig()

        if config_store is None:
            config_store = InMemoryConfigStore(config=config)

        return RestackContext(
            vcs=vcs,
            workspace_store=workspace_store,
            change_cache=change_cache,
            background=background,
            indexer=indexer,
            notifier=notifier,
            file_watcher=file_watcher,
            time=time,
            config_store=config_store,
            config=config,
            cwd=cwd if cwd is not None else Path("/test/repo"),
        )


def create_context() -> RestackContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Raises:
        ValueError: If the global config file is malformed
    """
    config_store = FilesystemConfigStore()
    config = config_store.load()

    return RestackContext(
        vcs=RealVcs(jj_binary=config.jj_binary, git_binary=config.git_binary),
        workspace_store=SqliteWorkspaceStore(),
        change_cache=SqliteChangeCache(),
        background=ThreadBackground(),
        indexer=NoopFileIndexer(),
        notifier=LoggingChangeNotifier(),
        file_watcher=WatchdogFileWatcher(),
        time=RealTime(),
        config_store=config_store,
        config=config,
        cwd=Path.cwd(),
    )


def build_orchestrator(ctx: RestackContext) -> RebaseOrchestrator:
    return RebaseOrchestrator(vcs=ctx.vcs, workspace_store=ctx.workspace_store)


def build_rescan_engine(ctx: RestackContext) -> RescanEngine:
    return RescanEngine(
        vcs=ctx.vcs,
        change_cache=ctx.change_cache,
        indexer=ctx.indexer,
        notifier=ctx.notifier,
        time=ctx.time,
        policy=HunkPrefetchPolicy(
            max_files=ctx.config.eager_hunk_max_files,
            max_lines=ctx.config.eager_hunk_max_lines,
        ),
        hunk_workers=ctx.config.hunk_workers,
    )


def build_coordinator(ctx: RestackContext) -> WatchCoordinator:
    return WatchCoordinator(
        file_watcher=ctx.file_watcher,
        rescan_engine=build_rescan_engine(ctx),
        workspace_store=ctx.workspace_store,
        vcs=ctx.vcs,
        debounce_seconds=ctx.config.debounce_seconds,
    )
