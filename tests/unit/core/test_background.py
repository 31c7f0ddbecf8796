"""Tests for ThreadBackground."""

import logging
import os
import subprocess
import sys
import textwrap
import threading
from pathlib import Path

import pytest

from restack.core.background import ThreadBackground

SRC_DIR = Path(__file__).resolve().parents[3] / "src"


def test_spawn_runs_task_on_named_non_daemon_thread() -> None:
    done = threading.Event()
    seen: list[tuple[str, bool]] = []

    def task() -> None:
        current = threading.current_thread()
        seen.append((current.name, current.daemon))
        done.set()

    ThreadBackground().spawn(task, name="rebase-after-commit:main")

    assert done.wait(timeout=5)
    assert seen == [("rebase-after-commit:main", False)]


def test_spawned_task_finishes_after_caller_returns(tmp_path: Path) -> None:
    marker = tmp_path / "rebased"
    script = textwrap.dedent(
        f"""
        import time
        from pathlib import Path

        from restack.core.background import ThreadBackground

        def task():
            time.sleep(0.3)
            Path({str(marker)!r}).write_text("done")

        ThreadBackground().spawn(task, name="rebase-after-commit:main")
        """
    )
    env = {**os.environ, "PYTHONPATH": str(SRC_DIR)}

    completed = subprocess.run(
        [sys.executable, "-c", script],
        env=env,
        capture_output=True,
        text=True,
        timeout=30,
        check=False,
    )

    assert completed.returncode == 0, completed.stderr
    assert marker.read_text() == "done"


def test_task_exception_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    finished = threading.Event()

    def task() -> None:
        try:
            raise RuntimeError("rebase exploded")
        finally:
            finished.set()

    with caplog.at_level(logging.ERROR, logger="restack.core.background.real"):
        ThreadBackground().spawn(task, name="boom")
        assert finished.wait(timeout=5)
        for thread in threading.enumerate():
            if thread.name == "boom":
                thread.join(timeout=5)

    assert "Background task 'boom' failed" in caplog.text
