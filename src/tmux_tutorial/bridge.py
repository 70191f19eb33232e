"""
Attach/detach bridge.

Attaching hands the terminal to tmux and blocks this process until the user
detaches (Ctrl+B d). It is the only place the tutorial waits on the user
while tmux owns the screen.
"""

from __future__ import annotations

import subprocess
import time
from typing import Callable

from loguru import logger

from tmux_tutorial.commands import AttachSession
from tmux_tutorial.driver import TmuxDriver
from tmux_tutorial.errors import DriverError, Error, ErrorType, Result

Attacher = Callable[[list[str]], object]


def run_attached(argv: list[str]) -> subprocess.CompletedProcess:
    # stdin/stdout stay on the terminal; only tmux's own complaints are hidden
    return subprocess.run(argv, stderr=subprocess.DEVNULL, check=False)


class AttachBridge:
    def __init__(self, driver: TmuxDriver, attacher: Attacher | None = None):
        self.driver = driver
        self._attacher = attacher or run_attached

    def attach_and_wait(self, session: str) -> Result[None]:
        """
        Attach to `session` and return once the user detaches.

        Returns:
            Result.ok(None) after the attach returned (however tmux exited),
            or Result.err(NOT_FOUND) without blocking if there is no such session.
        """
        try:
            exists = self.driver.has_session(session)
        except DriverError:
            exists = False
        if not exists:
            logger.info(
                "Attach skipped - session not found",
                operation="attach_and_wait",
                status="not_found",
                session=session,
            )
            return Result.err(Error(
                error_type=ErrorType.NOT_FOUND,
                message=f"Session '{session}' not found. Skipping attach.",
                context={"session": session},
            ))

        logger.info(
            "Attaching",
            operation="attach_and_wait",
            status="started",
            session=session,
        )
        start_time = time.perf_counter()
        try:
            completed = self._attacher(self.driver.argv(AttachSession(session)))
        except OSError as e:
            # The session exists; a client that cannot start counts as returned
            logger.warning(
                "Attach client failed to start",
                operation="attach_and_wait",
                status="failed",
                session=session,
                error=str(e),
            )
            return Result.ok(None)

        # Some configurations exit non-zero on a normal detach
        logger.info(
            "Detached",
            operation="attach_and_wait",
            status="success",
            session=session,
            returncode=getattr(completed, "returncode", None),
            metrics={"attached_ms": int((time.perf_counter() - start_time) * 1000)},
        )
        return Result.ok(None)
