"""
Multiplexer driver: synchronous tmux control commands.

Every call blocks until tmux returns, so a session created by one call is
visible to the next. Failures surface as DriverError; deciding whether a
failure matters is left to the caller.
"""

from __future__ import annotations

import subprocess
import time
from typing import Callable

from loguru import logger

from tmux_tutorial.commands import (
    HasSession,
    KillSession,
    ListPanes,
    ListSessions,
    ListWindows,
    NewSession,
    NewWindow,
    Orientation,
    SelectLayout,
    SelectPane,
    SelectWindow,
    SplitWindow,
    TmuxCommand,
    Version,
)
from tmux_tutorial.errors import DriverError

Runner = Callable[[list[str]], "subprocess.CompletedProcess[str]"]

# stderr prefixes tmux prints when no server is listening on the socket, e.g.
# "error connecting to /tmp/tmux-1000/default (No such file or directory)"
NO_SERVER_MARKERS = ("no server running on ", "error connecting to ")


def run_captured(argv: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(argv, capture_output=True, text=True, check=False)


def _no_server(stderr: str) -> bool:
    lowered = (stderr or "").lstrip().lower()
    return any(lowered.startswith(marker) for marker in NO_SERVER_MARKERS)


class TmuxDriver:
    """Command construction and invocation over the tmux CLI."""

    def __init__(
        self,
        binary: str = "tmux",
        socket_name: str | None = None,
        runner: Runner | None = None,
    ):
        self.binary = binary
        self.socket_name = socket_name
        self._runner = runner or run_captured

    def argv(self, command: TmuxCommand) -> list[str]:
        base = [self.binary]
        if self.socket_name:
            base += ["-L", self.socket_name]
        return base + command.args()

    def _execute(self, command: TmuxCommand) -> subprocess.CompletedProcess[str]:
        start_time = time.perf_counter()
        try:
            result = self._runner(self.argv(command))
        except OSError as e:
            logger.error(
                "tmux could not be started",
                operation="tmux",
                status="failed",
                tmux_operation=command.operation,
                target=command.target,
                error=str(e),
            )
            raise DriverError(command.operation, command.target, None, str(e)) from e

        logger.debug(
            "tmux command finished",
            operation="tmux",
            status="success" if result.returncode == 0 else "failed",
            tmux_operation=command.operation,
            target=command.target,
            returncode=result.returncode,
            metrics={"duration_ms": int((time.perf_counter() - start_time) * 1000)},
        )
        return result

    def run(self, command: TmuxCommand) -> subprocess.CompletedProcess[str]:
        """Run a command, raising DriverError on a non-zero exit."""
        result = self._execute(command)
        if result.returncode != 0:
            raise DriverError(command.operation, command.target, result.returncode, result.stderr or "")
        return result

    # =========================================================================
    # Construction
    # =========================================================================

    def create_session(
        self,
        name: str,
        window_name: str | None = None,
        width: int | None = None,
        height: int | None = None,
        startup_command: str | None = None,
    ) -> None:
        self.run(NewSession(name, window_name, width, height, startup_command))

    def create_window(self, session: str, name: str, startup_command: str | None = None) -> None:
        self.run(NewWindow(session, name, startup_command))

    def split_pane(
        self,
        target: str,
        orientation: Orientation = Orientation.HORIZONTAL,
        startup_command: str | None = None,
    ) -> None:
        self.run(SplitWindow(target, orientation, startup_command))

    def select_window(self, target: str) -> None:
        self.run(SelectWindow(target))

    def select_pane(self, target: str) -> None:
        self.run(SelectPane(target))

    def apply_layout(self, target: str, layout: str) -> None:
        self.run(SelectLayout(target, layout))

    def kill_session(self, name: str) -> None:
        """Kill a session. Killing a session that is already gone succeeds."""
        try:
            self.run(KillSession(name))
        except DriverError:
            if self.has_session(name):
                raise
            logger.debug(
                "Session already gone",
                operation="kill_session",
                status="skip",
                session=name,
            )

    # =========================================================================
    # Queries
    # =========================================================================

    def has_session(self, name: str) -> bool:
        return self._execute(HasSession(name)).returncode == 0

    def list_sessions(self) -> list[str]:
        """Names of all sessions on the server; empty when no server runs."""
        command = ListSessions()
        result = self._execute(command)
        if result.returncode != 0:
            if _no_server(result.stderr):
                return []
            raise DriverError(command.operation, None, result.returncode, result.stderr or "")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def session_listing(self) -> list[str]:
        """Human-readable `tmux list-sessions` lines."""
        command = ListSessions(fmt=None)
        result = self._execute(command)
        if result.returncode != 0:
            if _no_server(result.stderr):
                return []
            raise DriverError(command.operation, None, result.returncode, result.stderr or "")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def list_windows(self, session: str) -> list[tuple[int, str]]:
        command = ListWindows(session)
        result = self.run(command)
        windows = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            index, sep, name = line.partition("\t")
            if not sep or not index.strip().isdigit():
                raise DriverError(
                    command.operation, session, result.returncode,
                    f"unparseable output: {line[:80]!r}",
                )
            windows.append((int(index), name))
        return windows

    def list_panes(self, target: str, all_windows: bool = False) -> int:
        result = self.run(ListPanes(target, all_windows))
        return sum(1 for line in result.stdout.splitlines() if line.strip())

    def version(self) -> str:
        return self.run(Version()).stdout.strip()
