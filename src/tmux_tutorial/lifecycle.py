"""
Session namespace and lifecycle.

Everything the tutorial creates lives under TUTORIAL_PREFIX. A
NamespaceLease is held for the whole run:

    with NamespaceLease(driver) as lease:
        ...  # scenarios call lease.sweep() before building

and leaving the block, by return, exception, Ctrl+C or SIGTERM, sweeps the
namespace one last time. Sessions without the prefix are never touched.
"""

from __future__ import annotations

import signal
import threading
import time
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from loguru import logger

from tmux_tutorial import TUTORIAL_PREFIX
from tmux_tutorial.driver import TmuxDriver
from tmux_tutorial.errors import DriverError
from tmux_tutorial.injector import ArtifactRegistry

# Turned into TerminationRequested while a lease is held
TERMINATION_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


class TerminationRequested(KeyboardInterrupt):
    """SIGTERM/SIGHUP delivered while the lease was held."""

    def __init__(self, signum: int):
        super().__init__(signum)
        self.signum = signum


def _raise_termination(signum, frame):
    raise TerminationRequested(signum)


@dataclass
class SweepResult:
    trace_id: str
    trigger: str
    sessions_killed: list[str] = field(default_factory=list)
    sessions_failed: list[str] = field(default_factory=list)
    artifacts_removed: int = 0
    duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessions_killed": len(self.sessions_killed),
            "sessions_failed": len(self.sessions_failed),
            "artifacts_removed": self.artifacts_removed,
            "duration_ms": self.duration_ms,
        }


class NamespaceLease:
    def __init__(
        self,
        driver: TmuxDriver,
        prefix: str = TUTORIAL_PREFIX,
        registry: ArtifactRegistry | None = None,
    ):
        self.driver = driver
        self.prefix = prefix
        self.registry = registry if registry is not None else ArtifactRegistry()
        self._saved_handlers: dict[int, Any] = {}

    def qualify(self, name: str) -> str:
        """Session name inside the namespace ("basics" -> "tut-basics")."""
        return name if name.startswith(self.prefix) else f"{self.prefix}{name}"

    def owns(self, session_name: str) -> bool:
        return session_name.startswith(self.prefix)

    def sweep(self, trigger: str = "scenario") -> SweepResult:
        """
        Kill every namespaced session and delete every registered artifact.

        Best effort throughout: a failure on one item is logged and the rest
        are still attempted. Calling it again right away is a no-op.
        """
        result = SweepResult(trace_id=str(uuid4()), trigger=trigger)
        start_time = time.perf_counter()

        try:
            sessions = self.driver.list_sessions()
        except DriverError as e:
            logger.warning(
                "Could not list sessions - skipping session sweep",
                operation="sweep_namespace",
                status="failed",
                trace_id=result.trace_id,
                trigger=trigger,
                error=str(e),
            )
            sessions = []

        for name in sessions:
            if not self.owns(name):
                continue
            try:
                self.driver.kill_session(name)
                result.sessions_killed.append(name)
            except DriverError as e:
                result.sessions_failed.append(name)
                logger.warning(
                    "Failed to kill tutorial session",
                    operation="sweep_namespace",
                    status="failed",
                    trace_id=result.trace_id,
                    session=name,
                    error=str(e),
                )

        result.artifacts_removed = self.registry.purge()
        result.duration_ms = int((time.perf_counter() - start_time) * 1000)

        logger.debug(
            "Namespace swept",
            operation="sweep_namespace",
            status="complete" if not result.sessions_failed else "partial",
            trace_id=result.trace_id,
            trigger=trigger,
            killed=result.sessions_killed,
            metrics=result.to_dict(),
        )
        return result

    # =========================================================================
    # Scope
    # =========================================================================

    def _install_handlers(self) -> None:
        # signal.signal only works from the main thread
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in TERMINATION_SIGNALS:
            self._saved_handlers[signum] = signal.signal(signum, _raise_termination)

    def _restore_handlers(self) -> None:
        for signum, handler in self._saved_handlers.items():
            signal.signal(signum, handler)
        self._saved_handlers.clear()

    def __enter__(self) -> NamespaceLease:
        self._install_handlers()
        logger.debug(
            "Namespace lease acquired",
            operation="lease",
            status="started",
            prefix=self.prefix,
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        on_main = threading.current_thread() is threading.main_thread()
        previous_sigint = signal.signal(signal.SIGINT, signal.SIG_IGN) if on_main else None
        try:
            trigger = "exit" if exc_type is None else (
                "interrupt" if issubclass(exc_type, KeyboardInterrupt) else "error"
            )
            self.sweep(trigger=trigger)
        finally:
            if previous_sigint is not None:
                signal.signal(signal.SIGINT, previous_sigint)
            self._restore_handlers()
        logger.debug(
            "Namespace lease released",
            operation="lease",
            status="complete",
            exc_type=exc_type.__name__ if exc_type else None,
        )
        return False
