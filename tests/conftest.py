"""Shared fixtures: an in-memory tmux server and a fully wired engine."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from tmux_tutorial.bridge import AttachBridge
from tmux_tutorial.config_loader import TutorialSettings
from tmux_tutorial.driver import TmuxDriver
from tmux_tutorial.engine import ScenarioEngine
from tmux_tutorial.injector import MessageInjector
from tmux_tutorial.lifecycle import NamespaceLease
from tmux_tutorial.progress import ProgressStore
from tmux_tutorial.verifier import StateVerifier

# Options that take a value, for every command the driver sends
VALUE_FLAGS = {"-t", "-s", "-n", "-x", "-y", "-F"}


@dataclass
class FakeWindow:
    index: int
    name: str
    panes: list[int] = field(default_factory=list)
    active_pane: int = 0
    layout: str | None = None


@dataclass
class FakeSession:
    name: str
    windows: list[FakeWindow] = field(default_factory=list)
    current: int = 0

    def window(self, spec: str) -> FakeWindow | None:
        if spec == "":
            return self.windows[self.current]
        for window in self.windows:
            if window.name == spec or str(window.index) == spec:
                return window
        return None


class FakeTmux:
    """
    Just enough of a tmux server to drive the tutorial against.

    Call it like subprocess.run with an argv; use `attach` as the bridge's
    attacher. Queue user behaviour for the next attach with `on_attach`.
    """

    def __init__(self):
        self.sessions: dict[str, FakeSession] = {}
        self.calls: list[list[str]] = []
        self.attaches: list[str] = []
        self.created: list[str] = []
        self.killed: list[str] = []
        self.startup_commands: list[str] = []
        self._failures: dict[str, list[tuple[int, str]]] = {}
        self._attach_actions: list[Callable[[FakeTmux, str], None]] = []
        self._next_pane = 0

    # =========================================================================
    # Test controls
    # =========================================================================

    def fail_next(self, operation: str, returncode: int = 1, stderr: str = "server exploded") -> None:
        self._failures.setdefault(operation, []).append((returncode, stderr))

    def on_attach(self, action: Callable[[FakeTmux, str], None]) -> None:
        self._attach_actions.append(action)

    def add_session(self, name: str, windows: tuple[str, ...] = ("bash",)) -> FakeSession:
        session = FakeSession(name)
        for window_name in windows:
            self._add_window(session, window_name)
        session.current = 0
        self.sessions[name] = session
        return session

    # User actions performed "inside" an attached session

    def rename_session(self, old: str, new: str) -> None:
        session = self.sessions.pop(old)
        session.name = new
        self.sessions[new] = session

    def new_window(self, session: str, name: str) -> None:
        self._add_window(self.sessions[session], name)

    def rename_window(self, session: str, old: str, new: str) -> None:
        self.sessions[session].window(old).name = new

    def close_window(self, session: str, name: str) -> None:
        target = self.sessions[session]
        target.windows = [w for w in target.windows if w.name != name]
        target.current = 0
        if not target.windows:
            del self.sessions[session]

    def split(self, session: str, window: str = "", times: int = 1) -> None:
        target = self.sessions[session].window(window)
        for _ in range(times):
            target.panes.append(self._pane_id())

    def window_names(self, session: str) -> list[str]:
        return [w.name for w in self.sessions[session].windows]

    def pane_counts(self, session: str) -> dict[str, int]:
        return {w.name: len(w.panes) for w in self.sessions[session].windows}

    # =========================================================================
    # Entry points
    # =========================================================================

    def attach(self, argv: list[str]) -> subprocess.CompletedProcess:
        _, args = self._split_argv(argv)
        session = self._parse(args[1:])[0]["-t"].lstrip("=")
        self.attaches.append(session)
        if self._attach_actions:
            self._attach_actions.pop(0)(self, session)
        return subprocess.CompletedProcess(argv, 0)

    def __call__(self, argv: list[str]) -> subprocess.CompletedProcess:
        self.calls.append(list(argv))
        _, args = self._split_argv(argv)
        operation = args[0]

        failures = self._failures.get(operation)
        if failures:
            returncode, stderr = failures.pop(0)
            return self._done(argv, returncode, stderr=stderr)

        # list-panes -s is a flag, new-session -s takes a name
        flags = VALUE_FLAGS - {"-s"} if operation == "list-panes" else VALUE_FLAGS
        options, positional = self._parse(args[1:], flags)
        handler = getattr(self, "_cmd_" + operation.lstrip("-").replace("-", "_"))
        return handler(argv, options, positional)

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _split_argv(argv: list[str]) -> tuple[str, list[str]]:
        binary, args = argv[0], list(argv[1:])
        if args[:1] == ["-L"]:
            args = args[2:]
        return binary, args

    @staticmethod
    def _parse(args: list[str], value_flags: set[str] = VALUE_FLAGS) -> tuple[dict[str, str | bool], list[str]]:
        options: dict[str, str | bool] = {}
        positional: list[str] = []
        i = 0
        while i < len(args):
            arg = args[i]
            if arg in value_flags:
                options[arg] = args[i + 1]
                i += 2
            elif arg.startswith("-") and len(arg) == 2 and not positional:
                options[arg] = True
                i += 1
            else:
                positional.append(arg)
                i += 1
        return options, positional

    @staticmethod
    def _done(argv, returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(argv, returncode, stdout=stdout, stderr=stderr)

    def _pane_id(self) -> int:
        self._next_pane += 1
        return self._next_pane

    def _add_window(self, session: FakeSession, name: str) -> FakeWindow:
        index = max((w.index for w in session.windows), default=-1) + 1
        window = FakeWindow(index, name, [self._pane_id()])
        session.windows.append(window)
        session.current = len(session.windows) - 1
        return window

    def _resolve(self, target: str) -> tuple[FakeSession | None, FakeWindow | None, str | None]:
        """Resolve "=sess[:window[.pane]]"; only exact session names match."""
        assert target.startswith("="), f"target without exact-match prefix: {target}"
        session_part, _, rest = target[1:].partition(":")
        session = self.sessions.get(session_part)
        if session is None:
            return None, None, None
        window_part, dot, pane_part = rest.partition(".")
        window = session.window(window_part)
        return session, window, pane_part if dot else None

    def _missing(self, argv, what: str) -> subprocess.CompletedProcess:
        return self._done(argv, 1, stderr=f"can't find {what}\n")

    def _cmd_new_session(self, argv, options, positional):
        name = options["-s"]
        if name in self.sessions:
            return self._done(argv, 1, stderr=f"duplicate session: {name}\n")
        self.add_session(name, (options.get("-n") or "bash",))
        self.created.append(name)
        self.startup_commands.extend(positional)
        return self._done(argv)

    def _cmd_new_window(self, argv, options, positional):
        session, _, _ = self._resolve(options["-t"].rstrip(":"))
        if session is None:
            return self._missing(argv, "session")
        self._add_window(session, options.get("-n") or "bash")
        self.startup_commands.extend(positional)
        return self._done(argv)

    def _cmd_split_window(self, argv, options, positional):
        session, window, _ = self._resolve(options["-t"])
        if window is None:
            return self._missing(argv, "window")
        window.panes.insert(window.active_pane + 1, self._pane_id())
        window.active_pane += 1
        self.startup_commands.extend(positional)
        return self._done(argv)

    def _cmd_select_window(self, argv, options, positional):
        session, window, _ = self._resolve(options["-t"])
        if window is None:
            return self._missing(argv, "window")
        session.current = session.windows.index(window)
        return self._done(argv)

    def _cmd_select_pane(self, argv, options, positional):
        session, window, pane = self._resolve(options["-t"])
        if window is None or pane is None or not pane.isdigit() or int(pane) >= len(window.panes):
            return self._missing(argv, "pane")
        window.active_pane = int(pane)
        return self._done(argv)

    def _cmd_select_layout(self, argv, options, positional):
        session, window, _ = self._resolve(options["-t"])
        if window is None:
            return self._missing(argv, "window")
        window.layout = positional[0]
        return self._done(argv)

    def _cmd_kill_session(self, argv, options, positional):
        session, _, _ = self._resolve(options["-t"])
        if session is None:
            return self._missing(argv, "session")
        del self.sessions[session.name]
        self.killed.append(session.name)
        return self._done(argv)

    def _cmd_has_session(self, argv, options, positional):
        session, _, _ = self._resolve(options["-t"])
        return self._done(argv) if session else self._missing(argv, "session")

    def _cmd_list_sessions(self, argv, options, positional):
        if not self.sessions:
            return self._done(argv, 1, stderr="no server running on /tmp/tmux-1000/default\n")
        if "-F" in options:
            lines = list(self.sessions)
        else:
            lines = [f"{s.name}: {len(s.windows)} windows (created Mon Oct 19 10:00:00 2026)"
                     for s in self.sessions.values()]
        return self._done(argv, stdout="".join(f"{line}\n" for line in lines))

    def _cmd_list_windows(self, argv, options, positional):
        session, _, _ = self._resolve(options["-t"])
        if session is None:
            return self._missing(argv, "session")
        stdout = "".join(f"{w.index}\t{w.name}\n" for w in session.windows)
        return self._done(argv, stdout=stdout)

    def _cmd_list_panes(self, argv, options, positional):
        session, window, _ = self._resolve(options["-t"])
        if session is None or window is None:
            return self._missing(argv, "window")
        windows = session.windows if options.get("-s") else [window]
        stdout = "".join(f"%{pane}\n" for w in windows for pane in w.panes)
        return self._done(argv, stdout=stdout)

    def _cmd_V(self, argv, options, positional):
        return self._done(argv, stdout="tmux 3.4\n")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_tmux() -> FakeTmux:
    return FakeTmux()


@pytest.fixture
def driver(fake_tmux) -> TmuxDriver:
    return TmuxDriver("tmux", runner=fake_tmux)


@pytest.fixture
def lease(driver) -> NamespaceLease:
    return NamespaceLease(driver)


@pytest.fixture
def message_dir(tmp_path) -> Path:
    path = tmp_path / "messages"
    path.mkdir()
    return path


@pytest.fixture
def injector(lease, message_dir) -> MessageInjector:
    return MessageInjector(lease.registry, "/bin/sh", tmp_dir=message_dir)


@pytest.fixture
def settings(tmp_path) -> TutorialSettings:
    return TutorialSettings(shell="/bin/sh", progress_path=tmp_path / "progress")


@pytest.fixture
def progress(settings) -> ProgressStore:
    return ProgressStore(settings.progress_path)


@pytest.fixture
def pauses() -> list[str]:
    return []


@pytest.fixture
def engine(driver, lease, injector, fake_tmux, progress, settings, pauses) -> ScenarioEngine:
    return ScenarioEngine(
        driver=driver,
        lease=lease,
        injector=injector,
        verifier=StateVerifier(driver),
        bridge=AttachBridge(driver, attacher=fake_tmux.attach),
        progress=progress,
        settings=settings,
        pause=pauses.append,
    )
