"""
Typed tmux commands.

One dataclass per control operation. Each serializes to the argument list
that follows the tmux binary, so startup commands and names travel as single
argv elements and never go through a shell on our side.

Session targets are always sent as "=name": tmux otherwise resolves a target
by prefix, and "tut-panes" must never match a user session "tut-panes-old".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

# Formats for the list-* commands; fields are tab separated
SESSION_FORMAT = "#{session_name}"
WINDOW_FORMAT = "#{window_index}\t#{window_name}"
PANE_FORMAT = "#{pane_id}"


def session_target(session: str) -> str:
    return f"={session}"


def window_target(session: str, window: str | int | None = None) -> str:
    if window is None:
        return session_target(session)
    return f"={session}:{window}"


def pane_target(session: str, pane: int, window: str | int | None = None) -> str:
    return f"={session}:{'' if window is None else window}.{pane}"


class Orientation(Enum):
    """Split direction, named after where the new pane appears."""

    HORIZONTAL = "-h"  # left/right (Ctrl+B %)
    VERTICAL = "-v"    # top/bottom (Ctrl+B ")


@dataclass(frozen=True)
class TmuxCommand:
    operation: ClassVar[str] = ""

    @property
    def target(self) -> str | None:
        return None

    def args(self) -> list[str]:
        raise NotImplementedError


def _with_startup(args: list[str], startup_command: str | None) -> list[str]:
    if startup_command:
        args.append(startup_command)
    return args


@dataclass(frozen=True)
class NewSession(TmuxCommand):
    operation: ClassVar[str] = "new-session"

    name: str
    window_name: str | None = None
    width: int | None = None
    height: int | None = None
    startup_command: str | None = None

    @property
    def target(self) -> str:
        return self.name

    def args(self) -> list[str]:
        args = [self.operation, "-d", "-s", self.name]
        if self.window_name:
            args += ["-n", self.window_name]
        if self.width is not None and self.height is not None:
            args += ["-x", str(self.width), "-y", str(self.height)]
        return _with_startup(args, self.startup_command)


@dataclass(frozen=True)
class NewWindow(TmuxCommand):
    operation: ClassVar[str] = "new-window"

    session: str
    name: str
    startup_command: str | None = None

    @property
    def target(self) -> str:
        return f"{self.session}:{self.name}"

    def args(self) -> list[str]:
        # Trailing ":" makes tmux pick the next free index in that session
        args = [self.operation, "-t", f"{session_target(self.session)}:", "-n", self.name]
        return _with_startup(args, self.startup_command)


@dataclass(frozen=True)
class SplitWindow(TmuxCommand):
    operation: ClassVar[str] = "split-window"

    target_spec: str
    orientation: Orientation = Orientation.HORIZONTAL
    startup_command: str | None = None

    @property
    def target(self) -> str:
        return self.target_spec

    def args(self) -> list[str]:
        args = [self.operation, self.orientation.value, "-t", self.target_spec]
        return _with_startup(args, self.startup_command)


@dataclass(frozen=True)
class SelectWindow(TmuxCommand):
    operation: ClassVar[str] = "select-window"

    target_spec: str

    @property
    def target(self) -> str:
        return self.target_spec

    def args(self) -> list[str]:
        return [self.operation, "-t", self.target_spec]


@dataclass(frozen=True)
class SelectPane(TmuxCommand):
    operation: ClassVar[str] = "select-pane"

    target_spec: str

    @property
    def target(self) -> str:
        return self.target_spec

    def args(self) -> list[str]:
        return [self.operation, "-t", self.target_spec]


@dataclass(frozen=True)
class SelectLayout(TmuxCommand):
    operation: ClassVar[str] = "select-layout"

    target_spec: str
    layout: str

    @property
    def target(self) -> str:
        return self.target_spec

    def args(self) -> list[str]:
        return [self.operation, "-t", self.target_spec, self.layout]


@dataclass(frozen=True)
class KillSession(TmuxCommand):
    operation: ClassVar[str] = "kill-session"

    name: str

    @property
    def target(self) -> str:
        return self.name

    def args(self) -> list[str]:
        return [self.operation, "-t", session_target(self.name)]


@dataclass(frozen=True)
class HasSession(TmuxCommand):
    operation: ClassVar[str] = "has-session"

    name: str

    @property
    def target(self) -> str:
        return self.name

    def args(self) -> list[str]:
        return [self.operation, "-t", session_target(self.name)]


@dataclass(frozen=True)
class ListSessions(TmuxCommand):
    operation: ClassVar[str] = "list-sessions"

    fmt: str | None = SESSION_FORMAT

    def args(self) -> list[str]:
        if self.fmt is None:
            return [self.operation]
        return [self.operation, "-F", self.fmt]


@dataclass(frozen=True)
class ListWindows(TmuxCommand):
    operation: ClassVar[str] = "list-windows"

    session: str

    @property
    def target(self) -> str:
        return self.session

    def args(self) -> list[str]:
        return [self.operation, "-t", session_target(self.session), "-F", WINDOW_FORMAT]


@dataclass(frozen=True)
class ListPanes(TmuxCommand):
    operation: ClassVar[str] = "list-panes"

    target_spec: str
    all_windows: bool = False

    @property
    def target(self) -> str:
        return self.target_spec

    def args(self) -> list[str]:
        args = [self.operation]
        if self.all_windows:
            # -s: every pane of every window in the target session
            args.append("-s")
        return args + ["-t", self.target_spec, "-F", PANE_FORMAT]


@dataclass(frozen=True)
class AttachSession(TmuxCommand):
    operation: ClassVar[str] = "attach-session"

    name: str

    @property
    def target(self) -> str:
        return self.name

    def args(self) -> list[str]:
        return [self.operation, "-t", session_target(self.name)]


@dataclass(frozen=True)
class Version(TmuxCommand):
    operation: ClassVar[str] = "-V"

    def args(self) -> list[str]:
        return [self.operation]
