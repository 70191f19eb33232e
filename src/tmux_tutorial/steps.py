"""
Scenario data model.

A chapter is an ordered tuple of steps, interpreted by ScenarioEngine:

    Explain      print chapter prose
    Build        sweep the namespace, then create tmux state
    ShowSessions print the live `tmux list-sessions` output
    AwaitAttach  wait for Enter, attach, return on detach
    Verify       evaluate one Check against live state and report it
    Report       print a line when every check since the last Build passed

Session names in steps are written without the namespace prefix; the
engine qualifies them ("panes" -> "tut-panes") before talking to tmux.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from tmux_tutorial.commands import Orientation
from tmux_tutorial.errors import NotFoundError, TutorialError
from tmux_tutorial.verifier import StateVerifier

Qualify = Callable[[str], str]


# =============================================================================
# Build operations
# =============================================================================


@dataclass(frozen=True)
class CreateSession:
    name: str
    window: str | None = None
    message: tuple[str, ...] = ()
    sized: bool = False  # detached size from settings (-x/-y)


@dataclass(frozen=True)
class CreateWindow:
    session: str
    name: str
    message: tuple[str, ...] = ()


@dataclass(frozen=True)
class SplitPane:
    session: str
    orientation: Orientation = Orientation.HORIZONTAL
    window: str | None = None
    message: tuple[str, ...] = ()


@dataclass(frozen=True)
class FocusWindow:
    session: str
    window: str


@dataclass(frozen=True)
class FocusPane:
    session: str
    pane: int
    window: str | None = None


@dataclass(frozen=True)
class ApplyLayout:
    session: str
    window: str | None
    layout: str


@dataclass(frozen=True)
class DestroySession:
    name: str


BuildOp = Union[CreateSession, CreateWindow, SplitPane, FocusWindow, FocusPane, ApplyLayout, DestroySession]

# Failures of these only change focus/arrangement, never what exists
ADVISORY_OPS = (FocusWindow, FocusPane, ApplyLayout)


# =============================================================================
# Checks
# =============================================================================


@dataclass(frozen=True)
class CheckResult:
    passed: bool
    actual: int | None = None
    missing: bool = False


class Check:
    def evaluate(self, verifier: StateVerifier, qualify: Qualify) -> CheckResult:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class SessionExists(Check):
    session: str

    def evaluate(self, verifier, qualify):
        return CheckResult(verifier.session_exists(qualify(self.session)))

    def describe(self) -> str:
        return f"session {self.session} exists"


@dataclass(frozen=True)
class SessionAbsent(Check):
    session: str

    def evaluate(self, verifier, qualify):
        return CheckResult(not verifier.session_exists(qualify(self.session)))

    def describe(self) -> str:
        return f"session {self.session} is gone"


@dataclass(frozen=True)
class WindowExists(Check):
    session: str
    window: str

    def evaluate(self, verifier, qualify):
        return CheckResult(verifier.window_exists(qualify(self.session), self.window))

    def describe(self) -> str:
        return f"window {self.session}:{self.window} exists"


@dataclass(frozen=True)
class WindowAbsent(Check):
    session: str
    window: str

    def evaluate(self, verifier, qualify):
        return CheckResult(not verifier.window_exists(qualify(self.session), self.window))

    def describe(self) -> str:
        return f"window {self.session}:{self.window} is gone"


def _count(query: Callable[[], int]) -> tuple[int, bool]:
    """Run a count query; a query error counts as zero."""
    try:
        return query(), False
    except NotFoundError:
        return 0, True
    except TutorialError:
        return 0, False


@dataclass(frozen=True)
class WindowCountAtLeast(Check):
    session: str
    minimum: int

    def evaluate(self, verifier, qualify):
        actual, missing = _count(lambda: verifier.window_count(qualify(self.session)))
        return CheckResult(actual >= self.minimum, actual, missing)

    def describe(self) -> str:
        return f"{self.session} has {self.minimum}+ windows"


@dataclass(frozen=True)
class PaneCountAtLeast(Check):
    session: str
    minimum: int
    window: str | None = None
    all_windows: bool = False

    def evaluate(self, verifier, qualify):
        actual, missing = _count(lambda: verifier.pane_count(
            qualify(self.session), self.window, all_windows=self.all_windows,
        ))
        return CheckResult(actual >= self.minimum, actual, missing)

    def describe(self) -> str:
        scope = "in total" if self.all_windows else "in one window"
        return f"{self.session} has {self.minimum}+ panes {scope}"


# =============================================================================
# Steps
# =============================================================================


@dataclass(frozen=True)
class Explain:
    lines: tuple[str, ...] = ()
    subtitle: str | None = None
    separator: bool = False


@dataclass(frozen=True)
class Build:
    ops: tuple[BuildOp, ...]
    announce: str | None = None
    sweep: bool = True


@dataclass(frozen=True)
class ShowSessions:
    pass


@dataclass(frozen=True)
class AwaitAttach:
    session: str
    prompt: str = "Press Enter to attach... (instructions will be shown inside)"
    # Tried in order when `session` is gone, e.g. after the user renamed it
    fallbacks: tuple[str, ...] = ()


@dataclass(frozen=True)
class Verify:
    check: Check
    passed: str = ""
    failed: str = ""
    hints: tuple[str, ...] = ()
    # A failed gate prints `failed` as info and skips the segment's remaining checks
    gate: bool = False
    # A failed soft check prints `failed` as info instead of a failure
    soft: bool = False


@dataclass(frozen=True)
class Report:
    all_passed: str
    banner: bool = False


Step = Union[Explain, Build, ShowSessions, AwaitAttach, Verify, Report]


@dataclass(frozen=True)
class Scenario:
    number: int
    title: str
    steps: tuple[Step, ...]
    keys: tuple[tuple[str, str], ...] = ()
    pause_after: bool = True
