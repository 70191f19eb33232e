"""
Scenario engine: interprets a Scenario's steps against live tmux.

Per scenario:

    Explaining -> Building -> AwaitingAttach -> Attached -> Verifying
               -> Reporting -> Persisted

Stages repeat as the steps dictate (chapters build and attach more than
once). Persisted is always reached unless the run is interrupted: the
namespace is swept and the chapter number saved whether or not the user
passed the checks.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from uuid import uuid4

from loguru import logger
from rich.markup import escape

from tmux_tutorial import ui
from tmux_tutorial.bridge import AttachBridge
from tmux_tutorial.commands import pane_target, window_target
from tmux_tutorial.config_loader import TutorialSettings
from tmux_tutorial.driver import TmuxDriver
from tmux_tutorial.errors import DriverError, ErrorReport, ResourceError, TutorialError
from tmux_tutorial.injector import MessageInjector
from tmux_tutorial.lifecycle import NamespaceLease
from tmux_tutorial.logging_config import trace_id_var
from tmux_tutorial.progress import ProgressStore
from tmux_tutorial.scenarios import SCENARIOS
from tmux_tutorial.steps import (
    ADVISORY_OPS,
    ApplyLayout,
    AwaitAttach,
    Build,
    BuildOp,
    CreateSession,
    CreateWindow,
    DestroySession,
    Explain,
    FocusPane,
    FocusWindow,
    Report,
    Scenario,
    ShowSessions,
    SplitPane,
    Verify,
)
from tmux_tutorial.verifier import StateVerifier

Pause = Callable[[str], None]


class Stage(Enum):
    EXPLAINING = "explaining"
    BUILDING = "building"
    AWAITING_ATTACH = "awaiting_attach"
    ATTACHED = "attached"
    VERIFYING = "verifying"
    REPORTING = "reporting"
    PERSISTED = "persisted"


@dataclass
class CheckOutcome:
    description: str
    passed: bool
    actual: int | None = None


@dataclass
class ScenarioOutcome:
    number: int
    title: str
    trace_id: str
    checks: list[CheckOutcome] = field(default_factory=list)
    stages: list[Stage] = field(default_factory=list)
    aborted: bool = False
    reported: bool = False
    persisted: bool = False
    duration_ms: int = 0

    @property
    def all_passed(self) -> bool:
        return all(check.passed for check in self.checks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "checks_total": len(self.checks),
            "checks_passed": sum(1 for check in self.checks if check.passed),
            "aborted": self.aborted,
            "persisted": self.persisted,
            "duration_ms": self.duration_ms,
        }


@dataclass
class _Run:
    """Mutable state for one scenario run."""

    outcome: ScenarioOutcome
    report: ErrorReport = field(default_factory=ErrorReport)
    constructed: bool = False
    # Checks since the latest Build
    segment: list[CheckOutcome] = field(default_factory=list)
    gated: bool = False


class _Aborted(Exception):
    """The first construction call of a scenario failed."""


class ScenarioEngine:
    def __init__(
        self,
        driver: TmuxDriver,
        lease: NamespaceLease,
        injector: MessageInjector,
        verifier: StateVerifier,
        bridge: AttachBridge,
        progress: ProgressStore,
        settings: TutorialSettings,
        pause: Pause | None = None,
    ):
        self.driver = driver
        self.lease = lease
        self.injector = injector
        self.verifier = verifier
        self.bridge = bridge
        self.progress = progress
        self.settings = settings
        self.pause = pause or ui.wait_for_enter

    def run_from(self, start: int, scenarios: tuple[Scenario, ...] = SCENARIOS) -> list[ScenarioOutcome]:
        """Run every scenario numbered `start` or later, in order."""
        return [self.run_scenario(s) for s in scenarios if s.number >= start]

    def run_scenario(self, scenario: Scenario) -> ScenarioOutcome:
        trace_id = str(uuid4())
        token = trace_id_var.set(trace_id)
        run = _Run(ScenarioOutcome(scenario.number, scenario.title, trace_id))
        start_time = time.perf_counter()

        logger.info(
            "Scenario started",
            operation="run_scenario",
            status="started",
            trace_id=trace_id,
            chapter=scenario.number,
            title=scenario.title,
        )

        try:
            ui.clear()
            ui.print_header(f"Chapter {scenario.number}: {scenario.title}")
            try:
                for step in scenario.steps:
                    self._run_step(step, run)
            except _Aborted:
                run.outcome.aborted = True
            except TutorialError as e:
                # Anything that escaped the per-step handling; the chapter still ends normally
                run.report.add_error(e.to_error())
                ui.warning(f"Something went wrong in this chapter: {e}")

            if scenario.keys and not run.outcome.aborted:
                ui.separator()
                ui.console.print("  [bold]Keys learned this chapter:[/bold]")
                for keys, description in scenario.keys:
                    ui.key(keys, description)
                ui.blank()

            self._persist(scenario, run)
        finally:
            trace_id_var.reset(token)

        run.outcome.duration_ms = int((time.perf_counter() - start_time) * 1000)
        run.report.log_summary(trace_id)
        logger.info(
            "Scenario finished",
            operation="run_scenario",
            status="aborted" if run.outcome.aborted else "complete",
            trace_id=trace_id,
            chapter=scenario.number,
            metrics=run.outcome.to_dict(),
        )

        if scenario.pause_after:
            self.pause("Press Enter to continue...")
        return run.outcome

    # =========================================================================
    # Steps
    # =========================================================================

    def _enter(self, run: _Run, stage: Stage) -> None:
        run.outcome.stages.append(stage)

    def _run_step(self, step, run: _Run) -> None:
        if isinstance(step, Explain):
            self._explain(step, run)
        elif isinstance(step, Build):
            self._build(step, run)
        elif isinstance(step, ShowSessions):
            self._show_sessions(run)
        elif isinstance(step, AwaitAttach):
            self._await_attach(step, run)
        elif isinstance(step, Verify):
            self._verify(step, run)
        elif isinstance(step, Report):
            self._report(step, run)
        else:
            raise TypeError(f"Unknown step: {step!r}")

    def _explain(self, step: Explain, run: _Run) -> None:
        self._enter(run, Stage.EXPLAINING)
        if step.separator:
            ui.separator()
        if step.subtitle:
            ui.print_subheader(step.subtitle)
        ui.print_lines(step.lines)

    def _build(self, step: Build, run: _Run) -> None:
        self._enter(run, Stage.BUILDING)
        run.segment = []
        run.gated = False

        if step.sweep:
            self.lease.sweep(trigger="build")
        if step.announce:
            ui.action(step.announce)

        for op in step.ops:
            try:
                self._apply(op, run)
            except DriverError as e:
                if isinstance(op, ADVISORY_OPS):
                    run.report.add_warning(e.to_error())
                    continue
                if not run.constructed:
                    run.report.add_error(e.to_error())
                    ui.warning(f"Could not set up this chapter, skipping it: {e}")
                    raise _Aborted() from e
                run.report.add_warning(e.to_error())
                ui.warning(f"Setup step failed: {e}")
            if not isinstance(op, ADVISORY_OPS):
                run.constructed = True

    def _startup(self, lines: tuple[str, ...], run: _Run) -> str | None:
        """Startup command showing `lines`; None (a plain shell) if there are none or the write fails."""
        if not lines:
            return None
        try:
            return self.injector.prepare(lines)
        except ResourceError as e:
            run.report.add_warning(e.to_error())
            ui.warning("Could not prepare the instructions for this pane; it starts with a plain shell.")
            return None

    def _apply(self, op: BuildOp, run: _Run) -> None:
        q = self.lease.qualify
        if isinstance(op, CreateSession):
            width, height = (self.settings.width, self.settings.height) if op.sized else (None, None)
            self.driver.create_session(
                q(op.name), op.window, width, height, self._startup(op.message, run),
            )
        elif isinstance(op, CreateWindow):
            self.driver.create_window(q(op.session), op.name, self._startup(op.message, run))
        elif isinstance(op, SplitPane):
            self.driver.split_pane(
                window_target(q(op.session), op.window), op.orientation, self._startup(op.message, run),
            )
        elif isinstance(op, FocusWindow):
            self.driver.select_window(window_target(q(op.session), op.window))
        elif isinstance(op, FocusPane):
            self.driver.select_pane(pane_target(q(op.session), op.pane, op.window))
        elif isinstance(op, ApplyLayout):
            self.driver.apply_layout(window_target(q(op.session), op.window), op.layout)
        elif isinstance(op, DestroySession):
            self.driver.kill_session(q(op.name))
        else:
            raise TypeError(f"Unknown build operation: {op!r}")

    def _show_sessions(self, run: _Run) -> None:
        try:
            lines = self.driver.session_listing()
        except DriverError as e:
            run.report.add_warning(e.to_error())
            ui.warning(f"Could not list sessions: {e}")
            return
        if not lines:
            ui.console.print("  [dim](no sessions)[/dim]")
        for line in lines:
            ui.console.print(f"  [green]{escape(line)}[/green]")
        ui.blank()

    def _await_attach(self, step: AwaitAttach, run: _Run) -> None:
        self._enter(run, Stage.AWAITING_ATTACH)
        self.pause(step.prompt)

        target = self.lease.qualify(step.session)
        for fallback in step.fallbacks:
            if self.verifier.session_exists(target):
                break
            candidate = self.lease.qualify(fallback)
            if self.verifier.session_exists(candidate):
                target = candidate

        self._enter(run, Stage.ATTACHED)
        result = self.bridge.attach_and_wait(target)
        if not run.report.collect_result(result):
            ui.info(result.error.message)

    def _verify(self, step: Verify, run: _Run) -> None:
        self._enter(run, Stage.VERIFYING)
        if run.gated:
            return

        try:
            result = step.check.evaluate(self.verifier, self.lease.qualify)
        except DriverError as e:
            run.report.add_warning(e.to_error())
            result_passed, actual = False, None
        else:
            result_passed, actual = result.passed, result.actual

        check = CheckOutcome(step.check.describe(), result_passed, actual)
        run.segment.append(check)
        run.outcome.checks.append(check)
        logger.info(
            "Check evaluated",
            operation="verify",
            status="passed" if check.passed else "failed",
            check=check.description,
            actual=actual,
        )

        def render(text: str) -> str:
            return text.replace("{actual}", str(actual)) if actual is not None else text

        if check.passed:
            if step.passed:
                ui.success(render(step.passed))
            return

        if step.gate:
            run.gated = True
            if step.failed:
                ui.info(render(step.failed))
            return
        if step.failed:
            (ui.info if step.soft else ui.fail)(render(step.failed))
        for hint in step.hints:
            ui.info(hint)

    def _report(self, step: Report, run: _Run) -> None:
        self._enter(run, Stage.REPORTING)
        if run.gated or not run.segment or not all(c.passed for c in run.segment):
            return
        run.outcome.reported = True
        ui.blank()
        if step.banner:
            ui.console.print(f"  [bold white on green] CONGRATULATIONS! [/] {step.all_passed}")
        else:
            ui.success(f"[bold]{step.all_passed}[/bold]")

    def _persist(self, scenario: Scenario, run: _Run) -> None:
        self._enter(run, Stage.PERSISTED)
        ui.blank()
        self.lease.sweep(trigger="scenario_end")
        run.outcome.persisted = self.progress.save(scenario.number)
