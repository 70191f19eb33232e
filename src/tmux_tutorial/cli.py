"""
Command-line entry point.

    tmux-tutorial            interactive menu
    tmux-tutorial 3          run chapters 3..8
    tmux-tutorial cheat      print the cheat sheet

Exit codes: 0 normal (including quit and an invalid menu choice), 1 missing
tmux / running inside tmux / bad usage, 130 interrupted.
"""

from __future__ import annotations

import os
import shutil
import sys
from collections.abc import Mapping, Sequence

from loguru import logger
from rich.markup import escape

from tmux_tutorial import REPO_URL, TOTAL_CHAPTERS, __version__, content, ui
from tmux_tutorial.bridge import AttachBridge
from tmux_tutorial.config_loader import DEFAULT_CONFIG, TutorialSettings, deep_merge, load_config
from tmux_tutorial.driver import TmuxDriver
from tmux_tutorial.engine import Pause, ScenarioEngine
from tmux_tutorial.errors import DriverError, PreconditionError
from tmux_tutorial.injector import MessageInjector
from tmux_tutorial.lifecycle import NamespaceLease
from tmux_tutorial.logging_config import setup_logger
from tmux_tutorial.progress import ProgressStore
from tmux_tutorial.scenarios import SCENARIOS
from tmux_tutorial.verifier import StateVerifier

USAGE = "Usage: tmux-tutorial [1-8|cheat]"
CHEAT_ARGS = ("cheat", "cheatsheet", "c")
EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INTERRUPTED = 130


# =============================================================================
# Preconditions
# =============================================================================


def check_preconditions(settings: TutorialSettings, environ: Mapping[str, str] | None = None) -> None:
    """
    Raises:
        PreconditionError: tmux is not installed, or we are already inside tmux
    """
    environ = os.environ if environ is None else environ

    if shutil.which(settings.tmux_binary) is None:
        raise PreconditionError(
            "Error: tmux is not installed.",
            guidance=("Install it with:",) + tuple(
                f"  {platform + ':':<9}{command}" for platform, command in content.INSTALL_GUIDANCE
            ),
        )

    if environ.get("TMUX"):
        raise PreconditionError(
            "Error: You're running this inside tmux!",
            guidance=(
                "This tutorial creates and attaches to tmux sessions, which gets",
                "confusing when nested. Please detach first:",
                "",
                "  Press Ctrl+B then d  to detach from your current session",
                "",
                "Then run this again from a regular terminal.",
            ),
        )


def print_precondition_error(error: PreconditionError) -> None:
    ui.console.print(f"[red]{escape(str(error))}[/red]")
    ui.blank()
    for line in error.guidance:
        ui.console.print(escape(line))


# =============================================================================
# Screens
# =============================================================================


def print_cheatsheet() -> None:
    ui.print_header("tmux Cheat Sheet")
    ui.console.print(f"[bold]  {escape(content.CHEAT_SHEET_PREFIX)}[/bold]")
    ui.blank()
    for section, width, pairs in content.CHEAT_SHEET:
        ui.console.print(f"  [cyan bold]{escape(section)}[/]")
        ui.console.print("  " + "─" * 52)
        for keys, description in pairs:
            ui.console.print(f"  [yellow]{escape(keys.ljust(width))}[/yellow] {escape(description)}")
        ui.blank()


def tmux_version(driver: TmuxDriver) -> str:
    try:
        return driver.version() or "unknown"
    except DriverError:
        return "unknown"


def show_welcome(driver: TmuxDriver) -> None:
    ui.clear()
    ui.console.print(f"[cyan bold]{content.BANNER}[/]")
    ui.console.print("  [bold]Interactive tmux Tutorial[/bold]")
    ui.console.print("  [dim]Learn by doing -- real sessions, real practice[/dim]")
    ui.console.print(f"  [dim]v{__version__} · {REPO_URL}[/dim]")
    ui.blank()
    ui.console.print(f"  tmux version: {escape(tmux_version(driver))}")
    ui.blank()


def can_resume(saved: int) -> bool:
    return 0 < saved < TOTAL_CHAPTERS


def show_menu(saved: int) -> None:
    ui.separator()
    ui.blank()
    ui.console.print("  [bold]Chapters:[/bold]")
    ui.blank()
    for scenario in SCENARIOS:
        marker = "[green]✓[/green]" if scenario.number <= saved else " "
        ui.console.print(f"  {marker}  [bold]{scenario.number}.[/bold] {escape(scenario.title)}")
    ui.blank()
    ui.separator()
    ui.blank()
    ui.console.print("  [bold]Options:[/bold]")
    ui.blank()
    ui.console.print("  [cyan]a[/cyan]  Start from the beginning")
    if can_resume(saved):
        ui.console.print(f"  [cyan]r[/cyan]  Resume from Chapter {saved + 1}")
    ui.console.print(f"  [cyan]1-{TOTAL_CHAPTERS}[/cyan]  Jump to a specific chapter")
    ui.console.print("  [cyan]c[/cyan]  Print cheat sheet only")
    ui.console.print("  [cyan]q[/cyan]  Quit")
    ui.blank()


def parse_chapter(text: str) -> int | None:
    """Chapter number for "1".."8", else None."""
    if len(text) == 1 and text.isdigit() and 1 <= int(text) <= TOTAL_CHAPTERS:
        return int(text)
    return None


# =============================================================================
# Running
# =============================================================================


def build_engine(
    settings: TutorialSettings,
    driver: TmuxDriver,
    lease: NamespaceLease,
    pause: Pause | None = None,
) -> ScenarioEngine:
    return ScenarioEngine(
        driver=driver,
        lease=lease,
        injector=MessageInjector(lease.registry, settings.shell, prefix=lease.prefix),
        verifier=StateVerifier(driver),
        bridge=AttachBridge(driver),
        progress=ProgressStore(settings.progress_path),
        settings=settings,
        pause=pause,
    )


def run_all_from(engine: ScenarioEngine, start: int) -> None:
    engine.run_from(start)
    ui.blank()
    ui.print_header("Tutorial Complete!")
    print_cheatsheet()
    ui.info("Your progress is saved. Run tmux-tutorial anytime to review.")
    ui.info("Happy tmuxing!")
    ui.blank()


def run_menu(engine: ScenarioEngine) -> None:
    saved = engine.progress.load()
    show_menu(saved)
    choice = ui.prompt("Choose: ").strip()

    logger.info("Menu choice", operation="menu", status="selected", choice=choice)

    chapter = parse_chapter(choice)
    if choice in ("a", "A"):
        run_all_from(engine, 1)
    elif choice in ("r", "R"):
        run_all_from(engine, saved + 1 if can_resume(saved) else 1)
    elif chapter is not None:
        run_all_from(engine, chapter)
    elif choice in ("c", "C"):
        print_cheatsheet()
    elif choice in ("q", "Q"):
        ui.blank()
        ui.info("Bye! Run tmux-tutorial anytime to practice.")
        ui.blank()
    else:
        ui.fail("Invalid choice.")


def load_settings() -> TutorialSettings:
    config_result = load_config()
    if config_result.is_ok():
        config = config_result.value
    else:
        ui.warning(f"Ignoring config file: {escape(config_result.error.message)}")
        config = deep_merge(DEFAULT_CONFIG, {})

    settings, problems = TutorialSettings.from_config(config)
    for problem in problems:
        logger.warning(
            "Config value ignored",
            operation="load_settings",
            status="fallback",
            problem=problem.message,
            error_type=problem.error_type.value,
        )
        ui.warning(f"Config value ignored: {escape(problem.message)}")
    return settings


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    # File-only until the config says otherwise
    setup_logger()
    settings = load_settings()
    if settings.console_log_level or settings.file_log_level != "DEBUG":
        setup_logger(settings.console_log_level, settings.file_log_level)

    logger.info(
        "Tutorial starting",
        operation="main",
        status="started",
        version=__version__,
        args=args,
    )

    try:
        check_preconditions(settings)
    except PreconditionError as e:
        logger.error(str(e), operation="main", status="precondition_failed")
        print_precondition_error(e)
        return EXIT_USAGE

    start = None
    if args:
        if args[0] in CHEAT_ARGS:
            print_cheatsheet()
            return EXIT_OK
        start = parse_chapter(args[0])
        if start is None:
            print(USAGE)
            return EXIT_USAGE

    driver = TmuxDriver(settings.tmux_binary, settings.socket_name)
    try:
        with NamespaceLease(driver) as lease:
            engine = build_engine(settings, driver, lease)
            show_welcome(driver)
            if start is not None:
                run_all_from(engine, start)
            else:
                run_menu(engine)
    except KeyboardInterrupt as e:
        ui.blank()
        logger.info(
            "Tutorial interrupted",
            operation="main",
            status="interrupted",
            signal=getattr(e, "signum", None),
        )
        return EXIT_INTERRUPTED

    logger.info("Tutorial finished", operation="main", status="complete")
    return EXIT_OK
