"""The eight chapters, as data for ScenarioEngine."""

from __future__ import annotations

from rich.markup import escape

from tmux_tutorial import TUTORIAL_PREFIX as P
from tmux_tutorial import content
from tmux_tutorial.commands import Orientation
from tmux_tutorial.steps import (
    ApplyLayout,
    AwaitAttach,
    Build,
    CreateSession,
    CreateWindow,
    DestroySession,
    Explain,
    FocusPane,
    FocusWindow,
    PaneCountAtLeast,
    Report,
    Scenario,
    SessionAbsent,
    SessionExists,
    ShowSessions,
    SplitPane,
    Verify,
    WindowAbsent,
    WindowCountAtLeast,
    WindowExists,
)
from tmux_tutorial.ui import fmt_challenge, fmt_code, fmt_info, fmt_key, fmt_success, fmt_warning

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


def _literal(text: str) -> tuple[str, ...]:
    return tuple(escape(line) for line in text.splitlines())


# =============================================================================
# Chapter 1: What is tmux?
# =============================================================================

CHAPTER_1 = Scenario(
    number=1,
    title="What is tmux?",
    steps=(
        Explain((
            fmt_info("tmux is a [bold]terminal multiplexer[/bold]. It lets you:"),
            "",
            "    1. Run multiple terminal sessions inside one terminal",
            "    2. Detach from sessions and reattach later",
            "    3. Keep processes running after you disconnect",
            "",
            fmt_info("tmux uses a [bold]client-server model[/bold]:"),
            "    • The [cyan]server[/cyan] runs in the background, managing all sessions",
            "    • The [cyan]client[/cyan] is your terminal window that connects to a session",
            "    • When you detach, the server keeps running -- your work persists!",
            "",
        )),
        Explain(subtitle="Let's Try It", separator=True),
        Build(
            (CreateSession("basics", message=(
                "",
                "  Welcome to your first tmux session!",
                "",
                "  This session will persist even after you detach.",
                "",
                "  Try typing some commands, then detach with: Ctrl+B d",
                "",
            )),),
            announce=f"Creating a tmux session called '{P}basics'...",
        ),
        Explain((
            "",
            fmt_info("You're about to be dropped into a real tmux session."),
            fmt_info("Type some commands, look around, then:"),
            "",
            fmt_key("Ctrl+B d", "Detach from the session (press Ctrl+B, release, then d)"),
        )),
        AwaitAttach("basics", prompt="Press Enter to attach to the session... (instructions will be shown inside)"),
        Explain(("", fmt_success("You detached! You're back in the tutorial script.")), subtitle=None),
        Explain(
            (
                fmt_info("Even though you left, the session is still running:"),
                "",
                fmt_code("$ tmux list-sessions"),
            ),
            subtitle="The Session is Still Alive",
        ),
        ShowSessions(),
        Explain((
            "",
            fmt_info("Now let's kill it to see the difference:"),
            fmt_code(f"$ tmux kill-session -t {P}basics"),
            "",
        )),
        Build((DestroySession("basics"),), sweep=False),
        Verify(SessionAbsent("basics"), passed="Session killed. It's gone now."),
        Explain((
            "",
            fmt_info("Key takeaway: sessions persist when you [bold]detach[/bold], "
                     "but die when you [bold]kill[/bold] them."),
        )),
    ),
    keys=(("Ctrl+B d", "Detach from current session"),),
)


# =============================================================================
# Chapter 2: Session Management
# =============================================================================


def _project_message(name: str) -> tuple[str, ...]:
    return (
        "",
        f"  === Session: {name} ===",
        "",
        "  Try switching between the 3 sessions:",
        "    Ctrl+B s    List sessions (arrows to navigate, Enter to select)",
        "    Ctrl+B )    Next session",
        "    Ctrl+B (    Previous session",
        "",
        "  When done exploring: Ctrl+B d  to detach",
        "",
    )


CHAPTER_2 = Scenario(
    number=2,
    title="Session Management",
    steps=(
        Explain((
            fmt_info("You can run multiple named sessions simultaneously."),
            fmt_info("This is great for organizing different projects or contexts."),
            "",
        )),
        Build(
            tuple(
                CreateSession(name, message=_project_message(name))
                for name in ("project-a", "project-b", "project-c")
            ),
            announce="Creating 3 sessions: project-a, project-b, project-c...",
        ),
        Explain((
            "",
            fmt_info("Three sessions are now running. Inside tmux you can:"),
            "",
            fmt_key("Ctrl+B s", "Show session list (navigate with arrows, Enter to select)"),
            fmt_key("Ctrl+B (", "Switch to previous session"),
            fmt_key("Ctrl+B )", "Switch to next session"),
            fmt_challenge("Switch between all 3 sessions using Ctrl+B s or Ctrl+B (/)"),
            "",
            fmt_info("When done exploring, detach with Ctrl+B d."),
        )),
        AwaitAttach("project-a", prompt="Press Enter to attach to project-a... (instructions will be shown inside)"),
        Explain(("", fmt_success("Back in the tutorial!"))),
        Explain(
            (fmt_info("Let's test session renaming."),),
            subtitle="Challenge: Rename a Session",
            separator=True,
        ),
        Build(
            (CreateSession("rename-me", message=(
                "",
                "  CHALLENGE: Rename this session",
                "",
                "  Steps:",
                "    1. Press Ctrl+B $",
                f"    2. Clear the current name, type: {P}my-project",
                "    3. Press Enter",
                "    4. Ctrl+B d  to detach and check your answer",
                "",
            )),),
            announce=f"Creating session '{P}rename-me'...",
        ),
        Explain((
            "",
            fmt_key("Ctrl+B $", "Rename current session"),
            fmt_challenge(f"Rename the session from '{P}rename-me' to '{P}my-project'"),
            fmt_info(f"(Type '{P}my-project' when prompted for the new name)"),
        )),
        AwaitAttach("rename-me", fallbacks=("my-project",)),
        Explain(("",)),
        Verify(
            SessionExists("my-project"),
            passed=f"Session renamed to '{P}my-project' -- well done!",
            failed=f"Session wasn't renamed to '{P}my-project'.",
            hints=(
                "That's OK! The command is: Ctrl+B $ then type the new name.",
                "You can practice this anytime.",
            ),
        ),
    ),
    keys=(
        ("Ctrl+B s", "List/switch sessions"),
        ("Ctrl+B $", "Rename current session"),
        ("Ctrl+B (", "Previous session"),
        ("Ctrl+B )", "Next session"),
    ),
)


# =============================================================================
# Chapter 3: Windows
# =============================================================================


def _window_nav_message(title: str) -> tuple[str, ...]:
    return (
        "",
        f"  === {title} ===",
        "",
        "  Navigate between the 3 windows:",
        "    Ctrl+B n/p  Switch windows",
        "    Ctrl+B 0-2  Jump to window by number",
        "    Ctrl+B w    Window list (interactive)",
        "    Ctrl+B d    Detach",
        "",
        "  Look at the status bar at the bottom -- it shows all windows.",
        "",
    )


CHAPTER_3 = Scenario(
    number=3,
    title="Windows (Like Browser Tabs)",
    steps=(
        Explain((
            fmt_info("Inside a session, you can have multiple [bold]windows[/bold]."),
            fmt_info("Think of them like browser tabs -- each is a full terminal."),
            "",
            fmt_info("The status bar at the bottom shows your windows."),
            "",
        )),
        Build(
            (
                CreateSession("windows", window="editor", message=_window_nav_message("EDITOR WINDOW (0)")),
                CreateWindow("windows", "server", message=_window_nav_message("SERVER WINDOW (1)")),
                CreateWindow("windows", "logs", message=_window_nav_message("LOGS WINDOW (2)")),
                FocusWindow("windows", "editor"),
            ),
            announce="Creating a session with 3 named windows...",
        ),
        Explain((
            "",
            fmt_info("Navigate between windows with:"),
            "",
            fmt_key("Ctrl+B n", "Next window"),
            fmt_key("Ctrl+B p", "Previous window"),
            fmt_key("Ctrl+B 0", "Go to window 0 (editor)"),
            fmt_key("Ctrl+B 1", "Go to window 1 (server)"),
            fmt_key("Ctrl+B 2", "Go to window 2 (logs)"),
            fmt_key("Ctrl+B w", "List all windows (interactive picker)"),
            "",
            fmt_info("Look at the [bold]status bar at the bottom[/bold] -- it shows all windows."),
        )),
        AwaitAttach(
            "windows",
            prompt="Press Enter to attach (start in 'editor' window)... (instructions will be shown inside)",
        ),
        Explain(("", fmt_success("Good! Now let's try creating and managing windows."))),
        Explain(subtitle="Challenge: Create, Rename, and Close Windows", separator=True),
        Build(
            (
                CreateSession("windows", window="keep-me", message=(
                    "",
                    "  CHALLENGE: Create, Rename, and Close Windows",
                    "",
                    "    1. Ctrl+B c    Create a new window",
                    "    2. Ctrl+B ,    Rename it to: new-window",
                    "    3. Ctrl+B n/p  Navigate to the 'delete-me' window",
                    "    4. Ctrl+B &    Close it (confirm with y)",
                    "    5. Ctrl+B d    Detach to check your answers",
                    "",
                )),
                CreateWindow("windows", "delete-me", message=(
                    "",
                    "  Close this window with: Ctrl+B &  (then confirm with y)",
                    "  Then: Ctrl+B d  to detach",
                    "",
                )),
                FocusWindow("windows", "keep-me"),
            ),
            announce="Re-creating the session for the challenge...",
        ),
        Explain((
            "",
            fmt_key("Ctrl+B c", "Create a new window"),
            fmt_key("Ctrl+B ,", "Rename current window"),
            fmt_key("Ctrl+B &", "Close current window (confirm with y)"),
            fmt_challenge("Do all three:"),
            fmt_key("Ctrl+B c", "Create a new window"),
            fmt_key("Ctrl+B ,", "Rename it to 'new-window'"),
            fmt_key("Ctrl+B n/p then Ctrl+B &", "Switch to 'delete-me' and close it (confirm with y)"),
            fmt_key("Ctrl+B d", "Detach to check your answers"),
        )),
        AwaitAttach("windows"),
        Explain(("",)),
        Verify(
            WindowExists("windows", "new-window"),
            passed="Window 'new-window' exists -- great job creating and renaming!",
            failed="Didn't find a window named 'new-window'.",
            hints=("Remember: Ctrl+B c creates, Ctrl+B , renames.",),
        ),
        Verify(
            WindowAbsent("windows", "delete-me"),
            passed="Window 'delete-me' was closed -- nice!",
            failed="Window 'delete-me' still exists.",
            hints=("Remember: Ctrl+B & closes a window (confirm with y).",),
        ),
        Report("Perfect! All challenges completed!"),
    ),
    keys=(
        ("Ctrl+B c", "Create new window"),
        ("Ctrl+B n / p", "Next / previous window"),
        ("Ctrl+B 0-9", "Switch to window by number"),
        ("Ctrl+B w", "List all windows"),
        ("Ctrl+B ,", "Rename current window"),
        ("Ctrl+B &", "Close current window"),
    ),
)


# =============================================================================
# Chapter 4: Panes
# =============================================================================


def _pane_info_message(title: str) -> tuple[str, ...]:
    return (
        "",
        f"  === {title} ===",
        "",
        "  Navigate between the 3 panes:",
        "    Ctrl+B arrow    Move to adjacent pane",
        "    Ctrl+B o        Cycle to next pane",
        "    Ctrl+B q        Show pane numbers",
        "",
        "  Try also:",
        "    Ctrl+B z          Zoom/unzoom current pane",
        "    Ctrl+B Ctrl+arrow Resize pane",
        "    Ctrl+B Space      Cycle layouts",
        "",
        "  When done: Ctrl+B d  to detach",
        "",
    )


CHAPTER_4 = Scenario(
    number=4,
    title="Panes (Split Screen)",
    steps=(
        Explain((
            fmt_info("Panes let you split a single window into multiple terminals."),
            fmt_info("This is one of tmux's most powerful features."),
            "",
        )),
        Build(
            (
                CreateSession("panes", sized=True, message=_pane_info_message("PANE 0 (top-left)")),
                SplitPane("panes", H, message=_pane_info_message("PANE 1 (top-right)")),
                SplitPane("panes", V, message=_pane_info_message("PANE 2 (bottom-right)")),
                FocusPane("panes", 0),
            ),
            announce="Creating a session with pre-split panes...",
        ),
        Explain((
            "",
            fmt_info("Navigation:"),
            fmt_key("Ctrl+B arrow", "Move to adjacent pane"),
            fmt_key("Ctrl+B o", "Cycle to next pane"),
            fmt_key("Ctrl+B q", "Flash pane numbers (press number to jump)"),
            "",
            fmt_info("Resizing:"),
            fmt_key("Ctrl+B Ctrl+arrow", "Resize pane in that direction"),
            "",
            fmt_info("Zoom:"),
            fmt_key("Ctrl+B z", "Zoom pane to full window (toggle)"),
            "",
            fmt_info("Layouts:"),
            fmt_key("Ctrl+B Space", "Cycle through preset layouts"),
            "",
            fmt_info("Try navigating between the 3 panes and experimenting with zoom."),
        )),
        AwaitAttach("panes"),
        Explain(("", fmt_success("Great! Now let's learn to create panes."))),
        Explain(subtitle="Creating Panes", separator=True),
        Build(
            (CreateSession("panes", sized=True, message=(
                "",
                "  CHALLENGE: Create 4+ panes",
                "",
                "    Ctrl+B %    Split left/right",
                '    Ctrl+B "    Split top/bottom',
                "",
                "  Goal: split until you have at least 4 panes total.",
                "  Then: Ctrl+B d  to detach and check your count",
                "",
            )),),
            announce="Creating a fresh session for splitting practice...",
        ),
        Explain((
            "",
            fmt_key("Ctrl+B %", "Split vertically (left/right)"),
            fmt_key('Ctrl+B "', "Split horizontally (top/bottom)"),
            fmt_key("Ctrl+B x", "Close current pane"),
            fmt_challenge("Create at least 4 panes total using splits, then detach."),
        )),
        AwaitAttach("panes"),
        Explain(("",)),
        Verify(
            PaneCountAtLeast("panes", 4),
            passed="You created {actual} panes -- excellent!",
            failed="You have {actual} pane(s). Try creating more next time (need 4+).",
            hints=('Remember: Ctrl+B % and Ctrl+B " create splits.',),
            soft=True,
        ),
    ),
    keys=(
        ("Ctrl+B %", "Split left/right"),
        ('Ctrl+B "', "Split top/bottom"),
        ("Ctrl+B arrow", "Navigate panes"),
        ("Ctrl+B o", "Cycle panes"),
        ("Ctrl+B q", "Show pane numbers"),
        ("Ctrl+B z", "Zoom/unzoom"),
        ("Ctrl+B x", "Close pane"),
        ("Ctrl+B Ctrl+arrow", "Resize pane"),
        ("Ctrl+B Space", "Cycle layouts"),
    ),
)


# =============================================================================
# Chapter 5: Copy Mode & Scrollback
# =============================================================================

SCROLLBACK_MESSAGE = tuple(content.SCROLLBACK_LINE.format(n=n) for n in range(1, 101)) + (
    "",
    '>>> CHALLENGE: Find "Line 50" <<<',
    "",
    "  1. Ctrl+B [    Enter copy mode",
    "  2. /Line 50    Search forward (then Enter)",
    "  3. q           Exit copy mode",
    "  4. Ctrl+B d    Detach when done",
)

CHAPTER_5 = Scenario(
    number=5,
    title="Copy Mode & Scrollback",
    steps=(
        Explain((
            fmt_info("By default, you can't scroll in tmux with your mouse or trackpad."),
            fmt_info("Instead, you use [bold]copy mode[/bold] to scroll, search, and copy text."),
            "",
        )),
        Build(
            (CreateSession("copymode", sized=True, message=SCROLLBACK_MESSAGE),),
            announce="Creating a session with 100 lines of output...",
        ),
        Explain(("", fmt_info("There are 100 lines of output in this session."))),
        Explain(
            (
                fmt_key("Ctrl+B [", "Enter copy mode"),
                fmt_key("q", "Exit copy mode"),
                fmt_key("Up/Down/PgUp/PgDn", "Scroll in copy mode"),
                fmt_key("/", "Search forward"),
                fmt_key("?", "Search backward"),
                fmt_key("n", "Next search match"),
                fmt_key("N", "Previous search match"),
            ),
            subtitle="Copy Mode Controls",
        ),
        Explain(
            (
                fmt_key("Space", "Start selection (in copy mode)"),
                fmt_key("Enter", "Copy selection and exit copy mode"),
                fmt_key("Ctrl+B ]", "Paste copied text"),
                fmt_challenge("Enter copy mode and search for 'Line 50' using /"),
                "",
                fmt_info(escape("Steps: Ctrl+B [  then type  /Line 50  then Enter")),
                fmt_info("Press q to exit copy mode, then Ctrl+B d to detach."),
            ),
            subtitle="Selecting & Copying",
        ),
        AwaitAttach("copymode"),
        Explain((
            "",
            fmt_success("Copy mode is essential for working with long output."),
            fmt_info("Tip: You can enable mouse scrolling in copy mode with:"),
            fmt_code("set -g mouse on  (in .tmux.conf or via Ctrl+B :)"),
        )),
    ),
    keys=(
        ("Ctrl+B [", "Enter copy mode"),
        ("q", "Exit copy mode"),
        ("/", "Search forward"),
        ("?", "Search backward"),
        ("Space", "Start selection"),
        ("Enter", "Copy selection"),
        ("Ctrl+B ]", "Paste"),
    ),
)


# =============================================================================
# Chapter 6: Command Mode
# =============================================================================

CHAPTER_6 = Scenario(
    number=6,
    title="Command Mode",
    steps=(
        Explain((
            fmt_info("tmux has a built-in command prompt, like vim's ':' mode."),
            fmt_info("You can run any tmux command interactively."),
            "",
            fmt_key("Ctrl+B :", "Open tmux command prompt"),
            fmt_key("Ctrl+B ?", "List ALL keybindings"),
            "",
        )),
        Build(
            (CreateSession("commands", sized=True, message=(
                "",
                "  Welcome to Command Mode practice!",
                "",
                "  Press Ctrl+B : to open the command prompt.",
                "  Try these commands:",
                "",
                "    display-panes       -- flash pane numbers",
                "    clock-mode          -- show a clock (q to exit)",
                "    new-window -n test  -- create window named test",
                "    split-window -h     -- split horizontally",
                "    list-keys           -- show all key bindings",
                "",
                "  Press q to exit clock mode / list-keys viewer",
                "",
                "  CHALLENGE: Change the status bar color",
                "    Ctrl+B :  then type:  set status-style bg=red",
                "",
                "  When done experimenting: Ctrl+B d  to detach",
                "",
            )),),
            announce="Creating session for command mode practice...",
        ),
        Explain(
            (
                "  [cyan]display-panes[/cyan]       Flash pane numbers on screen",
                "  [cyan]clock-mode[/cyan]          Show a big clock (press q to exit)",
                "  [cyan]new-window -n test[/cyan]  Create a new window named 'test'",
                "  [cyan]split-window -h[/cyan]     Split pane left/right",
                "  [cyan]list-keys[/cyan]           Show all keybindings",
                "  [cyan]list-commands[/cyan]       Show all available commands",
                fmt_challenge("Use Ctrl+B : then type:  set status-style bg=red"),
                fmt_info("This changes your status bar color live! (Resets when session ends)"),
            ),
            subtitle="Useful Commands to Try",
        ),
        AwaitAttach("commands"),
        Explain((
            "",
            fmt_success("Command mode is powerful for one-off adjustments and exploration."),
            fmt_info("Tip: Ctrl+B ? shows ALL keybindings -- great for discovering features."),
        )),
    ),
    keys=(
        ("Ctrl+B :", "Open command prompt"),
        ("Ctrl+B ?", "List all keybindings"),
    ),
)


# =============================================================================
# Chapter 7: Customization
# =============================================================================

CHAPTER_7 = Scenario(
    number=7,
    title="Customization (.tmux.conf)",
    steps=(
        Explain((
            fmt_info("tmux is configured via [bold]~/.tmux.conf[/bold]."),
            fmt_info("Changes take effect on new sessions or after sourcing the file."),
            "",
            fmt_warning("This tutorial will NOT modify your config. We'll just show examples."),
        )),
        Explain(("",) + _literal(content.SAMPLE_TMUX_CONF), subtitle="Sample ~/.tmux.conf", separator=True),
        Explain((
            "",
            fmt_info("Key customizations explained:"),
            "",
            "  [cyan]set -g mouse on[/cyan]",
            "  Enables mouse click to select panes, scroll, resize.",
            "",
            "  [cyan]" + escape('bind | split-window -h -c "#{pane_current_path}"') + "[/cyan]",
            "  Maps Ctrl+B | to split (more intuitive than Ctrl+B %).",
            "  The -c flag keeps the same working directory.",
            "",
            "  [cyan]bind r source-file ~/.tmux.conf[/cyan]",
            "  Maps Ctrl+B r to reload your config without restarting.",
        )),
        Explain(
            tuple(f"  [cyan]{name:<18}[/cyan] {description}" for name, description in content.PLUGINS) + (
                "",
                fmt_info("Install tpm: git clone https://github.com/tmux-plugins/tpm ~/.tmux/plugins/tpm"),
            ),
            subtitle="Popular Plugins",
            separator=True,
        ),
        Explain(subtitle="Try Live Customization", separator=True),
        Build(
            (CreateSession("config", sized=True, message=(
                "",
                "  Experiment with live settings via Ctrl+B :",
                "",
                "  Try these (via Ctrl+B :):",
                "    set -g mouse on",
                "    set -g status-position top",
                "    set -g status-style bg=blue",
                "",
                "  These are temporary -- they reset when the session ends.",
                "",
                "  When done: Ctrl+B d  to detach",
                "",
            )),),
            announce="Creating a session to experiment with live settings...",
        ),
        Explain(("", fmt_info("Try some live settings via Ctrl+B : and detach when done."))),
        AwaitAttach("config"),
        Explain(("", fmt_success("Remember: put your permanent settings in ~/.tmux.conf"))),
    ),
)


# =============================================================================
# Chapter 8: Putting It All Together
# =============================================================================


def _workspace_message(title: str) -> tuple[str, ...]:
    return (
        "",
        f"  === {title} ===",
        "",
        "  Explore this scripted workspace:",
        "    3 windows: editor, server (2 panes), monitor (4 panes)",
        "    Ctrl+B n/p    Switch windows",
        "    Ctrl+B arrow  Switch panes (in server/monitor)",
        "    Ctrl+B Space  Cycle layouts (try on monitor window)",
        "",
        "  When done: Ctrl+B d  to detach",
        "",
    )


CHAPTER_8 = Scenario(
    number=8,
    title="Putting It All Together",
    steps=(
        Explain((
            fmt_info("Let's build a complete dev workspace programmatically."),
            fmt_info("This shows you how to script tmux for repeatable setups."),
        )),
        Explain(
            (fmt_info("Here are the exact commands we'll run:"), "") + _literal(content.WORKSPACE_SCRIPT),
            subtitle="The Script",
            separator=True,
        ),
        Build(
            (
                CreateSession("workspace", window="editor", sized=True, message=_workspace_message("EDITOR")),
                CreateWindow("workspace", "server", message=_workspace_message("MAIN SERVER")),
                SplitPane("workspace", H, window="server", message=_workspace_message("API SERVER")),
                CreateWindow("workspace", "monitor", message=_workspace_message("CPU MONITOR")),
                SplitPane("workspace", H, window="monitor", message=_workspace_message("MEMORY MONITOR")),
                SplitPane("workspace", V, window="monitor", message=_workspace_message("NETWORK MONITOR")),
                FocusPane("workspace", 0, window="monitor"),
                SplitPane("workspace", V, window="monitor", message=_workspace_message("DISK MONITOR")),
                ApplyLayout("workspace", "monitor", "tiled"),
                FocusWindow("workspace", "editor"),
            ),
            announce="Building the workspace now...",
        ),
        Explain((
            "",
            fmt_success("Workspace built! 3 windows: editor, server (2 panes), monitor (4 panes)"),
            "",
            fmt_info("Explore all windows and panes. Use what you've learned!"),
            fmt_info("Cycle layouts on the monitor window with Ctrl+B Space."),
        )),
        AwaitAttach("workspace"),
        Explain(("", fmt_success("You've explored a scripted workspace!"))),
        Explain(subtitle="Final Challenge: Build Your Own", separator=True),
        Build((CreateSession("final", sized=True, message=(
            "",
            "  Build your own workspace!",
            "",
            "  Create at least:",
            "    - 2 windows  (Ctrl+B c)",
            '    - 3 panes total  (Ctrl+B % and Ctrl+B ")',
            "",
            "  Then detach with Ctrl+B d",
            "",
        )),)),
        Explain((fmt_challenge("Build a workspace with at least 2 windows and 3 total panes."),)),
        AwaitAttach("final"),
        Explain(("",)),
        Verify(
            SessionExists("final"),
            failed="Session not found -- that's OK if you killed it.",
            gate=True,
        ),
        Verify(
            WindowCountAtLeast("final", 2),
            passed="Windows: {actual} (needed 2+) -- great!",
            failed="Windows: {actual} (needed 2+)",
        ),
        Verify(
            PaneCountAtLeast("final", 3, all_windows=True),
            passed="Panes: {actual} total (needed 3+) -- great!",
            failed="Panes: {actual} total (needed 3+)",
        ),
        Report("You've completed the tmux tutorial!", banner=True),
    ),
    pause_after=False,
)


SCENARIOS: tuple[Scenario, ...] = (
    CHAPTER_1,
    CHAPTER_2,
    CHAPTER_3,
    CHAPTER_4,
    CHAPTER_5,
    CHAPTER_6,
    CHAPTER_7,
    CHAPTER_8,
)


def scenario(number: int) -> Scenario:
    for candidate in SCENARIOS:
        if candidate.number == number:
            return candidate
    raise KeyError(number)
