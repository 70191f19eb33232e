"""Static text: banner, cheat sheet, sample config, workspace script."""

from __future__ import annotations

BANNER = r"""
    ████████╗███╗   ███╗██╗   ██╗██╗  ██╗
    ╚══██╔══╝████╗ ████║██║   ██║╚██╗██╔╝
       ██║   ██╔████╔██║██║   ██║ ╚███╔╝
       ██║   ██║╚██╔╝██║██║   ██║ ██╔██╗
       ██║   ██║ ╚═╝ ██║╚██████╔╝██╔╝ ██╗
       ╚═╝   ╚═╝     ╚═╝ ╚═════╝ ╚═╝  ╚═╝
"""

CHEAT_SHEET_PREFIX = "PREFIX KEY: Ctrl+B  (press Ctrl+B first, then the command key)"

# (section title, key column width, ((keys, description), ...))
CHEAT_SHEET: tuple[tuple[str, int, tuple[tuple[str, str], ...]], ...] = (
    ("Sessions", 18, (
        ("Ctrl+B d", "Detach from session"),
        ("Ctrl+B s", "List/switch sessions"),
        ("Ctrl+B $", "Rename current session"),
        ("Ctrl+B (", "Previous session"),
        ("Ctrl+B )", "Next session"),
    )),
    ("Windows", 18, (
        ("Ctrl+B c", "Create new window"),
        ("Ctrl+B n", "Next window"),
        ("Ctrl+B p", "Previous window"),
        ("Ctrl+B 0-9", "Switch to window N"),
        ("Ctrl+B w", "List all windows"),
        ("Ctrl+B ,", "Rename current window"),
        ("Ctrl+B &", "Close current window"),
    )),
    ("Panes", 18, (
        ("Ctrl+B %", "Split vertically (left/right)"),
        ('Ctrl+B "', "Split horizontally (top/bottom)"),
        ("Ctrl+B arrow", "Navigate between panes"),
        ("Ctrl+B o", "Cycle to next pane"),
        ("Ctrl+B q", "Show pane numbers"),
        ("Ctrl+B z", "Zoom/unzoom pane"),
        ("Ctrl+B x", "Close current pane"),
        ("Ctrl+B Ctrl+arrow", "Resize pane"),
        ("Ctrl+B Space", "Cycle layouts"),
    )),
    ("Copy Mode", 18, (
        ("Ctrl+B [", "Enter copy mode (scroll)"),
        ("q", "Exit copy mode"),
        ("/", "Search forward"),
        ("?", "Search backward"),
        ("Space", "Start selection"),
        ("Enter", "Copy selection"),
        ("Ctrl+B ]", "Paste"),
    )),
    ("Command Mode", 18, (
        ("Ctrl+B :", "Open command prompt"),
        ("Ctrl+B ?", "List all keybindings"),
    )),
    ("CLI Commands", 28, (
        ("tmux new -s name", "New named session"),
        ("tmux attach -t name", "Attach to session"),
        ("tmux ls", "List sessions"),
        ("tmux kill-session -t name", "Kill a session"),
        ("tmux kill-server", "Kill all sessions"),
    )),
)

SAMPLE_TMUX_CONF = """\
    # ─── General ─────────────────────────────────────────────
    set -g default-terminal "screen-256color"  # Better colors
    set -g history-limit 50000                 # Scrollback buffer
    set -g mouse on                            # Enable mouse support
    set -g base-index 1                        # Windows start at 1
    setw -g pane-base-index 1                  # Panes start at 1
    set -g renumber-windows on                 # Renumber on close

    # ─── Intuitive Splits ────────────────────────────────────
    bind | split-window -h -c "#{pane_current_path}"  # | for vertical
    bind - split-window -v -c "#{pane_current_path}"  # - for horizontal

    # ─── Pane Navigation (vim-style) ─────────────────────────
    bind h select-pane -L
    bind j select-pane -D
    bind k select-pane -U
    bind l select-pane -R

    # ─── Status Bar ──────────────────────────────────────────
    set -g status-position top
    set -g status-style "bg=#1e1e2e,fg=#cdd6f4"
    set -g status-left "#[bold] #S "
    set -g status-right " %H:%M %d-%b "

    # ─── Reload Config ───────────────────────────────────────
    bind r source-file ~/.tmux.conf \\; display "Config reloaded!"
"""

PLUGINS: tuple[tuple[str, str], ...] = (
    ("tmux-resurrect", "Save/restore sessions across reboots"),
    ("tmux-continuum", "Automatic saving of sessions"),
    ("tmux-sensible", "Sensible defaults everyone agrees on"),
    ("tmux-yank", "System clipboard integration"),
    ("tpm", "Tmux Plugin Manager"),
)

WORKSPACE_SCRIPT = """\
    # Create session with first window named "editor"
    tmux new-session -d -s workspace -n editor -x 120 -y 40

    # Window 2: Server (2 panes - server + api)
    tmux new-window -t workspace -n server
    tmux split-window -h -t workspace:server

    # Window 3: Monitor (4-pane grid)
    tmux new-window -t workspace -n monitor
    tmux split-window -h -t workspace:monitor
    tmux split-window -v -t workspace:monitor
    tmux select-pane -t workspace:monitor.0
    tmux split-window -v -t workspace:monitor
    tmux select-layout -t workspace:monitor tiled

    # Start in editor window
    tmux select-window -t workspace:editor
"""

INSTALL_GUIDANCE: tuple[tuple[str, str], ...] = (
    ("macOS", "brew install tmux"),
    ("Ubuntu", "sudo apt install tmux"),
    ("Fedora", "sudo dnf install tmux"),
)

SCROLLBACK_LINE = "Line {n}: The quick brown fox jumps over the lazy dog"
