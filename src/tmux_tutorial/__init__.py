"""
Interactive tmux tutorial.

Learn tmux by doing: the tutorial creates real tmux sessions, hands the
terminal over to you, and checks what you did once you detach.
"""

__version__ = "1.1.0"

REPO_URL = "https://github.com/aurelienbaroiller/tmux-tutorial"

# Every session and message artifact the tutorial creates starts with this.
TUTORIAL_PREFIX = "tut-"

TOTAL_CHAPTERS = 8
