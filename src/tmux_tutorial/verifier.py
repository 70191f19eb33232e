"""
State verifier: read-only questions about live tmux state.

Verification only looks at the resulting structure (sessions, windows,
panes), never at how the user got there. Nothing is cached; every call
re-reads tmux.
"""

from __future__ import annotations

from tmux_tutorial.commands import session_target, window_target
from tmux_tutorial.driver import TmuxDriver
from tmux_tutorial.errors import DriverError, NotFoundError


class StateVerifier:
    def __init__(self, driver: TmuxDriver):
        self.driver = driver

    def session_exists(self, name: str) -> bool:
        return self.driver.has_session(name)

    def window_names(self, session: str) -> list[str]:
        """Window names in index order; empty when the session is gone."""
        try:
            return [name for _, name in self.driver.list_windows(session)]
        except DriverError:
            if not self.session_exists(session):
                return []
            raise

    def window_exists(self, session: str, window_name: str) -> bool:
        return window_name in self.window_names(session)

    def window_count(self, session: str) -> int:
        """
        Raises:
            NotFoundError: the session does not exist
            DriverError: tmux failed for another reason
        """
        try:
            return len(self.driver.list_windows(session))
        except DriverError as e:
            if not self.session_exists(session):
                raise NotFoundError(session) from e
            raise

    def pane_count(self, session: str, window: str | int | None = None, all_windows: bool = False) -> int:
        """
        Count panes in one window (the current one when `window` is None) or,
        with `all_windows`, across the whole session.

        Raises:
            NotFoundError: the session does not exist
            DriverError: tmux failed for another reason (e.g. no such window)
        """
        target = session_target(session) if all_windows else window_target(session, window)
        try:
            return self.driver.list_panes(target, all_windows=all_windows)
        except DriverError as e:
            if not self.session_exists(session):
                raise NotFoundError(session) from e
            raise
