"""
Ephemeral message injector.

Instruction text is shown inside a pane by writing it to a one-shot temp
file and starting the pane with a command that prints the file, deletes it,
and then becomes the user's shell:

    cat '/tmp/tut-msg-abc123'; rm -f '/tmp/tut-msg-abc123'; exec '/bin/zsh'
"""

from __future__ import annotations

import os
import shlex
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path

from loguru import logger

from tmux_tutorial import TUTORIAL_PREFIX
from tmux_tutorial.errors import ResourceError


class ArtifactRegistry:
    """Paths of message files that still need deleting.

    Owned by the namespace lease and handed to the injector, so every file
    the injector creates is removed by the lease's sweep even when its pane
    never got to run `rm`.
    """

    def __init__(self):
        self._paths: list[Path] = []

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self):
        return iter(list(self._paths))

    def add(self, path: Path) -> None:
        self._paths.append(path)

    def purge(self) -> int:
        """Delete every registered file. Returns how many were still present."""
        removed = 0
        for path in self._paths:
            try:
                if path.exists():
                    path.unlink()
                    removed += 1
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning(
                    "Could not delete message file",
                    operation="purge_artifacts",
                    status="failed",
                    path=str(path),
                    error=str(e),
                )
        self._paths.clear()
        return removed


class MessageInjector:
    def __init__(
        self,
        registry: ArtifactRegistry,
        shell: str,
        prefix: str = TUTORIAL_PREFIX,
        tmp_dir: str | os.PathLike | None = None,
    ):
        self.registry = registry
        self.shell = shell
        self.prefix = prefix
        self.tmp_dir = tmp_dir

    def write_artifact(self, lines: Iterable[str]) -> Path:
        """Write lines to a fresh `<prefix>msg-XXXXXX` temp file and register it."""
        try:
            fd, name = tempfile.mkstemp(prefix=f"{self.prefix}msg-", dir=self.tmp_dir)
        except OSError as e:
            raise ResourceError(f"Cannot create message file: {e}") from e

        path = Path(name)
        self.registry.add(path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                for line in lines:
                    f.write(f"{line}\n")
        except OSError as e:
            raise ResourceError(f"Cannot write message file {path}: {e}") from e
        return path

    def startup_command(self, path: Path) -> str:
        quoted = shlex.quote(str(path))
        # "zsh -l" stays two words; each word is quoted on its own
        shell = shlex.join(shlex.split(self.shell))
        return f"cat {quoted}; rm -f {quoted}; exec {shell}"

    def prepare(self, lines: Sequence[str]) -> str:
        """
        Prepare a pane startup command that shows `lines` then runs the shell.

        Raises:
            ResourceError: the temp directory is not writable
        """
        path = self.write_artifact(lines)
        logger.debug(
            "Message artifact written",
            operation="prepare_message",
            status="success",
            path=str(path),
            metrics={"lines": len(lines)},
        )
        return self.startup_command(path)
