"""
Clipboard collaborators used by the query processor.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class Clipboard(ABC):
    """Destination for reconstructed SQL text."""

    @abstractmethod
    def copy(self, text: str) -> bool:
        """Copy ``text``; return True on success."""
        pass


class CommandClipboard(Clipboard):
    """
    Copies text by piping it to a platform clipboard command.

    The first command found on PATH is used.
    """

    DEFAULT_COMMANDS = [
        ["pbcopy"],
        ["clip"],
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]

    def __init__(self, commands: Optional[Sequence[List[str]]] = None,
                 encoding: str = "utf-8", timeout: float = 5.0):
        self.commands = list(commands) if commands is not None else self.DEFAULT_COMMANDS
        self.encoding = encoding
        self.timeout = timeout

    def _find_command(self) -> Optional[List[str]]:
        for command in self.commands:
            if shutil.which(command[0]):
                return command
        return None

    def copy(self, text: str) -> bool:
        command = self._find_command()
        if command is None:
            logger.warning("No clipboard command available (tried %s)",
                           ", ".join(c[0] for c in self.commands))
            return False

        try:
            completed = subprocess.run(command, input=text.encode(self.encoding),
                                       timeout=self.timeout, check=False)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Clipboard command %s failed: %s", command[0], e)
            return False

        return completed.returncode == 0
