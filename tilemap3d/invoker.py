"""Undoable editor commands and a bounded undo stack."""

from __future__ import annotations

import abc
import logging

logger = logging.getLogger(__name__)

MAX_COMMAND_STACK_SIZE = 100


class Command(abc.ABC):
    """An editor action that can be undone."""

    @abc.abstractmethod
    def execute(self) -> None:
        """Apply the action."""

    @abc.abstractmethod
    def undo(self) -> None:
        """Revert the action."""


class Invoker:
    """Runs commands and keeps the most recent ones for undo."""

    def __init__(self, max_size: int = MAX_COMMAND_STACK_SIZE):
        self.max_size = max_size
        self._stack: list[Command] = []

    def __len__(self) -> int:
        return len(self._stack)

    def execute(self, command: Command) -> None:
        """Run ``command`` and push it; drops the oldest command when full."""
        if len(self._stack) >= self.max_size:
            logger.warning("Command stack is full, removing the oldest command.")
            self._stack.pop(0)
        command.execute()
        self._stack.append(command)

    def undo_last(self) -> None:
        """Undo and discard the most recent command, if any."""
        if self._stack:
            self._stack[-1].undo()
            self._stack.pop()