"""Pause gate collaborator.

The pool consults the gate before any side effect of a mutating operation;
who may flip it is decided by the pool's admin check.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PauseGate(Protocol):
    """Anything that can tell the pool whether it is paused."""

    def is_paused(self) -> bool: ...


class PauseSwitch:
    """Simple in-memory pause flag."""

    def __init__(self, paused: bool = False) -> None:
        self._paused = paused

    def is_paused(self) -> bool:
        return self._paused

    def set_paused(self, paused: bool) -> None:
        self._paused = paused

    def snapshot(self) -> bool:
        return self._paused

    def restore(self, state: bool) -> None:
        self._paused = state
