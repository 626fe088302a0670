"""All-or-nothing execution of ledger operations.

Participants expose ``snapshot()`` and ``restore(state)``. ``atomic`` takes a
snapshot of each on entry and restores all of them if the body raises, then
lets the exception propagate.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

import structlog

logger = structlog.get_logger()


class Participant(Protocol):
    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


@contextmanager
def atomic(*participants: Participant, name: str = "tx") -> Iterator[None]:
    """Run the enclosed block as one indivisible transition.

    Args:
        participants: Objects whose state must roll back together
        name: Operation name, used in the rollback log line
    """
    snapshots = [(p, p.snapshot()) for p in participants]
    try:
        yield
    except BaseException as exc:
        for participant, state in reversed(snapshots):
            participant.restore(state)
        logger.debug("transaction_rolled_back", operation=name, error=type(exc).__name__)
        raise
