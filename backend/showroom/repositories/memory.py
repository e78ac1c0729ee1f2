from __future__ import annotations

from ..entities import LedgerState
from .base import ChangeSet, LedgerRepository


class InMemoryRepository(LedgerRepository):
    """
    Default backend: state lives in this object only.

    A ledger re-initialized over the same repository instance sees everything
    committed before, which is what tests and the CLI demo rely on.
    """

    def __init__(self, initial: LedgerState | None = None):
        self._state = initial.copy() if initial is not None else LedgerState()
        self.commit_count = 0

    def load(self) -> LedgerState:
        return self._state.copy()

    def commit(self, changes: ChangeSet) -> None:
        self._state.apply(changes)
        self.commit_count += 1
