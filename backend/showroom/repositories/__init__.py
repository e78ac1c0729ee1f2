from .base import ChangeSet, LedgerRepository, RepositoryError
from .memory import InMemoryRepository

# SqlRepository lives in .sql and is imported lazily: it needs the models,
# which need the extensions module that builds the ledger.

__all__ = ['ChangeSet', 'LedgerRepository', 'RepositoryError', 'InMemoryRepository']
