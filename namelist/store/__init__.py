from __future__ import annotations

from ._store import NameStore, WriteTransaction
from .filters import SEARCH_MODES, And, BeginsWith, Contains, Or, Predicate, build_filter
from .results import NotificationToken, ResultSet, compute_changes
from .types import (
    CollectionChange,
    ErrorChange,
    InitialChange,
    Record,
    TransactionError,
    UpdateChange,
)

__all__ = [
    "And",
    "BeginsWith",
    "CollectionChange",
    "Contains",
    "ErrorChange",
    "InitialChange",
    "NameStore",
    "NotificationToken",
    "Or",
    "Predicate",
    "Record",
    "ResultSet",
    "SEARCH_MODES",
    "TransactionError",
    "UpdateChange",
    "WriteTransaction",
    "build_filter",
    "compute_changes",
]
