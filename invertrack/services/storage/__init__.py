"""
Storage Services Package

Provides the abstract repository interface and its implementations.
Currently implements a local JSON key-value file as the backend,
but designed to be swappable.
"""

from invertrack.services.storage.interface import (
    CorruptDataError,
    PortfolioRepository,
    StorageError,
    StorageWriteError,
)
from invertrack.services.storage.local_store import (
    InMemoryPortfolioRepository,
    JsonFilePortfolioRepository,
    JsonKeyValueStore,
)

__all__ = [
    # Interface
    "PortfolioRepository",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryPortfolioRepository",
    "JsonFilePortfolioRepository",
    "JsonKeyValueStore",
]
