"""Services package."""

from invertrack.services.storage import (
    CorruptDataError,
    InMemoryPortfolioRepository,
    JsonFilePortfolioRepository,
    JsonKeyValueStore,
    PortfolioRepository,
    StorageError,
    StorageWriteError,
)

__all__ = [
    # Storage services
    "CorruptDataError",
    "InMemoryPortfolioRepository",
    "JsonFilePortfolioRepository",
    "JsonKeyValueStore",
    "PortfolioRepository",
    "StorageError",
    "StorageWriteError",
]
