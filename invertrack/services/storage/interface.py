"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for portfolio persistence.
This allows us to:
1. Swap the local JSON store for a real database later
2. Use in-memory storage for testing
3. Keep the tracker decoupled from storage implementation

The interface is intentionally tiny: the whole portfolio is loaded once
and saved whole after each change (last write wins).
"""

from abc import ABC, abstractmethod

from invertrack.models.portfolio import PortfolioState


class PortfolioRepository(ABC):
    """
    Abstract interface for portfolio persistence.

    Implementations never raise from load() or save(): failures are
    logged and turned into the seed data or a False return value.
    """

    @abstractmethod
    def load(self) -> PortfolioState:
        """
        Load the stored portfolio.

        Returns:
            The stored state, or the default seed state when nothing is
            stored yet or the stored data cannot be parsed
        """
        pass

    @abstractmethod
    def save(self, state: PortfolioState) -> bool:
        """
        Replace the stored portfolio with `state`.

        Returns:
            True if saved successfully, False otherwise
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored data exists but cannot be parsed."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass
