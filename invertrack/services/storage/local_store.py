"""
Local Storage Implementation

DESIGN DECISION: The portfolio is kept in a small JSON key-value file,
the way a browser app keeps state in localStorage:
1. No database setup required
2. The file is human readable and easy to back up
3. Several keys can share one file; we only touch ours

TRADEOFFS:
- No transactions; concurrent writers simply overwrite each other
- The whole portfolio is rewritten on every save (it is tiny)
"""

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from invertrack.logger import get_logger
from invertrack.models.portfolio import PortfolioState, default_portfolio_state
from invertrack.services.storage.interface import (
    CorruptDataError,
    PortfolioRepository,
    StorageError,
    StorageWriteError,
)

logger = get_logger(__name__)


class JsonKeyValueStore:
    """
    Low-level key-value file wrapper.

    The file holds one JSON object mapping keys to string values.
    Writes replace the file atomically and are retried on I/O errors.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"{self._path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CorruptDataError(f"{self._path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under `key`, or None if absent."""
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise CorruptDataError(f"Value under '{key}' is not a string")
        return value

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, keeping all other keys."""
        try:
            data = self._read_all()
        except CorruptDataError:
            # Unreadable file: start over rather than refuse to save
            data = {}
        data[key] = value
        try:
            self._write_all(data)
        except OSError as e:
            raise StorageWriteError(f"Could not write {self._path}: {e}") from e


class JsonFilePortfolioRepository(PortfolioRepository):
    """
    Portfolio repository backed by a JsonKeyValueStore.

    The portfolio is serialized to JSON and stored under a fixed key.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        storage_key: Optional[str] = None,
        store: Optional[JsonKeyValueStore] = None,
    ):
        if store is None or storage_key is None:
            from invertrack.config import get_settings

            settings = get_settings().storage
            path = path or settings.path
            storage_key = storage_key or settings.storage_key
        self._store = store or JsonKeyValueStore(path)
        self._key = storage_key

    @property
    def storage_key(self) -> str:
        return self._key

    def load(self) -> PortfolioState:
        try:
            raw = self._store.get(self._key)
        except StorageError as e:
            logger.warning(
                "portfolio_load_fallback",
                reason="unreadable_store",
                error=str(e),
                path=str(self._store.path),
            )
            return default_portfolio_state()

        if raw is None:
            logger.info("portfolio_load_fallback", reason="not_found", key=self._key)
            return default_portfolio_state()

        try:
            state = PortfolioState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "portfolio_load_fallback",
                reason="parse_error",
                key=self._key,
                error_count=e.error_count(),
            )
            return default_portfolio_state()

        logger.info(
            "portfolio_loaded",
            key=self._key,
            accounts=len(state.accounts),
            extra_incomes=len(state.extra_incomes),
        )
        return state

    def save(self, state: PortfolioState) -> bool:
        try:
            self._store.set(self._key, state.model_dump_json())
        except StorageError as e:
            logger.error("portfolio_save_failed", key=self._key, error=str(e))
            return False

        logger.debug("portfolio_saved", key=self._key, accounts=len(state.accounts))
        return True


class InMemoryPortfolioRepository(PortfolioRepository):
    """
    Repository that keeps the portfolio in process memory.

    Used for tests and when local storage is not available.
    """

    def __init__(self, initial: Optional[PortfolioState] = None):
        self._state = copy.deepcopy(initial) if initial is not None else None
        self.save_count = 0

    def load(self) -> PortfolioState:
        if self._state is None:
            return default_portfolio_state()
        return copy.deepcopy(self._state)

    def save(self, state: PortfolioState) -> bool:
        self._state = copy.deepcopy(state)
        self.save_count += 1
        return True
