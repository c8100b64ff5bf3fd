# ledger_tracker/store.py
"""Ownership of the persisted transaction collection.

The whole collection is serialized under a single key and rewritten after
every mutation. Aggregation code only ever sees ``LedgerStore.transactions``,
an immutable snapshot.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ledger_tracker.core.categorizer import validate_transaction
from ledger_tracker.core.models import INCOME, Transaction, parse_date
from ledger_tracker.notifier import Notifier, NullNotifier

logger = logging.getLogger(__name__)

COLLECTION_KEY = "financial-transactions"


class TransactionNotFound(KeyError):
    """Raised when an edit or delete names an id that is not in the collection."""


class BaseBackend(ABC):
    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the text stored under ``key`` or None when absent."""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Replace the text stored under ``key``."""


class MemoryBackend(BaseBackend):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileBackend(BaseBackend):
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )
    conn.commit()


class SqliteBackend(BaseBackend):
    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)

    def read(self, key: str) -> Optional[str]:
        if not self.db_path.exists():
            return None
        conn = sqlite3.connect(self.db_path)
        try:
            _init_db(conn)
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def write(self, key: str, value: str) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        try:
            _init_db(conn)
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()


def serialize(transactions) -> str:
    return json.dumps([tx.to_dict() for tx in transactions])


def deserialize(payload: str) -> List[Transaction]:
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of transactions, got {type(data).__name__}")
    txs = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"Unrecognized transaction entry: {entry!r}")
        txs.append(Transaction.from_dict(entry))
    return txs


def _new_id() -> str:
    return uuid.uuid4().hex


class LedgerStore:
    """Holds the transaction collection and persists it after each mutation."""

    def __init__(
        self,
        backend: BaseBackend,
        notifier: Notifier | None = None,
        key: str = COLLECTION_KEY,
    ):
        self.backend = backend
        self.notifier = notifier or NullNotifier()
        self.key = key
        self._transactions: List[Transaction] = []

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return tuple(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def load(self) -> Tuple[Transaction, ...]:
        """Read the collection from the backend.

        Malformed data never aborts startup: the store starts empty and a
        diagnostic is logged and sent to the notifier.
        """
        try:
            payload = self.backend.read(self.key)
            self._transactions = [] if payload is None else deserialize(payload)
        except (ValueError, TypeError, sqlite3.DatabaseError) as exc:
            logger.warning("Discarding unreadable data under '%s': %s", self.key, exc)
            self.notifier.failure(
                "Could not load transactions!",
                "Stored data was unreadable; starting with an empty ledger.",
            )
            self._transactions = []
        else:
            logger.debug("Loaded %d transaction(s) from '%s'", len(self._transactions), self.key)
        return self.transactions

    def _commit(self, transactions: List[Transaction]) -> None:
        self.backend.write(self.key, serialize(transactions))
        self._transactions = transactions

    def get(self, tx_id: str) -> Transaction:
        for tx in self._transactions:
            if tx.id == tx_id:
                return tx
        raise TransactionNotFound(tx_id)

    def add(
        self,
        description: str,
        amount,
        kind: str,
        category: str,
        occurred_at: date | str | None = None,
        is_recurring: bool = False,
    ) -> Transaction:
        description, amount, kind, category = validate_transaction(
            description, amount, kind, category
        )
        tx = Transaction(
            id=_new_id(),
            description=description,
            amount=amount,
            kind=kind,
            category=category,
            occurred_at=parse_date(occurred_at) if occurred_at else date.today(),
            is_recurring=bool(is_recurring),
        )
        self._commit([tx] + self._transactions)
        label = "Income" if kind == INCOME else "Expense"
        self.notifier.success(
            "Transaction added!", f"{label} of {amount:.2f} was recorded."
        )
        return tx

    def update(self, updated: Transaction) -> Transaction:
        description, amount, kind, category = validate_transaction(
            updated.description, updated.amount, updated.kind, updated.category
        )
        if not any(tx.id == updated.id for tx in self._transactions):
            raise TransactionNotFound(updated.id)
        updated = replace(
            updated,
            description=description,
            amount=amount,
            kind=kind,
            category=category,
            occurred_at=parse_date(updated.occurred_at),
            is_recurring=bool(updated.is_recurring),
        )
        self._commit(
            [updated if tx.id == updated.id else tx for tx in self._transactions]
        )
        self.notifier.success("Transaction updated!", "The changes were saved.")
        return updated

    def edit(self, tx_id: str, **changes) -> Transaction:
        """Replace the transaction ``tx_id`` with a copy carrying ``changes``."""
        current = self.get(tx_id)
        if changes.get("occurred_at") is not None:
            changes["occurred_at"] = parse_date(changes["occurred_at"])
        changes = {k: v for k, v in changes.items() if v is not None}
        return self.update(replace(current, **changes))

    def delete(self, tx_id: str) -> Transaction:
        removed = self.get(tx_id)
        self._commit([tx for tx in self._transactions if tx.id != tx_id])
        self.notifier.success(
            "Transaction removed!", f"'{removed.description}' was deleted."
        )
        return removed

    def clear(self) -> int:
        count = len(self._transactions)
        self._commit([])
        self.notifier.success("Data cleared!", "All transactions were removed.")
        return count


def open_store(config: dict, notifier: Notifier | None = None) -> LedgerStore:
    """Build and load a LedgerStore from the ``storage`` config section."""
    storage = config.get("storage", {}) or {}
    backend_name = storage.get("backend", "json")
    path = storage.get("path")
    if backend_name == "json":
        backend: BaseBackend = JsonFileBackend(path or "data")
    elif backend_name == "sqlite":
        backend = SqliteBackend(path or "pocketledger.db")
    elif backend_name == "memory":
        backend = MemoryBackend()
    else:
        raise ValueError(f"Unsupported storage backend '{backend_name}'.")
    store = LedgerStore(backend, notifier=notifier)
    store.load()
    return store
