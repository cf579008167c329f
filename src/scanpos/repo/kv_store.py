"""Implementações de KeyValueStore: SQLAlchemy (durável) e memória (dev/testes)."""
from __future__ import annotations
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from ..repo.models import KVEntry
from ..domain.errors import PersistenceError, PersistenceErrorKind
from ..core.logging import get_logger

log = get_logger()

class SqlKeyValueStore:
    """Slot chave-valor em `kv_entries`; cada operação em sua própria transação."""

    def __init__(self, session_factory):
        self.Session = session_factory

    def get(self, key: str) -> bytes | None:
        try:
            with self.Session() as s:
                row = s.get(KVEntry, key)
                return row.value if row else None
        except SQLAlchemyError as exc:
            log.warning("kv_read_failed", key=key, error=str(exc))
            raise PersistenceError(PersistenceErrorKind.READ_FAILED, key, str(exc)) from exc

    def set(self, key: str, value: bytes) -> None:
        """Upsert do valor."""
        try:
            with self.Session() as s, s.begin():
                row = s.get(KVEntry, key)
                if row:
                    row.value = value
                else:
                    s.add(KVEntry(key=key, value=value))
        except SQLAlchemyError as exc:
            log.warning("kv_write_failed", key=key, error=str(exc))
            raise PersistenceError(PersistenceErrorKind.WRITE_FAILED, key, str(exc)) from exc

    def delete(self, key: str) -> None:
        """Remove a chave (idempotente)."""
        try:
            with self.Session() as s, s.begin():
                s.execute(delete(KVEntry).where(KVEntry.key == key))
        except SQLAlchemyError as exc:
            log.warning("kv_delete_failed", key=key, error=str(exc))
            raise PersistenceError(PersistenceErrorKind.WRITE_FAILED, key, str(exc)) from exc


class MemoryKeyValueStore:
    """Store em processo; não sobrevive a reinícios."""

    def __init__(self, initial: dict[str, bytes] | None = None):
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
