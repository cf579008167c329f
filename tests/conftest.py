"""Fixtures compartilhadas: stores, ledger e app Flask com container populado."""
from __future__ import annotations

import pytest

from scanpos.core.di import bootstrap_di
from scanpos.core.settings import Settings
from scanpos.core.db import create_session_factory
from scanpos.domain.codec import PayloadCodec
from scanpos.domain.errors import PersistenceError, PersistenceErrorKind
from scanpos.domain.services.cart_ledger import CartLedger
from scanpos.repo.kv_store import MemoryKeyValueStore, SqlKeyValueStore


class FlakyStore(MemoryKeyValueStore):
    """Store em memória que pode falhar escritas/remoções sob demanda."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False
        self.fail_reads = False

    def get(self, key):
        if self.fail_reads:
            raise PersistenceError(PersistenceErrorKind.READ_FAILED, key, "disk unavailable")
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise PersistenceError(PersistenceErrorKind.WRITE_FAILED, key, "disk full")
        super().set(key, value)

    def delete(self, key):
        if self.fail_writes:
            raise OSError("disk full")
        super().delete(key)


@pytest.fixture
def codec() -> PayloadCodec:
    return PayloadCodec()


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def ledger(store) -> CartLedger:
    led = CartLedger(store)
    led.load()
    return led


@pytest.fixture
def sql_store(tmp_path) -> SqlKeyValueStore:
    """Store SQLAlchemy sobre um arquivo SQLite temporário."""
    factory = create_session_factory(f"sqlite:///{tmp_path / 'kv.db'}", create_schema=True)
    return SqlKeyValueStore(factory)


@pytest.fixture
def client(store):
    """Cliente de teste da API com store em memória controlável."""
    from scanpos.api.app import create_app

    bootstrap_di(Settings(storage_backend="memory"), store=store)
    app = create_app(bootstrap=False)
    app.config.update(TESTING=True)
    return app.test_client()
