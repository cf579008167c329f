"""Bootstrap do container de DI (kink): settings, codec e ledger do carrinho."""
from kink import di
from .settings import Settings
from .logging import get_logger
from .db import create_session_factory
from ..domain.codec import PayloadCodec
from ..domain.services.cart_ledger import CartLedger
from ..ports.interfaces import KeyValueStore
from ..repo.kv_store import SqlKeyValueStore, MemoryKeyValueStore

def bootstrap_di(settings: Settings | None = None, store: KeyValueStore | None = None) -> None:
    """Registra as dependências e hidrata o carrinho a partir do slot persistido.

    :param settings: configurações explícitas (padrão: env/.env).
    :param store: store já construído (testes); senão escolhido por `storage_backend`.
    """
    settings = settings or Settings()
    di[Settings] = settings
    get_logger(settings.log_level)
    if store is None:
        if settings.storage_backend == "memory":
            store = MemoryKeyValueStore()
        else:
            session_factory = create_session_factory(settings.database_url, create_schema=settings.auto_create_schema)
            store = SqlKeyValueStore(session_factory)
    di[PayloadCodec] = PayloadCodec(settings.payload_delimiter)
    ledger = CartLedger(store, key=settings.cart_key)
    ledger.load()
    di[CartLedger] = ledger
