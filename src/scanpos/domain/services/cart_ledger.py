"""Serviço de carrinho: estado em memória espelhado em um slot chave-valor.

O chamador serializa as mutações (uma termina, incluindo a escrita, antes da
próxima). Falhas de escrita são informadas via PersistenceError com o carrinho
em memória resultante; a mutação em memória não é desfeita.
"""
from __future__ import annotations
from pydantic import ValidationError
from ..codec import DecodeResult
from ..errors import PersistenceError, PersistenceErrorKind
from ..models import LineItem, ScannedProduct, dump_cart, load_cart
from ...ports.interfaces import KeyValueStore
from ...core.logging import get_logger

log = get_logger()

DEFAULT_CART_KEY = "scanned_cart"


def total_cost(cart: list[LineItem]) -> float:
    """Soma unit_cost * quantity de todas as linhas (sempre recalculado)."""
    return sum(item.subtotal for item in cart)


class CartLedger:
    """Dono único do carrinho da sessão."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_CART_KEY):
        self.store = store
        self.key = key
        self._cart: list[LineItem] = []

    # --- Leitura ---
    def load(self) -> list[LineItem]:
        """Hidrata do slot. Ausente, ilegível ou corrompido vira carrinho vazio."""
        try:
            raw = self.store.get(self.key)
        except Exception as exc:
            log.warning("cart_load_failed", key=self.key, reason="read", error=str(exc))
            raw = None
        cart: list[LineItem] = []
        if raw:
            try:
                cart = load_cart(raw)
            except ValidationError as exc:
                log.warning("cart_load_failed", key=self.key, reason="parse", error=str(exc))
        self._cart = cart
        log.info("cart_loaded", key=self.key, lines=len(cart))
        return self.current_cart()

    def current_cart(self) -> list[LineItem]:
        """Cópia do carrinho atual (sem efeitos colaterais)."""
        return [item.model_copy() for item in self._cart]

    def current_total(self) -> float:
        return total_cost(self._cart)

    total_cost = staticmethod(total_cost)

    # --- Mutações ---
    def add_scan(self, decoded: ScannedProduct | DecodeResult) -> list[LineItem]:
        """Incrementa a linha de mesmo nome ou anexa nova com quantidade 1."""
        if isinstance(decoded, DecodeResult):
            if not decoded.ok or decoded.product is None:
                raise ValueError(f"cannot add a failed decode ({decoded.error})")
            decoded = decoded.product
        existing = next((item for item in self._cart if item.name == decoded.name), None)
        if existing:
            if existing.unit_cost != decoded.cost:
                log.warning("scan_cost_mismatch", name=decoded.name, stored=existing.unit_cost, scanned=decoded.cost)
            existing.quantity += 1
            log.info("scan_merged", name=decoded.name, quantity=existing.quantity)
        else:
            self._cart.append(LineItem(name=decoded.name, unit_cost=decoded.cost, quantity=1))
            log.info("scan_added", name=decoded.name, unit_cost=decoded.cost)
        return self._persist()

    def adjust_quantity(self, index: int, delta: int) -> list[LineItem]:
        """Aplica delta à linha; quantidade resultante 0 remove a linha. Índice inválido é no-op."""
        if not self._valid_index(index):
            log.info("index_out_of_range", op="adjust_quantity", index=index, lines=len(self._cart))
            return self.current_cart()
        item = self._cart[index]
        item.quantity = max(0, item.quantity + delta)
        if item.quantity == 0:
            del self._cart[index]
            log.info("item_removed", name=item.name, reason="zero_quantity")
        else:
            log.info("quantity_adjusted", name=item.name, quantity=item.quantity, delta=delta)
        return self._persist()

    def remove_item(self, index: int) -> list[LineItem]:
        """Remove a linha do índice, se válido."""
        if not self._valid_index(index):
            log.info("index_out_of_range", op="remove_item", index=index, lines=len(self._cart))
            return self.current_cart()
        item = self._cart.pop(index)
        log.info("item_removed", name=item.name, reason="removed")
        return self._persist()

    def complete_order(self) -> None:
        """Finaliza o pedido: limpa o slot e só então zera a memória.

        Se a remoção do slot falhar, nada muda em memória e a exceção sobe.
        """
        total = self.current_total()
        try:
            self.store.delete(self.key)
        except PersistenceError as exc:
            log.error("order_complete_failed", key=self.key, error=exc.message)
            raise exc.with_cart(self.current_cart())
        except Exception as exc:
            log.error("order_complete_failed", key=self.key, error=str(exc))
            raise PersistenceError(PersistenceErrorKind.WRITE_FAILED, self.key, str(exc), self.current_cart()) from exc
        self._cart = []
        log.info("order_completed", key=self.key, total=total)

    # --- Internos ---
    def _valid_index(self, index: int) -> bool:
        return isinstance(index, int) and 0 <= index < len(self._cart)

    def _persist(self) -> list[LineItem]:
        """Grava o carrinho inteiro; falha sobe como PersistenceError com o estado em memória."""
        snapshot = self.current_cart()
        try:
            self.store.set(self.key, dump_cart(self._cart))
        except PersistenceError as exc:
            log.error("cart_persist_failed", key=self.key, error=exc.message)
            raise exc.with_cart(snapshot)
        except Exception as exc:
            log.error("cart_persist_failed", key=self.key, error=str(exc))
            raise PersistenceError(PersistenceErrorKind.WRITE_FAILED, self.key, str(exc), snapshot) from exc
        return snapshot
