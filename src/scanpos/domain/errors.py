"""Taxonomia de erros do núcleo (decodificação e persistência)."""
from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import LineItem


class DecodeError(str, Enum):
    """Motivos de falha ao decodificar um payload escaneado."""
    MALFORMED = "malformed"
    INVALID_COST = "invalid_cost"


class PersistenceErrorKind(str, Enum):
    READ_FAILED = "read_failed"
    WRITE_FAILED = "write_failed"


class ScanPosError(Exception):
    """Base das exceções da aplicação."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PersistenceError(ScanPosError):
    """Falha de leitura/escrita no armazenamento chave-valor.

    `cart` carrega o carrinho em memória deixado pela operação (quando houver),
    para o chamador decidir entre repetir a escrita ou avisar o usuário.
    """

    def __init__(
        self,
        kind: PersistenceErrorKind,
        key: str,
        detail: str | None = None,
        cart: list[LineItem] | None = None,
    ):
        self.kind = kind
        self.key = key
        self.detail = detail
        self.cart = cart
        message = f"{kind.value} on slot {key!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def with_cart(self, cart: list[LineItem]) -> "PersistenceError":
        """Anexa o estado em memória e retorna a própria exceção."""
        self.cart = cart
        return self
