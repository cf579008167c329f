"""Portas hexagonais (interfaces) e DTOs."""
from typing import Protocol
from pydantic import BaseModel, Field, StrictInt
from ..domain.models import LineItem

class KeyValueStore(Protocol):
    """Armazenamento durável por chave; cada chamada é durável por si só, sem transação entre chamadas."""
    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> None: ...
    def delete(self, key: str) -> None: ...

class GeneratePayloadArgs(BaseModel):
    """Entrada do fluxo de geração de código."""
    name: str = Field(min_length=1, max_length=120)
    cost: float = Field(ge=0)

class ScanArgs(BaseModel):
    payload: str

class AdjustArgs(BaseModel):
    delta: StrictInt

class CartStateDTO(BaseModel):
    """Snapshot do carrinho para a camada de UI."""
    items: list[LineItem]
    total: float
    total_display: str
    persisted: bool = True
    warning: str | None = None
