"""Modelos de domínio (Pydantic): item escaneado, linha do carrinho e serialização do slot."""
from __future__ import annotations
import json
from pydantic import AliasChoices, BaseModel, Field, TypeAdapter


class ScannedProduct(BaseModel):
    """Produto decodificado de um payload (nome + custo unitário)."""
    name: str = Field(min_length=1)
    cost: float = Field(ge=0, allow_inf_nan=False)


class LineItem(BaseModel):
    """Uma linha distinta do carrinho. Quantidade zero nunca é mantida."""
    name: str = Field(min_length=1)
    unit_cost: float = Field(ge=0, allow_inf_nan=False, validation_alias=AliasChoices("unit_cost", "cost"))
    quantity: int = Field(ge=1)

    @property
    def subtotal(self) -> float:
        return self.unit_cost * self.quantity


_records = TypeAdapter(list[LineItem])


def dump_cart(cart: list[LineItem]) -> bytes:
    """Serializa o carrinho para o slot (JSON UTF-8)."""
    return json.dumps([item.model_dump(mode="json") for item in cart], ensure_ascii=False).encode("utf-8")


def load_cart(raw: bytes) -> list[LineItem]:
    """Hidrata o carrinho do slot.

    Aceita o formato legado (`cost` no lugar de `unit_cost`, uma linha por
    leitura) e funde nomes repetidos na primeira ocorrência, mantendo a ordem
    e o custo da primeira linha.

    :raises pydantic.ValidationError: conteúdo fora do formato esperado.
    """
    items = _records.validate_json(raw)
    merged: dict[str, LineItem] = {}
    for item in items:
        if item.name in merged:
            merged[item.name].quantity += item.quantity
        else:
            merged[item.name] = item
    return list(merged.values())
