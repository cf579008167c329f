"""Codec do payload escaneável: `<nome><delimitador><custo>`.

O delimitador padrão é `|`, que não aparece em nomes de produto usuais;
`encode` recusa nomes que o contenham para que a decodificação nunca seja
ambígua.
"""
from __future__ import annotations
import math
from pydantic import BaseModel
from .errors import DecodeError
from ..core.guardrails import sanitize_payload
from .models import ScannedProduct

DEFAULT_DELIMITER = "|"


class DecodeResult(BaseModel):
    """Resultado tipado da decodificação (nunca propaga exceção)."""
    ok: bool
    product: ScannedProduct | None = None
    error: DecodeError | None = None
    detail: str | None = None


class PayloadCodec:
    """Codifica/decodifica produtos em texto para códigos escaneáveis."""

    def __init__(self, delimiter: str = DEFAULT_DELIMITER):
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        self.delimiter = delimiter

    def encode(self, name: str, cost: float) -> str:
        """Gera o payload. Levanta ValueError para entrada inválida do operador."""
        if not name:
            raise ValueError("product name is required")
        if self.delimiter in name:
            raise ValueError(f"product name must not contain {self.delimiter!r}")
        if sanitize_payload(name) != name:
            raise ValueError("product name must not have control characters or surrounding whitespace")
        cost = float(cost)
        if not math.isfinite(cost) or cost < 0:
            raise ValueError("cost must be a finite non-negative number")
        # repr garante que float(repr(x)) == x
        return f"{name}{self.delimiter}{cost!r}"

    def decode(self, payload: str) -> DecodeResult:
        """Separa nome e custo; falhas viram DecodeResult(ok=False)."""
        parts = (payload or "").split(self.delimiter)
        if len(parts) != 2:
            return DecodeResult(ok=False, error=DecodeError.MALFORMED,
                                detail=f"expected exactly one {self.delimiter!r}, found {len(parts) - 1}")
        name, raw_cost = parts
        if not name:
            return DecodeResult(ok=False, error=DecodeError.MALFORMED, detail="empty product name")
        try:
            cost = float(raw_cost.strip())
        except ValueError:
            return DecodeResult(ok=False, error=DecodeError.INVALID_COST, detail=f"not a number: {raw_cost!r}")
        if not math.isfinite(cost) or cost < 0:
            return DecodeResult(ok=False, error=DecodeError.INVALID_COST, detail=f"out of range: {raw_cost!r}")
        return DecodeResult(ok=True, product=ScannedProduct(name=name, cost=cost))
