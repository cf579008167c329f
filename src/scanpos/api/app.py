"""API Flask: geração de payload, leitura de scan e operações do carrinho."""
from __future__ import annotations
import threading
from flask import Flask, request, jsonify
from kink import di
from pydantic import ValidationError
from ..core.di import bootstrap_di
from ..core.logging import set_trace_id, get_logger
from ..core.guardrails import sanitize_payload
from ..core.settings import Settings
from ..domain.codec import PayloadCodec
from ..domain.errors import PersistenceError
from ..domain.models import LineItem
from ..domain.services.cart_ledger import CartLedger, total_cost
from ..ports.interfaces import GeneratePayloadArgs, ScanArgs, AdjustArgs, CartStateDTO

log = get_logger()

UNREADABLE_CODE = "could not read code, try again"
NOT_PERSISTED = "changes may not survive a restart"

# servidor threaded: uma mutação (incluindo a escrita) por vez no ledger
ledger_lock = threading.Lock()

def _state(cart: list[LineItem], persisted: bool = True) -> dict:
    total = total_cost(cart)
    dto = CartStateDTO(items=cart, total=total, total_display=f"{total:.2f}",
                       persisted=persisted, warning=None if persisted else NOT_PERSISTED)
    return dto.model_dump(mode="json")

def _mutation(op) -> dict:
    """Executa a mutação; falha de escrita responde com o estado em memória e aviso."""
    with ledger_lock:
        try:
            return _state(op())
        except PersistenceError as exc:
            log.warning("mutation_not_persisted", kind=exc.kind.value, key=exc.key)
            return _state(exc.cart if exc.cart is not None else di[CartLedger].current_cart(), persisted=False)

def create_app(bootstrap: bool = True) -> Flask:
    """Cria a app. Com bootstrap=False usa o container já populado (testes)."""
    if bootstrap:
        bootstrap_di()
    app = Flask(__name__)

    @app.before_request
    def _trace():
        set_trace_id(request.headers.get("X-Trace-Id"))

    @app.get("/healthz")
    def healthz():
        """Health check básico."""
        return {"ok": True}

    @app.post("/products/payload")
    def generate_payload():
        """Gera o texto a ser renderizado como código (fluxo de geração)."""
        body = request.get_json(force=True, silent=True) or {}
        try:
            args = GeneratePayloadArgs.model_validate(body)
            payload = di[PayloadCodec].encode(args.name, args.cost)
        except (ValidationError, ValueError) as exc:
            return {"error": "please enter product name and cost", "detail": str(exc)}, 400
        return {"payload": payload, "name": args.name, "cost": args.cost}

    @app.post("/scan")
    def scan():
        """Decodifica a leitura do scanner e adiciona ao carrinho."""
        body = request.get_json(force=True, silent=True) or {}
        try:
            args = ScanArgs.model_validate(body)
        except ValidationError:
            return {"error": "missing payload"}, 400
        result = di[PayloadCodec].decode(sanitize_payload(args.payload))
        if not result.ok:
            log.info("scan_rejected", reason=result.error.value, detail=result.detail)
            return {"error": UNREADABLE_CODE, "reason": result.error.value}, 422
        return jsonify(_mutation(lambda: di[CartLedger].add_scan(result.product)))

    @app.get("/cart")
    def cart():
        """Snapshot atual do carrinho e total."""
        with ledger_lock:
            return _state(di[CartLedger].current_cart())

    @app.post("/cart/items/<int:index>/adjust")
    def adjust(index: int):
        body = request.get_json(force=True, silent=True) or {}
        try:
            args = AdjustArgs.model_validate(body)
        except ValidationError:
            return {"error": "delta must be an integer"}, 400
        return jsonify(_mutation(lambda: di[CartLedger].adjust_quantity(index, args.delta)))

    @app.delete("/cart/items/<int:index>")
    def remove(index: int):
        return jsonify(_mutation(lambda: di[CartLedger].remove_item(index)))

    @app.post("/cart/complete")
    def complete():
        """Finaliza o pedido; em falha o carrinho permanece intacto."""
        ledger: CartLedger = di[CartLedger]
        with ledger_lock:
            total = ledger.current_total()
            try:
                ledger.complete_order()
            except PersistenceError:
                return {"ok": False, "error": "could not complete order, try again",
                        "cart": _state(ledger.current_cart())}, 503
        return {"ok": True, "total": total, "total_display": f"{total:.2f}"}

    return app

if __name__ == "__main__":
    application = create_app()
    s = di[Settings]
    application.run(host=s.host, port=s.port, debug=s.flask_debug)
