"""
Crate Action API
================
Solana Actions endpoints for buying a crate.

    GET     /api/actions/crate/{basket_id}   -> action descriptor
    OPTIONS /api/actions/crate/{basket_id}   -> same descriptor (CORS pre-flight)
    POST    /api/actions/crate/{basket_id}?amount=&currency=
            body {"account": "<payer pubkey>"} -> unsigned transaction bundle
    GET     /actions.json                    -> Actions path rules
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Union

import httpx
from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import Settings
from cratebuy.execution.orchestrator import CratePurchaseOrchestrator
from cratebuy.shared.execution.errors import CrateError
from cratebuy.shared.infrastructure.basket_client import BasketClient
from cratebuy.shared.infrastructure.jupiter_client import JupiterClient
from cratebuy.shared.infrastructure.rpc_client import BlockhashSource
from cratebuy.shared.models.crate import Basket, Currency
from cratebuy.shared.system.logging import Logger

ACTIONS_CORS_HEADERS = ["Content-Type", "Authorization", "Content-Encoding", "Accept-Encoding", "x-user-public-key"]
ACTIONS_RESPONSE_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,OPTIONS",
    "Access-Control-Allow-Headers": ", ".join(ACTIONS_CORS_HEADERS),
}


class ActionsCORSMiddleware(CORSMiddleware):
    """CORS for the whole API, except Action pre-flights: those reach the OPTIONS route."""

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["method"] == "OPTIONS" and scope["path"].startswith(Settings.ACTION_PATH + "/"):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


# --- Pydantic Models ---
class ActionPostRequest(BaseModel):
    account: Optional[str] = None
    amount: Optional[Union[str, float, int]] = None
    currency: Optional[str] = None


# --- Descriptor ---
def action_descriptor(basket_id: str, basket: Basket) -> Dict[str, Any]:
    """Display descriptor for wallets / blink renderers. Pure function of the crate."""
    composition = ", ".join(f"{a.symbol} {a.weight_percent}%" for a in basket.allocations)
    description = basket.description or f"Buy the {basket.name} crate ({composition}) in one click"
    href = f"{Settings.ACTION_PATH}/{basket_id}?amount={{amount}}&currency={{currency}}"

    return {
        "type": "action",
        "icon": basket.image or Settings.ACTION_ICON_URL,
        "title": basket.name,
        "description": description,
        "label": Settings.ACTION_LABEL,
        "links": {
            "actions": [
                {
                    "label": Settings.ACTION_LABEL,
                    "href": href,
                    "parameters": [
                        {"name": "amount", "label": "Amount", "type": "number", "required": True},
                        {
                            "name": "currency",
                            "label": "Pay with",
                            "type": "select",
                            "required": True,
                            "options": [
                                {"label": c.value, "value": c.value, "selected": c is Currency.SOL}
                                for c in Currency
                            ],
                        },
                    ],
                }
            ]
        },
    }


def build_orchestrator(http: httpx.AsyncClient, blockhashes: BlockhashSource) -> CratePurchaseOrchestrator:
    jupiter = JupiterClient(http)
    return CratePurchaseOrchestrator(
        basket_service=BasketClient(http),
        quoter=jupiter,
        swap_builder=jupiter,
        blockhash_source=blockhashes,
    )


def get_orchestrator(request: Request) -> CratePurchaseOrchestrator:
    return request.app.state.orchestrator


def create_app(orchestrator: Optional[CratePurchaseOrchestrator] = None) -> FastAPI:
    """Build the app; an injected orchestrator skips collaborator setup."""

    # --- Lifecycle ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.orchestrator is not None:
            Logger.info("[API] Crate Action API online (injected collaborators)")
            yield
            return

        http = httpx.AsyncClient(timeout=Settings.HTTP_TIMEOUT_S)
        blockhashes = BlockhashSource()
        app.state.orchestrator = build_orchestrator(http, blockhashes)
        Logger.info(f"[API] Crate Action API online (RPC {Settings.RPC_URL})")
        try:
            yield
        finally:
            await http.aclose()
            await blockhashes.close()
            app.state.orchestrator = None
            Logger.info("[API] Crate Action API shutting down")

    app = FastAPI(
        title="Crate Action API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator

    # CORS (Actions clients call from any origin)
    app.add_middleware(
        ActionsCORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=ACTIONS_CORS_HEADERS,
    )

    # --- Error envelope ---
    @app.exception_handler(CrateError)
    async def crate_error_handler(request: Request, exc: CrateError):
        return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=ACTIONS_RESPONSE_HEADERS)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        return JSONResponse({"error": "Invalid request", "details": str(first.get("msg", ""))}, status_code=400)

    # --- Routes ---
    @app.get("/actions.json")
    async def actions_rules():
        return {"rules": [{"pathPattern": "/crate/*", "apiPath": f"{Settings.ACTION_PATH}/*"}]}

    @app.get(Settings.ACTION_PATH + "/{basket_id}")
    async def describe_crate(basket_id: str, orchestrator: CratePurchaseOrchestrator = Depends(get_orchestrator)):
        basket = await orchestrator.describe(basket_id)
        return JSONResponse(action_descriptor(basket_id, basket), headers=ACTIONS_RESPONSE_HEADERS)

    @app.options(Settings.ACTION_PATH + "/{basket_id}")
    async def describe_crate_preflight(basket_id: str, orchestrator: CratePurchaseOrchestrator = Depends(get_orchestrator)):
        return await describe_crate(basket_id, orchestrator)

    @app.post(Settings.ACTION_PATH + "/{basket_id}")
    async def buy_crate(
        basket_id: str,
        body: Optional[ActionPostRequest] = None,
        amount: Optional[str] = Query(None),
        currency: Optional[str] = Query(None),
        x_user_public_key: Optional[str] = Header(None),
        orchestrator: CratePurchaseOrchestrator = Depends(get_orchestrator),
    ):
        body = body or ActionPostRequest()
        result = await orchestrator.execute(
            payer=body.account or x_user_public_key,
            basket_id=basket_id,
            amount=amount if amount is not None else body.amount,
            currency=currency or body.currency,
        )
        return result.to_dict()

    return app
