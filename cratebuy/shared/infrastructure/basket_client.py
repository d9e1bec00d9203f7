"""
Basket Service Client (Async)
=============================
Fetches crate definitions over HTTP.

Response shape:
    {
        "id": "...", "name": "...", "description": "...", "image": "...",
        "tokens": [{"symbol": "JUP", "id": "jupiter", "quantity": 50, "mint": "..."}],
        "creator": {"walletAddress": "..."}
    }

Any transport error or non-2xx answer is a hard failure of the request.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import httpx

from config.settings import Settings
from cratebuy.shared.execution.errors import BasketNotFound, CollaboratorUnavailable
from cratebuy.shared.infrastructure.token_registry import TokenRegistry
from cratebuy.shared.models.crate import AssetAllocation, Basket, is_valid_pubkey
from cratebuy.shared.system.logging import Logger


class BasketClient:
    """
    Usage:
        async with httpx.AsyncClient() as http:
            client = BasketClient(http)
            basket = await client.get_basket("crate-123")
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: Optional[str] = None,
        registry: Optional[TokenRegistry] = None,
    ):
        self.http = http
        self.base_url = (base_url or Settings.BASKET_API_URL).rstrip("/")
        self.registry = registry or TokenRegistry()

    async def get_basket(self, basket_id: str) -> Basket:
        url = f"{self.base_url}/{basket_id}"
        try:
            response = await self.http.get(url, timeout=Settings.HTTP_TIMEOUT_S)
        except httpx.HTTPError as e:
            Logger.error(f"[BASKET] Lookup failed for {basket_id}: {e}")
            raise CollaboratorUnavailable(details=str(e)) from e

        if response.status_code == 404:
            raise BasketNotFound(details=f"Crate {basket_id!r} does not exist")
        if not response.is_success:
            Logger.warning(f"[BASKET] HTTP {response.status_code} for {basket_id}")
            raise CollaboratorUnavailable(details=f"Crate service returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise CollaboratorUnavailable(details="Crate service returned invalid JSON") from e
        if not isinstance(data, dict):
            Logger.warning(f"[BASKET] Unexpected payload type {type(data).__name__} for {basket_id}")
            raise CollaboratorUnavailable(details="Crate service returned an unexpected payload")

        return self.parse_basket(basket_id, data)

    def parse_basket(self, basket_id: str, data: Dict[str, Any]) -> Basket:
        allocations = []
        for token in data.get("tokens") or []:
            if not isinstance(token, dict):
                continue
            symbol = str(token.get("symbol", "")).strip()
            allocations.append(AssetAllocation(
                symbol=symbol,
                output_mint=self.registry.resolve(symbol, token.get("mint")),
                weight_percent=_to_decimal(token.get("quantity")),
            ))

        creator_info = data.get("creator")
        creator = creator_info.get("walletAddress") if isinstance(creator_info, dict) else None
        if creator and not is_valid_pubkey(creator):
            Logger.warning(f"[BASKET] Ignoring invalid creator wallet on {basket_id}: {creator}")
            creator = None

        return Basket(
            id=str(data.get("id") or basket_id),
            name=str(data.get("name") or basket_id),
            allocations=tuple(allocations),
            description=str(data.get("description") or ""),
            image=str(data.get("image") or ""),
            creator_wallet=creator or None,
        )


def _to_decimal(value: Any) -> Decimal:
    try:
        weight = Decimal(str(value))
    except (InvalidOperation, TypeError):
        return Decimal(0)
    return weight if weight.is_finite() else Decimal(0)
