"""
Jupiter Swap API Adapter (Async)
================================
Quote + swap-transaction building against the Jupiter aggregator.

Two calls per asset:
    GET  /quote -> priced route (opaque dict)
    POST /swap  -> {"swapTransaction": <base64 unsigned v0 tx>}

No retries here; a failed call is reported to the fan-out, which marks
that asset unsupported.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from config.settings import Settings
from cratebuy.shared.execution.errors import AssetQuoteUnavailable, TransactionBuildFailure
from cratebuy.shared.system.logging import Logger


@dataclass(frozen=True)
class SlippageConfig:
    """Auto-slippage routing parameters sent with every quote."""

    auto_slippage: bool = True
    max_auto_slippage_bps: int = 1000
    auto_slippage_collision_usd_value: int = 1000
    minimize_slippage: bool = True
    only_direct_routes: bool = False
    as_legacy_transaction: bool = False

    @classmethod
    def from_settings(cls) -> "SlippageConfig":
        return cls(
            auto_slippage=Settings.AUTO_SLIPPAGE,
            max_auto_slippage_bps=Settings.MAX_AUTO_SLIPPAGE_BPS,
            auto_slippage_collision_usd_value=Settings.AUTO_SLIPPAGE_COLLISION_USD_VALUE,
            minimize_slippage=Settings.MINIMIZE_SLIPPAGE,
            only_direct_routes=Settings.ONLY_DIRECT_ROUTES,
        )

    def to_params(self) -> Dict[str, str]:
        return {
            "autoSlippage": _flag(self.auto_slippage),
            "maxAutoSlippageBps": str(self.max_auto_slippage_bps),
            "autoSlippageCollisionUsdValue": str(self.auto_slippage_collision_usd_value),
            "minimizeSlippage": _flag(self.minimize_slippage),
            "onlyDirectRoutes": _flag(self.only_direct_routes),
            "asLegacyTransaction": _flag(self.as_legacy_transaction),
        }


def _flag(value: bool) -> str:
    return "true" if value else "false"


class JupiterClient:
    """
    Usage:
        async with httpx.AsyncClient() as http:
            jupiter = JupiterClient(http)
            quote = await jupiter.get_quote(SOL_MINT, JUP_MINT, 1_000_000_000, SlippageConfig())
            swap_b64 = await jupiter.get_swap_transaction(payer, quote)
    """

    def __init__(self, http: httpx.AsyncClient, base_url: Optional[str] = None, api_key: Optional[str] = None):
        self.http = http
        self.base_url = (base_url or Settings.JUPITER_API_URL).rstrip("/")
        api_key = Settings.JUPITER_API_KEY if api_key is None else api_key
        self._headers = {"x-api-key": api_key} if api_key else {}

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage: SlippageConfig,
    ) -> Dict[str, Any]:
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(int(amount)),
            **slippage.to_params(),
        }
        response = await self.http.get(
            f"{self.base_url}/quote",
            params=params,
            headers=self._headers,
            timeout=Settings.HTTP_TIMEOUT_S,
        )
        if not response.is_success:
            raise AssetQuoteUnavailable(details=f"Jupiter quote HTTP {response.status_code}: {response.text[:120]}")

        quote = response.json()
        if not quote or "error" in quote:
            reason = quote.get("error") if isinstance(quote, dict) else "empty quote"
            raise AssetQuoteUnavailable(details=f"Jupiter returned no route: {reason}")

        Logger.debug(f"[JUPITER] Quote {input_mint[:4]}->{output_mint[:4]} out={quote.get('outAmount')}")
        return quote

    async def get_swap_transaction(self, payer: str, quote: Dict[str, Any]) -> str:
        """Return the base64-encoded unsigned swap transaction for a quote."""
        payload = {
            "quoteResponse": quote,
            "userPublicKey": payer,
            "dynamicComputeUnitLimit": Settings.DYNAMIC_COMPUTE_UNIT_LIMIT,
            "prioritizationFeeLamports": Settings.PRIORITIZATION_FEE_LAMPORTS,
        }
        response = await self.http.post(
            f"{self.base_url}/swap",
            json=payload,
            headers=self._headers,
            timeout=Settings.HTTP_TIMEOUT_S,
        )
        if not response.is_success:
            raise TransactionBuildFailure(details=f"Jupiter swap HTTP {response.status_code}: {response.text[:120]}")

        swap_data = response.json()
        swap_tx = swap_data.get("swapTransaction") if isinstance(swap_data, dict) else None
        if not swap_tx:
            raise TransactionBuildFailure(details="Jupiter swap response missing swapTransaction")
        return swap_tx
