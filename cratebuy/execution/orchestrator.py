"""
Crate Purchase Orchestrator
===========================
End-to-end pipeline for one "buy crate" request.

    VALIDATING -> SPLITTING -> QUOTING -> BUILDING -> FEE_APPENDING
               -> ASSEMBLING -> RESPONDING
    (any stage) -> FAILED

The orchestrator is the only component that knows the collaborators
(basket service, Jupiter, Solana RPC); all of them are injected so the
process entry point owns their lifecycle and tests can pass doubles.

Usage:
    orchestrator = CratePurchaseOrchestrator(baskets, jupiter, jupiter, blockhashes)
    result = await orchestrator.execute(payer, "crate-1", "10.5", "SOL")
    result.to_dict()  # {"transaction": ..., "transactions": [...], "message": ...}
"""

from enum import Enum
from typing import Any, List, Optional, Protocol

from config.settings import Settings
from cratebuy.execution.allocation import split_allocations
from cratebuy.execution.bundle import assemble_bundle
from cratebuy.execution.fee_transfers import BlockhashProvider, append_fee_transfers, fee_wallets_for
from cratebuy.execution.quote_fanout import Quoter, quote_all
from cratebuy.execution.swap_builder import SwapBuilder, build_swaps
from cratebuy.shared.execution.errors import CrateError, NoSupportedAssets, UnexpectedError
from cratebuy.shared.infrastructure.jupiter_client import SlippageConfig
from cratebuy.shared.models.crate import (
    Basket,
    BuiltSwap,
    FundingRequest,
    PurchaseResult,
    QuoteFailure,
    QuoteSuccess,
)
from cratebuy.shared.system.logging import Logger


class PurchaseStage(Enum):
    VALIDATING = "VALIDATING"
    SPLITTING = "SPLITTING"
    QUOTING = "QUOTING"
    BUILDING = "BUILDING"
    FEE_APPENDING = "FEE_APPENDING"
    ASSEMBLING = "ASSEMBLING"
    RESPONDING = "RESPONDING"
    FAILED = "FAILED"


class BasketService(Protocol):
    async def get_basket(self, basket_id: str) -> Basket: ...


class CratePurchaseOrchestrator:
    """Composes splitter, fan-outs, fee appender and assembler for one request."""

    def __init__(
        self,
        basket_service: BasketService,
        quoter: Quoter,
        swap_builder: SwapBuilder,
        blockhash_source: BlockhashProvider,
        slippage: Optional[SlippageConfig] = None,
        phase_timeout: Optional[float] = None,
    ):
        self.basket_service = basket_service
        self.quoter = quoter
        self.swap_builder = swap_builder
        self.blockhash_source = blockhash_source
        self.slippage = slippage or SlippageConfig.from_settings()
        self.phase_timeout = Settings.PHASE_TIMEOUT_S if phase_timeout is None else phase_timeout

    async def describe(self, basket_id: str) -> Basket:
        """Resolve a crate for display; lookup failures propagate unchanged."""
        try:
            return await self.basket_service.get_basket(basket_id)
        except CrateError:
            raise
        except Exception as e:
            Logger.error(f"[CRATE] Describe failed for {basket_id}: {type(e).__name__}: {e}")
            raise UnexpectedError() from e

    async def execute(self, payer: Optional[str], basket_id: Optional[str], amount: Any, currency: Any) -> PurchaseResult:
        stage = PurchaseStage.VALIDATING
        try:
            request = FundingRequest.create(payer, basket_id, amount, currency)
            Logger.info(
                f"[CRATE] Buy {request.basket_id}: {request.total_amount} {request.currency.value} "
                f"for {request.payer[:8]}..."
            )

            stage = PurchaseStage.SPLITTING
            basket = await self.basket_service.get_basket(request.basket_id)
            info = request.currency.info()
            amounts = split_allocations(request.total_amount, request.currency, basket.allocations)

            stage = PurchaseStage.QUOTING
            quotes = await quote_all(self.quoter, info.mint, amounts, self.slippage, self.phase_timeout)
            if not any(isinstance(o, QuoteSuccess) for o in quotes):
                raise NoSupportedAssets(details=_unsupported_details(quotes))

            stage = PurchaseStage.BUILDING
            built = await build_swaps(self.swap_builder, request.payer, quotes, self.phase_timeout)
            swaps = [o.transaction for o in built if isinstance(o, BuiltSwap)]
            if not swaps:
                raise NoSupportedAssets(details=_unsupported_details(built))

            stage = PurchaseStage.FEE_APPENDING
            fee_wallets = fee_wallets_for(basket.creator_wallet)
            transactions = await append_fee_transfers(self.blockhash_source, request.payer, swaps, fee_wallets)

            stage = PurchaseStage.ASSEMBLING
            bundle = assemble_bundle(transactions)

            stage = PurchaseStage.RESPONDING
            failures = [o for o in built if isinstance(o, QuoteFailure)]
            result = PurchaseResult(
                bundle=bundle,
                unsupported_assets=[f.symbol for f in failures],
                fee_transfer_count=len(fee_wallets),
            )
            Logger.success(
                f"[CRATE] {basket.name}: {len(swaps)} swaps + {len(fee_wallets)} fee transfers ready"
                + (f", skipped {', '.join(result.unsupported_assets)}" if failures else "")
            )
            return result

        except CrateError as e:
            e.stage = stage.value
            Logger.warning(f"[CRATE] {stage.value} -> {PurchaseStage.FAILED.value}: {e.message}" + (f" ({e.details})" if e.details else ""))
            raise
        except Exception as e:
            Logger.error(f"[CRATE] {stage.value} -> {PurchaseStage.FAILED.value}: {type(e).__name__}: {e}")
            error = UnexpectedError()
            error.stage = stage.value
            raise error from e


def _unsupported_details(outcomes: List[Any]) -> str:
    symbols = [o.symbol or "?" for o in outcomes if isinstance(o, QuoteFailure)]
    return f"Unsupported assets: {', '.join(symbols)}" if symbols else "Crate has no tokens"
