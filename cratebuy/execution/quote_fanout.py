"""
Quote Fan-out
=============
One concurrent Jupiter quote per crate allocation.

Guarantees:
- len(outcomes) == len(amounts), outcome[i] belongs to amounts[i]
- allocations without a mint (or with a zero amount) are never quoted
- one failed quote never aborts its siblings
"""

from typing import List, Optional, Protocol, Sequence

from cratebuy.execution.fanout import describe_failure, failure_code, gather_phase
from cratebuy.shared.execution.errors import ErrorCode
from cratebuy.shared.infrastructure.jupiter_client import SlippageConfig
from cratebuy.shared.models.crate import PerAssetAmount, QuoteFailure, QuoteOutcome, QuoteSuccess
from cratebuy.shared.system.logging import Logger


class Quoter(Protocol):
    async def get_quote(self, input_mint: str, output_mint: str, amount: int, slippage: SlippageConfig) -> dict: ...


async def quote_all(
    quoter: Quoter,
    input_mint: str,
    amounts: Sequence[PerAssetAmount],
    slippage: Optional[SlippageConfig] = None,
    timeout: Optional[float] = None,
) -> List[QuoteOutcome]:
    slippage = slippage or SlippageConfig.from_settings()
    outcomes: List[Optional[QuoteOutcome]] = [None] * len(amounts)

    pending = {}
    for idx, item in enumerate(amounts):
        if not item.output_mint:
            outcomes[idx] = QuoteFailure(item.symbol, "", "No known mint for symbol", ErrorCode.UNKNOWN_MINT)
        elif item.amount_atomic <= 0:
            outcomes[idx] = QuoteFailure(
                item.symbol, item.output_mint, "Allocation rounds to zero", ErrorCode.AMOUNT_TOO_SMALL
            )
        else:
            pending[idx] = quoter.get_quote(input_mint, item.output_mint, item.amount_atomic, slippage)

    indices = list(pending)
    results = await gather_phase("quote", [pending[i] for i in indices], timeout)

    for idx, result in zip(indices, results):
        item = amounts[idx]
        if isinstance(result, BaseException):
            outcomes[idx] = QuoteFailure(
                item.symbol,
                item.output_mint,
                describe_failure(result),
                failure_code(result, ErrorCode.QUOTE_UNAVAILABLE),
            )
        elif not result:
            outcomes[idx] = QuoteFailure(item.symbol, item.output_mint, "Empty quote")
        else:
            outcomes[idx] = QuoteSuccess(item.symbol, item.output_mint, item.amount_atomic, result)

    for outcome in outcomes:
        if isinstance(outcome, QuoteFailure):
            Logger.warning(f"[JUPITER] Skipping {outcome.symbol or '?'}: {outcome.cause}")

    ok = sum(isinstance(o, QuoteSuccess) for o in outcomes)
    Logger.info(f"[JUPITER] Quoted {ok}/{len(outcomes)} crate assets")
    return outcomes
