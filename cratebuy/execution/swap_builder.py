"""
Exchange Transaction Builder
============================
Turns each successful quote into an unsigned Jupiter swap transaction.

Jupiter does the building; this stage only decodes the base64 payload
into a solders VersionedTransaction. A failed build demotes the asset
to a QuoteFailure without touching sibling builds.
"""

import base64
import binascii
from typing import List, Optional, Protocol, Sequence

from solders.transaction import VersionedTransaction

from cratebuy.execution.fanout import describe_failure, failure_code, gather_phase
from cratebuy.shared.execution.errors import ErrorCode, TransactionBuildFailure
from cratebuy.shared.models.crate import BuildOutcome, BuiltSwap, QuoteFailure, QuoteOutcome, QuoteSuccess
from cratebuy.shared.system.logging import Logger


class SwapBuilder(Protocol):
    async def get_swap_transaction(self, payer: str, quote: dict) -> str: ...


def decode_transaction(payload: str) -> VersionedTransaction:
    try:
        raw_tx = base64.b64decode(payload, validate=True)
        return VersionedTransaction.from_bytes(raw_tx)
    except (binascii.Error, ValueError) as e:
        raise TransactionBuildFailure(details=f"Undecodable swap transaction: {e}") from e


async def _build_one(builder: SwapBuilder, payer: str, success: QuoteSuccess) -> VersionedTransaction:
    payload = await builder.get_swap_transaction(payer, success.quote)
    return decode_transaction(payload)


async def build_swaps(
    builder: SwapBuilder,
    payer: str,
    outcomes: Sequence[QuoteOutcome],
    timeout: Optional[float] = None,
) -> List[BuildOutcome]:
    built: List[BuildOutcome] = list(outcomes)

    indices = [i for i, o in enumerate(outcomes) if isinstance(o, QuoteSuccess)]
    results = await gather_phase("build", [_build_one(builder, payer, outcomes[i]) for i in indices], timeout)

    for idx, result in zip(indices, results):
        success = outcomes[idx]
        if isinstance(result, BaseException):
            cause = describe_failure(result)
            Logger.warning(f"[JUPITER] Swap build failed for {success.symbol}: {cause}")
            built[idx] = QuoteFailure(
                success.symbol,
                success.output_mint,
                cause,
                failure_code(result, ErrorCode.TRANSACTION_BUILD_FAILED),
            )
        else:
            built[idx] = BuiltSwap(success.symbol, success.output_mint, result)

    return built
