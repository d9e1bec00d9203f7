"""
Swap Builder Unit Tests
=======================
Decoding Jupiter swap payloads and demoting failed builds.
"""

import pytest
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from cratebuy.execution.swap_builder import build_swaps, decode_transaction
from cratebuy.shared.execution.errors import ErrorCode, TransactionBuildFailure
from cratebuy.shared.models.crate import BuiltSwap, QuoteFailure, QuoteSuccess
from tests.mocks.collaborators import BONK_MINT, JUP_MINT, WIF_MINT, FakeJupiter, make_swap_payload


def _quote(symbol, mint, amount):
    return QuoteSuccess(symbol, mint, amount, {"outputMint": mint, "inAmount": str(amount)})


class TestDecode:

    def test_decodes_unsigned_v0_transaction(self, payer):
        payload = make_swap_payload(Pubkey.from_string(payer), 42)

        tx = decode_transaction(payload)

        assert isinstance(tx, VersionedTransaction)
        assert tx.message.account_keys[0] == Pubkey.from_string(payer)

    def test_garbage_payload_raises_build_failure(self):
        with pytest.raises(TransactionBuildFailure):
            decode_transaction("not base64 at all!!")


class TestBuildSwaps:

    @pytest.mark.asyncio
    async def test_builds_each_success_in_order(self, payer, jupiter):
        outcomes = [_quote("JUP", JUP_MINT, 5), _quote("BONK", BONK_MINT, 3), _quote("WIF", WIF_MINT, 2)]

        built = await build_swaps(jupiter, payer, outcomes)

        assert [b.symbol for b in built] == ["JUP", "BONK", "WIF"]
        assert all(isinstance(b, BuiltSwap) for b in built)

    @pytest.mark.asyncio
    async def test_failed_build_demoted_without_aborting_siblings(self, payer):
        jupiter = FakeJupiter(fail_builds={JUP_MINT})
        outcomes = [_quote("JUP", JUP_MINT, 5), _quote("WIF", WIF_MINT, 2)]

        built = await build_swaps(jupiter, payer, outcomes)

        assert isinstance(built[0], QuoteFailure)
        assert built[0].error_code == ErrorCode.TRANSACTION_BUILD_FAILED
        assert isinstance(built[1], BuiltSwap)
        assert sorted(jupiter.swap_calls) == sorted([JUP_MINT, WIF_MINT])

    @pytest.mark.asyncio
    async def test_existing_failures_pass_through_untouched(self, payer, jupiter):
        failure = QuoteFailure("MYSTERY", "", "No known mint for symbol", ErrorCode.UNKNOWN_MINT)

        built = await build_swaps(jupiter, payer, [failure, _quote("WIF", WIF_MINT, 2)])

        assert built[0] is failure
        assert jupiter.swap_calls == [WIF_MINT]

    @pytest.mark.asyncio
    async def test_undecodable_payload_becomes_failure(self, payer):
        class BrokenJupiter(FakeJupiter):
            async def get_swap_transaction(self, payer, quote):
                return "%%%"

        built = await build_swaps(BrokenJupiter(), payer, [_quote("JUP", JUP_MINT, 1)])

        assert isinstance(built[0], QuoteFailure)
        assert built[0].error_code == ErrorCode.TRANSACTION_BUILD_FAILED
