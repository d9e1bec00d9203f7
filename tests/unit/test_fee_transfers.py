"""
Fee Transfer Unit Tests
=======================
Platform/creator fee transfers appended after swaps.
"""

import pytest
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import ID as SYSTEM_PROGRAM_ID

from config.settings import Settings
from cratebuy.execution.fee_transfers import append_fee_transfers, build_transfer, fee_wallets_for
from cratebuy.execution.swap_builder import decode_transaction
from cratebuy.shared.models.crate import FeeWallet
from tests.mocks.collaborators import make_swap_payload, transfer_lamports


class TestFeeWallets:

    def test_platform_only_without_creator(self):
        wallets = fee_wallets_for(None)

        assert [w.label for w in wallets] == ["platform"]
        assert wallets[0].address == Settings.PLATFORM_FEE_WALLET
        assert wallets[0].lamports == Settings.PLATFORM_FEE_LAMPORTS

    def test_platform_then_creator(self, creator_wallet):
        wallets = fee_wallets_for(creator_wallet)

        assert [w.label for w in wallets] == ["platform", "creator"]
        assert wallets[1].address == creator_wallet
        assert wallets[1].lamports == Settings.CREATOR_FEE_LAMPORTS


class TestBuildTransfer:

    def test_unsigned_transfer_layout(self, payer):
        wallet = FeeWallet("platform", str(Pubkey.new_unique()), 1_000_000)
        blockhash = Hash.new_unique()

        tx = build_transfer(Pubkey.from_string(payer), wallet, blockhash)
        message = tx.message

        assert message.account_keys[0] == Pubkey.from_string(payer)
        assert Pubkey.from_string(wallet.address) in message.account_keys
        assert SYSTEM_PROGRAM_ID in message.account_keys
        assert message.recent_blockhash == blockhash
        assert transfer_lamports(tx) == 1_000_000
        assert list(tx.signatures) == [Signature.default()]


class TestAppendFeeTransfers:

    @pytest.mark.asyncio
    async def test_appended_after_swaps_in_wallet_order(self, payer, creator_wallet, blockhashes):
        swaps = [decode_transaction(make_swap_payload(Pubkey.from_string(payer), n)) for n in (1, 2)]
        wallets = fee_wallets_for(creator_wallet)

        bundle = await append_fee_transfers(blockhashes, payer, swaps, wallets)

        assert len(bundle) == 4
        assert bundle[:2] == swaps
        assert Pubkey.from_string(Settings.PLATFORM_FEE_WALLET) in bundle[2].message.account_keys
        assert Pubkey.from_string(creator_wallet) in bundle[3].message.account_keys
        assert transfer_lamports(bundle[2]) == Settings.PLATFORM_FEE_LAMPORTS
        assert transfer_lamports(bundle[3]) == Settings.CREATOR_FEE_LAMPORTS

    @pytest.mark.asyncio
    async def test_each_transfer_fetches_its_own_blockhash(self, payer, creator_wallet, blockhashes):
        bundle = await append_fee_transfers(blockhashes, payer, [], fee_wallets_for(creator_wallet))

        assert len(blockhashes.issued) == 2
        assert [tx.message.recent_blockhash for tx in bundle] == blockhashes.issued
        assert bundle[0].message.recent_blockhash != bundle[1].message.recent_blockhash

    @pytest.mark.asyncio
    async def test_input_list_not_mutated(self, payer, blockhashes):
        swaps = [decode_transaction(make_swap_payload(Pubkey.from_string(payer), 7))]

        await append_fee_transfers(blockhashes, payer, swaps, fee_wallets_for(None))

        assert len(swaps) == 1
