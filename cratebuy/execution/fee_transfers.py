"""
Fee Transfer Appender
=====================
Appends fixed-lamport SystemProgram transfers (platform fee, then the
crate creator fee when the crate declares a creator) after the swaps.

Each transfer fetches its own recent blockhash when it is built, so the
transfers of one bundle can reference different blockhashes.
"""

from typing import List, Optional, Protocol, Sequence

from solders.hash import Hash
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction

from config.settings import Settings
from cratebuy.shared.models.crate import FeeWallet
from cratebuy.shared.system.logging import Logger


class BlockhashProvider(Protocol):
    async def get_latest_blockhash(self) -> Hash: ...


def fee_wallets_for(creator_wallet: Optional[str]) -> List[FeeWallet]:
    """Platform wallet always, creator wallet only when present."""
    wallets = [FeeWallet("platform", Settings.PLATFORM_FEE_WALLET, Settings.PLATFORM_FEE_LAMPORTS)]
    if creator_wallet:
        wallets.append(FeeWallet("creator", creator_wallet, Settings.CREATOR_FEE_LAMPORTS))
    return wallets


def build_transfer(payer: Pubkey, wallet: FeeWallet, blockhash: Hash) -> VersionedTransaction:
    """Unsigned v0 transfer; the payer's signature slot is left empty."""
    ix = transfer(TransferParams(
        from_pubkey=payer,
        to_pubkey=Pubkey.from_string(wallet.address),
        lamports=wallet.lamports,
    ))
    message = MessageV0.try_compile(
        payer=payer,
        instructions=[ix],
        address_lookup_table_accounts=[],
        recent_blockhash=blockhash,
    )
    signatures = [Signature.default()] * message.header.num_required_signatures
    return VersionedTransaction.populate(message, signatures)


async def append_fee_transfers(
    blockhash_source: BlockhashProvider,
    payer: str,
    transactions: Sequence[VersionedTransaction],
    fee_wallets: Sequence[FeeWallet],
) -> List[VersionedTransaction]:
    payer_key = Pubkey.from_string(payer)
    bundle = list(transactions)
    for wallet in fee_wallets:
        blockhash = await blockhash_source.get_latest_blockhash()
        bundle.append(build_transfer(payer_key, wallet, blockhash))
        Logger.debug(f"[FEES] {wallet.label} fee {wallet.lamports} lamports -> {wallet.address[:8]}...")
    return bundle
