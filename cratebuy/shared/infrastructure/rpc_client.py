"""
Solana RPC Blockhash Source
===========================
The only ledger call the service makes: getLatestBlockhash, used to
stamp fee-transfer transactions.
"""

from typing import Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.hash import Hash

from config.settings import Settings
from cratebuy.shared.system.logging import Logger


class BlockhashSource:
    """
    Usage:
        source = BlockhashSource()
        blockhash = await source.get_latest_blockhash()
        await source.close()
    """

    def __init__(self, client: Optional[AsyncClient] = None, rpc_url: Optional[str] = None):
        self.client = client or AsyncClient(rpc_url or Settings.RPC_URL, commitment=Confirmed)

    async def get_latest_blockhash(self) -> Hash:
        resp = await self.client.get_latest_blockhash()
        blockhash = resp.value.blockhash
        Logger.debug(f"[RPC] Fresh blockhash: {str(blockhash)[:16]}...")
        return blockhash

    async def close(self) -> None:
        await self.client.close()
