"""
Token Registry
==============
Symbol -> mint resolution for crate tokens.

The basket service describes tokens by symbol (and sometimes a mint).
Symbols without a known mapping resolve to "" so the quote fan-out can
report them as unsupported instead of failing the request.
"""

from typing import Dict, Optional

from config.settings import Settings
from cratebuy.shared.models.crate import is_valid_pubkey
from cratebuy.shared.system.logging import Logger


class TokenRegistry:
    """
    Static symbol registry.

    Usage:
        registry = TokenRegistry()
        mint = registry.resolve("JUP")
    """

    def __init__(self, mints: Optional[Dict[str, str]] = None):
        source = Settings.TOKEN_MINTS if mints is None else mints
        self._mints: Dict[str, str] = {sym.upper(): mint for sym, mint in source.items()}

    def resolve(self, symbol: str, explicit_mint: Optional[str] = None) -> str:
        """Return the mint for a symbol, preferring a valid explicit mint."""
        if explicit_mint and is_valid_pubkey(explicit_mint):
            return explicit_mint

        mint = self._mints.get((symbol or "").strip().upper(), "")
        if not mint:
            Logger.debug(f"[BASKET] No mint mapping for {symbol!r}")
        return mint
