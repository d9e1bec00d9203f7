"""
Crate Domain Models
===================
Per-request value objects flowing through the purchase pipeline.

Nothing here outlives a request; the only process-wide state is the
read-only currency table in Settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from config.settings import Settings
from cratebuy.shared.execution.errors import ErrorCode, ValidationError


class Currency(str, Enum):
    """Funding currencies: SOL is the primary, USDC the stable one."""

    SOL = "SOL"
    USDC = "USDC"

    @classmethod
    def parse(cls, value: Any) -> "Currency":
        if isinstance(value, Currency):
            return value
        try:
            return cls(str(value or "SOL").strip().upper())
        except ValueError:
            options = ", ".join(c.value for c in cls)
            raise ValidationError("Unsupported currency", f"Expected one of {options}, got {value!r}")

    def info(self) -> "CurrencyInfo":
        entry = Settings.CURRENCIES[self.value]
        return CurrencyInfo(currency=self, mint=entry["mint"], decimals=int(entry["decimals"]))


@dataclass(frozen=True)
class CurrencyInfo:
    currency: Currency
    mint: str
    decimals: int


@dataclass(frozen=True)
class AssetAllocation:
    """One weighted crate token. An empty output_mint means unknown symbol."""

    symbol: str
    output_mint: str
    weight_percent: Decimal


@dataclass(frozen=True)
class FeeWallet:
    label: str
    address: str
    lamports: int


@dataclass(frozen=True)
class Basket:
    """Crate definition as returned by the basket service."""

    id: str
    name: str
    allocations: Tuple[AssetAllocation, ...]
    description: str = ""
    image: str = ""
    creator_wallet: Optional[str] = None


def is_valid_pubkey(value: str) -> bool:
    try:
        Pubkey.from_string(value)
    except (ValueError, TypeError):
        return False
    return True


@dataclass(frozen=True)
class FundingRequest:
    total_amount: Decimal
    currency: Currency
    payer: str
    basket_id: str

    @classmethod
    def create(cls, payer: Optional[str], basket_id: Optional[str], amount: Any, currency: Any) -> "FundingRequest":
        """Validate raw request fields, raising ValidationError on the first problem."""
        payer = (payer or "").strip()
        basket_id = (basket_id or "").strip()

        if not payer:
            raise ValidationError("User public key is required")
        if not is_valid_pubkey(payer):
            raise ValidationError("Invalid account", f"{payer!r} is not a valid public key")
        if not basket_id:
            raise ValidationError("Crate id is required")

        if amount is None or str(amount).strip() == "":
            raise ValidationError("Amount is required")
        try:
            total = Decimal(str(amount).strip())
        except InvalidOperation:
            raise ValidationError("Invalid amount", f"{amount!r} is not a number")
        if not total.is_finite() or total <= 0:
            raise ValidationError("Invalid amount", "Amount must be a positive number")

        return cls(
            total_amount=total,
            currency=Currency.parse(currency),
            payer=payer,
            basket_id=basket_id,
        )


@dataclass(frozen=True)
class PerAssetAmount:
    symbol: str
    output_mint: str
    amount_atomic: int


@dataclass(frozen=True)
class QuoteSuccess:
    symbol: str
    output_mint: str
    amount_atomic: int
    quote: Dict[str, Any]


@dataclass(frozen=True)
class QuoteFailure:
    symbol: str
    output_mint: str
    cause: str
    error_code: ErrorCode = ErrorCode.QUOTE_UNAVAILABLE


@dataclass(frozen=True)
class BuiltSwap:
    symbol: str
    output_mint: str
    transaction: VersionedTransaction


QuoteOutcome = Union[QuoteSuccess, QuoteFailure]
BuildOutcome = Union[BuiltSwap, QuoteFailure]


@dataclass(frozen=True)
class TransactionBundle:
    """Ordered base64 payloads: swaps first, then fee transfers."""

    transactions: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.transactions)

    @property
    def first(self) -> str:
        return self.transactions[0]


@dataclass
class PurchaseResult:
    bundle: TransactionBundle
    unsupported_assets: List[str] = field(default_factory=list)
    fee_transfer_count: int = 0

    @property
    def message(self) -> str:
        swaps = len(self.bundle) - self.fee_transfer_count
        if self.unsupported_assets:
            return (
                f"Crate transactions ready for signing ({swaps} swaps). "
                f"Skipped unsupported assets: {', '.join(self.unsupported_assets)}"
            )
        return f"Crate transactions ready for signing ({swaps} swaps)"

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "transaction": self.bundle.first,
            "transactions": list(self.bundle.transactions),
            "message": self.message,
        }
        if self.unsupported_assets:
            body["unsupportedAssets"] = list(self.unsupported_assets)
        return body
