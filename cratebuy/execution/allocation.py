"""
Allocation Splitter
===================
Funding amount + crate weights -> per-asset atomic input amounts.

    atomic = floor(total * weight / 100 * 10**decimals)

Each weight is applied independently to the full total; weights are not
normalized and floor remainders are not redistributed.

Arithmetic runs on the exact integer ratios of the Decimal inputs, so the
result is floored once and never exceeds the funded amount, whatever the
number of significant digits.
"""

from decimal import Decimal
from typing import Iterable, List

from cratebuy.shared.models.crate import AssetAllocation, Currency, CurrencyInfo, PerAssetAmount


def to_atomic(amount: Decimal, decimals: int) -> int:
    """Floor a human amount to the currency's smallest unit."""
    numerator, denominator = amount.as_integer_ratio()
    return numerator * 10 ** decimals // denominator


def split_allocations(
    total_amount: Decimal,
    currency: Currency,
    allocations: Iterable[AssetAllocation],
) -> List[PerAssetAmount]:
    info: CurrencyInfo = currency.info()
    total_num, total_den = total_amount.as_integer_ratio()
    amounts = []
    for allocation in allocations:
        atomic = 0
        if total_amount > 0 and allocation.weight_percent > 0:
            weight_num, weight_den = allocation.weight_percent.as_integer_ratio()
            atomic = (total_num * weight_num * 10 ** info.decimals) // (total_den * weight_den * 100)
        # Unknown mints stay in the list so the fan-out can report them.
        amounts.append(PerAssetAmount(
            symbol=allocation.symbol,
            output_mint=allocation.output_mint,
            amount_atomic=atomic,
        ))
    return amounts
