"""
Allocation Splitter Unit Tests
==============================
Weight -> atomic amount conversion with currency decimals.
"""

from decimal import Decimal

import pytest

from cratebuy.execution.allocation import split_allocations, to_atomic
from cratebuy.shared.execution.errors import ValidationError
from cratebuy.shared.models.crate import AssetAllocation, Currency


class TestAtomicConversion:

    def test_quarter_of_ten_and_a_half_sol(self):
        """10.5 SOL at 25% -> floor(10.5 * 0.25 * 1e9)."""
        [amount] = split_allocations(
            Decimal("10.5"), Currency.SOL, [AssetAllocation("JUP", "JupMint", Decimal(25))]
        )
        assert amount.amount_atomic == 2_625_000_000

    def test_usdc_uses_six_decimals(self):
        [amount] = split_allocations(
            Decimal("100"), Currency.USDC, [AssetAllocation("JUP", "JupMint", Decimal(30))]
        )
        assert amount.amount_atomic == 30_000_000

    def test_floor_truncates_sub_atomic_remainder(self):
        assert to_atomic(Decimal("0.0000000019"), 9) == 1
        assert to_atomic(Decimal("1.2345679"), 6) == 1_234_567

    def test_sum_may_fall_short_of_total(self):
        """1 SOL split three ways at 33.333%: the remainder is not redistributed."""
        thirds = [AssetAllocation(s, f"{s}Mint", Decimal("33.333")) for s in ("A", "B", "C")]
        amounts = split_allocations(Decimal("1"), Currency.SOL, thirds)

        assert [a.amount_atomic for a in amounts] == [333_330_000] * 3
        assert sum(a.amount_atomic for a in amounts) < 1_000_000_000

    def test_high_precision_total_is_floored_not_rounded(self):
        """30 significant digits exceed the default Decimal context."""
        [amount] = split_allocations(
            Decimal("1.999999999999999999999999999999"),
            Currency.SOL,
            [AssetAllocation("JUP", "JupMint", Decimal(100))],
        )
        assert amount.amount_atomic == 1_999_999_999

    def test_high_precision_weight_is_floored_not_rounded(self):
        [amount] = split_allocations(
            Decimal("3"), Currency.USDC, [AssetAllocation("JUP", "JupMint", Decimal("33.33333333333333333333333333333"))]
        )
        assert amount.amount_atomic == 999_999

    def test_to_atomic_is_exact_beyond_context_precision(self):
        assert to_atomic(Decimal("0.999999999999999999999999999999999"), 9) == 999_999_999

    def test_weights_are_not_normalized(self):
        allocations = [
            AssetAllocation("JUP", "JupMint", Decimal(80)),
            AssetAllocation("BONK", "BonkMint", Decimal(80)),
        ]
        amounts = split_allocations(Decimal("1"), Currency.SOL, allocations)

        assert [a.amount_atomic for a in amounts] == [800_000_000, 800_000_000]


class TestAllocationList:

    def test_empty_mint_is_kept_in_place(self):
        allocations = [
            AssetAllocation("JUP", "JupMint", Decimal(50)),
            AssetAllocation("MYSTERY", "", Decimal(50)),
        ]
        amounts = split_allocations(Decimal("2"), Currency.SOL, allocations)

        assert [a.symbol for a in amounts] == ["JUP", "MYSTERY"]
        assert amounts[1].output_mint == ""
        assert amounts[1].amount_atomic == 1_000_000_000

    def test_zero_weight_yields_zero_amount(self):
        [amount] = split_allocations(
            Decimal("5"), Currency.SOL, [AssetAllocation("JUP", "JupMint", Decimal(0))]
        )
        assert amount.amount_atomic == 0


class TestCurrencyTable:

    def test_currency_info(self):
        sol = Currency.SOL.info()
        usdc = Currency.USDC.info()

        assert (sol.mint, sol.decimals) == ("So11111111111111111111111111111111111111112", 9)
        assert (usdc.mint, usdc.decimals) == ("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", 6)

    def test_parse_is_case_insensitive_and_defaults_to_sol(self):
        assert Currency.parse("usdc") is Currency.USDC
        assert Currency.parse(None) is Currency.SOL

    def test_unknown_currency_rejected(self):
        with pytest.raises(ValidationError):
            Currency.parse("DOGE")
