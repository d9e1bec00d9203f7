"""
Crate Service Test Configuration
================================
Shared fixtures and pytest markers.

No test touches the network: the basket service, Jupiter and the Solana
RPC are replaced with in-process fakes.
"""

from decimal import Decimal

import pytest
from solders.pubkey import Pubkey

from config.settings import Settings
from cratebuy.shared.models.crate import AssetAllocation, Basket
from cratebuy.shared.system.logging import Logger
from tests.mocks.collaborators import (
    BONK_MINT,
    JUP_MINT,
    WIF_MINT,
    FakeBlockhashSource,
    FakeJupiter,
)


# ============================================================================
# PYTEST MARKERS
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks HTTP-level tests against the FastAPI app"
    )


# ============================================================================
# SHARED FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def quiet_settings(monkeypatch):
    """Deterministic fee wallets and no console noise."""
    Logger.set_silent(True)
    monkeypatch.setattr(Settings, "PLATFORM_FEE_WALLET", str(Pubkey.new_unique()))
    monkeypatch.setattr(Settings, "PLATFORM_FEE_LAMPORTS", 1_000_000)
    monkeypatch.setattr(Settings, "CREATOR_FEE_LAMPORTS", 500_000)
    monkeypatch.setattr(Settings, "PHASE_TIMEOUT_S", None)
    yield


@pytest.fixture
def payer():
    return str(Pubkey.new_unique())


@pytest.fixture
def creator_wallet():
    return str(Pubkey.new_unique())


@pytest.fixture
def three_token_basket(creator_wallet):
    return Basket(
        id="crate-1",
        name="Solana Majors",
        allocations=(
            AssetAllocation("JUP", JUP_MINT, Decimal(50)),
            AssetAllocation("BONK", BONK_MINT, Decimal(30)),
            AssetAllocation("WIF", WIF_MINT, Decimal(20)),
        ),
        creator_wallet=creator_wallet,
    )


@pytest.fixture
def jupiter():
    # JUP slowest, WIF fastest
    return FakeJupiter(delays={JUP_MINT: 0.03, BONK_MINT: 0.01, WIF_MINT: 0})


@pytest.fixture
def blockhashes():
    return FakeBlockhashSource()
