"""
Purchase Pipeline
=================
Splitter -> Quote Fan-out -> Swap Builder -> Fee Appender -> Assembler,
composed by the CratePurchaseOrchestrator.
"""

from cratebuy.execution.allocation import split_allocations, to_atomic
from cratebuy.execution.quote_fanout import quote_all
from cratebuy.execution.swap_builder import build_swaps, decode_transaction
from cratebuy.execution.fee_transfers import append_fee_transfers, build_transfer, fee_wallets_for
from cratebuy.execution.bundle import assemble_bundle, encode_transaction
from cratebuy.execution.orchestrator import CratePurchaseOrchestrator, PurchaseStage
