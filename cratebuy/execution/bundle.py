"""
Bundle Assembler
================
Serializes the final transaction list for transport: bytes(tx) -> base64.
Order is kept exactly as given; nothing is re-signed or modified.
"""

import base64
from typing import Iterable

from solders.transaction import VersionedTransaction

from cratebuy.shared.models.crate import TransactionBundle


def encode_transaction(tx: VersionedTransaction) -> str:
    return base64.b64encode(bytes(tx)).decode("utf-8")


def assemble_bundle(transactions: Iterable[VersionedTransaction]) -> TransactionBundle:
    return TransactionBundle(tuple(encode_transaction(tx) for tx in transactions))
