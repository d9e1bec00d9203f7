"""
Bundle Assembler Unit Tests
===========================
"""

import base64

from solders.pubkey import Pubkey

from cratebuy.execution.bundle import assemble_bundle, encode_transaction
from cratebuy.execution.swap_builder import decode_transaction
from tests.mocks.collaborators import make_swap_payload


def test_encoding_is_canonical_and_deterministic(payer):
    payload = make_swap_payload(Pubkey.from_string(payer), 99)
    tx = decode_transaction(payload)

    assert encode_transaction(tx) == payload
    assert encode_transaction(tx) == encode_transaction(tx)


def test_assemble_keeps_order(payer):
    payloads = [make_swap_payload(Pubkey.from_string(payer), n) for n in (3, 1, 2)]
    txs = [decode_transaction(p) for p in payloads]

    bundle = assemble_bundle(txs)

    assert bundle.transactions == tuple(payloads)
    assert bundle.first == payloads[0]
    assert len(bundle) == 3


def test_payloads_are_text_safe(payer):
    bundle = assemble_bundle([decode_transaction(make_swap_payload(Pubkey.from_string(payer), 1))])

    raw = base64.b64decode(bundle.first, validate=True)
    assert bytes(decode_transaction(bundle.first)) == raw
