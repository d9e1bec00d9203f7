"""Crate Action Service: weighted token baskets bought through one Solana Action."""

__version__ = "1.0.0"
