"""Fund Escrow — escrow lifecycle ledger with pluggable settlement."""

__version__ = "0.1.0"
