"""Achievement ledger: per-user unlock tracking and gated token minting."""

__version__ = "1.0.0"
