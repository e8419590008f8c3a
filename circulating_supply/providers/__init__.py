"""Ledger providers for the circulating supply service.

This module contains:
- BaseProvider: audit trail and the read-only provider contract
- LedgerClient: ERC-20 reads over Ethereum JSON-RPC
"""

from .base import BaseProvider
from .ledger import TOKEN_ABI, TOKEN_ADDRESS, LedgerClient

__all__ = ["BaseProvider", "LedgerClient", "TOKEN_ABI", "TOKEN_ADDRESS"]
