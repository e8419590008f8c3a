"""Circulating Supply Service.

Periodically reads an ERC-20 token's total supply and the balances of its
non-circulating holders over JSON-RPC, computes circulating supply with
exact integer arithmetic, and serves both figures as plain text over HTTP.
"""

__version__ = "0.1.0"
