"""ERC-20 ledger client over Ethereum JSON-RPC.

Issues read-only ``eth_call`` requests against the token contract for the
two functions this service needs: ``totalSupply()`` and
``balanceOf(address)``. Results are ABI-encoded uint256 values and are
decoded into plain Python ints, so amounts beyond 64 bits stay exact.
"""

import asyncio
import itertools
import logging
import time
from typing import Any

import httpx

from ..core.exceptions import LedgerQueryError
from ..core.types import Address, LedgerMethod, normalize_address
from .base import BaseProvider

logger = logging.getLogger(__name__)

# Token contract queried by the service
TOKEN_ADDRESS = "0x0Ae055097C6d159879521C384F1D2123D1f195e6"

# Two-function interface description (Solidity ABI)
TOKEN_ABI: list[dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"name": "", "type": "uint256"}],
        "payable": False,
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "payable": False,
        "stateMutability": "view",
        "type": "function",
    },
]

# keccak256 selectors of the ABI functions above
SELECTORS = {
    LedgerMethod.TOTAL_SUPPLY: "0x18160ddd",
    LedgerMethod.BALANCE_OF: "0x70a08231",
}

_UINT256_HEX_DIGITS = 64


def encode_balance_of(address: Address) -> str:
    """Build ``balanceOf(address)`` calldata with the address left-padded to 32 bytes."""
    normalized = normalize_address(address)
    return SELECTORS[LedgerMethod.BALANCE_OF] + normalized[2:].rjust(_UINT256_HEX_DIGITS, "0")


def decode_uint256(result: Any) -> int:
    """
    Decode an ABI-encoded uint256 return value.

    Raises:
        ValueError: If the result is empty, not hex, or wider than 32 bytes
    """
    if not isinstance(result, str) or not result.startswith("0x"):
        raise ValueError(f"expected 0x-prefixed hex, got {result!r}")
    digits = result[2:]
    if not digits:
        # Empty return data means the target is not a contract
        raise ValueError("empty return data")
    if len(digits) > _UINT256_HEX_DIGITS:
        raise ValueError(f"return data wider than uint256 ({len(digits)} hex digits)")
    return int(digits, 16)


class LedgerClient(BaseProvider):
    """Reads total supply and balances of one token contract."""

    def __init__(
        self,
        rpc_url: str,
        token_address: Address = TOKEN_ADDRESS,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
        audit_history: int = 256,
    ):
        """
        Initialize the ledger client.

        Args:
            rpc_url: JSON-RPC endpoint of the node
            token_address: Token contract address
            timeout_seconds: Bound on every RPC request
            client: Optional preconfigured httpx client (tests inject a
                    MockTransport here); owned by the caller when given
            audit_history: Maximum number of audit entries kept
        """
        super().__init__(audit_history=audit_history)
        self.rpc_url = rpc_url
        self.token_address = normalize_address(token_address)
        self.timeout_seconds = timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "LedgerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def total_supply(self) -> int:
        """Fetch the token's total supply in base units."""
        return await self._eth_call(
            LedgerMethod.TOTAL_SUPPLY,
            SELECTORS[LedgerMethod.TOTAL_SUPPLY],
        )

    async def balance_of(self, address: Address) -> int:
        """Fetch the balance of ``address`` in base units."""
        try:
            data = encode_balance_of(address)
        except ValueError as e:
            raise LedgerQueryError(
                method=LedgerMethod.BALANCE_OF.value,
                message=str(e),
                address=address,
                endpoint=self.rpc_url,
            )
        return await self._eth_call(LedgerMethod.BALANCE_OF, data, address=address)

    async def _eth_call(
        self,
        method: LedgerMethod,
        data: str,
        address: Address | None = None,
    ) -> int:
        """Execute one ``eth_call`` against the latest block and decode the uint256 result."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "eth_call",
            "params": [{"to": self.token_address, "data": data}, "latest"],
        }
        start_time = time.time()

        try:
            # httpx bounds each phase separately, wait_for bounds the whole call
            response = await asyncio.wait_for(
                self._client.post(
                    self.rpc_url,
                    json=payload,
                    timeout=self.timeout_seconds,
                    headers={"Content-Type": "application/json"},
                ),
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.TimeoutException, asyncio.TimeoutError):
            raise self._failure(
                method, address, start_time, f"timed out after {self.timeout_seconds}s"
            )
        except httpx.HTTPStatusError as e:
            raise self._failure(method, address, start_time, f"HTTP {e.response.status_code}")
        except httpx.RequestError as e:
            raise self._failure(method, address, start_time, str(e) or type(e).__name__)
        except ValueError as e:
            raise self._failure(method, address, start_time, f"invalid JSON response: {e}")

        if not isinstance(body, dict):
            raise self._failure(method, address, start_time, "malformed JSON-RPC response")

        if body.get("error"):
            error = body["error"]
            detail = error.get("message") if isinstance(error, dict) else error
            raise self._failure(method, address, start_time, f"RPC error: {detail}")

        try:
            value = decode_uint256(body.get("result"))
        except ValueError as e:
            raise self._failure(method, address, start_time, f"malformed result: {e}")

        self._record_audit(
            method=method,
            address=address,
            endpoint=self.rpc_url,
            success=True,
            duration_ms=int((time.time() - start_time) * 1000),
        )
        logger.debug(f"{method.value}({address or ''}) = {value}")
        return value

    def _failure(
        self,
        method: LedgerMethod,
        address: Address | None,
        start_time: float,
        message: str,
    ) -> LedgerQueryError:
        """Audit a failed call and build the error to raise."""
        self._record_audit(
            method=method,
            address=address,
            endpoint=self.rpc_url,
            success=False,
            error_message=message,
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return LedgerQueryError(
            method=method.value,
            message=message,
            address=address,
            endpoint=self.rpc_url,
        )
