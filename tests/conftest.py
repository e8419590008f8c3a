"""Pytest configuration and fixtures for circulating supply service tests."""

import json
from typing import Any, Callable

import httpx
import pytest

from circulating_supply.calculator.exclusion import ESCROW_ACCOUNTS, ExclusionSet
from circulating_supply.core.config import ZERO_ADDRESS
from circulating_supply.core.exceptions import LedgerQueryError
from circulating_supply.providers.base import BaseProvider
from circulating_supply.storage.snapshot_store import SnapshotStore

DISTRIBUTION = ESCROW_ACCOUNTS[0].address
PRIVATE_OFFERING = ESCROW_ACCOUNTS[1].address
ADVISORS_REWARD = ESCROW_ACCOUNTS[2].address


class FakeLedger(BaseProvider):
    """In-memory ledger with switchable failures."""

    def __init__(self, total: int, balances: dict[str, int] | None = None):
        super().__init__()
        self.total = total
        self.balances = {k.lower(): v for k, v in (balances or {}).items()}
        self.fail_on: str | None = None  # "totalSupply" or a lowercase address
        self.calls: list[tuple[str, str | None]] = []
        self.closed = False

    async def total_supply(self) -> int:
        self.calls.append(("totalSupply", None))
        if self.fail_on == "totalSupply":
            raise LedgerQueryError("totalSupply", "connection refused")
        return self.total

    async def balance_of(self, address: str) -> int:
        self.calls.append(("balanceOf", address.lower()))
        if self.fail_on == address.lower():
            raise LedgerQueryError("balanceOf", "timed out", address=address)
        return self.balances.get(address.lower(), 0)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def make_ledger() -> Callable[..., FakeLedger]:
    """Factory for fake ledgers."""
    return FakeLedger


@pytest.fixture
def scenario_ledger() -> FakeLedger:
    """Ledger with T=1000, escrow 200/100/50 and nothing burned."""
    return FakeLedger(
        total=1000,
        balances={
            DISTRIBUTION: 200,
            PRIVATE_OFFERING: 100,
            ADVISORS_REWARD: 50,
        },
    )


@pytest.fixture
def default_exclusions() -> ExclusionSet:
    """Exclusion set with only the zero address as burn address."""
    return ExclusionSet.from_config(ZERO_ADDRESS)


@pytest.fixture
def store() -> SnapshotStore:
    """Fresh snapshot store."""
    return SnapshotStore()


def rpc_result(value: int) -> dict[str, Any]:
    """JSON-RPC success body carrying an ABI-encoded uint256."""
    return {"jsonrpc": "2.0", "id": 1, "result": "0x" + format(value, "064x")}


@pytest.fixture
def rpc_node() -> Callable[..., httpx.MockTransport]:
    """
    Build a MockTransport that answers eth_call like a token contract.

    ``balances`` maps lowercase addresses to base-unit balances.
    ``requests`` (if given) collects every decoded JSON-RPC payload.
    """

    def build(
        total: int,
        balances: dict[str, int] | None = None,
        requests: list[dict[str, Any]] | None = None,
    ) -> httpx.MockTransport:
        known = {k.lower(): v for k, v in (balances or {}).items()}

        def handler(request: httpx.Request) -> httpx.Response:
            payload = json.loads(request.content)
            if requests is not None:
                requests.append(payload)
            data = payload["params"][0]["data"]
            if data == "0x18160ddd":
                return httpx.Response(200, json=rpc_result(total))
            if data.startswith("0x70a08231"):
                address = "0x" + data[-40:]
                return httpx.Response(200, json=rpc_result(known.get(address, 0)))
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "execution reverted"}},
            )

        return httpx.MockTransport(handler)

    return build
