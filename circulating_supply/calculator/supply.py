"""Supply calculator: the refresh loop behind the published snapshot.

Each cycle uses explicit formulas over exact integers:
- Excluded = Σ escrow balances + Σ burn balances
- Circulating = Total supply − Excluded

The escrow and burn reads are independent, so they are fanned out
concurrently. Integer addition is order-independent and the sum is the
same as with sequential reads.
"""

import asyncio
import logging
from datetime import datetime, timezone

from ..core.exceptions import LedgerQueryError, NegativeSupplyError
from ..core.models import CycleResult, Snapshot
from ..core.types import CalculatorState
from ..core.units import TOKEN_DECIMALS, to_display
from ..providers.base import BaseProvider
from ..storage.snapshot_store import SnapshotStore
from .exclusion import ExclusionSet

logger = logging.getLogger(__name__)

# Supply lines go to their own logger so the CLI can print them without decoration
SUPPLY_LINE_LOGGER = "circulating_supply.supply_line"
supply_line_logger = logging.getLogger(SUPPLY_LINE_LOGGER)


def format_supply_line(snapshot: Snapshot, when: datetime) -> str:
    """Render ``YYYY-MM-DD HH:MM:SS UTC <circulating>, <total>``."""
    utc = when.astimezone(timezone.utc)
    return f"{utc:%Y-%m-%d %H:%M:%S} UTC {snapshot.circulating_supply}, {snapshot.total_supply}"


class SupplyCalculator:
    """Computes circulating supply and publishes it to a snapshot store."""

    def __init__(
        self,
        ledger: BaseProvider,
        exclusions: ExclusionSet,
        store: SnapshotStore,
        refresh_interval: float = 10.0,
        decimals: int = TOKEN_DECIMALS,
    ):
        """
        Initialize the calculator.

        Args:
            ledger: Read-only provider for totalSupply/balanceOf
            exclusions: Addresses whose balances are not circulating
            store: Store receiving each successful snapshot
            refresh_interval: Seconds to wait after a cycle before the next one
            decimals: Base-unit exponent of the token
        """
        self.ledger = ledger
        self.exclusions = exclusions
        self.store = store
        self.refresh_interval = refresh_interval
        self.decimals = decimals
        self._state = CalculatorState.IDLE
        self._cycle_lock = asyncio.Lock()

    @property
    def state(self) -> CalculatorState:
        return self._state

    async def run_cycle(self) -> CycleResult:
        """
        Run one refresh cycle and publish the resulting snapshot.

        Returns:
            CycleResult with the raw figures of this cycle

        Raises:
            LedgerQueryError: If any read fails; nothing is published
            NegativeSupplyError: If excluded balances exceed the total;
                nothing is published
        """
        async with self._cycle_lock:
            self._state = CalculatorState.REFRESHING
            try:
                return await self._compute_and_publish()
            finally:
                self._state = CalculatorState.IDLE

    async def _compute_and_publish(self) -> CycleResult:
        total = await self.ledger.total_supply()

        escrow = self.exclusions.escrow_accounts
        burn = self.exclusions.burn_addresses
        balances = await self._read_balances(
            [account.address for account in escrow] + list(burn)
        )

        escrowed = 0
        for balance in balances[: len(escrow)]:
            escrowed += balance
        burned = 0
        for balance in balances[len(escrow):]:
            burned += balance

        # Reporting only, keyed by role
        escrow_balances = {
            account.role: balance for account, balance in zip(escrow, balances[: len(escrow)])
        }

        excluded = escrowed + burned
        circulating = total - excluded
        if circulating < 0:
            raise NegativeSupplyError(total=total, excluded=excluded)

        completed_at = datetime.now(timezone.utc)
        snapshot = Snapshot(
            total_supply=to_display(total, self.decimals),
            circulating_supply=to_display(circulating, self.decimals),
            updated_at=completed_at,
        )
        self.store.publish(snapshot)
        supply_line_logger.info(format_supply_line(snapshot, completed_at))

        return CycleResult(
            total=total,
            escrow_balances=escrow_balances,
            burned=burned,
            circulating=circulating,
            snapshot=snapshot,
            completed_at=completed_at,
        )

    async def _read_balances(self, addresses: list[str]) -> list[int]:
        """
        Read all balances concurrently.

        If one read fails, the others are cancelled and awaited before the
        error propagates, so no request of this cycle outlives it.
        """
        tasks = [asyncio.ensure_future(self.ledger.balance_of(address)) for address in addresses]
        try:
            return await asyncio.gather(*tasks)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    async def refresh_once(self) -> CycleResult | None:
        """
        Run one cycle, keeping the previous snapshot on failure.

        Returns:
            CycleResult on success, None if the cycle was aborted
        """
        try:
            return await self.run_cycle()
        except NegativeSupplyError as e:
            logger.critical(f"Refresh aborted, keeping previous snapshot: {e}")
        except LedgerQueryError as e:
            logger.error(f"Refresh aborted, keeping previous snapshot: {e}")
        except Exception:
            logger.exception("Unexpected error during refresh, keeping previous snapshot")
        return None

    async def run_forever(self) -> None:
        """Refresh, then sleep ``refresh_interval`` seconds, until cancelled."""
        logger.info(
            f"Refresh loop started: {len(self.exclusions)} excluded addresses, "
            f"every {self.refresh_interval:g}s"
        )
        while True:
            await self.refresh_once()
            await asyncio.sleep(self.refresh_interval)
