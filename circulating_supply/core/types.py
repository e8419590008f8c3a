"""Type definitions and enums for the circulating supply service."""

import re
from enum import Enum

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class EscrowRole(str, Enum):
    """Strategic holder accounts whose balances never circulate."""

    DISTRIBUTION = "distribution"
    PRIVATE_OFFERING = "private_offering"
    ADVISORS_REWARD = "advisors_reward"

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            self.DISTRIBUTION: "Distribution",
            self.PRIVATE_OFFERING: "Private Offering",
            self.ADVISORS_REWARD: "Advisors Reward",
        }
        return names.get(self, self.value)


class CalculatorState(str, Enum):
    """Refresh loop states."""

    IDLE = "idle"               # Waiting for the next tick
    REFRESHING = "refreshing"   # Cycle in progress


class LedgerMethod(str, Enum):
    """Read-only token contract methods queried over RPC."""

    TOTAL_SUPPLY = "totalSupply"
    BALANCE_OF = "balanceOf"


# Type aliases for common patterns
Address = str        # 0x-prefixed, 40 hex digits
BaseAmount = int     # Token base units, arbitrary precision
DisplayAmount = str  # Decimal string in display units


def normalize_address(value: str) -> Address:
    """
    Validate an account address and return its lowercase form.

    Checksum casing is accepted but not verified; lowercase is the identity
    used for deduplication and RPC encoding.

    Raises:
        ValueError: If the value is not ``0x`` followed by 40 hex digits
    """
    candidate = value.strip()
    if not _ADDRESS_RE.match(candidate):
        raise ValueError(f"Invalid address: {value!r}")
    return candidate.lower()
