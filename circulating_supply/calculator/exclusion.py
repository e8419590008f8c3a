"""Addresses whose balances are excluded from circulating supply.

The set combines three compiled-in escrow accounts with an operator-supplied
list of burn addresses. The zero address is always part of the burn list,
and every address is queried once per cycle: duplicates in the configured
list, including an explicit zero address, are dropped case-insensitively.
"""

import logging
from typing import Iterable, Sequence

from ..core.config import ZERO_ADDRESS
from ..core.exceptions import ConfigurationError
from ..core.models import EscrowAccount
from ..core.types import Address, EscrowRole, normalize_address

logger = logging.getLogger(__name__)

ESCROW_ACCOUNTS: tuple[EscrowAccount, ...] = (
    EscrowAccount(
        role=EscrowRole.DISTRIBUTION,
        address="0x9BC4a93883C522D3C79c81c2999Aab52E2268d03",
    ),
    EscrowAccount(
        role=EscrowRole.PRIVATE_OFFERING,
        address="0x3cFE51b61E25750ab1426b0072e5D0cc5C30aAfA",
    ),
    EscrowAccount(
        role=EscrowRole.ADVISORS_REWARD,
        address="0x0218B706898d234b85d2494DF21eB0677EaEa918",
    ),
)


def parse_address_list(raw: str) -> list[str]:
    """Split a comma-separated address list, trimming blanks and empty entries."""
    return [part.strip() for part in raw.split(",") if part.strip()]


class ExclusionSet:
    """Immutable, ordered set of escrow and burn addresses."""

    def __init__(
        self,
        escrow_accounts: Iterable[EscrowAccount],
        burn_addresses: Iterable[Address],
    ):
        """
        Build the exclusion set.

        Args:
            escrow_accounts: Strategic holder accounts, queried by role
            burn_addresses: Unspendable addresses, summed together

        Raises:
            ConfigurationError: If any address is malformed
        """
        escrow: list[EscrowAccount] = []
        seen: set[str] = set()
        for account in escrow_accounts:
            normalized = self._validate("ESCROW_ACCOUNTS", account.address)
            escrow.append(account)
            seen.add(normalized)

        burn: list[Address] = []
        for address in burn_addresses:
            normalized = self._validate("BURN_ADDRESSES", address)
            if normalized in seen:
                logger.warning(f"Ignoring duplicate excluded address {address}")
                continue
            seen.add(normalized)
            burn.append(address.strip())

        if ZERO_ADDRESS not in seen:
            burn.append(ZERO_ADDRESS)

        self._escrow = tuple(escrow)
        self._burn = tuple(burn)

    @classmethod
    def from_config(
        cls,
        burn_addresses: str | Sequence[str],
        escrow_accounts: Iterable[EscrowAccount] = ESCROW_ACCOUNTS,
    ) -> "ExclusionSet":
        """
        Build the exclusion set from operator configuration.

        Args:
            burn_addresses: Comma-separated string or sequence of addresses
            escrow_accounts: Escrow accounts (defaults to the compiled-in set)
        """
        if isinstance(burn_addresses, str):
            burn_addresses = parse_address_list(burn_addresses)
        return cls(escrow_accounts, burn_addresses)

    @staticmethod
    def _validate(config_key: str, address: str) -> str:
        try:
            return normalize_address(address)
        except ValueError as e:
            raise ConfigurationError(config_key, str(e))

    @property
    def escrow_accounts(self) -> tuple[EscrowAccount, ...]:
        return self._escrow

    @property
    def burn_addresses(self) -> tuple[Address, ...]:
        return self._burn

    def all_addresses(self) -> tuple[Address, ...]:
        """Every excluded address: escrow accounts first, then burn addresses."""
        return tuple(a.address for a in self._escrow) + self._burn

    def __contains__(self, address: object) -> bool:
        if not isinstance(address, str):
            return False
        try:
            normalized = normalize_address(address)
        except ValueError:
            return False
        return any(normalize_address(a) == normalized for a in self.all_addresses())

    def __len__(self) -> int:
        return len(self._escrow) + len(self._burn)

    def __repr__(self) -> str:
        return f"ExclusionSet(escrow={len(self._escrow)}, burn={list(self._burn)})"
