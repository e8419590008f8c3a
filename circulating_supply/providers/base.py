"""Base classes for ledger providers."""

import logging
from abc import ABC, abstractmethod
from collections import deque

from ..core.models import AuditEntry
from ..core.types import Address, LedgerMethod

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for read-only ledger providers."""

    def __init__(self, audit_history: int = 256):
        """
        Initialize provider with a bounded audit trail.

        Args:
            audit_history: Maximum number of audit entries kept in memory
        """
        self._audit_entries: deque[AuditEntry] = deque(maxlen=audit_history)

    def _record_audit(
        self,
        method: LedgerMethod,
        address: Address | None = None,
        endpoint: str | None = None,
        success: bool = True,
        error_message: str | None = None,
        duration_ms: int | None = None,
    ) -> AuditEntry:
        """Record an audit entry for this provider call."""
        entry = AuditEntry(
            method=method,
            address=address,
            endpoint=endpoint,
            success=success,
            error_message=error_message,
            duration_ms=duration_ms,
        )
        self._audit_entries.append(entry)
        if not success:
            logger.debug(f"[{method.value}] audit: {error_message}")
        return entry

    def get_audit_trail(self) -> list[AuditEntry]:
        """Return all audit entries recorded by this provider, oldest first."""
        return list(self._audit_entries)

    def clear_audit_trail(self) -> None:
        """Clear the audit trail."""
        self._audit_entries.clear()

    async def aclose(self) -> None:
        """Release resources held by the provider."""

    @abstractmethod
    async def total_supply(self) -> int:
        """Fetch the token's total supply in base units."""

    @abstractmethod
    async def balance_of(self, address: Address) -> int:
        """Fetch the balance of ``address`` in base units."""
