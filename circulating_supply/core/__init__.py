"""Core module - data models, types, configuration and exceptions."""

from .models import (
    AuditEntry,
    CycleResult,
    EscrowAccount,
    Snapshot,
)
from .types import (
    CalculatorState,
    EscrowRole,
    LedgerMethod,
)
from .exceptions import (
    SupplyServiceError,
    LedgerQueryError,
    NegativeSupplyError,
    ConfigurationError,
)
from .units import TOKEN_DECIMALS, to_display

__all__ = [
    # Models
    "AuditEntry",
    "CycleResult",
    "EscrowAccount",
    "Snapshot",
    # Types
    "CalculatorState",
    "EscrowRole",
    "LedgerMethod",
    # Exceptions
    "SupplyServiceError",
    "LedgerQueryError",
    "NegativeSupplyError",
    "ConfigurationError",
    # Units
    "TOKEN_DECIMALS",
    "to_display",
]
