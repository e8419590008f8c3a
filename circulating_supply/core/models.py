"""Pydantic data models for the circulating supply service.

All models are immutable (frozen) after creation, so a published snapshot
can be shared between the refresh loop and request handlers without copying.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from .types import Address, BaseAmount, DisplayAmount, EscrowRole, LedgerMethod


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EscrowAccount(BaseModel):
    """A strategic holder address excluded from circulating supply."""

    role: EscrowRole
    address: Address

    model_config = {"frozen": True}


class Snapshot(BaseModel):
    """The latest published supply figures, in display units."""

    total_supply: DisplayAmount = "0"
    circulating_supply: DisplayAmount = "0"
    updated_at: datetime | None = None  # None until the first successful cycle

    model_config = {"frozen": True}

    @property
    def is_initial(self) -> bool:
        """Check if this is the zeroed default published at startup."""
        return self.updated_at is None


class CycleResult(BaseModel):
    """Raw base-unit figures computed by one successful refresh cycle."""

    total: BaseAmount = Field(ge=0)
    escrow_balances: dict[EscrowRole, BaseAmount] = Field(default_factory=dict)
    burned: BaseAmount = Field(default=0, ge=0)
    circulating: BaseAmount = Field(ge=0)
    snapshot: Snapshot
    completed_at: datetime = Field(default_factory=_utcnow)

    model_config = {"frozen": True}

    @field_validator("escrow_balances")
    @classmethod
    def balances_non_negative(cls, v: dict[EscrowRole, BaseAmount]) -> dict[EscrowRole, BaseAmount]:
        for role, amount in v.items():
            if amount < 0:
                raise ValueError(f"Negative balance for {role.value}: {amount}")
        return v

    @property
    def excluded(self) -> BaseAmount:
        """Sum of every balance subtracted from the total."""
        return self.total - self.circulating


class AuditEntry(BaseModel):
    """Audit trail entry for a single ledger read."""

    timestamp: datetime = Field(default_factory=_utcnow)
    method: LedgerMethod
    address: Address | None = None
    endpoint: str | None = None
    success: bool = True
    error_message: str | None = None
    duration_ms: int | None = None

    model_config = {"frozen": True}
