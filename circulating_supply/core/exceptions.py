"""Custom exceptions for the circulating supply service."""


class SupplyServiceError(Exception):
    """Base exception for all circulating supply service errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LedgerQueryError(SupplyServiceError):
    """Raised when a single read against the ledger fails.

    Covers transport errors, timeouts, non-2xx responses, JSON-RPC errors
    and results that cannot be decoded as a uint256.
    """

    def __init__(
        self,
        method: str,
        message: str,
        address: str | None = None,
        endpoint: str | None = None,
    ):
        target = f"{method}({address})" if address else f"{method}()"
        full_message = f"[ledger] {target} failed: {message}"
        super().__init__(
            full_message,
            {
                "method": method,
                "address": address,
                "endpoint": endpoint,
            },
        )
        self.method = method
        self.address = address
        self.endpoint = endpoint


class NegativeSupplyError(SupplyServiceError):
    """Raised when excluded balances exceed the total supply."""

    def __init__(self, total: int, excluded: int):
        message = (
            f"Excluded balances ({excluded}) exceed total supply ({total}); "
            "check the exclusion list or the token address"
        )
        super().__init__(message, {"total": total, "excluded": excluded})
        self.total = total
        self.excluded = excluded


class ConfigurationError(SupplyServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key
