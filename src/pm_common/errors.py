"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Authorization / boundary identity
  2xxx: Balances (claim ledgers, custody vault)
  3xxx: Market lifecycle
  4xxx: Trading venue
  5xxx: Oracle boundary
  9xxx: System / integrity
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Authorization ---

class UnauthorizedError(AppError):
    def __init__(self, caller: str) -> None:
        super().__init__(1001, f"Caller is not authorized: {caller}", 403)


class OnlyOracleError(AppError):
    def __init__(self, caller: str) -> None:
        super().__init__(1002, f"Only the configured oracle may call back, got {caller}", 403)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Service token is missing, invalid or expired", 401)


class OperatorRequiredError(AppError):
    def __init__(self, subject: str) -> None:
        super().__init__(1004, f"Operator token required, got {subject}", 403)


# --- 2xxx: Balances ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient claim balance: required {required}, available {available}",
            422,
        )


class InsufficientFundsError(AppError):
    def __init__(self, currency: str, required: int, available: int) -> None:
        super().__init__(
            2002,
            f"Insufficient {currency}: required {required}, available {available}",
            422,
        )


class InsufficientAllowanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2003,
            f"Insufficient allowance: required {required}, available {available}",
            422,
        )


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


class MarketResolvedError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3002, f"Market already resolved: {market_id}", 409)


class ActiveAssertionExistsError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3003, f"Market already has an active assertion: {market_id}", 409)


class MarketNotResolvedError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3004, f"Market is not resolved: {market_id}", 409)


class NothingToSettleError(AppError):
    def __init__(self, market_id: str, holder: str) -> None:
        super().__init__(3005, f"No settleable claims for {holder} in {market_id}", 404)


class InvalidOutcomeError(AppError):
    def __init__(self, label: str) -> None:
        super().__init__(3006, f"Invalid outcome: {label!r}", 422)


class ZeroAmountError(AppError):
    def __init__(self) -> None:
        super().__init__(3007, "Amount must be greater than zero", 422)


# --- 4xxx: Trading venue ---

class InsufficientOutputError(AppError):
    def __init__(self, output: int, min_output: int) -> None:
        super().__init__(
            4001,
            f"Insufficient output: got {output}, minimum {min_output}",
            422,
        )


# --- 5xxx: Oracle ---

class UnknownAssertionError(AppError):
    def __init__(self, assertion_id: str) -> None:
        super().__init__(5001, f"Unknown or finalized assertion: {assertion_id}", 404)


class OracleUnavailableError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5002, f"Oracle unavailable: {detail}", 502)


class AssertionStateError(AppError):
    """Raised by the in-process oracle for dispute/settle calls made out of order."""

    def __init__(self, assertion_id: str, reason: str) -> None:
        super().__init__(5003, f"Assertion {assertion_id}: {reason}", 409)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class InvariantViolationError(AppError):
    """Bookkeeping invariant broken. Never expected; always fatal for the call."""

    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Invariant violated: {detail}", 500)
