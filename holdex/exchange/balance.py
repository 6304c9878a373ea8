"""Balance collaborator contract and an in-memory implementation."""

import logging
import threading
from enum import Enum, auto
from typing import Protocol

logger = logging.getLogger(__name__)


class BalanceResult(Enum):
    """Outcome of a balance mutation."""
    OK = auto()
    INSUFFICIENT_FUNDS = auto()


class BalanceServiceError(Exception):
    """A transient balance failure (service unreachable, timeout, ...)."""

    def __init__(self, message: str, amount: float = 0.0):
        super().__init__(message)
        self.amount = amount


class BalanceService(Protocol):
    """
    Debits and credits one user's balance.

    Implementations serialize mutations per user; the engine never
    retries a failed call.
    """

    def debit(self, amount: float) -> BalanceResult:
        ...

    def credit(self, amount: float) -> BalanceResult:
        ...


class InMemoryBalance:
    """Lock-serialized balance for a single user."""

    def __init__(self, balance: float = 0.0):
        self._balance = balance
        self._lock = threading.Lock()

    @property
    def balance(self) -> float:
        with self._lock:
            return self._balance

    def debit(self, amount: float) -> BalanceResult:
        if amount <= 0:
            raise ValueError(f"Debit amount must be positive, got {amount}")
        with self._lock:
            if amount > self._balance:
                logger.debug("Debit of %.2f refused, balance %.2f", amount, self._balance)
                return BalanceResult.INSUFFICIENT_FUNDS
            self._balance -= amount
        return BalanceResult.OK

    def credit(self, amount: float) -> BalanceResult:
        if amount < 0:
            raise ValueError(f"Credit amount must not be negative, got {amount}")
        with self._lock:
            self._balance += amount
        return BalanceResult.OK
